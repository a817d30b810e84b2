"""Translate analysis-space polygons into PDF page space.

The analysis service reports polygons in its own unit system (inches for
PDFs, pixels for images) with a top-left origin and Y growing downward. PDF
page space has a bottom-left origin, Y growing upward, in points. Every
geometry object returned here is in PDF page space.

Two transforms exist and exactly one is chosen per page:

* ``PROPORTIONAL``: independent X/Y scaling to the PDF page size, then a
  Y-flip.
* ``ROTATED_90``: the analysis page is the PDF page turned by 90 degrees (a
  physically landscape page analysed as portrait, or the reverse). X and Y
  swap roles before scaling.

The rotated transform is selected only when the two pages have opposite
orientation. ``PageInfo.angle`` is the small skew the service detected on
the page content; it is already baked into the polygon corners and does not
select a transform.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from enum import Enum

from pydantic import BaseModel, ConfigDict

from docsplit.core.document import PageInfo

logger = logging.getLogger(__name__)

POLYGON_LENGTH = 8


class Transform(str, Enum):
    PROPORTIONAL = "proportional"
    ROTATED_90 = "rotated_90"


class _Geometry(BaseModel):
    model_config = ConfigDict(frozen=True)


class Point(_Geometry):
    x: float
    y: float


class Rect(_Geometry):
    """Axis-aligned box; ``(x, y)`` is the bottom-left corner."""

    x: float
    y: float
    width: float
    height: float

    @property
    def top(self) -> float:
        return self.y + self.height

    @property
    def right(self) -> float:
        return self.x + self.width


class Quad(_Geometry):
    """Oriented quadrilateral, corners in analysis order (TL, TR, BR, BL)."""

    points: tuple[Point, Point, Point, Point]

    def bounding_rect(self) -> Rect:
        xs = [p.x for p in self.points]
        ys = [p.y for p in self.points]
        return Rect(
            x=min(xs),
            y=min(ys),
            width=max(xs) - min(xs),
            height=max(ys) - min(ys),
        )


class ResolvedRegion(_Geometry):
    quad: Quad
    box: Rect
    transform: Transform
    label_rotation: int = 0  # degrees, counter-clockwise, keeps labels upright

    @property
    def rotated(self) -> bool:
        return self.transform is Transform.ROTATED_90

    def label_anchors(self) -> tuple[Point, Point]:
        """Upright (top-left, bottom-left) corners of the quad.

        After a 90 degree turn the analysis bottom-left corner reads as the
        top-left one, and the bottom-right as the bottom-left.
        """
        tl, _tr, br, bl = self.quad.points
        if self.rotated:
            return bl, br
        return tl, bl


def is_rotated(
    analysis_width: float,
    analysis_height: float,
    pdf_width: float,
    pdf_height: float,
) -> bool:
    """True when one page is strictly landscape and the other strictly portrait."""
    if analysis_width == analysis_height or pdf_width == pdf_height:
        return False
    return (analysis_width > analysis_height) != (pdf_width > pdf_height)


def _corners(polygon: Sequence[float]) -> list[tuple[float, float]]:
    return [(polygon[i], polygon[i + 1]) for i in range(0, POLYGON_LENGTH, 2)]


def _proportional(
    corners: list[tuple[float, float]],
    analysis_width: float,
    analysis_height: float,
    pdf_width: float,
    pdf_height: float,
) -> list[Point]:
    scale_x = pdf_width / analysis_width
    scale_y = pdf_height / analysis_height
    return [Point(x=px * scale_x, y=pdf_height - py * scale_y) for px, py in corners]


def _rotated(
    corners: list[tuple[float, float]],
    analysis_width: float,
    analysis_height: float,
    pdf_width: float,
    pdf_height: float,
) -> list[Point]:
    # Analysis Y runs across the PDF width, analysis X down the PDF height.
    scale_x = pdf_width / analysis_height
    scale_y = pdf_height / analysis_width
    return [
        Point(x=pdf_width - ay * scale_x, y=pdf_height - ax * scale_y)
        for ax, ay in corners
    ]


def resolve_region(
    polygon: Sequence[float] | None,
    page_info: PageInfo | None,
    pdf_width: float,
    pdf_height: float,
) -> ResolvedRegion | None:
    """Resolve one bounding polygon against its page.

    Returns None when the region cannot be placed: fewer than 8 polygon
    values, missing page info, or a zero-sized page on either side.
    Coordinates outside the page are returned as-is.
    """
    if polygon is None or len(polygon) < POLYGON_LENGTH:
        logger.debug(f"Skipping polygon with {len(polygon or [])} values")
        return None
    if page_info is None or page_info.width <= 0 or page_info.height <= 0:
        logger.debug("Skipping region without usable page info")
        return None
    if pdf_width <= 0 or pdf_height <= 0:
        logger.debug(f"Skipping region on degenerate PDF page {pdf_width}x{pdf_height}")
        return None

    corners = _corners(polygon)
    if is_rotated(page_info.width, page_info.height, pdf_width, pdf_height):
        transform = Transform.ROTATED_90
        points = _rotated(corners, page_info.width, page_info.height, pdf_width, pdf_height)
        label_rotation = -90
    else:
        transform = Transform.PROPORTIONAL
        points = _proportional(
            corners, page_info.width, page_info.height, pdf_width, pdf_height
        )
        label_rotation = 0

    quad = Quad(points=tuple(points))
    box = quad.bounding_rect()
    logger.debug(
        f"Page {page_info.page_number}: analysis {page_info.width}x{page_info.height}, "
        f"PDF {pdf_width}x{pdf_height}, {transform.value} -> "
        f"x={box.x}, y={box.y}, w={box.width}, h={box.height}"
    )
    return ResolvedRegion(
        quad=quad, box=box, transform=transform, label_rotation=label_rotation
    )


def resolve_box(
    polygon: Sequence[float] | None,
    page_info: PageInfo | None,
    pdf_width: float,
    pdf_height: float,
) -> Rect | None:
    """Axis-aligned form of ``resolve_region``."""
    resolved = resolve_region(polygon, page_info, pdf_width, pdf_height)
    return resolved.box if resolved is not None else None
