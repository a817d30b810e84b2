"""Base class for annotation renderers."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import NamedTuple

import fitz  # pymupdf

from docsplit.core.config import Settings, get_settings
from docsplit.core.document import (
    AnalyzedDocument,
    AnalyzeResult,
    AnnotatedArtifact,
    BoundingRegion,
    DocumentTypeSummary,
)
from docsplit.core.errors import SkipReason
from docsplit.geometry.resolver import Point, Quad, Rect, ResolvedRegion, resolve_region
from docsplit.utils.io import (
    is_pdf,
    join_locator,
    open_pdf,
    save_pdf,
    source_dir,
    source_file_name,
)

logger = logging.getLogger(__name__)

RED = (1.0, 0.0, 0.0)
BLUE = (0.0, 0.0, 1.0)
BLACK = (0.0, 0.0, 0.0)
WHITE = (1.0, 1.0, 1.0)

LABEL_PADDING = 4.0


class AnnotatedPdf(NamedTuple):
    artifact: AnnotatedArtifact
    data: bytes


class BaseAnnotator(ABC):
    """Abstract base for annotators.

    An annotator loads the source PDF, burns shapes and labels for every
    placeable bounding region into its pages, and returns the new bytes with
    a manifest. Regions that cannot be placed are skipped; only a source
    that fails to load aborts the call.
    """

    name: str  # unique identifier for this annotator
    output_dir: str  # sub-directory next to the source for the annotated copy

    def __init__(self, settings: Settings | None = None, **kwargs) -> None:
        self.settings = settings or get_settings()
        self.kwargs = kwargs

    def annotate(self, source: bytes, analysis: AnalyzeResult, locator: str) -> AnnotatedPdf:
        """Annotate ``source`` and return the new PDF with its manifest."""
        pdf = open_pdf(source)
        try:
            summaries = []
            for document in analysis.documents:
                drawn = self.draw_document(pdf, document, analysis)
                logger.info(f"Drew {drawn} annotations for {document.doc_type}")
                summaries.append(self.summarize(document))
            data = save_pdf(pdf)
        finally:
            pdf.close()

        artifact = AnnotatedArtifact(
            saved_path=self.output_path(locator),
            document_types=summaries,
            mode=self.name,
        )
        return AnnotatedPdf(artifact=artifact, data=data)

    def output_path(self, locator: str) -> str:
        file_name = source_file_name(locator)
        if not is_pdf(file_name):
            file_name = f"{file_name}.pdf"
        return join_locator(source_dir(locator), self.output_dir, f"annotated_{file_name}")

    @abstractmethod
    def draw_document(
        self, pdf: fitz.Document, document: AnalyzedDocument, analysis: AnalyzeResult
    ) -> int:
        """Draw one document's annotations; return how many regions were drawn."""
        ...

    @abstractmethod
    def summarize(self, document: AnalyzedDocument) -> DocumentTypeSummary: ...

    # ── Geometry ────────────────────────────────────────────────────────

    def locate(
        self, pdf: fitz.Document, region: BoundingRegion, analysis: AnalyzeResult
    ) -> tuple[fitz.Page, ResolvedRegion] | None:
        """Find the page a region sits on and resolve it into page space."""
        index = region.page_number - 1
        page_info = analysis.page_info(region.page_number)
        if not 0 <= index < pdf.page_count or page_info is None:
            logger.debug(
                f"Skipping region on page {region.page_number} ({SkipReason.MISSING_PAGE.value})"
            )
            return None

        page = pdf[index]
        resolved = resolve_region(
            region.polygon, page_info, page.rect.width, page.rect.height
        )
        if resolved is None:
            logger.debug(
                f"Skipping region on page {region.page_number} "
                f"({SkipReason.MALFORMED_REGION.value})"
            )
            return None
        return page, resolved

    @staticmethod
    def page_point(page: fitz.Page, point: Point) -> fitz.Point:
        """PDF-space (bottom-left origin) point -> PyMuPDF drawing point."""
        return fitz.Point(point.x, page.rect.height - point.y) * page.derotation_matrix

    @classmethod
    def page_top_left(cls, page: fitz.Page, rect: Rect) -> fitz.Point:
        """Corner of ``rect`` that shows as top-left on the displayed page."""
        return cls.page_point(page, Point(x=rect.x, y=rect.top))

    @classmethod
    def page_rect(cls, page: fitz.Page, rect: Rect) -> fitz.Rect:
        top_left = cls.page_top_left(page, rect)
        bottom_right = cls.page_point(page, Point(x=rect.right, y=rect.y))
        rect_on_page = fitz.Rect(top_left, bottom_right)
        rect_on_page.normalize()
        return rect_on_page

    @classmethod
    def page_quad(cls, page: fitz.Page, quad: Quad) -> list[fitz.Point]:
        return [cls.page_point(page, p) for p in quad.points]

    # ── Drawing ─────────────────────────────────────────────────────────

    def draw_label(
        self,
        page: fitz.Page,
        anchor: fitz.Point,
        text: str,
        *,
        fontsize: float,
        border: tuple[float, float, float],
        rotation: int = 0,
        above: bool = False,
        square: bool = False,
    ) -> None:
        """Draw ``text`` on a white bordered background anchored at ``anchor``.

        The background hangs below the anchor (or sits above it) in the
        label's reading direction, which is turned by ``rotation`` degrees
        counter-clockwise.
        """
        fontname = self.settings.label_font
        text_width = fitz.get_text_length(text, fontname=fontname, fontsize=fontsize)
        width = text_width + 2 * LABEL_PADDING
        height = fontsize + 2 * LABEL_PADDING
        if square:
            width = height = max(width, height)

        turn = (rotation + page.rotation) % 360
        along, down = reading_frame(turn)
        top = -height if above else 0.0

        def at(a: float, b: float) -> fitz.Point:
            return anchor + along * a + down * b

        background = fitz.Quad(at(0, top), at(width, top), at(0, top + height), at(width, top + height))
        page.draw_quad(background, color=border, fill=WHITE, width=1)

        # Centre the text box; the baseline sits below the cap height.
        baseline = top + (height + fontsize * 0.7) / 2
        origin = at((width - text_width) / 2, baseline)
        page.insert_text(
            origin,
            text,
            fontname=fontname,
            fontsize=fontsize,
            color=BLACK,
            rotate=turn,
        )


def reading_frame(rotation: int) -> tuple[fitz.Point, fitz.Point]:
    """Unit vectors (text direction, line-down direction) in page space."""
    if rotation == 90:
        return fitz.Point(0, -1), fitz.Point(1, 0)
    if rotation == 180:
        return fitz.Point(-1, 0), fitz.Point(0, -1)
    if rotation == 270:
        return fitz.Point(0, 1), fitz.Point(-1, 0)
    return fitz.Point(1, 0), fitz.Point(0, 1)


def format_confidence(label: str, confidence: float | None) -> str:
    if confidence is None:
        return label
    return f"{label}: ({confidence * 100:.1f}%)"
