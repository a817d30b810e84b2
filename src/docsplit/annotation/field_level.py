"""Field-level annotation for extraction results."""

from __future__ import annotations

import fitz  # pymupdf

from docsplit.annotation.base import (
    BLUE,
    RED,
    BaseAnnotator,
    format_confidence,
    reading_frame,
)
from docsplit.core.document import (
    AnalyzedDocument,
    AnalyzeResult,
    DocumentField,
    DocumentTypeSummary,
)
from docsplit.core.registry import AnnotatorRegistry

MAX_VALUE_LENGTH = 50


def truncate_value(value: str, limit: int = MAX_VALUE_LENGTH) -> str:
    return value if len(value) <= limit else value[:limit] + "..."


class FieldLevelAnnotator(BaseAnnotator):
    """Oriented blue outline per field region, following the field's skew.

    Document regions get a thin red box and a caption. Each field gets its
    name and confidence above the outline and its value beneath it; both
    labels are counter-rotated when the page was analysed turned by 90
    degrees so they read upright against the content.
    """

    name = "field"
    output_dir = "extractor"

    def draw_document(
        self, pdf: fitz.Document, document: AnalyzedDocument, analysis: AnalyzeResult
    ) -> int:
        drawn = 0
        fontsize = self.settings.field_font_size
        stroke = self.settings.field_stroke_width

        for region in document.bounding_regions:
            located = self.locate(pdf, region, analysis)
            if located is None:
                continue
            page, resolved = located
            box = resolved.box
            page.draw_rect(self.page_rect(page, box), color=RED, width=stroke)
            # Caption above the box, or just inside it when the box touches the top.
            room_above = page.rect.height - box.top
            offset = -5 if room_above - 5 >= fontsize else fontsize + 2
            along, down = reading_frame(page.rotation)
            page.insert_text(
                self.page_top_left(page, box) + along * 2 + down * offset,
                f"Document: {document.doc_type}",
                fontname=self.settings.label_font,
                fontsize=fontsize,
                color=RED,
                rotate=page.rotation,
            )
            drawn += 1

        for field_name, field in document.fields.items():
            drawn += self._draw_field(pdf, field_name, field, analysis)

        return drawn

    def _draw_field(
        self,
        pdf: fitz.Document,
        field_name: str,
        field: DocumentField,
        analysis: AnalyzeResult,
    ) -> int:
        drawn = 0
        fontsize = self.settings.field_font_size
        label = format_confidence(field_name, field.confidence)
        value = truncate_value(field.display_value)

        for region in field.bounding_regions:
            located = self.locate(pdf, region, analysis)
            if located is None:
                continue
            page, resolved = located

            outline = self.page_quad(page, resolved.quad)
            page.draw_polyline(
                outline + outline[:1],
                color=BLUE,
                width=self.settings.field_stroke_width,
            )

            top_left, bottom_left = (
                self.page_point(page, p) for p in resolved.label_anchors()
            )
            self.draw_label(
                page,
                top_left,
                label,
                fontsize=fontsize,
                border=BLUE,
                rotation=resolved.label_rotation,
                above=True,
            )
            if value:
                self.draw_label(
                    page,
                    bottom_left,
                    value,
                    fontsize=fontsize - 2,
                    border=BLUE,
                    rotation=resolved.label_rotation,
                )
            drawn += 1

        return drawn

    def summarize(self, document: AnalyzedDocument) -> DocumentTypeSummary:
        return DocumentTypeSummary(
            doc_type=document.doc_type,
            confidence=document.confidence,
            fields=len(document.fields),
        )


AnnotatorRegistry.register("field", FieldLevelAnnotator)
