"""Document-level annotation for classifier results."""

from __future__ import annotations

import fitz  # pymupdf

from docsplit.annotation.base import RED, BaseAnnotator, format_confidence
from docsplit.core.document import AnalyzedDocument, AnalyzeResult, DocumentTypeSummary
from docsplit.core.registry import AnnotatorRegistry


class DocumentLevelAnnotator(BaseAnnotator):
    """Red axis-aligned box per document region, labelled with type and confidence.

    The label sits on a white square hanging inside the box's top-left
    corner.
    """

    name = "document"
    output_dir = "classifier"

    def draw_document(
        self, pdf: fitz.Document, document: AnalyzedDocument, analysis: AnalyzeResult
    ) -> int:
        drawn = 0
        label = format_confidence(document.doc_type, document.confidence)

        for region in document.bounding_regions:
            located = self.locate(pdf, region, analysis)
            if located is None:
                continue
            page, resolved = located

            rect = self.page_rect(page, resolved.box)
            page.draw_rect(rect, color=RED, width=self.settings.document_stroke_width)
            self.draw_label(
                page,
                self.page_top_left(page, resolved.box),
                label,
                fontsize=self.settings.document_font_size,
                border=RED,
                square=True,
            )
            drawn += 1

        return drawn

    def summarize(self, document: AnalyzedDocument) -> DocumentTypeSummary:
        return DocumentTypeSummary(
            doc_type=document.doc_type,
            confidence=document.confidence,
            regions=len(document.bounding_regions),
        )


AnnotatorRegistry.register("document", DocumentLevelAnnotator)
