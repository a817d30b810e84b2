"""Tests for burning analysis regions onto PDF pages."""

import fitz
import pytest
from conftest import letter_pages, make_pdf

from docsplit.annotation.base import BLUE, format_confidence
from docsplit.annotation.document_level import DocumentLevelAnnotator
from docsplit.annotation.field_level import FieldLevelAnnotator, truncate_value
from docsplit.core.document import AnalyzeResult
from docsplit.core.errors import SourceLoadFailure


def _open(data: bytes) -> fitz.Document:
    return fitz.open(stream=data, filetype="pdf")


def _has_rect(page: fitz.Page, expected: fitz.Rect, tol: float = 2.0) -> bool:
    for drawing in page.get_drawings():
        r = drawing["rect"]
        if all(abs(a - b) <= tol for a, b in zip(r, expected)):
            return True
    return False


# ── Document level ──────────────────────────────────────────────────────


def test_document_level_manifest(settings, classifier_result):
    annotated = DocumentLevelAnnotator(settings).annotate(
        make_pdf(5), classifier_result, "inbox/batch.pdf"
    )

    assert annotated.artifact.saved_path == "inbox/classifier/annotated_batch.pdf"
    assert annotated.artifact.manifest() == {
        "success": True,
        "savedPath": "inbox/classifier/annotated_batch.pdf",
        "documentTypes": [
            {"docType": "invoice", "confidence": 0.95, "regions": 2},
            {"docType": "receipt", "confidence": 0.81, "regions": 1},
        ],
    }


def test_document_level_draws_box_and_label(settings, classifier_result):
    annotated = DocumentLevelAnnotator(settings).annotate(
        make_pdf(5), classifier_result, "inbox/batch.pdf"
    )

    doc = _open(annotated.data)
    assert doc.page_count == 5
    # Region 1in..7.5in x 1in..10in on a letter page.
    assert _has_rect(doc[0], fitz.Rect(72, 72, 540, 720))
    assert "invoice: (95.0%)" in doc[0].get_text()
    assert "receipt: (81.0%)" in doc[1].get_text()
    assert doc[3].get_drawings() == []
    doc.close()


def test_document_level_skips_missing_pages(settings):
    analysis = AnalyzeResult.model_validate(
        {
            "documents": [
                {
                    "docType": "A",
                    "confidence": 0.5,
                    "boundingRegions": [
                        {"pageNumber": 9, "polygon": [0, 0, 1, 0, 1, 1, 0, 1]},
                        {"pageNumber": 1, "polygon": [0, 0, 1]},
                    ],
                }
            ],
            "pages": letter_pages(2),
        }
    )

    annotated = DocumentLevelAnnotator(settings).annotate(make_pdf(2), analysis, "batch.pdf")

    doc = _open(annotated.data)
    assert all(page.get_drawings() == [] for page in doc)
    doc.close()
    assert annotated.artifact.document_types[0].regions == 2
    assert annotated.artifact.saved_path == "classifier/annotated_batch.pdf"


def test_document_level_skips_pages_without_page_info(settings, classifier_result):
    analysis = classifier_result.model_copy(update={"pages": []})

    annotated = DocumentLevelAnnotator(settings).annotate(make_pdf(5), analysis, "batch.pdf")

    doc = _open(annotated.data)
    assert doc[0].get_drawings() == []
    doc.close()


def _red_extent(page: fitz.Page) -> tuple[int, int, int, int]:
    """Bounding box of red pixels on the page as displayed, at 72 dpi."""
    pix = page.get_pixmap()
    xs, ys = [], []
    samples = pix.samples
    for y in range(pix.height):
        row = y * pix.stride
        for x in range(pix.width):
            i = row + x * pix.n
            r, g, b = samples[i], samples[i + 1], samples[i + 2]
            if r > 200 and g < 80 and b < 80:
                xs.append(x)
                ys.append(y)
    return min(xs), min(ys), max(xs), max(ys)


@pytest.mark.parametrize("rotation", [0, 90, 180, 270])
def test_document_level_label_stays_inside_box_on_rotated_pages(settings, rotation):
    src = fitz.open(stream=make_pdf(1), filetype="pdf")
    src[0].set_rotation(rotation)
    source = src.tobytes()
    src.close()
    # Analysis sees the page as displayed.
    width, height = (11.0, 8.5) if rotation in (90, 270) else (8.5, 11.0)
    analysis = AnalyzeResult.model_validate(
        {
            "documents": [
                {
                    "docType": "A",
                    "confidence": 0.9,
                    "boundingRegions": [
                        {"pageNumber": 1, "polygon": [4, 4, 6, 4, 6, 6, 4, 6]}
                    ],
                }
            ],
            "pages": [{"pageNumber": 1, "width": width, "height": height}],
        }
    )

    annotated = DocumentLevelAnnotator(settings).annotate(source, analysis, "batch.pdf")

    doc = _open(annotated.data)
    x0, y0, x1, y1 = _red_extent(doc[0])
    doc.close()
    # Box 4in..6in on both axes; the 3pt stroke spills 1.5pt either side.
    assert all(abs(a - b) <= 3 for a, b in zip((x0, y0, x1, y1), (288, 288, 432, 432)))


def test_unreadable_source_raises(settings, classifier_result):
    with pytest.raises(SourceLoadFailure):
        DocumentLevelAnnotator(settings).annotate(b"%PDF-broken", classifier_result, "x.pdf")


def test_output_path_appends_pdf_suffix(settings):
    annotator = DocumentLevelAnnotator(settings)

    assert annotator.output_path("in/scan") == "in/classifier/annotated_scan.pdf"
    assert annotator.output_path("in/scan.PDF") == "in/classifier/annotated_scan.PDF"


# ── Field level ─────────────────────────────────────────────────────────


def test_field_level_manifest(settings, extraction_result):
    annotated = FieldLevelAnnotator(settings).annotate(
        make_pdf(2), extraction_result, "inbox/batch.pdf"
    )

    assert annotated.artifact.manifest() == {
        "success": True,
        "savedPath": "inbox/extractor/annotated_batch.pdf",
        "documentTypes": [{"docType": "invoice", "confidence": 0.9, "fields": 2}],
    }


def test_field_level_draws_outline_and_labels(settings, extraction_result):
    annotated = FieldLevelAnnotator(settings).annotate(
        make_pdf(2), extraction_result, "inbox/batch.pdf"
    )

    doc = _open(annotated.data)
    page = doc[0]
    text = page.get_text()
    assert "total: (88.0%)" in text
    assert "120.00" in text
    assert "Document: invoice" in text
    assert "vendor" not in text
    # Field region 5in..7in x 8in..8.5in.
    assert _has_rect(page, fitz.Rect(360, 576, 504, 612))
    assert any(d.get("color") == BLUE for d in page.get_drawings())
    assert doc[1].get_drawings() == []
    doc.close()


def test_field_level_on_rotated_page(settings):
    # Portrait analysis over a landscape PDF page.
    analysis = AnalyzeResult.model_validate(
        {
            "documents": [
                {
                    "docType": "form",
                    "confidence": 0.9,
                    "fields": {
                        "name": {
                            "content": "Jane",
                            "confidence": 0.99,
                            "boundingRegions": [
                                {"pageNumber": 1, "polygon": [1, 2, 3, 2, 3, 2.5, 1, 2.5]}
                            ],
                        }
                    },
                }
            ],
            "pages": [{"pageNumber": 1, "width": 8, "height": 11}],
        }
    )

    annotated = FieldLevelAnnotator(settings).annotate(
        make_pdf(1, [(792, 576)]), analysis, "batch.pdf"
    )

    doc = _open(annotated.data)
    # Analysis x 1in..3in maps to fitz y 72..216, analysis y 2in..2.5in to fitz x 612..648.
    assert _has_rect(doc[0], fitz.Rect(612, 72, 648, 216))
    doc.close()


def test_truncate_value():
    assert truncate_value("short") == "short"
    assert truncate_value("x" * 50) == "x" * 50
    assert truncate_value("x" * 51) == "x" * 50 + "..."


def test_format_confidence():
    assert format_confidence("invoice", 0.9512) == "invoice: (95.1%)"
    assert format_confidence("total", None) == "total"
