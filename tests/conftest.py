"""Shared fixtures: small PDFs built in memory and analysis payloads."""

import fitz
import pytest

from docsplit.core.config import Settings
from docsplit.core.document import AnalyzeResult

LETTER = (612.0, 792.0)


def make_pdf(page_count: int, sizes: list[tuple[float, float]] | None = None) -> bytes:
    """Build a PDF whose page N carries the text 'Page N'."""
    doc = fitz.open()
    for i in range(page_count):
        width, height = sizes[i] if sizes else LETTER
        page = doc.new_page(width=width, height=height)
        page.insert_text((72, 72), f"Page {i + 1}", fontsize=14)
    data = doc.tobytes()
    doc.close()
    return data


def page_texts(data: bytes) -> list[str]:
    doc = fitz.open(stream=data, filetype="pdf")
    texts = [page.get_text().strip() for page in doc]
    doc.close()
    return texts


def full_page_polygon(width: float = 8.5, height: float = 11.0) -> list[float]:
    return [0, 0, width, 0, width, height, 0, height]


def letter_pages(count: int) -> list[dict]:
    return [
        {"pageNumber": n, "width": 8.5, "height": 11.0, "angle": 0, "unit": "inch"}
        for n in range(1, count + 1)
    ]


@pytest.fixture
def five_page_pdf() -> bytes:
    return make_pdf(5)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(storage_root=tmp_path, max_concurrency=2)


@pytest.fixture
def classifier_result() -> AnalyzeResult:
    return AnalyzeResult.model_validate(
        {
            "documents": [
                {
                    "docType": "invoice",
                    "confidence": 0.95,
                    "boundingRegions": [
                        {"pageNumber": 1, "polygon": [1, 1, 7.5, 1, 7.5, 10, 1, 10]},
                        {"pageNumber": 3, "polygon": full_page_polygon()},
                    ],
                },
                {
                    "docType": "receipt",
                    "confidence": 0.81,
                    "boundingRegions": [
                        {"pageNumber": 2, "polygon": [1, 1, 4, 1, 4, 5, 1, 5]},
                    ],
                },
            ],
            "pages": letter_pages(5),
        }
    )


@pytest.fixture
def extraction_result() -> AnalyzeResult:
    return AnalyzeResult.model_validate(
        {
            "documents": [
                {
                    "docType": "invoice",
                    "confidence": 0.9,
                    "boundingRegions": [
                        {"pageNumber": 1, "polygon": full_page_polygon()},
                    ],
                    "fields": {
                        "total": {
                            "type": "string",
                            "content": "USD 120.00",
                            "valueString": "120.00",
                            "confidence": 0.88,
                            "boundingRegions": [
                                {"pageNumber": 1, "polygon": [5, 8, 7, 8, 7, 8.5, 5, 8.5]},
                            ],
                        },
                        "vendor": {
                            "type": "string",
                            "content": "Acme",
                            "confidence": 0.7,
                            "boundingRegions": [
                                {"pageNumber": 9, "polygon": [1, 1, 2, 1, 2, 2, 1, 2]},
                            ],
                        },
                    },
                }
            ],
            "pages": letter_pages(2),
        }
    )
