"""Copy each doc type's pages out of the source PDF into its own PDF."""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Mapping
from typing import NamedTuple

import fitz  # pymupdf

from docsplit.core.document import DocumentGroup, SplitArtifact
from docsplit.core.errors import SkipReason
from docsplit.utils.io import join_locator, open_pdf, safe_file_stem, save_pdf

logger = logging.getLogger(__name__)

SPLIT_DIR = "classifier"


class SplitPdf(NamedTuple):
    artifact: SplitArtifact
    data: bytes


def split_path(source_dir: str, doc_type: str, taken: set[str] | None = None) -> str:
    """Locator for a doc type's split PDF.

    Distinct doc types can sanitise to the same stem ("tax/form" and
    "tax form"). Stems already in ``taken`` get a short hash of the raw doc
    type appended; the chosen stem is added to ``taken``.
    """
    stem = safe_file_stem(doc_type)
    if taken is not None:
        if stem in taken:
            base = f"{stem}_{hashlib.sha1(doc_type.encode('utf-8')).hexdigest()[:8]}"
            stem, n = base, 2
            while stem in taken:
                stem, n = f"{base}_{n}", n + 1
        taken.add(stem)
    return join_locator(source_dir, SPLIT_DIR, f"{stem}_classifier.pdf")


class PageAssembler:
    """Builds one PDF per document group by copying source pages.

    Pages are copied, not re-rendered, so content and page size survive
    unchanged. Each output is a fresh ``fitz.Document``.
    """

    def assemble(
        self,
        source: bytes,
        groups: Mapping[str, DocumentGroup],
        source_dir: str = "",
    ) -> list[SplitPdf]:
        src = open_pdf(source)
        try:
            return self.assemble_from(src, groups, source_dir)
        finally:
            src.close()

    def assemble_from(
        self,
        src: fitz.Document,
        groups: Mapping[str, DocumentGroup],
        source_dir: str = "",
    ) -> list[SplitPdf]:
        page_count = src.page_count
        results: list[SplitPdf] = []
        stems: set[str] = set()

        for doc_type in sorted(groups):
            group = groups[doc_type]
            sorted_pages = group.sorted_pages()
            logger.info(f"Sorted pages for {doc_type}: {', '.join(map(str, sorted_pages))}")

            kept: list[tuple[int, int]] = []  # (page_number, index)
            for page_number in sorted_pages:
                index = page_number - 1
                if 0 <= index < page_count:
                    kept.append((page_number, index))
                else:
                    logger.info(
                        f"Skipping page {page_number} of {doc_type} - out of range (1-{page_count})"
                    )

            if not kept:
                logger.warning(
                    f"Skipping {doc_type} - no valid pages to copy ({SkipReason.EMPTY_GROUP.value})"
                )
                continue

            out = fitz.open()
            try:
                for _, index in kept:
                    out.insert_pdf(src, from_page=index, to_page=index)
                data = save_pdf(out)
            finally:
                out.close()

            artifact = SplitArtifact(
                doc_type=doc_type,
                page_numbers=[page_number for page_number, _ in kept],
                confidence=group.confidence,
                saved_path=split_path(source_dir, doc_type, stems),
            )
            logger.info(f"Copied {len(kept)} pages for {doc_type}")
            results.append(SplitPdf(artifact=artifact, data=data))

        return results
