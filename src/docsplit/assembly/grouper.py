"""Merge detected documents into one page group per doc type."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from docsplit.core.document import AnalyzedDocument, DocumentGroup

logger = logging.getLogger(__name__)


def group_documents(documents: Iterable[AnalyzedDocument]) -> dict[str, DocumentGroup]:
    """Group documents by doc type.

    A document without bounding regions contributes nothing. Page numbers
    of repeated doc types are unioned and the group keeps the highest
    confidence seen. Keys come back in lexical order.
    """
    groups: dict[str, DocumentGroup] = {}

    for document in documents:
        if not document.bounding_regions:
            logger.debug(f"Document '{document.doc_type}' has no bounding regions, skipping")
            continue

        page_numbers = {region.page_number for region in document.bounding_regions}
        existing = groups.get(document.doc_type)
        if existing is None:
            groups[document.doc_type] = DocumentGroup(
                doc_type=document.doc_type,
                page_numbers=page_numbers,
                confidence=document.confidence,
            )
        else:
            existing.page_numbers |= page_numbers
            existing.confidence = max(existing.confidence, document.confidence)

    logger.info(f"Grouped {len(groups)} document types")
    return {doc_type: groups[doc_type] for doc_type in sorted(groups)}
