"""Split analysed PDFs by document type and burn detected regions onto them."""

from docsplit.core.document import (
    AnalyzedDocument,
    AnalyzeResult,
    AnnotatedArtifact,
    BoundingRegion,
    DocumentField,
    DocumentGroup,
    PageInfo,
    SplitArtifact,
)
from docsplit.core.registry import AnnotatorRegistry, StoreRegistry
from docsplit.service import DocumentAssemblyService, build_store

__all__ = [
    "AnalyzedDocument",
    "AnalyzeResult",
    "AnnotatedArtifact",
    "BoundingRegion",
    "DocumentField",
    "DocumentGroup",
    "PageInfo",
    "SplitArtifact",
    "AnnotatorRegistry",
    "StoreRegistry",
    "DocumentAssemblyService",
    "build_store",
]
