"""Unified models for analysis input and produced artifacts."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class _AnalysisModel(BaseModel):
    """Base for models parsed from the analysis service's camelCase JSON."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class BoundingRegion(_AnalysisModel):
    """A page number plus a 4-corner polygon (TL, TR, BR, BL)."""

    page_number: int = Field(alias="pageNumber", ge=1)
    polygon: list[float] = Field(default_factory=list)


class PageInfo(_AnalysisModel):
    """Page size and skew as reported in analysis space."""

    page_number: int | None = Field(default=None, alias="pageNumber", ge=1)
    width: float = 0.0
    height: float = 0.0
    angle: float = 0.0
    unit: str | None = None


class DocumentField(_AnalysisModel):
    """A single extracted field. The field name is its key in the parent mapping."""

    type: str | None = None
    content: str | None = None
    value_string: str | None = Field(default=None, alias="valueString")
    confidence: float | None = None
    bounding_regions: list[BoundingRegion] = Field(
        default_factory=list, alias="boundingRegions"
    )

    @property
    def display_value(self) -> str:
        return self.value_string or self.content or ""


class AnalyzedDocument(_AnalysisModel):
    """A logical sub-document detected over the source PDF."""

    doc_type: str = Field(alias="docType")
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    bounding_regions: list[BoundingRegion] = Field(
        default_factory=list, alias="boundingRegions"
    )
    fields: dict[str, DocumentField] = Field(default_factory=dict)


class AnalyzeResult(_AnalysisModel):
    """The slice of an analysis result this package consumes."""

    documents: list[AnalyzedDocument] = Field(default_factory=list)
    pages: list[PageInfo] = Field(default_factory=list)

    def page_info(self, page_number: int) -> PageInfo | None:
        """Look up page info by 1-indexed page number.

        Positional lookup is used only when no entry carries a page number.
        """
        if any(page.page_number is not None for page in self.pages):
            for page in self.pages:
                if page.page_number == page_number:
                    return page
            return None
        index = page_number - 1
        if 0 <= index < len(self.pages):
            return self.pages[index]
        return None


class DocumentGroup(BaseModel):
    """All pages of one doc type, merged across detected instances."""

    doc_type: str
    page_numbers: set[int] = Field(default_factory=set)  # 1-indexed
    confidence: float = 0.0

    def sorted_pages(self) -> list[int]:
        return sorted(self.page_numbers)


# ── Output manifests ───────────────────────────────────────────────────


class _ManifestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class PublishResult(_ManifestModel):
    """What the storage collaborator reports back after a write."""

    path: str
    etag: str | None = None
    last_modified: str | None = Field(default=None, alias="lastModified")
    version_id: str | None = Field(default=None, alias="versionId")
    size: int = 0


class SplitArtifact(_ManifestModel):
    doc_type: str = Field(alias="docType")
    page_numbers: list[int] = Field(default_factory=list, alias="pageNumbers")
    confidence: float
    saved_path: str = Field(alias="savedPath")
    upload: PublishResult | None = Field(default=None, exclude=True)


class DocumentTypeSummary(_ManifestModel):
    doc_type: str = Field(alias="docType")
    confidence: float
    regions: int | None = None
    fields: int | None = None


class AnnotatedArtifact(_ManifestModel):
    success: bool = True
    saved_path: str = Field(alias="savedPath")
    document_types: list[DocumentTypeSummary] = Field(
        default_factory=list, alias="documentTypes"
    )
    mode: str = Field(default="document", exclude=True)
    upload: PublishResult | None = Field(default=None, exclude=True)

    def manifest(self) -> dict:
        """JSON-ready manifest with camelCase keys and no unset counters."""
        return self.model_dump(by_alias=True, exclude_none=True)


class ClassificationOutcome(_ManifestModel):
    """Split artifacts plus the document-level annotation of one source."""

    splits: list[SplitArtifact] = Field(default_factory=list, alias="splitPdfResult")
    annotation: AnnotatedArtifact = Field(alias="drawBoundingBoxAnnotationsResult")
