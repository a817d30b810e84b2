"""Entry points used by the orchestration layer."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

import docsplit.annotation.document_level  # noqa: F401
import docsplit.annotation.field_level  # noqa: F401
import docsplit.storage.http  # noqa: F401
import docsplit.storage.local  # noqa: F401
from docsplit.annotation.base import BaseAnnotator
from docsplit.assembly.assembler import PageAssembler
from docsplit.assembly.grouper import group_documents
from docsplit.core.config import Settings, get_settings
from docsplit.core.document import (
    AnalyzeResult,
    AnnotatedArtifact,
    ClassificationOutcome,
    SplitArtifact,
)
from docsplit.core.registry import AnnotatorRegistry, StoreRegistry
from docsplit.storage.base import ArtifactStore
from docsplit.utils.io import get_mime_type, source_dir

logger = logging.getLogger(__name__)


def build_store(name: str | None = None, settings: Settings | None = None, **kwargs) -> ArtifactStore:
    """Construct a registered store backend once, for the process lifetime."""
    settings = settings or get_settings()
    name = name or settings.storage_backend
    if name == "azure":
        import docsplit.storage.azure_blob  # noqa: F401
    return StoreRegistry.get(name)(settings=settings, **kwargs)


class DocumentAssemblyService:
    """Splits and annotates source PDFs held by one store.

    The service keeps no per-call state: every call fetches its own copy of
    the source and builds fresh PDF objects, so calls may run concurrently.
    """

    def __init__(self, store: ArtifactStore, settings: Settings | None = None) -> None:
        self.store = store
        self.settings = settings or store.settings
        self.assembler = PageAssembler()
        self._annotators: dict[str, BaseAnnotator] = {}

    def annotator(self, mode: str) -> BaseAnnotator:
        if mode not in self._annotators:
            self._annotators[mode] = AnnotatorRegistry.get(mode)(settings=self.settings)
        return self._annotators[mode]

    def fetch(self, source: str) -> bytes:
        return self.store.fetch_source(source, self.settings.max_source_bytes)

    # ── Split ───────────────────────────────────────────────────────────

    def split_by_type(self, source: str, analysis: AnalyzeResult) -> list[SplitArtifact]:
        return self._split(source, self.fetch(source), analysis)

    def _split(self, source: str, data: bytes, analysis: AnalyzeResult) -> list[SplitArtifact]:
        groups = group_documents(analysis.documents)
        logger.info(f"Processing {len(groups)} grouped document types for {source}")

        artifacts: list[SplitArtifact] = []
        for split in self.assembler.assemble(data, groups, source_dir(source)):
            path = split.artifact.saved_path
            upload = self.store.publish(path, split.data, get_mime_type(path))
            artifacts.append(split.artifact.model_copy(update={"upload": upload}))
            logger.info(f"Published {path}")
        return artifacts

    # ── Annotate ────────────────────────────────────────────────────────

    def annotate(self, source: str, analysis: AnalyzeResult, mode: str) -> AnnotatedArtifact:
        return self._annotate(source, self.fetch(source), analysis, mode)

    def _annotate(
        self, source: str, data: bytes, analysis: AnalyzeResult, mode: str
    ) -> AnnotatedArtifact:
        annotated = self.annotator(mode).annotate(data, analysis, source)
        path = annotated.artifact.saved_path
        upload = self.store.publish(path, annotated.data, get_mime_type(path))
        logger.info(f"Published {path}")
        return annotated.artifact.model_copy(update={"upload": upload})

    def annotate_document_level(self, source: str, analysis: AnalyzeResult) -> AnnotatedArtifact:
        return self.annotate(source, analysis, "document")

    def annotate_field_level(self, source: str, analysis: AnalyzeResult) -> AnnotatedArtifact:
        return self.annotate(source, analysis, "field")

    def process_classification(self, source: str, analysis: AnalyzeResult) -> ClassificationOutcome:
        """Split by type and annotate document regions from one fetch."""
        data = self.fetch(source)
        splits = self._split(source, data, analysis)
        annotation = self._annotate(source, data, analysis, "document")
        return ClassificationOutcome(splits=splits, annotation=annotation)

    # ── Fan-out ─────────────────────────────────────────────────────────

    async def annotate_many(
        self,
        jobs: Sequence[tuple[str, AnalyzeResult]],
        mode: str = "field",
    ) -> list[AnnotatedArtifact | BaseException]:
        """Annotate many sources with at most ``max_concurrency`` in flight.

        Each job succeeds or fails on its own; failures come back in place
        of the artifact.
        """
        semaphore = asyncio.Semaphore(self.settings.max_concurrency)

        async def _do_job(source: str, analysis: AnalyzeResult) -> AnnotatedArtifact:
            async with semaphore:
                return await asyncio.to_thread(self.annotate, source, analysis, mode)

        tasks = [_do_job(source, analysis) for source, analysis in jobs]
        return list(await asyncio.gather(*tasks, return_exceptions=True))
