"""Filesystem store rooted at a directory."""

from __future__ import annotations

import hashlib
from collections.abc import Iterator
from datetime import datetime, timezone
from pathlib import Path

from docsplit.core.config import Settings
from docsplit.core.document import PublishResult
from docsplit.core.errors import ArtifactNotFound, DocsplitError
from docsplit.core.registry import StoreRegistry
from docsplit.storage.base import ArtifactStore


class LocalStore(ArtifactStore):
    """Reads and writes locators as paths relative to ``root``."""

    name = "local"

    def __init__(
        self, root: str | Path | None = None, settings: Settings | None = None, **kwargs
    ) -> None:
        super().__init__(settings=settings, **kwargs)
        self.root = Path(root if root is not None else self.settings.storage_root).resolve()

    def resolve(self, locator: str) -> Path:
        """Resolve a locator under the root, rejecting anything that escapes it."""
        if locator.startswith(("/", "\\")):
            raise DocsplitError(f"Expected a relative locator, got: {locator!r}")
        candidate = (self.root / locator).resolve()
        if not candidate.is_relative_to(self.root):
            raise DocsplitError(f"Path traversal detected: locator={locator!r}")
        return candidate

    def open_source(self, locator: str) -> Iterator[bytes]:
        path = self.resolve(locator)
        if not path.is_file():
            raise ArtifactNotFound(f"File not found: {locator}")
        return self._read_chunks(path)

    def _read_chunks(self, path: Path) -> Iterator[bytes]:
        with path.open("rb") as f:
            yield from iter(lambda: f.read(self.settings.chunk_size), b"")

    def publish(
        self, locator: str, data: bytes, content_type: str = "application/pdf"
    ) -> PublishResult:
        path = self.resolve(locator)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return PublishResult(
            path=locator,
            etag=hashlib.md5(data).hexdigest(),
            last_modified=datetime.now(timezone.utc).isoformat(),
            size=len(data),
        )


StoreRegistry.register("local", LocalStore)
