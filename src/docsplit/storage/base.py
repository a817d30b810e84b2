"""Base class for artifact stores."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable

from docsplit.core.config import Settings, get_settings
from docsplit.core.document import PublishResult
from docsplit.core.errors import SizeLimitExceeded

logger = logging.getLogger(__name__)


def read_bounded(chunks: Iterable[bytes], max_bytes: int) -> bytes:
    """Join a chunk stream, failing as soon as it grows past ``max_bytes``."""
    buffer: list[bytes] = []
    total = 0
    for chunk in chunks:
        total += len(chunk)
        if total > max_bytes:
            raise SizeLimitExceeded(size=total, limit=max_bytes)
        buffer.append(chunk)
    return b"".join(buffer)


class ArtifactStore(ABC):
    """Abstract storage collaborator.

    Stores are built once and shared by reference; a store must not
    rebuild its clients per call.
    """

    name: str  # unique identifier for this backend

    def __init__(self, settings: Settings | None = None, **kwargs) -> None:
        self.settings = settings or get_settings()
        self.kwargs = kwargs

    @abstractmethod
    def open_source(self, locator: str) -> Iterable[bytes]:
        """Stream the object at ``locator`` as chunks."""
        ...

    @abstractmethod
    def publish(
        self, locator: str, data: bytes, content_type: str = "application/pdf"
    ) -> PublishResult:
        """Write ``data`` to ``locator``, replacing any existing object."""
        ...

    def fetch_source(self, locator: str, max_bytes: int | None = None) -> bytes:
        limit = max_bytes if max_bytes is not None else self.settings.max_source_bytes
        data = read_bounded(self.open_source(locator), limit)
        logger.info(f"Fetched {locator} ({len(data)} bytes)")
        return data
