"""Store over plain HTTP(S) URLs, e.g. blob SAS URLs."""

from __future__ import annotations

from collections.abc import Iterator

import httpx

from docsplit.core.config import Settings
from docsplit.core.document import PublishResult
from docsplit.core.errors import ArtifactNotFound
from docsplit.core.registry import StoreRegistry
from docsplit.storage.base import ArtifactStore


class HttpStore(ArtifactStore):
    """Streams sources with GET and publishes with a block-blob PUT.

    Locators are either absolute URLs or paths joined onto ``base_url``.
    """

    name = "http"

    def __init__(
        self,
        base_url: str | None = None,
        client: httpx.Client | None = None,
        settings: Settings | None = None,
        **kwargs,
    ) -> None:
        super().__init__(settings=settings, **kwargs)
        self.base_url = base_url.rstrip("/") if base_url else None
        self.client = client or httpx.Client(timeout=self.settings.http_timeout)

    def url_for(self, locator: str) -> str:
        if locator.startswith(("http://", "https://")) or not self.base_url:
            return locator
        return f"{self.base_url}/{locator.lstrip('/')}"

    def open_source(self, locator: str) -> Iterator[bytes]:
        with self.client.stream("GET", self.url_for(locator)) as resp:
            if resp.status_code == 404:
                raise ArtifactNotFound(f"Not found: {locator}")
            resp.raise_for_status()
            yield from resp.iter_bytes(self.settings.chunk_size)

    def publish(
        self, locator: str, data: bytes, content_type: str = "application/pdf"
    ) -> PublishResult:
        resp = self.client.put(
            self.url_for(locator),
            content=data,
            headers={"Content-Type": content_type, "x-ms-blob-type": "BlockBlob"},
        )
        resp.raise_for_status()
        return PublishResult(
            path=locator,
            etag=resp.headers.get("etag"),
            last_modified=resp.headers.get("last-modified"),
            version_id=resp.headers.get("x-ms-version-id"),
            size=len(data),
        )

    def close(self) -> None:
        self.client.close()


StoreRegistry.register("http", HttpStore)
