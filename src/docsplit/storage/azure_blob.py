"""Azure Blob Storage store."""

from __future__ import annotations

from collections.abc import Iterator

from azure.core.exceptions import ResourceNotFoundError
from azure.storage.blob import BlobServiceClient, ContentSettings

from docsplit.core.config import Settings
from docsplit.core.document import PublishResult
from docsplit.core.errors import ArtifactNotFound, DocsplitError
from docsplit.core.registry import StoreRegistry
from docsplit.storage.base import ArtifactStore


class AzureBlobStore(ArtifactStore):
    """Locators are blob names inside one container.

    The service client is built once, from a connection string or from an
    account URL with ``DefaultAzureCredential``.
    """

    name = "azure"

    def __init__(
        self,
        container: str | None = None,
        service_client: BlobServiceClient | None = None,
        settings: Settings | None = None,
        **kwargs,
    ) -> None:
        super().__init__(settings=settings, **kwargs)
        self.container = container or self.settings.azure_container
        self.service_client = service_client or self._build_client()
        self.container_client = self.service_client.get_container_client(self.container)

    def _build_client(self) -> BlobServiceClient:
        if self.settings.azure_connection_string:
            return BlobServiceClient.from_connection_string(
                self.settings.azure_connection_string
            )
        if self.settings.azure_account_url:
            from azure.identity import DefaultAzureCredential

            return BlobServiceClient(
                account_url=self.settings.azure_account_url,
                credential=DefaultAzureCredential(),
            )
        raise DocsplitError(
            "Azure store needs DOCSPLIT_AZURE_CONNECTION_STRING or DOCSPLIT_AZURE_ACCOUNT_URL"
        )

    def open_source(self, locator: str) -> Iterator[bytes]:
        blob = self.container_client.get_blob_client(locator)
        try:
            downloader = blob.download_blob()
        except ResourceNotFoundError as exc:
            raise ArtifactNotFound(f"Blob not found: {self.container}/{locator}") from exc
        return downloader.chunks()

    def publish(
        self, locator: str, data: bytes, content_type: str = "application/pdf"
    ) -> PublishResult:
        blob = self.container_client.get_blob_client(locator)
        props = blob.upload_blob(
            data,
            overwrite=True,
            content_settings=ContentSettings(content_type=content_type),
        )
        last_modified = props.get("last_modified")
        return PublishResult(
            path=locator,
            etag=props.get("etag"),
            last_modified=last_modified.isoformat() if last_modified else None,
            version_id=props.get("version_id"),
            size=len(data),
        )


StoreRegistry.register("azure", AzureBlobStore)
