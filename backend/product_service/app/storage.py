# products-management/backend/product_service/app/storage.py

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from azure.core.exceptions import ResourceExistsError, ResourceNotFoundError
from azure.storage.blob import (
    BlobSasPermissions,
    BlobServiceClient,
    ContentSettings,
    generate_blob_sas,
)

from .config import StorageSettings
from .exceptions import StorageNotConfigured

logger = logging.getLogger(__name__)


class BlobImageStorage:
    """
    Stores product images in an Azure Blob Storage container.

    Blobs are private; reads go through read-only SAS URLs that expire after
    ``settings.sas_expiry_minutes``.
    """

    def __init__(
        self,
        settings: StorageSettings,
        service_client: Optional[BlobServiceClient] = None,
    ):
        self.settings = settings
        if service_client is None:
            service_client = BlobServiceClient(
                account_url=settings.account_url,
                credential=settings.account_key,
            )
        self._container = service_client.get_container_client(
            settings.container_name
        )

    def ensure_container(self) -> None:
        try:
            self._container.create_container()
            logger.info(
                f"Azure container '{self.settings.container_name}' created."
            )
        except ResourceExistsError:
            logger.info(
                f"Azure container '{self.settings.container_name}' already exists."
            )

    def upload(
        self, key: str, data: bytes, content_type: Optional[str] = None
    ) -> Optional[str]:
        """
        Uploads ``data`` under ``key``, replacing any existing blob, and
        returns a signed read URL for it.
        """
        blob_client = self._container.get_blob_client(key)
        logger.info(f"Uploading {len(data)} bytes to blob '{key}'.")
        blob_client.upload_blob(
            data,
            overwrite=True,
            content_settings=ContentSettings(content_type=content_type),
        )
        return self.signed_url(key)

    def signed_url(self, key: Optional[str]) -> Optional[str]:
        if not key:
            return None

        blob_client = self._container.get_blob_client(key)
        sas_token = generate_blob_sas(
            account_name=self.settings.account_name,
            container_name=self.settings.container_name,
            blob_name=key,
            account_key=self.settings.account_key,
            permission=BlobSasPermissions(read=True),
            expiry=datetime.now(timezone.utc)
            + timedelta(minutes=self.settings.sas_expiry_minutes),
        )
        return f"{blob_client.url}?{sas_token}"

    def delete(self, key: Optional[str]) -> None:
        if not key:
            return

        try:
            self._container.delete_blob(key)
            logger.info(f"Deleted blob '{key}'.")
        except ResourceNotFoundError:
            logger.warning(f"Blob '{key}' was already absent, nothing to delete.")


class UnavailableImageStorage:
    """
    Used in place of BlobImageStorage when no Azure credentials are set.
    Products without an image keep working; any real blob key raises
    StorageNotConfigured.
    """

    def upload(
        self, key: str, data: bytes, content_type: Optional[str] = None
    ) -> Optional[str]:
        raise StorageNotConfigured()

    def signed_url(self, key: Optional[str]) -> Optional[str]:
        if not key:
            return None
        raise StorageNotConfigured()

    def delete(self, key: Optional[str]) -> None:
        if not key:
            return
        raise StorageNotConfigured()
