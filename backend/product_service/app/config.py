# products-management/backend/product_service/app/config.py

import os
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class StorageSettings:
    """
    Azure Blob Storage settings, read once from the environment at startup.
    """

    account_name: Optional[str]
    account_key: Optional[str]
    container_name: str = "product-images"
    account_url: Optional[str] = None
    sas_expiry_minutes: int = 10

    @classmethod
    def from_env(cls) -> "StorageSettings":
        account_name = os.getenv("AZURE_STORAGE_ACCOUNT_NAME")
        account_url = os.getenv("AZURE_STORAGE_ACCOUNT_URL")
        if not account_url and account_name:
            account_url = f"https://{account_name}.blob.core.windows.net"
        return cls(
            account_name=account_name,
            account_key=os.getenv("AZURE_STORAGE_ACCOUNT_KEY"),
            container_name=os.getenv(
                "AZURE_STORAGE_CONTAINER_NAME", "product-images"
            ),
            account_url=account_url,
            sas_expiry_minutes=int(os.getenv("AZURE_SAS_TOKEN_EXPIRY_MINUTES", "10")),
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.account_name and self.account_key)
