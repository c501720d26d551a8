# products-management/backend/product_service/tests/conftest.py

import os

# Must run before the app modules build their engine and storage settings
os.environ["DATABASE_URL"] = "sqlite://"
for name in (
    "AZURE_STORAGE_ACCOUNT_NAME",
    "AZURE_STORAGE_ACCOUNT_KEY",
    "AZURE_STORAGE_ACCOUNT_URL",
):
    os.environ.pop(name, None)
