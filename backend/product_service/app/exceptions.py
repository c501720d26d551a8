# products-management/backend/product_service/app/exceptions.py


class ProductNotFound(Exception):
    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(f"Product with id {product_id}, not found")


class InvalidFileFormat(Exception):
    """Raised when an uploaded product image is not declared as an image."""

    def __init__(self, content_type: str):
        self.content_type = content_type
        super().__init__(
            f"Product image should be image format but got, {content_type}"
        )


class StorageNotConfigured(Exception):
    def __init__(self):
        super().__init__("Azure Blob Storage is not configured or available.")
