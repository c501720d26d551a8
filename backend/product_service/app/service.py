# products-management/backend/product_service/app/service.py

import logging
from dataclasses import dataclass
from typing import List, Optional

from .exceptions import ProductNotFound
from .models import Product
from .repository import ProductRepository
from .schemas import ProductResponse
from .storage import BlobImageStorage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageUpload:
    filename: str
    content_type: Optional[str]
    data: bytes

    @property
    def is_empty(self) -> bool:
        return not self.data


def image_key(product_id: int, filename: str) -> str:
    return f"{product_id}-{filename}"


def to_response(product: Product, image_url: Optional[str]) -> ProductResponse:
    return ProductResponse(
        id=product.id,
        name=product.name,
        price=product.price,
        quantity=product.quantity,
        image_url=image_url,
    )


class ProductService:
    """
    Product lifecycle across the database and blob storage.

    Rows keep the blob key in ``image_location``; responses carry a signed URL
    computed on every read. Database and storage calls are not transactional
    with each other, so a failure between them leaves the two out of step.
    """

    def __init__(self, repository: ProductRepository, storage: BlobImageStorage):
        self.repository = repository
        self.storage = storage

    def _get_product(self, product_id: int) -> Product:
        product = self.repository.get(product_id)
        if product is None:
            logger.warning(f"Product with ID {product_id} not found.")
            raise ProductNotFound(product_id)
        return product

    def create_product(
        self, product: Product, image: Optional[ImageUpload] = None
    ) -> ProductResponse:
        stored = self.repository.save(product)
        logger.info(f"Product '{stored.name}' (ID: {stored.id}) created.")

        image_url = None
        if image is not None and not image.is_empty:
            key = image_key(stored.id, image.filename)
            stored.image_location = key
            self.repository.save(stored)
            image_url = self.storage.upload(key, image.data, image.content_type)
            logger.info(f"Image '{key}' stored for product {stored.id}.")

        return to_response(stored, image_url)

    def get_product_detail(self, product_id: int) -> ProductResponse:
        product = self._get_product(product_id)
        return to_response(product, self.storage.signed_url(product.image_location))

    def get_products(self) -> List[ProductResponse]:
        return [
            to_response(product, self.storage.signed_url(product.image_location))
            for product in self.repository.list_all()
        ]

    def update_product(
        self,
        product_id: int,
        product: Product,
        image: Optional[ImageUpload] = None,
    ) -> ProductResponse:
        stored = self._get_product(product_id)
        stored.update_from(product)

        # The old blob goes first, so there is a short window with no image
        self.storage.delete(stored.image_location)

        image_url = None
        if image is None or image.is_empty:
            stored.image_location = None
        else:
            key = image_key(stored.id, image.filename)
            image_url = self.storage.upload(key, image.data, image.content_type)
            stored.image_location = key

        stored = self.repository.save(stored)
        logger.info(f"Product {product_id} updated, image: {stored.image_location}.")
        return to_response(stored, image_url)

    def delete_product(self, product_id: int) -> None:
        product = self._get_product(product_id)
        image_location = product.image_location
        self.repository.delete(product)
        self.storage.delete(image_location)
        logger.info(f"Product {product_id} deleted.")
