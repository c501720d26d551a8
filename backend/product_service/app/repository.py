# products-management/backend/product_service/app/repository.py

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from .models import Product

logger = logging.getLogger(__name__)


class ProductRepository:
    """
    Data access for Product rows. Pure DB operations, no storage calls.
    """

    def __init__(self, db: Session):
        self.db = db

    def get(self, product_id: int) -> Optional[Product]:
        return self.db.query(Product).filter(Product.id == product_id).first()

    def list_all(self) -> List[Product]:
        return self.db.query(Product).order_by(Product.id).all()

    def save(self, product: Product) -> Product:
        try:
            self.db.add(product)
            self.db.commit()
            self.db.refresh(product)
        except Exception:
            self.db.rollback()
            logger.error(f"Error saving product {product.id}.", exc_info=True)
            raise
        return product

    def delete(self, product: Product) -> None:
        try:
            self.db.delete(product)
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.error(f"Error deleting product {product.id}.", exc_info=True)
            raise
