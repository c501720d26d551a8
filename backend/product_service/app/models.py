# products-management/backend/product_service/app/models.py

from sqlalchemy import Column, Integer, String

from .db import Base


class Product(Base):
    __tablename__ = "products"
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    price = Column(Integer, nullable=False)
    quantity = Column(Integer, nullable=False, default=0)
    # Blob key of the product image, never the signed URL
    image_location = Column(String(1024), nullable=True)

    def update_from(self, other: "Product") -> None:
        self.name = other.name
        self.price = other.price
        self.quantity = other.quantity

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', quantity={self.quantity}, image_location='{self.image_location}')>"
