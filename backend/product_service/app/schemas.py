# products-management/backend/product_service/app/schemas.py

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError


class ProductRequest(BaseModel):
    """
    Product fields accepted on create and update (sent as multipart form fields).
    """

    name: str = Field("", description="Product name, at least 5 characters.")
    price: int = Field(0, description="Unit price, at least 1.")
    quantity: int = Field(0, description="Units in stock, not negative.")

    @field_validator("name")
    @classmethod
    def check_name(cls, value: str) -> str:
        if not value:
            # An empty name breaks both rules, report them together
            raise PydanticCustomError(
                "product_name_empty",
                "Product name should not be empty, Minimum product name length is 5",
            )
        if len(value) < 5:
            raise PydanticCustomError(
                "product_name_too_short", "Minimum product name length is 5"
            )
        return value

    @field_validator("price")
    @classmethod
    def check_price(cls, value: int) -> int:
        if value < 1:
            raise PydanticCustomError(
                "product_price_too_low", "Minimum product price is 1"
            )
        return value

    @field_validator("quantity")
    @classmethod
    def check_quantity(cls, value: int) -> int:
        if value < 0:
            raise PydanticCustomError(
                "product_quantity_negative", "Product quantity should not less than 0"
            )
        return value


# Schema for responding with Product data
class ProductResponse(BaseModel):
    id: int = Field(..., description="Unique ID of the product.")
    name: str
    price: int
    quantity: int
    image_url: Optional[str] = Field(
        None,
        alias="imageUrl",
        description="Time-limited signed URL of the product image.",
    )

    model_config = ConfigDict(populate_by_name=True)


class MessageResponse(BaseModel):
    message: str
