# product_service/schemas.py

from datetime import datetime, timezone
from typing import Annotated, List, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    field_validator,
)

ProductName = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)
]
ProductCategory = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
ProductPrice = Annotated[float, Field(ge=0, allow_inf_nan=False)]


class ProductCreate(BaseModel):
    name: ProductName
    price: ProductPrice
    category: ProductCategory


class ProductUpdate(BaseModel):
    """Partial update: only the fields present in the body are checked."""

    name: Optional[ProductName] = None
    price: Optional[ProductPrice] = None
    category: Optional[ProductCategory] = None

    @field_validator("name", "price", "category")
    @classmethod
    def reject_explicit_null(cls, value):
        if value is None:
            raise ValueError("Field may not be null")
        return value


class ProductResponse(BaseModel):
    id: str
    name: str
    price: float
    category: str
    created_at: datetime = Field(
        ...,
        validation_alias=AliasChoices("created_at", "createdAt"),
        serialization_alias="createdAt",
    )
    updated_at: datetime = Field(
        ...,
        validation_alias=AliasChoices("updated_at", "updatedAt"),
        serialization_alias="updatedAt",
    )

    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at", "updated_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        # SQLite hands timestamps back without tzinfo; they are stored as UTC.
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class ProductEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: ProductResponse


class ProductListEnvelope(BaseModel):
    success: bool = True
    count: int
    data: List[ProductResponse]


class MessageEnvelope(BaseModel):
    success: bool = True
    message: str
