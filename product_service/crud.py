# product_service/crud.py

"""
Data access for products.

Every function takes the request-scoped ``Session`` and either returns ORM
``Product`` objects or raises one of the errors in ``errors``. Driver
failures are rolled back and re-raised as ``StorageError``.
"""

import logging
import uuid
from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
from typing import Any, List

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .errors import NotFoundError, StorageError, ValidationError, format_validation_errors
from .models import Product
from .schemas import ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _next_timestamp(previous: datetime) -> datetime:
    """A timestamp strictly later than ``previous``, even on a coarse clock."""
    now = _utcnow()
    if previous.tzinfo is None:
        previous = previous.replace(tzinfo=timezone.utc)
    if now <= previous:
        now = previous + timedelta(microseconds=1)
    return now


def _validate(schema, fields: Any) -> BaseModel:
    if not isinstance(fields, Mapping):
        raise ValidationError(["body: Input should be a JSON object"])
    try:
        return schema.model_validate(dict(fields))
    except PydanticValidationError as e:
        messages = format_validation_errors(e.errors())
        logger.warning(f"Product Service: Validation failed: {messages}")
        raise ValidationError(messages) from e


def _normalize_id(product_id: Any) -> str:
    """Ids are UUID hex strings; anything that does not parse cannot exist."""
    try:
        return uuid.UUID(str(product_id)).hex
    except ValueError:
        logger.warning(f"Product Service: Malformed product ID '{product_id}'.")
        raise NotFoundError(str(product_id)) from None


def _storage_failure(db: Session, action: str, e: Exception) -> StorageError:
    db.rollback()
    logger.error(f"Product Service: Error while trying to {action}: {e}", exc_info=True)
    return StorageError(f"Could not {action}.")


def _get_or_raise(db: Session, product_id: Any) -> Product:
    normalized_id = _normalize_id(product_id)
    try:
        product = db.query(Product).filter(Product.id == normalized_id).first()
    except SQLAlchemyError as e:
        raise _storage_failure(db, f"fetch product {normalized_id}", e) from e
    if product is None:
        logger.warning(f"Product Service: Product with ID {normalized_id} not found.")
        raise NotFoundError(normalized_id)
    return product


def create_product(db: Session, fields: Any) -> Product:
    """Validate ``fields`` and persist a new product with a fresh id."""
    data = _validate(ProductCreate, fields)
    now = _utcnow()
    product = Product(
        id=uuid.uuid4().hex,
        name=data.name,
        price=data.price,
        category=data.category,
        created_at=now,
        updated_at=now,
    )
    try:
        db.add(product)
        db.commit()
        db.refresh(product)
    except SQLAlchemyError as e:
        raise _storage_failure(db, "create product", e) from e
    logger.info(
        f"Product Service: Product '{product.name}' (ID: {product.id}) created successfully."
    )
    return product


def list_products(db: Session) -> List[Product]:
    try:
        products = db.query(Product).order_by(Product.seq).all()
    except SQLAlchemyError as e:
        raise _storage_failure(db, "list products", e) from e
    logger.info(f"Product Service: Retrieved {len(products)} products.")
    return products


def get_product(db: Session, product_id: Any) -> Product:
    product = _get_or_raise(db, product_id)
    logger.info(f"Product Service: Retrieved product with ID {product.id}.")
    return product


def update_product(db: Session, product_id: Any, fields: Any) -> Product:
    """
    Apply the supplied subset of fields. Only those fields and ``updated_at``
    change; validation happens before the lookup.
    """
    data = _validate(ProductUpdate, fields)
    update_data = data.model_dump(exclude_unset=True)
    product = _get_or_raise(db, product_id)

    for key, value in update_data.items():
        setattr(product, key, value)
    product.updated_at = _next_timestamp(product.updated_at)

    try:
        db.commit()
        db.refresh(product)
    except SQLAlchemyError as e:
        raise _storage_failure(db, f"update product {product.id}", e) from e
    logger.info(
        f"Product Service: Product {product.id} updated successfully with {update_data}."
    )
    return product


def delete_product(db: Session, product_id: Any) -> None:
    product = _get_or_raise(db, product_id)
    deleted_id, deleted_name = product.id, product.name
    try:
        db.delete(product)
        db.commit()
    except SQLAlchemyError as e:
        raise _storage_failure(db, f"delete product {deleted_id}", e) from e
    logger.info(
        f"Product Service: Product {deleted_id} deleted successfully. Name: {deleted_name}"
    )
