# product_service/main.py

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session

from . import crud
from .config import Settings, get_settings
from .db import create_db_engine, create_session_factory, get_db, init_database
from .errors import register_exception_handlers
from .schemas import (
    MessageEnvelope,
    ProductEnvelope,
    ProductListEnvelope,
    ProductResponse,
)

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    # basicConfig is a no-op once handlers exist; the level still has to apply.
    logging.getLogger().setLevel(numeric_level)
    # Suppress noisy logs from third-party libraries for cleaner output
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.error").setLevel(logging.INFO)


service_router = APIRouter()
products_router = APIRouter(prefix="/api/products", tags=["Products"])


@service_router.get("/", status_code=status.HTTP_200_OK, summary="Root endpoint")
async def read_root():
    return {"message": "Welcome to the Product Service!"}


@service_router.get(
    "/health", status_code=status.HTTP_200_OK, summary="Health check endpoint"
)
async def health_check():
    return {"status": "ok", "service": "product-service"}


@products_router.get(
    "",
    response_model=ProductListEnvelope,
    summary="Retrieve a list of all products",
)
def list_products(db: Session = Depends(get_db)):
    logger.info("Product Service: Listing products")
    products = crud.list_products(db)
    return ProductListEnvelope(
        count=len(products),
        data=[ProductResponse.model_validate(p) for p in products],
    )


@products_router.get(
    "/{product_id}",
    response_model=ProductEnvelope,
    response_model_exclude_none=True,
    summary="Retrieve a single product by ID",
)
def get_product(product_id: str, db: Session = Depends(get_db)):
    logger.info(f"Product Service: Fetching product with ID: {product_id}")
    product = crud.get_product(db, product_id)
    return ProductEnvelope(data=ProductResponse.model_validate(product))


@products_router.post(
    "",
    response_model=ProductEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new product",
)
def create_product(payload: Dict[str, Any] = Body(...), db: Session = Depends(get_db)):
    """
    Creates a new product. The body must hold ``name``, ``price`` and ``category``.
    """
    logger.info(f"Product Service: Creating product: {payload.get('name')}")
    product = crud.create_product(db, payload)
    return ProductEnvelope(
        message="Product created successfully",
        data=ProductResponse.model_validate(product),
    )


@products_router.put(
    "/{product_id}",
    response_model=ProductEnvelope,
    summary="Update an existing product by ID",
)
def update_product(
    product_id: str,
    payload: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
):
    """
    Any subset of ``name``, ``price`` and ``category`` may be supplied.
    """
    logger.info(
        f"Product Service: Updating product with ID: {product_id} with data: {payload}"
    )
    product = crud.update_product(db, product_id, payload)
    return ProductEnvelope(
        message="Product updated successfully",
        data=ProductResponse.model_validate(product),
    )


@products_router.delete(
    "/{product_id}",
    response_model=MessageEnvelope,
    summary="Delete a product by ID",
)
def delete_product(product_id: str, db: Session = Depends(get_db)):
    logger.info(f"Product Service: Attempting to delete product with ID: {product_id}")
    crud.delete_product(db, product_id)
    return MessageEnvelope(message="Product deleted successfully")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application. The database engine is created when the app
    starts and disposed when it shuts down; startup fails if the database
    cannot be reached.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = create_db_engine(settings.database_url)
        try:
            init_database(
                engine,
                max_retries=settings.db_connect_max_retries,
                retry_delay_seconds=settings.db_connect_retry_delay_seconds,
            )
        except Exception:
            engine.dispose()
            raise
        app.state.engine = engine
        app.state.session_factory = create_session_factory(engine)
        yield
        engine.dispose()
        logger.info("Product Service: Database connections closed.")

    app = FastAPI(
        title="Product Service API",
        description="CRUD API for products.",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(service_router, tags=["Service"])
    app.include_router(products_router)
    return app


app = create_app()
