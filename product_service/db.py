# product_service/db.py

import logging
import time
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .errors import StorageError

logger = logging.getLogger(__name__)

Base = declarative_base()


def create_db_engine(database_url: str) -> Engine:
    """Create the process-wide engine; the driver owns connection pooling."""
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        # In-memory SQLite lives inside a single connection.
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)
    return create_engine(database_url, pool_pre_ping=True)


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_database(
    engine: Engine, max_retries: int = 10, retry_delay_seconds: float = 5.0
) -> None:
    """
    Verify the database is reachable and make sure the tables exist.
    Raises StorageError once every attempt has failed.
    """
    attempts = max(1, max_retries)
    for i in range(attempts):
        try:
            logger.info(
                f"Product Service: Attempting to connect to the database and create tables (attempt {i+1}/{attempts})..."
            )
            with engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            Base.metadata.create_all(bind=engine)
            logger.info(
                "Product Service: Successfully connected to the database and ensured tables exist."
            )
            return
        except OperationalError as e:
            logger.warning(f"Product Service: Failed to connect to the database: {e}")
            if i < attempts - 1:
                logger.info(
                    f"Product Service: Retrying in {retry_delay_seconds} seconds..."
                )
                time.sleep(retry_delay_seconds)

    logger.critical(
        f"Product Service: Failed to connect to the database after {attempts} attempts."
    )
    raise StorageError("Could not connect to the database.")


def get_db(request: Request) -> Iterator[Session]:
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
