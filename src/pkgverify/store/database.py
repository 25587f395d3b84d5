"""
Baseline Store Operations.

Provides the read-only lookups the compliance verifier needs against the
baseline of known products, packages and approved releases.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator, NamedTuple

from sqlalchemy import Select, create_engine, event, inspect, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from pkgverify.store.models import Package, Product, Version


logger = logging.getLogger(__name__)

REQUIRED_TABLES = ("products", "packages", "versions")


class PkgVerifyError(Exception):
    """Base class for pkgverify errors."""

    pass


class StoreUnavailable(PkgVerifyError):
    """
    The baseline store could not be queried.

    Raised for connection failures, malformed queries and use after close.
    """

    def __init__(self, operation: str, reason: str) -> None:
        self.operation = operation
        self.reason = reason
        super().__init__(f"{operation}: {reason}")


class ApprovedRelease(NamedTuple):
    """An approved release of a package on a product."""

    release: str
    security_relevant: bool


def _enable_query_only(dbapi_connection, connection_record):
    """Put SQLite connections in read-only mode."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA query_only=ON")
    cursor.close()


class BaselineStore:
    """
    Read-only interface to the baseline store.

    Owns the SQLAlchemy engine for its whole lifetime. Every lookup returns
    a lazy iterator; an empty iterator means "not in the baseline".
    """

    def __init__(self, engine: Engine) -> None:
        """
        Wrap an already connected engine.

        Use BaselineStore.open() instead of calling this directly.
        """
        self._engine: Engine | None = engine

    @classmethod
    def open(cls, uri: str, **engine_options: Any) -> BaselineStore:
        """
        Connect to the baseline store.

        Args:
            uri: SQLAlchemy database URI
            **engine_options: Extra keyword arguments for create_engine

        Returns:
            Connected BaselineStore

        Raises:
            StoreUnavailable: If the URI is malformed, its driver is missing,
                the store cannot be reached or it lacks the baseline tables
        """
        engine = None
        try:
            engine = create_engine(uri, **engine_options)
            if engine.dialect.name == "sqlite":
                event.listen(engine, "connect", _enable_query_only)

            inspector = inspect(engine)
            missing = [t for t in REQUIRED_TABLES if not inspector.has_table(t)]
        except (SQLAlchemyError, ImportError) as e:
            # ImportError: the dialect's DBAPI driver is not installed
            if engine is not None:
                engine.dispose()
            logger.error("Failed to connect to baseline store '%s': %s", uri, e)
            raise StoreUnavailable("open", str(e)) from e

        if missing:
            engine.dispose()
            logger.error(
                "Baseline store '%s' is missing tables: %s",
                uri, ", ".join(missing)
            )
            raise StoreUnavailable("open", f"missing tables: {', '.join(missing)}")

        logger.debug("Connected to baseline store: %s", engine.url)
        return cls(engine)

    @property
    def closed(self) -> bool:
        """Whether close() has been called."""
        return self._engine is None

    def _query(self, operation: str, statement: Select) -> Iterator[Any]:
        """Execute a statement and yield its rows."""
        if self._engine is None:
            raise StoreUnavailable(operation, "store is closed")

        try:
            with self._engine.connect() as conn:
                for row in conn.execute(statement):
                    yield row
        except SQLAlchemyError as e:
            logger.error("Baseline query %s failed: %s", operation, e)
            raise StoreUnavailable(operation, str(e)) from e

    def find_product_id(self, product_key: str) -> Iterator[int]:
        """
        Look up a product by exact name.

        Args:
            product_key: Product key, e.g. "Ubuntu 20.04"

        Yields:
            Matching product ids
        """
        statement = select(Product.id).where(Product.name == product_key)
        for row in self._query("find_product_id", statement):
            yield row.id

    def find_package_id(self, package_name: str) -> Iterator[int]:
        """
        Look up a package by exact name.

        Args:
            package_name: Package name as reported by the endpoint

        Yields:
            Matching package ids
        """
        statement = select(Package.id).where(Package.name == package_name)
        for row in self._query("find_package_id", statement):
            yield row.id

    def find_approved_releases(
        self,
        product_id: int,
        package_id: int,
    ) -> Iterator[ApprovedRelease]:
        """
        Get every approved release of a package on a product.

        Args:
            product_id: Product id from find_product_id()
            package_id: Package id from find_package_id()

        Yields:
            ApprovedRelease rows, in no particular order
        """
        statement = select(Version.release, Version.security).where(
            Version.product_id == product_id,
            Version.package_id == package_id,
        )
        for row in self._query("find_approved_releases", statement):
            yield ApprovedRelease(row.release, bool(row.security))

    def close(self) -> None:
        """Close database connections."""
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None

    def __enter__(self) -> BaselineStore:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
