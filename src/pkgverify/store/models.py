"""
Baseline store models.

SQLAlchemy ORM models for products, packages and approved releases.
"""

from __future__ import annotations

from sqlalchemy import (
    Boolean,
    Column,
    ForeignKey,
    Integer,
    String,
    create_engine,
)
from sqlalchemy.orm import DeclarativeBase, relationship


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class Product(Base):
    """
    Known OS release.

    The name is the product key, e.g. "Ubuntu 20.04".
    """

    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String(128), unique=True, nullable=False, index=True)

    versions = relationship("Version", back_populates="product")


class Package(Base):
    """Known software package, independent of any product."""

    __tablename__ = "packages"

    id = Column(Integer, primary_key=True)
    name = Column(String(128), unique=True, nullable=False, index=True)

    versions = relationship("Version", back_populates="package")


class Version(Base):
    """
    Approved release of a package on a product.

    Zero or more rows per (product, package) pair.
    """

    __tablename__ = "versions"

    id = Column(Integer, primary_key=True)
    product_id = Column(
        "product",
        Integer,
        ForeignKey("products.id"),
        nullable=False,
        index=True,
    )
    package_id = Column(
        "package",
        Integer,
        ForeignKey("packages.id"),
        nullable=False,
        index=True,
    )
    release = Column(String(128), nullable=False)
    security = Column(Boolean, default=False, nullable=False)

    product = relationship("Product", back_populates="versions")
    package = relationship("Package", back_populates="versions")


def init_db(uri: str) -> None:
    """
    Create the baseline tables.

    Used to provision development and test databases.

    Args:
        uri: SQLAlchemy database URI
    """
    engine = create_engine(uri)
    try:
        Base.metadata.create_all(engine)
    finally:
        engine.dispose()
