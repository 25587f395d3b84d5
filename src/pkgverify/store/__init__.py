"""
Baseline Store.

Read-only access to the baseline of known products, packages and
approved releases.
"""

from pkgverify.store.database import (
    ApprovedRelease,
    BaselineStore,
    PkgVerifyError,
    StoreUnavailable,
)
from pkgverify.store.models import Base, Package, Product, Version, init_db

__all__ = [
    # Database
    "ApprovedRelease",
    "BaselineStore",
    "PkgVerifyError",
    "StoreUnavailable",
    # Models
    "Base",
    "Package",
    "Product",
    "Version",
    "init_db",
]
