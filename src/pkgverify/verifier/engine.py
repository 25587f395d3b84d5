"""
Compliance Verifier.

Checks an endpoint's package inventory against the approved releases
recorded in the baseline store and determines the verdict.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, Protocol, TypeVar

from pkgverify.store.database import ApprovedRelease
from pkgverify.verifier.models import (
    EndpointIdentity,
    Mismatch,
    Ok,
    OSType,
    OverallStatus,
    PackageOutcome,
    PackageResult,
    PackageUnknown,
    ProductUnknown,
    UnknownReason,
    VerificationVerdict,
)


logger = logging.getLogger(__name__)

T = TypeVar("T")

# OS types whose packages do not depend on the OS version
DEFAULT_VERSION_INDEPENDENT = frozenset({OSType.ANDROID})


class BaselineLookup(Protocol):
    """Lookups the verifier needs from a baseline store."""

    def find_product_id(self, product_key: str) -> Iterator[int]: ...

    def find_package_id(self, package_name: str) -> Iterator[int]: ...

    def find_approved_releases(
        self, product_id: int, package_id: int
    ) -> Iterator[ApprovedRelease]: ...


def product_key(
    identity: EndpointIdentity,
    version_independent: Iterable[OSType] = DEFAULT_VERSION_INDEPENDENT,
) -> str:
    """
    Derive the baseline product key for an endpoint.

    Appended platform info after the first space of the OS version is
    dropped. Version-independent OS types get an empty version part.

    Args:
        identity: Endpoint OS identity
        version_independent: OS types without version-scoped packages

    Returns:
        Product key, e.g. "Ubuntu 20.04" or "Android "
    """
    if identity.os_type in frozenset(version_independent):
        version = ""
    else:
        version = identity.os_version.split(" ", 1)[0]
    return f"{identity.os_name} {version}"


def _first(rows: Iterable[T]) -> T | None:
    """Take the first row of a lookup and release the rest."""
    rows = iter(rows)
    try:
        return next(rows, None)
    finally:
        close = getattr(rows, "close", None)
        if close is not None:
            close()


class ComplianceVerifier:
    """
    Package compliance verification engine.

    Stateless between calls; the store handle is borrowed, not owned.
    """

    def __init__(
        self,
        store: BaselineLookup,
        version_independent: Iterable[OSType] = DEFAULT_VERSION_INDEPENDENT,
    ) -> None:
        """
        Initialize the verifier.

        Args:
            store: Baseline store to query
            version_independent: OS types whose product key has no version
        """
        self.store = store
        self.version_independent = frozenset(version_independent)

    def verify(
        self,
        identity: EndpointIdentity,
        packages: Iterable[tuple[str, str]],
    ) -> VerificationVerdict:
        """
        Verify an endpoint's package inventory.

        The inventory is consumed exactly once, in order.

        Args:
            identity: Endpoint OS identity
            packages: (name, version) pairs, e.g. ReportedPackage items

        Returns:
            VerificationVerdict with per-package outcomes and counts

        Raises:
            StoreUnavailable: If any store query fails
        """
        key = product_key(identity, self.version_independent)
        product_id = _first(self.store.find_product_id(key))

        if product_id is None:
            logger.info("No baseline for product '%s'", key)
            outcome = ProductUnknown(key)
            return VerificationVerdict.from_results(
                OverallStatus.PRODUCT_UNKNOWN,
                key,
                (PackageResult(name, version, outcome) for name, version in packages),
            )

        status = OverallStatus.OK
        results = []
        for name, version in packages:
            outcome = self._check_package(product_id, name, version)
            if isinstance(outcome, Mismatch):
                status = OverallStatus.VERIFY_ERROR
            results.append(PackageResult(name, version, outcome))

        verdict = VerificationVerdict.from_results(status, key, results)
        logger.info(
            "Processed %d packages: %d no match, %d ok, %d not found",
            verdict.total, verdict.mismatch, verdict.ok, verdict.unknown
        )
        return verdict

    def _check_package(
        self,
        product_id: int,
        name: str,
        version: str,
    ) -> PackageOutcome:
        """Classify one reported package against its approved releases."""
        package_id = _first(self.store.find_package_id(name))
        if package_id is None:
            logger.debug("Package '%s' (%s) not found", name, version)
            return PackageUnknown(UnknownReason.NO_PACKAGE)

        found = False
        matched: ApprovedRelease | None = None
        for approved in self.store.find_approved_releases(product_id, package_id):
            found = True
            if matched is None and approved.release == version:
                matched = approved

        if not found:
            logger.debug(
                "Package '%s' (%s) has no approved release for this product",
                name, version
            )
            return PackageUnknown(UnknownReason.NO_RELEASE)

        if matched is None:
            logger.info("Package '%s' (%s) no match", name, version)
            return Mismatch()

        logger.debug(
            "Package '%s' (%s)%s is ok",
            name, version, " [s]" if matched.security_relevant else ""
        )
        return Ok(matched.security_relevant)
