"""
Verifier data models.

Defines endpoint identities, reported packages, per-package outcomes
and the aggregate verdict.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, NamedTuple, Union


class OSType(Enum):
    """Operating system family reported by the endpoint."""

    UNKNOWN = "unknown"
    DEBIAN = "debian"
    UBUNTU = "ubuntu"
    FEDORA = "fedora"
    REDHAT = "redhat"
    CENTOS = "centos"
    SUSE = "suse"
    GENTOO = "gentoo"
    LINUX = "linux"
    WINDOWS = "windows"
    ANDROID = "android"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_name(cls, name: str) -> OSType:
        """Convert an OS type name to its enum member."""
        try:
            return cls(name.lower().strip())
        except ValueError:
            raise ValueError(f"Unknown OS type: {name}") from None


@dataclass(frozen=True)
class EndpointIdentity:
    """
    Normalized OS identity of an endpoint.

    os_version may carry trailing platform info after a space,
    e.g. "20.04 LTS".
    """

    os_type: OSType
    os_name: str
    os_version: str


class ReportedPackage(NamedTuple):
    """A package installed on the endpoint."""

    name: str
    version: str


class OutcomeKind(Enum):
    """Discriminator for package outcomes."""

    OK = "ok"
    MISMATCH = "mismatch"
    PACKAGE_UNKNOWN = "package_unknown"
    PRODUCT_UNKNOWN = "product_unknown"

    def __str__(self) -> str:
        return self.value


class UnknownReason(Enum):
    """Why the baseline has no data for a package."""

    NO_PACKAGE = "no_package"  # name not in the baseline at all
    NO_RELEASE = "no_release"  # known package, nothing approved for this product

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Ok:
    """Reported version is an approved release."""

    security_relevant: bool = False
    kind: OutcomeKind = field(default=OutcomeKind.OK, init=False)


@dataclass(frozen=True)
class Mismatch:
    """Approved releases exist but none equals the reported version."""

    kind: OutcomeKind = field(default=OutcomeKind.MISMATCH, init=False)


@dataclass(frozen=True)
class PackageUnknown:
    """The baseline has no approved release data for the package."""

    reason: UnknownReason = UnknownReason.NO_PACKAGE
    kind: OutcomeKind = field(default=OutcomeKind.PACKAGE_UNKNOWN, init=False)


@dataclass(frozen=True)
class ProductUnknown:
    """The endpoint's product has no baseline at all."""

    product_key: str = ""
    kind: OutcomeKind = field(default=OutcomeKind.PRODUCT_UNKNOWN, init=False)


PackageOutcome = Union[Ok, Mismatch, PackageUnknown, ProductUnknown]


@dataclass(frozen=True)
class PackageResult:
    """Outcome for a single reported package."""

    name: str
    version: str
    outcome: PackageOutcome

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        result: dict[str, Any] = {
            "name": self.name,
            "version": self.version,
            "outcome": self.outcome.kind.value,
        }
        if isinstance(self.outcome, Ok):
            result["security_relevant"] = self.outcome.security_relevant
        elif isinstance(self.outcome, PackageUnknown):
            result["reason"] = self.outcome.reason.value
        return result


class OverallStatus(Enum):
    """Overall status of a verification pass."""

    OK = "ok"
    VERIFY_ERROR = "verify_error"
    PRODUCT_UNKNOWN = "product_unknown"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class VerificationVerdict:
    """
    Result of a verification pass.

    Counts always satisfy total == ok + mismatch + unknown.
    """

    status: OverallStatus
    product_key: str
    results: tuple[PackageResult, ...] = ()
    total: int = 0
    ok: int = 0
    mismatch: int = 0
    unknown: int = 0

    @classmethod
    def from_results(
        cls,
        status: OverallStatus,
        product_key: str,
        results: Iterable[PackageResult],
    ) -> VerificationVerdict:
        """Build a verdict, tallying the outcome counts."""
        results = tuple(results)
        counts = {kind: 0 for kind in OutcomeKind}
        for result in results:
            counts[result.outcome.kind] += 1

        return cls(
            status=status,
            product_key=product_key,
            results=results,
            total=len(results),
            ok=counts[OutcomeKind.OK],
            mismatch=counts[OutcomeKind.MISMATCH],
            unknown=counts[OutcomeKind.PACKAGE_UNKNOWN]
            + counts[OutcomeKind.PRODUCT_UNKNOWN],
        )

    @property
    def is_compliant(self) -> bool:
        """Check if the endpoint passed verification."""
        return self.status == OverallStatus.OK

    @property
    def security_relevant(self) -> list[PackageResult]:
        """Packages that matched a security-relevant release."""
        return [
            r for r in self.results
            if isinstance(r.outcome, Ok) and r.outcome.security_relevant
        ]

    @property
    def mismatches(self) -> list[PackageResult]:
        """Packages whose version is not an approved release."""
        return [r for r in self.results if isinstance(r.outcome, Mismatch)]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "status": self.status.value,
            "product_key": self.product_key,
            "total": self.total,
            "ok": self.ok,
            "mismatch": self.mismatch,
            "unknown": self.unknown,
            "results": [r.to_dict() for r in self.results],
        }
