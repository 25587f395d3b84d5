"""
Pydantic Schemas for inventory reports and verdicts.

Validates endpoint reports read from disk and serializes verdicts.
"""

from __future__ import annotations

from typing import Iterator

from pydantic import BaseModel, Field, field_validator

from pkgverify.verifier.models import (
    EndpointIdentity,
    OSType,
    PackageResult,
    ReportedPackage,
    VerificationVerdict,
)


# =============================================================================
# Inventory Schemas
# =============================================================================


class PackageIn(BaseModel):
    """A reported package."""

    name: str = Field(..., min_length=1)
    version: str


class OSInfoIn(BaseModel):
    """Reported OS identity."""

    type: OSType = OSType.UNKNOWN
    name: str = Field(..., min_length=1)
    version: str = ""

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v: object) -> object:
        """Accept OS type names in any case."""
        return v.lower().strip() if isinstance(v, str) else v


class InventoryReport(BaseModel):
    """An endpoint's OS identity and installed packages."""

    os: OSInfoIn
    packages: list[PackageIn] = Field(default_factory=list)

    def identity(self) -> EndpointIdentity:
        """Get the endpoint identity."""
        return EndpointIdentity(
            os_type=self.os.type,
            os_name=self.os.name,
            os_version=self.os.version,
        )

    def iter_packages(self) -> Iterator[ReportedPackage]:
        """Iterate over the reported packages."""
        for package in self.packages:
            yield ReportedPackage(package.name, package.version)


# =============================================================================
# Verdict Schemas
# =============================================================================


class PackageResultResponse(BaseModel):
    """Outcome for one package."""

    name: str
    version: str
    outcome: str
    security_relevant: bool | None = None
    reason: str | None = None


class VerdictResponse(BaseModel):
    """Verification verdict."""

    status: str
    product_key: str
    total: int
    ok: int
    mismatch: int
    unknown: int
    results: list[PackageResultResponse] = Field(default_factory=list)


def result_to_response(result: PackageResult) -> PackageResultResponse:
    """Convert a PackageResult to its response schema."""
    return PackageResultResponse(**result.to_dict())


def verdict_to_response(verdict: VerificationVerdict) -> VerdictResponse:
    """Convert a VerificationVerdict to its response schema."""
    return VerdictResponse(
        status=verdict.status.value,
        product_key=verdict.product_key,
        total=verdict.total,
        ok=verdict.ok,
        mismatch=verdict.mismatch,
        unknown=verdict.unknown,
        results=[result_to_response(r) for r in verdict.results],
    )
