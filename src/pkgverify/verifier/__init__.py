"""
Compliance Verifier.

Resolves an endpoint's product, checks each reported package against
the approved releases in the baseline and aggregates a verdict.
"""

from pkgverify.verifier.engine import (
    DEFAULT_VERSION_INDEPENDENT,
    BaselineLookup,
    ComplianceVerifier,
    product_key,
)
from pkgverify.verifier.models import (
    EndpointIdentity,
    Mismatch,
    Ok,
    OSType,
    OutcomeKind,
    OverallStatus,
    PackageOutcome,
    PackageResult,
    PackageUnknown,
    ProductUnknown,
    ReportedPackage,
    UnknownReason,
    VerificationVerdict,
)

__all__ = [
    # Engine
    "DEFAULT_VERSION_INDEPENDENT",
    "BaselineLookup",
    "ComplianceVerifier",
    "product_key",
    # Models
    "EndpointIdentity",
    "Mismatch",
    "Ok",
    "OSType",
    "OutcomeKind",
    "OverallStatus",
    "PackageOutcome",
    "PackageResult",
    "PackageUnknown",
    "ProductUnknown",
    "ReportedPackage",
    "UnknownReason",
    "VerificationVerdict",
]
