"""
pkgverify - package compliance verdict engine.

Checks the software inventory reported by an endpoint against a baseline
of approved package releases and produces a verdict for network admission.
"""

__version__ = "0.1.0"
__author__ = "pkgverify Contributors"

from pkgverify.config import PkgVerifyConfig, load_config
from pkgverify.store import BaselineStore, StoreUnavailable
from pkgverify.verifier import (
    ComplianceVerifier,
    EndpointIdentity,
    OSType,
    OverallStatus,
    ReportedPackage,
    VerificationVerdict,
)

__all__ = [
    "BaselineStore",
    "ComplianceVerifier",
    "EndpointIdentity",
    "OSType",
    "OverallStatus",
    "PkgVerifyConfig",
    "ReportedPackage",
    "StoreUnavailable",
    "VerificationVerdict",
    "load_config",
    "__version__",
]
