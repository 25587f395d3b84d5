"""
Tests for inventory and verdict schemas.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from pkgverify.schemas import InventoryReport, verdict_to_response
from pkgverify.verifier.models import (
    Mismatch,
    Ok,
    OSType,
    OverallStatus,
    PackageResult,
    PackageUnknown,
    ReportedPackage,
    UnknownReason,
    VerificationVerdict,
)


class TestInventoryReport:
    """Tests for InventoryReport validation."""

    def test_valid_report(self) -> None:
        """Test a complete report."""
        report = InventoryReport.model_validate({
            "os": {"type": "Ubuntu", "name": "Ubuntu", "version": "20.04 LTS"},
            "packages": [
                {"name": "openssl", "version": "1.1.1f"},
                {"name": "curl", "version": "7.68.0"},
            ],
        })

        identity = report.identity()
        assert identity.os_type == OSType.UBUNTU
        assert identity.os_version == "20.04 LTS"
        assert list(report.iter_packages()) == [
            ReportedPackage("openssl", "1.1.1f"),
            ReportedPackage("curl", "7.68.0"),
        ]

    def test_defaults(self) -> None:
        """Test OS type and packages are optional."""
        report = InventoryReport.model_validate({"os": {"name": "FancyOS"}})

        assert report.os.type == OSType.UNKNOWN
        assert report.os.version == ""
        assert report.packages == []

    def test_numeric_versions_rejected(self) -> None:
        """Test numbers are not silently turned into version strings."""
        with pytest.raises(ValidationError):
            InventoryReport.model_validate({
                "os": {"name": "Ubuntu", "version": 20.10},
                "packages": [],
            })
        with pytest.raises(ValidationError):
            InventoryReport.model_validate({
                "os": {"name": "Ubuntu", "version": "20.10"},
                "packages": [{"name": "foo", "version": 1.10}],
            })

    def test_unknown_os_type(self) -> None:
        """Test unknown OS types are rejected."""
        with pytest.raises(ValidationError):
            InventoryReport.model_validate({"os": {"type": "beos", "name": "BeOS"}})

    def test_missing_package_name(self) -> None:
        """Test packages need a name."""
        with pytest.raises(ValidationError):
            InventoryReport.model_validate({
                "os": {"name": "Ubuntu"},
                "packages": [{"name": "", "version": "1.0"}],
            })


class TestVerdictResponse:
    """Tests for verdict serialization."""

    def test_verdict_to_response(self) -> None:
        """Test converting a verdict to its response schema."""
        verdict = VerificationVerdict.from_results(
            OverallStatus.VERIFY_ERROR,
            "Ubuntu 20.04",
            [
                PackageResult("openssl", "1.1.1f", Ok(True)),
                PackageResult("curl", "7.68.0", Mismatch()),
                PackageResult("foo", "1.0", PackageUnknown(UnknownReason.NO_PACKAGE)),
            ],
        )

        response = verdict_to_response(verdict)

        assert response.status == "verify_error"
        assert (response.total, response.ok, response.mismatch, response.unknown) == (3, 1, 1, 1)
        assert response.results[0].security_relevant is True
        assert response.results[1].outcome == "mismatch"
        assert response.results[1].reason is None
        assert response.results[2].reason == "no_package"
