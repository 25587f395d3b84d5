"""
Pytest configuration and shared fixtures for pkgverify tests.
"""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Generator

import pytest
import yaml
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from pkgverify.store.database import BaselineStore
from pkgverify.store.models import Package, Product, Version, init_db
from pkgverify.verifier.models import EndpointIdentity, OSType


UBUNTU_ID = 7
ANDROID_ID = 8
UBUNTU_2010_ID = 9

# (package, release, security) per product
BASELINE = {
    (UBUNTU_ID, "Ubuntu 20.04"): [
        ("openssl", "1.1.1f", False),
        ("curl", "7.65.0", False),
        ("bash", "5.0-6ubuntu1", False),
        ("bash", "5.0-6ubuntu1.1", True),
    ],
    (ANDROID_ID, "Android "): [
        ("com.example.mail", "2.1", False),
    ],
    (UBUNTU_2010_ID, "Ubuntu 20.10"): [
        ("zlib", "1.10", False),
    ],
}

# Known to the baseline but without releases for any product
EXTRA_PACKAGES = ["libc6"]


def seed_baseline(uri: str) -> None:
    """Create and fill a baseline database."""
    init_db(uri)
    engine = create_engine(uri)
    try:
        with Session(engine) as session:
            packages: dict[str, Package] = {}
            for (product_id, name), rows in BASELINE.items():
                product = Product(id=product_id, name=name)
                session.add(product)
                for package_name, release, security in rows:
                    if package_name not in packages:
                        packages[package_name] = Package(name=package_name)
                        session.add(packages[package_name])
                    session.add(Version(
                        product=product,
                        package=packages[package_name],
                        release=release,
                        security=security,
                    ))
            for package_name in EXTRA_PACKAGES:
                session.add(Package(name=package_name))
            session.commit()
    finally:
        engine.dispose()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def baseline_uri(temp_dir: Path) -> str:
    """Create a seeded SQLite baseline and return its URI."""
    uri = f"sqlite:///{temp_dir / 'baseline.db'}"
    seed_baseline(uri)
    return uri


@pytest.fixture
def store(baseline_uri: str) -> Generator[BaselineStore, None, None]:
    """Open the seeded baseline store."""
    store = BaselineStore.open(baseline_uri)
    yield store
    store.close()


@pytest.fixture
def ubuntu() -> EndpointIdentity:
    """Ubuntu endpoint with appended platform info."""
    return EndpointIdentity(OSType.UBUNTU, "Ubuntu", "20.04 LTS")


@pytest.fixture
def android() -> EndpointIdentity:
    """Android endpoint."""
    return EndpointIdentity(OSType.ANDROID, "Android", "11 RP1A.200720.012")


@pytest.fixture
def sample_config(temp_dir: Path, baseline_uri: str) -> Path:
    """Create a sample configuration file."""
    config_path = temp_dir / "pkgverify.yaml"
    config_data = {
        "database": {
            "uri": baseline_uri,
            "pool_pre_ping": False,
        },
        "verifier": {
            "version_independent_os_types": ["android"],
        },
        "logging": {
            "level": "debug",
        },
    }
    with open(config_path, "w") as f:
        yaml.dump(config_data, f)
    return config_path


@pytest.fixture
def sample_report(temp_dir: Path) -> Path:
    """Create a sample inventory report."""
    report_path = temp_dir / "report.yaml"
    report_data = {
        "os": {"type": "ubuntu", "name": "Ubuntu", "version": "20.04 LTS"},
        "packages": [
            {"name": "openssl", "version": "1.1.1f"},
            {"name": "curl", "version": "7.68.0"},
        ],
    }
    with open(report_path, "w") as f:
        yaml.dump(report_data, f)
    return report_path
