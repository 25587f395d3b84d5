"""
pkgverify Command Line Interface.

Provides commands for checking endpoints against the baseline:
- check: Verify an inventory report
- releases: List approved releases of a package on a product
- config: Show and validate the effective configuration

Exit codes: 0 compliant, 1 verify error, 2 unknown product,
3 store unavailable or invalid input, 4 unknown package (releases only).
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from pkgverify import __version__
from pkgverify.config import PkgVerifyConfig, load_config, setup_logging, validate_config
from pkgverify.schemas import InventoryReport, verdict_to_response
from pkgverify.store.database import BaselineStore, StoreUnavailable
from pkgverify.verifier.engine import ComplianceVerifier
from pkgverify.verifier.models import Ok, OverallStatus


EXIT_OK = 0
EXIT_VERIFY_ERROR = 1
EXIT_PRODUCT_UNKNOWN = 2
EXIT_FAILURE = 3
EXIT_PACKAGE_UNKNOWN = 4

STATUS_EXIT_CODES = {
    OverallStatus.OK: EXIT_OK,
    OverallStatus.VERIFY_ERROR: EXIT_VERIFY_ERROR,
    OverallStatus.PRODUCT_UNKNOWN: EXIT_PRODUCT_UNKNOWN,
}


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        prog="pkgverify",
        description="Package compliance verdict engine",
    )
    parser.add_argument(
        "-V", "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-c", "--config",
        metavar="FILE",
        help="Path to configuration file",
    )
    parser.add_argument(
        "-d", "--database",
        metavar="URI",
        help="Baseline database URI (overrides configuration)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output in JSON format",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # check command
    check_parser = subparsers.add_parser("check", help="Verify an inventory report")
    check_parser.add_argument("report", help="YAML or JSON inventory report")
    check_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show the outcome of every package",
    )
    check_parser.set_defaults(func=cmd_check)

    # releases command
    releases_parser = subparsers.add_parser(
        "releases", help="List approved releases of a package"
    )
    releases_parser.add_argument("product", help='Product key, e.g. "Ubuntu 20.04"')
    releases_parser.add_argument("package", help="Package name")
    releases_parser.set_defaults(func=cmd_releases)

    # config command
    config_parser = subparsers.add_parser("config", help="Show configuration")
    config_parser.set_defaults(func=cmd_config)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


def open_store(args: argparse.Namespace, config: PkgVerifyConfig) -> BaselineStore:
    """Open the baseline store, preferring --database over the config."""
    uri = args.database or config.database.uri
    return BaselineStore.open(uri, **config.database.engine_options())


def output(data: Any, args: argparse.Namespace) -> None:
    """Output data in requested format."""
    if getattr(args, "json", False):
        print(json.dumps(data, indent=2, default=str))
    elif isinstance(data, dict):
        for key, value in data.items():
            print(f"{key}: {value}")
    elif isinstance(data, list):
        for item in data:
            print(f"  {item}")
    else:
        print(data)


def load_report(path: str | Path) -> InventoryReport:
    """
    Load an inventory report from file.

    Raises:
        FileNotFoundError: If file doesn't exist
        yaml.YAMLError: If file is not valid YAML/JSON
        ValidationError: If the report has the wrong shape
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Report file not found: {path}")

    # BaseLoader keeps every scalar a string, so "1.10" stays "1.10"
    with open(path) as f:
        data = yaml.load(f, Loader=yaml.BaseLoader) or {}

    return InventoryReport.model_validate(data)


def cmd_check(args: argparse.Namespace) -> int:
    """Verify an inventory report against the baseline."""
    try:
        config = load_config(args.config)
    except (FileNotFoundError, yaml.YAMLError, TypeError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_FAILURE
    setup_logging(config.logging)

    try:
        report = load_report(args.report)
    except (FileNotFoundError, yaml.YAMLError, ValidationError) as e:
        print(f"Invalid report: {e}", file=sys.stderr)
        return EXIT_FAILURE

    try:
        version_independent = config.verifier.os_types()
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return EXIT_FAILURE

    try:
        with open_store(args, config) as store:
            verifier = ComplianceVerifier(store, version_independent)
            verdict = verifier.verify(report.identity(), report.iter_packages())
    except StoreUnavailable as e:
        print(f"Verification could not be performed: {e}", file=sys.stderr)
        return EXIT_FAILURE

    if getattr(args, "json", False):
        output(verdict_to_response(verdict).model_dump(), args)
    else:
        print(f"Product: {verdict.product_key}")
        print("=" * 40)
        print(f"Status:    {verdict.status.value.upper()}")
        print(f"Total:     {verdict.total}")
        print(f"Ok:        {verdict.ok}")
        print(f"Mismatch:  {verdict.mismatch}")
        print(f"Unknown:   {verdict.unknown}")

        shown = verdict.results if args.verbose else verdict.mismatches
        if shown:
            print()
        for result in shown:
            outcome = result.outcome
            marker = " [s]" if isinstance(outcome, Ok) and outcome.security_relevant else ""
            print(f"  {result.name} ({result.version}): {outcome.kind}{marker}")

    return STATUS_EXIT_CODES[verdict.status]


def cmd_releases(args: argparse.Namespace) -> int:
    """List approved releases of a package on a product."""
    try:
        config = load_config(args.config)
    except (FileNotFoundError, yaml.YAMLError, TypeError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_FAILURE

    try:
        with open_store(args, config) as store:
            product_ids = list(store.find_product_id(args.product))
            if not product_ids:
                print(f"Product not found: {args.product}")
                return EXIT_PRODUCT_UNKNOWN

            package_ids = list(store.find_package_id(args.package))
            if not package_ids:
                print(f"Package not found: {args.package}")
                return EXIT_PACKAGE_UNKNOWN

            releases = [
                {"release": r.release, "security": r.security_relevant}
                for r in store.find_approved_releases(product_ids[0], package_ids[0])
            ]
    except StoreUnavailable as e:
        print(f"Baseline store unavailable: {e}", file=sys.stderr)
        return EXIT_FAILURE

    if getattr(args, "json", False):
        output(releases, args)
    else:
        print(f"Approved releases of {args.package} on {args.product}")
        print("=" * 40)
        for r in releases:
            print(f"  {r['release']}{' [s]' if r['security'] else ''}")
        if not releases:
            print("  (none)")

    return EXIT_OK


def cmd_config(args: argparse.Namespace) -> int:
    """Show and validate configuration."""
    try:
        config = load_config(args.config)
    except (FileNotFoundError, yaml.YAMLError, TypeError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_FAILURE

    if args.database:
        config.database.uri = args.database

    output(asdict(config), args)

    errors = validate_config(config)
    for error in errors:
        print(f"Error: {error}", file=sys.stderr)

    return EXIT_FAILURE if errors else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
