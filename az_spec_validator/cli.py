"""
Command-line entry point: az-spec-validator validate all
"""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .categories import ALL_CATEGORY_NAMES, Category, build_enabled_categories
from .config import DEFAULT_OUTPUT, DEFAULT_SOURCE, ENV_PREFIX, Settings, resolve_settings
from .locator import find_spec_files
from .models import SpecValidatorError
from .report import ProgressDisplay, write_report
from .runner import SpecValidationRunner
from .schema import SchemaValidator

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="az-spec-validator",
        description="Validate Resource Manager API specifications",
        epilog=f"Every option can also be set through an {ENV_PREFIX}_<OPTION> environment variable.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    commands = parser.add_subparsers(dest="command", metavar="COMMAND")
    commands.required = True

    validate = commands.add_parser("validate", help="Validate API specifications")
    targets = validate.add_subparsers(dest="target", metavar="TARGET")
    targets.required = True

    all_parser = targets.add_parser(
        "all",
        help="Validate all API specifications",
        description="Validate all API specifications",
    )
    all_parser.add_argument(
        "-s", "--source",
        help=f"Source directory containing API specifications (default: {DEFAULT_SOURCE})",
    )
    all_parser.add_argument(
        "-o", "--output",
        help=f"Output file (default: {DEFAULT_OUTPUT})",
    )
    all_parser.add_argument(
        "-c", "--categories",
        action="append",
        help="Comma-separated categories of errors to validate; may be repeated "
             f"(available: {', '.join(ALL_CATEGORY_NAMES)})",
    )
    all_parser.add_argument(
        "--schema",
        help=f"Schema file used for {Category.SCHEMA_VALIDATION_FAILED.value} (default: official Swagger 2.0 schema)",
    )
    all_parser.add_argument("-v", "--verbose", action="store_true", default=None, help="Enable verbose logging")
    all_parser.set_defaults(handler=run_all_validations)
    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run_all_validations(settings: Settings) -> int:
    """Validate every specification under the source directory"""
    print("Validating all API specifications...")
    enabled = build_enabled_categories(settings.categories)
    logger.debug("Enabled categories: %s", enabled.as_dict())

    schema_validator = None
    if Category.SCHEMA_VALIDATION_FAILED in enabled:
        schema_validator = SchemaValidator(settings.schema)

    print(f"Source directory: {settings.source}")
    spec_files = find_spec_files(settings.source)
    print(f"Total number of files to validate: {len(spec_files)}")
    print("Validating files...")

    runner = SpecValidationRunner(enabled, schema_validator)
    with ProgressDisplay() as progress:
        report = runner.run(spec_files, subscribers=[progress])

    try:
        output_path = write_report(report, settings.output)
    except OSError as e:
        print(f"❌ Error writing report to {settings.output}: {e}")
        return 1
    print(f"📄 Report written to {output_path}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = resolve_settings(
            source=args.source,
            output=args.output,
            categories=args.categories,
            schema=args.schema,
            verbose=args.verbose,
        )
    except SpecValidatorError as e:
        print(f"❌ {e}")
        return 1

    configure_logging(settings.verbose)

    try:
        return args.handler(settings)
    except SpecValidatorError as e:
        print(f"❌ {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
