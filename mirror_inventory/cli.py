"""
Command-line interface for the mirror inventory tool.
"""

import argparse
import logging
import sys
from pathlib import Path

from .config import DEFAULT_PLATFORM, InventoryConfig, UnsupportedPlatformError, check_platform
from .history import DEFAULT_GIT_TIMEOUT, DEFAULT_MANIFEST
from .inventory import MirrorInventory, MirrorNotFoundError
from .models import ReportLabels
from .reporting import export_csv, export_worksheet, print_summary, write_report


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Inventory the package artifacts in a local mirror directory"
    )

    parser.add_argument(
        "--mirror-dir",
        required=True,
        help="Directory holding the mirrored wheels and source archives"
    )

    parser.add_argument(
        "--baseline",
        default=None,
        help="Integrity baseline JSON document with per-file hashes (optional)"
    )

    parser.add_argument(
        "--history-repo",
        default=None,
        help="Git repository of approved packages used for first-use dates (optional)"
    )

    parser.add_argument(
        "--manifest",
        default=DEFAULT_MANIFEST,
        help=f"Manifest path inside the history repository. Default: {DEFAULT_MANIFEST}"
    )

    parser.add_argument(
        "--output",
        default=None,
        help="Write the tab-separated report to this file instead of standard output"
    )

    parser.add_argument(
        "--csv",
        default=None,
        help="Also export the report as CSV to this path"
    )

    parser.add_argument(
        "--xlsx",
        default=None,
        help="Also export the report as an Excel worksheet to this path"
    )

    parser.add_argument(
        "--source-label",
        default=ReportLabels.source,
        help=f"Value of the Source column. Default: {ReportLabels.source}"
    )

    parser.add_argument(
        "--reviewer-label",
        default=ReportLabels.reviewer,
        help=f"Placeholder for the Reviewer column. Default: {ReportLabels.reviewer}"
    )

    parser.add_argument(
        "--installer-label",
        default=ReportLabels.installer,
        help=f"Placeholder for the Installer column. Default: {ReportLabels.installer}"
    )

    parser.add_argument(
        "--git-timeout",
        type=float,
        default=DEFAULT_GIT_TIMEOUT,
        help=f"Timeout in seconds for each git call. Default: {DEFAULT_GIT_TIMEOUT}"
    )

    parser.add_argument(
        "--platform",
        default=DEFAULT_PLATFORM,
        help=f"Host platform this tool is allowed to run on. Default: {DEFAULT_PLATFORM}"
    )

    parser.add_argument(
        "--skip-platform-check",
        action="store_true",
        help="Do not verify the host platform"
    )

    parser.add_argument(
        "--progress",
        action="store_true",
        help="Show progress bars while scanning"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )

    return parser


def main(argv=None):
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    config = InventoryConfig.from_args(args)

    try:
        if not args.skip_platform_check:
            check_platform(config.expected_platform)
        inventory = MirrorInventory(config)
        rows = inventory.build()
    except (MirrorNotFoundError, UnsupportedPlatformError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    output = Path(args.output) if args.output else None
    written = write_report(rows, output)
    if written:
        print_summary(rows, inventory.records)

        if args.csv:
            csv_file = export_csv(rows, Path(args.csv))
            print(f"CSV saved to: {csv_file}", file=sys.stderr)

        if args.xlsx:
            excel_file = export_worksheet(rows, Path(args.xlsx))
            print(f"Worksheet saved to: {excel_file}", file=sys.stderr)


if __name__ == "__main__":
    main()
