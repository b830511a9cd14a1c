"""Command-line interface for issue-archiver."""

import argparse
import json
import logging
import sys
from datetime import date, datetime, time, timezone
from pathlib import Path

from issue_archiver import __version__
from issue_archiver.assembly import DateWindow, categorize, order_descriptors
from issue_archiver.capture import LocalPDFCaptureAdapter
from issue_archiver.compilers import ArchivePackageWriter
from issue_archiver.config import DEFAULT_BASE_URL, ArchiveSettings
from issue_archiver.exceptions import PackageWriteError
from issue_archiver.pipeline import Orchestrator
from schemas.descriptor import ArticleDescriptor, NewsletterDescriptor, parse_descriptors

DEFAULT_OUTPUT_DIR = Path("./workspace/issues")


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the CLI."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def load_descriptors(path: Path) -> list[ArticleDescriptor | NewsletterDescriptor]:
    """Load descriptors from a JSON file.

    The file holds either a list of descriptors (``kind`` defaults to
    ``article``) or an object with ``articles`` and ``newsletters`` lists.

    Args:
        path: Path to the JSON file

    Returns:
        Validated descriptors in file order
    """
    data = json.loads(path.read_text())
    if isinstance(data, dict):
        data = [
            {**item, "kind": kind} if isinstance(item, dict) else item
            for key, kind in (("newsletters", "newsletter"), ("articles", "article"))
            for item in data.get(key, [])
        ]
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of descriptors in {path}")
    return parse_descriptors(data)


def _window(args: argparse.Namespace) -> DateWindow | None:
    """Build the newsletter window from --start/--end (midnight UTC)."""
    if args.start is None and args.end is None:
        return None
    if args.start is None or args.end is None:
        raise ValueError("Must specify both --start and --end")
    return DateWindow(
        start=datetime.combine(args.start, time.min, tzinfo=timezone.utc),
        end=datetime.combine(args.end, time.min, tzinfo=timezone.utc),
    )


def order_command(args: argparse.Namespace) -> int:
    """Execute the order command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        descriptors = load_descriptors(args.descriptors)
        ordered = order_descriptors(descriptors, _window(args))
    except Exception as e:
        logger.error(f"Failed to order descriptors: {e}")
        return 1

    for n, descriptor in enumerate(ordered, start=1):
        if isinstance(descriptor, NewsletterDescriptor):
            label = "newsletter"
        else:
            label = categorize(descriptor)
        print(f"{n}. [{label}] {descriptor.url}")

    return 0


def assemble_command(args: argparse.Namespace) -> int:
    """Execute the assemble command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success or no content, non-zero for errors)
    """
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    descriptors_path = args.descriptors.resolve()
    if not descriptors_path.exists():
        logger.error(f"Descriptors file not found: {descriptors_path}")
        return 1

    try:
        descriptors = load_descriptors(descriptors_path)
        window = _window(args)
        settings = ArchiveSettings.from_env(
            generate_images=True if args.images else None,
            rasterizer=args.rasterizer,
            dpi=args.dpi,
            image_quality=args.quality,
            volume_number=args.volume,
            issue_number=args.issue_number,
        )
    except Exception as e:
        logger.error(f"Invalid input: {e}")
        return 1

    if args.local:
        adapter = LocalPDFCaptureAdapter(base_dir=descriptors_path.parent)
    else:
        # WeasyPrint needs system libraries; only import it when rendering
        from issue_archiver.capture.web_adapter import WebCaptureAdapter

        adapter = WebCaptureAdapter(
            client_config={
                "base_url": args.base_url,
                "headers": {"User-Agent": f"issue-archiver/{__version__}"},
            }
        )

    result = Orchestrator(adapter, settings).run(
        descriptors, window=window, issue_date=args.date
    )

    if args.bundle_json:
        args.bundle_json.parent.mkdir(parents=True, exist_ok=True)
        args.bundle_json.write_text(result.model_dump_json(indent=2, exclude_none=True))
        logger.info(f"  Bundle JSON: {args.bundle_json}")

    for error in result.errors:
        logger.warning(f"    - {error}")

    if not result.ok:
        logger.error(f"Assembly failed at stage {result.stage}: {result.message}")
        return 1

    if result.no_content:
        logger.info(f"No content to archive: {result.message}")
        return 0

    writer = ArchivePackageWriter()
    output_dir = args.output
    try:
        if args.zip:
            output = writer.write_zip(result.bundle, output_dir / f"{result.issue_name}.zip")
        else:
            output = writer.write_tree(result.bundle, output_dir)
    except PackageWriteError as e:
        logger.error(str(e))
        return 1

    logger.info(f"Assembled issue: {result.issue_name}")
    logger.info(f"  Date: {result.issue_date}")
    logger.info(f"  Pages: {result.total_pages}")
    logger.info(f"  Output: {output}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = argparse.ArgumentParser(
        prog="issue-archiver",
        description="Assemble captured articles and newsletters into METS/ALTO issue packages",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
    )

    order_parser = subparsers.add_parser(
        "order",
        help="Print descriptors in issue order",
        description="Order newsletters and articles the way they will appear in the issue.",
    )
    order_parser.add_argument(
        "--descriptors",
        type=Path,
        required=True,
        help="JSON file of content descriptors",
    )
    order_parser.add_argument(
        "--start",
        type=date.fromisoformat,
        help="Newsletter window start, inclusive (ISO format: YYYY-MM-DD)",
    )
    order_parser.add_argument(
        "--end",
        type=date.fromisoformat,
        help="Newsletter window end, exclusive (ISO format: YYYY-MM-DD)",
    )
    order_parser.set_defaults(func=order_command)

    assemble_parser = subparsers.add_parser(
        "assemble",
        help="Capture content and write an issue package",
        description="Capture articles and newsletters, merge them into one issue PDF and write the PDF, ALTO and METS package.",
    )
    assemble_parser.add_argument(
        "--descriptors",
        type=Path,
        required=True,
        help="JSON file of content descriptors",
    )
    assemble_parser.add_argument(
        "--output",
        type=Path,
        default=DEFAULT_OUTPUT_DIR,
        help=f"Output directory for issue packages (default: {DEFAULT_OUTPUT_DIR})",
    )
    assemble_parser.add_argument(
        "--start",
        type=date.fromisoformat,
        help="Newsletter window start, inclusive (ISO format: YYYY-MM-DD)",
    )
    assemble_parser.add_argument(
        "--end",
        type=date.fromisoformat,
        help="Newsletter window end, exclusive (ISO format: YYYY-MM-DD)",
    )
    assemble_parser.add_argument(
        "--date",
        type=date.fromisoformat,
        help="Issue date (default: window end, or today)",
    )
    assemble_parser.add_argument(
        "--local",
        action="store_true",
        help="Read pre-rendered PDFs from each descriptor's pdf_path instead of fetching URLs",
    )
    assemble_parser.add_argument(
        "--base-url",
        type=str,
        default=DEFAULT_BASE_URL,
        help=f"Base URL for relative descriptor URLs (default: {DEFAULT_BASE_URL})",
    )
    assemble_parser.add_argument(
        "--images",
        action="store_true",
        help="Rasterize pages to images (also enabled by GENERATE_IMAGES=true)",
    )
    assemble_parser.add_argument(
        "--rasterizer",
        choices=["magick", "pymupdf"],
        default=None,
        help="Rasterizer for page images (default: magick)",
    )
    assemble_parser.add_argument(
        "--dpi",
        type=int,
        default=None,
        help="Rasterization resolution (default: 400)",
    )
    assemble_parser.add_argument(
        "--quality",
        type=int,
        default=None,
        help="Image quality (default: 90)",
    )
    assemble_parser.add_argument(
        "--volume",
        type=int,
        default=None,
        help="Volume number (default: 147)",
    )
    assemble_parser.add_argument(
        "--issue-number",
        type=int,
        default=None,
        help="Issue number (default: 1)",
    )
    assemble_parser.add_argument(
        "--zip",
        action="store_true",
        help="Write a ZIP archive instead of a directory tree",
    )
    assemble_parser.add_argument(
        "--bundle-json",
        type=Path,
        default=None,
        help="Also write the assembly result, with base64-encoded files, as JSON",
    )
    assemble_parser.set_defaults(func=assemble_command)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
