"""
Command-line interface.

MIT License - Copyright (c) 2025 Markdown to PDF Converter
"""

import argparse
import sys
from typing import Any, Dict, List, Optional

from . import __version__
from .config import Config, PAGE_FORMATS
from .console import ConsoleLogger
from .dependencies import check_dependencies, install_browsers
from .errors import ConfigurationError, ConversionError
from .pipeline import ConversionPipeline
from .profiles import MARKDOWN_PROFILES, STYLE_PROFILES, get_markdown_profile


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="md-to-pdf",
        description="Convert Markdown with Mermaid diagrams to PDF",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-i", "--input", help="Input markdown file path (required)")
    parser.add_argument("-o", "--output", help="Output PDF file path (default: input with .pdf extension)")
    parser.add_argument("-t", "--temp", default=None, help="Temporary HTML file path (default: temp.html)")
    parser.add_argument("-f", "--format", default=None,
                        help=f"Page format (default: A4). Available: {', '.join(PAGE_FORMATS)}")
    parser.add_argument("-m", "--margin", default=None,
                        help="Page margins, bare numbers in cm (default: 1). Use 1, 2, or 4 values. "
                             "Units: cm, mm, in, pt, px. Range: 0-3 inches")
    parser.add_argument("--profile", default=None, choices=list(STYLE_PROFILES.keys()),
                        help="Style profile for the document (default: book)")
    parser.add_argument("--markdown-profile", default=None, choices=list(MARKDOWN_PROFILES.keys()),
                        help="Markdown parser profile (default: typographic)")
    parser.add_argument("--timeout", type=float, default=None,
                        help="Seconds to wait for Mermaid diagrams to render (default: 30)")
    parser.add_argument("--mermaid-url", default=None, help="Mermaid ES module URL")
    parser.add_argument("--continuous", action="store_true",
                        help="Capture a single page sized to the content height instead of a paper format")
    parser.add_argument("--page-width", default=None,
                        help="Page width for --continuous (default: 8.5in)")
    parser.add_argument("--no-network-idle", action="store_true",
                        help="Do not wait for network activity to settle before capture")
    parser.add_argument("--no-cleanup", action="store_true", help="Keep the temporary HTML file")
    parser.add_argument("--no-progress", action="store_true", help="Hide the progress bar")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging for detailed output")
    parser.add_argument("--install-browsers", action="store_true",
                        help="Install the Playwright Chromium browser and exit")
    return parser


def _cli_config(args: argparse.Namespace) -> Dict[str, Any]:
    """Only values the user actually set; None defers to env and defaults."""
    return {
        "temp": args.temp,
        "format": args.format,
        "margin": args.margin,
        "style_profile": args.profile,
        "markdown_profile": args.markdown_profile,
        "timeout": args.timeout,
        "mermaid_url": args.mermaid_url,
        "continuous": True if args.continuous else None,
        "page_width": args.page_width,
        "network_idle": False if args.no_network_idle else None,
        "keep_temp": True if args.no_cleanup else None,
    }


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point. Returns the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logger = ConsoleLogger(debug=args.debug)

    if args.install_browsers:
        return 0 if install_browsers(logger) else 1

    if not args.input:
        parser.error("the following arguments are required: -i/--input")

    try:
        request = Config(_cli_config(args)).build_request(args.input, args.output)
    except ConfigurationError as e:
        logger.error(str(e))
        return 2

    if not check_dependencies(check_optional=get_markdown_profile(request.markdown_profile).linkify, logger=logger):
        return 1

    pipeline = ConversionPipeline(logger=logger, show_progress=not args.no_progress)
    try:
        pipeline.run(request)
    except ConversionError as e:
        logger.error(f"Conversion failed: {e}")
        return 1
    except Exception as e:
        logger.error(f"Conversion failed with unexpected error: {type(e).__name__}: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
