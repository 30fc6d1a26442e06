"""Command-line interface for the product extractor."""

import argparse
import json
import logging
import sys
from typing import List, Optional

__all__ = ["main", "parse_args"]

from godseye.extractor import scrape_and_extract_product_info
from godseye.logging_config import setup_logging
from godseye.trace import default_trace_sink
from godseye.url_validation import URLValidationError, validate_url


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Scrape a product page and extract structured product info with Gemini",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Extract product info and print the JSON result
  python -m godseye.cli https://example.com/products/widget

  # Give the search query that surfaced the product as extra context
  python -m godseye.cli https://example.com/products/widget --search-query "best widget"

  # Keep the prompt, raw reply and final output for debugging
  python -m godseye.cli https://example.com/products/widget --trace-dir debug/
        """,
    )

    parser.add_argument("url", help="Absolute URL of the product page")
    parser.add_argument(
        "--search-query",
        help="Search query that surfaced the product (used as LLM context only)",
    )
    parser.add_argument(
        "--trace-dir",
        metavar="DIR",
        help="Write prompt_content.txt, gemini_raw.txt and final_output.json here "
             "(default: $GODSEYE_TRACE_DIR, or disabled)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Console log level (default: INFO)",
    )
    parser.add_argument(
        "--no-log-file",
        action="store_true",
        help="Don't write JSONL logs to logs/",
    )

    args = parser.parse_args(argv)
    try:
        args.url = validate_url(args.url)
    except URLValidationError as e:
        parser.error(f"invalid URL: {e}")
    return args


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    args = parse_args(argv)
    setup_logging(
        level=getattr(logging, args.log_level),
        log_to_file=not args.no_log_file,
    )

    result = scrape_and_extract_product_info(
        args.url,
        args.search_query,
        trace_sink=default_trace_sink(args.trace_dir),
    )
    if result is None:
        print(
            "Failed to scrape and extract product information. "
            "Please check that GEMINI_API_KEY is set.",
            file=sys.stderr,
        )
        return 1

    print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
