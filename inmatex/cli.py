"""
Command-line interface for Inmate Extract.
"""

import argparse
import sys
from pathlib import Path

from inmatex.api import scrape
from inmatex.config import apply_env_overrides, load_config
from inmatex.log import configure_logging, get_logger
from inmatex.model import InputError
from inmatex.pipeline import extract_booking_html, to_json
from inmatex.results import parse_search_results
from inmatex.rows import extract_rows
from inmatex.server import serve
from inmatex.writers import write_output

logger = get_logger(__name__)


def process_command(args: argparse.Namespace) -> int:
    """
    Process command-line arguments.

    Args:
        args: Command-line arguments

    Returns:
        Exit code
    """
    config = apply_env_overrides(load_config(args.config))

    if args.command == "serve":
        return serve(config, args.host, args.port, args.log_level)

    configure_logging(config, args.log_level)

    if args.command == "scrape":
        try:
            result = scrape(args.name, config, args.mode)
        except InputError as e:
            logger.error(str(e))
            return 2

        if args.out:
            write_output(result.inmates, args.out, config.output.pretty_json)

        if args.json:
            print(to_json(result.to_dict(), config.output.pretty_json))
        elif result.error:
            print(f"\nSearch failed: {result.error}")
        elif not result.found:
            print(f"\nNo inmates found for {result.query}.")
        else:
            for i, inmate in enumerate(result.inmates, 1):
                print(f"\n--- Match {i} ---")
                print(f"Name: {inmate['name']}")
                print(f"SOID: {inmate['soid']}")
                print(f"Arrest Date: {inmate['arrestDate']}")
                print(f"Location: {inmate['location']}")
                for charge in inmate["charges"]:
                    print(f"Charge: {charge.get('description', '')} ({charge.get('type', '')})")

        return 1 if result.error else 0

    elif args.command == "parse":
        summary = None
        if args.results:
            summaries = parse_search_results(
                extract_rows(Path(args.results).read_text(encoding="utf-8")), config.results
            )
            if not summaries:
                logger.warning(f"No inmates found in {args.results}")
            else:
                summary = summaries[0]

        html = Path(args.detail).read_text(encoding="utf-8")
        record = extract_booking_html(html, summary, config)

        if args.out:
            write_output([record], args.out, config.output.pretty_json)
        print(to_json(record, config.output.pretty_json))
        return 0

    else:
        logger.error("No command given")
        return 2


def main() -> int:
    """
    Main entry point.

    Returns:
        Exit code
    """
    parser = argparse.ArgumentParser(description="Inmate Extract")
    parser.add_argument("--config", help="Path to configuration file")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], help="Logging level")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Scrape command
    scrape_parser = subparsers.add_parser("scrape", help="Search the inmate site for a name")
    scrape_parser.add_argument("name", help="Name to search for")
    scrape_parser.add_argument("--mode", help="Search mode passed to the site")
    scrape_parser.add_argument("--json", action="store_true", help="Output as JSON")
    scrape_parser.add_argument("--out", help="Write inmate records to a .json or .csv file")

    # Parse command
    parse_parser = subparsers.add_parser("parse", help="Extract a record from a saved detail page")
    parse_parser.add_argument("detail", help="Saved detail page HTML")
    parse_parser.add_argument("--results", help="Saved search results page HTML")
    parse_parser.add_argument("--out", help="Write the record to a .json or .csv file")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP service")
    serve_parser.add_argument("--host", help="Host to bind")
    serve_parser.add_argument("--port", type=int, help="Port to listen on")

    args = parser.parse_args()

    try:
        return process_command(args)
    except Exception as e:
        logger.exception(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
