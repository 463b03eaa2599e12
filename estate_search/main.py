"""
Main entry point and CLI for Estate Search.

Runs one search against the estates service and prints the results, with
optional extra pages loaded the way the UI's "load more" button does.
"""

import asyncio
import argparse
import logging
import sys
from datetime import datetime
from typing import List, Optional

from dotenv import load_dotenv

from estate_search.config.search_config import SearchSettings, load_search_settings
from estate_search.controller import SearchController
from estate_search.error_handling import ErrorHandler
from estate_search.executor.graphql_executor import GraphQLQueryExecutor
from estate_search.models import ListingRecord
from estate_search.status import SearchResultStatus


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def format_listing(record: ListingRecord) -> str:
    """
    Format a listing record for console output.

    Args:
        record: ListingRecord to format

    Returns:
        Formatted string representation of the listing
    """
    lines = []

    address = " ".join(part for part in (record.street, record.street_number) if part)
    location = ", ".join(
        part for part in (address, f"{record.zip_code or ''} {record.locality or ''}".strip()) if part
    )
    lines.append(f"🏠 {location or '[No address]'}")
    lines.append(f"   Code: {record.immoweb_code}")

    if record.price is not None:
        lines.append(f"   Price: €{record.price:,}")
        if len(record.price_history) > 1:
            first_price = record.price_history[0].price
            if first_price is not None and first_price != record.price:
                lines.append(f"   Was: €{first_price:,}")

    if record.living_area:
        lines.append(f"   Living area: {record.living_area} m²")
    if record.bedroom_count:
        lines.append(f"   Bedrooms: {record.bedroom_count}")
    if record.has_garden:
        garden = f" ({record.garden_area} m²)" if record.garden_area else ""
        lines.append(f"   Garden{garden}")
    if record.is_sold:
        lines.append("   SOLD")
    if record.images:
        lines.append(f"   Image: {record.images[0]}")

    lines.append("")

    return "\n".join(lines)


def format_results(records: List[ListingRecord], total_count: int) -> str:
    """
    Format loaded listings for console output.

    Args:
        records: Listings loaded so far
        total_count: Total number of matches reported by the service

    Returns:
        Formatted string representation of all listings
    """
    if not records:
        return "No estates found matching your criteria.\n"

    output = []
    output.append(f"\n{'='*60}\n")
    output.append(f"Showing {len(records)} of {total_count} estate(s)\n")
    output.append(f"{'='*60}\n\n")

    for record in records:
        output.append(format_listing(record))
        output.append("\n")

    output.append(f"{'='*60}\n")

    return "".join(output)


def build_filters(args: argparse.Namespace) -> dict:
    """Translate command-line arguments into raw filter values."""
    filters = {}
    if args.min_price is not None or args.max_price is not None:
        filters["priceRange"] = [args.min_price, args.max_price]
    if args.zip_codes:
        filters["zipCodes"] = args.zip_codes
    if args.free_text:
        filters["freeText"] = args.free_text
    if args.garden:
        filters["onlyWithGarden"] = True
    if args.min_garden_area is not None:
        filters["minGardenArea"] = args.min_garden_area
    if args.min_living_area is not None:
        filters["minLivingArea"] = args.min_living_area
    if args.min_bedrooms is not None:
        filters["minBedroomCount"] = args.min_bedrooms
    if args.still_available:
        filters["onlyStillAvailable"] = True
    if args.code is not None:
        filters["immowebCode"] = args.code
    return filters


async def run_search(
    filters: dict,
    sorter: dict,
    pages: int = 1,
    settings: Optional[SearchSettings] = None,
    verbose: bool = False
) -> int:
    """
    Execute the search workflow.

    Args:
        filters: Raw filter values, applied on top of the default filters
        sorter: Sort descriptor as a {field, order} mapping
        pages: Number of pages to load (first page plus load-more pages)
        settings: Search settings (read from the environment if not provided)
        verbose: Enable verbose logging output

    Returns:
        Exit code (0 for success, 1 for error)
    """
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug("Verbose logging enabled")

    settings = settings or load_search_settings()
    logger.info(f"Using search endpoint: {settings.endpoint_url}")

    async with GraphQLQueryExecutor(
        settings.endpoint_url,
        timeout_seconds=settings.request_timeout_seconds
    ) as executor:
        controller = SearchController(executor, settings=settings)
        try:
            start_time = datetime.now()

            controller.search(controller.filters.with_filters(filters), sorter)
            await controller.wait_idle()

            for _ in range(pages - 1):
                if controller.status != SearchResultStatus.READY:
                    break
                if len(controller.results) >= controller.total_count:
                    break
                controller.load_more()
                await controller.wait_idle()

            elapsed_time = (datetime.now() - start_time).total_seconds()

            if controller.status == SearchResultStatus.ERROR:
                diagnosis = ErrorHandler().describe(controller.error)
                print(f"\n❌ Error: {diagnosis['error_message']}", file=sys.stderr)
                for suggestion in diagnosis['recovery_suggestions']:
                    print(f"   - {suggestion}", file=sys.stderr)
                return 1

            print(format_results(controller.results or [], controller.total_count or 0))
            logger.info(f"Search completed in {elapsed_time:.2f} seconds")
            return 0
        finally:
            controller.dispose()


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="estate-search",
        description="Search estate listings matching your criteria",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Options given on the command line override the default filters
(price up to 500000 in zip codes 1030 and 1140); the others keep
their default value.

Examples:
  # Houses with a garden under 400k in two zip codes
  estate-search --max-price 400000 --zip 1030 --zip 1140 --garden

  # Cheapest first, three pages
  estate-search --sort-field price --sort-order ascend --pages 3

  # Look up one listing
  estate-search --code 9876543
        """
    )

    parser.add_argument("--free-text", type=str, default=None, help="Free-text search")
    parser.add_argument("--min-price", type=int, default=None, help="Minimum price (inclusive)")
    parser.add_argument("--max-price", type=int, default=None, help="Maximum price (inclusive)")
    parser.add_argument(
        "--zip",
        dest="zip_codes",
        type=int,
        action="append",
        default=[],
        help="Allowed zip code (repeatable)"
    )
    parser.add_argument("--garden", action="store_true", help="Only listings with a garden")
    parser.add_argument("--min-garden-area", type=int, default=None, help="Minimum garden area (m²)")
    parser.add_argument("--min-living-area", type=int, default=None, help="Minimum living area (m²)")
    parser.add_argument("--min-bedrooms", type=int, default=None, help="Minimum bedroom count")
    parser.add_argument(
        "--still-available",
        action="store_true",
        help="Exclude sold or unavailable listings"
    )
    parser.add_argument("--code", type=int, default=None, help="Exact listing code")
    parser.add_argument("--sort-field", type=str, default="modificationDate", help="Field to sort by")
    parser.add_argument(
        "--sort-order",
        choices=["ascend", "descend"],
        default="descend",
        help="Sort direction"
    )
    parser.add_argument("--pages", type=int, default=1, help="Number of pages to load")
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging output"
    )

    return parser


def main() -> int:
    """
    Main entry point for the CLI application.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    load_dotenv()

    parser = create_argument_parser()
    args = parser.parse_args()

    if args.pages < 1:
        print("Error: --pages must be at least 1", file=sys.stderr)
        return 1

    try:
        return asyncio.run(
            run_search(
                filters=build_filters(args),
                sorter={"field": args.sort_field, "order": args.sort_order},
                pages=args.pages,
                verbose=args.verbose
            )
        )
    except KeyboardInterrupt:
        logger.info("Search interrupted by user")
        print("\n\n⚠️  Search interrupted by user", file=sys.stderr)
        return 130
    except Exception as e:
        logger.exception(f"Unexpected error in main: {str(e)}")
        print(f"❌ Unexpected error: {str(e)}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
