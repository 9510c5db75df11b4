"""
AMM triangular arbitrage scanner CLI.

Reads a pair-data snapshot, scans every triangular route and prints the
ranked opportunities in a console-friendly format.

Usage:
    amm-arb-scan
    amm-arb-scan --pairs pairs-data.json --output arbitrage-opportunities.json
    amm-arb-scan --config configs/scan.yaml --max-pool-usage 2
"""

import argparse
import sys
from typing import List, Optional

from . import logging_config
from .config import load_config
from .exceptions import AmmArbError
from .report import Colors, render_console, write_report
from .scanner import ArbitrageScanner
from .snapshots import DecimalsCache, load_snapshots
from .utils import format_duration, get_logger
from .version import get_version

logger = get_logger(__name__)

DEFAULT_PAIRS_FILE = "pairs-data.json"
DEFAULT_OUTPUT_FILE = "arbitrage-opportunities.json"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="amm-arb-scan",
        description="Triangular arbitrage scanner for constant-product AMM pools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Scan pairs-data.json with default settings
  amm-arb-scan

  # Stricter pool usage ceiling and a custom report path
  amm-arb-scan --max-pool-usage 2 --output reports/opps.json

  # Settings from YAML, CLI flags override file values
  amm-arb-scan --config configs/scan.yaml --min-profit 0.5
        """,
    )

    parser.add_argument(
        "--pairs",
        default=DEFAULT_PAIRS_FILE,
        help=f"Pair data JSON file (default: {DEFAULT_PAIRS_FILE})",
    )
    parser.add_argument("--config", help="Path to scan config YAML file")
    parser.add_argument(
        "--output",
        default=DEFAULT_OUTPUT_FILE,
        help=f"Report JSON file (default: {DEFAULT_OUTPUT_FILE})",
    )
    parser.add_argument(
        "--no-save", action="store_true", help="Do not write the JSON report"
    )
    parser.add_argument(
        "--max-pool-usage",
        type=str,
        help="Max percent of the shallowest reserve a trade may use",
    )
    parser.add_argument(
        "--min-profit", type=str, help="Minimum profit percent to report"
    )
    parser.add_argument(
        "--liquidity-floor",
        type=int,
        help="Reserve floor (raw units) used in risk scoring",
    )
    parser.add_argument(
        "--top", type=int, help="Number of opportunities shown on console"
    )
    parser.add_argument(
        "--no-color", action="store_true", help="Disable ANSI colors"
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {get_version()}"
    )

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    verbosity.add_argument(
        "-q", "--quiet", action="store_true", help="Only log warnings and errors"
    )

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    args = parse_args(argv)

    if args.verbose:
        logging_config.setup_debug()
    elif args.quiet:
        logging_config.setup_minimal()
    else:
        logging_config.setup()

    overrides = {
        "max_pool_usage_pct": args.max_pool_usage,
        "min_profit_pct": args.min_profit,
        "liquidity_floor": args.liquidity_floor,
        "display_count": args.top,
    }

    try:
        config = load_config(args.config, overrides)
        cache = DecimalsCache(config.known_decimals, config.default_decimals)
        snapshots = load_snapshots(args.pairs, cache)

        scanner = ArbitrageScanner(config)
        result = scanner.scan(snapshots)

        render_console(result, config, color=not args.no_color)
        if not args.no_save:
            write_report(result, config, args.output)
    except AmmArbError as e:
        logger.error("%s", e)
        print(f"{Colors.RED}Scan failed: {e}{Colors.RESET}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nStopped by user")
        return 0

    logger.info("Scan complete in %s", format_duration(result.elapsed_sec))
    return 0


if __name__ == "__main__":
    sys.exit(main())
