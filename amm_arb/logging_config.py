"""
Logging configuration for the scanner command line.

Usage:
    from amm_arb import logging_config
    logging_config.setup()
"""

import logging
import sys


def setup(level=logging.INFO):
    """
    Configure root logging for readable console output.

    - Uses short timestamp format (HH:MM:SS instead of full datetime)
    - Replaces any handlers installed earlier so output is not duplicated
    """
    root = logging.getLogger()
    root.setLevel(level)

    root.handlers.clear()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)

    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-7s | %(message)s", datefmt="%H:%M:%S"
    )
    console.setFormatter(formatter)
    root.addHandler(console)

    logging.getLogger("amm_arb").setLevel(level)


def setup_minimal():
    """Only warnings and errors."""
    setup(level=logging.WARNING)


def setup_debug():
    """Verbose logging, including per-pool graph decisions."""
    setup(level=logging.DEBUG)
