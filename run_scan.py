#!/usr/bin/env python3
"""
Triangular arbitrage scan over a pair-data snapshot.

Usage:
    python3 run_scan.py
    python3 run_scan.py --pairs pairs-data.json --max-pool-usage 2
    python3 run_scan.py --config configs/scan.yaml --verbose
"""

import sys

from amm_arb.cli import main

if __name__ == "__main__":
    sys.exit(main())
