"""
AMM Triangular Arbitrage Scanner.

Detects triangular arbitrage across constant-product (x*y=k) liquidity pools:
builds the token exchange graph from a reserve snapshot, simulates every
3-hop cycle with fees and slippage, sizes each trade against pool depth and
ranks what is profitable by absolute profit.
"""

from amm_arb.version import __version__

PROJECT_NAME = "amm-arb"
VERSION = __version__

from amm_arb.config import ScanConfig, load_config
from amm_arb.exceptions import (
    AmmArbError,
    ConfigurationError,
    DataError,
    SnapshotError,
    ValidationError,
)
from amm_arb.scanner import ArbitrageScanner, ScanResult
from amm_arb.snapshots import DecimalsCache, load_snapshots, parse_snapshots
from amm_arb.types import (
    ArbitrageOpportunity,
    CycleSimulation,
    ExchangeEdge,
    PoolSnapshot,
    TradeStep,
)

__all__ = [
    "PROJECT_NAME",
    "VERSION",
    "ArbitrageScanner",
    "ScanResult",
    "ScanConfig",
    "load_config",
    "DecimalsCache",
    "load_snapshots",
    "parse_snapshots",
    "PoolSnapshot",
    "ExchangeEdge",
    "TradeStep",
    "CycleSimulation",
    "ArbitrageOpportunity",
    "AmmArbError",
    "ConfigurationError",
    "ValidationError",
    "SnapshotError",
    "DataError",
]
