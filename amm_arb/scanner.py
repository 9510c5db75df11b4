"""
Triangular arbitrage scan over a snapshot of AMM pools.

One scan builds the exchange graph, walks every 3-hop cycle, sizes each
cycle, filters by profit threshold and ranks what is left. The scanner holds
only its configuration, so concurrent scans over different snapshot lists
need no coordination.
"""

import time
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .config import ScanConfig, get_default_config
from .cycles import enumerate_cycles
from .graph import GraphBuildStats, build_graph_with_stats
from .ranking import OpportunitySummary, filter_min_profit, rank_opportunities, summarize
from .sizing import find_optimal_amount
from .types import ArbitrageOpportunity, PoolSnapshot
from .utils import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ScanResult:
    """Output of one scan."""

    opportunities: List[ArbitrageOpportunity]
    summary: Optional[OpportunitySummary]
    paths_checked: int
    token_count: int
    graph_stats: GraphBuildStats
    elapsed_sec: float

    @property
    def found(self) -> bool:
        return bool(self.opportunities)


class ArbitrageScanner:
    """
    Finds executable triangular arbitrage across constant-product pools.

    Example:
        >>> scanner = ArbitrageScanner()
        >>> result = scanner.scan(snapshots)
        >>> for opp in result.opportunities[:3]:
        ...     print(opp.route_label(), opp.profit_absolute)
    """

    def __init__(self, config: Optional[ScanConfig] = None):
        self.config = config or get_default_config()

    def find_opportunities(
        self, snapshots: Sequence[PoolSnapshot]
    ) -> List[ArbitrageOpportunity]:
        """Ranked opportunities only (see ``scan`` for the full result)."""
        return self.scan(snapshots).opportunities

    def scan(self, snapshots: Sequence[PoolSnapshot]) -> ScanResult:
        """
        Run the full pipeline on one immutable snapshot list.

        Args:
            snapshots: Validated pool snapshots

        Returns:
            ScanResult; an empty opportunity list is a normal outcome
        """
        cfg = self.config
        start_time = time.perf_counter()

        graph, tokens, stats = build_graph_with_stats(snapshots)
        logger.info(
            "Graph built with %d tokens and %d directed edges from %d pools "
            "(%d skipped for zero reserves)",
            len(tokens),
            stats.edges,
            stats.pools_seen,
            stats.pools_skipped,
        )
        logger.debug(
            "Scanning with max pool usage %s%%, min profit %s%%, fee %s",
            cfg.max_pool_usage_pct,
            cfg.min_profit_pct,
            cfg.fee_rate,
        )

        found = []
        paths_checked = 0
        for token_a, token_b, token_c in enumerate_cycles(graph, tokens):
            paths_checked += 1
            opportunity = find_optimal_amount(
                token_a,
                token_b,
                token_c,
                graph,
                test_amounts=cfg.test_amounts,
                max_pool_usage_pct=cfg.max_pool_usage_pct,
                fee=cfg.fee_rate,
                max_price_impact_pct=cfg.max_price_impact_pct,
                liquidity_floor=cfg.liquidity_floor,
            )
            if opportunity is not None:
                found.append(opportunity)

        kept = filter_min_profit(found, cfg.min_profit_pct)
        ranked = rank_opportunities(kept)
        elapsed = time.perf_counter() - start_time

        logger.info(
            "Scanned %d paths in %.2fs: %d profitable, %d above %s%% threshold",
            paths_checked,
            elapsed,
            len(found),
            len(ranked),
            cfg.min_profit_pct,
        )

        return ScanResult(
            opportunities=ranked,
            summary=summarize(ranked),
            paths_checked=paths_checked,
            token_count=len(tokens),
            graph_stats=stats,
            elapsed_sec=elapsed,
        )
