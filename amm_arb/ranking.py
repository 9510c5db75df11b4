"""
Ranking, filtering and summary statistics for scan results.
"""

from collections import Counter
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .risk import risk_bucket
from .types import ArbitrageOpportunity, short_name
from .utils import mean

Number = Union[int, float, Decimal]

DEFAULT_MIN_PROFIT_PCT = Decimal("0.1")
TOP_TOKEN_COUNT = 5


def rank_opportunities(
    opportunities: Iterable[ArbitrageOpportunity],
) -> List[ArbitrageOpportunity]:
    """
    Sort by absolute profit, highest first.

    The sort is stable, so equal profits keep their discovery order.
    """
    return sorted(opportunities, key=lambda o: o.profit_absolute, reverse=True)


def filter_min_profit(
    opportunities: Iterable[ArbitrageOpportunity],
    min_profit_pct: Number = DEFAULT_MIN_PROFIT_PCT,
) -> List[ArbitrageOpportunity]:
    """Keep opportunities whose profit percent is strictly above the threshold."""
    threshold = Decimal(str(min_profit_pct))
    return [o for o in opportunities if o.profit_pct > threshold]


@dataclass(frozen=True)
class OpportunitySummary:
    """
    Aggregate statistics over a ranked opportunity list.

    Percent figures are in percent units (0.5 means 0.5%). Absolute profit
    figures mix start tokens and are only meaningful for comparison.
    """

    count: int
    avg_profit_pct: Decimal
    max_profit_pct: Decimal
    min_profit_pct: Decimal
    avg_profit_absolute: Decimal
    max_profit_absolute: Decimal
    min_profit_absolute: Decimal
    avg_price_impact_pct: Decimal
    avg_pool_usage_pct: Decimal
    avg_risk_score: Decimal
    risk_distribution: Dict[str, int]
    best_profit: ArbitrageOpportunity
    lowest_risk: ArbitrageOpportunity
    top_tokens: List[Tuple[str, int]] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "count": self.count,
            "avg_profit_pct": str(self.avg_profit_pct),
            "max_profit_pct": str(self.max_profit_pct),
            "min_profit_pct": str(self.min_profit_pct),
            "avg_profit_absolute": str(self.avg_profit_absolute),
            "max_profit_absolute": str(self.max_profit_absolute),
            "min_profit_absolute": str(self.min_profit_absolute),
            "avg_price_impact_pct": str(self.avg_price_impact_pct),
            "avg_pool_usage_pct": str(self.avg_pool_usage_pct),
            "avg_risk_score": str(self.avg_risk_score),
            "risk_distribution": dict(self.risk_distribution),
            "best_profit": {
                "path": self.best_profit.route_label(),
                "profit": str(self.best_profit.profit_absolute),
                "start_amount": str(self.best_profit.start_amount),
            },
            "lowest_risk": {
                "path": self.lowest_risk.route_label(),
                "risk_score": self.lowest_risk.risk_score,
                "start_amount": str(self.lowest_risk.start_amount),
            },
            "top_tokens": [{"token": t, "count": c} for t, c in self.top_tokens],
        }


def most_active_tokens(
    opportunities: Sequence[ArbitrageOpportunity], limit: int = TOP_TOKEN_COUNT
) -> List[Tuple[str, int]]:
    """
    Tokens appearing in the most opportunity routes.

    Each route counts its start token twice (it opens and closes the route).
    Ties keep first-appearance order.
    """
    counts: Counter = Counter()
    for opp in opportunities:
        for token in opp.route:
            counts[short_name(token)] += 1
    return counts.most_common(limit)


def summarize(opportunities: Sequence[ArbitrageOpportunity]) -> Optional[OpportunitySummary]:
    """
    Compute summary statistics and headline results.

    Args:
        opportunities: Ranked opportunities (output of ``rank_opportunities``)

    Returns:
        OpportunitySummary, or None when there are no opportunities
    """
    if not opportunities:
        return None

    profit_pcts = [o.profit_pct for o in opportunities]
    profits = [o.profit_absolute for o in opportunities]

    distribution = {"low": 0, "medium": 0, "high": 0}
    for opp in opportunities:
        distribution[risk_bucket(opp.risk_score)] += 1

    # max()/min() return the first extreme element, which keeps ties stable
    best_profit = max(opportunities, key=lambda o: o.profit_absolute)
    lowest_risk = min(opportunities, key=lambda o: o.risk_score)

    return OpportunitySummary(
        count=len(opportunities),
        avg_profit_pct=mean(profit_pcts),
        max_profit_pct=max(profit_pcts),
        min_profit_pct=min(profit_pcts),
        avg_profit_absolute=mean(profits),
        max_profit_absolute=max(profits),
        min_profit_absolute=min(profits),
        avg_price_impact_pct=mean(o.total_price_impact_pct for o in opportunities),
        avg_pool_usage_pct=mean(o.max_pool_usage_pct for o in opportunities),
        avg_risk_score=mean(o.risk_score for o in opportunities),
        risk_distribution=distribution,
        best_profit=best_profit,
        lowest_risk=lowest_risk,
        top_tokens=most_active_tokens(opportunities),
    )
