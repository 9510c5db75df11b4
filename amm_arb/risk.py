"""
Risk scoring for arbitrage opportunities.

The score is advisory: it orders and labels opportunities but never decides
whether one is executable (that is the size search's job).
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Union

from .types import ArbitrageOpportunity
from .utils import format_number

Number = Union[int, float, Decimal]

DEFAULT_LIQUIDITY_FLOOR = 1_000_000  # raw units; depends on token decimals

LOW_RISK_MAX = 40  # scores below this are "low"
HIGH_RISK_MIN = 60  # scores at or above this are "high"


def _tier_points(value: Number) -> int:
    """40/20/10/0 points for values above 10/5/2 percent."""
    if value > 10:
        return 40
    elif value > 5:
        return 20
    elif value > 2:
        return 10
    return 0


def calculate_risk_score(
    max_pool_usage_pct: Number,
    total_price_impact_pct: Number,
    min_reserve: Number,
    liquidity_floor: Number = DEFAULT_LIQUIDITY_FLOOR,
) -> int:
    """
    Composite liquidity risk score (0-100, higher is riskier).

    Points:
        pool usage: 40 if >10%, 20 if >5%, 10 if >2%
        price impact: 40 if >10%, 20 if >5%, 10 if >2%
        liquidity: 20 if the smallest touched reserve is below the floor

    Args:
        max_pool_usage_pct: Largest single-step pool usage in percent
        total_price_impact_pct: Sum of per-step price impacts in percent
        min_reserve: Smallest of the six reserves touched by the cycle
        liquidity_floor: Absolute reserve floor in raw units

    Returns:
        Integer score in [0, 100]
    """
    score = _tier_points(max_pool_usage_pct)
    score += _tier_points(total_price_impact_pct)
    if min_reserve < liquidity_floor:
        score += 20
    return score


def risk_bucket(score: int) -> str:
    """Bucket a score: ``low`` (<40), ``medium`` (40-59) or ``high`` (>=60)."""
    if score >= HIGH_RISK_MIN:
        return "high"
    if score >= LOW_RISK_MAX:
        return "medium"
    return "low"


@dataclass(frozen=True)
class RiskNote:
    """One line of a risk assessment."""

    category: str  # "pool_usage", "price_impact" or "liquidity"
    level: str  # "low", "medium" or "high"
    message: str
    advice: str


def assess_risk(
    opportunity: ArbitrageOpportunity,
    liquidity_floor: Number = DEFAULT_LIQUIDITY_FLOOR,
) -> List[RiskNote]:
    """
    Describe an opportunity's execution risk for display.

    Args:
        opportunity: Opportunity to describe
        liquidity_floor: Absolute reserve floor in raw units

    Returns:
        Notes for pool usage, price impact and liquidity depth, in that order
    """
    notes = []

    usage = opportunity.max_pool_usage_pct
    if usage > 5:
        notes.append(
            RiskNote(
                "pool_usage",
                "high",
                f"High liquidity usage: {usage:.2f}% of pool",
                "Front-running and MEV bot competition likely",
            )
        )
    elif usage > 2:
        notes.append(
            RiskNote(
                "pool_usage",
                "medium",
                f"Medium liquidity usage: {usage:.2f}% of pool",
                "Some slippage expected",
            )
        )
    else:
        notes.append(
            RiskNote(
                "pool_usage",
                "low",
                f"Low liquidity usage: {usage:.2f}% of pool",
                "Minimal slippage, good execution probability",
            )
        )

    impact = opportunity.total_price_impact_pct
    if impact > 5:
        notes.append(
            RiskNote(
                "price_impact",
                "high",
                f"High price impact: {impact:.2f}% total",
                "Split trade into smaller chunks",
            )
        )
    elif impact > 2:
        notes.append(
            RiskNote(
                "price_impact",
                "medium",
                f"Medium price impact: {impact:.2f}% total",
                "Monitor for better timing",
            )
        )
    else:
        notes.append(
            RiskNote(
                "price_impact",
                "low",
                f"Low price impact: {impact:.2f}% total",
                "Safe to execute",
            )
        )

    min_reserve = opportunity.min_reserve
    floor = Decimal(liquidity_floor)
    if min_reserve < floor / 10:
        notes.append(
            RiskNote(
                "liquidity",
                "high",
                f"Very low liquidity (min reserve: {format_number(min_reserve)})",
                "High risk of failed transaction or extreme slippage",
            )
        )
    elif min_reserve < floor:
        notes.append(
            RiskNote(
                "liquidity",
                "medium",
                f"Low liquidity pool detected (min reserve: {format_number(min_reserve)})",
                "Reserves are below the configured liquidity floor",
            )
        )
    else:
        notes.append(
            RiskNote(
                "liquidity",
                "low",
                f"Good liquidity across all pools (min reserve: {format_number(min_reserve)})",
                "Depth is not a concern at this size",
            )
        )

    return notes
