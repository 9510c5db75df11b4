"""Shared fixtures for scanner tests."""

from decimal import Decimal

import pytest

from amm_arb.types import ArbitrageOpportunity, PoolSnapshot


def pool(pool_id, token_a, token_b, reserve_a, reserve_b):
    return PoolSnapshot(
        id=pool_id,
        token_a=token_a,
        token_b=token_b,
        reserve_a=reserve_a,
        reserve_b=reserve_b,
        decimals_a=9,
        decimals_b=9,
    )


@pytest.fixture
def deep_triangle():
    """
    Deep pools where C -> A pays 10% over the other two legs.

    A -> B -> C -> A is profitable after fees; the opposite direction is not.
    """
    return [
        pool("ab", "A", "B", 1_000_000_000, 1_000_000_000),
        pool("bc", "B", "C", 1_000_000_000, 1_000_000_000),
        pool("ca", "C", "A", 1_000_000_000, 1_100_000_000),
    ]


@pytest.fixture
def shallow_triangle():
    """Profitable triangle too shallow for any ladder amount (5% of 1000 is 50)."""
    return [
        pool("ab", "A", "B", 1000, 1000),
        pool("bc", "B", "C", 1000, 1000),
        pool("ca", "C", "A", 1000, 1200),
    ]


@pytest.fixture
def balanced_triangle():
    """Fairly priced pools; fees make every cycle a loss."""
    return [
        pool("ab", "A", "B", 1_000_000_000, 2_000_000_000),
        pool("bc", "B", "C", 2_000_000_000, 500_000_000),
        pool("ca", "C", "A", 500_000_000, 1_000_000_000),
    ]


@pytest.fixture
def make_opportunity():
    """Factory for opportunities with chosen headline figures and no steps."""

    def _make(
        path=("A", "B", "C"),
        profit=100,
        profit_pct="1",
        impact="0.5",
        usage="1",
        risk_score=0,
        start_amount=10000,
        min_reserve=5_000_000,
    ):
        start = Decimal(start_amount)
        profit = Decimal(profit)
        return ArbitrageOpportunity(
            path=tuple(path),
            steps=(),
            start_amount=start,
            final_amount=start + profit,
            profit_absolute=profit,
            profit_pct=Decimal(profit_pct),
            total_price_impact_pct=Decimal(impact),
            max_pool_usage_pct=Decimal(usage),
            risk_score=risk_score,
            max_safe_amount=Decimal(min_reserve) * 5 / 100,
            min_reserve=min_reserve,
        )

    return _make
