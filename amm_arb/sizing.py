"""
Cycle simulation and optimal trade size search.

For a triangle A -> B -> C -> A the search tries a ladder of start amounts,
capped by a fraction of the shallowest reserve on the route, and keeps the
executable size with the largest absolute profit.
"""

from decimal import Decimal, localcontext
from typing import List, Optional, Sequence, Union

import networkx as nx

from .amm import DEFAULT_FEE, simulate_swap
from .graph import get_edge
from .risk import DEFAULT_LIQUIDITY_FLOOR, calculate_risk_score
from .types import ArbitrageOpportunity, CycleSimulation
from .utils import DECIMAL_CONTEXT, calculate_percentage, get_logger

logger = get_logger(__name__)

Number = Union[int, float, Decimal]

# Candidate start amounts, in raw units of the start token
DEFAULT_TEST_AMOUNTS = (100, 500, 1000, 5000, 10000, 50000, 100000)

DEFAULT_MAX_POOL_USAGE_PCT = Decimal("5")
DEFAULT_MAX_PRICE_IMPACT_PCT = Decimal("20")

# Divisors of max_safe_amount tried when no ladder amount fits
FALLBACK_DIVISORS = (10, 5, 2)


def _d(value: Number) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def cycle_min_reserve(graph: nx.DiGraph, token_a: str, token_b: str, token_c: str) -> int:
    """Smallest of the six reserves touched by the cycle."""
    edges = (
        get_edge(graph, token_a, token_b),
        get_edge(graph, token_b, token_c),
        get_edge(graph, token_c, token_a),
    )
    return min(min(e.reserve_in, e.reserve_out) for e in edges)


def max_safe_amount(min_reserve: Number, max_pool_usage_pct: Number) -> Decimal:
    """Largest start amount allowed by the pool usage ceiling."""
    with localcontext(DECIMAL_CONTEXT):
        return _d(min_reserve) * _d(max_pool_usage_pct) / Decimal(100)


def candidate_amounts(
    safe_amount: Decimal, test_amounts: Sequence[Number] = DEFAULT_TEST_AMOUNTS
) -> List[Decimal]:
    """
    Ladder amounts that fit under ``safe_amount``.

    If none fit, the pool is too shallow for the ladder and fractions of the
    safe amount (1/10, 1/5, 1/2) are tried instead.
    """
    amounts = [_d(a) for a in test_amounts if _d(a) <= safe_amount]
    if not amounts:
        with localcontext(DECIMAL_CONTEXT):
            amounts = [safe_amount / Decimal(div) for div in FALLBACK_DIVISORS]
    return [a for a in amounts if a > 0]


def simulate_cycle(
    token_a: str,
    token_b: str,
    token_c: str,
    graph: nx.DiGraph,
    start_amount: Number,
    fee: Decimal = DEFAULT_FEE,
) -> CycleSimulation:
    """
    Simulate A -> B -> C -> A, feeding each step's output into the next.

    Every step is priced against the snapshot reserves of its own pool.

    Args:
        token_a: Start (and end) token
        token_b: Second token
        token_c: Third token
        graph: Exchange graph
        start_amount: Amount of token_a to trade (raw units)
        fee: Fee as decimal, applied on every swap

    Returns:
        CycleSimulation with the three steps and aggregate figures
    """
    start = _d(start_amount)
    edge_ab = get_edge(graph, token_a, token_b)
    edge_bc = get_edge(graph, token_b, token_c)
    edge_ca = get_edge(graph, token_c, token_a)

    step1 = simulate_swap(start, edge_ab, fee)
    step2 = simulate_swap(step1.amount_out, edge_bc, fee)
    step3 = simulate_swap(step2.amount_out, edge_ca, fee)
    steps = (step1, step2, step3)

    final_amount = step3.amount_out

    with localcontext(DECIMAL_CONTEXT):
        profit = final_amount - start
        return CycleSimulation(
            steps=steps,
            start_amount=start,
            final_amount=final_amount,
            profit=profit,
            profit_pct=calculate_percentage(profit, start),
            total_price_impact_pct=sum(
                (s.price_impact_pct for s in steps), Decimal(0)
            ),
            max_pool_usage_pct=max(s.max_pool_usage_pct for s in steps),
            min_reserve=min(
                min(e.reserve_in, e.reserve_out) for e in (edge_ab, edge_bc, edge_ca)
            ),
        )


def is_executable(
    simulation: CycleSimulation,
    max_pool_usage_pct: Number = DEFAULT_MAX_POOL_USAGE_PCT,
    max_price_impact_pct: Number = DEFAULT_MAX_PRICE_IMPACT_PCT,
) -> bool:
    """Pool usage within the ceiling and total price impact under the cap."""
    return simulation.max_pool_usage_pct <= _d(
        max_pool_usage_pct
    ) and simulation.total_price_impact_pct < _d(max_price_impact_pct)


def find_optimal_amount(
    token_a: str,
    token_b: str,
    token_c: str,
    graph: nx.DiGraph,
    test_amounts: Sequence[Number] = DEFAULT_TEST_AMOUNTS,
    max_pool_usage_pct: Number = DEFAULT_MAX_POOL_USAGE_PCT,
    fee: Decimal = DEFAULT_FEE,
    max_price_impact_pct: Number = DEFAULT_MAX_PRICE_IMPACT_PCT,
    liquidity_floor: Number = DEFAULT_LIQUIDITY_FLOOR,
) -> Optional[ArbitrageOpportunity]:
    """
    Find the most profitable executable start amount for one cycle.

    Args:
        token_a: Start token
        token_b: Second token
        token_c: Third token
        graph: Exchange graph containing a->b, b->c and c->a
        test_amounts: Candidate ladder in raw units of token_a
        max_pool_usage_pct: Pool usage ceiling in percent
        fee: Fee per swap as decimal
        max_price_impact_pct: Total price impact cap in percent (exclusive)
        liquidity_floor: Reserve floor used by the risk score

    Returns:
        ArbitrageOpportunity for the best size, or None if no candidate is
        both profitable and executable
    """
    min_reserve = cycle_min_reserve(graph, token_a, token_b, token_c)
    safe_amount = max_safe_amount(min_reserve, max_pool_usage_pct)

    best: Optional[CycleSimulation] = None
    for amount in candidate_amounts(safe_amount, test_amounts):
        sim = simulate_cycle(token_a, token_b, token_c, graph, amount, fee)
        if sim.profit <= 0:
            continue
        if not is_executable(sim, max_pool_usage_pct, max_price_impact_pct):
            continue
        if best is None or sim.profit > best.profit:
            best = sim

    if best is None:
        return None

    risk_score = calculate_risk_score(
        best.max_pool_usage_pct,
        best.total_price_impact_pct,
        best.min_reserve,
        liquidity_floor,
    )
    logger.debug(
        "Cycle %s -> %s -> %s: best size %s, profit %s (%.4f%%), risk %d",
        token_a,
        token_b,
        token_c,
        best.start_amount,
        best.profit,
        best.profit_pct,
        risk_score,
    )

    return ArbitrageOpportunity(
        path=(token_a, token_b, token_c),
        steps=best.steps,
        start_amount=best.start_amount,
        final_amount=best.final_amount,
        profit_absolute=best.profit,
        profit_pct=best.profit_pct,
        total_price_impact_pct=best.total_price_impact_pct,
        max_pool_usage_pct=best.max_pool_usage_pct,
        risk_score=risk_score,
        max_safe_amount=safe_amount,
        min_reserve=best.min_reserve,
    )
