"""Tests for cycle simulation and optimal trade size search."""

from decimal import Decimal, localcontext

import pytest

from amm_arb.graph import build_graph
from amm_arb.sizing import (
    DEFAULT_TEST_AMOUNTS,
    candidate_amounts,
    cycle_min_reserve,
    find_optimal_amount,
    is_executable,
    max_safe_amount,
    simulate_cycle,
)
from amm_arb.types import PoolSnapshot
from amm_arb.utils import DECIMAL_CONTEXT

ZERO_FEE = Decimal("0")


@pytest.fixture(autouse=True)
def decimal_context():
    """Reference arithmetic in these tests runs at the scanner's precision."""
    with localcontext(DECIMAL_CONTEXT):
        yield


def _cp(amount, reserve_in, reserve_out):
    """Reference constant-product output without fees, in floats."""
    return amount * reserve_out / (reserve_in + amount)


class TestSimulateCycle:
    """Test simulate_cycle function."""

    def test_matches_hand_computed_reference(self):
        """Three chained swaps without fees match the formula applied by hand."""
        graph, _ = build_graph(
            [
                PoolSnapshot("ab", "A", "B", 1_000_000, 2_000_000),
                PoolSnapshot("bc", "B", "C", 2_000_000, 500_000),
                PoolSnapshot("ca", "C", "A", 500_000, 1_100_000),
            ]
        )
        sim = simulate_cycle("A", "B", "C", graph, 100_000, ZERO_FEE)

        out1 = _cp(100_000.0, 1_000_000.0, 2_000_000.0)
        out2 = _cp(out1, 2_000_000.0, 500_000.0)
        out3 = _cp(out2, 500_000.0, 1_100_000.0)

        assert float(sim.final_amount) == pytest.approx(out3, rel=1e-6)
        assert float(sim.profit) == pytest.approx(out3 - 100_000.0, rel=1e-6)
        assert float(sim.steps[0].amount_out) == pytest.approx(out1, rel=1e-6)
        assert float(sim.steps[1].amount_out) == pytest.approx(out2, rel=1e-6)

    def test_reproducible(self):
        graph, _ = build_graph(
            [
                PoolSnapshot("ab", "A", "B", 1_000_000, 2_000_000),
                PoolSnapshot("bc", "B", "C", 2_000_000, 500_000),
                PoolSnapshot("ca", "C", "A", 500_000, 1_100_000),
            ]
        )
        first = simulate_cycle("A", "B", "C", graph, 100_000, ZERO_FEE)
        second = simulate_cycle("A", "B", "C", graph, 100_000, ZERO_FEE)
        assert first == second

    def test_steps_chain_outputs(self, deep_triangle):
        graph, _ = build_graph(deep_triangle)
        sim = simulate_cycle("A", "B", "C", graph, 10_000)

        assert sim.steps[0].amount_in == Decimal(10_000)
        assert sim.steps[1].amount_in == sim.steps[0].amount_out
        assert sim.steps[2].amount_in == sim.steps[1].amount_out
        assert sim.final_amount == sim.steps[2].amount_out
        assert [s.pool_id for s in sim.steps] == ["ab", "bc", "ca"]

    def test_aggregates(self, deep_triangle):
        graph, _ = build_graph(deep_triangle)
        sim = simulate_cycle("A", "B", "C", graph, 10_000)

        assert sim.total_price_impact_pct == sum(s.price_impact_pct for s in sim.steps)
        assert sim.max_pool_usage_pct == max(s.max_pool_usage_pct for s in sim.steps)
        assert sim.profit_pct == sim.profit / sim.start_amount * 100
        assert sim.min_reserve == 1_000_000_000

    def test_each_step_priced_on_snapshot_reserves(self, deep_triangle):
        """A cycle never sees reserves changed by its own earlier steps."""
        graph, _ = build_graph(deep_triangle)
        sim = simulate_cycle("A", "B", "C", graph, 10_000)
        for step in sim.steps:
            assert step.reserve_in_before in (1_000_000_000, 1_100_000_000)


class TestSizeHelpers:
    """Test ladder and safety helpers."""

    def test_max_safe_amount(self):
        assert max_safe_amount(1000, 5) == Decimal(50)
        assert max_safe_amount(1_000_000, Decimal("2.5")) == Decimal(25_000)

    def test_cycle_min_reserve(self, shallow_triangle):
        graph, _ = build_graph(shallow_triangle)
        assert cycle_min_reserve(graph, "A", "B", "C") == 1000

    def test_candidates_fit_under_safe_amount(self):
        assert candidate_amounts(Decimal(1000)) == [100, 500, 1000]
        assert candidate_amounts(Decimal(10**9)) == list(DEFAULT_TEST_AMOUNTS)

    def test_fallback_fractions(self):
        """Below the smallest ladder amount, 1/10, 1/5 and 1/2 of the safe amount are tried."""
        assert candidate_amounts(Decimal(50)) == [5, 10, 25]

    def test_custom_ladder(self):
        assert candidate_amounts(Decimal(30), [10, 20, 40]) == [10, 20]

    def test_zero_safe_amount_has_no_candidates(self):
        assert candidate_amounts(Decimal(0)) == []


class TestIsExecutable:
    """Test executability limits."""

    def test_usage_ceiling_is_inclusive(self, shallow_triangle):
        graph, _ = build_graph(shallow_triangle)
        sim = simulate_cycle("A", "B", "C", graph, 50)

        assert sim.max_pool_usage_pct == Decimal(5)
        # impact cap lifted so only the usage ceiling decides
        assert is_executable(sim, max_pool_usage_pct=5, max_price_impact_pct=100)
        assert not is_executable(
            sim, max_pool_usage_pct=Decimal("4.99"), max_price_impact_pct=100
        )

    def test_default_impact_cap_rejects_large_shallow_trade(self, shallow_triangle):
        """Half the safe amount still moves three shallow pools past 20% impact."""
        graph, _ = build_graph(shallow_triangle)
        sim = simulate_cycle("A", "B", "C", graph, 50)

        assert sim.total_price_impact_pct > 20
        assert not is_executable(sim, max_pool_usage_pct=5)

    def test_impact_cap_is_exclusive(self, deep_triangle):
        graph, _ = build_graph(deep_triangle)
        sim = simulate_cycle("A", "B", "C", graph, 10_000)

        assert is_executable(sim, max_price_impact_pct=20)
        assert not is_executable(sim, max_price_impact_pct=sim.total_price_impact_pct)


class TestFindOptimalAmount:
    """Test find_optimal_amount function."""

    def test_largest_profitable_ladder_amount(self, deep_triangle):
        graph, _ = build_graph(deep_triangle)
        opp = find_optimal_amount("A", "B", "C", graph)

        assert opp is not None
        assert opp.start_amount == Decimal(100_000)
        assert opp.path == ("A", "B", "C")
        assert opp.pool_ids == ("ab", "bc", "ca")
        assert opp.profit_absolute > 0
        assert opp.final_amount == opp.start_amount + opp.profit_absolute
        assert opp.max_safe_amount == Decimal(50_000_000)
        assert opp.risk_score == 0

    def test_shallow_pools_fall_back_to_fractions(self, shallow_triangle):
        graph, _ = build_graph(shallow_triangle)
        opp = find_optimal_amount("A", "B", "C", graph)

        assert opp is not None
        assert opp.max_safe_amount == Decimal(50)
        assert opp.start_amount == Decimal(25)
        assert opp.start_amount <= opp.max_safe_amount
        assert opp.max_pool_usage_pct <= 5
        # usage above 2%, impact above 10% and reserves below the floor
        assert opp.risk_score == 70

    def test_unprofitable_direction_returns_none(self, deep_triangle):
        graph, _ = build_graph(deep_triangle)
        assert find_optimal_amount("A", "C", "B", graph) is None

    def test_balanced_pools_return_none(self, balanced_triangle):
        graph, _ = build_graph(balanced_triangle)
        assert find_optimal_amount("A", "B", "C", graph) is None
        assert find_optimal_amount("A", "C", "B", graph) is None

    def test_impact_cap_rejects_every_size(self, shallow_triangle):
        graph, _ = build_graph(shallow_triangle)
        assert find_optimal_amount("A", "B", "C", graph, max_price_impact_pct=1) is None

    def test_liquidity_floor_changes_risk_only(self, deep_triangle):
        graph, _ = build_graph(deep_triangle)
        default = find_optimal_amount("A", "B", "C", graph)
        strict = find_optimal_amount("A", "B", "C", graph, liquidity_floor=10**12)

        assert strict.start_amount == default.start_amount
        assert strict.profit_absolute == default.profit_absolute
        assert strict.risk_score == default.risk_score + 20

    def test_result_within_limits(self, deep_triangle):
        graph, _ = build_graph(deep_triangle)
        for path in (("A", "B", "C"), ("B", "C", "A"), ("C", "A", "B")):
            opp = find_optimal_amount(*path, graph)
            assert opp is not None
            assert opp.max_pool_usage_pct <= 5
            assert opp.total_price_impact_pct < 20
            assert 0 <= opp.risk_score <= 100
