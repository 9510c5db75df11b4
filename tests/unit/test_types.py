"""Tests for core value types."""

from decimal import Decimal

import pytest

from amm_arb.exceptions import SnapshotError
from amm_arb.types import PoolSnapshot, to_display


class TestPoolSnapshot:
    """Test PoolSnapshot construction checks."""

    def test_valid_pool(self):
        snap = PoolSnapshot("p1", "0x2::sui::SUI", "B", 10**30, 0, 9, 6)
        assert snap.symbol_a == "SUI"
        assert snap.symbol_b == "B"
        assert not snap.is_usable

    @pytest.mark.parametrize(
        "args",
        [
            ("bad", "", "D", 1000, 1000),
            ("bad", "A", "   ", 1000, 1000),
            ("bad", "A", "A", 1000, 1000),
            ("bad", "A", "D", -5, 1000),
            ("bad", "A", "D", 1000, -1),
            ("bad", "A", "D", 1000.0, 1000),
            ("bad", "A", "D", "1000", 1000),
            ("bad", "A", "D", True, 1000),
            ("bad", "A", "D", 1000, 1000, -1, 9),
            ("bad", "A", "D", 1000, 1000, 9, None),
        ],
    )
    def test_malformed_pool_rejected(self, args):
        with pytest.raises(SnapshotError) as exc_info:
            PoolSnapshot(*args)
        assert exc_info.value.pool_id == "bad"

    def test_empty_id_rejected(self):
        with pytest.raises(SnapshotError, match="id must be a non-empty string"):
            PoolSnapshot("", "A", "B", 1000, 1000)

    def test_first_problem_reported(self):
        """Empty token and negative reserve together name the token."""
        with pytest.raises(SnapshotError, match="token_a"):
            PoolSnapshot("bad", "", "D", -5, 1000)


def test_to_display():
    assert to_display(Decimal(1_500_000), 6) == Decimal("1.5")
    assert to_display(Decimal(42), 0) == Decimal(42)
    assert to_display(Decimal(10**27), 9) == Decimal(10**18)
