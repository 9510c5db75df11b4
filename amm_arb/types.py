"""
Core data types for AMM arbitrage scanning.

All types are immutable value objects. Raw reserves stay integers; derived
amounts are Decimal so that round-tripping through a report never loses
precision.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Tuple

from .exceptions import SnapshotError
from .utils import DECIMAL_CONTEXT


def short_name(token: str) -> str:
    """Display name for a token id (last ``::`` segment of a coin type)."""
    return token.split("::")[-1]


def to_display(raw: Decimal, decimals: int) -> Decimal:
    """Raw amount in whole-token units, e.g. 1_500_000 with 6 decimals -> 1.5."""
    return Decimal(raw).scaleb(-decimals, DECIMAL_CONTEXT)


def _is_count(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


@dataclass(frozen=True)
class PoolSnapshot:
    """
    One constant-product pool at a point in time.

    Construction fails fast with SnapshotError on empty ids, identical
    tokens, or reserves and decimals that are not non-negative integers.

    Attributes:
        id: Pool identifier (unique within a scan)
        token_a: Token id whose reserve is ``reserve_a``
        token_b: Token id whose reserve is ``reserve_b``
        reserve_a: Raw reserve of token_a (undenominated units)
        reserve_b: Raw reserve of token_b (undenominated units)
        decimals_a: Display precision of token_a
        decimals_b: Display precision of token_b
        symbol_a: Display label for token_a
        symbol_b: Display label for token_b
    """

    id: str
    token_a: str
    token_b: str
    reserve_a: int
    reserve_b: int
    decimals_a: int = 0
    decimals_b: int = 0
    symbol_a: str = ""
    symbol_b: str = ""

    def __post_init__(self):
        for name in ("id", "token_a", "token_b"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise SnapshotError(
                    f"Pool {self.id!r}: {name} must be a non-empty string, got {value!r}",
                    pool_id=self.id,
                )
        if self.token_a == self.token_b:
            raise SnapshotError(
                f"Pool {self.id}: both sides are {self.token_a}", pool_id=self.id
            )
        for name in ("reserve_a", "reserve_b", "decimals_a", "decimals_b"):
            value = getattr(self, name)
            if not _is_count(value):
                raise SnapshotError(
                    f"Pool {self.id}: {name} must be a non-negative integer, got {value!r}",
                    pool_id=self.id,
                )

        if not self.symbol_a:
            object.__setattr__(self, "symbol_a", short_name(self.token_a))
        if not self.symbol_b:
            object.__setattr__(self, "symbol_b", short_name(self.token_b))

    @property
    def is_usable(self) -> bool:
        return self.reserve_a > 0 and self.reserve_b > 0

    @property
    def pair_name(self) -> str:
        return f"{self.symbol_a}/{self.symbol_b}"


@dataclass(frozen=True)
class ExchangeEdge:
    """Directed swap direction through one pool, reserves oriented in->out."""

    from_token: str
    to_token: str
    reserve_in: int
    reserve_out: int
    source_pool: str
    decimals_in: int = 0
    decimals_out: int = 0


@dataclass(frozen=True)
class TradeStep:
    """Result of simulating a single swap."""

    from_token: str
    to_token: str
    pool_id: str
    amount_in: Decimal
    amount_out: Decimal
    price_impact_pct: Decimal
    price_before: Decimal
    price_after: Decimal
    reserve_in_before: int
    reserve_out_before: int
    reserve_in_after: Decimal
    reserve_out_after: Decimal
    pool_usage_in_pct: Decimal
    pool_usage_out_pct: Decimal
    decimals_in: int = 0
    decimals_out: int = 0

    @property
    def reserves_before(self) -> Tuple[int, int]:
        return self.reserve_in_before, self.reserve_out_before

    @property
    def display_amount_in(self) -> Decimal:
        return to_display(self.amount_in, self.decimals_in)

    @property
    def display_amount_out(self) -> Decimal:
        return to_display(self.amount_out, self.decimals_out)

    @property
    def display_price(self) -> Decimal:
        """Pre-trade price in whole tokens of to_token per from_token."""
        return self.price_before.scaleb(
            self.decimals_in - self.decimals_out, DECIMAL_CONTEXT
        )

    @property
    def reserves_after(self) -> Tuple[Decimal, Decimal]:
        return self.reserve_in_after, self.reserve_out_after

    @property
    def max_pool_usage_pct(self) -> Decimal:
        return max(self.pool_usage_in_pct, self.pool_usage_out_pct)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "from": self.from_token,
            "to": self.to_token,
            "pool_id": self.pool_id,
            "amount_in": str(self.amount_in),
            "amount_out": str(self.amount_out),
            "price_impact_pct": str(self.price_impact_pct),
            "price_before": str(self.price_before),
            "price_after": str(self.price_after),
            "reserve_in_before": self.reserve_in_before,
            "reserve_out_before": self.reserve_out_before,
            "reserve_in_after": str(self.reserve_in_after),
            "reserve_out_after": str(self.reserve_out_after),
            "pool_usage_in_pct": str(self.pool_usage_in_pct),
            "pool_usage_out_pct": str(self.pool_usage_out_pct),
            "decimals_in": self.decimals_in,
            "decimals_out": self.decimals_out,
            "display_amount_in": str(self.display_amount_in),
            "display_amount_out": str(self.display_amount_out),
            "display_price": str(self.display_price),
        }


@dataclass(frozen=True)
class CycleSimulation:
    """Three chained swaps A -> B -> C -> A at one start amount."""

    steps: Tuple[TradeStep, TradeStep, TradeStep]
    start_amount: Decimal
    final_amount: Decimal
    profit: Decimal
    profit_pct: Decimal
    total_price_impact_pct: Decimal
    max_pool_usage_pct: Decimal
    min_reserve: int


@dataclass(frozen=True)
class ArbitrageOpportunity:
    """
    A profitable, executable triangular route at its best trade size.

    ``path`` holds the three distinct tokens; the route returns to ``path[0]``.
    Amounts are denominated in raw units of ``path[0]``.
    """

    path: Tuple[str, str, str]
    steps: Tuple[TradeStep, TradeStep, TradeStep]
    start_amount: Decimal
    final_amount: Decimal
    profit_absolute: Decimal
    profit_pct: Decimal
    total_price_impact_pct: Decimal
    max_pool_usage_pct: Decimal
    risk_score: int
    max_safe_amount: Decimal
    min_reserve: int

    @property
    def pool_ids(self) -> Tuple[str, ...]:
        return tuple(step.pool_id for step in self.steps)

    @property
    def start_token(self) -> str:
        return self.path[0]

    @property
    def route(self) -> Tuple[str, str, str, str]:
        return self.path + (self.path[0],)

    def route_label(self, separator: str = " -> ") -> str:
        return separator.join(short_name(t) for t in self.route)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "path": [short_name(t) for t in self.route],
            "path_full": list(self.route),
            "pool_ids": list(self.pool_ids),
            "start_amount": str(self.start_amount),
            "final_amount": str(self.final_amount),
            "profit": str(self.profit_absolute),
            "profit_pct": str(self.profit_pct),
            "total_price_impact_pct": str(self.total_price_impact_pct),
            "max_pool_usage_pct": str(self.max_pool_usage_pct),
            "max_safe_amount": str(self.max_safe_amount),
            "min_reserve": self.min_reserve,
            "risk_score": self.risk_score,
            "steps": [step.to_dict() for step in self.steps],
        }
