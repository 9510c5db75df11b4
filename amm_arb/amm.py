"""
Constant-product (x*y=k) swap simulation.

Implements the Uniswap V2 style swap formula with the fee taken from the
input, plus price impact and pool usage for a single swap. All math runs
under ``DECIMAL_CONTEXT`` (50 digits) whatever thread calls it; raw integer
reserves convert exactly.
"""

from decimal import Decimal, localcontext
from typing import Union

from .types import ExchangeEdge, TradeStep
from .utils import DECIMAL_CONTEXT

DEFAULT_FEE = Decimal("0.003")  # 0.30% per swap

Number = Union[int, Decimal]

ONE = Decimal(1)
HUNDRED = Decimal(100)


def _validate(amount_in: Decimal, reserve_in: Decimal, reserve_out: Decimal, fee: Decimal):
    if amount_in <= 0:
        raise ValueError(f"amount_in must be positive: {amount_in}")
    if reserve_in <= 0 or reserve_out <= 0:
        raise ValueError(
            f"Reserves must be positive: in={reserve_in}, out={reserve_out}"
        )
    if fee < 0 or fee >= 1:
        raise ValueError(f"Fee must be in [0, 1): {fee}")


def swap_out(
    amount_in: Number,
    reserve_in: Number,
    reserve_out: Number,
    fee: Decimal = DEFAULT_FEE,
) -> Decimal:
    """
    Calculate output amount for a swap using the constant-product formula.

    Formula (with fee embedded):
        amountInWithFee = amountIn * (1 - fee)
        amountOut = (amountInWithFee * reserveOut) / (reserveIn + amountInWithFee)

    The result is always strictly below reserve_out, so a swap can never
    drain the output side of a pool.

    Args:
        amount_in: Input token amount (raw units)
        reserve_in: Reserve of input token
        reserve_out: Reserve of output token
        fee: Fee as decimal (e.g., 0.003 for 30 bps)

    Returns:
        Output token amount (raw units)

    Raises:
        ValueError: If inputs are invalid (non-positive amount or reserves,
            fee outside [0, 1))
    """
    with localcontext(DECIMAL_CONTEXT):
        amount_in = Decimal(amount_in)
        reserve_in = Decimal(reserve_in)
        reserve_out = Decimal(reserve_out)
        fee = Decimal(fee)
        _validate(amount_in, reserve_in, reserve_out, fee)

        amount_in_with_fee = amount_in * (ONE - fee)
        numerator = amount_in_with_fee * reserve_out
        denominator = reserve_in + amount_in_with_fee

        return numerator / denominator


def price_impact(
    amount_in: Number,
    reserve_in: Number,
    reserve_out: Number,
    fee: Decimal = DEFAULT_FEE,
) -> Decimal:
    """
    Percent change of the marginal price caused by a swap, as a magnitude.

    Compares ``reserve_out / reserve_in`` before the trade with
    ``(reserve_out - amount_out) / (reserve_in + amount_in)`` after it.

    Returns:
        Price impact in percent (e.g., Decimal("2.5") for 2.5%)
    """
    with localcontext(DECIMAL_CONTEXT):
        amount_in = Decimal(amount_in)
        reserve_in = Decimal(reserve_in)
        reserve_out = Decimal(reserve_out)

        amount_out = swap_out(amount_in, reserve_in, reserve_out, fee)
        price_before = reserve_out / reserve_in
        price_after = (reserve_out - amount_out) / (reserve_in + amount_in)

        return abs((price_after - price_before) / price_before) * HUNDRED


def pool_usage(amount: Number, reserve: Number) -> Decimal:
    """Percent of a pre-trade reserve consumed (or added) by an amount."""
    with localcontext(DECIMAL_CONTEXT):
        reserve = Decimal(reserve)
        if reserve <= 0:
            raise ValueError(f"Reserve must be positive: {reserve}")
        return Decimal(amount) / reserve * HUNDRED


def simulate_swap(
    amount_in: Number,
    edge: ExchangeEdge,
    fee: Decimal = DEFAULT_FEE,
) -> TradeStep:
    """
    Simulate one swap through an edge and describe its effect on the pool.

    Usage figures are measured against the reserves before the trade; the
    edge itself is never modified.

    Args:
        amount_in: Input amount in raw units of ``edge.from_token``
        edge: Directed pool edge with oriented reserves
        fee: Fee as decimal

    Returns:
        A new TradeStep
    """
    with localcontext(DECIMAL_CONTEXT):
        amount_in = Decimal(amount_in)
        reserve_in = Decimal(edge.reserve_in)
        reserve_out = Decimal(edge.reserve_out)

        amount_out = swap_out(amount_in, reserve_in, reserve_out, fee)

        new_reserve_in = reserve_in + amount_in
        new_reserve_out = reserve_out - amount_out
        price_before = reserve_out / reserve_in
        price_after = new_reserve_out / new_reserve_in
        impact = abs((price_after - price_before) / price_before) * HUNDRED

        return TradeStep(
            from_token=edge.from_token,
            to_token=edge.to_token,
            pool_id=edge.source_pool,
            amount_in=amount_in,
            amount_out=amount_out,
            price_impact_pct=impact,
            price_before=price_before,
            price_after=price_after,
            reserve_in_before=edge.reserve_in,
            reserve_out_before=edge.reserve_out,
            reserve_in_after=new_reserve_in,
            reserve_out_after=new_reserve_out,
            pool_usage_in_pct=pool_usage(amount_in, reserve_in),
            pool_usage_out_pct=pool_usage(amount_out, reserve_out),
            decimals_in=edge.decimals_in,
            decimals_out=edge.decimals_out,
        )
