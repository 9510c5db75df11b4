"""Tests for risk scoring and risk notes."""

from decimal import Decimal

import pytest

from amm_arb.risk import assess_risk, calculate_risk_score, risk_bucket


@pytest.mark.parametrize(
    "usage,impact,min_reserve,expected",
    [
        (1, 1, 2_000_000, 0),
        (2, 2, 2_000_000, 0),  # thresholds are strict
        (3, 1, 2_000_000, 10),
        (6, 1, 2_000_000, 20),
        (11, 1, 2_000_000, 40),
        (1, 3, 2_000_000, 10),
        (1, 6, 2_000_000, 20),
        (1, 12, 2_000_000, 40),
        (0, 0, 999_999, 20),
        (0, 0, 1_000_000, 0),
        (11, 11, 100, 100),
        (Decimal("5.0001"), Decimal("2.0001"), 10**9, 30),
    ],
)
def test_calculate_risk_score(usage, impact, min_reserve, expected):
    assert calculate_risk_score(usage, impact, min_reserve) == expected


def test_custom_liquidity_floor():
    assert calculate_risk_score(0, 0, 500, liquidity_floor=100) == 0
    assert calculate_risk_score(0, 0, 500, liquidity_floor=1000) == 20


def test_score_bounds():
    assert calculate_risk_score(0, 0, 10**18) == 0
    assert calculate_risk_score(100, 100, 0) == 100


@pytest.mark.parametrize(
    "score,bucket",
    [(0, "low"), (39, "low"), (40, "medium"), (59, "medium"), (60, "high"), (100, "high")],
)
def test_risk_bucket(score, bucket):
    assert risk_bucket(score) == bucket


def test_assess_risk_low(make_opportunity):
    notes = assess_risk(make_opportunity(usage="1", impact="0.5", min_reserve=5_000_000))

    assert [n.category for n in notes] == ["pool_usage", "price_impact", "liquidity"]
    assert [n.level for n in notes] == ["low", "low", "low"]
    assert "1.00% of pool" in notes[0].message


def test_assess_risk_medium(make_opportunity):
    notes = assess_risk(make_opportunity(usage="3", impact="4", min_reserve=500_000))
    assert [n.level for n in notes] == ["medium", "medium", "medium"]


def test_assess_risk_high(make_opportunity):
    notes = assess_risk(make_opportunity(usage="6", impact="7", min_reserve=50_000))

    assert [n.level for n in notes] == ["high", "high", "high"]
    assert "Very low liquidity" in notes[2].message
    assert "50.00K" in notes[2].message


def test_assess_risk_uses_floor(make_opportunity):
    opp = make_opportunity(min_reserve=500)
    assert assess_risk(opp, liquidity_floor=100)[2].level == "low"
    assert assess_risk(opp, liquidity_floor=1000)[2].level == "medium"
    assert assess_risk(opp, liquidity_floor=10_000)[2].level == "high"
