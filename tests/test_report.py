"""Tests for the JSON report and console rendering."""

import io
import json
from decimal import Decimal

import pytest

from amm_arb.config import ScanConfig
from amm_arb.report import Colors, build_report, render_console, write_report
from amm_arb.scanner import ArbitrageScanner
from amm_arb.types import PoolSnapshot


@pytest.fixture
def config():
    return ScanConfig()


@pytest.fixture
def result(config, deep_triangle):
    return ArbitrageScanner(config).scan(deep_triangle)


@pytest.fixture
def empty_result(config, balanced_triangle):
    return ArbitrageScanner(config).scan(balanced_triangle)


def test_report_document(result, config):
    report = build_report(result, config)

    assert report["total_opportunities"] == 3
    assert report["max_pool_usage_percent"] == "5"
    assert report["paths_checked"] == 6
    assert report["graph"]["edges"] == 6
    assert report["summary"]["count"] == 3
    assert len(report["opportunities"]) == 3
    assert "timestamp" in report


def test_report_preserves_precision(result, config):
    """Raw reserves stay integers; derived amounts are exact decimal strings."""
    data = json.loads(json.dumps(build_report(result, config)))
    top = data["opportunities"][0]
    step = top["steps"][0]

    assert isinstance(step["reserve_in_before"], int)
    assert isinstance(top["min_reserve"], int)
    assert Decimal(top["profit"]) == result.opportunities[0].profit_absolute
    assert Decimal(step["amount_out"]) == result.opportunities[0].steps[0].amount_out
    assert top["path"][0] == top["path"][-1]
    assert top["pool_ids"] == list(result.opportunities[0].pool_ids)


def test_empty_report(empty_result, config):
    report = build_report(empty_result, config)
    assert report["total_opportunities"] == 0
    assert report["opportunities"] == []
    assert report["summary"] is None


def test_write_report(result, config, tmp_path):
    path = write_report(result, config, tmp_path / "reports" / "opps.json")

    with open(path) as f:
        data = json.load(f)
    assert data["total_opportunities"] == 3
    assert data["opportunities"][0]["risk_score"] == 0


def test_render_console(result, config):
    out = io.StringIO()
    render_console(result, config, stream=out, color=False)
    text = out.getvalue()

    assert "Found 3 executable arbitrage opportunities" in text
    assert "OPPORTUNITY #1" in text
    assert "OPPORTUNITY #3" in text
    assert "Risk Assessment:" in text
    assert "SUMMARY STATISTICS" in text
    assert "Most Active Tokens" in text
    assert "\033[" not in text


def test_render_console_respects_display_count(result):
    out = io.StringIO()
    render_console(result, ScanConfig(display_count=1), stream=out, color=False)
    text = out.getvalue()

    assert "OPPORTUNITY #1" in text
    assert "OPPORTUNITY #2" not in text


def test_render_console_empty(empty_result, config):
    out = io.StringIO()
    render_console(empty_result, config, stream=out)
    text = out.getvalue()

    assert "No executable profitable arbitrage opportunities found" in text
    assert Colors.RED in text


def test_colors_strip():
    assert Colors.strip(f"{Colors.GREEN}{Colors.BOLD}ok{Colors.RESET}") == "ok"


def test_steps_carry_display_figures(config):
    """Token decimals turn raw amounts and prices into whole-token figures."""
    snapshots = [
        PoolSnapshot("ab", "A", "B", 10**18, 2 * 10**18, 9, 6),
        PoolSnapshot("bc", "B", "C", 2 * 10**18, 10**18, 6, 9),
        PoolSnapshot("ca", "C", "A", 10**18, 11 * 10**17, 9, 9),
    ]
    result = ArbitrageScanner(config).scan(snapshots)
    report = build_report(result, config)

    opp = next(o for o in report["opportunities"] if o["path_full"][:2] == ["A", "B"])
    step = opp["steps"][0]
    assert step["decimals_in"] == 9
    assert step["decimals_out"] == 6
    assert Decimal(step["display_price"]) == Decimal(2000)
    assert Decimal(step["display_amount_in"]) == Decimal(opp["start_amount"]).scaleb(-9)

    out = io.StringIO()
    render_console(result, config, stream=out, color=False)
    text = out.getvalue()
    assert "Price" in text
    assert "2000" in text
