"""
Scan result output: JSON report document and console rendering.
"""

import re
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO, Union

from tabulate import tabulate

from .config import ScanConfig
from .risk import assess_risk, risk_bucket
from .scanner import ScanResult
from .types import ArbitrageOpportunity, short_name
from .utils import (
    ensure_path_exists,
    format_number,
    format_percent,
    get_logger,
    safe_json_dump,
    utc_now_iso,
)

logger = get_logger(__name__)


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    BOLD = "\033[1m"

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    MAGENTA = "\033[95m"
    CYAN = "\033[96m"

    @staticmethod
    def strip(text: str) -> str:
        """Remove all ANSI codes from text."""
        return re.sub(r"\033\[[0-9;]+m", "", text)


LEVEL_COLORS = {"low": Colors.GREEN, "medium": Colors.YELLOW, "high": Colors.RED}


def build_report(result: ScanResult, config: ScanConfig) -> Dict[str, Any]:
    """
    JSON-ready report document.

    Raw reserves stay JSON integers and derived amounts are decimal strings,
    so the document round-trips without losing digits.
    """
    return {
        "timestamp": utc_now_iso(),
        "total_opportunities": len(result.opportunities),
        "max_pool_usage_percent": str(config.max_pool_usage_pct),
        "min_profit_percent": str(config.min_profit_pct),
        "fee_rate": str(config.fee_rate),
        "liquidity_floor": config.liquidity_floor,
        "paths_checked": result.paths_checked,
        "tokens": result.token_count,
        "graph": {
            "pools_seen": result.graph_stats.pools_seen,
            "pools_skipped": result.graph_stats.pools_skipped,
            "edges": result.graph_stats.edges,
            "overwritten": result.graph_stats.overwritten,
        },
        "summary": result.summary.to_dict() if result.summary else None,
        "opportunities": [opp.to_dict() for opp in result.opportunities],
    }


def write_report(
    result: ScanResult, config: ScanConfig, path: Union[str, Path]
) -> Path:
    """Write the JSON report and return its path."""
    path = ensure_path_exists(path, is_file=True)
    path.write_text(safe_json_dump(build_report(result, config)))
    logger.info("Saved %d opportunities to %s", len(result.opportunities), path)
    return path


def _color_percent(pct) -> str:
    if pct >= 5:
        color = Colors.GREEN + Colors.BOLD
    elif pct >= 1:
        color = Colors.GREEN
    elif pct >= 0.1:
        color = Colors.YELLOW
    elif pct > 0:
        color = Colors.CYAN
    else:
        color = Colors.RED
    return f"{color}{format_percent(pct)}{Colors.RESET}"


def _color_usage(pct) -> str:
    if pct >= 10:
        color = Colors.RED + Colors.BOLD
    elif pct >= 5:
        color = Colors.RED
    elif pct >= 2:
        color = Colors.YELLOW
    else:
        color = Colors.GREEN
    return f"{color}{pct:.2f}%{Colors.RESET}"


def format_opportunity(
    index: int, opp: ArbitrageOpportunity, config: ScanConfig
) -> List[str]:
    """Console lines describing one opportunity."""
    start = short_name(opp.start_token)
    risk_color = LEVEL_COLORS[risk_bucket(opp.risk_score)]
    rule = "=" * 70

    lines = [
        rule,
        f"  OPPORTUNITY #{index} {risk_color}[Risk Score: {opp.risk_score}/100]{Colors.RESET}",
        rule,
        f"  Route: {Colors.BOLD}{opp.route_label()}{Colors.RESET}",
        "",
        "  Profit Analysis:",
        f"     Recommended Amount: {format_number(opp.start_amount)} {start}",
        f"     Max Safe Amount:    {format_number(opp.max_safe_amount)} {start} "
        f"({config.max_pool_usage_pct}% of smallest pool)",
        f"     Expected Return:    {format_number(opp.final_amount)} {start}",
        f"     Net Profit:         {format_number(opp.profit_absolute)} {start} "
        f"{_color_percent(opp.profit_pct)}",
        f"     Max Pool Usage:     {_color_usage(opp.max_pool_usage_pct)}",
        f"     Total Price Impact: {opp.total_price_impact_pct:.4f}%",
        "",
    ]

    rows = []
    for number, step in enumerate(opp.steps, start=1):
        rows.append(
            [
                number,
                f"{short_name(step.from_token)} -> {short_name(step.to_token)}",
                step.pool_id[:20],
                format_number(step.amount_in),
                format_number(step.amount_out),
                f"{step.pool_usage_in_pct:.2f}% / {step.pool_usage_out_pct:.2f}%",
                f"{step.price_impact_pct:.4f}%",
                f"{float(step.display_price):.6g}",
                f"{format_number(step.reserve_in_before)} / {format_number(step.reserve_out_before)}",
                f"{format_number(step.reserve_in_after)} / {format_number(step.reserve_out_after)}",
            ]
        )
    table = tabulate(
        rows,
        headers=[
            "Step", "Swap", "Pool", "In", "Out", "Usage in/out", "Impact", "Price", "Reserves", "After",
        ],
        tablefmt="simple",
    )
    lines.extend("     " + line for line in table.splitlines())
    lines.append("")

    lines.append("  Risk Assessment:")
    for note in assess_risk(opp, config.liquidity_floor):
        color = LEVEL_COLORS[note.level]
        lines.append(f"     {color}* {note.message}{Colors.RESET}")
        lines.append(f"     {color}  {note.advice}{Colors.RESET}")
    lines.append("")
    return lines


def format_summary(result: ScanResult) -> List[str]:
    """Console lines for the summary statistics block."""
    summary = result.summary
    if summary is None:
        return []

    stats = [
        ["Average Profit", format_percent(summary.avg_profit_pct)],
        ["Max Profit", format_percent(summary.max_profit_pct)],
        ["Min Profit", format_percent(summary.min_profit_pct)],
        ["Avg Price Impact", f"{summary.avg_price_impact_pct:.4f}%"],
        ["Avg Pool Usage", f"{summary.avg_pool_usage_pct:.2f}%"],
        ["Avg Risk Score", f"{summary.avg_risk_score:.0f}/100"],
        ["Low Risk (0-39)", summary.risk_distribution["low"]],
        ["Medium Risk (40-59)", summary.risk_distribution["medium"]],
        ["High Risk (60-100)", summary.risk_distribution["high"]],
    ]
    lines = [f"{Colors.BLUE}{Colors.BOLD}SUMMARY STATISTICS{Colors.RESET}", ""]
    lines.extend("   " + line for line in tabulate(stats, tablefmt="plain").splitlines())
    lines.append("")

    best = summary.best_profit
    safest = summary.lowest_risk
    lines.extend(
        [
            f"{Colors.CYAN}{Colors.BOLD}Best Opportunities by Category{Colors.RESET}",
            "",
            "   Highest Absolute Profit:",
            f"      {best.route_label()}: {format_number(best.profit_absolute)} "
            f"{short_name(best.start_token)} profit",
            f"      Start with: {format_number(best.start_amount)} {short_name(best.start_token)}",
            "   Lowest Risk:",
            f"      {safest.route_label()}: Risk score {safest.risk_score}/100",
            f"      Start with: {format_number(safest.start_amount)} {short_name(safest.start_token)}",
            "",
        ]
    )

    if summary.top_tokens:
        lines.append(f"{Colors.CYAN}{Colors.BOLD}Most Active Tokens{Colors.RESET}")
        lines.append("")
        for rank, (token, count) in enumerate(summary.top_tokens, start=1):
            lines.append(f"   {rank}. {token}: {count} opportunities")
        lines.append("")
    return lines


def render_console(
    result: ScanResult,
    config: ScanConfig,
    stream: Optional[TextIO] = None,
    color: bool = True,
) -> None:
    """
    Print scan results.

    Args:
        result: Scan output
        config: Configuration used for the scan
        stream: Output stream (stdout by default)
        color: If False, ANSI codes are stripped
    """
    stream = stream or sys.stdout
    lines = [
        f"Tokens: {result.token_count} | Pools: {result.graph_stats.pools_seen} | "
        f"Paths checked: {result.paths_checked} | Time: {result.elapsed_sec:.2f}s",
        "",
    ]

    if not result.opportunities:
        lines.extend(
            [
                f"{Colors.RED}{Colors.BOLD}No executable profitable arbitrage opportunities found.{Colors.RESET}",
                "   Possible reasons:",
                f"   * All opportunities require >{config.max_pool_usage_pct}% of pool liquidity",
                f"   * Price impact too high (>{config.max_price_impact_pct}%)",
                "   * Market is efficient (prices are balanced)",
                f"   * Fees ({config.fee_rate * 100}% per swap) eat up potential profits",
                "",
            ]
        )
    else:
        lines.append(
            f"{Colors.GREEN}{Colors.BOLD}Found {len(result.opportunities)} executable "
            f"arbitrage opportunities{Colors.RESET}"
        )
        lines.append("")
        for index, opp in enumerate(result.opportunities[: config.display_count], start=1):
            lines.extend(format_opportunity(index, opp, config))
        lines.extend(format_summary(result))

    text = "\n".join(lines)
    if not color:
        text = Colors.strip(text)
    print(text, file=stream)
