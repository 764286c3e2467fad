from __future__ import annotations

from typing import Iterable, List

from rsabench.app.suites import Comparison, SuiteReport
from rsabench.bench.stats import StatSummary

_UNITS = (("s", 1e9), ("ms", 1e6), ("µs", 1e3))


def format_duration(ns: float) -> str:
    """Render a nanosecond value with the largest unit that keeps it >= 1."""
    for unit, scale in _UNITS:
        if abs(ns) >= scale:
            return f"{ns / scale:.2f} {unit}"
    return f"{ns:.2f} ns"


def format_stats(summary: StatSummary, operation: str) -> str:
    lines = [
        f"=== Statistics for {operation} ({summary.count} iterations) ===",
        f"Mean:    {summary.mean:.2f} ns ({format_duration(summary.mean)})",
        f"Std dev: {summary.std_dev:.2f} ns",
        f"Min:     {summary.min:.2f} ns",
        f"Max:     {summary.max:.2f} ns",
        f"Total:   {summary.total:.2f} ns ({format_duration(summary.total)})",
    ]
    return "\n".join(lines)


def format_suite(report: SuiteReport) -> str:
    parts: List[str] = [f"##### {report.title} #####"]
    for r in report.results:
        parts.append(format_stats(r.summary, r.name))
    if report.results:
        parts.append("--- Mean per operation ---")
        for r in report.results:
            parts.append(f"{r.name}: {format_duration(r.summary.mean)}")
    if report.verified is not None:
        parts.append("Integrity check: OK" if report.verified else "Integrity check: FAILED")
    return "\n".join(parts)


def format_comparison(rows: Iterable[Comparison]) -> str:
    header = f"{'operation':<16} {'textbook':>12} {'library':>12} {'ratio':>9}"
    lines = [header, "-" * len(header)]
    for row in rows:
        lines.append(
            f"{row.operation:<16} {format_duration(row.textbook.mean):>12} "
            f"{format_duration(row.library.mean):>12} {row.ratio:>8.1f}x"
        )
    return "\n".join(lines)
