"""Report assembler -- render classified unit sections as a Markdown document.

The output is deterministic: functions are sorted by name (code point order)
and nothing run-dependent such as timestamps is embedded, so unchanged inputs
give a byte-identical document.
"""

from __future__ import annotations

import html
from typing import TYPE_CHECKING

from benchdiff.compare.classifier import classify_entry
from benchdiff.compare.deltas import compute_delta, is_below_noise_floor
from benchdiff.domain.models import Metric, Status, UnitOutcome

if TYPE_CHECKING:
    from collections.abc import Sequence

    from benchdiff.domain.models import ComparisonEntry, MetricDelta, UnitSection

REPORT_MARKER = "<!-- benchmark-diff -->"
REPORT_TITLE = "# Benchmark Comparison"
NO_UNITS_NOTICE = "_No benchmark results found to compare._"
NO_FUNCTIONS_NOTICE = "_No valid benchmark functions found to compare._"
NONE_COMPARED_NOTICE = (
    "_Found contract pairs but failed to process or validate any for comparison._"
)
SECTION_SEPARATOR = "\n---\n"

NO_DIFF = "-"
NEW_METRIC = "+100% \U0001f680"
REMOVED_METRIC = "-100% \U0001f5d1\ufe0f"

_LEGEND_ORDER = (
    Status.IMPROVEMENT,
    Status.REGRESSION,
    Status.UNCHANGED,
    Status.NEW,
    Status.REMOVED,
)

# ---------------------------------------------------------------------------
# Cell formatting
# ---------------------------------------------------------------------------


def format_number(value: int) -> str:
    """Integer with thousands separators."""
    return f"{value:,}"


def format_threshold(threshold: float) -> str:
    """Render a threshold fraction as a percentage string, e.g. ``2.5%``."""
    return f"{threshold * 100:g}%"


def format_delta(delta: MetricDelta) -> str:
    """Render one Diff cell.

    Structural changes get fixed sentinels; changes below the display noise
    floor render as ``-``.
    """
    if delta.baseline == 0 and delta.current == 0:
        return NO_DIFF
    if delta.baseline == 0:
        return NEW_METRIC
    if delta.current == 0:
        return REMOVED_METRIC
    if delta.absolute == 0 or is_below_noise_floor(delta):
        return NO_DIFF
    sign = "+" if delta.absolute > 0 else ""
    return f"{sign}{format_number(delta.absolute)} ({sign}{delta.percent * 100:.0f}%)"


# ---------------------------------------------------------------------------
# Table rendering
# ---------------------------------------------------------------------------


def _table_header() -> list[str]:
    lines = [
        "<table>",
        "<thead>",
        "<tr>",
        "  <th></th>",
        "  <th>Function</th>",
    ]
    lines += [f'  <th colspan="3" align="center">{m.label}</th>' for m in Metric]
    lines += ["</tr>", "<tr>", "  <th>Status</th>", "  <th></th>"]
    for _ in Metric:
        lines += [
            '  <th align="right">Base</th>',
            '  <th align="right">PR</th>',
            '  <th align="center">Diff</th>',
        ]
    lines += ["</tr>", "</thead>", "<tbody>"]
    return lines


def _entry_row(entry: ComparisonEntry) -> list[str]:
    status = entry.status or Status.UNCHANGED
    lines = [
        "<tr>",
        f'  <td align="center">{status.indicator}</td>',
        f"  <td><code>{html.escape(entry.name)}</code></td>",
    ]
    for metric in Metric:
        delta = entry.deltas.get(metric) or compute_delta(
            entry.baseline.value(metric), entry.current.value(metric)
        )
        lines += [
            f'  <td align="right">{format_number(delta.baseline)}</td>',
            f'  <td align="right">{format_number(delta.current)}</td>',
            f'  <td align="center">{format_delta(delta)}</td>',
        ]
    lines.append("</tr>")
    return lines


def render_table(entries: Sequence[ComparisonEntry]) -> str:
    """Render classified entries as an HTML table, sorted by function name."""
    lines = _table_header()
    for entry in sorted(entries, key=lambda e: e.name):
        lines += _entry_row(entry)
    lines += ["</tbody>", "</table>"]
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Document assembly
# ---------------------------------------------------------------------------


def _legend() -> str:
    items = " | ".join(f"{s.indicator} {s.label}" for s in _LEGEND_ORDER)
    return f"Legends: {items}\n"


def _summary(sections: Sequence[UnitSection]) -> str:
    compared = sum(1 for s in sections if s.succeeded)
    skipped = sum(1 for s in sections if s.outcome is UnitOutcome.INVALID)
    failed = sum(1 for s in sections if s.outcome is UnitOutcome.ERROR)
    return (
        f"_Compared {compared} of {len(sections)} contract(s); "
        f"{skipped} skipped (invalid input), {failed} failed._\n"
    )


def _render_section(section: UnitSection, threshold: float) -> list[str]:
    heading = f"## Contract: {section.name}"
    if section.outcome is UnitOutcome.COMPARED:
        entries = [e if e.status else classify_entry(e, threshold) for e in section.entries]
        return [heading, render_table(entries), SECTION_SEPARATOR]
    if section.outcome is UnitOutcome.EMPTY:
        return [heading, f"\n{NO_FUNCTIONS_NOTICE}\n", SECTION_SEPARATOR]
    if section.outcome is UnitOutcome.INVALID:
        return [heading, f"\n_Skipped: invalid input ({section.detail})._\n", SECTION_SEPARATOR]
    return [
        heading,
        f"\n\u26a0\ufe0f Error comparing benchmarks for this contract: {section.detail}\n",
        SECTION_SEPARATOR,
    ]


def assemble(sections: Sequence[UnitSection], threshold: float) -> str:
    """Render the full comparison document.

    Sections appear in the given (discovery) order.  With no sections at all
    the document is a single "nothing to compare" notice.
    """
    if not sections:
        return f"{REPORT_MARKER}\n{REPORT_TITLE}\n\n{NO_UNITS_NOTICE}\n"

    lines = [
        REPORT_MARKER,
        REPORT_TITLE,
        f"_Comparison Threshold: {format_threshold(threshold)}_\n",
        _legend(),
        _summary(sections),
    ]
    for section in sections:
        lines += _render_section(section, threshold)

    if not any(s.succeeded for s in sections):
        lines.append(f"\n{NONE_COMPARED_NOTICE}\n")

    return "\n".join(lines) + "\n"
