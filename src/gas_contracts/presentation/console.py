from __future__ import annotations

import io
from typing import List, Optional, Sequence

from gas_contracts.aggregation.models import (
    AccuracyPeriod,
    AccuracySummary,
    ConsolidatedView,
    DeviationAlert,
    DailySummary,
    PetrobrasReport,
    ToleranceIndicator,
)


def _format_table(
    rows: Sequence[Sequence[object]],
    headers: List[str],
    max_rows: int | None = None,
    numeric: Sequence[int] = (),
) -> str:
    """
    Fixed-width text table. Columns listed in `numeric` are right-aligned;
    rows past `max_rows` are elided with a count.
    """
    rows = [[str(v) for v in row] for row in rows]
    shown = rows if max_rows is None else rows[:max_rows]
    omitted = len(rows) - len(shown)

    widths = [
        max([len(h)] + [len(row[i]) for row in shown])
        for i, h in enumerate(headers)
    ]

    def line(cells):
        return " ".join(
            cell.rjust(widths[i]) if i in numeric else cell.ljust(widths[i])
            for i, cell in enumerate(cells)
        ).rstrip()

    lines = [line(headers), " ".join("-" * w for w in widths)]
    lines += [line(row) for row in shown]
    if omitted:
        lines.append(f"... ({omitted} more rows omitted) ...")

    return "\n".join(lines) + "\n"


def fmt_volume(value: Optional[float]) -> str:
    """None -> '-'; volumes keep 2 decimals with thousand separators."""
    if value is None:
        return "-"
    return f"{value:,.2f}"


def _summary_rows(summaries: Sequence[DailySummary]):
    return [
        (
            s.date.strftime("%d/%m"),
            s.day_of_week,
            fmt_volume(s.qdc_contracted),
            fmt_volume(s.qds_total),
            fmt_volume(s.qdp_total),
            fmt_volume(s.qdr_total),
            fmt_volume(s.deviations.transport_deviation),
            s.transport_status.value,
            fmt_volume(s.deviations.molecule_deviation),
            s.molecule_status.value,
            s.overall_status.value.upper(),
        )
        for s in summaries
    ]


SUMMARY_HEADERS = [
    "date", "day", "qdc", "qds_total", "qdp_total", "qdr_total",
    "transport_dev", "transport", "molecule_dev", "molecule", "status",
]
SUMMARY_NUMERIC = (2, 3, 4, 5, 6, 8)


def _render_indicator(label: str, ind: Optional[ToleranceIndicator], out) -> None:
    if ind is None:
        print(f"{label}: N/A", file=out)
        return
    print(
        f"{label}: {ind.status} [{ind.color.value.upper()}] "
        f"deviation {ind.deviation:+,.2f} ({ind.deviation_percent:+.2f}%) "
        f"band {ind.lower_limit:,.2f} .. {ind.upper_limit:,.2f}",
        file=out,
    )


def render_consolidated_view(view: ConsolidatedView) -> str:
    out = io.StringIO()
    totals = view.monthly_totals

    print("=" * 80, file=out)
    print("GAS CONSUMPTION - CONSOLIDATED VIEW", file=out)
    print("=" * 80, file=out)
    print(f"Period: {view.start_date.isoformat()} to {view.end_date.isoformat()}", file=out)
    print(f"Units: {len(view.units)}", file=out)
    print(file=out)

    print(f"QDC Contracted: {fmt_volume(totals.qdc_contracted)}", file=out)
    print(f"QDS Total:      {fmt_volume(totals.qds)}", file=out)
    print(f"QDP Total:      {fmt_volume(totals.qdp)}", file=out)
    print(f"QDR Total:      {fmt_volume(totals.qdr)}", file=out)
    print(file=out)

    _render_indicator("Transport", view.transport_indicator, out)
    _render_indicator("Molecule ", view.molecule_indicator, out)
    print(file=out)

    if view.daily_summaries:
        print("== Daily Summary ==\n", file=out)
        table = _format_table(_summary_rows(view.daily_summaries), SUMMARY_HEADERS, numeric=SUMMARY_NUMERIC)
        print(table, file=out)
    else:
        print("No daily entries found for the selected period.", file=out)

    if view.unknown_units:
        print("\nWARNING: Entries for unknown units:", file=out)
        for unit_id in sorted(view.unknown_units):
            print(" -", repr(unit_id), file=out)

    return out.getvalue()


def render_petrobras_report(report: PetrobrasReport) -> str:
    out = io.StringIO()
    s = report.summary

    print("=" * 80, file=out)
    print(f"PETROBRAS CONSUMPTION REPORT - {report.month}", file=out)
    print("=" * 80, file=out)
    print(f"Total Days:     {s.total_days}", file=out)
    print(f"Days With Data: {s.days_with_data}", file=out)
    print(f"Days OK:        {s.days_ok}", file=out)
    print(f"Days NOK:       {s.days_nok}", file=out)
    print(f"Average QDS:    {fmt_volume(s.average_qds)}", file=out)
    print(file=out)

    table = _format_table(_summary_rows(report.rows), SUMMARY_HEADERS, max_rows=62, numeric=SUMMARY_NUMERIC)
    print(table, file=out)

    return out.getvalue()


def render_accuracy_summary(summary: AccuracySummary, periods: Sequence[AccuracyPeriod]) -> str:
    out = io.StringIO()

    print("=" * 70, file=out)
    print("SCHEDULING ACCURACY (QDP vs QDR)", file=out)
    print("=" * 70, file=out)
    print(f"Average Accuracy: {summary.average_accuracy:.2f}% ({summary.status})", file=out)
    print(f"Records:          {summary.total_records}", file=out)
    print(
        f"Within / Outside: {summary.within_tolerance_count} / {summary.outside_tolerance_count}",
        file=out,
    )
    print(file=out)

    rows = [
        (
            p.period_start.isoformat(),
            p.records,
            fmt_volume(p.scheduled),
            fmt_volume(p.actual),
            f"{p.average_accuracy:.2f}",
            fmt_volume(p.deviation),
            f"{p.deviation_percent:+.2f}",
        )
        for p in periods
    ]
    print(
        _format_table(
            rows,
            ["period", "records", "scheduled", "actual", "accuracy", "deviation", "deviation_pct"],
            numeric=(1, 2, 3, 4, 5, 6),
        ),
        file=out,
    )

    return out.getvalue()


def render_deviation_alerts(alerts: Sequence[DeviationAlert], threshold_percent: float) -> str:
    out = io.StringIO()

    print(f"== Deviation Alerts (> {threshold_percent:.1f}%) ==\n", file=out)
    if not alerts:
        print("No deviation above the alert threshold.", file=out)
        return out.getvalue()

    rows = [
        (
            a.date.isoformat(),
            a.unit_id,
            a.severity.upper(),
            fmt_volume(a.scheduled),
            fmt_volume(a.actual),
            f"{a.deviation_percent:+.2f}",
            a.cause or "",
        )
        for a in alerts
    ]
    print(
        _format_table(
            rows,
            ["date", "unit", "severity", "scheduled", "actual", "deviation_pct", "cause"],
            numeric=(3, 4, 5),
        ),
        file=out,
    )
    return out.getvalue()
