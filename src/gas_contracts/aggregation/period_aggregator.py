"""
Period Aggregator

Purpose:
- Join daily entries, daily plans (QDP) and real consumption (QDR) per
  unit and calendar day
- Evaluate contract deviation ONCE per day on the organization-level QDS
- Feed the consolidated dashboard and the monthly Petrobras report

Important:
- Records arrive already filtered by organization and window; the only
  filtering done here is matching each record to its calendar day
- A unit without an entry contributes 0 to totals; a missing plan or
  real-consumption record is None in the per-unit breakdown
- Deviations are never computed without contract tolerances
"""

from __future__ import annotations

from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from gas_contracts.aggregation.models import (
    ConsolidatedView,
    ConsumerUnit,
    DailyEntry,
    DailyPlan,
    DailySummary,
    MonthlyTotals,
    PetrobrasReport,
    PetrobrasReportSummary,
    RealConsumption,
    ToleranceIndicator,
    UnitDaySummary,
)
from gas_contracts.consumption.calculator import (
    calculate_deviations,
    round2,
    tolerance_indicator,
)
from gas_contracts.consumption.models import (
    ContractTolerances,
    DailyConsumption,
    OverallStatus,
)
from gas_contracts.errors import NoActiveContractError
from gas_contracts.utils.config import config
from gas_contracts.utils.dates import calendar_days, check_window, to_day
from gas_contracts.utils.logger import get_logger

logger = get_logger(__name__)

UnitDayKey = Tuple[str, date]


def _index_by_unit_day(records: Iterable, value_attr: str) -> Dict[UnitDayKey, float]:
    """
    (unit_id, day) -> value. The first record for a unit/day wins.
    """
    index: Dict[UnitDayKey, float] = {}
    for record in records:
        key = (record.unit_id, to_day(record.date))
        if key in index:
            logger.debug("Duplicate %s for unit %s on %s ignored", value_attr, *key)
            continue
        index[key] = float(getattr(record, value_attr))
    return index


def _aggregate(
    entries: Iterable[DailyEntry],
    plans: Iterable[DailyPlan],
    real_consumptions: Iterable[RealConsumption],
    contract: Optional[ContractTolerances],
    units: Sequence[ConsumerUnit],
    start: date,
    end: date,
    fill_calendar: bool,
) -> Tuple[List[DailySummary], Set[str]]:

    if contract is None:
        raise NoActiveContractError()
    check_window(start, end)

    # ------------------------------------------------------------
    # Index plans / real consumption by unit + day
    # ------------------------------------------------------------
    unit_lookup: Dict[str, ConsumerUnit] = {u.id: u for u in units}
    plan_index = _index_by_unit_day(plans, "qdp_value")
    real_index = _index_by_unit_day(real_consumptions, "qdr_value")

    # ------------------------------------------------------------
    # Bucket entries by day, then unit
    # ------------------------------------------------------------
    unknown_units: Set[str] = set()
    entries_by_day: Dict[date, Dict[str, List[DailyEntry]]] = {}
    entry_count = 0

    for entry in entries:
        day = to_day(entry.date)
        if day < start or day > end:
            continue

        if entry.unit_id not in unit_lookup:
            unknown_units.add(entry.unit_id)

        entries_by_day.setdefault(day, {}).setdefault(entry.unit_id, []).append(entry)
        entry_count += 1

    logger.info(
        "Aggregating %s..%s | units=%d entries=%d plans=%d real=%d",
        start, end, len(unit_lookup), entry_count, len(plan_index), len(real_index),
    )

    if unknown_units:
        logger.warning("Entries reference unknown units: %s", ", ".join(sorted(unknown_units)))

    # Report: every calendar day. Dashboard: only days carrying entries.
    days = calendar_days(start, end) if fill_calendar else sorted(entries_by_day)

    # ------------------------------------------------------------
    # Build one summary per day
    # ------------------------------------------------------------
    summaries: List[DailySummary] = []

    for day in days:
        day_entries = entries_by_day.get(day, {})
        unit_ids = list(unit_lookup) + sorted(
            uid for uid in day_entries if uid not in unit_lookup
        )

        qdc_total = 0.0
        qds_total = 0.0
        qdp_total = 0.0
        qdr_total = 0.0
        unit_rows: List[UnitDaySummary] = []

        for uid in unit_ids:
            unit_entries = day_entries.get(uid, [])
            qdc = round2(sum(e.qdc for e in unit_entries))
            qds = round2(sum(e.qds for e in unit_entries))
            qdp = plan_index.get((uid, day))
            qdr = real_index.get((uid, day))

            qdc_total += qdc
            qds_total += qds
            qdp_total += qdp or 0.0
            qdr_total += qdr or 0.0

            unit = unit_lookup.get(uid)
            unit_rows.append(
                UnitDaySummary(
                    unit_id=uid,
                    unit_name=unit.name if unit else None,
                    unit_code=unit.code if unit else None,
                    qdc=qdc,
                    qds=qds,
                    qdp=qdp,
                    qdr=qdr,
                    has_entry=bool(unit_entries),
                )
            )

        qds_total = round2(qds_total)

        # Organization-level deviation on the aggregated QDS
        deviations = calculate_deviations(
            DailyConsumption(qds_calculated=qds_total),
            contract,
        )

        logger.debug("Day %s | qds=%.2f status=%s", day, qds_total, deviations.overall_status.value)

        summaries.append(
            DailySummary(
                date=day,
                qdc_total=round2(qdc_total),
                qds_total=qds_total,
                qdp_total=round2(qdp_total),
                qdr_total=round2(qdr_total),
                qdc_contracted=contract.qdc_contracted,
                deviations=deviations,
                transport_status=deviations.transport_status,
                molecule_status=deviations.molecule_status,
                overall_status=deviations.overall_status,
                units=unit_rows,
            )
        )

    return summaries, unknown_units


def build_daily_summaries(
    entries: Iterable[DailyEntry],
    plans: Iterable[DailyPlan],
    real_consumptions: Iterable[RealConsumption],
    contract: Optional[ContractTolerances],
    units: Sequence[ConsumerUnit],
    start: date,
    end: date,
    fill_calendar: bool = False,
) -> List[DailySummary]:
    """
    One DailySummary per day, sorted ascending by date.

    fill_calendar=False -> only days with at least one entry
    fill_calendar=True  -> every calendar day in [start, end]
    """
    summaries, _ = _aggregate(
        entries, plans, real_consumptions, contract, units, start, end, fill_calendar
    )
    return summaries


# ----------------------------
# Consolidated (dashboard) view
# ----------------------------

def _positive_or_none(value: float) -> Optional[float]:
    return round2(value) if value > 0 else None


def compute_monthly_totals(
    summaries: Sequence[DailySummary],
    contract: Optional[ContractTolerances],
) -> MonthlyTotals:
    """
    Period totals for the dashboard cards. A total that is not positive is
    reported as None ("no data") rather than 0.
    """
    return MonthlyTotals(
        qdc_contracted=contract.qdc_contracted if contract else None,
        qds=_positive_or_none(sum(s.qds_total for s in summaries)),
        qdp=_positive_or_none(sum(s.qdp_total for s in summaries)),
        qdr=_positive_or_none(sum(s.qdr_total for s in summaries)),
    )


def build_tolerance_indicators(
    latest: DailySummary,
    contract: ContractTolerances,
    proximity_ratio: Optional[float] = None,
) -> Tuple[ToleranceIndicator, ToleranceIndicator]:
    """
    Transport and molecule indicators for the most recent day.
    """
    ratio = config.tolerance_proximity_ratio if proximity_ratio is None else proximity_ratio
    dev = latest.deviations

    transport = ToleranceIndicator(
        status=dev.transport_status.value,
        color=tolerance_indicator(
            dev.transport_status,
            dev.transport_deviation_percent,
            max(
                contract.transport_tolerance_upper_percent,
                contract.transport_tolerance_lower_percent,
            ),
            ratio,
        ),
        deviation=dev.transport_deviation,
        deviation_percent=dev.transport_deviation_percent,
        upper_limit=dev.transport_upper_limit,
        lower_limit=dev.transport_lower_limit,
        tolerance_upper_percent=contract.transport_tolerance_upper_percent,
        tolerance_lower_percent=contract.transport_tolerance_lower_percent,
    )

    molecule = ToleranceIndicator(
        status=dev.molecule_status.value,
        color=tolerance_indicator(
            dev.molecule_status,
            dev.molecule_deviation_percent,
            contract.molecule_tolerance_percent,
            ratio,
        ),
        deviation=dev.molecule_deviation,
        deviation_percent=dev.molecule_deviation_percent,
        upper_limit=dev.molecule_upper_limit,
        lower_limit=dev.molecule_lower_limit,
        tolerance_upper_percent=contract.molecule_tolerance_percent,
        tolerance_lower_percent=contract.molecule_tolerance_percent,
    )

    return transport, molecule


def build_consolidated_view(
    entries: Iterable[DailyEntry],
    plans: Iterable[DailyPlan],
    real_consumptions: Iterable[RealConsumption],
    contract: Optional[ContractTolerances],
    units: Sequence[ConsumerUnit],
    start: date,
    end: date,
    proximity_ratio: Optional[float] = None,
) -> ConsolidatedView:
    """
    Dashboard view: days with entries, period totals and the latest-day
    tolerance indicators.
    """
    summaries, unknown_units = _aggregate(
        entries, plans, real_consumptions, contract, units, start, end, fill_calendar=False
    )

    transport_indicator = None
    molecule_indicator = None
    if summaries:
        transport_indicator, molecule_indicator = build_tolerance_indicators(
            summaries[-1], contract, proximity_ratio
        )
    else:
        logger.warning("No daily entries found between %s and %s", start, end)

    return ConsolidatedView(
        start_date=start,
        end_date=end,
        contract=contract,
        units=list(units),
        daily_summaries=summaries,
        monthly_totals=compute_monthly_totals(summaries, contract),
        transport_indicator=transport_indicator,
        molecule_indicator=molecule_indicator,
        unknown_units=unknown_units,
    )


# ----------------------------
# Petrobras monthly report
# ----------------------------

def summarize_report(rows: Sequence[DailySummary]) -> PetrobrasReportSummary:
    total_days = len(rows)
    days_ok = sum(1 for r in rows if r.overall_status is OverallStatus.OK)
    average_qds = (
        round2(sum(r.qds_total for r in rows) / total_days) if total_days else 0.0
    )

    return PetrobrasReportSummary(
        total_days=total_days,
        days_with_data=sum(1 for r in rows if r.has_data),
        days_ok=days_ok,
        days_nok=total_days - days_ok,
        average_qds=average_qds,
    )


def build_petrobras_report(
    entries: Iterable[DailyEntry],
    plans: Iterable[DailyPlan],
    real_consumptions: Iterable[RealConsumption],
    contract: Optional[ContractTolerances],
    units: Sequence[ConsumerUnit],
    start: date,
    end: date,
) -> PetrobrasReport:
    """
    Regulatory report: one row for EVERY calendar day of the window so gaps
    show up as zero rows, plus report-level statistics.
    """
    rows, unknown_units = _aggregate(
        entries, plans, real_consumptions, contract, units, start, end, fill_calendar=True
    )
    summary = summarize_report(rows)

    logger.info(
        "Petrobras report %s..%s | days=%d with_data=%d ok=%d nok=%d",
        start, end, summary.total_days, summary.days_with_data, summary.days_ok, summary.days_nok,
    )

    return PetrobrasReport(
        start_date=start,
        end_date=end,
        contract=contract,
        rows=rows,
        summary=summary,
        unknown_units=unknown_units,
    )
