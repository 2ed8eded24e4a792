# src/gas_contracts/aggregation/accuracy.py
"""
Scheduling accuracy: planned QDP vs realized QDR per unit and day.

accuracy = (1 - |scheduled - actual| / scheduled) * 100, floored at 0
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

import pandas as pd

from gas_contracts.aggregation.models import (
    AccuracyPeriod,
    AccuracyRecord,
    AccuracySummary,
    DailyPlan,
    DeviationAlert,
    RealConsumption,
)
from gas_contracts.consumption.calculator import round2
from gas_contracts.utils.config import config
from gas_contracts.utils.dates import to_day
from gas_contracts.utils.logger import get_logger

logger = get_logger(__name__)

# Checked top-down; first threshold met wins
ACCURACY_STATUSES = [
    ("excellent", 95),
    ("good", 90),
    ("acceptable", 80),
    ("poor", 0),
]

PERIODS = ("daily", "weekly", "monthly")

# Alert severity by absolute deviation %; checked top-down
ALERT_SEVERITIES = [
    ("critical", 30),
    ("high", 20),
    ("medium", 10),
]

CAUSE_PREFIX = "CAUSE:"


def calculate_accuracy_rate(scheduled: float, actual: float) -> float:
    if scheduled <= 0:
        return 0.0
    accuracy = (1 - abs(scheduled - actual) / scheduled) * 100
    return max(0.0, accuracy)


def calculate_deviation_percent(scheduled: float, actual: float) -> float:
    if scheduled <= 0:
        return 0.0
    return (actual - scheduled) / scheduled * 100


def classify_accuracy(accuracy: float) -> str:
    for status, threshold in ACCURACY_STATUSES:
        if accuracy >= threshold:
            return status
    return ACCURACY_STATUSES[-1][0]


def parse_cause(notes: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """
    Notes recorded as "CAUSE:<cause>|<free text>" -> (cause, free text).
    Anything else is returned as free text with no cause.
    """
    if not notes or not notes.startswith(CAUSE_PREFIX):
        return None, notes

    body = notes[len(CAUSE_PREFIX):]
    cause, _, rest = body.partition("|")
    return (cause or None), (rest or None)


def build_accuracy_records(
    real_consumptions: Iterable[RealConsumption],
    plans: Iterable[DailyPlan],
    tolerance_percent: Optional[float] = None,
) -> List[AccuracyRecord]:
    """
    One record per real-consumption row that has a positive plan for the
    same unit and day. Rows without a usable plan are skipped.
    """
    tolerance = (
        config.accuracy_default_tolerance_percent
        if tolerance_percent is None
        else tolerance_percent
    )

    plan_index = {}
    for plan in plans:
        plan_index.setdefault((plan.unit_id, to_day(plan.date)), plan.qdp_value)

    records: List[AccuracyRecord] = []
    skipped = 0

    for real in real_consumptions:
        day = to_day(real.date)
        scheduled = plan_index.get((real.unit_id, day))

        if scheduled is None or scheduled <= 0:
            skipped += 1
            continue

        actual = real.qdr_value
        deviation_percent = calculate_deviation_percent(scheduled, actual)
        cause, cause_notes = parse_cause(real.notes)

        records.append(
            AccuracyRecord(
                unit_id=real.unit_id,
                date=day,
                scheduled=scheduled,
                actual=actual,
                accuracy=calculate_accuracy_rate(scheduled, actual),
                deviation=actual - scheduled,
                deviation_percent=deviation_percent,
                within_tolerance=abs(deviation_percent) <= tolerance,
                cause=cause,
                cause_notes=cause_notes,
            )
        )

    if skipped:
        logger.info("Accuracy: %d real-consumption rows without a positive plan skipped", skipped)

    return records


def summarize_accuracy(records: List[AccuracyRecord]) -> AccuracySummary:
    if not records:
        return AccuracySummary(
            average_accuracy=0.0,
            total_records=0,
            within_tolerance_count=0,
            outside_tolerance_count=0,
            status=classify_accuracy(0.0),
        )

    average = sum(r.accuracy for r in records) / len(records)
    within = sum(1 for r in records if r.within_tolerance)

    return AccuracySummary(
        average_accuracy=round2(average),
        total_records=len(records),
        within_tolerance_count=within,
        outside_tolerance_count=len(records) - within,
        status=classify_accuracy(average),
    )


def group_accuracy(records: List[AccuracyRecord], period: str = "daily") -> List[AccuracyPeriod]:
    """
    Roll accuracy records up by day, week (Monday start) or month.
    """
    if period not in PERIODS:
        raise ValueError(f"Unknown period {period!r}, expected one of {', '.join(PERIODS)}")

    if not records:
        return []

    df = pd.DataFrame(
        {
            "date": pd.to_datetime([r.date for r in records]),
            "scheduled": [r.scheduled for r in records],
            "actual": [r.actual for r in records],
            "accuracy": [r.accuracy for r in records],
        }
    )

    if period == "weekly":
        df["period_start"] = df["date"].dt.to_period("W-SUN").dt.start_time
    elif period == "monthly":
        df["period_start"] = df["date"].dt.to_period("M").dt.start_time
    else:
        df["period_start"] = df["date"]

    grouped = (
        df.groupby("period_start")
          .agg(
              records=("accuracy", "size"),
              scheduled=("scheduled", "sum"),
              actual=("actual", "sum"),
              average_accuracy=("accuracy", "mean"),
          )
          .sort_index()
    )

    periods: List[AccuracyPeriod] = []
    for period_start, row in grouped.iterrows():
        scheduled = float(row["scheduled"])
        actual = float(row["actual"])
        periods.append(
            AccuracyPeriod(
                period_start=period_start.date(),
                records=int(row["records"]),
                scheduled=round2(scheduled),
                actual=round2(actual),
                average_accuracy=round2(row["average_accuracy"]),
                deviation=round2(actual - scheduled),
                deviation_percent=round2(calculate_deviation_percent(scheduled, actual)),
            )
        )

    return periods


# ----------------------------
# Deviation alerts
# ----------------------------

def severity_level(deviation_percent: float) -> str:
    """
    critical >= 30%, high >= 20%, anything else medium (sign ignored).
    """
    magnitude = abs(deviation_percent)
    for severity, minimum in ALERT_SEVERITIES:
        if magnitude >= minimum:
            return severity
    return ALERT_SEVERITIES[-1][0]


def build_deviation_alerts(
    records: Iterable[AccuracyRecord],
    threshold_percent: Optional[float] = None,
) -> List[DeviationAlert]:
    """
    Alerts for records whose |deviation %| is strictly above the threshold,
    most recent day first.
    """
    threshold = (
        config.deviation_alert_threshold_percent
        if threshold_percent is None
        else threshold_percent
    )

    alerts = [
        DeviationAlert(
            unit_id=r.unit_id,
            date=r.date,
            scheduled=r.scheduled,
            actual=r.actual,
            deviation=r.deviation,
            deviation_percent=r.deviation_percent,
            severity=severity_level(r.deviation_percent),
            cause=r.cause,
            cause_notes=r.cause_notes,
        )
        for r in records
        if abs(r.deviation_percent) > threshold
    ]
    alerts.sort(key=lambda a: a.date, reverse=True)

    if alerts:
        logger.info(
            "%d deviation alert(s) above %.1f%% (%d critical)",
            len(alerts), threshold, sum(1 for a in alerts if a.severity == "critical"),
        )

    return alerts
