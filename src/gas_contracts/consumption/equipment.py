"""
Equipment constant history -> calculator inputs.

Consumption rates are versioned per equipment with an effective date
range, the same way modality weights are governed: a record applies to a
day when effective_start <= day <= effective_end (open end = current).
"""

from __future__ import annotations

from datetime import date
from typing import Dict, Iterable, List, Optional

from gas_contracts.consumption.calculator import (
    calculate_qdc_atomizer,
    calculate_qdc_lines,
    calculate_qds,
)
from gas_contracts.consumption.models import (
    AtomizerInput,
    DailyVolumes,
    EquipmentConstant,
    LineStatus,
    LineStatusValue,
)
from gas_contracts.utils.logger import get_logger

logger = get_logger(__name__)


def _is_effective(constant: EquipmentConstant, day: date) -> bool:
    if constant.effective_start is not None and constant.effective_start > day:
        return False
    if constant.effective_end is not None and constant.effective_end < day:
        return False
    return True


def resolve_constant(
    history: Iterable[EquipmentConstant],
    equipment_id: str,
    day: date,
) -> Optional[EquipmentConstant]:
    """
    Constant in effect for `equipment_id` on `day`.

    When ranges overlap the most recently started record wins.
    """
    candidates = [
        c for c in history
        if c.equipment_id == equipment_id and _is_effective(c, day)
    ]
    if not candidates:
        return None
    return max(candidates, key=lambda c: c.effective_start or date.min)


def build_atomizer_input(
    constant: EquipmentConstant,
    scheduled: bool,
    hours: float,
) -> AtomizerInput:
    return AtomizerInput(
        scheduled=scheduled,
        hours=hours,
        consumption_rate=constant.consumption_rate,
        consumption_unit=constant.consumption_unit,
    )


def build_line_statuses(
    states: Dict[str, LineStatusValue | str],
    history: Iterable[EquipmentConstant],
    day: date,
) -> List[LineStatus]:
    """
    Pair each line's on/off state for the day with its current constant.

    Lines without a constant for the day are skipped and logged.
    """
    history = list(history)
    lines: List[LineStatus] = []

    for equipment_id, status in states.items():
        constant = resolve_constant(history, equipment_id, day)
        if constant is None:
            logger.warning("No consumption constant for line %s on %s", equipment_id, day)
            continue

        lines.append(
            LineStatus(
                equipment_id=equipment_id,
                status=LineStatusValue(status),
                consumption_rate=constant.consumption_rate,
                consumption_unit=constant.consumption_unit,
            )
        )

    return lines


def calculate_daily_volumes(
    primary: Optional[AtomizerInput],
    secondary: Optional[AtomizerInput],
    lines: Iterable[LineStatus],
) -> DailyVolumes:
    """
    QDC atomizer, QDC lines and QDS for one unit on one day.
    """
    # Units without atomizers pass primary=None
    qdc_atomizer = calculate_qdc_atomizer(primary, secondary)
    qdc_lines = calculate_qdc_lines(lines)

    return DailyVolumes(
        qdc_atomizer=qdc_atomizer,
        qdc_lines=qdc_lines,
        qds_calculated=calculate_qds(qdc_atomizer, qdc_lines),
    )
