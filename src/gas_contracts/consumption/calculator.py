"""
Consumption Calculator

Turns equipment readings into daily volumes and compares a daily volume
against the contract tolerance bands.

Rules:
- Pure functions only
- No data access
- No logging
- Every returned volume is rounded to 2 decimals

Glossary:
- QDC: daily contracted/consumed quantity (atomizers + production lines)
- QDS: daily requested quantity (QDC atomizer + QDC lines)
"""

from __future__ import annotations

import math
from typing import Iterable, Optional

from gas_contracts.consumption.models import (
    AtomizerInput,
    ConsumptionUnit,
    ContractTolerances,
    DailyConsumption,
    DeviationResult,
    IndicatorColor,
    LineStatus,
    LineStatusValue,
    MoleculeStatus,
    TransportStatus,
)

HOURS_PER_DAY = 24


def round2(value: float) -> float:
    """Round half up to 2 decimals (1.125 -> 1.13, -1.125 -> -1.12)."""
    return math.floor(float(value) * 100 + 0.5) / 100


def normalize_to_hourly_rate(rate: float, unit: ConsumptionUnit | str) -> float:
    """
    Convert a consumption rate to m³/h.
    """
    if ConsumptionUnit(unit) is ConsumptionUnit.M3_PER_DAY:
        return rate / HOURS_PER_DAY
    return rate


# ----------------------------
# Daily volumes
# ----------------------------

def _atomizer_volume(atomizer: Optional[AtomizerInput]) -> float:
    if atomizer is None or not atomizer.scheduled or atomizer.hours <= 0:
        return 0.0
    rate = normalize_to_hourly_rate(atomizer.consumption_rate, atomizer.consumption_unit)
    return rate * atomizer.hours


def calculate_qdc_atomizer(
    primary: Optional[AtomizerInput],
    secondary: Optional[AtomizerInput] = None,
) -> float:
    """
    QDC for the atomizer(s) of a unit: hourly rate * scheduled hours.

    Dual-atomizer sites pass the second one as `secondary`; both are summed.
    """
    total = _atomizer_volume(primary) + _atomizer_volume(secondary)
    return round2(total)


def calculate_qdc_lines(lines: Iterable[LineStatus]) -> float:
    """
    QDC for production lines. A line that is ON runs the full day.
    """
    total = sum(
        normalize_to_hourly_rate(line.consumption_rate, line.consumption_unit) * HOURS_PER_DAY
        for line in lines
        if LineStatusValue(line.status) is LineStatusValue.ON
    )
    return round2(total)


def calculate_qds(qdc_atomizer: float, qdc_lines: float) -> float:
    return round2(qdc_atomizer + qdc_lines)


# ----------------------------
# Contract deviations
# ----------------------------

def _deviation_percent(deviation: float, qdc: float) -> float:
    return deviation / qdc * 100 if qdc != 0 else 0.0


def calculate_deviations(
    consumption: DailyConsumption,
    contract: ContractTolerances,
) -> DeviationResult:
    """
    Compare the effective QDS of a day with the contracted QDC.

    Transport band is asymmetric (upper / lower percent); molecule band is
    symmetric. Both measure the same deviation (qds - qdc), only the band
    width differs.
    """
    qds = round2(consumption.effective_qds)
    qdc = contract.qdc_contracted

    # Limits are rounded before comparison so float noise cannot flip a status
    transport_upper = round2(qdc + qdc * contract.transport_tolerance_upper_percent / 100)
    transport_lower = round2(qdc - qdc * contract.transport_tolerance_lower_percent / 100)
    transport_deviation = qds - qdc

    if qds > transport_upper:
        transport_status = TransportStatus.EXCEEDED_UPPER
    elif qds < transport_lower:
        transport_status = TransportStatus.EXCEEDED_LOWER
    else:
        transport_status = TransportStatus.WITHIN

    molecule_upper = round2(qdc + qdc * contract.molecule_tolerance_percent / 100)
    molecule_lower = round2(qdc - qdc * contract.molecule_tolerance_percent / 100)
    molecule_deviation = qds - qdc

    molecule_status = (
        MoleculeStatus.EXCEEDED
        if qds > molecule_upper or qds < molecule_lower
        else MoleculeStatus.WITHIN
    )

    return DeviationResult(
        transport_upper_limit=transport_upper,
        transport_lower_limit=transport_lower,
        transport_deviation=round2(transport_deviation),
        transport_deviation_percent=round2(_deviation_percent(transport_deviation, qdc)),
        transport_status=transport_status,
        molecule_upper_limit=molecule_upper,
        molecule_lower_limit=molecule_lower,
        molecule_deviation=round2(molecule_deviation),
        molecule_deviation_percent=round2(_deviation_percent(molecule_deviation, qdc)),
        molecule_status=molecule_status,
    )


def tolerance_indicator(
    status: TransportStatus | MoleculeStatus,
    deviation_percent: float,
    tolerance_percent: float,
    proximity_ratio: float = 0.05,
) -> IndicatorColor:
    """
    Dashboard color for one tolerance axis.

    - RED: outside the band
    - YELLOW: inside, but within `proximity_ratio` of the band edge
    - GREEN: otherwise
    """
    if status.value != "within":
        return IndicatorColor.RED

    proximity_threshold = tolerance_percent * proximity_ratio
    distance_to_limit = tolerance_percent - abs(deviation_percent)

    if distance_to_limit <= proximity_threshold:
        return IndicatorColor.YELLOW
    return IndicatorColor.GREEN
