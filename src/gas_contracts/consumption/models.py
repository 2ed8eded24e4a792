from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional


class ConsumptionUnit(str, Enum):
    M3_PER_HOUR = "m3_per_hour"
    M3_PER_DAY = "m3_per_day"


class LineStatusValue(str, Enum):
    ON = "on"
    OFF = "off"


class TransportStatus(str, Enum):
    WITHIN = "within"
    EXCEEDED_UPPER = "exceeded_upper"
    EXCEEDED_LOWER = "exceeded_lower"


class MoleculeStatus(str, Enum):
    WITHIN = "within"
    EXCEEDED = "exceeded"


class OverallStatus(str, Enum):
    OK = "ok"
    NOK = "nok"


# ------------------------------------------------------------
# Calculator inputs
# ------------------------------------------------------------
@dataclass(frozen=True)
class EquipmentConstant:
    equipment_id: str
    consumption_rate: float
    consumption_unit: ConsumptionUnit
    effective_start: Optional[date] = None
    effective_end: Optional[date] = None   # None = still in effect


@dataclass(frozen=True)
class AtomizerInput:
    scheduled: bool
    hours: float                        # 0..24
    consumption_rate: float
    consumption_unit: ConsumptionUnit


@dataclass(frozen=True)
class LineStatus:
    equipment_id: str
    status: LineStatusValue
    consumption_rate: float
    consumption_unit: ConsumptionUnit


@dataclass(frozen=True)
class ContractTolerances:
    qdc_contracted: float
    transport_tolerance_upper_percent: float
    transport_tolerance_lower_percent: float
    molecule_tolerance_percent: float


@dataclass(frozen=True)
class DailyConsumption:
    qds_calculated: float
    qds_manual: Optional[float] = None

    @property
    def effective_qds(self) -> float:
        """Manual override wins over the calculated figure."""
        return self.qds_manual if self.qds_manual is not None else self.qds_calculated


# ------------------------------------------------------------
# Calculator outputs
# ------------------------------------------------------------
@dataclass(frozen=True)
class DailyVolumes:
    qdc_atomizer: float
    qdc_lines: float
    qds_calculated: float


@dataclass(frozen=True)
class DeviationResult:
    # Transport (asymmetric band)
    transport_upper_limit: float
    transport_lower_limit: float
    transport_deviation: float
    transport_deviation_percent: float
    transport_status: TransportStatus

    # Molecule (symmetric band)
    molecule_upper_limit: float
    molecule_lower_limit: float
    molecule_deviation: float
    molecule_deviation_percent: float
    molecule_status: MoleculeStatus

    @property
    def overall_status(self) -> OverallStatus:
        if (
            self.transport_status is TransportStatus.WITHIN
            and self.molecule_status is MoleculeStatus.WITHIN
        ):
            return OverallStatus.OK
        return OverallStatus.NOK


class IndicatorColor(str, Enum):
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"
