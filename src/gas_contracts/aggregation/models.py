from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Set

from gas_contracts.consumption.models import (
    ContractTolerances,
    DeviationResult,
    IndicatorColor,
    MoleculeStatus,
    OverallStatus,
    TransportStatus,
)
from gas_contracts.utils.dates import day_of_week_label, month_label


# ------------------------------------------------------------
# Input records (already fetched by the caller)
# ------------------------------------------------------------
@dataclass(frozen=True)
class ConsumerUnit:
    id: str
    name: str
    code: Optional[str] = None
    organization_id: Optional[str] = None


@dataclass(frozen=True)
class Contract:
    id: str
    name: str
    organization_id: str
    start_date: date
    end_date: Optional[date]
    tolerances: ContractTolerances
    is_active: bool = True


@dataclass(frozen=True)
class DailyEntry:
    unit_id: str
    date: date
    qdc_atomizer: float
    qdc_lines: float
    qds_calculated: float
    qds_manual: Optional[float] = None

    @property
    def qdc(self) -> float:
        return self.qdc_atomizer + self.qdc_lines

    @property
    def qds(self) -> float:
        return self.qds_manual if self.qds_manual is not None else self.qds_calculated


@dataclass(frozen=True)
class DailyPlan:
    unit_id: str
    date: date
    qdp_value: float


@dataclass(frozen=True)
class RealConsumption:
    unit_id: str
    date: date
    qdr_value: float
    notes: Optional[str] = None


# ------------------------------------------------------------
# Daily summaries
# ------------------------------------------------------------
@dataclass
class UnitDaySummary:
    unit_id: str
    unit_name: Optional[str]
    unit_code: Optional[str]
    qdc: float
    qds: float
    qdp: Optional[float]    # None = no plan recorded
    qdr: Optional[float]    # None = no real consumption recorded
    has_entry: bool


@dataclass
class DailySummary:
    date: date
    qdc_total: float
    qds_total: float
    qdp_total: float
    qdr_total: float
    qdc_contracted: float
    deviations: DeviationResult
    transport_status: TransportStatus
    molecule_status: MoleculeStatus
    overall_status: OverallStatus
    units: List[UnitDaySummary] = field(default_factory=list)

    @property
    def day_of_week(self) -> str:
        return day_of_week_label(self.date)

    @property
    def has_data(self) -> bool:
        return self.qds_total > 0


# ------------------------------------------------------------
# Consolidated (dashboard) view
# ------------------------------------------------------------
@dataclass
class MonthlyTotals:
    qdc_contracted: Optional[float]
    qds: Optional[float]
    qdp: Optional[float]
    qdr: Optional[float]


@dataclass
class ToleranceIndicator:
    status: str
    color: IndicatorColor
    deviation: float
    deviation_percent: float
    upper_limit: float
    lower_limit: float
    tolerance_upper_percent: float
    tolerance_lower_percent: float


@dataclass
class ConsolidatedView:
    start_date: date
    end_date: date
    contract: ContractTolerances
    units: List[ConsumerUnit]
    daily_summaries: List[DailySummary]
    monthly_totals: MonthlyTotals
    transport_indicator: Optional[ToleranceIndicator] = None
    molecule_indicator: Optional[ToleranceIndicator] = None
    unknown_units: Set[str] = field(default_factory=set)


# ------------------------------------------------------------
# Petrobras (regulatory) monthly report
# ------------------------------------------------------------
@dataclass
class PetrobrasReportSummary:
    total_days: int
    days_with_data: int
    days_ok: int
    days_nok: int
    average_qds: float


@dataclass
class PetrobrasReport:
    start_date: date
    end_date: date
    contract: ContractTolerances
    rows: List[DailySummary]
    summary: PetrobrasReportSummary
    unknown_units: Set[str] = field(default_factory=set)

    @property
    def month(self) -> str:
        return month_label(self.start_date)

    @property
    def suggested_filename(self) -> str:
        return f"RC_{self.month}_Petrobras.xlsx"


# ------------------------------------------------------------
# Scheduling accuracy (planned QDP vs realized QDR)
# ------------------------------------------------------------
@dataclass
class AccuracyRecord:
    unit_id: str
    date: date
    scheduled: float
    actual: float
    accuracy: float
    deviation: float
    deviation_percent: float
    within_tolerance: bool
    cause: Optional[str] = None
    cause_notes: Optional[str] = None


@dataclass
class AccuracySummary:
    average_accuracy: float
    total_records: int
    within_tolerance_count: int
    outside_tolerance_count: int
    status: str


@dataclass
class AccuracyPeriod:
    period_start: date
    records: int
    scheduled: float
    actual: float
    average_accuracy: float
    deviation: float
    deviation_percent: float


@dataclass
class DeviationAlert:
    unit_id: str
    date: date
    scheduled: float
    actual: float
    deviation: float
    deviation_percent: float
    severity: str
    cause: Optional[str] = None
    cause_notes: Optional[str] = None
