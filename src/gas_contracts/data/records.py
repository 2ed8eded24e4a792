# src/gas_contracts/data/records.py
"""
Record access layer.

The application database is exported as one CSV file per table; this
module turns those files into the plain records consumed by the
aggregator. No calculation happens here.

Expected files (inside the data directory):
  units.csv               id, name, code, organization_id
  contracts.csv           id, name, organization_id, start_date, end_date,
                          qdc_contracted, transport_tolerance_upper_percent,
                          transport_tolerance_lower_percent,
                          molecule_tolerance_percent, is_active
  daily_entries.csv       unit_id, date, qdc_atomizer, qdc_lines,
                          qds_calculated, qds_manual
  daily_plans.csv         unit_id, date, qdp_value
  real_consumptions.csv   unit_id, date, qdr_value, notes
  equipment_constants.csv equipment_id, consumption_rate, consumption_unit,
                          effective_start, effective_end
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, TypeVar

import pandas as pd

from gas_contracts.aggregation.models import (
    Contract,
    ConsumerUnit,
    DailyEntry,
    DailyPlan,
    RealConsumption,
)
from gas_contracts.consumption.models import (
    ConsumptionUnit,
    ContractTolerances,
    EquipmentConstant,
)
from gas_contracts.errors import (
    AmbiguousContractError,
    InvalidDateWindowError,
    NoActiveContractError,
    RecordLoadError,
)
from gas_contracts.utils.dates import to_day
from gas_contracts.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

UNITS_FILE = "units.csv"
CONTRACTS_FILE = "contracts.csv"
ENTRIES_FILE = "daily_entries.csv"
PLANS_FILE = "daily_plans.csv"
REAL_FILE = "real_consumptions.csv"
EQUIPMENT_FILE = "equipment_constants.csv"

ID_COLUMNS = ["id", "unit_id", "organization_id", "equipment_id", "code"]


# ===================================================================
# CSV helpers
# ===================================================================

def _read_csv(path: Path, required: Sequence[str]) -> pd.DataFrame:
    if not path.exists():
        raise RecordLoadError(f"Record file not found: {path}")

    df = pd.read_csv(path, dtype={c: str for c in ID_COLUMNS})

    missing = [c for c in required if c not in df.columns]
    if missing:
        raise RecordLoadError(f"{path.name} is missing columns: {', '.join(missing)}")

    logger.info(f"Loaded {len(df)} rows from {path}")
    return df


def _opt(value):
    """NaN / empty -> None"""
    if value is None:
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        pass
    return value


def _opt_float(value) -> Optional[float]:
    value = _opt(value)
    return float(value) if value is not None else None


def _day(value, source: str, index) -> date:
    """Row date -> calendar day; a bad value is reported with its CSV line."""
    try:
        return to_day(value)
    except InvalidDateWindowError as exc:
        # +2: header row and 1-based lines
        raise RecordLoadError(f"{source} line {index + 2}: invalid date {value!r}") from exc


def _opt_day(value, source: str, index) -> Optional[date]:
    value = _opt(value)
    return _day(value, source, index) if value is not None else None


def _as_bool(value) -> bool:
    value = _opt(value)
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "y", "sim")
    return bool(value)


# ===================================================================
# Loaders
# ===================================================================

def load_units(data_dir: Path) -> List[ConsumerUnit]:
    df = _read_csv(Path(data_dir) / UNITS_FILE, ["id", "name"])
    return [
        ConsumerUnit(
            id=str(row["id"]),
            name=str(row["name"]),
            code=_opt(row.get("code")),
            organization_id=_opt(row.get("organization_id")),
        )
        for _, row in df.iterrows()
    ]


def load_contracts(data_dir: Path) -> List[Contract]:
    df = _read_csv(
        Path(data_dir) / CONTRACTS_FILE,
        [
            "id",
            "organization_id",
            "start_date",
            "qdc_contracted",
            "transport_tolerance_upper_percent",
            "transport_tolerance_lower_percent",
            "molecule_tolerance_percent",
        ],
    )
    return [
        Contract(
            id=str(row["id"]),
            name=str(_opt(row.get("name")) or row["id"]),
            organization_id=str(row["organization_id"]),
            start_date=_day(row["start_date"], CONTRACTS_FILE, i),
            end_date=_opt_day(row.get("end_date"), CONTRACTS_FILE, i),
            tolerances=ContractTolerances(
                qdc_contracted=float(row["qdc_contracted"]),
                transport_tolerance_upper_percent=float(row["transport_tolerance_upper_percent"]),
                transport_tolerance_lower_percent=float(row["transport_tolerance_lower_percent"]),
                molecule_tolerance_percent=float(row["molecule_tolerance_percent"]),
            ),
            is_active=_as_bool(row.get("is_active")),
        )
        for i, row in df.iterrows()
    ]


def load_daily_entries(data_dir: Path) -> List[DailyEntry]:
    df = _read_csv(
        Path(data_dir) / ENTRIES_FILE,
        ["unit_id", "date", "qdc_atomizer", "qdc_lines", "qds_calculated"],
    )
    return [
        DailyEntry(
            unit_id=str(row["unit_id"]),
            date=_day(row["date"], ENTRIES_FILE, i),
            qdc_atomizer=float(_opt_float(row["qdc_atomizer"]) or 0.0),
            qdc_lines=float(_opt_float(row["qdc_lines"]) or 0.0),
            qds_calculated=float(_opt_float(row["qds_calculated"]) or 0.0),
            qds_manual=_opt_float(row.get("qds_manual")),
        )
        for i, row in df.iterrows()
    ]


def load_daily_plans(data_dir: Path) -> List[DailyPlan]:
    df = _read_csv(Path(data_dir) / PLANS_FILE, ["unit_id", "date", "qdp_value"])
    return [
        DailyPlan(
            unit_id=str(row["unit_id"]),
            date=_day(row["date"], PLANS_FILE, i),
            qdp_value=float(row["qdp_value"]),
        )
        for i, row in df.iterrows()
        if _opt(row["qdp_value"]) is not None
    ]


def load_real_consumptions(data_dir: Path) -> List[RealConsumption]:
    df = _read_csv(Path(data_dir) / REAL_FILE, ["unit_id", "date", "qdr_value"])
    return [
        RealConsumption(
            unit_id=str(row["unit_id"]),
            date=_day(row["date"], REAL_FILE, i),
            qdr_value=float(row["qdr_value"]),
            notes=_opt(row.get("notes")),
        )
        for i, row in df.iterrows()
        if _opt(row["qdr_value"]) is not None
    ]


def load_equipment_constants(data_dir: Path) -> List[EquipmentConstant]:
    df = _read_csv(
        Path(data_dir) / EQUIPMENT_FILE,
        ["equipment_id", "consumption_rate", "consumption_unit"],
    )
    return [
        EquipmentConstant(
            equipment_id=str(row["equipment_id"]),
            consumption_rate=float(row["consumption_rate"]),
            consumption_unit=ConsumptionUnit(str(row["consumption_unit"]).strip()),
            effective_start=_opt_day(row.get("effective_start"), EQUIPMENT_FILE, i),
            effective_end=_opt_day(row.get("effective_end"), EQUIPMENT_FILE, i),
        )
        for i, row in df.iterrows()
    ]


# ===================================================================
# Filtering / contract resolution
# ===================================================================

def units_for_organization(units: Iterable[ConsumerUnit], organization_id: str) -> List[ConsumerUnit]:
    return [u for u in units if u.organization_id == organization_id]


def filter_for_units(records: Iterable[T], units: Iterable[ConsumerUnit]) -> List[T]:
    """Keep unit-keyed records (entries, plans, real) belonging to `units`."""
    unit_ids = {u.id for u in units}
    return [r for r in records if r.unit_id in unit_ids]


def filter_window(records: Iterable[T], start: date, end: date) -> List[T]:
    """Keep dated records inside the inclusive [start, end] window."""
    return [r for r in records if start <= to_day(r.date) <= end]


def find_active_contract(
    contracts: Iterable[Contract],
    organization_id: str,
    start: date,
    end: date,
) -> Contract:
    """
    The single active contract of the organization whose validity overlaps
    [start, end]. Never falls back to a default contract.
    """
    matches = [
        c for c in contracts
        if c.organization_id == organization_id
        and c.is_active
        and c.start_date <= end
        and (c.end_date is None or c.end_date >= start)
    ]

    if not matches:
        raise NoActiveContractError(organization_id, start, end)

    if len(matches) > 1:
        ids = ", ".join(sorted(c.id for c in matches))
        raise AmbiguousContractError(
            f"Organization {organization_id} has {len(matches)} active contracts "
            f"between {start} and {end}: {ids}"
        )

    return matches[0]


# ===================================================================
# One-shot loader used by the CLIs
# ===================================================================

@dataclass
class OrganizationRecords:
    organization_id: str
    start: date
    end: date
    units: List[ConsumerUnit]
    contract: Contract
    entries: List[DailyEntry]
    plans: List[DailyPlan]
    real_consumptions: List[RealConsumption]


def load_organization_records(
    data_dir: Path,
    organization_id: str,
    start: date,
    end: date,
) -> OrganizationRecords:
    """
    Everything the aggregator needs for one organization and window.

    Raises NoActiveContractError before entries are read when the
    organization has no contract for the window.
    """
    data_dir = Path(data_dir)

    contract = find_active_contract(load_contracts(data_dir), organization_id, start, end)
    units = units_for_organization(load_units(data_dir), organization_id)

    if not units:
        logger.warning(f"Organization {organization_id} has no consumer units")

    def _scoped(records):
        return filter_window(filter_for_units(records, units), start, end)

    return OrganizationRecords(
        organization_id=organization_id,
        start=start,
        end=end,
        units=units,
        contract=contract,
        entries=_scoped(load_daily_entries(data_dir)),
        plans=_scoped(load_daily_plans(data_dir)),
        real_consumptions=_scoped(load_real_consumptions(data_dir)),
    )
