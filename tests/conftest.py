"""Shared fixtures for gas_contracts tests."""
from datetime import date
from pathlib import Path

import pandas as pd
import pytest

from gas_contracts.aggregation.models import ConsumerUnit, DailyEntry, DailyPlan, RealConsumption
from gas_contracts.consumption.models import ContractTolerances


@pytest.fixture
def contract():
    """QDC 1000 m³, transport +10% / -20%, molecule ±5%."""
    return ContractTolerances(
        qdc_contracted=1000,
        transport_tolerance_upper_percent=10,
        transport_tolerance_lower_percent=20,
        molecule_tolerance_percent=5,
    )


@pytest.fixture
def units():
    return [
        ConsumerUnit(id="unit-a", name="Botucatu", code="BTU", organization_id="org-1"),
        ConsumerUnit(id="unit-b", name="Jundiai", code="JDI", organization_id="org-1"),
    ]


def entry(unit_id, day, qds, qds_manual=None, qdc_atomizer=None, qdc_lines=0.0):
    """Daily entry whose QDC equals its calculated QDS unless told otherwise."""
    return DailyEntry(
        unit_id=unit_id,
        date=day,
        qdc_atomizer=qds if qdc_atomizer is None else qdc_atomizer,
        qdc_lines=qdc_lines,
        qds_calculated=qds,
        qds_manual=qds_manual,
    )


def plan(unit_id, day, value):
    return DailyPlan(unit_id=unit_id, date=day, qdp_value=value)


def real(unit_id, day, value, notes=None):
    return RealConsumption(unit_id=unit_id, date=day, qdr_value=value, notes=notes)


@pytest.fixture
def data_dir(tmp_path) -> Path:
    """
    CSV exports for two organizations:
    - org-1: two units, an active contract for 2024, a few March entries
    - org-2: one unit, no contract
    """
    pd.DataFrame(
        [
            {"id": "unit-a", "name": "Botucatu", "code": "BTU", "organization_id": "org-1"},
            {"id": "unit-b", "name": "Jundiai", "code": "JDI", "organization_id": "org-1"},
            {"id": "unit-c", "name": "Recife", "code": "REC", "organization_id": "org-2"},
        ]
    ).to_csv(tmp_path / "units.csv", index=False)

    pd.DataFrame(
        [
            {
                "id": "ctr-1",
                "name": "Contrato 2024",
                "organization_id": "org-1",
                "start_date": "2024-01-01",
                "end_date": "2024-12-31",
                "qdc_contracted": 1000,
                "transport_tolerance_upper_percent": 10,
                "transport_tolerance_lower_percent": 20,
                "molecule_tolerance_percent": 5,
                "is_active": "true",
            },
            {
                "id": "ctr-old",
                "name": "Contrato 2023",
                "organization_id": "org-1",
                "start_date": "2023-01-01",
                "end_date": "2023-12-31",
                "qdc_contracted": 800,
                "transport_tolerance_upper_percent": 10,
                "transport_tolerance_lower_percent": 10,
                "molecule_tolerance_percent": 5,
                "is_active": "true",
            },
        ]
    ).to_csv(tmp_path / "contracts.csv", index=False)

    pd.DataFrame(
        [
            {"unit_id": "unit-a", "date": "2024-03-01", "qdc_atomizer": 400, "qdc_lines": 200,
             "qds_calculated": 600, "qds_manual": None},
            {"unit_id": "unit-b", "date": "2024-03-01", "qdc_atomizer": 300, "qdc_lines": 150,
             "qds_calculated": 450, "qds_manual": None},
            {"unit_id": "unit-a", "date": "2024-03-02", "qdc_atomizer": 500, "qdc_lines": 200,
             "qds_calculated": 700, "qds_manual": 650},
            {"unit_id": "unit-c", "date": "2024-03-01", "qdc_atomizer": 100, "qdc_lines": 0,
             "qds_calculated": 100, "qds_manual": None},
            {"unit_id": "unit-a", "date": "2024-04-01", "qdc_atomizer": 100, "qdc_lines": 0,
             "qds_calculated": 100, "qds_manual": None},
        ]
    ).to_csv(tmp_path / "daily_entries.csv", index=False)

    pd.DataFrame(
        [
            {"unit_id": "unit-a", "date": "2024-03-01", "qdp_value": 580},
            {"unit_id": "unit-a", "date": "2024-03-02", "qdp_value": 700},
        ]
    ).to_csv(tmp_path / "daily_plans.csv", index=False)

    pd.DataFrame(
        [
            {"unit_id": "unit-a", "date": "2024-03-01", "qdr_value": 590, "notes": None},
            {"unit_id": "unit-a", "date": "2024-03-02", "qdr_value": 560,
             "notes": "CAUSE:maintenance|Linha 2 parada"},
        ]
    ).to_csv(tmp_path / "real_consumptions.csv", index=False)

    pd.DataFrame(
        [
            {"equipment_id": "atom-1", "consumption_rate": 60, "consumption_unit": "m3_per_hour",
             "effective_start": "2024-01-01", "effective_end": None},
            {"equipment_id": "line-1", "consumption_rate": 240, "consumption_unit": "m3_per_day",
             "effective_start": "2024-01-01", "effective_end": "2024-06-30"},
        ]
    ).to_csv(tmp_path / "equipment_constants.csv", index=False)

    return tmp_path


D1 = date(2024, 3, 1)
D2 = date(2024, 3, 2)
D3 = date(2024, 3, 3)
