from datetime import date

import pytest

from gas_contracts.aggregation.models import Contract
from gas_contracts.consumption.models import ConsumptionUnit, ContractTolerances
from gas_contracts.data.records import (
    find_active_contract,
    load_contracts,
    load_daily_entries,
    load_equipment_constants,
    load_organization_records,
    load_real_consumptions,
    load_units,
)
from gas_contracts.errors import AmbiguousContractError, NoActiveContractError, RecordLoadError

MARCH = (date(2024, 3, 1), date(2024, 3, 31))


def _contract(cid, org, start, end, active=True):
    return Contract(
        id=cid,
        name=cid,
        organization_id=org,
        start_date=start,
        end_date=end,
        tolerances=ContractTolerances(1000, 10, 10, 5),
        is_active=active,
    )


def test_load_units(data_dir):
    units = load_units(data_dir)
    assert [u.id for u in units] == ["unit-a", "unit-b", "unit-c"]
    assert units[0].code == "BTU"
    assert units[2].organization_id == "org-2"


def test_load_contracts(data_dir):
    contracts = {c.id: c for c in load_contracts(data_dir)}

    current = contracts["ctr-1"]
    assert current.start_date == date(2024, 1, 1)
    assert current.end_date == date(2024, 12, 31)
    assert current.is_active is True
    assert current.tolerances.qdc_contracted == 1000
    assert current.tolerances.transport_tolerance_lower_percent == 20


def test_load_entries_keeps_manual_override(data_dir):
    entries = load_daily_entries(data_dir)

    assert len(entries) == 5
    manual = [e for e in entries if e.qds_manual is not None]
    assert len(manual) == 1
    assert manual[0].qds == 650
    assert entries[0].qds_manual is None
    assert entries[0].qdc == 600


def test_load_real_consumption_notes(data_dir):
    reals = load_real_consumptions(data_dir)
    assert reals[0].notes is None
    assert reals[1].notes == "CAUSE:maintenance|Linha 2 parada"


def test_load_equipment_constants(data_dir):
    constants = load_equipment_constants(data_dir)

    assert constants[0].consumption_unit is ConsumptionUnit.M3_PER_HOUR
    assert constants[0].effective_end is None
    assert constants[1].effective_end == date(2024, 6, 30)


def test_missing_file(tmp_path):
    with pytest.raises(RecordLoadError):
        load_units(tmp_path)


def test_missing_columns(tmp_path):
    (tmp_path / "units.csv").write_text("id,label\nu1,Unit 1\n")
    with pytest.raises(RecordLoadError, match="name"):
        load_units(tmp_path)


# ----------------------------
# Contract resolution
# ----------------------------

def test_find_active_contract_by_overlap():
    contracts = [
        _contract("old", "org-1", date(2023, 1, 1), date(2023, 12, 31)),
        _contract("cur", "org-1", date(2024, 1, 1), None),
        _contract("other", "org-2", date(2024, 1, 1), None),
    ]
    assert find_active_contract(contracts, "org-1", *MARCH).id == "cur"


def test_find_active_contract_ignores_inactive():
    contracts = [
        _contract("cur", "org-1", date(2024, 1, 1), None),
        _contract("draft", "org-1", date(2024, 1, 1), None, active=False),
    ]
    assert find_active_contract(contracts, "org-1", *MARCH).id == "cur"


def test_find_active_contract_none():
    contracts = [_contract("old", "org-1", date(2023, 1, 1), date(2023, 12, 31))]
    with pytest.raises(NoActiveContractError):
        find_active_contract(contracts, "org-1", *MARCH)


def test_find_active_contract_ambiguous():
    contracts = [
        _contract("a", "org-1", date(2024, 1, 1), date(2024, 3, 15)),
        _contract("b", "org-1", date(2024, 3, 16), None),
    ]
    with pytest.raises(AmbiguousContractError):
        find_active_contract(contracts, "org-1", *MARCH)


def test_organization_records_are_scoped(data_dir):
    records = load_organization_records(data_dir, "org-1", *MARCH)

    assert records.contract.id == "ctr-1"
    assert [u.id for u in records.units] == ["unit-a", "unit-b"]
    # unit-c belongs to org-2 and the April entry is outside the window
    assert len(records.entries) == 3
    assert len(records.plans) == 2
    assert len(records.real_consumptions) == 2


def test_organization_without_contract(data_dir):
    with pytest.raises(NoActiveContractError):
        load_organization_records(data_dir, "org-2", *MARCH)


def test_bad_entry_date_names_file_and_line(tmp_path):
    (tmp_path / "daily_entries.csv").write_text(
        "unit_id,date,qdc_atomizer,qdc_lines,qds_calculated\n"
        "unit-a,2024-03-01,400,200,600\n"
        "unit-a,2024-02-31,400,200,600\n"
    )
    with pytest.raises(RecordLoadError, match=r"daily_entries.csv line 3: invalid date '2024-02-31'"):
        load_daily_entries(tmp_path)


def test_bad_contract_end_date(data_dir):
    path = data_dir / "contracts.csv"
    path.write_text(path.read_text().replace("2024-12-31", "31/31/2024"))

    with pytest.raises(RecordLoadError, match="contracts.csv line 2"):
        load_contracts(data_dir)
