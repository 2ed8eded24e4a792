from datetime import date

from openpyxl import load_workbook

from conftest import entry
from gas_contracts.aggregation.period_aggregator import build_petrobras_report
from gas_contracts.reports.excel_export import (
    REPORT_COLUMNS,
    REPORT_SHEET,
    SUMMARY_SHEET,
    report_to_dataframe,
    summary_to_dataframe,
    write_petrobras_workbook,
)


def _february_report(contract, units):
    return build_petrobras_report(
        [entry("unit-a", date(2024, 2, 1), 1000), entry("unit-b", date(2024, 2, 2), 1200)],
        [],
        [],
        contract,
        units,
        date(2024, 2, 1),
        date(2024, 2, 29),
    )


def test_report_dataframe(contract, units):
    df = report_to_dataframe(_february_report(contract, units))

    assert list(df.columns) == list(REPORT_COLUMNS.values())
    assert len(df) == 29
    assert df.iloc[0]["Status"] == "OK"
    assert df.iloc[1]["Status"] == "NOK"
    assert df.iloc[1]["Status Transp."] == "exceeded_upper"
    assert df.iloc[0]["Dia"] == "Qui"


def test_summary_dataframe(contract, units):
    df = summary_to_dataframe(_february_report(contract, units))
    values = dict(zip(df["Indicador"], df["Valor"]))

    assert values["Mês"] == "2024-02"
    assert values["Total de Dias"] == 29
    assert values["Dias OK"] == 1
    assert values["Dias NOK"] == 28


def test_workbook_layout(contract, units, tmp_path):
    path = write_petrobras_workbook(_february_report(contract, units), tmp_path / "out")

    assert path.name == "RC_2024-02_Petrobras.xlsx"

    wb = load_workbook(path)
    assert wb.sheetnames == [REPORT_SHEET, SUMMARY_SHEET]

    ws = wb[REPORT_SHEET]
    assert ws.max_row == 30
    assert ws.freeze_panes == "A2"
    assert [c.value for c in ws[1]] == list(REPORT_COLUMNS.values())
    assert ws["A1"].font.bold
    assert ws["K2"].value == "OK"
