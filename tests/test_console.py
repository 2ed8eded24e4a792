from datetime import date

from gas_contracts.aggregation.models import DeviationAlert
from gas_contracts.presentation.console import _format_table, fmt_volume, render_deviation_alerts


def test_format_table_right_aligns_numeric_columns():
    table = _format_table([("a", "1.00"), ("bb", "100.00")], ["name", "value"], numeric=(1,))

    assert table.splitlines() == [
        "name  value",
        "---- ------",
        "a      1.00",
        "bb   100.00",
    ]


def test_format_table_elides_extra_rows():
    table = _format_table([("a",), ("b",), ("c",)], ["name"], max_rows=2)

    assert table.splitlines()[-1] == "... (1 more rows omitted) ..."
    assert "c" not in table.splitlines()[2:4]


def test_fmt_volume():
    assert fmt_volume(None) == "-"
    assert fmt_volume(1234.5) == "1,234.50"


def test_render_deviation_alerts():
    alert = DeviationAlert(
        unit_id="unit-a",
        date=date(2024, 3, 2),
        scheduled=700,
        actual=560,
        deviation=-140,
        deviation_percent=-20,
        severity="high",
        cause="maintenance",
    )
    text = render_deviation_alerts([alert], 10)

    assert "== Deviation Alerts (> 10.0%) ==" in text
    assert "2024-03-02" in text
    assert "HIGH" in text
    assert "-20.00" in text


def test_render_without_alerts():
    assert "No deviation above the alert threshold." in render_deviation_alerts([], 15)
