# src/gas_contracts/cli/petrobras_report.py

import argparse
import sys
from pathlib import Path

from gas_contracts.aggregation.period_aggregator import build_petrobras_report
from gas_contracts.data.records import load_organization_records
from gas_contracts.errors import GasReportError
from gas_contracts.presentation.console import render_petrobras_report
from gas_contracts.reports.excel_export import write_petrobras_workbook
from gas_contracts.utils.config import config
from gas_contracts.utils.dates import parse_month
from gas_contracts.utils.logger import get_logger

logger = get_logger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Monthly Petrobras gas consumption report (QDC / QDS / QDP / QDR)."
    )

    parser.add_argument("--month", type=str, required=True, help="Report month (YYYY-MM).")
    parser.add_argument("--organization", type=str, required=True, help="Organization id.")
    parser.add_argument(
        "--data-dir",
        type=str,
        default=str(config.data_dir),
        help="Directory holding the exported record CSV files.",
    )
    parser.add_argument("--excel", action="store_true", help="Also write the .xlsx workbook.")
    parser.add_argument(
        "--output",
        type=str,
        default=str(config.output_dir),
    )

    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    try:
        # Window is validated before any record is read
        start, end = parse_month(args.month)

        records = load_organization_records(Path(args.data_dir), args.organization, start, end)

        report = build_petrobras_report(
            entries=records.entries,
            plans=records.plans,
            real_consumptions=records.real_consumptions,
            contract=records.contract.tolerances,
            units=records.units,
            start=start,
            end=end,
        )

        print(render_petrobras_report(report))

        if args.excel:
            path = write_petrobras_workbook(report, Path(args.output))
            print(f"Workbook written: {path}")

        return 0

    except GasReportError as exc:
        logger.error("Petrobras report failed: %s", exc)
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
