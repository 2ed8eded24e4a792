# src/gas_contracts/cli/consolidated.py

import argparse
import sys
from datetime import date
from pathlib import Path

from gas_contracts.aggregation.period_aggregator import build_consolidated_view
from gas_contracts.data.records import load_organization_records
from gas_contracts.errors import GasReportError, InvalidDateWindowError
from gas_contracts.presentation.console import render_consolidated_view
from gas_contracts.utils.config import config
from gas_contracts.utils.dates import month_label, parse_date_window, parse_month
from gas_contracts.utils.logger import get_logger

logger = get_logger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Consolidated gas consumption view (dashboard) for one organization."
    )

    parser.add_argument("--organization", type=str, required=True)
    parser.add_argument("--month", type=str, default=None, help="YYYY-MM. Defaults to the current month.")
    parser.add_argument("--start", type=str, default=None, help="Window start (YYYY-MM-DD).")
    parser.add_argument("--end", type=str, default=None, help="Window end (YYYY-MM-DD).")
    parser.add_argument("--data-dir", type=str, default=str(config.data_dir))

    return parser.parse_args(argv)


def resolve_window(args: argparse.Namespace):
    if args.month and (args.start or args.end):
        raise InvalidDateWindowError("Use either --month or --start/--end, not both")

    if args.start or args.end:
        if not (args.start and args.end):
            raise InvalidDateWindowError("--start and --end must be given together")
        return parse_date_window(args.start, args.end)

    return parse_month(args.month or month_label(date.today()))


def main(argv=None) -> int:
    args = parse_args(argv)

    try:
        start, end = resolve_window(args)

        records = load_organization_records(Path(args.data_dir), args.organization, start, end)

        view = build_consolidated_view(
            entries=records.entries,
            plans=records.plans,
            real_consumptions=records.real_consumptions,
            contract=records.contract.tolerances,
            units=records.units,
            start=start,
            end=end,
        )

        print(render_consolidated_view(view))
        return 0

    except GasReportError as exc:
        logger.error("Consolidated view failed: %s", exc)
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
