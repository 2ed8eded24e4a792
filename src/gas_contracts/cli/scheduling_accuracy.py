# src/gas_contracts/cli/scheduling_accuracy.py

import argparse
import sys
from pathlib import Path

from gas_contracts.aggregation.accuracy import (
    PERIODS,
    build_accuracy_records,
    build_deviation_alerts,
    group_accuracy,
    summarize_accuracy,
)
from gas_contracts.data.records import (
    filter_for_units,
    filter_window,
    find_active_contract,
    load_contracts,
    load_daily_plans,
    load_real_consumptions,
    load_units,
    units_for_organization,
)
from gas_contracts.errors import GasReportError, NoActiveContractError
from gas_contracts.presentation.console import render_accuracy_summary, render_deviation_alerts
from gas_contracts.utils.config import config
from gas_contracts.utils.dates import parse_month
from gas_contracts.utils.logger import get_logger

logger = get_logger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Scheduling accuracy: planned (QDP) vs realized (QDR) consumption."
    )

    parser.add_argument("--month", type=str, required=True, help="YYYY-MM")
    parser.add_argument("--organization", type=str, required=True)
    parser.add_argument("--period", choices=PERIODS, default="daily")
    parser.add_argument(
        "--alert-threshold",
        type=float,
        default=config.deviation_alert_threshold_percent,
        help="Absolute QDP vs QDR deviation (%%) above which a day is flagged.",
    )
    parser.add_argument("--data-dir", type=str, default=str(config.data_dir))

    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    try:
        start, end = parse_month(args.month)
        data_dir = Path(args.data_dir)

        # Accuracy still runs without a contract, using the default tolerance
        try:
            contract = find_active_contract(load_contracts(data_dir), args.organization, start, end)
            tolerance = contract.tolerances.transport_tolerance_upper_percent
        except NoActiveContractError:
            logger.warning(
                "No active contract for %s; using default tolerance %.1f%%",
                args.organization, config.accuracy_default_tolerance_percent,
            )
            tolerance = None

        units = units_for_organization(load_units(data_dir), args.organization)
        plans = filter_window(filter_for_units(load_daily_plans(data_dir), units), start, end)
        reals = filter_window(filter_for_units(load_real_consumptions(data_dir), units), start, end)

        records = build_accuracy_records(reals, plans, tolerance)

        alerts = build_deviation_alerts(records, args.alert_threshold)

        print(render_accuracy_summary(summarize_accuracy(records), group_accuracy(records, args.period)))
        print(render_deviation_alerts(alerts, args.alert_threshold))
        return 0

    except GasReportError as exc:
        logger.error("Scheduling accuracy failed: %s", exc)
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
