from pathlib import Path

import pandas as pd
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from gas_contracts.aggregation.models import PetrobrasReport
from gas_contracts.utils.logger import get_logger

logger = get_logger(__name__)

REPORT_SHEET = "Relatório"
SUMMARY_SHEET = "Resumo"

REPORT_COLUMNS = {
    "date": "Data",
    "day_of_week": "Dia",
    "qdc_contracted": "QDC",
    "qds_total": "QDS Total",
    "qdp_total": "QDP Total",
    "qdr_total": "QDR Total",
    "transport_deviation": "Desvio Transp.",
    "transport_status": "Status Transp.",
    "molecule_deviation": "Desvio Mol.",
    "molecule_status": "Status Mol.",
    "overall_status": "Status",
}


def _autosize_columns(ws):
    """
    Autosize Excel columns based on content length.
    """
    for col in ws.columns:
        max_len = max((len(str(cell.value)) for cell in col if cell.value is not None), default=0)
        col_letter = get_column_letter(col[0].column)
        ws.column_dimensions[col_letter].width = min(max_len + 2, 30)


def _freeze_header(ws):
    ws.freeze_panes = "A2"


def _bold_header(ws):
    for cell in ws[1]:
        cell.font = Font(bold=True)


def report_to_dataframe(report: PetrobrasReport) -> pd.DataFrame:
    """
    One row per calendar day, Portuguese column headers.
    """
    df = pd.DataFrame(
        [
            {
                "date": row.date,
                "day_of_week": row.day_of_week,
                "qdc_contracted": row.qdc_contracted,
                "qds_total": row.qds_total,
                "qdp_total": row.qdp_total,
                "qdr_total": row.qdr_total,
                "transport_deviation": row.deviations.transport_deviation,
                "transport_status": row.transport_status.value,
                "molecule_deviation": row.deviations.molecule_deviation,
                "molecule_status": row.molecule_status.value,
                "overall_status": row.overall_status.value.upper(),
            }
            for row in report.rows
        ],
        columns=list(REPORT_COLUMNS),
    )
    return df.rename(columns=REPORT_COLUMNS)


def summary_to_dataframe(report: PetrobrasReport) -> pd.DataFrame:
    s = report.summary
    return pd.DataFrame(
        {
            "Indicador": ["Mês", "Total de Dias", "Dias com Dados", "Dias OK", "Dias NOK", "QDS Média"],
            "Valor": [report.month, s.total_days, s.days_with_data, s.days_ok, s.days_nok, s.average_qds],
        }
    )


def write_petrobras_workbook(report: PetrobrasReport, output_dir: Path) -> Path:
    """
    Write the monthly Petrobras workbook:
    - Relatório (daily rows)
    - Resumo (report statistics)
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    file_path = output_dir / report.suggested_filename

    with pd.ExcelWriter(file_path, engine="openpyxl") as writer:
        sheet_map = {
            REPORT_SHEET: report_to_dataframe(report),
            SUMMARY_SHEET: summary_to_dataframe(report),
        }

        for sheet_name, df in sheet_map.items():
            df.to_excel(writer, sheet_name=sheet_name, index=False)

            ws = writer.book[sheet_name]

            _freeze_header(ws)
            _autosize_columns(ws)
            _bold_header(ws)

    logger.info(f"Petrobras workbook written: {file_path}")
    return file_path
