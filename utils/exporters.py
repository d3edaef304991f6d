import logging
import os

from domain.reports import Report

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("txt", "csv", "xlsx", "pdf")


def detect_format(filepath: str) -> str:
    ext = os.path.splitext(filepath)[1].lower().lstrip(".")
    return ext if ext in SUPPORTED_FORMATS else "txt"


def export_report(report: Report, filepath: str, fmt: str | None = None) -> None:
    fmt = (fmt or detect_format(filepath)).lower()
    os.makedirs(os.path.dirname(filepath), exist_ok=True) if os.path.dirname(
        filepath
    ) else None
    try:
        if fmt == "txt":
            with open(filepath, "w", encoding="utf-8") as f:
                f.write(report.as_text())
        elif fmt == "csv":
            from utils.csv_utils import report_to_csv

            report_to_csv(report, filepath)
        elif fmt in ("xlsx", "xls"):
            from utils.excel_utils import report_to_xlsx

            report_to_xlsx(report, filepath)
        elif fmt == "pdf":
            from utils.pdf_utils import report_to_pdf

            report_to_pdf(report, filepath)
        else:
            raise ValueError(f"Unsupported export format: {fmt}")
    except Exception:
        logger.exception("Failed to export report to %s (%s)", filepath, fmt)
        raise
