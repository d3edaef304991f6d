import logging
import os

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.platypus import SimpleDocTemplate, Spacer, Table, TableStyle

from domain.reports import TIME_FORMAT, Report, format_amount

logger = logging.getLogger(__name__)


def _safe_str(value):
    return "" if value is None else str(value)


def _register_cyrillic_font() -> str:
    """Try to register a TTF font that supports Cyrillic and return its name.

    Transfer descriptions are written in Russian, so Helvetica is only the
    last resort.
    """
    candidates = [
        "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
        "/usr/share/fonts/dejavu/DejaVuSans.ttf",
        "/Library/Fonts/Arial Unicode.ttf",
    ]
    windir = os.environ.get("WINDIR") or os.environ.get("SystemRoot")
    if windir:
        fonts_dir = os.path.join(windir, "Fonts")
        candidates.append(os.path.join(fonts_dir, "DejaVuSans.ttf"))
        candidates.append(os.path.join(fonts_dir, "Arial.ttf"))
    candidates.append("DejaVuSans.ttf")

    for path in candidates:
        if not os.path.exists(path):
            continue
        name = os.path.splitext(os.path.basename(path))[0].replace(" ", "")
        try:
            pdfmetrics.registerFont(TTFont(name, path))
        except Exception:
            logger.debug("Failed to register font %s at %s", name, path, exc_info=True)
            continue
        logger.debug("Registered font %s from %s", name, path)
        return name

    logger.warning("No suitable TTF font found for Cyrillic; falling back to Helvetica")
    return "Helvetica"


def _table(data: list[list[str]], col_widths: list[float], font_name: str) -> Table:
    table = Table(data, colWidths=col_widths, repeatRows=1)
    table.setStyle(
        TableStyle(
            [
                ("FONT", (0, 0), (-1, -1), font_name),
                ("FONTSIZE", (0, 0), (-1, -1), 9),
                ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
                ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
                ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ("LEFTPADDING", (0, 0), (-1, -1), 4),
                ("RIGHTPADDING", (0, 0), (-1, -1), 4),
            ]
        )
    )
    return table


def report_to_pdf(report: Report, filepath: str) -> None:
    """Export the transaction log and budgets as PDF tables."""
    data = [["Time", "Type", "Category", "Amount", "Description"]]
    for transaction in report.transactions():
        data.append(
            [
                transaction.time.strftime(TIME_FORMAT),
                transaction.type.value,
                _safe_str(transaction.category),
                format_amount(transaction.amount),
                _safe_str(transaction.description),
            ]
        )
    data.append(["TOTAL INCOME", "", "", format_amount(report.total_income()), ""])
    data.append(["TOTAL EXPENSE", "", "", format_amount(report.total_expense()), ""])

    budget_data = [["Category", "Budget", "Remaining"]]
    for name, budget, remaining in report.budget_rows():
        budget_data.append([name, format_amount(budget), format_amount(remaining)])

    os.makedirs(os.path.dirname(filepath), exist_ok=True) if os.path.dirname(
        filepath
    ) else None

    doc = SimpleDocTemplate(
        filepath,
        pagesize=A4,
        leftMargin=30,
        rightMargin=30,
        topMargin=30,
        bottomMargin=30,
    )
    available_width = A4[0] - 60
    font_name = _register_cyrillic_font()
    elems = [
        _table(
            data,
            [
                available_width * 0.20,
                available_width * 0.13,
                available_width * 0.17,
                available_width * 0.15,
                available_width * 0.35,
            ],
            font_name,
        ),
        Spacer(1, 16),
        _table(
            budget_data,
            [available_width * 0.40, available_width * 0.30, available_width * 0.30],
            font_name,
        ),
    ]
    doc.build(elems)
