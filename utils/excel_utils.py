import logging

from openpyxl import Workbook

from domain.reports import TIME_FORMAT, Report

logger = logging.getLogger(__name__)


def report_to_xlsx(report: Report, filepath: str) -> None:
    """Export transactions and budgets to XLSX with numeric amount cells."""
    wb = Workbook()
    ws = wb.active
    if ws is not None:
        ws.title = "Transactions"
        ws.append([f"Summary for {report.login}", "", "", "", ""])
        ws.append(["Time", "Type", "Category", "Amount", "Description"])
        for transaction in report.transactions():
            ws.append(
                [
                    transaction.time.strftime(TIME_FORMAT),
                    transaction.type.value,
                    transaction.category,
                    round(transaction.amount, 2),
                    transaction.description,
                ]
            )
        ws.append(["TOTAL INCOME", "", "", round(report.total_income(), 2), ""])
        ws.append(["TOTAL EXPENSE", "", "", round(report.total_expense(), 2), ""])

    budgets = wb.create_sheet("Budgets")
    budgets.append(["Category", "Budget", "Remaining"])
    for name, budget, remaining in report.budget_rows():
        budgets.append([name, round(budget, 2), round(remaining, 2)])

    wb.save(filepath)
    wb.close()
    logger.debug("XLSX report written to %s", filepath)
