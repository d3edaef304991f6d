import csv

from domain.reports import TIME_FORMAT, Report, format_amount

REPORT_HEADERS = ["Time", "Type", "Category", "Amount", "Description"]
BUDGET_HEADERS = ["Category", "Budget", "Remaining"]


def report_to_csv(report: Report, filepath: str) -> None:
    """Export the transaction log and budget table to CSV. Read-only format."""
    with open(filepath, "w", newline="", encoding="utf-8") as csvfile:
        writer = csv.writer(csvfile)
        writer.writerow([f"Summary for {report.login}", "", "", "", ""])
        writer.writerow(REPORT_HEADERS)
        for transaction in report.transactions():
            writer.writerow(
                [
                    transaction.time.strftime(TIME_FORMAT),
                    transaction.type.value,
                    transaction.category,
                    format_amount(transaction.amount),
                    transaction.description,
                ]
            )
        writer.writerow(["TOTAL INCOME", "", "", format_amount(report.total_income()), ""])
        writer.writerow(["TOTAL EXPENSE", "", "", format_amount(report.total_expense()), ""])
        writer.writerow([])
        writer.writerow(BUDGET_HEADERS)
        for name, budget, remaining in report.budget_rows():
            writer.writerow([name, format_amount(budget), format_amount(remaining)])
