import csv
from datetime import datetime

import pytest
from openpyxl import load_workbook

from domain.records import Transaction, TransactionType
from domain.reports import Report
from domain.wallets import Category, Wallet
from utils.exporters import detect_format, export_report


def _report() -> Report:
    wallet = Wallet("alice")
    wallet.categories["food"] = Category("food", 40.0)
    wallet.categories["salary"] = Category("salary")
    wallet.append(Transaction(TransactionType.INCOME, 100.0, "salary", "pay", datetime(2025, 1, 5, 10, 0)))
    wallet.append(Transaction(TransactionType.EXPENSE, 55.25, "food", "Перевод", datetime(2025, 1, 6, 11, 30)))
    return Report(wallet)


@pytest.mark.parametrize(
    "path,fmt",
    [("r.txt", "txt"), ("r.CSV", "csv"), ("r.xlsx", "xlsx"), ("r.pdf", "pdf"), ("report", "txt")],
)
def test_detect_format(path, fmt):
    assert detect_format(path) == fmt


def test_export_text_matches_summary(tmp_path):
    report = _report()
    target = tmp_path / "out" / "summary.txt"
    export_report(report, str(target))
    assert target.read_text(encoding="utf-8") == report.as_text()


def test_export_csv(tmp_path):
    target = tmp_path / "summary.csv"
    export_report(_report(), str(target))
    with open(target, encoding="utf-8", newline="") as f:
        rows = list(csv.reader(f))
    assert rows[1] == ["Time", "Type", "Category", "Amount", "Description"]
    assert rows[2] == ["2025-01-05 10:00", "INCOME", "salary", "100,00", "pay"]
    assert rows[3] == ["2025-01-06 11:30", "EXPENSE", "food", "55,25", "Перевод"]
    assert ["food", "40,00", "-15,25"] in rows


def test_export_xlsx(tmp_path):
    target = tmp_path / "summary.xlsx"
    export_report(_report(), str(target))
    wb = load_workbook(target)
    ws = wb["Transactions"]
    assert ws.cell(row=3, column=2).value == "INCOME"
    assert ws.cell(row=4, column=4).value == 55.25
    assert wb["Budgets"].cell(row=2, column=1).value == "food"
    wb.close()


def test_export_pdf(tmp_path):
    target = tmp_path / "summary.pdf"
    export_report(_report(), str(target))
    assert target.read_bytes().startswith(b"%PDF")


def test_unsupported_format(tmp_path):
    with pytest.raises(ValueError, match="Unsupported export format"):
        export_report(_report(), str(tmp_path / "x.bin"), fmt="bin")
