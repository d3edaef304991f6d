from collections.abc import Iterable

from prettytable import PrettyTable

from .records import Transaction, TransactionType, sum_amounts
from .wallets import Wallet

TIME_FORMAT = "%Y-%m-%d %H:%M"
EMPTY_MARKER = "(none)"


def format_amount(value: float) -> str:
    """Two decimal places with a comma separator, e.g. ``1234,50``."""
    text = f"{float(value):.2f}".replace(".", ",")
    return "0,00" if text == "-0,00" else text


class Report:
    """Read-only aggregation over a single wallet."""

    def __init__(self, wallet: Wallet):
        self._wallet = wallet

    @property
    def login(self) -> str:
        return self._wallet.owner_login

    def transactions(self) -> list[Transaction]:
        return list(self._wallet.transactions)

    def total_income(self) -> float:
        return sum_amounts(self._wallet.transactions, TransactionType.INCOME)

    def total_expense(self) -> float:
        return sum_amounts(self._wallet.transactions, TransactionType.EXPENSE)

    def balance(self) -> float:
        return self.total_income() - self.total_expense()

    def category_total(self, category: str, type: TransactionType) -> float:
        return sum_amounts(self._wallet.transactions, type, category)

    def grouped_by_category(self, type: TransactionType) -> dict[str, float]:
        groups: dict[str, float] = {}
        for transaction in self._wallet.transactions:
            if transaction.type is type:
                groups[transaction.category] = (
                    groups.get(transaction.category, 0.0) + transaction.amount
                )
        return {name: groups[name] for name in sorted(groups)}

    def budget_rows(self) -> list[tuple[str, float, float]]:
        rows = []
        for name in sorted(self._wallet.categories):
            budget = self._wallet.categories[name].budget
            spent = self.category_total(name, TransactionType.EXPENSE)
            rows.append((name, budget, budget - spent))
        return rows

    def sum_by_categories(self, names: Iterable[str]) -> dict[str, float]:
        result: dict[str, float] = {}
        for name in names:
            if name not in self._wallet.categories:
                continue
            result[name] = self.category_total(
                name, TransactionType.INCOME
            ) - self.category_total(name, TransactionType.EXPENSE)
        return result

    @staticmethod
    def transaction_line(transaction: Transaction) -> str:
        return (
            f"[{transaction.time.strftime(TIME_FORMAT)}] {transaction.type.value} "
            f"{format_amount(transaction.amount)} ({transaction.category}) "
            f"{transaction.description}"
        )

    def as_text(self) -> str:
        lines = [
            f"=== Summary for {self.login} ===",
            f"Total income: {format_amount(self.total_income())}",
            f"Total expense: {format_amount(self.total_expense())}",
            "",
        ]
        for title, type in (
            ("Income by category:", TransactionType.INCOME),
            ("Expense by category:", TransactionType.EXPENSE),
        ):
            lines.append(title)
            groups = self.grouped_by_category(type)
            if not groups:
                lines.append(f"  {EMPTY_MARKER}")
            for name, total in groups.items():
                lines.append(f"  {name}: {format_amount(total)}")
            lines.append("")

        lines.append("Budgets:")
        rows = self.budget_rows()
        if not rows:
            lines.append(f"  {EMPTY_MARKER}")
        for name, budget, remaining in rows:
            lines.append(
                f"  {name}: {format_amount(budget)}, remaining: {format_amount(remaining)}"
            )
        lines.append("")

        lines.append("Transactions:")
        if not self._wallet.transactions:
            lines.append(f"  {EMPTY_MARKER}")
        for transaction in self._wallet.transactions:
            lines.append(f"  {self.transaction_line(transaction)}")
        return "\n".join(lines) + "\n"

    def budget_table(self) -> str:
        table = PrettyTable()
        table.field_names = ["Category", "Budget", "Spent", "Remaining"]
        for name, budget, remaining in self.budget_rows():
            table.add_row(
                [
                    name,
                    format_amount(budget),
                    format_amount(budget - remaining),
                    format_amount(remaining),
                ]
            )
        return str(table)

    def transactions_table(self) -> str:
        table = PrettyTable()
        table.field_names = ["Time", "Type", "Category", "Amount", "Description"]
        for transaction in self._wallet.transactions:
            table.add_row(
                [
                    transaction.time.strftime(TIME_FORMAT),
                    transaction.type.value,
                    transaction.category,
                    format_amount(transaction.amount),
                    transaction.description,
                ]
            )
        table.add_row(
            ["BALANCE", "", "", format_amount(self.balance()), ""], divider=True
        )
        return str(table)
