from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class TransactionType(str, Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"

    @classmethod
    def parse(cls, value: "str | TransactionType") -> "TransactionType":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value or "").strip().upper())
        except ValueError as exc:
            raise ValueError(f"Unknown transaction type: {value}") from exc


@dataclass(frozen=True)
class Transaction:
    """Posted ledger entry. Never mutated once appended to a wallet."""

    type: TransactionType
    amount: float
    category: str = ""
    description: str = ""
    time: datetime | None = field(default=None)

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", TransactionType.parse(self.type))
        object.__setattr__(self, "amount", float(self.amount))
        if self.category is None:
            object.__setattr__(self, "category", "")
        if self.description is None:
            object.__setattr__(self, "description", "")
        if self.time is None:
            object.__setattr__(self, "time", datetime.now())

    @property
    def is_income(self) -> bool:
        return self.type is TransactionType.INCOME

    @property
    def is_expense(self) -> bool:
        return self.type is TransactionType.EXPENSE

    def signed_amount(self) -> float:
        return self.amount if self.is_income else -abs(self.amount)


def sum_amounts(
    transactions: Iterable[Transaction],
    type: TransactionType,
    category: str | None = None,
) -> float:
    return sum(
        t.amount
        for t in transactions
        if t.type is type and (category is None or t.category == category)
    )
