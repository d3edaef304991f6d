from dataclasses import dataclass, field

from .errors import InvalidArgument
from .records import Transaction


@dataclass
class Category:
    name: str
    budget: float = 0.0

    def __post_init__(self) -> None:
        if self.name is None or not str(self.name).strip():
            raise InvalidArgument("Category name cannot be empty")
        self.budget = max(0.0, float(self.budget))

    def set_budget(self, amount: float) -> None:
        self.budget = max(0.0, float(amount))


@dataclass
class Wallet:
    owner_login: str
    transactions: list[Transaction] = field(default_factory=list)
    categories: dict[str, Category] = field(default_factory=dict)

    def has_category(self, name: str) -> bool:
        return name in self.categories

    def ensure_category(self, name: str) -> Category:
        category = self.categories.get(name)
        if category is None:
            category = Category(name)
            self.categories[name] = category
        return category

    def append(self, transaction: Transaction) -> None:
        self.transactions.append(transaction)
