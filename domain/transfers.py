from dataclasses import dataclass

from .errors import SelfTransfer
from .validation import ensure_positive_amount

TRANSFER_OUT_CATEGORY = "transfer-out"
TRANSFER_IN_CATEGORY = "transfer-in"


@dataclass(frozen=True)
class Transfer:
    from_login: str
    to_login: str
    amount: float
    description: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", ensure_positive_amount(self.amount))
        if self.from_login == self.to_login:
            raise SelfTransfer("Cannot transfer funds to yourself")
        if self.description is None:
            object.__setattr__(self, "description", "")

    def _suffix(self) -> str:
        return f" — {self.description}" if self.description.strip() else ""

    @property
    def outgoing_description(self) -> str:
        return f"Перевод: {self.to_login}{self._suffix()}"

    @property
    def incoming_description(self) -> str:
        return f"Перевод от: {self.from_login}{self._suffix()}"
