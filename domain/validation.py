import math
import os

from .errors import InvalidArgument

_FORBIDDEN_LOGIN_PARTS = ("/", "\\", "..", "\x00")


def ensure_not_blank(value: str | None, message: str) -> str:
    if value is None or not str(value).strip():
        raise InvalidArgument(message)
    return str(value)


def ensure_positive_amount(amount: float) -> float:
    try:
        value = float(amount)
    except (TypeError, ValueError) as exc:
        raise InvalidArgument(f"Invalid amount: {amount}") from exc
    if math.isnan(value) or math.isinf(value):
        raise InvalidArgument(f"Invalid amount: {amount}")
    if value <= 0:
        raise InvalidArgument("Amount must be positive")
    return value


def ensure_non_negative_budget(amount: float) -> float:
    try:
        value = float(amount)
    except (TypeError, ValueError) as exc:
        raise InvalidArgument(f"Invalid budget: {amount}") from exc
    if math.isnan(value) or math.isinf(value):
        raise InvalidArgument(f"Invalid budget: {amount}")
    if value < 0:
        raise InvalidArgument("Budget cannot be negative")
    return value


def ensure_safe_login(login: str | None) -> str:
    """Reject logins that could escape the data directory.

    The login is part of the storage key, so path separators and parent
    references are forbidden.
    """
    value = ensure_not_blank(login, "Login cannot be empty")
    if os.sep in value or any(part in value for part in _FORBIDDEN_LOGIN_PARTS):
        raise InvalidArgument(f"Invalid login: {value!r}")
    return value
