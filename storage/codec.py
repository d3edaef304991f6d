"""JSON codec for wallet and user-directory records.

Loading follows a safe-default policy: a missing record and a corrupt record
both produce a fresh default value. The outcome is reported through
:class:`LoadResult` so callers can tell the cases apart. A corrupt record is
dropped, which means data loss is possible.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Generic, TypeVar

from domain.records import Transaction, TransactionType
from domain.wallets import Category, Wallet

logger = logging.getLogger(__name__)

T = TypeVar("T")

USERS_KEY = "users"
WALLET_KEY_PREFIX = "wallet_"


class CorruptRecordError(ValueError):
    pass


class LoadStatus(str, Enum):
    LOADED = "loaded"
    MISSING = "missing"
    CORRUPT = "corrupt"


@dataclass(frozen=True)
class LoadResult(Generic[T]):
    value: T
    status: LoadStatus
    error: str | None = None

    @property
    def degraded(self) -> bool:
        return self.status is LoadStatus.CORRUPT


def wallet_key(login: str) -> str:
    return f"{WALLET_KEY_PREFIX}{login}"


def _transaction_to_dict(transaction: Transaction) -> dict:
    return {
        "type": transaction.type.value,
        "amount": float(transaction.amount),
        "category": transaction.category,
        "description": transaction.description,
        "time": transaction.time.isoformat(),
    }


def _wallet_to_dict(wallet: Wallet) -> dict:
    return {
        "owner_login": wallet.owner_login,
        "categories": [
            {"name": category.name, "budget": float(category.budget)}
            for category in wallet.categories.values()
        ],
        "transactions": [_transaction_to_dict(t) for t in wallet.transactions],
    }


def _load_json(data: bytes):
    try:
        return json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise CorruptRecordError(f"Not a valid JSON record: {exc}") from exc


def _optional_text(item: dict, field: str) -> str:
    value = item.get(field)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise CorruptRecordError(f"Transaction {field} must be a string: {value!r}")
    return value


def _finite(value, label: str) -> float:
    if isinstance(value, bool):
        raise CorruptRecordError(f"{label} must be a number: {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise CorruptRecordError(f"{label} must be a number: {value!r}") from exc
    if not math.isfinite(number):
        raise CorruptRecordError(f"{label} must be finite: {value!r}")
    return number


def _parse_transaction(item) -> Transaction:
    if not isinstance(item, dict):
        raise CorruptRecordError("Transaction entry must be an object")
    if "amount" not in item:
        raise CorruptRecordError("Invalid transaction entry: missing amount")
    amount = _finite(item["amount"], "Transaction amount")
    if amount <= 0:
        raise CorruptRecordError(f"Transaction amount must be positive: {amount}")
    category = _optional_text(item, "category")
    description = _optional_text(item, "description")
    try:
        return Transaction(
            type=TransactionType.parse(item["type"]),
            amount=amount,
            category=category,
            description=description,
            time=datetime.fromisoformat(str(item["time"])),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise CorruptRecordError(f"Invalid transaction entry: {exc}") from exc


def _parse_category(item) -> Category:
    if not isinstance(item, dict):
        raise CorruptRecordError("Category entry must be an object")
    name = item.get("name")
    if not isinstance(name, str):
        raise CorruptRecordError(f"Category name must be a string: {name!r}")
    budget = _finite(item.get("budget", 0.0), "Category budget")
    try:
        return Category(name=name, budget=budget)
    except ValueError as exc:
        raise CorruptRecordError(f"Invalid category entry: {exc}") from exc


def encode_wallet(wallet: Wallet) -> bytes:
    return json.dumps(_wallet_to_dict(wallet), indent=2, ensure_ascii=False).encode("utf-8")


def decode_wallet(data: bytes) -> Wallet:
    payload = _load_json(data)
    if not isinstance(payload, dict):
        raise CorruptRecordError("Wallet record must be an object")
    owner_login = payload.get("owner_login")
    if not isinstance(owner_login, str) or not owner_login:
        raise CorruptRecordError("Wallet record has no owner_login")
    categories = payload.get("categories", [])
    transactions = payload.get("transactions", [])
    if not isinstance(categories, list) or not isinstance(transactions, list):
        raise CorruptRecordError("Wallet categories and transactions must be lists")

    wallet = Wallet(owner_login=owner_login)
    for item in categories:
        category = _parse_category(item)
        wallet.categories[category.name] = category
    for item in transactions:
        wallet.append(_parse_transaction(item))
    return wallet


def encode_directory(users: dict[str, str]) -> bytes:
    return json.dumps(dict(users), indent=2, ensure_ascii=False).encode("utf-8")


def decode_directory(data: bytes) -> dict[str, str]:
    payload = _load_json(data)
    if not isinstance(payload, dict):
        raise CorruptRecordError("User directory must be an object")
    for login, password_hash in payload.items():
        if not isinstance(password_hash, str) or not password_hash:
            raise CorruptRecordError(f"Password hash for {login!r} must be a non-empty string")
    return dict(payload)


def load_wallet(login: str, data: bytes | None) -> LoadResult[Wallet]:
    if data is None:
        return LoadResult(Wallet(owner_login=login), LoadStatus.MISSING)
    try:
        wallet = decode_wallet(data)
        if wallet.owner_login != login:
            raise CorruptRecordError(
                f"Record belongs to {wallet.owner_login!r}, expected {login!r}"
            )
    except CorruptRecordError as exc:
        logger.warning("Failed to load wallet for %s, using empty wallet: %s", login, exc)
        return LoadResult(Wallet(owner_login=login), LoadStatus.CORRUPT, str(exc))
    return LoadResult(wallet, LoadStatus.LOADED)


def load_directory(data: bytes | None) -> LoadResult[dict[str, str]]:
    if data is None:
        return LoadResult({}, LoadStatus.MISSING)
    try:
        users = decode_directory(data)
    except CorruptRecordError as exc:
        logger.warning("Failed to load user directory, using empty directory: %s", exc)
        return LoadResult({}, LoadStatus.CORRUPT, str(exc))
    return LoadResult(users, LoadStatus.LOADED)
