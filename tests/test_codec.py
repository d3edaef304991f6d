import json
from datetime import datetime

import pytest

from domain.records import Transaction, TransactionType
from domain.wallets import Category, Wallet
from storage.codec import (
    CorruptRecordError,
    LoadStatus,
    decode_directory,
    decode_wallet,
    encode_directory,
    encode_wallet,
    load_directory,
    load_wallet,
    wallet_key,
)


def _sample_wallet() -> Wallet:
    wallet = Wallet("alice")
    wallet.categories["food"] = Category("food", 150.0)
    wallet.categories["salary"] = Category("salary")
    wallet.append(
        Transaction(TransactionType.INCOME, 1000.0, "salary", "March", datetime(2025, 3, 1, 9, 0))
    )
    wallet.append(
        Transaction(
            TransactionType.EXPENSE, 12.35, "food", "Перевод — обед", datetime(2025, 3, 2, 13, 5, 7)
        )
    )
    return wallet


def test_wallet_key_is_prefixed_login():
    assert wallet_key("alice") == "wallet_alice"


def test_wallet_round_trip_preserves_categories_and_transactions():
    wallet = _sample_wallet()
    restored = decode_wallet(encode_wallet(wallet))

    assert restored.owner_login == "alice"
    assert {(c.name, c.budget) for c in restored.categories.values()} == {
        ("food", 150.0),
        ("salary", 0.0),
    }
    assert restored.transactions == wallet.transactions


def test_round_trip_keeps_transaction_order():
    wallet = Wallet("bob")
    wallet.ensure_category("a")
    for amount in (3.0, 1.0, 2.0):
        wallet.append(Transaction(TransactionType.INCOME, amount, "a"))
    restored = decode_wallet(encode_wallet(wallet))
    assert [t.amount for t in restored.transactions] == [3.0, 1.0, 2.0]


def test_encoded_wallet_is_utf8_json():
    payload = json.loads(encode_wallet(_sample_wallet()).decode("utf-8"))
    assert payload["owner_login"] == "alice"
    assert payload["transactions"][1]["description"] == "Перевод — обед"


@pytest.mark.parametrize(
    "blob",
    [
        b"not json",
        b"\xff\xfe\x00",
        b"[]",
        b'{"categories": [], "transactions": []}',
        b'{"owner_login": "alice", "transactions": {}}',
        b'{"owner_login": "alice", "transactions": [{"type": "INCOME"}]}',
        b'{"owner_login": "alice", "transactions": [{"type": "GIFT", "amount": 1, "time": "2025-01-01T00:00:00"}]}',
        b'{"owner_login": "alice", "transactions": [{"type": "INCOME", "amount": -5, "time": "2025-01-01T00:00:00"}]}',
        b'{"owner_login": "alice", "categories": [{"name": ""}]}',
        b'{"owner_login": "alice", "categories": [{"name": null}]}',
        b'{"owner_login": "alice", "categories": [{"name": "food", "budget": NaN}]}',
        b'{"owner_login": "alice", "transactions": [{"type": "INCOME", "amount": NaN, "time": "2025-01-01T00:00:00"}]}',
        b'{"owner_login": "alice", "transactions": [{"type": "INCOME", "amount": Infinity, "time": "2025-01-01T00:00:00"}]}',
        b'{"owner_login": "alice", "transactions": [{"type": "INCOME", "amount": true, "time": "2025-01-01T00:00:00"}]}',
        b'{"owner_login": "alice", "transactions": [{"type": "INCOME", "amount": 1, "category": 7, "time": "2025-01-01T00:00:00"}]}',
        b'{"owner_login": "alice", "transactions": [{"type": "INCOME", "amount": 1, "description": ["x"], "time": "2025-01-01T00:00:00"}]}',
    ],
)
def test_decode_rejects_corrupt_wallets(blob):
    with pytest.raises(CorruptRecordError):
        decode_wallet(blob)


class TestLoadWallet:
    def test_missing_record_yields_empty_wallet(self):
        result = load_wallet("carol", None)
        assert result.status is LoadStatus.MISSING
        assert not result.degraded
        assert result.value.owner_login == "carol"
        assert result.value.transactions == []
        assert result.value.categories == {}

    def test_corrupt_record_yields_empty_wallet(self):
        result = load_wallet("carol", b"{broken")
        assert result.status is LoadStatus.CORRUPT
        assert result.degraded
        assert result.error
        assert result.value.transactions == []

    def test_record_of_another_owner_is_corrupt(self):
        result = load_wallet("mallory", encode_wallet(_sample_wallet()))
        assert result.status is LoadStatus.CORRUPT
        assert result.value.owner_login == "mallory"

    def test_valid_record_is_loaded(self):
        result = load_wallet("alice", encode_wallet(_sample_wallet()))
        assert result.status is LoadStatus.LOADED
        assert len(result.value.transactions) == 2


class TestDirectory:
    def test_round_trip(self):
        users = {"alice": "abc", "bob": "def"}
        assert decode_directory(encode_directory(users)) == users

    def test_missing_directory_is_empty(self):
        result = load_directory(None)
        assert result.value == {}
        assert result.status is LoadStatus.MISSING

    def test_corrupt_directory_is_empty(self):
        result = load_directory(b'["alice"]')
        assert result.value == {}
        assert result.degraded

    def test_null_password_hash_is_corrupt(self):
        result = load_directory(b'{"alice": "abc", "bob": null}')
        assert result.status is LoadStatus.CORRUPT
        assert result.value == {}


def test_null_text_fields_load_as_empty_strings():
    blob = (
        b'{"owner_login": "alice", "transactions": [{"type": "EXPENSE", "amount": 2.5,'
        b' "category": null, "description": null, "time": "2025-01-01T00:00:00"}]}'
    )
    [transaction] = decode_wallet(blob).transactions
    assert transaction.category == ""
    assert transaction.description == ""


def test_non_finite_amount_degrades_to_empty_wallet():
    blob = (
        b'{"owner_login": "alice", "categories": [{"name": "food"}],'
        b' "transactions": [{"type": "INCOME", "amount": NaN, "category": "food",'
        b' "time": "2025-01-01T00:00:00"}]}'
    )
    result = load_wallet("alice", blob)
    assert result.status is LoadStatus.CORRUPT
    assert result.value.transactions == []
    assert result.value.categories == {}
