import logging
from collections.abc import Iterable
from datetime import datetime

from domain.errors import CategoryNotFound, DuplicateCategory, InvalidArgument, UnknownRecipient
from domain.notifications import LedgerWarning, Notifier, WarningKind
from domain.records import Transaction, TransactionType, sum_amounts
from domain.reports import Report, format_amount
from domain.transfers import TRANSFER_IN_CATEGORY, TRANSFER_OUT_CATEGORY, Transfer
from domain.validation import (
    ensure_non_negative_budget,
    ensure_not_blank,
    ensure_positive_amount,
)
from domain.wallets import Category, Wallet
from infrastructure.repositories import SaveReport, WalletStore

from .services import AuthService

logger = logging.getLogger(__name__)


def _check_limits(notifier: Notifier, wallet: Wallet, category: str) -> None:
    """Emit budget and overspend warnings for the wallet after a post."""
    login = wallet.owner_login
    budgeted = wallet.categories.get(category)
    if budgeted is not None and budgeted.budget > 0:
        spent = sum_amounts(wallet.transactions, TransactionType.EXPENSE, category)
        if spent > budgeted.budget:
            notifier.emit(
                LedgerWarning(
                    kind=WarningKind.BUDGET_EXCEEDED,
                    login=login,
                    category=category,
                    limit=budgeted.budget,
                    actual=spent,
                    message=(
                        f"Budget exceeded for category '{category}'. "
                        f"Budget: {format_amount(budgeted.budget)}, "
                        f"spent: {format_amount(spent)}"
                    ),
                )
            )

    total_income = sum_amounts(wallet.transactions, TransactionType.INCOME)
    total_expense = sum_amounts(wallet.transactions, TransactionType.EXPENSE)
    if total_expense > total_income:
        notifier.emit(
            LedgerWarning(
                kind=WarningKind.OVERSPEND,
                login=login,
                limit=total_income,
                actual=total_expense,
                message=(
                    f"Total expenses exceed income. Income: {format_amount(total_income)}, "
                    f"expense: {format_amount(total_expense)}"
                ),
            )
        )


class CreateCategory:
    def __init__(self, store: WalletStore):
        self._store = store

    def execute(self, *, login: str, name: str) -> Category:
        wallet = self._store.get_or_load(login)
        name = ensure_not_blank(name, "Category name cannot be empty")
        if wallet.has_category(name):
            raise DuplicateCategory(f"Category already exists: {name}")
        category = Category(name)
        wallet.categories[name] = category
        logger.info("Category created login=%s name=%s", login, name)
        return category


class SetBudget:
    def __init__(self, store: WalletStore):
        self._store = store

    def execute(self, *, login: str, category: str, amount: float) -> Category:
        amount = ensure_non_negative_budget(amount)
        wallet = self._store.get_or_load(login)
        target = wallet.ensure_category(category)
        target.set_budget(amount)
        logger.info("Budget set login=%s category=%s budget=%s", login, category, target.budget)
        return target


class AddTransaction:
    """Post an income or expense to a wallet.

    An unknown category is created on the fly for INCOME but rejected for
    EXPENSE with CategoryNotFound.
    """

    def __init__(self, store: WalletStore, notifier: Notifier):
        self._store = store
        self._notifier = notifier

    def execute(
        self,
        *,
        login: str,
        type: TransactionType | str,
        amount: float,
        category: str,
        description: str = "",
    ) -> Transaction:
        try:
            type = TransactionType.parse(type)
        except ValueError as exc:
            raise InvalidArgument(str(exc)) from exc
        amount = ensure_positive_amount(amount)
        wallet = self._store.get_or_load(login)

        if not wallet.has_category(category):
            if type is TransactionType.EXPENSE:
                raise CategoryNotFound(f"Category not found: {category}")
            wallet.ensure_category(category)

        transaction = Transaction(
            type=type,
            amount=amount,
            category=category,
            description=description,
            time=datetime.now(),
        )
        wallet.append(transaction)
        logger.info(
            "Transaction posted login=%s type=%s amount=%s category=%s",
            login,
            type.value,
            amount,
            category,
        )
        _check_limits(self._notifier, wallet, category)
        return transaction


class CreateTransfer:
    """Move funds from one user's wallet to another's.

    The debit and the credit are two separate appends on two wallets and are
    persisted by the next SaveAll sweep. Nothing makes the pair atomic: if
    the process stops between the appends or between the two writes, the
    sender's debit can exist without the recipient's credit.
    """

    def __init__(self, store: WalletStore, auth: AuthService, notifier: Notifier):
        self._store = store
        self._auth = auth
        self._notifier = notifier

    def execute(
        self,
        *,
        from_login: str,
        to_login: str,
        amount: float,
        description: str = "",
    ) -> tuple[Transaction, Transaction]:
        transfer = Transfer(
            from_login=from_login,
            to_login=to_login,
            amount=amount,
            description=description,
        )
        if not self._auth.login_exists(to_login):
            raise UnknownRecipient(f"Recipient not found: {to_login}")

        from_wallet = self._store.get_or_load(from_login)
        to_wallet = self._store.get_or_load(to_login)
        from_wallet.ensure_category(TRANSFER_OUT_CATEGORY)
        to_wallet.ensure_category(TRANSFER_IN_CATEGORY)

        now = datetime.now()
        outgoing = Transaction(
            type=TransactionType.EXPENSE,
            amount=transfer.amount,
            category=TRANSFER_OUT_CATEGORY,
            description=transfer.outgoing_description,
            time=now,
        )
        incoming = Transaction(
            type=TransactionType.INCOME,
            amount=transfer.amount,
            category=TRANSFER_IN_CATEGORY,
            description=transfer.incoming_description,
            time=now,
        )
        from_wallet.append(outgoing)
        to_wallet.append(incoming)
        logger.info(
            "Transfer posted from=%s to=%s amount=%s", from_login, to_login, transfer.amount
        )
        _check_limits(self._notifier, from_wallet, TRANSFER_OUT_CATEGORY)
        return outgoing, incoming


class GenerateReport:
    def __init__(self, store: WalletStore):
        self._store = store

    def execute(self, login: str) -> Report:
        return Report(self._store.get_or_load(login))


class GenerateSummary:
    def __init__(self, store: WalletStore):
        self._store = store

    def execute(self, login: str) -> str:
        return Report(self._store.get_or_load(login)).as_text()


class SumByCategories:
    def __init__(self, store: WalletStore):
        self._store = store

    def execute(self, login: str, categories: Iterable[str]) -> dict[str, float]:
        return Report(self._store.get_or_load(login)).sum_by_categories(categories)


class SaveAll:
    """Persist the user directory and every wallet loaded during this run."""

    def __init__(self, store: WalletStore, auth: AuthService):
        self._store = store
        self._auth = auth

    def execute(self) -> SaveReport:
        directory_saved = self._auth.save_users()
        report = self._store.save_all(self._auth.known_logins())
        report.directory_saved = directory_saved
        if not report.ok:
            logger.error(
                "Save incomplete: directory_saved=%s failed_wallets=%s",
                directory_saved,
                report.failed,
            )
        return report


class OpenSession:
    def __init__(self, store: WalletStore, auth: AuthService):
        self._store = store
        self._auth = auth

    def execute(self, *, login: str, password: str) -> Wallet:
        login = self._auth.authenticate(login, password)
        wallet = self._store.open_session(login)
        logger.info("Session opened login=%s", login)
        return wallet
