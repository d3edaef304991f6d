from __future__ import annotations

import logging
from dataclasses import dataclass

from app.services import AuthService
from app.use_cases import (
    AddTransaction,
    CreateCategory,
    CreateTransfer,
    GenerateReport,
    GenerateSummary,
    OpenSession,
    SaveAll,
    SetBudget,
    SumByCategories,
)
from config import DATA_DIR
from domain.notifications import Notifier
from infrastructure.repositories import WalletStore
from storage.file_storage import FileStorage

logger = logging.getLogger(__name__)


@dataclass
class Ledger:
    """Everything one process needs, wired around a single wallet store."""

    store: WalletStore
    auth: AuthService
    notifier: Notifier
    create_category: CreateCategory
    set_budget: SetBudget
    add_transaction: AddTransaction
    transfer: CreateTransfer
    generate_report: GenerateReport
    generate_summary: GenerateSummary
    sum_by_categories: SumByCategories
    save_all: SaveAll
    open_session: OpenSession


def bootstrap_ledger(data_dir: str | None = None, notifier: Notifier | None = None) -> Ledger:
    directory = data_dir or DATA_DIR
    storage = FileStorage(directory)
    store = WalletStore(storage, backup_dir=directory)
    auth = AuthService(storage, backup_dir=directory)
    auth.load_users()
    notifier = notifier or Notifier()
    logger.info("Ledger storage directory: %s", directory)
    return Ledger(
        store=store,
        auth=auth,
        notifier=notifier,
        create_category=CreateCategory(store),
        set_budget=SetBudget(store),
        add_transaction=AddTransaction(store, notifier),
        transfer=CreateTransfer(store, auth, notifier),
        generate_report=GenerateReport(store),
        generate_summary=GenerateSummary(store),
        sum_by_categories=SumByCategories(store),
        save_all=SaveAll(store, auth),
        open_session=OpenSession(store, auth),
    )
