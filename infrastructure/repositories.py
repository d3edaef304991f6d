import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from backup import create_backup
from domain.validation import ensure_safe_login
from domain.wallets import Wallet
from storage.base import Storage
from storage.codec import (
    LoadResult,
    LoadStatus,
    encode_wallet,
    load_wallet,
    wallet_key,
)

logger = logging.getLogger(__name__)


@dataclass
class SaveReport:
    saved: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    directory_saved: bool = True

    @property
    def ok(self) -> bool:
        return self.directory_saved and not self.failed


class WalletStore:
    """Load-on-demand cache of wallets keyed by owner login.

    The store is a single-owner object without locking. A caller that shares
    it between threads must serialize get_or_load/mutate sequences per login.
    """

    def __init__(self, storage: Storage, backup_dir: str | None = None):
        self._storage = storage
        self._backup_dir = backup_dir
        self._wallets: dict[str, Wallet] = {}
        self.last_load: dict[str, LoadResult[Wallet]] = {}

    def _load(self, login: str) -> LoadResult[Wallet]:
        key = wallet_key(login)
        try:
            data = self._storage.read(key)
        except OSError as exc:
            logger.warning("Failed to read wallet for %s, using empty wallet: %s", login, exc)
            return LoadResult(Wallet(owner_login=login), LoadStatus.CORRUPT, str(exc))
        result = load_wallet(login, data)
        if result.degraded and data is not None and self._backup_dir is not None:
            create_backup(self._backup_dir, key, data)
        return result

    def get_or_load(self, login: str) -> Wallet:
        login = ensure_safe_login(login)
        wallet = self._wallets.get(login)
        if wallet is None:
            result = self._load(login)
            self.last_load[login] = result
            wallet = result.value
            self._wallets[login] = wallet
            logger.info("Wallet loaded login=%s status=%s", login, result.status.value)
        return wallet

    def get_if_cached(self, login: str) -> Wallet | None:
        return self._wallets.get(login)

    def cached_logins(self) -> list[str]:
        return list(self._wallets)

    def save_wallet(self, login: str) -> bool:
        wallet = self._wallets.get(login)
        if wallet is None:
            return False
        try:
            self._storage.write(wallet_key(login), encode_wallet(wallet))
        except OSError:
            logger.exception("Failed to save wallet for %s", login)
            return False
        return True

    def save_all(self, known_logins: Iterable[str]) -> SaveReport:
        report = SaveReport()
        for login in known_logins:
            if self.get_if_cached(login) is None:
                continue
            if self.save_wallet(login):
                report.saved.append(login)
            else:
                report.failed.append(login)
        logger.info("Wallets saved=%s failed=%s", len(report.saved), len(report.failed))
        return report

    def open_session(self, login: str) -> Wallet:
        """Load (or reuse) a wallet for a freshly authenticated user and persist it."""
        wallet = self.get_or_load(login)
        self.save_wallet(wallet.owner_login)
        return wallet
