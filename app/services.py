import hashlib
import logging

from backup import create_backup
from domain.errors import AuthenticationError, InvalidArgument
from domain.validation import ensure_not_blank, ensure_safe_login
from storage.base import Storage
from storage.codec import USERS_KEY, LoadResult, LoadStatus, encode_directory, load_directory

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


class AuthService:
    """User directory: login -> SHA-256 password hash.

    The ledger only relies on :meth:`login_exists` and :meth:`known_logins`.
    """

    def __init__(self, storage: Storage, backup_dir: str | None = None):
        self._storage = storage
        self._backup_dir = backup_dir
        self._users: dict[str, str] = {}
        self.last_load: LoadResult[dict[str, str]] | None = None

    def load_users(self) -> None:
        try:
            data = self._storage.read(USERS_KEY)
        except OSError as exc:
            logger.warning("Failed to read user directory, using empty directory: %s", exc)
            result = LoadResult({}, LoadStatus.CORRUPT, str(exc))
        else:
            result = load_directory(data)
            if result.degraded and data is not None and self._backup_dir is not None:
                create_backup(self._backup_dir, USERS_KEY, data)
        self.last_load = result
        self._users = dict(result.value)

    def save_users(self) -> bool:
        try:
            self._storage.write(USERS_KEY, encode_directory(self._users))
        except OSError:
            logger.exception("Failed to save user directory")
            return False
        return True

    def register(self, login: str, password: str) -> None:
        login = self._validate(login, password)
        if login in self._users:
            raise InvalidArgument("A user with this login already exists")
        self._users[login] = hash_password(password)
        logger.info("User registered login=%s", login)

    def authenticate(self, login: str, password: str) -> str:
        login = self._validate(login, password)
        stored = self._users.get(login)
        if stored is None:
            raise AuthenticationError("User not found")
        if stored != hash_password(password):
            raise AuthenticationError("Wrong password")
        return login

    def login_exists(self, login: str) -> bool:
        return login in self._users

    def known_logins(self) -> set[str]:
        return set(self._users)

    @staticmethod
    def _validate(login: str, password: str) -> str:
        login = ensure_safe_login(login)
        ensure_not_blank(password, "Password cannot be empty")
        return login
