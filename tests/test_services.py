import os

import pytest

from app.services import AuthService, hash_password
from bootstrap import bootstrap_ledger
from domain.errors import AuthenticationError, InvalidArgument
from storage.codec import LoadStatus
from storage.file_storage import FileStorage


class TestAuthService:
    def setup_method(self):
        self.storage = None

    def _service(self, tmp_path) -> AuthService:
        self.storage = FileStorage(str(tmp_path))
        service = AuthService(self.storage)
        service.load_users()
        return service

    def test_hash_is_sha256_hex(self):
        assert hash_password("abc") == (
            "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
        )

    def test_register_and_authenticate(self, tmp_path):
        service = self._service(tmp_path)
        service.register("alice", "secret")
        assert service.authenticate("alice", "secret") == "alice"
        assert service.login_exists("alice")
        assert service.known_logins() == {"alice"}

    def test_duplicate_login_rejected(self, tmp_path):
        service = self._service(tmp_path)
        service.register("alice", "secret")
        with pytest.raises(InvalidArgument):
            service.register("alice", "other")

    def test_wrong_password(self, tmp_path):
        service = self._service(tmp_path)
        service.register("alice", "secret")
        with pytest.raises(AuthenticationError, match="Wrong password"):
            service.authenticate("alice", "nope")

    def test_unknown_user(self, tmp_path):
        service = self._service(tmp_path)
        with pytest.raises(AuthenticationError, match="not found"):
            service.authenticate("bob", "secret")

    @pytest.mark.parametrize("login,password", [("", "x"), ("a/b", "x"), ("..", "x"), ("bob", " ")])
    def test_invalid_credentials_rejected(self, tmp_path, login, password):
        service = self._service(tmp_path)
        with pytest.raises(InvalidArgument):
            service.register(login, password)

    def test_directory_persisted_as_hashes(self, tmp_path):
        service = self._service(tmp_path)
        service.register("alice", "secret")
        assert service.save_users()

        reloaded = self._service(tmp_path)
        assert reloaded.login_exists("alice")
        assert b"secret" not in self.storage.read("users")

    def test_corrupt_directory_loads_empty(self, tmp_path):
        FileStorage(str(tmp_path)).write("users", b"{oops")
        service = self._service(tmp_path)
        assert service.known_logins() == set()
        assert service.last_load.status is LoadStatus.CORRUPT

    def test_corrupt_directory_is_backed_up(self, tmp_path):
        FileStorage(str(tmp_path)).write("users", b"{oops")
        service = AuthService(FileStorage(str(tmp_path)), backup_dir=str(tmp_path))
        service.load_users()

        assert service.last_load.degraded
        backups = os.listdir(tmp_path / "backups")
        assert len(backups) == 1
        assert backups[0].startswith("users_corrupt_")
        assert (tmp_path / "backups" / backups[0]).read_bytes() == b"{oops"

    def test_missing_directory_is_not_backed_up(self, tmp_path):
        service = AuthService(FileStorage(str(tmp_path)), backup_dir=str(tmp_path))
        service.load_users()
        assert service.last_load.status is LoadStatus.MISSING
        assert not (tmp_path / "backups").exists()


def test_corrupt_directory_survives_next_save(tmp_path):
    (tmp_path / "users.json").write_bytes(b"{not json")
    ledger = bootstrap_ledger(str(tmp_path))
    ledger.auth.register("carol", "pw")
    ledger.save_all.execute()

    [backup] = os.listdir(tmp_path / "backups")
    assert (tmp_path / "backups" / backup).read_bytes() == b"{not json"
    assert ledger.auth.known_logins() == {"carol"}
