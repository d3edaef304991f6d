from __future__ import annotations

import logging
import os
import tempfile

from .base import Storage

logger = logging.getLogger(__name__)


class FileStorage(Storage):
    """Stores each record as ``<directory>/<key><suffix>``.

    Writes go through a temporary file followed by ``os.replace`` so a record
    is never left half-written.
    """

    def __init__(self, directory: str, suffix: str = ".json") -> None:
        self._directory = directory
        self._suffix = suffix

    @property
    def directory(self) -> str:
        return self._directory

    def path_for(self, key: str) -> str:
        return os.path.join(self._directory, f"{key}{self._suffix}")

    def exists(self, key: str) -> bool:
        return os.path.exists(self.path_for(key))

    def read(self, key: str) -> bytes | None:
        try:
            with open(self.path_for(key), "rb") as f:
                return f.read()
        except FileNotFoundError:
            return None

    def write(self, key: str, data: bytes) -> None:
        os.makedirs(self._directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            prefix=f".{key}_", suffix=self._suffix, dir=self._directory
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_path, self.path_for(key))
        finally:
            try:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
            except OSError:
                logger.exception("Failed to cleanup temporary file during save: %s", tmp_path)
