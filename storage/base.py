from __future__ import annotations

from typing import Protocol


class Storage(Protocol):
    """Low-level blob storage contract keyed by record name."""

    def read(self, key: str) -> bytes | None:
        """Return the stored blob, or None when no record exists."""
        ...

    def write(self, key: str, data: bytes) -> None:
        ...

    def exists(self, key: str) -> bool:
        ...

    def path_for(self, key: str) -> str:
        ...
