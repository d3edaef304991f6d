from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from config import BACKUP_DIR_NAME

logger = logging.getLogger(__name__)


def create_backup(directory: str, key: str, data: bytes, suffix: str = ".json") -> str | None:
    """Keep a copy of a record that is about to be replaced by a default.

    Returns the backup path, or None when the copy could not be written.
    """
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    backup_dir = Path(directory) / BACKUP_DIR_NAME
    backup_path = backup_dir / f"{key}_corrupt_{stamp}{suffix}"
    try:
        backup_dir.mkdir(parents=True, exist_ok=True)
        backup_path.write_bytes(data)
    except OSError:
        logger.exception("Failed to back up corrupt record %s", key)
        return None
    logger.warning("Corrupt record %s copied to %s", key, backup_path)
    return str(backup_path)
