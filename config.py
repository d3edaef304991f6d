from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent

DATA_DIR = str(PROJECT_ROOT / "data")
BACKUP_DIR_NAME = "backups"
LOG_LEVEL = "WARNING"
