from .base import Storage
from .codec import CorruptRecordError, LoadResult, LoadStatus
from .file_storage import FileStorage

__all__ = ["Storage", "FileStorage", "CorruptRecordError", "LoadResult", "LoadStatus"]
