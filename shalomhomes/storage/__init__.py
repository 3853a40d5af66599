from .base import DuplicateUserError, Storage, StorageError
from .database import DbStorage
from .memory import MemStorage
from .proxy import StorageProxy

__all__ = [
    "DbStorage",
    "DuplicateUserError",
    "MemStorage",
    "Storage",
    "StorageError",
    "StorageProxy",
]
