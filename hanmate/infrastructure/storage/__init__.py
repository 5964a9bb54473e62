"""Client-local storage implementations."""
from .memory_storage import MemoryStorage
from .json_file_storage import JsonFileStorage

__all__ = ["MemoryStorage", "JsonFileStorage"]
