"""Storage backends for persisting catalog data.

This module provides:
- PermanentStorage: Abstract base class for persistent storage
- FileManager: File-based persistent storage implementation
"""

from model_catalog.storage.base import PermanentStorage
from model_catalog.storage.file_manager import FileManager

__all__ = [
    "FileManager",
    "PermanentStorage",
]
