"""Command line credential store with AES-256-GCM encryption."""

from .models import DecodeError, Entry
from .store import (
    DecryptError,
    EncryptError,
    EncryptedStore,
    InitResult,
    KeyLengthError,
    NotFoundError,
    PathError,
    StoreError,
    StoreIOError,
    resolve_path,
)

__version__ = "1.0.0"
__all__ = [
    "DecodeError",
    "DecryptError",
    "EncryptError",
    "EncryptedStore",
    "Entry",
    "InitResult",
    "KeyLengthError",
    "NotFoundError",
    "PathError",
    "StoreError",
    "StoreIOError",
    "resolve_path",
]
