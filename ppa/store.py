"""
Encrypted store: the entry list as a single AES-256-GCM file on disk.

The file is exactly ``nonce || ciphertext``: 12 random bytes followed by
the GCM output (tag appended) of the serialized entries. There is no
header or version field.

Every save rewrites the whole file under a fresh nonce. The store takes
no lock, so two processes saving at the same time race and the last
writer wins.
"""

import enum
import os
import tempfile
from pathlib import Path
from typing import Iterable, Optional

from cryptography.exceptions import InvalidTag

from . import crypto
from .models import DecodeError, Entry, deserialize, serialize


STORE_FILENAME = ".ppa.bin"


class StoreError(Exception):
    """Base exception for store errors."""
    pass


class PathError(StoreError):
    """Raised when the user's home directory cannot be determined."""
    pass


class StoreIOError(StoreError):
    """Raised when the store file cannot be read or written."""
    pass


class NotFoundError(StoreError):
    """Raised when loading a store that has not been initialized."""
    pass


class DecryptError(StoreError):
    """Raised when the store fails authentication (wrong password or tampered file)."""
    pass


class EncryptError(StoreError):
    """Raised when the cipher refuses to encrypt the store."""
    pass


class KeyLengthError(StoreError, ValueError):
    """Raised when the store password cannot be used as a 256-bit key."""
    pass


class InitResult(enum.Enum):
    """Outcome of EncryptedStore.initialize()."""

    CREATED = "created"
    ALREADY_EXISTS = "already_exists"


def resolve_path(home: Optional[Path] = None) -> Path:
    """
    Return the default store location, a dotfile in the home directory.

    Args:
        home: Home directory to use instead of the current user's

    Raises:
        PathError: If the home directory cannot be determined
    """
    if home is None:
        try:
            home = Path.home()
        except (RuntimeError, KeyError) as e:
            raise PathError("Could not find user's home directory") from e
    return Path(home) / STORE_FILENAME


class EncryptedStore:
    """
    Reads and writes the encrypted entry list at a fixed path.

    Nothing is cached between calls: each load reads and decrypts the
    file again, and each save encrypts and writes it in full.
    """

    def __init__(self, path: Path):
        """
        Args:
            path: Location of the store file
        """
        self.path = Path(path)

    def exists(self) -> bool:
        """Check whether the store file is present."""
        try:
            return self.path.exists()
        except OSError as e:
            raise StoreIOError(f"Could not check {self.path}: {e}") from e

    def initialize(self, password: str) -> InitResult:
        """
        Create the store with no entries.

        An existing store is left untouched.

        Args:
            password: The store password

        Returns:
            InitResult.CREATED, or InitResult.ALREADY_EXISTS if nothing was written

        Raises:
            KeyLengthError: If the password is not 32 bytes
            StoreIOError: If the file cannot be written
        """
        self._key(password)
        if self.exists():
            return InitResult.ALREADY_EXISTS

        self.save([], password)
        return InitResult.CREATED

    def load(self, password: str) -> list[Entry]:
        """
        Read, decrypt and decode the store.

        Args:
            password: The store password

        Returns:
            Entries in stored order

        Raises:
            KeyLengthError: If the password is not 32 bytes
            NotFoundError: If the store file does not exist
            StoreIOError: If the file cannot be read
            DecryptError: If authentication fails
            DecodeError: If the decrypted content is not a list of entries
        """
        key = self._key(password)

        try:
            blob = self.path.read_bytes()
        except FileNotFoundError as e:
            raise NotFoundError(f"Store not found at {self.path}") from e
        except OSError as e:
            raise StoreIOError(f"Could not read {self.path}: {e}") from e

        try:
            plaintext = crypto.unseal(blob, key)
        except InvalidTag as e:
            raise DecryptError(
                "Could not decrypt store: wrong password or corrupted file"
            ) from e

        return deserialize(plaintext)

    def save(self, entries: Iterable[Entry], password: str) -> None:
        """
        Encrypt entries under a fresh nonce and replace the store file.

        The password is not checked against the existing file, so saving
        with a different password re-keys the store.

        Args:
            entries: The complete entry list to store
            password: The store password

        Raises:
            KeyLengthError: If the password is not 32 bytes
            EncryptError: If encryption fails
            StoreIOError: If the file cannot be written
        """
        key = self._key(password)
        plaintext = serialize(entries)

        try:
            blob = crypto.seal(plaintext, key)
        except (ValueError, OverflowError) as e:
            raise EncryptError(f"Could not encrypt store: {e}") from e

        self._write(blob)

    def _key(self, password: str) -> bytes:
        """Turn the password into a key, raising KeyLengthError if it cannot be one."""
        try:
            return crypto.key_from_password(password)
        except ValueError as e:
            raise KeyLengthError(str(e)) from e

    def _write(self, blob: bytes) -> None:
        """Replace the store file with blob in a single rename."""
        # Symlinks are followed so the file they point to is the one replaced.
        # A failed write leaves the previous store in place.
        target = Path(os.path.realpath(self.path))
        try:
            fd, tmp_path = tempfile.mkstemp(
                prefix=target.name + ".", suffix=".tmp", dir=target.parent
            )
        except OSError as e:
            raise StoreIOError(f"Could not write {self.path}: {e}") from e

        try:
            with os.fdopen(fd, "wb") as f:
                f.write(blob)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, target)
        except OSError as e:
            try:
                os.unlink(tmp_path)
            except FileNotFoundError:
                pass
            raise StoreIOError(f"Could not write {self.path}: {e}") from e

