"""Cryptographic operations for the credential store."""

import secrets
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM


KEY_LENGTH = 32             # 256-bit key
NONCE_LENGTH = 12           # 96-bit nonce for AES-GCM
TAG_LENGTH = 16             # GCM tag, appended to the ciphertext


def key_from_password(password: str) -> bytes:
    """
    Use the password's UTF-8 bytes directly as an AES-256 key.

    There is no key stretching here: the password itself is the key, so
    its strength is the only protection against brute force. Kept this way
    so existing store files stay readable.

    Args:
        password: The store password

    Returns:
        32-byte key

    Raises:
        ValueError: If the password is not exactly 32 bytes long
    """
    key = password.encode('utf-8')
    if len(key) != KEY_LENGTH:
        raise ValueError(
            f"Store password must be exactly {KEY_LENGTH} bytes long, got {len(key)}"
        )
    return key


def encrypt(plaintext: bytes, key: bytes) -> tuple[bytes, bytes]:
    """
    Encrypt plaintext using AES-256-GCM.

    Args:
        plaintext: The bytes to encrypt
        key: 32-byte encryption key

    Returns:
        Tuple of (ciphertext, nonce)
    """
    nonce = secrets.token_bytes(NONCE_LENGTH)
    aesgcm = AESGCM(key)
    ciphertext = aesgcm.encrypt(nonce, plaintext, None)
    return ciphertext, nonce


def decrypt(ciphertext: bytes, nonce: bytes, key: bytes) -> bytes:
    """
    Decrypt ciphertext using AES-256-GCM.

    Args:
        ciphertext: The encrypted data (includes GCM tag)
        nonce: The 12-byte nonce used during encryption
        key: 32-byte encryption key

    Returns:
        Decrypted plaintext bytes

    Raises:
        cryptography.exceptions.InvalidTag: If decryption fails (wrong key or tampered data)
    """
    aesgcm = AESGCM(key)
    return aesgcm.decrypt(nonce, ciphertext, None)


def seal(plaintext: bytes, key: bytes) -> bytes:
    """Encrypt under a fresh nonce and frame the result as nonce || ciphertext."""
    ciphertext, nonce = encrypt(plaintext, key)
    return nonce + ciphertext


def unseal(blob: bytes, key: bytes) -> bytes:
    """
    Split a nonce || ciphertext blob and decrypt it.

    Raises:
        cryptography.exceptions.InvalidTag: If the blob is too short to hold
            a nonce and tag, or fails authentication
    """
    if len(blob) < NONCE_LENGTH + TAG_LENGTH:
        raise InvalidTag()
    nonce, ciphertext = blob[:NONCE_LENGTH], blob[NONCE_LENGTH:]
    return decrypt(ciphertext, nonce, key)
