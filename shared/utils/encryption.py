"""Field level encryption for records stored at rest.

Values are encrypted with AES-256-GCM under a random nonce and serialized as
``"<nonce hex>:<ciphertext hex>"``. Because the nonce is random the same
plaintext never produces the same ciphertext, so encrypted columns cannot be
filtered in SQL; callers decrypt and compare in Python.
"""
import logging
import os
import re
from functools import lru_cache

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from shared.core.config import settings

logger = logging.getLogger(__name__)

NONCE_SIZE = 12
HEX_PATTERN = re.compile(r"^[0-9a-fA-F]+$")


class DecryptionError(Exception):
    """Ciphertext is malformed or was not produced under the current key."""


class EncryptionKeyError(Exception):
    """ENCRYPTION_KEY is missing or is not 32 bytes of hex."""


@lru_cache(maxsize=1)
def _cipher(key_hex: str) -> AESGCM:
    try:
        key = bytes.fromhex(key_hex)
    except ValueError:
        raise EncryptionKeyError("ENCRYPTION_KEY must be hex encoded")
    if len(key) != 32:
        raise EncryptionKeyError("ENCRYPTION_KEY must be 32 bytes (64 hex chars)")
    return AESGCM(key)


def get_cipher() -> AESGCM:
    if not settings.ENCRYPTION_KEY:
        raise EncryptionKeyError("ENCRYPTION_KEY is not configured")
    return _cipher(settings.ENCRYPTION_KEY)


def is_encrypted(value) -> bool:
    if not value or not isinstance(value, str):
        return False
    parts = value.split(":")
    if len(parts) != 2:
        return False
    return all(HEX_PATTERN.match(part) for part in parts)


def encrypt(plaintext: str) -> str:
    if not isinstance(plaintext, str):
        raise TypeError(f"encrypt() expects str, got {type(plaintext).__name__}")
    nonce = os.urandom(NONCE_SIZE)
    ciphertext = get_cipher().encrypt(nonce, plaintext.encode("utf-8"), None)
    return f"{nonce.hex()}:{ciphertext.hex()}"


def decrypt(ciphertext: str) -> str:
    if not is_encrypted(ciphertext):
        raise DecryptionError("Value is not in '<nonce>:<ciphertext>' format")

    nonce_hex, data_hex = ciphertext.split(":")
    try:
        nonce = bytes.fromhex(nonce_hex)
        data = bytes.fromhex(data_hex)
    except ValueError as e:
        raise DecryptionError(f"Ciphertext is not valid hex: {e}")

    if len(nonce) != NONCE_SIZE:
        raise DecryptionError(f"Nonce must be {NONCE_SIZE} bytes, got {len(nonce)}")

    try:
        plaintext = get_cipher().decrypt(nonce, data, None)
    except InvalidTag:
        raise DecryptionError("Authentication failed while decrypting value")

    try:
        return plaintext.decode("utf-8")
    except UnicodeDecodeError:
        raise DecryptionError("Decrypted value is not valid UTF-8")


def decrypt_field(value):
    """Decrypt a column value, passing through rows written before encryption."""
    if value is None:
        return None
    if is_encrypted(value):
        return decrypt(value)
    return value


def decrypt_int(value) -> int:
    plaintext = decrypt_field(value)
    try:
        return int(str(plaintext).strip())
    except (TypeError, ValueError):
        raise DecryptionError(f"Expected an integer, got '{plaintext}'")
