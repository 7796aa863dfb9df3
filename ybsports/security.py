"""Password hashing for user accounts and post/comment edit passwords."""

from __future__ import annotations

import base64
import logging
import os

from cryptography.exceptions import InvalidKey
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

logger = logging.getLogger(__name__)

HASH_SCHEME = "scrypt"
SALT_BYTES = 16
HASH_LENGTH = 32
SCRYPT_N = 2**14
SCRYPT_R = 8
SCRYPT_P = 1


def _kdf(salt: bytes) -> Scrypt:
    return Scrypt(salt=salt, length=HASH_LENGTH, n=SCRYPT_N, r=SCRYPT_R, p=SCRYPT_P)


def _b64encode(value: bytes) -> str:
    return base64.urlsafe_b64encode(value).decode("ascii")


def _b64decode(value: str) -> bytes:
    return base64.urlsafe_b64decode(value.encode("ascii"))


def _to_bytes(raw: object) -> bytes:
    # JSON bodies may carry numeric passwords; they hash as their text form.
    return str(raw).encode("utf-8")


def hash_password(raw: object) -> str:
    salt = os.urandom(SALT_BYTES)
    derived = _kdf(salt).derive(_to_bytes(raw))
    return f"{HASH_SCHEME}${_b64encode(salt)}${_b64encode(derived)}"


def verify_password(raw: object, stored: str | None) -> bool:
    if raw is None or raw == "" or not stored:
        return False
    parts = stored.split("$")
    if len(parts) != 3 or parts[0] != HASH_SCHEME:
        logger.error("Stored password is not a %s hash; refusing comparison.", HASH_SCHEME)
        return False
    try:
        salt = _b64decode(parts[1])
        expected = _b64decode(parts[2])
    except ValueError:
        logger.error("Stored password hash is not valid base64.")
        return False
    try:
        _kdf(salt).verify(_to_bytes(raw), expected)
    except InvalidKey:
        return False
    return True
