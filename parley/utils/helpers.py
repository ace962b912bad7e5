"""
Shared Utility Functions

Common helper functions used across multiple services.
"""

import re
import hashlib
import secrets
import logging
from typing import Iterable, List

from passlib.context import CryptContext
from pydantic import EmailStr, TypeAdapter, ValidationError

logger = logging.getLogger(__name__)

HANDLE_MAX_LENGTH = 20

HANDLE_PATTERN = re.compile(r"^[0-9A-Za-z]+$")

# One candidate per "@": everything after it up to the next whitespace.
# The lookahead lets candidates overlap, so "@a@b" yields "a@b" and "b".
MENTION_PATTERN = re.compile(r"(?=@(\S*))")

DEFAULT_PASSWORD_ROUNDS = 12

_email_adapter = TypeAdapter(EmailStr)


def generate_handle(name_first: str, name_last: str, taken: Iterable[str]) -> str:
    """
    Generate a unique handle from a user's names.

    The base is the concatenated names, lowercased, stripped of anything that
    is not alphanumeric and cut to 20 characters. If the base is taken, the
    smallest integer suffix that makes it unique is appended:
    - "Alice", "Person" -> "aliceperson"
    - taken "aliceperson" -> "aliceperson0"
    - taken both -> "aliceperson1"

    Args:
        name_first: First name
        name_last: Last name
        taken: Handles already in use

    Returns:
        Unused handle
    """
    base = re.sub(r"[^a-z0-9]", "", (name_first + name_last).lower())
    base = base[:HANDLE_MAX_LENGTH]
    taken = set(taken)

    if base not in taken:
        return base

    suffix = 0
    while f"{base}{suffix}" in taken:
        suffix += 1
    return f"{base}{suffix}"


def find_mentions(body: str) -> List[str]:
    """Return every @mention token in order of appearance, duplicates included."""
    return MENTION_PATTERN.findall(body)


def excerpt(body: str, length: int = 20) -> str:
    """First `length` characters of a message, with no ellipsis."""
    return body[:length]


def is_valid_email(email: str) -> bool:
    try:
        _email_adapter.validate_python(email)
    except ValidationError:
        return False
    return True


def is_valid_handle(handle: str) -> bool:
    return 3 <= len(handle) <= HANDLE_MAX_LENGTH and bool(HANDLE_PATTERN.match(handle))


def password_context(rounds: int = DEFAULT_PASSWORD_ROUNDS) -> CryptContext:
    """
    Password hasher for stored credentials.

    bcrypt_sha256 pre-hashes the password, so inputs past bcrypt's 72-byte
    limit still count in full.
    """
    return CryptContext(
        schemes=["bcrypt_sha256"], deprecated="auto", bcrypt_sha256__rounds=rounds
    )


def new_token() -> str:
    return secrets.token_urlsafe(24)


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()
