"""
Connection authentication.

A client proves knowledge of the shared secret by sending, as the first
message on a connection, a payload and the HMAC-SHA256 of that payload keyed
by the secret:

    <data> <hex tag>

This module owns parsing that message and verifying the tag in constant time.
"""

from __future__ import annotations

import binascii
import hashlib
import hmac
from pathlib import Path

from xremote.common.types import AuthAttempt, Credential

__all__ = [
    "AuthError",
    "MissingDataError",
    "MissingTagError",
    "MalformedTagError",
    "AuthTooShortError",
    "credential_load",
    "tag_sign",
    "hash_verify",
    "authMessage_parse",
    "authMessage_build",
]


class AuthError(Exception):
    """Authentication could not be attempted or was refused."""


class MissingDataError(AuthError):
    """Authentication payload is empty."""


class MissingTagError(AuthError):
    """Authentication tag is empty."""


class MalformedTagError(AuthError):
    """Authentication tag is not hex text."""


class AuthTooShortError(AuthError):
    """Authentication payload is implausibly short."""


def credential_load(secret_path: Path) -> Credential:
    """
    Load the shared secret from a file.

    Args:
        secret_path: File whose trimmed contents are the secret.

    Returns:
        Credential for the process lifetime.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file holds only whitespace.
    """
    secret: bytes = secret_path.read_bytes().strip()
    if not secret:
        raise ValueError(f"Secret file {secret_path} is empty")
    return Credential(secret=secret)


def tag_sign(credential: Credential, data: bytes) -> bytes:
    """
    Compute the raw HMAC-SHA256 tag of `data`.

    Args:
        credential: Shared secret.
        data: Payload to sign.

    Returns:
        32-byte digest.
    """
    return hmac.new(credential.secret, data, hashlib.sha256).digest()


def hash_verify(credential: Credential, data: bytes, tag: bytes) -> bool:
    """
    Verify that `tag` is the HMAC-SHA256 of `data` under `credential`.

    Args:
        credential: Shared secret.
        data: Signed payload.
        tag: Claimed raw digest.

    Returns:
        True iff the tag matches; a mismatch is never an error.

    Raises:
        MissingDataError: If `data` is empty.
        MissingTagError: If `tag` is empty.
    """
    if not data:
        raise MissingDataError("Authentication data is required")
    if not tag:
        raise MissingTagError("Authentication tag is required")
    return hmac.compare_digest(tag_sign(credential, data), tag)


def authMessage_parse(chunk: bytes) -> AuthAttempt:
    """
    Split the first chunk of a connection into data and tag.

    Missing tokens come back empty so `hash_verify` can name what is missing.

    Args:
        chunk: Raw bytes of the authentication message.

    Returns:
        Parsed authentication attempt with the tag hex-decoded.

    Raises:
        MalformedTagError: If the tag token is not valid hex.
    """
    tokens: list[bytes] = chunk.split()
    data: bytes = tokens[0] if tokens else b""
    hex_tag: bytes = tokens[1] if len(tokens) > 1 else b""
    try:
        tag: bytes = binascii.unhexlify(hex_tag)
    except (binascii.Error, ValueError) as e:
        raise MalformedTagError(f"Authentication tag is not hex: {e}") from e
    return AuthAttempt(data=data, tag=tag)


def authMessage_build(credential: Credential, data: bytes) -> bytes:
    """
    Build the authentication message a client sends.

    Args:
        credential: Shared secret.
        data: Whitespace-free payload to sign.

    Returns:
        Wire bytes `<data> <hex tag>`.
    """
    if data.split() != [data]:
        raise ValueError("Authentication data must be one non-empty whitespace-free token")
    return data + b" " + binascii.hexlify(tag_sign(credential, data))
