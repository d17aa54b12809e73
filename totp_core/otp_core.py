"""
otp_core.py — Core library for TOTP / HOTP.

Goals:
- Pure functions only, called directly by the CLI and the Flask backend.
- No argparse, no file or network I/O; "now" is read only when the caller
  does not pass an explicit instant.

Algorithm (RFC 4226 / RFC 6238, SHA-1, 6 digits, 30 s step):
    HOTP(K, C) = Truncate(HMAC-SHA1(K, C)) mod 10^6
    TOTP(K, T) = HOTP(K, floor(T / 30))
"""

from datetime import datetime, timezone
from typing import Optional, Union
from urllib.parse import quote
import base64
import hashlib
import hmac
import logging
import math
import struct
import time

import pyotp

from .base32 import decode_secret
from .config import (
    DEFAULT_ACCOUNT,
    DEFAULT_ISSUER,
    DEFAULT_WINDOW_STEPS,
    DIGITS,
    STEP_SIZE,
)
from .errors import InvalidSecretFormat

logger = logging.getLogger(__name__)

Instant = Union[int, float, datetime]

MAX_COUNTER = 2 ** 64 - 1


# --- RFC helpers -----------------------------------------------------------
def int_to_bytes(counter: int) -> bytes:
    """
    Serialize a counter as the 8-byte big-endian message RFC 4226 requires.

    Example: int_to_bytes(1) -> b'\\x00\\x00\\x00\\x00\\x00\\x00\\x00\\x01'

    Raises:
        ValueError: if counter does not fit in an unsigned 64-bit integer
    """
    if not 0 <= counter <= MAX_COUNTER:
        raise ValueError(f"counter out of range: {counter}")
    return struct.pack(">Q", counter)


def dynamic_truncate(hmac_digest: bytes) -> int:
    """
    Apply RFC 4226 dynamic truncation.

    - offset = low nibble of the last byte (0..15)
    - take 4 bytes from offset, clear the top bit of the first one
    - return the resulting 31-bit unsigned integer

    Arguments:
        hmac_digest: HMAC digest (SHA-1 -> 20 bytes, so offset + 3 <= 18)
    """
    offset = hmac_digest[-1] & 0x0F
    return (
        ((hmac_digest[offset] & 0x7F) << 24)
        | ((hmac_digest[offset + 1] & 0xFF) << 16)
        | ((hmac_digest[offset + 2] & 0xFF) << 8)
        | (hmac_digest[offset + 3] & 0xFF)
    )


def hotp(key: bytes, counter: int) -> str:
    """
    Generate an RFC 4226 HOTP code from already-decoded key bytes.

    Steps:
    1. Message = 8-byte big-endian counter
    2. HMAC-SHA1(key, message)
    3. Dynamic truncate -> dbc
    4. otp = dbc % 10^6, zero-padded to 6 digits

    An empty key is accepted, as HMAC allows it, but the code it yields
    protects nothing; decode_secret() never returns one.

    Arguments:
        key: raw key bytes
        counter: unsigned 64-bit counter

    Returns:
        str: 6-digit code
    """
    if not key:
        logger.warning("HOTP computed with an empty key; the code is not secret")
    msg = int_to_bytes(counter)
    digest = hmac.new(key, msg, hashlib.sha1).digest()
    dbc = dynamic_truncate(digest)
    code = str(dbc % (10 ** DIGITS)).zfill(DIGITS)
    logger.debug("HOTP: counter=%d dbc=%d", counter, dbc)
    return code


# --- Time helpers ----------------------------------------------------------
def unix_seconds(at_time: Optional[Instant] = None) -> float:
    """
    Convert an instant to Unix seconds; None means now.

    Naive datetimes are taken as UTC.
    """
    if at_time is None:
        return time.time()
    if isinstance(at_time, datetime):
        if at_time.tzinfo is None:
            at_time = at_time.replace(tzinfo=timezone.utc)
        return at_time.timestamp()
    if isinstance(at_time, bool) or not isinstance(at_time, (int, float)):
        raise TypeError(f"unsupported instant: {at_time!r}")
    if isinstance(at_time, float) and not math.isfinite(at_time):
        raise ValueError(f"instant is not a finite number: {at_time!r}")
    return at_time


def counter_at(at_time: Optional[Instant] = None) -> int:
    """
    TOTP counter for an instant: floor(unix_seconds / STEP_SIZE).

    Raises:
        ValueError: for instants before the Unix epoch
    """
    seconds = unix_seconds(at_time)
    if seconds < 0:
        raise ValueError("instant is before the Unix epoch")
    return int(seconds // STEP_SIZE)


def seconds_remaining(at_time: Optional[Instant] = None) -> int:
    """Seconds (1..STEP_SIZE) until the code for at_time rolls over."""
    return STEP_SIZE - int(unix_seconds(at_time) % STEP_SIZE)


# --- TOTP ------------------------------------------------------------------
def totp(secret: str, at_time: Optional[Instant] = None, strict: bool = True) -> str:
    """
    Generate the RFC 6238 TOTP code for a Base32 secret.

    Arguments:
        secret: Base32 secret
        at_time: Unix seconds or datetime (None -> time.time())
        strict: Base32 decoding policy, see base32.decode_secret

    Returns:
        str: 6-digit code

    Raises:
        InvalidSecretFormat: if the secret does not decode
    """
    key = decode_secret(secret, strict=strict)
    counter = counter_at(at_time)
    logger.debug("TOTP: counter=%d", counter)
    return hotp(key, counter)


generate = totp


def validate(
    code: str,
    secret: str,
    window_steps: int = DEFAULT_WINDOW_STEPS,
    at_time: Optional[Instant] = None,
    strict: bool = True,
) -> bool:
    """
    Check a candidate TOTP code against [current - window_steps, current + window_steps].

    Steps are checked in increasing order and the first match wins. A secret
    that does not decode gives False rather than an error, so callers can't
    tell a bad secret from a wrong code. Steps below counter 0 are skipped.

    Arguments:
        code: candidate code as typed by the user
        secret: Base32 secret
        window_steps: tolerated clock drift, in steps (0 = current step only)
        at_time: instant the check is made at (None -> time.time())
        strict: Base32 decoding policy

    Returns:
        bool: True if any step in the window matches
    """
    if not isinstance(code, str):
        return False
    try:
        key = decode_secret(secret, strict=strict)
    except InvalidSecretFormat:
        logger.debug("Validation failed: secret does not decode")
        return False

    current = counter_at(at_time)
    candidate = code.encode("utf-8")
    for offset in range(-window_steps, window_steps + 1):
        test_counter = current + offset
        if not 0 <= test_counter <= MAX_COUNTER:
            continue
        if hmac.compare_digest(hotp(key, test_counter).encode("ascii"), candidate):
            logger.debug("Validation matched at step offset %d", offset)
            return True
    return False


# --- Provisioning helpers --------------------------------------------------
def generate_base32_secret() -> str:
    """Random 160-bit secret as 32 unpadded Base32 characters."""
    return pyotp.random_base32()


def format_otpauth_uri(
    secret: str,
    account: str = DEFAULT_ACCOUNT,
    issuer: str = DEFAULT_ISSUER,
    strict: bool = True,
) -> str:
    """
    Build an otpauth:// URI for authenticator apps (QR code payload).

    otpauth://totp/{issuer}:{account}?secret=...&issuer=...&algorithm=SHA1&digits=6&period=30

    The secret is written back in canonical form (uppercase, unpadded Base32
    of the decoded key), so a leniently accepted "jbsw-y3dp-..." becomes
    "JBSWY3DP...".

    Raises:
        InvalidSecretFormat: if the secret does not decode under the given policy
    """
    key = decode_secret(secret, strict=strict)
    clean = base64.b32encode(key).decode("ascii").rstrip("=")
    label = f"{quote(issuer, safe='')}:{quote(account, safe='')}"
    return (
        f"otpauth://totp/{label}?secret={clean}&issuer={quote(issuer, safe='')}"
        f"&algorithm=SHA1&digits={DIGITS}&period={STEP_SIZE}"
    )
