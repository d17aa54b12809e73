"""
base32.py — Base32 secret decoding (RFC 4648) for HOTP/TOTP keys.

Secrets are typed or pasted by people, so they arrive lowercase, grouped
with spaces ("jbsw y3dp ehpk 3pxp") and usually without '=' padding.
normalize_secret() handles those quirks; decode_secret() then applies one
of two policies:

- strict (default): the standard-library codec must accept the padded
  string, so any symbol outside A-Z2-7 or a malformed padding is an error.
- lenient: the bit-accumulator used by browser authenticators, which skips
  unknown symbols and keeps whatever bytes the remaining ones produce.

Both policies reject a secret that yields zero key bytes.
"""

import base64
import logging

from .config import BASE32_ALPHABET
from .errors import InvalidSecretFormat

logger = logging.getLogger(__name__)

# symbol -> 5-bit value
_SYMBOLS = {ch: i for i, ch in enumerate(BASE32_ALPHABET)}


def normalize_secret(secret: str) -> str:
    """
    Uppercase the secret and drop all whitespace.

    Raises:
        InvalidSecretFormat: if secret is not a str
    """
    if not isinstance(secret, str):
        raise InvalidSecretFormat("secret must be a string")
    return "".join(secret.split()).upper()


def pad_secret(secret: str) -> str:
    """Right-pad with '=' until the length is a multiple of 8."""
    return secret + "=" * (-len(secret) % 8)


def _decode_strict(padded: str) -> bytes:
    try:
        return base64.b32decode(padded)
    except ValueError as e:
        # binascii.Error (bad symbol / padding) and non-ASCII input both land here
        raise InvalidSecretFormat() from e


def _decode_lenient(padded: str) -> bytes:
    buffer = 0
    bits = 0
    out = bytearray()
    for ch in padded:
        value = _SYMBOLS.get(ch)
        if value is None:
            continue
        buffer = (buffer << 5) | value
        bits += 5
        if bits >= 8:
            bits -= 8
            out.append((buffer >> bits) & 0xFF)
            buffer &= (1 << bits) - 1
    return bytes(out)


def decode_secret(secret: str, strict: bool = True) -> bytes:
    """
    Decode a user-supplied Base32 secret into raw HMAC key bytes.

    Steps:
    1. Uppercase, strip whitespace
    2. Pad with '=' to a multiple of 8 characters
    3. Decode with the strict or lenient policy

    Arguments:
        secret: Base32 secret (case-insensitive, padded or unpadded)
        strict: reject any non-alphabet symbol (True) or skip it (False)

    Returns:
        bytes: the key, never empty

    Raises:
        InvalidSecretFormat: if the secret cannot be decoded or decodes to no bytes
    """
    padded = pad_secret(normalize_secret(secret))
    key = _decode_strict(padded) if strict else _decode_lenient(padded)
    if not key:
        raise InvalidSecretFormat()
    logger.debug("Decoded %d-char secret into %d key bytes (strict=%s)", len(padded), len(key), strict)
    return key
