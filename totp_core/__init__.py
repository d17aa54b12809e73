"""
totp_core package
=================

TOTP (RFC 6238) generation and validation built on HOTP (RFC 4226),
SHA-1, 6 digits, 30-second steps.

──────────────────────────────────────────────
Core algorithm
──────────────────────────────────────────────
- Base32 decoding:
  uppercase, strip whitespace, pad with '=' to a multiple of 8, decode.
  Strict by default; decode_secret(secret, strict=False) skips unknown
  symbols like browser authenticators do.

- HOTP:
  code = Truncate(HMAC-SHA1(key, counter)) mod 10^6

- TOTP:
  HOTP with counter = floor(unix_time / 30)

- Validation:
  check counters current-window .. current+window; a secret that does not
  decode is reported as "not valid", never as an error.

──────────────────────────────────────────────
Quick example
──────────────────────────────────────────────
>>> from totp_core import generate, validate, DEMO_SECRET
>>> code = generate(DEMO_SECRET, 59)
>>> validate(code, DEMO_SECRET, window_steps=0, at_time=59)
True
"""
from .base32 import decode_secret, normalize_secret
from .config import DEFAULT_WINDOW_STEPS, DEMO_SECRET, DIGITS, STEP_SIZE
from .errors import InvalidSecretFormat
from .otp_core import (
    counter_at,
    dynamic_truncate,
    format_otpauth_uri,
    generate,
    generate_base32_secret,
    hotp,
    int_to_bytes,
    seconds_remaining,
    totp,
    validate,
)

__all__ = [
    "DEFAULT_WINDOW_STEPS",
    "DEMO_SECRET",
    "DIGITS",
    "STEP_SIZE",
    "InvalidSecretFormat",
    "counter_at",
    "decode_secret",
    "dynamic_truncate",
    "format_otpauth_uri",
    "generate",
    "generate_base32_secret",
    "hotp",
    "int_to_bytes",
    "normalize_secret",
    "seconds_remaining",
    "totp",
    "validate",
]
