"""
config.py — Constants shared by generation and validation.

Every TOTP computation in this package reads STEP_SIZE and DIGITS from here,
so the generator and the validator can never disagree on them.
"""

# --- Config / constants ----------------------------------------------------
STEP_SIZE = 30              # TOTP step (seconds)
DIGITS = 6                  # standard authenticator code length
DEFAULT_WINDOW_STEPS = 1    # +/- steps accepted by validate()
MAX_WINDOW_STEPS = 10       # largest window the HTTP layer accepts

BASE32_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"

# Demo secret used throughout the docs, CLI help and tests ("Hello!\xde\xad\xbe\xef")
DEMO_SECRET = "JBSWY3DPEHPK3PXP"

DEFAULT_ISSUER = "totp-tool"
DEFAULT_ACCOUNT = "user@example"
