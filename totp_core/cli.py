#!/usr/bin/env python3
"""
cli.py — command-line wrapper for otp_core.py

Subcommands:
- generate   : print the TOTP code for a secret
- validate   : check a code against a secret (exit 0 = valid, 1 = invalid)
- watch      : show the TOTP code in real time
- uri        : print the otpauth:// URI for authenticator apps
- new-secret : print a random Base32 secret
- serve      : run the Flask HTTP server

eg..:
    totp-tool generate JBSWY3DPEHPK3PXP
    totp-tool generate JBSWY3DPEHPK3PXP --time 59 --json
    totp-tool validate JBSWY3DPEHPK3PXP 123456 --window 1
    totp-tool uri JBSWY3DPEHPK3PXP --account alice@example --issuer MyService
"""

import argparse
import json
import logging
import math
import sys
import time

from . import otp_core
from .config import DEFAULT_ACCOUNT, DEFAULT_ISSUER, DEFAULT_WINDOW_STEPS, STEP_SIZE
from .errors import InvalidSecretFormat

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID_CODE = 1
EXIT_INVALID_SECRET = 2


# --- CLI command handlers ---
def cmd_generate(args):
    try:
        code = otp_core.generate(args.secret, at_time=args.time, strict=not args.lenient)
    except InvalidSecretFormat as e:
        print(f"[!] {e}", file=sys.stderr)
        return EXIT_INVALID_SECRET
    if args.json:
        print(json.dumps({"totp": code}))
    else:
        print(code)
    return EXIT_OK


def cmd_validate(args):
    ok = otp_core.validate(
        args.code,
        args.secret,
        window_steps=args.window,
        at_time=args.time,
        strict=not args.lenient,
    )
    if ok:
        print("[+] TOTP code is VALID")
        return EXIT_OK
    print("[-] TOTP code is INVALID")
    return EXIT_INVALID_CODE


def cmd_watch(args):
    # Fail before entering the loop if the secret is bad
    try:
        otp_core.decode_secret(args.secret, strict=not args.lenient)
    except InvalidSecretFormat as e:
        print(f"[!] {e}", file=sys.stderr)
        return EXIT_INVALID_SECRET

    print("Press Ctrl+C to quit. Generating TOTP in real time...\n")
    last_code = None
    try:
        while True:
            now = int(time.time())
            code = otp_core.totp(args.secret, at_time=now, strict=not args.lenient)
            remaining = otp_core.seconds_remaining(now)
            if code != last_code:
                print(f"TOTP: {code}  (valid ~{remaining:2d}s)")
                last_code = code
            else:
                print(f".. {remaining:2d}s left", end='\r', flush=True)
            time.sleep(1)
    except KeyboardInterrupt:
        print("\nBye.")
    return EXIT_OK


def cmd_uri(args):
    try:
        uri = otp_core.format_otpauth_uri(
            args.secret, account=args.account, issuer=args.issuer, strict=not args.lenient
        )
    except InvalidSecretFormat as e:
        print(f"[!] {e}", file=sys.stderr)
        return EXIT_INVALID_SECRET
    print(uri)
    return EXIT_OK


def cmd_new_secret(args):
    print(otp_core.generate_base32_secret())
    return EXIT_OK


def cmd_serve(args):
    from totp_backend.app import create_app

    logger.info("Serving on http://%s:%d", args.host, args.port)
    create_app().run(host=args.host, port=args.port)
    return EXIT_OK


def cmd_help(args):
    args.parser.print_help()
    return EXIT_OK


# --- Argument types ---
def unix_time(value: str) -> float:
    """--time value: finite, not before the epoch, counter within 64 bits."""
    try:
        seconds = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}")
    if not math.isfinite(seconds) or seconds < 0:
        raise argparse.ArgumentTypeError(f"must be a finite Unix time >= 0: {value!r}")
    if seconds // STEP_SIZE > otp_core.MAX_COUNTER:
        raise argparse.ArgumentTypeError(f"too far in the future: {value!r}")
    return seconds


# --- Argparse builder ---
def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="totp-tool", description="TOTP (RFC 6238, HMAC-SHA1) generator and validator")
    p.add_argument("--verbose", action="store_true", help="Debug logging")
    sub = p.add_subparsers(dest="cmd")
    p.set_defaults(func=cmd_help, parser=p)

    # generate
    pg = sub.add_parser("generate", help="Print the TOTP code for a secret")
    pg.add_argument("secret", help="Base32 secret")
    pg.add_argument("--time", type=unix_time, help="Unix time to generate for (default: now)")
    pg.add_argument("--json", action="store_true", help='Print {"totp": code}')
    pg.add_argument("--lenient", action="store_true", help="Skip non-Base32 characters instead of failing")
    pg.set_defaults(func=cmd_generate)

    # validate
    pv = sub.add_parser("validate", help="Check a TOTP code")
    pv.add_argument("secret", help="Base32 secret")
    pv.add_argument("code", help="Code to check")
    pv.add_argument("--window", type=int, default=DEFAULT_WINDOW_STEPS, help="Allowed +/- step window")
    pv.add_argument("--time", type=unix_time, help="Unix time to validate at (default: now)")
    pv.add_argument("--lenient", action="store_true", help="Skip non-Base32 characters instead of failing")
    pv.set_defaults(func=cmd_validate)

    # watch
    pw = sub.add_parser("watch", help="Show TOTP code in real time")
    pw.add_argument("secret", help="Base32 secret")
    pw.add_argument("--lenient", action="store_true")
    pw.set_defaults(func=cmd_watch)

    # uri
    pu = sub.add_parser("uri", help="Print the otpauth URI")
    pu.add_argument("secret", help="Base32 secret")
    pu.add_argument("--account", default=DEFAULT_ACCOUNT, help="Account label for otpauth URI")
    pu.add_argument("--issuer", default=DEFAULT_ISSUER, help="Issuer label for otpauth URI")
    pu.add_argument("--lenient", action="store_true", help="Skip non-Base32 characters instead of failing")
    pu.set_defaults(func=cmd_uri)

    # new-secret
    pn = sub.add_parser("new-secret", help="Print a random Base32 secret")
    pn.set_defaults(func=cmd_new_secret)

    # serve
    ps = sub.add_parser("serve", help="Run the HTTP server")
    ps.add_argument("--host", default="127.0.0.1")
    ps.add_argument("--port", type=int, default=8080)
    ps.set_defaults(func=cmd_serve)

    return p


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[%(levelname)s] %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
