"""
TOTP HTTP ROUTES - FLASK BLUEPRINT

Thin boundary over totp_core: reads query/JSON parameters, calls the core
and shapes the result as JSON or HTML. No secret is stored or logged.

EXAMPLES:
curl "http://localhost:8080/totp?secret=JBSWY3DPEHPK3PXP&format=json"
curl -H "Accept: application/json" "http://localhost:8080/totp?secret=JBSWY3DPEHPK3PXP"
curl "http://localhost:8080/validate?secret=JBSWY3DPEHPK3PXP&code=123456&window=1"
curl -X POST http://localhost:8080/validate -H "Content-Type: application/json" \
     -d '{"secret": "JBSWY3DPEHPK3PXP", "code": "123456"}'
"""
import logging

from flask import Blueprint, current_app, jsonify, render_template, request

from totp_core import (
    InvalidSecretFormat,
    format_otpauth_uri,
    generate_base32_secret,
    seconds_remaining,
    totp,
    validate,
)
from totp_core.config import DEFAULT_ACCOUNT, DEFAULT_ISSUER

logger = logging.getLogger(__name__)

totp_bp = Blueprint("totp", __name__)


def _wants_json() -> bool:
    """format=json wins; otherwise honour an Accept header that prefers JSON."""
    if request.args.get("format", "").lower() == "json":
        return True
    best = request.accept_mimetypes.best_match(["text/html", "application/json"])
    return best == "application/json"


def _error(message: str, as_json: bool = True, status: int = 400):
    if as_json:
        return jsonify({"error": message}), status
    return render_template("totp.html", error=message), status


def _params() -> dict:
    """Request parameters from a JSON object body, else from query/form."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.values


@totp_bp.route("/", methods=["GET"])
def index():
    """Endpoint listing."""
    return jsonify({
        "service": "totp-tool",
        "endpoints": {
            "GET /totp?secret=S[&format=json]": "current TOTP code",
            "GET|POST /validate?secret=S&code=C[&window=N]": "check a code",
            "GET /otpauth_uri?secret=S[&account=A&issuer=I]": "otpauth:// URI for authenticator apps",
            "POST /new_secret": "random Base32 secret",
        },
    })


@totp_bp.route("/totp", methods=["GET"])
def get_totp():
    """
    CURRENT TOTP CODE

      curl "http://localhost:8080/totp?secret=JBSWY3DPEHPK3PXP&format=json"

    Output:
      {"totp": "123456", "remaining": 17}
      {"error": "invalid secret"}  (400)
    """
    as_json = _wants_json()
    secret = request.args.get("secret")
    if not secret:
        return _error("missing secret", as_json)

    now = current_app.config["TOTP_CLOCK"]()
    try:
        code = totp(secret, at_time=now, strict=current_app.config["TOTP_STRICT_SECRETS"])
    except InvalidSecretFormat:
        logger.info("Rejected /totp request: secret of length %d does not decode", len(secret))
        return _error("invalid secret", as_json)

    remaining = seconds_remaining(now)
    if as_json:
        return jsonify({"totp": code, "remaining": remaining})
    return render_template("totp.html", code=code, remaining=remaining)


@totp_bp.route("/validate", methods=["GET", "POST"])
def validate_route():
    """
    VALIDATE A TOTP CODE

    Input (query string or JSON body):
      secret  required
      code    required
      window  optional, +/- steps of tolerated drift (at most TOTP_MAX_WINDOW)

    Output:
      {"valid": true}  or  {"valid": false}

    A secret that does not decode is simply {"valid": false}.
    """
    params = _params()
    secret = params.get("secret")
    code = params.get("code")
    if not secret:
        return _error("missing secret")
    if code is None or code == "":
        return _error("missing code")

    window = params.get("window")
    if window is None or window == "":
        window = current_app.config["TOTP_DEFAULT_WINDOW"]
    try:
        window = int(window)
    except (TypeError, ValueError):
        return _error("window must be an integer")
    if window > current_app.config["TOTP_MAX_WINDOW"]:
        return _error(f"window must not exceed {current_app.config['TOTP_MAX_WINDOW']}")

    valid = validate(
        str(code),
        str(secret),
        window_steps=window,
        at_time=current_app.config["TOTP_CLOCK"](),
        strict=current_app.config["TOTP_STRICT_SECRETS"],
    )
    logger.info("Validation with window=%d -> %s", window, valid)
    return jsonify({"valid": valid})


@totp_bp.route("/otpauth_uri", methods=["GET"])
def get_otpauth_uri():
    """
    URI FOR AUTHENTICATOR APPS (QR code payload)

      curl "http://localhost:8080/otpauth_uri?secret=JBSWY3DPEHPK3PXP&account=alice@example.com&issuer=MyApp"
    """
    secret = request.args.get("secret")
    if not secret:
        return _error("missing secret")
    account = request.args.get("account", DEFAULT_ACCOUNT)
    issuer = request.args.get("issuer", DEFAULT_ISSUER)
    try:
        uri = format_otpauth_uri(
            secret, account=account, issuer=issuer, strict=current_app.config["TOTP_STRICT_SECRETS"]
        )
    except InvalidSecretFormat:
        return _error("invalid secret")
    return jsonify({"uri": uri})


@totp_bp.route("/new_secret", methods=["POST"])
def new_secret():
    """Random Base32 secret for enrolling a new authenticator."""
    return jsonify({"secret": generate_base32_secret()})
