"""
FLASK APP ENTRY POINT - TOTP HTTP SERVER
========================================

Sets up the Flask app, enables CORS and registers the TOTP routes.

Configuration (app.config, overridable by environment or create_app(config)):
- TOTP_DEFAULT_WINDOW: drift window used by /validate when none is given (env TOTP_DEFAULT_WINDOW)
- TOTP_MAX_WINDOW: largest window /validate accepts (env TOTP_MAX_WINDOW)
- TOTP_STRICT_SECRETS: strict Base32 decoding (env TOTP_STRICT_SECRETS=0 turns it off)
- TOTP_CLOCK: callable returning Unix seconds; the only place "now" is read

Run:
    flask --app totp_backend.app run
    totp-tool serve --port 8080
"""
import logging
import os
import time

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from totp_core.config import DEFAULT_WINDOW_STEPS, MAX_WINDOW_STEPS

logger = logging.getLogger(__name__)


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() not in ("0", "false", "no", "off")


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer, using %d", name, value, default)
        return default


def create_app(config: dict = None) -> Flask:
    """Build the Flask app; config entries override the defaults."""
    app = Flask(__name__)
    app.config.from_mapping(
        TOTP_DEFAULT_WINDOW=_env_int("TOTP_DEFAULT_WINDOW", DEFAULT_WINDOW_STEPS),
        TOTP_MAX_WINDOW=_env_int("TOTP_MAX_WINDOW", MAX_WINDOW_STEPS),
        TOTP_STRICT_SECRETS=_env_flag("TOTP_STRICT_SECRETS", True),
        TOTP_CLOCK=time.time,
    )
    if config:
        app.config.update(config)

    # Browser front ends are served from other origins
    CORS(app)

    from totp_backend.routes import totp_bp
    app.register_blueprint(totp_bp)

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({"error": e.description}), e.code

    logger.debug(
        "App created (default window=%s, strict secrets=%s)",
        app.config["TOTP_DEFAULT_WINDOW"],
        app.config["TOTP_STRICT_SECRETS"],
    )
    return app


app = create_app()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    app.run(host="127.0.0.1", port=8080)
