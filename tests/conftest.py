import pytest

from totp_backend.app import create_app

FIXED_NOW = 59


@pytest.fixture
def app():
    return create_app({"TESTING": True, "TOTP_CLOCK": lambda: FIXED_NOW})


@pytest.fixture
def client(app):
    return app.test_client()
