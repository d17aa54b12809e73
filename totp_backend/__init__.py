"""
Flask HTTP front end for totp_core.

Exposes the TOTP generator and validator over /totp and /validate.
"""

from .app import app, create_app

__all__ = ['app', 'create_app']
