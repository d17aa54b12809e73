"""Exceptions raised by the TOTP core."""


class InvalidSecretFormat(ValueError):
    """The secret is not a usable Base32 string.

    Subclasses ValueError so callers written against ``except ValueError``
    keep working.
    """

    def __init__(self, message: str = "invalid secret"):
        super().__init__(message)
