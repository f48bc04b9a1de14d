"""
Typed failures raised by the portal services.
Each carries the HTTP status the API layer answers with (see main.py).
"""


class AetError(Exception):
    """Base exception for all portal business errors."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFound(AetError):
    """Referenced id does not exist."""

    status_code = 404


class Forbidden(AetError):
    """Ownership or role mismatch."""

    status_code = 403


class InvalidInput(AetError):
    """Input breaks a business rule (bad enum value, empty states, duplicate plate...)."""

    status_code = 400


class InvalidState(AetError):
    """Operation is not legal in the entity's current lifecycle state."""

    status_code = 409
