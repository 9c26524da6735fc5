"""Error types surfaced to API callers."""
from typing import Optional


class ShopError(Exception):
    """Base error rendered as ``{"success": false, "errors": message}``."""

    status_code = 500
    message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class Unauthenticated(ShopError):
    status_code = 401
    message = "Please authenticate using a valid token"


class DuplicateEmail(ShopError):
    status_code = 400
    message = "Existing user found with same email address"


class InvalidCredentials(ShopError):
    # Login failures are reported with a 200 and success=false
    status_code = 200
    message = "Invalid email or password"


class InternalError(ShopError):
    status_code = 500
