"""Domain errors raised by services and mapped to HTTP responses by the routers"""

from typing import Optional


class RegistrationError(Exception):
    """Base class for registration server errors"""


class ValidationError(RegistrationError):
    """Submitted data failed boundary validation"""

    def __init__(self, details: list[dict], message: str = "Validation failed"):
        super().__init__(message)
        self.details = details


class PersistenceError(RegistrationError):
    """The store could not complete a read or write"""


class NotificationConfigError(RegistrationError):
    """No webhook destination is configured"""


class NotificationTransportError(RegistrationError):
    """A single webhook attempt failed (transport error or non-2xx)"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AuthorizationError(RegistrationError):
    """Caller did not present a valid admin credential"""


class NotFoundError(RegistrationError):
    """Requested registration does not exist"""


class ShuttingDownError(RegistrationError):
    """Server is draining and no longer accepts submissions"""
