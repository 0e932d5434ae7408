"""Project-wide custom exceptions.

This module centralizes domain-specific exception types so that routers and
services can raise / catch them without importing deep infrastructure errors
like ``asyncpg`` or raw SQLAlchemy exceptions.

Add new errors here rather than scattering small ``class XError(Exception):``
definitions across the codebase; this keeps the public error surface easy to
audit and map to HTTP responses:

=========================  ======
exception                  status
=========================  ======
``ValidationError``        400
``NotParticipantError``    403
``NotFoundError``          404
``DuplicateEmailError``    409
``InternalError``          500
=========================  ======
"""
from __future__ import annotations


class SynapseError(Exception):
    """Base class for all custom project exceptions.

    Subclass this rather than ``Exception`` directly for new domain errors.
    """

    detail = "Internal server error"

    def __init__(self, detail: str | None = None):
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class ValidationError(SynapseError):
    """Caller supplied missing, blank or inconsistent fields."""

    detail = "Missing required fields."


class NotFoundError(SynapseError):
    detail = "Not found"


class UserNotFoundError(NotFoundError):
    """Raised when a user id (or email) does not correspond to a stored record."""

    detail = "User not found"


class ThreadNotFoundError(NotFoundError):
    detail = "Chat not found"


class MessageNotFoundError(NotFoundError):
    detail = "Message not found"


class NotParticipantError(SynapseError):
    """Raised when a user acts on a thread they do not belong to."""

    detail = "Forbidden: Access Denied"


class DuplicateEmailError(SynapseError):
    """Raised when attempting to create/update a user with an existing email."""

    detail = "Email already registered"


class InternalError(SynapseError):
    """Storage-layer failure surfaced to the caller as a generic 500.

    The original driver exception is chained as ``__cause__``.
    """


__all__ = [
    "SynapseError",
    "ValidationError",
    "NotFoundError",
    "UserNotFoundError",
    "ThreadNotFoundError",
    "MessageNotFoundError",
    "NotParticipantError",
    "DuplicateEmailError",
    "InternalError",
]
