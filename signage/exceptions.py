"""
Signage CMS exceptions.

Raised by the entities and factories and translated to HTTP responses by the
error handlers registered in ``signage.app``.
"""


class SignageError(Exception):
    """Base exception for signage domain errors."""
    pass


class NotFoundError(SignageError, LookupError):
    """Raised when a requested entity does not exist."""
    pass


class InvalidArgumentError(SignageError, ValueError):
    """Raised when an entity fails validation."""
    pass
