from __future__ import annotations

from typing import Any


class ServiceError(Exception):
    def __init__(self, code: str, message: str | None = None, **extra: Any) -> None:
        self.code = code
        self.message = message or code
        self.extra = extra
        super().__init__(self.message)


class NotFoundError(ServiceError):
    pass


class PermissionDeniedError(ServiceError):
    pass


class ConflictError(ServiceError):
    pass


class ValidationError(ServiceError):
    """Input failed a field-level check.

    ``errors`` maps field names to messages, mirroring request-schema failures.
    """

    def __init__(self, code: str, message: str | None = None, *, field: str | None = None) -> None:
        errors = {field: [message or code]} if field else {}
        super().__init__(code, message, errors=errors)

    @property
    def errors(self) -> dict[str, list[str]]:
        return self.extra["errors"]


class BusinessRuleError(ServiceError):
    """A domain rule refused an otherwise well-formed request."""
