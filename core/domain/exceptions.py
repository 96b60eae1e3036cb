"""
Domain exceptions.

Raised by the domain and application layers; the API layer maps them to
HTTP status codes.
"""
from typing import Optional


class HostflowError(Exception):
    """Base class for all domain errors."""


class ValidationError(HostflowError, ValueError):
    """Malformed input to order assembly. Raised before anything is persisted."""


class InvalidPackage(HostflowError):
    """Hosting package id does not resolve to an active package."""

    def __init__(self, package_id: int):
        self.package_id = package_id
        super().__init__(f"Hosting package {package_id} does not exist or is not active")


class NotFound(HostflowError):
    """Entity required by the caller does not exist."""

    def __init__(self, entity: str, key: object):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} not found: {key}")


class IllegalTransition(HostflowError):
    """Requested status change is not reachable from the current status."""

    def __init__(self, entity: str, current: str, action: str, hint: Optional[str] = None):
        self.entity = entity
        self.current = current
        self.action = action
        message = f"Cannot {action} {entity} in status '{current}'"
        super().__init__(f"{message}; {hint}" if hint else message)


class ConflictError(HostflowError):
    """Stored status no longer matches the status a transition expected."""

    def __init__(self, entity: str, entity_id: object, expected: str):
        self.entity = entity
        self.entity_id = entity_id
        self.expected = expected
        super().__init__(
            f"{entity} {entity_id} is no longer in status '{expected}'"
        )


class ProviderError(HostflowError):
    """An external provider call failed."""

    def __init__(self, provider: str, message: str, status: Optional[int] = None):
        self.provider = provider
        self.message = message
        self.status = status
        super().__init__(f"{provider} error: {message}")


class PrerequisiteUnmet(HostflowError):
    """A task ran before the state it depends on was persisted."""
