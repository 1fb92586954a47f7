"""
Service Errors
--------------
Expected business-rule failures are returned by services as ServiceError
values instead of being raised. The HTTP layer turns them into responses;
anything raised is an unexpected failure and becomes a 500.
"""
import enum
from dataclasses import dataclass


class ErrorKind(str, enum.Enum):
    NOT_FOUND = "not_found"                # Entity absent or not visible to the caller
    FORBIDDEN = "forbidden"                # Authenticated, wrong role
    INVALID_ARGUMENT = "invalid_argument"  # Malformed or insufficient input
    CONFLICT = "conflict"                  # Duplicate invite/day/connection
    INVALID_STATE = "invalid_state"        # Relationship not in the required lifecycle state


@dataclass(frozen=True)
class ServiceError:
    kind: ErrorKind
    message: str

    @classmethod
    def not_found(cls, message: str) -> "ServiceError":
        return cls(ErrorKind.NOT_FOUND, message)

    @classmethod
    def forbidden(cls, message: str) -> "ServiceError":
        return cls(ErrorKind.FORBIDDEN, message)

    @classmethod
    def invalid_argument(cls, message: str) -> "ServiceError":
        return cls(ErrorKind.INVALID_ARGUMENT, message)

    @classmethod
    def conflict(cls, message: str) -> "ServiceError":
        return cls(ErrorKind.CONFLICT, message)

    @classmethod
    def invalid_state(cls, message: str) -> "ServiceError":
        return cls(ErrorKind.INVALID_STATE, message)


def is_error(result) -> bool:
    return isinstance(result, ServiceError)


class UpstreamError(Exception):
    """The external exercise catalog failed or answered with an error."""


class CatalogNotConfiguredError(UpstreamError):
    """No API key is configured for the exercise catalog."""
