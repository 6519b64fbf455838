from typing import Sequence

from fastapi import status


class ServiceError(Exception):
    """Base exception for service layer errors."""

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _join_fields(fields: Sequence[str]) -> str:
    if len(fields) == 1:
        return fields[0]
    if len(fields) == 2:
        return f"{fields[0]} and {fields[1]}"
    return f"{', '.join(fields[:-1])}, and {fields[-1]}"


class ValidationError(ServiceError):
    """Required fields missing or empty on upsert. Raised before any transaction starts."""

    def __init__(self, required_fields: Sequence[str], missing_fields: Sequence[str]) -> None:
        verb = "is" if len(required_fields) == 1 else "are"
        super().__init__(f"{_join_fields(required_fields)} {verb} required", status.HTTP_400_BAD_REQUEST)
        self.required_fields = list(required_fields)
        self.missing_fields = list(missing_fields)


class PersistenceError(ServiceError):
    """Durable store read or write failed. The stored document is unchanged."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR)


class DeliveryError(Exception):
    """A subscriber could not be reached during broadcast. Never leaves the broadcaster."""
