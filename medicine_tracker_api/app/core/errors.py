"""
Error types raised by the medicine service.

Every failure of a service operation is reported as one of these
exceptions.  They derive from ``ValueError`` so that callers which only
care about "the operation was rejected" can keep catching that, while
the API layer maps each subclass to its own HTTP status.  The message
is the human readable reason and is returned verbatim to clients.
"""

from fastapi import status


class MedicineError(ValueError):
    """Base class for rejected medicine operations."""

    status_code: int = status.HTTP_400_BAD_REQUEST


class InvalidInputError(MedicineError):
    """Missing or malformed input (empty fields, bad pagination, past expiry)."""

    status_code = status.HTTP_400_BAD_REQUEST


class MedicineNotFoundError(MedicineError):
    """The referenced id is not present in the store."""

    status_code = status.HTTP_404_NOT_FOUND


class NotAuthorizedError(MedicineError):
    """The caller is not the creator of the record."""

    status_code = status.HTTP_403_FORBIDDEN


class PreconditionFailedError(MedicineError):
    """The record is not in a state that allows the operation."""

    status_code = status.HTTP_409_CONFLICT


class NoRecordsError(MedicineError):
    """A paged or initial load found nothing to return."""

    status_code = status.HTTP_404_NOT_FOUND


class StorageError(MedicineError):
    """The underlying store failed to persist a record."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
