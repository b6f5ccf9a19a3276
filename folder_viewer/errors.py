"""
Error taxonomy for folder operations.

Each error carries the HTTP status the API layer answers with, so routes never
have to map exceptions by hand.
"""

from __future__ import annotations


class FolderError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(FolderError):
    """Missing or invalid input."""

    status_code = 400


class NotFoundError(FolderError):
    status_code = 404


class ForbiddenError(FolderError):
    """Attempt to delete the root folder."""

    status_code = 403


class ConflictError(FolderError):
    """Attempt to delete a folder that still has children."""

    status_code = 400


class StoreError(FolderError):
    """Underlying persistence failure."""

    status_code = 500
