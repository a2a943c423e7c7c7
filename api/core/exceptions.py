"""
Data-access error types.

Repositories raise these; feature services translate them into HTTP errors.
"""

from __future__ import annotations


class RepositoryError(RuntimeError):
    pass


class DocumentNotFoundError(RepositoryError):
    """
    Lookup matched no visible document (absent or soft-deleted).
    """

    def __init__(self, model_name: str, message: str | None = None) -> None:
        self.model_name = model_name
        super().__init__(message or f"{model_name} not found")


# Caller-side bug, not a data condition.
class InvalidUsageError(RepositoryError):
    pass
