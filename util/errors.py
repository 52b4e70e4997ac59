# util/errors.py
from fastapi import HTTPException, status


class AppError(HTTPException):
    # Flow: raise AppError to short-circuit with a typed status & message.
    def __init__(
        self, message: str, http_status: int = status.HTTP_400_BAD_REQUEST
    ) -> None:
        super().__init__(status_code=http_status, detail=message)


class RetrievalError(Exception):
    """Base class for retrieval pipeline failures."""


class DimensionMismatch(RetrievalError, ValueError):
    """Two vectors (or an index and a vector) disagree on length."""

    def __init__(self, left: int, right: int) -> None:
        super().__init__(f"vector length mismatch: {left} != {right}")
        self.left = left
        self.right = right


class EmbeddingFailure(RetrievalError):
    """The inference collaborator failed or returned malformed output."""


class DocumentLoadFailure(RetrievalError):
    """A document could not be indexed; no partial index is kept."""


class LoadSuperseded(DocumentLoadFailure):
    """A newer load started before this one finished; its result is discarded."""


class QueryFailure(RetrievalError):
    """The question could not be embedded; the index is still usable."""
