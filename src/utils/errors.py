"""Error handling utilities."""

from typing import Optional


class EstateError(Exception):
    """Base exception for the estate insights backend."""
    code = "INTERNAL_SERVER_ERROR"


class NotFoundError(EstateError):
    """A primary entity required by an operation does not exist."""
    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: Optional[str]):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found: {entity_id}")


class InvalidRequestError(EstateError):
    """Unknown operation, missing argument or invalid input."""
    code = "BAD_USER_INPUT"


class StoreError(EstateError):
    """Entity store operation error."""
    code = "STORE_UNAVAILABLE"


class OperationTimeoutError(EstateError):
    """Caller-supplied timeout elapsed before the operation finished."""
    code = "TIMEOUT"
