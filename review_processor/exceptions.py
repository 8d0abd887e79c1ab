"""Errors raised by the review ingestion and correction engine."""


class ReviewProcessorError(Exception):
    """Base exception for review_processor."""

    pass


class ParseEmptyError(ReviewProcessorError):
    """Raised when an upload holds no data rows after the header."""

    pass


class LengthMismatchError(ReviewProcessorError):
    """Raised when a classification response does not match the request 1:1."""

    def __init__(self, expected: int, received: int) -> None:
        super().__init__(f"expected {expected} predictions, received {received}")
        self.expected = expected
        self.received = received


class NotFoundError(ReviewProcessorError):
    """Raised when a view index is out of range or points at a stale entry."""

    pass


class SaveError(ReviewProcessorError):
    """Raised when a correction could not be persisted."""

    pass


class TransportError(ReviewProcessorError):
    """Raised when a collaborator is unreachable or answers with an error."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
