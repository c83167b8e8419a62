"""
Exception hierarchy for the CSV processor.

Provides layered exception structure for domain-specific errors and the
tagged outcome the queue consumers use to decide between ack and nack.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

import enum
from typing import Any


class CsvProcessorException(Exception):
    """Base exception for all CSV processor errors."""

    status_code: int = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging

        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class BadRequestError(CsvProcessorException):
    """Raised when client input is malformed (upload, multipart body, CSV content)."""

    status_code = 400

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize bad request error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class NotFoundError(CsvProcessorException):
    """Raised when a referenced job or stored file does not exist."""

    status_code = 404

    def __init__(
        self,
        message: str,
        resource: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if resource:
            details["resource"] = resource
        super().__init__(message, details)


class InternalError(CsvProcessorException):
    """
    Raised when a downstream dependency fails or parsing breaks unexpectedly.

    The message is meant to be safe for clients; the underlying cause is
    kept in ``__cause__`` and logged, never returned.
    """

    status_code = 500


class BlobStorageError(InternalError):
    """Raised when a blob store upload or download fails."""

    def __init__(
        self,
        message: str,
        file_name: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize blob storage error.

        Args:
            message: Error message
            file_name: Object key involved in the failed operation
            details: Additional context
        """
        details = details or {}
        if file_name:
            details["file_name"] = file_name
        self.file_name = file_name
        super().__init__(message, details)


class BrokerError(InternalError):
    """Raised when the message broker cannot be reached or rejects an operation."""

    def __init__(
        self,
        message: str,
        destination: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if destination:
            details["destination"] = destination
        super().__init__(message, details)


class MessageParseError(CsvProcessorException):
    """Raised when a queue message can never be processed (poison message)."""

    pass


class ProcessingOutcome(str, enum.Enum):
    """
    Result tag for one consumed queue message.

    SUCCESS: Work done; acknowledge
    POISON: Message is structurally invalid; acknowledge and drop
    CLIENT_ERROR: Content was rejected (e.g. no records in the file)
    NOT_FOUND: A referenced job or blob is missing
    TRANSIENT_FAILURE: A dependency failed; retry later
    """

    SUCCESS = "success"
    POISON = "poison"
    CLIENT_ERROR = "client_error"
    NOT_FOUND = "not_found"
    TRANSIENT_FAILURE = "transient_failure"


# Every failure except a poison message goes back to the queue.
# There is no retry ceiling and no dead-letter routing.
REQUEUE_ON_OUTCOME: dict[ProcessingOutcome, bool] = {
    ProcessingOutcome.SUCCESS: False,
    ProcessingOutcome.POISON: False,
    ProcessingOutcome.CLIENT_ERROR: True,
    ProcessingOutcome.NOT_FOUND: True,
    ProcessingOutcome.TRANSIENT_FAILURE: True,
}


def classify_exception(exc: BaseException) -> ProcessingOutcome:
    """
    Map an exception raised while handling a message to its outcome tag.

    Args:
        exc: Exception raised by the processing step

    Returns:
        ProcessingOutcome: Tag used for the ack/nack decision
    """
    if isinstance(exc, MessageParseError):
        return ProcessingOutcome.POISON
    if isinstance(exc, BadRequestError):
        return ProcessingOutcome.CLIENT_ERROR
    if isinstance(exc, NotFoundError):
        return ProcessingOutcome.NOT_FOUND
    return ProcessingOutcome.TRANSIENT_FAILURE


def should_requeue(outcome: ProcessingOutcome) -> bool:
    """Return True when a message with this outcome must be nacked with requeue."""
    return REQUEUE_ON_OUTCOME[outcome]
