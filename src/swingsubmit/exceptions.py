"""Error taxonomy for the submission pipeline."""

from __future__ import annotations

__all__ = [
    "SubmissionError",
    "ConnectivityError",
    "AuthorizationError",
    "TransferError",
    "NotifyError",
    "ServerAnalysisError",
    "AnalysisTimeoutError",
    "FileValidationError",
    "UnsupportedMediaError",
    "PayloadTooLargeError",
    "SubmissionCancelledError",
    "AnalyticsError",
]


class SubmissionError(Exception):
    """Base class for failures surfaced to the submitting caller.

    ``phase`` names the pipeline step that broke so the UI can explain it;
    ``status_code`` is set for HTTP rejections.
    """

    phase: str = "unknown"

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        detail: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail

    def __str__(self) -> str:
        message = super().__str__()
        if self.status_code is not None:
            return f"{message} (status {self.status_code})"
        return message


class ConnectivityError(SubmissionError):
    """Raised when no candidate endpoint answered the health check."""

    phase = "resolving"


class AuthorizationError(SubmissionError):
    """Raised when the upload ticket request is rejected or malformed."""

    phase = "authorizing"


class TransferError(SubmissionError):
    """Raised when the storage write is rejected."""

    phase = "transferring"


class NotifyError(SubmissionError):
    """Raised when job registration fails after a successful transfer."""

    phase = "notifying"


class ServerAnalysisError(SubmissionError):
    """Raised when the job reaches the server-side ``error`` state."""

    phase = "polling"


class AnalysisTimeoutError(SubmissionError):
    """Raised when polling exceeds its attempt ceiling.

    The job may still be processing server-side.
    """

    phase = "polling"


class FileValidationError(SubmissionError):
    """Raised when local pre-flight checks reject the file."""

    phase = "validating"


class UnsupportedMediaError(FileValidationError):
    """Raised when the file does not declare a video media type."""


class PayloadTooLargeError(FileValidationError):
    """Raised when the file exceeds the configured size ceiling."""


class SubmissionCancelledError(SubmissionError):
    """Raised when the caller cancels the submission between polls."""

    phase = "polling"


class AnalyticsError(Exception):
    """Raised by analytics sinks; never escapes the recorder."""
