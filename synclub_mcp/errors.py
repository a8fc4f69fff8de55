"""Error types for the SynClub MCP adapter.

Every failure a tool invocation can hit is one of these. The dispatcher
catches them at the tool boundary and turns them into error results; only
the passthrough request path lets them escape (as plain RuntimeErrors).
"""

from typing import Optional

AUTH_ERROR_CODE = 1004
VERIFICATION_REQUIRED_CODE = 2038

VERIFICATION_REQUIRED_MESSAGE = (
    "Real-name verification is required for this account. "
    "Complete it at https://synclub.baidu-int.com and retry."
)


class SynclubError(Exception):
    """Base exception for the adapter.

    Attributes:
        message: Human-readable description.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class SynclubAPIError(SynclubError):
    """The upstream API answered with a non-success envelope.

    Attributes:
        message: Description including the upstream message and trace id.
        status_code: Upstream status code (500 for transport failures).
        trace_id: Value of the Trace-Id response header, if any.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        trace_id: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.trace_id = trace_id


class AuthError(SynclubAPIError):
    """Credential missing or rejected (code 1004)."""

    def __init__(self, message: str, trace_id: Optional[str] = None):
        super().__init__(message, AUTH_ERROR_CODE, trace_id)


class VerificationRequiredError(SynclubAPIError):
    """Account must complete real-name verification (code 2038)."""

    def __init__(self, trace_id: Optional[str] = None):
        super().__init__(
            f"{VERIFICATION_REQUIRED_MESSAGE} Trace-Id: {trace_id}",
            VERIFICATION_REQUIRED_CODE,
            trace_id,
        )


class RequestError(SynclubAPIError):
    """Any other backend error code, or a wrapped transport failure."""


class UnknownToolError(SynclubError):
    """No tool with this name is registered."""

    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class ConfigurationError(SynclubError):
    """Static configuration is incomplete (e.g. missing endpoint mapping).

    Attributes:
        message: Description of the error.
        field: Optional name of the missing or invalid entry.
    """

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class ValidationError(SynclubError):
    """A required tool argument is missing or empty."""

    def __init__(self, field: str, message: Optional[str] = None):
        super().__init__(message or f"{field} is required")
        self.field = field


class TaskFailedError(SynclubError):
    """Polling observed a terminal (non-pending) failure code.

    Attributes:
        task_id: The task being polled.
        status_code: The failure code reported by the backend.
    """

    def __init__(
        self,
        message: str,
        task_id: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.task_id = task_id
        self.status_code = status_code


class PollTimeoutError(SynclubError, TimeoutError):
    """Polling used up its attempt budget without a result."""

    def __init__(self, task_id: str, attempts: int):
        super().__init__(
            f"Task {task_id} did not complete in time ({attempts} attempts)"
        )
        self.task_id = task_id
        self.attempts = attempts


class StreamError(SynclubError):
    """Transport failure while reading a streamed response.

    Attributes:
        cause: The underlying transport exception.
    """

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.cause = cause
