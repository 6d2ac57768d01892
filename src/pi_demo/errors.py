"""
pi-demo error types.
"""

from typing import Any, Optional


class PiDemoError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class AuthError(PiDemoError):
    def __init__(self, message: str, code: str = "auth_error", details: Optional[dict[str, Any]] = None):
        super().__init__(code, message, details)


class SubmissionError(PiDemoError):
    def __init__(self, message: str, code: str = "submission_error", details: Optional[dict[str, Any]] = None):
        super().__init__(code, message, details)


class PreconditionError(PiDemoError):
    """Raised when a call is made without the data it cannot proceed without."""

    def __init__(self, message: str):
        super().__init__("precondition_error", message)


class GatewayError(PiDemoError):
    def __init__(self, message: str, code: str = "http_error", details: Optional[dict[str, Any]] = None):
        super().__init__(code, message, details)
