"""
pctl Exception Hierarchy

Clean exception hierarchy for consistent error handling across the CLI.
Every failure is terminal for the current command and is surfaced to the
operator as a formatted message.
"""

from typing import Iterable, Optional


class PctlError(Exception):
    """Base exception for all pctl errors."""

    def __init__(self, message: str, context: Optional[str] = None):
        self.message = message
        self.context = context
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format error message with optional context."""
        if self.context:
            return f"{self.message}\nContext: {self.context}"
        return self.message


class TransportError(PctlError):
    """Raised when a request to the control plane fails (network or status)."""

    def __init__(
        self,
        message: str,
        context: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        self.status_code = status_code
        super().__init__(message, context)


class DecodeError(PctlError):
    """Raised when a response does not have the expected shape."""

    pass


class AuthError(PctlError):
    """Raised when the control plane rejects the supplied credentials."""

    pass


class SelectionError(PctlError):
    """Raised when an endpoint selector cannot be evaluated."""

    pass


class AmbiguousSelectionError(SelectionError):
    """Raised when an endpoint selector matches other than exactly one endpoint."""

    def __init__(self, count: int, candidates: Iterable[int] = ()):
        self.count = count
        self.candidates = sorted(candidates)
        message = f"Endpoint selector matched {count} endpoints, expected exactly 1"
        context = None
        if self.candidates:
            context = f"Candidates: {', '.join(str(c) for c in self.candidates)}"
        super().__init__(message, context)


class UnknownSessionError(PctlError):
    """Raised when a named session is not present in the session store."""

    def __init__(self, name: str):
        self.name = name
        message = f"Session '{name}' not found"
        context = f"Run: pctl login {name} --address <url>"
        super().__init__(message, context)


class UnsavableCredentialError(PctlError):
    """Raised when a session without a token credential is saved."""

    pass


class PersistError(PctlError):
    """Raised when the session store cannot be read or written."""

    pass


class LocalFileError(PctlError):
    """Raised when a compose, config or secret file cannot be read."""

    pass


class HandleConsumedError(PctlError):
    """Raised when a session, endpoint or plan is used after being consumed."""

    pass
