"""
Jester error taxonomy.

Transport failures are fatal to one fix invocation. Malformed stream
records never surface here: the stream decoder logs and drops them.
"""

from typing import Optional


class JesterError(Exception):
    """Base class for all Jester errors."""

    pass


class TransportError(JesterError):
    """
    Raised when the Ollama server cannot be reached, answers with a
    non-success status, or returns no response body.
    """

    def __init__(
        self,
        message: str,
        endpoint: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.endpoint = endpoint
        self.status_code = status_code


class NotConnectedError(JesterError):
    """Raised when a fix is requested before a server and model are selected."""

    pass


class SessionBusyError(JesterError):
    """Raised when a fix is requested while another one is still streaming."""

    pass


class NoCodeBlockError(JesterError):
    """Raised by interactive apply when the result holds no fenced code block."""

    pass
