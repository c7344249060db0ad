"""Exceptions raised by SecurePay clients.

Every error carries the raw bytes of the exchange it came from, so a failed
call can be diagnosed without re-issuing it:

- TransportError: the request never got a response (connection, timeout)
- ParseError: the response is not a document of the expected shape
- ProtocolError: the response is well formed but reports a failure status
"""

from typing import Optional


class SecurePayError(Exception):
    """Base class for SecurePay client errors."""

    def __init__(
        self,
        message: str,
        *,
        request: Optional[bytes] = None,
        response: Optional[bytes] = None,
    ):
        super().__init__(message)
        self.request = request
        self.response = response

    @property
    def request_text(self) -> Optional[str]:
        """Raw request document as text, if one was sent."""
        if self.request is None:
            return None
        return self.request.decode("utf-8", errors="replace")

    @property
    def response_text(self) -> Optional[str]:
        """Raw response document as text, if one was received."""
        if self.response is None:
            return None
        return self.response.decode("utf-8", errors="replace")


class TransportError(SecurePayError):
    """Connection could not be made or no response arrived in time."""


class ParseError(SecurePayError):
    """Response bytes do not match the expected document shape."""


class ProtocolError(SecurePayError):
    """Response reports a failure status, or no status at all."""

    def __init__(
        self,
        message: str,
        status_code: Optional[str] = None,
        description: Optional[str] = None,
        *,
        request: Optional[bytes] = None,
        response: Optional[bytes] = None,
    ):
        if status_code is not None:
            message = f"{message} (status {status_code}: {description or ''})"
        super().__init__(message, request=request, response=response)
        self.status_code = status_code
        self.description = description
