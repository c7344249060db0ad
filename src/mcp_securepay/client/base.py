"""Base class for SecurePay web service clients."""

import logging
import re
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Optional, TypeVar

from mcp_securepay import codec
from mcp_securepay.config import ClientConfig
from mcp_securepay.errors import ParseError, ProtocolError, TransportError
from mcp_securepay.messages import (
    EchoRequest,
    EchoResponse,
    Exchange,
    SecurePayRequest,
    SecurePayResponse,
    format_timestamp,
    new_message_id,
)
from mcp_securepay.transport import HttpTransport, Transport


logger = logging.getLogger(__name__)

R = TypeVar("R")

# Optional sign and ASCII digits only
STATUS_CODE_PATTERN = re.compile(r"\s*[+-]?[0-9]+\s*")


class WebServiceClient(ABC):
    """Common request/response handling for SecurePay services.

    Subclasses provide the service URL and API version. Each call to
    execute() stamps the request with fresh metadata and the merchant
    credentials, posts it, and checks the status of the reply.

    The raw bytes of the most recent exchange are kept for diagnostics
    (last_exchange, last_request, last_response). They are last-write-wins
    and not synchronized: with several calls in flight on one client they
    may belong to any of them. Errors raised by execute() always carry the
    bytes of their own call in their request and response attributes.
    """

    def __init__(
        self,
        config: ClientConfig,
        api_version: str,
        transport: Optional[Transport] = None,
    ):
        self.config = config
        self.api_version = api_version
        self.transport = transport or HttpTransport(timeout=config.timeout)

        self._last_request: Optional[bytes] = None
        self._last_response: Optional[bytes] = None

    @abstractmethod
    def service_url(self) -> str:
        """Absolute URL of this client's service endpoint."""
        pass  # pragma: no cover

    @property
    def last_exchange(self) -> Optional[Exchange]:
        """Raw bytes of the most recent exchange, if any."""
        if self._last_request is None:
            return None
        return Exchange(request=self._last_request, response=self._last_response)

    @property
    def last_request(self) -> Optional[str]:
        """Most recently sent request document as text."""
        if self._last_request is None:
            return None
        return self._last_request.decode("utf-8")

    @property
    def last_response(self) -> Optional[str]:
        """Most recently received response document as text."""
        if self._last_response is None:
            return None
        return self._last_response.decode("utf-8", errors="replace")

    async def echo(self) -> SecurePayResponse[EchoResponse]:
        """Check the service is reachable and accepts our credentials."""
        return await self.execute(SecurePayRequest(payload=EchoRequest()), EchoResponse)

    async def execute(
        self,
        request: SecurePayRequest[Any],
        response_payload: type[R],
    ) -> SecurePayResponse[R]:
        """Send a request and return the validated response.

        Args:
            request: Request carrying the operation payload. Its message and
                merchant info are overwritten.
            response_payload: Payload dataclass expected in the reply

        Returns:
            Decoded response with a success status

        Raises:
            TransportError: If the request could not be delivered
            ParseError: If the reply is not a document of the expected shape
            ProtocolError: If the reply has no status or a failure status
        """
        url = self.service_url()
        self._stamp(request)

        body = codec.encode(request)
        self._last_request = body
        self._last_response = None

        logger.info(
            "Sending %s request %s to %s",
            type(request.payload).__name__,
            request.message_info.message_id,
            url,
        )

        try:
            raw = await self.transport.send(url, body)
        except TransportError as e:
            if e.request is None:
                e.request = body
            raise
        self._last_response = raw

        try:
            response = codec.decode(raw, SecurePayResponse[response_payload])
        except ParseError as e:
            raise ParseError(str(e), request=body, response=raw) from e

        self._check_status(response, body, raw)
        return response

    def _stamp(self, request: SecurePayRequest[Any]) -> None:
        """Fill in protocol metadata and merchant credentials."""
        info = request.message_info
        info.api_version = self.api_version
        info.message_id = new_message_id()
        info.message_timestamp = format_timestamp(datetime.now().astimezone())

        merchant = request.merchant_info
        merchant.merchant_id = self.config.merchant_id
        merchant.password = self.config.password

    def _check_status(
        self,
        response: SecurePayResponse[Any],
        request: bytes,
        raw: bytes,
    ) -> None:
        status = response.status
        if status is None:
            logger.warning("Response from %s has no status", self.service_url())
            raise ProtocolError("Missing status in response", request=request, response=raw)

        if _status_value(status.status_code) != 0:
            logger.warning(
                "SecurePay returned status %s: %s",
                status.status_code,
                status.description,
            )
            raise ProtocolError(
                "SecurePay request failed",
                status.status_code,
                status.description,
                request=request,
                response=raw,
            )


def _status_value(code: str) -> Optional[int]:
    """Integer value of a status code, or None if it is not a plain integer."""
    if not STATUS_CODE_PATTERN.fullmatch(code):
        return None
    return int(code)
