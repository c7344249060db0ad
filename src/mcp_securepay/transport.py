"""HTTP transport for SecurePay XML documents."""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import httpx

from mcp_securepay.config import DEFAULT_TIMEOUT
from mcp_securepay.errors import TransportError


logger = logging.getLogger(__name__)

# SecurePay documentation examples post as text/xml
CONTENT_TYPE = "text/xml"
ACCEPT = "application/xml, text/xml"


class Transport(ABC):
    """Abstract single-exchange document transport."""

    @abstractmethod
    async def send(self, url: str, body: bytes) -> bytes:
        """Post body to url, return the raw response body."""
        pass  # pragma: no cover


class HttpTransport(Transport):
    """Transport over HTTP(S) POST via httpx.

    A client is opened and closed for every call; nothing is pooled or
    retried. The response body is returned whatever the HTTP status, the
    caller decides what the document means.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self._http_transport = http_transport

        self._headers = {
            "Content-Type": CONTENT_TYPE,
            "Accept": ACCEPT,
        }

    async def send(self, url: str, body: bytes) -> bytes:
        """Post an XML document and return the response body.

        Raises:
            TransportError: If the connection fails, times out, or the
                response body cannot be read
        """
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._http_transport,
            ) as client:
                response = await client.post(url, content=body, headers=self._headers)
        except httpx.RequestError as e:
            raise TransportError(f"POST {url} failed: {e!r}", request=body) from e

        logger.debug(
            "POST %s -> HTTP %d (%d bytes sent, %d received)",
            url,
            response.status_code,
            len(body),
            len(response.content),
        )
        return response.content
