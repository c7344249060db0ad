"""SecurePay periodic and triggered payment service client."""

from typing import Optional

from mcp_securepay.client.base import WebServiceClient
from mcp_securepay.config import ClientConfig
from mcp_securepay.transport import Transport


PERIODIC_PATH = "/xmlapi/periodic"
PERIODIC_API_VERSION = "spxml-4.2"


class PeriodicClient(WebServiceClient):
    """Client for the periodic endpoint (stored payors, scheduled payments)."""

    def __init__(self, config: ClientConfig, transport: Optional[Transport] = None):
        super().__init__(config, PERIODIC_API_VERSION, transport)

    def service_url(self) -> str:
        return self.config.service_url(PERIODIC_PATH)
