"""SecurePay payment service client."""

from typing import Optional

from mcp_securepay.client.base import WebServiceClient
from mcp_securepay.config import ClientConfig
from mcp_securepay.transport import Transport


PAYMENT_PATH = "/xmlapi/payment"
PAYMENT_API_VERSION = "xml-4.2"


class PaymentClient(WebServiceClient):
    """Client for the payment endpoint (payments, refunds, reversals)."""

    def __init__(self, config: ClientConfig, transport: Optional[Transport] = None):
        super().__init__(config, PAYMENT_API_VERSION, transport)

    def service_url(self) -> str:
        return self.config.service_url(PAYMENT_PATH)
