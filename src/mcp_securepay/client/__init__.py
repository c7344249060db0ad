"""SecurePay web service clients."""

from mcp_securepay.client.base import WebServiceClient
from mcp_securepay.client.payment import PaymentClient
from mcp_securepay.client.periodic import PeriodicClient

__all__ = [
    "WebServiceClient",
    "PaymentClient",
    "PeriodicClient",
]
