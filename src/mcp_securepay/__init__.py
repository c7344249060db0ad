"""SecurePay XML API client and MCP server."""

__version__ = "0.1.0"

# Server entry points
from mcp_securepay.server import create_server, main

# Configuration
from mcp_securepay.config import ClientConfig, Environment, load_config

# Errors
from mcp_securepay.errors import (
    SecurePayError,
    TransportError,
    ParseError,
    ProtocolError,
)

# Envelope model
from mcp_securepay.messages import (
    SecurePayRequest,
    SecurePayResponse,
    MessageInfo,
    MerchantInfo,
    Status,
    Exchange,
    EchoRequest,
    EchoResponse,
)

# Codec and transport
from mcp_securepay.codec import encode, decode
from mcp_securepay.transport import Transport, HttpTransport

# Service clients
from mcp_securepay.client import WebServiceClient, PaymentClient, PeriodicClient

__all__ = [
    # Version
    "__version__",
    # Server
    "create_server",
    "main",
    # Config
    "ClientConfig",
    "Environment",
    "load_config",
    # Errors
    "SecurePayError",
    "TransportError",
    "ParseError",
    "ProtocolError",
    # Envelope
    "SecurePayRequest",
    "SecurePayResponse",
    "MessageInfo",
    "MerchantInfo",
    "Status",
    "Exchange",
    "EchoRequest",
    "EchoResponse",
    # Codec and transport
    "encode",
    "decode",
    "Transport",
    "HttpTransport",
    # Clients
    "WebServiceClient",
    "PaymentClient",
    "PeriodicClient",
]
