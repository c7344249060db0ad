"""MCP server for the SecurePay XML API.

This server exposes tools to check connectivity with the SecurePay
payment and periodic services, and to inspect the raw documents of the
last exchange with each of them.
"""

import logging
import re
from typing import Optional

from mcp.server.fastmcp import FastMCP

from mcp_securepay.client import PaymentClient, PeriodicClient, WebServiceClient
from mcp_securepay.config import ClientConfig, load_config
from mcp_securepay.errors import ProtocolError, SecurePayError


logger = logging.getLogger(__name__)

SERVICES = {
    "payment": PaymentClient,
    "periodic": PeriodicClient,
}

# Text of the password element inside MerchantInfo
PASSWORD_PATTERN = re.compile(r"(<MerchantInfo>(?:(?!</MerchantInfo>).)*?<password>)[^<]*(</password>)", re.DOTALL)


def create_server(config: Optional[ClientConfig] = None) -> FastMCP:
    """Create and configure the MCP server with all tools.

    Args:
        config: Optional configuration. If not provided, uses defaults.

    Returns:
        Configured FastMCP server instance.
    """
    if config is None:
        config = ClientConfig()

    mcp = FastMCP("mcp-securepay")

    # Store config on server for access by tools
    mcp._config = config
    mcp._clients: dict[str, WebServiceClient] = {}

    def get_client(service: str) -> WebServiceClient:
        """Get or create the client for a service."""
        if service not in SERVICES:
            raise ValueError(
                f"Unknown service: {service}. Valid services: {', '.join(SERVICES)}"
            )
        if service not in mcp._clients:
            mcp._clients[service] = SERVICES[service](config)
        return mcp._clients[service]

    @mcp.tool()
    async def echo(service: str = "payment") -> dict:
        """Send an echo request to a SecurePay service.

        Confirms the service is reachable and accepts the configured
        merchant credentials.

        Args:
            service: Service to check ('payment' or 'periodic'). Default: 'payment'

        Returns:
            Dictionary with the returned status, or 'error' on failure.
        """
        try:
            client = get_client(service)
        except ValueError as e:
            return {"error": str(e)}

        try:
            response = await client.echo()
        except ProtocolError as e:
            return {
                "service": service,
                "error": str(e),
                "error_type": type(e).__name__,
                "status_code": e.status_code,
                "description": e.description,
            }
        except SecurePayError as e:
            logger.exception("Echo to %s service failed", service)
            return {
                "service": service,
                "error": str(e),
                "error_type": type(e).__name__,
            }

        return {
            "service": service,
            "status_code": response.status.status_code,
            "description": response.status.description,
            "message_id": response.message_info.message_id if response.message_info else None,
        }

    @mcp.tool()
    def get_last_exchange(service: str = "payment") -> dict:
        """Show the raw XML of the last exchange with a service.

        Args:
            service: Service to inspect ('payment' or 'periodic'). Default: 'payment'

        Returns:
            Dictionary with 'request' and 'response' documents (None if not sent).
        """
        try:
            client = get_client(service)
        except ValueError as e:
            return {"error": str(e)}

        return {
            "service": service,
            "url": client.service_url(),
            "request": _mask(client.last_request),
            "response": client.last_response,
        }

    return mcp


def _mask(text: Optional[str]) -> Optional[str]:
    """Hide the merchant password in a raw request document."""
    if text is None:
        return text
    return PASSWORD_PATTERN.sub(r"\g<1>****\g<2>", text)


def main():
    """Entry point for the MCP server."""
    from pathlib import Path

    # Try to load config from standard locations
    config_paths = [
        Path("mcp-securepay.toml"),
        Path.home() / ".config" / "mcp-securepay" / "config.toml",
    ]

    config = None
    for path in config_paths:
        if path.exists():
            config = load_config(path)
            break

    if config is None:
        config = ClientConfig()

    server = create_server(config)
    server.run()


if __name__ == "__main__":
    main()
