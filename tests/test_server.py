"""Tests for MCP server."""

import xml.etree.ElementTree as ET

import pytest
from unittest.mock import AsyncMock, patch

from mcp_securepay.client import PaymentClient
from mcp_securepay.config import ClientConfig
from mcp_securepay.errors import ProtocolError, TransportError
from mcp_securepay.messages import EchoResponse, MessageInfo, SecurePayResponse, Status
from mcp_securepay.server import create_server
from mcp_securepay.transport import Transport


class TestServerCreation:
    """Test server initialization."""

    def test_create_server_returns_server(self):
        """create_server returns configured server."""
        server = create_server()
        assert server is not None

    @pytest.mark.asyncio
    async def test_server_has_expected_tools(self):
        """Server registers all expected tools."""
        server = create_server()

        tools = await server.list_tools()
        tool_names = {tool.name for tool in tools}

        assert tool_names == {"echo", "get_last_exchange"}


class TestEchoTool:
    """Test the echo tool."""

    @pytest.fixture
    def server(self):
        """Create a server with test credentials."""
        return create_server(ClientConfig(merchant_id="ABC0001", password="abc123"))

    @pytest.mark.asyncio
    async def test_echo_success(self, server):
        """Successful echo reports the status."""
        echo_fn = server._tool_manager._tools["echo"].fn
        response = SecurePayResponse(
            message_info=MessageInfo(message_id="reply-id"),
            payload=EchoResponse(),
            status=Status("000", "Normal"),
        )

        with patch.object(PaymentClient, "echo", AsyncMock(return_value=response)):
            result = await echo_fn("payment")

        assert result == {
            "service": "payment",
            "status_code": "000",
            "description": "Normal",
            "message_id": "reply-id",
        }

    @pytest.mark.asyncio
    async def test_echo_failure_status(self, server):
        """Failure statuses are returned as error dicts."""
        echo_fn = server._tool_manager._tools["echo"].fn
        error = ProtocolError("SecurePay request failed", "504", "Invalid merchant ID")

        with patch.object(PaymentClient, "echo", AsyncMock(side_effect=error)):
            result = await echo_fn("payment")

        assert result["error_type"] == "ProtocolError"
        assert result["status_code"] == "504"
        assert result["description"] == "Invalid merchant ID"

    @pytest.mark.asyncio
    async def test_echo_transport_error(self, server):
        """Connection failures are returned as error dicts."""
        echo_fn = server._tool_manager._tools["echo"].fn

        with patch.object(PaymentClient, "echo", AsyncMock(side_effect=TransportError("refused"))):
            result = await echo_fn()

        assert result["error_type"] == "TransportError"
        assert "refused" in result["error"]

    @pytest.mark.asyncio
    async def test_echo_unknown_service(self, server):
        """Unknown services are rejected."""
        echo_fn = server._tool_manager._tools["echo"].fn

        result = await echo_fn("refunds")

        assert "error" in result
        assert "Unknown service" in result["error"]


class TestLastExchangeTool:
    """Test the get_last_exchange tool."""

    @pytest.fixture
    def server(self):
        """Create a server with test credentials."""
        return create_server(ClientConfig(merchant_id="ABC0001", password="abc123"))

    def test_nothing_sent(self, server):
        """Before any call both documents are None."""
        exchange_fn = server._tool_manager._tools["get_last_exchange"].fn

        result = exchange_fn("periodic")

        assert result["url"].endswith("/xmlapi/periodic")
        assert result["request"] is None
        assert result["response"] is None

    def test_password_is_masked(self, server):
        """The merchant password never leaves the server."""
        exchange_fn = server._tool_manager._tools["get_last_exchange"].fn
        exchange_fn("payment")
        client = server._clients["payment"]
        client._last_request = b"<MerchantInfo><merchantID>ABC0001</merchantID><password>abc123</password></MerchantInfo>"
        client._last_response = b"<SecurePayMessage />"

        result = exchange_fn("payment")

        assert "abc123" not in result["request"]
        assert "<password>****</password>" in result["request"]
        assert result["response"] == "<SecurePayMessage />"

    @pytest.mark.asyncio
    async def test_only_password_element_is_masked(self):
        """A password matching other values leaves those values alone."""
        server = create_server(ClientConfig(merchant_id="ABC0001", password="Echo"))
        exchange_fn = server._tool_manager._tools["get_last_exchange"].fn
        exchange_fn("payment")
        client = server._clients["payment"]
        client.transport = AsyncMock(spec=Transport)
        client.transport.send.return_value = (
            b"<SecurePayMessage><RequestType>Echo</RequestType>"
            b"<Status><statusCode>504</statusCode></Status></SecurePayMessage>"
        )

        with pytest.raises(ProtocolError):
            await client.echo()

        result = exchange_fn("payment")

        root = ET.fromstring(result["request"])
        assert root.findtext("MerchantInfo/password") == "****"
        assert root.findtext("RequestType") == "Echo"
        assert root.findtext("MerchantInfo/merchantID") == "ABC0001"

    def test_unknown_service(self, server):
        """Unknown services are rejected."""
        exchange_fn = server._tool_manager._tools["get_last_exchange"].fn

        assert "error" in exchange_fn("refunds")
