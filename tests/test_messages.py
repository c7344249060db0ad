"""Tests for the message envelope model."""

import dataclasses
from datetime import datetime, timedelta, timezone

import pytest
from mcp_securepay.messages import (
    MESSAGE_ID_LENGTH,
    EchoRequest,
    MerchantInfo,
    MessageInfo,
    SecurePayRequest,
    SecurePayResponse,
    Status,
    format_timestamp,
    new_message_id,
)


class TestRequestEnvelope:
    """Test request construction."""

    def test_metadata_starts_empty(self):
        """Caller only supplies the payload."""
        request = SecurePayRequest(payload=EchoRequest())

        assert request.message_info == MessageInfo()
        assert request.message_info.message_id == ""
        assert request.merchant_info == MerchantInfo()
        assert request.payload.request_type == "Echo"

    def test_requests_do_not_share_metadata(self):
        """Each request gets its own metadata blocks."""
        first = SecurePayRequest(payload=EchoRequest())
        second = SecurePayRequest(payload=EchoRequest())

        first.message_info.message_id = "abc"

        assert second.message_info.message_id == ""

    def test_response_is_immutable(self):
        """Decoded responses cannot be modified."""
        response = SecurePayResponse(payload=None, status=Status("000", "Normal"))
        with pytest.raises(dataclasses.FrozenInstanceError):
            response.status = None


class TestMessageId:
    """Test message id generation."""

    def test_length(self):
        """Message ids fit SecurePay's 30 character limit."""
        assert len(new_message_id()) == MESSAGE_ID_LENGTH

    def test_unique(self):
        """Message ids are not reused."""
        ids = {new_message_id() for _ in range(1000)}
        assert len(ids) == 1000


class TestTimestamp:
    """Test SecurePay timestamp formatting."""

    def test_positive_offset(self):
        """Day comes before month, offset is in minutes."""
        moment = datetime(2024, 11, 3, 9, 15, 22, 123456, tzinfo=timezone(timedelta(hours=11)))
        assert format_timestamp(moment) == "20240311091522123000+660"

    def test_negative_offset(self):
        """Negative offsets keep three digits after the sign."""
        moment = datetime(2024, 1, 31, 23, 59, 59, 0, tzinfo=timezone(timedelta(hours=-1, minutes=-30)))
        assert format_timestamp(moment) == "20243101235959000000-090"

    def test_utc(self):
        """UTC is written as +000."""
        moment = datetime(2024, 6, 5, 0, 0, 0, 7000, tzinfo=timezone.utc)
        assert format_timestamp(moment) == "20240506000000007000+000"

    def test_naive_datetime_uses_local_time(self):
        """Naive datetimes get the local offset."""
        stamp = format_timestamp(datetime(2024, 6, 5, 12, 0, 0))

        assert len(stamp) == 24
        assert stamp.startswith("20240506120000000000")
        assert stamp[20] in "+-"
