"""SecurePay message envelope.

Every request is a SecurePayMessage document:
- MessageInfo: messageID, messageTimestamp, apiVersion
- MerchantInfo: merchantID, password
- Payload: operation-specific elements, starting with RequestType

Responses mirror requests, with a Status block (statusCode,
statusDescription) in place of MerchantInfo.

Field element names are carried in dataclass field metadata, see element()
and attribute(). The codec module reads them to build and parse documents.
"""

import dataclasses
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Generic, Optional, TypeVar


ROOT_ELEMENT = "SecurePayMessage"

# SecurePay rejects message ids longer than 30 characters
MESSAGE_ID_LENGTH = 30


def element(name: str, *, inline: bool = False, **kwargs: Any) -> Any:
    """Declare a dataclass field stored as a child element.

    Args:
        name: Element name on the wire
        inline: Write the value's own fields straight into the parent
            instead of wrapping them in an element of their own
        **kwargs: Passed through to dataclasses.field
    """
    return dataclasses.field(metadata={"xml": name, "inline": inline}, **kwargs)


def attribute(name: str, **kwargs: Any) -> Any:
    """Declare a dataclass field stored as an attribute of its element."""
    return dataclasses.field(metadata={"xml": name, "attribute": True}, **kwargs)


P = TypeVar("P")


@dataclass
class MessageInfo:
    """Protocol metadata, stamped by the client before each send."""

    message_id: str = element("messageID", default="")
    message_timestamp: str = element("messageTimestamp", default="")
    api_version: str = element("apiVersion", default="")


@dataclass
class MerchantInfo:
    """Merchant credentials, copied from the client config at send time."""

    merchant_id: str = element("merchantID", default="")
    password: str = element("password", default="")


@dataclass(frozen=True)
class Status:
    """Outcome reported by the server. Code 0 means success."""

    status_code: str = element("statusCode")
    description: str = element("statusDescription", default="")


@dataclass
class SecurePayRequest(Generic[P]):
    """Outgoing message wrapping an operation payload."""

    message_info: MessageInfo = element("MessageInfo", default_factory=MessageInfo)
    merchant_info: MerchantInfo = element("MerchantInfo", default_factory=MerchantInfo)
    payload: P = element("Payload", inline=True, kw_only=True)


@dataclass(frozen=True)
class SecurePayResponse(Generic[P]):
    """Incoming message: status block plus operation payload."""

    message_info: Optional[MessageInfo] = element("MessageInfo", default=None)
    payload: P = element("Payload", inline=True, kw_only=True)
    status: Optional[Status] = element("Status", default=None)


@dataclass(frozen=True)
class Exchange:
    """Raw bytes of one request/response exchange."""

    request: bytes
    response: Optional[bytes] = None


@dataclass
class EchoRequest:
    """Echo payload: checks the service is reachable and credentials work."""

    request_type: str = element("RequestType", default="Echo")


@dataclass(frozen=True)
class EchoResponse:
    """Echo reply payload."""

    request_type: str = element("RequestType", default="Echo")


def new_message_id() -> str:
    """Generate a fresh message identifier."""
    return uuid.uuid4().hex[:MESSAGE_ID_LENGTH]


def format_timestamp(moment: datetime) -> str:
    """Format a datetime the way SecurePay expects message timestamps.

    The format is YYYYDDMMHHNNSSKKK000sOOO: year, day, month, hour, minute,
    second, milliseconds, three zeros, then the sign and the offset from UTC
    in minutes. Note that the day comes before the month.

    Args:
        moment: Time to format. Naive datetimes are taken as local time.

    Returns:
        Timestamp string, e.g. "20241103091522123000+660"
    """
    if moment.utcoffset() is None:
        moment = moment.astimezone()

    offset_minutes = int(moment.utcoffset().total_seconds() // 60)
    sign = "+" if offset_minutes >= 0 else "-"
    millis = moment.microsecond // 1000

    return (
        f"{moment:%Y%d%m%H%M%S}{millis:03d}000"
        f"{sign}{abs(offset_minutes):03d}"
    )
