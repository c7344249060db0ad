"""XML encoding and decoding of SecurePay messages.

Messages are dataclasses whose fields declare their element names with
messages.element() and messages.attribute(). The document shape follows
from the field declarations alone:
- every field is always written, None as an empty element marked
  xsi:nil="true" (None attributes are left out)
- nested dataclasses become child elements
- list fields become repeated elements
- inline fields write their value's fields into the parent element
- TypeVar fields take the type bound by the expected generic, e.g.
  SecurePayResponse[EchoResponse]
"""

import dataclasses
import types
import typing
import xml.etree.ElementTree as ET
from typing import Any, Optional, TypeVar, Union

from mcp_securepay.errors import ParseError
from mcp_securepay.messages import ROOT_ELEMENT


XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"
XSI_NIL = f"{{{XSI_NAMESPACE}}}nil"

ET.register_namespace("xsi", XSI_NAMESPACE)


def encode(message: Any) -> bytes:
    """Encode a message into a SecurePayMessage XML document.

    Args:
        message: Dataclass instance with xml field declarations

    Returns:
        UTF-8 encoded document, with XML declaration
    """
    root = ET.Element(ROOT_ELEMENT)
    _encode_fields(root, message, {})
    return ET.tostring(root, encoding="utf-8", xml_declaration=True)


def decode(data: bytes, expected: Any) -> Any:
    """Decode a SecurePayMessage XML document.

    Args:
        data: Raw document bytes
        expected: Dataclass type to build, or a parametrised generic
            dataclass such as SecurePayResponse[EchoResponse]

    Returns:
        Instance of the expected type

    Raises:
        ParseError: If the document is malformed or does not match
            the expected type
    """
    try:
        root = ET.fromstring(data)
    except ET.ParseError as e:
        raise ParseError(f"Malformed XML document: {e}") from e

    if root.tag != ROOT_ELEMENT:
        raise ParseError(
            f"Unexpected root element: expected <{ROOT_ELEMENT}>, got <{root.tag}>"
        )

    cls, bindings = _resolve_generic(expected, {})
    return _decode_fields(root, cls, bindings, ROOT_ELEMENT)


def _resolve_generic(tp: Any, bindings: dict) -> tuple[Any, dict]:
    """Split a generic alias into its class and TypeVar bindings."""
    origin = typing.get_origin(tp)
    if origin is None or not dataclasses.is_dataclass(origin):
        return tp, {}

    args = tuple(bindings.get(a, a) for a in typing.get_args(tp))
    params = getattr(origin, "__parameters__", ())
    return origin, dict(zip(params, args))


def _field_types(cls: Any, bindings: dict) -> dict:
    hints = typing.get_type_hints(cls)
    return {
        name: bindings.get(tp, tp) if isinstance(tp, TypeVar) else tp
        for name, tp in hints.items()
    }


def _unwrap_optional(tp: Any) -> tuple[Any, bool]:
    """Return (inner type, is optional) for Optional[X]."""
    origin = typing.get_origin(tp)
    if origin is Union or origin is getattr(types, "UnionType", None):
        args = [a for a in typing.get_args(tp) if a is not type(None)]
        if len(args) == 1:
            return args[0], True
    return tp, False


def _list_item_type(tp: Any) -> Optional[Any]:
    if typing.get_origin(tp) is list:
        (item_type,) = typing.get_args(tp)
        return item_type
    return None


def _to_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _from_text(text: str, tp: Any, path: str) -> Any:
    if tp is str or tp is Any:
        return text
    if tp is bool:
        lowered = text.strip().lower()
        if lowered in ("true", "1", "yes"):
            return True
        if lowered in ("false", "0", "no"):
            return False
        raise ParseError(f"Invalid boolean at {path}: {text!r}")
    if tp is int:
        try:
            return int(text)
        except ValueError:
            raise ParseError(f"Invalid integer at {path}: {text!r}") from None
    raise ParseError(f"Unsupported field type at {path}: {tp!r}")


# =========================================================================
# Encoding
# =========================================================================

def _encode_fields(parent: ET.Element, obj: Any, bindings: dict) -> None:
    types_by_name = _field_types(type(obj), bindings)

    for f in dataclasses.fields(obj):
        name = f.metadata.get("xml", f.name)
        value = getattr(obj, f.name)
        tp, _ = _unwrap_optional(types_by_name[f.name])

        if f.metadata.get("attribute"):
            if value is not None:
                parent.set(name, _to_text(value))
            continue

        if f.metadata.get("inline"):
            if value is not None:
                _encode_fields(parent, value, {})
            continue

        item_type = _list_item_type(tp)
        if item_type is not None:
            for item in value or ():
                _encode_value(ET.SubElement(parent, name), item)
            continue

        _encode_value(ET.SubElement(parent, name), value)


def _encode_value(el: ET.Element, value: Any) -> None:
    if value is None:
        el.set(XSI_NIL, "true")
    elif dataclasses.is_dataclass(value):
        _encode_fields(el, value, {})
    else:
        el.text = _to_text(value)


# =========================================================================
# Decoding
# =========================================================================

def _is_nil(el: ET.Element) -> bool:
    return el.get(XSI_NIL, "").strip().lower() in ("true", "1")


def _has_default(f: dataclasses.Field) -> bool:
    return (
        f.default is not dataclasses.MISSING
        or f.default_factory is not dataclasses.MISSING
    )


def _decode_fields(el: ET.Element, cls: Any, bindings: dict, path: str) -> Any:
    if not dataclasses.is_dataclass(cls):
        raise ParseError(f"Cannot decode {path} into non-dataclass type {cls!r}")

    types_by_name = _field_types(cls, bindings)
    kwargs = {}

    for f in dataclasses.fields(cls):
        if not f.init:
            continue

        name = f.metadata.get("xml", f.name)
        tp, optional = _unwrap_optional(types_by_name[f.name])
        field_path = f"{path}/{name}"

        if f.metadata.get("attribute"):
            raw = el.get(name)
            if raw is None:
                if optional:
                    kwargs[f.name] = None
                elif not _has_default(f):
                    raise ParseError(f"Missing attribute {path}@{name}")
                continue
            kwargs[f.name] = _from_text(raw, tp, f"{path}@{name}")
            continue

        if f.metadata.get("inline"):
            inner_cls, inner_bindings = _resolve_generic(tp, bindings)
            kwargs[f.name] = _decode_fields(el, inner_cls, inner_bindings, path)
            continue

        item_type = _list_item_type(tp)
        if item_type is not None:
            item_cls, item_bindings = _resolve_generic(item_type, bindings)
            kwargs[f.name] = [
                _decode_value(child, item_cls, item_bindings, False, field_path)
                for child in el.findall(name)
            ]
            continue

        child = el.find(name)
        if child is None:
            if optional:
                kwargs[f.name] = None
            elif not _has_default(f):
                raise ParseError(f"Missing element <{field_path}>")
            continue

        value_cls, value_bindings = _resolve_generic(tp, bindings)
        kwargs[f.name] = _decode_value(
            child, value_cls, value_bindings, optional, field_path
        )

    return cls(**kwargs)


def _decode_value(
    el: ET.Element,
    tp: Any,
    bindings: dict,
    optional: bool,
    path: str,
) -> Any:
    if _is_nil(el):
        if optional:
            return None
        raise ParseError(f"Nil value for required element <{path}>")
    if dataclasses.is_dataclass(tp):
        return _decode_fields(el, tp, bindings, path)
    return _from_text(el.text or "", tp, path)
