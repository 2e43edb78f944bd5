"""Generic decoding and encoding of MQTT v5 property lists.

A property list is held by an object whose attributes are named after the
properties it may carry (``topic_alias``, ``reason_string`` and so on) and
which always has a ``user_properties`` list. Which properties a packet may
carry is given by the caller as an ordered collection of ``PropertyId``;
user properties are always allowed and always written last.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, BinaryIO, Iterable, Optional

from .types import (
    DuplicatedProperty,
    InvalidByteProperty,
    InvalidProperty,
    InvalidPropertyLength,
    InvalidResponseTopic,
    InvalidTopicName,
    InvalidWillProperty,
    PacketType,
    PropertyId,
    QoS,
    TopicName,
    UserProperty,
    VarByteInt,
    decode_var_int,
    read_bytes,
    read_string,
    read_u8,
    read_u16,
    read_u32,
    var_int_len,
    write_bytes,
    write_u8,
    write_u16,
    write_u32,
    write_var_int,
)


class _Kind(enum.Enum):
    BOOL = enum.auto()
    U16 = enum.auto()
    U32 = enum.auto()
    STRING = enum.auto()
    TOPIC_NAME = enum.auto()
    BINARY = enum.auto()
    VAR_INT = enum.auto()
    QOS = enum.auto()


@dataclass(frozen=True)
class _Spec:
    attribute: str
    kind: _Kind


_SPECS: dict[PropertyId, _Spec] = {
    PropertyId.PAYLOAD_FORMAT_INDICATOR: _Spec("payload_is_utf8", _Kind.BOOL),
    PropertyId.MESSAGE_EXPIRY_INTERVAL: _Spec("message_expiry_interval", _Kind.U32),
    PropertyId.CONTENT_TYPE: _Spec("content_type", _Kind.STRING),
    PropertyId.RESPONSE_TOPIC: _Spec("response_topic", _Kind.TOPIC_NAME),
    PropertyId.CORRELATION_DATA: _Spec("correlation_data", _Kind.BINARY),
    PropertyId.SUBSCRIPTION_IDENTIFIER: _Spec("subscription_id", _Kind.VAR_INT),
    PropertyId.SESSION_EXPIRY_INTERVAL: _Spec("session_expiry_interval", _Kind.U32),
    PropertyId.ASSIGNED_CLIENT_IDENTIFIER: _Spec("assigned_client_id", _Kind.STRING),
    PropertyId.SERVER_KEEP_ALIVE: _Spec("server_keep_alive", _Kind.U16),
    PropertyId.AUTHENTICATION_METHOD: _Spec("auth_method", _Kind.STRING),
    PropertyId.AUTHENTICATION_DATA: _Spec("auth_data", _Kind.BINARY),
    PropertyId.REQUEST_PROBLEM_INFORMATION: _Spec("request_problem_info", _Kind.BOOL),
    PropertyId.WILL_DELAY_INTERVAL: _Spec("delay_interval", _Kind.U32),
    PropertyId.REQUEST_RESPONSE_INFORMATION: _Spec("request_response_info", _Kind.BOOL),
    PropertyId.RESPONSE_INFORMATION: _Spec("response_info", _Kind.STRING),
    PropertyId.SERVER_REFERENCE: _Spec("server_reference", _Kind.STRING),
    PropertyId.REASON_STRING: _Spec("reason_string", _Kind.STRING),
    PropertyId.RECEIVE_MAXIMUM: _Spec("receive_max", _Kind.U16),
    PropertyId.TOPIC_ALIAS_MAXIMUM: _Spec("topic_alias_max", _Kind.U16),
    PropertyId.TOPIC_ALIAS: _Spec("topic_alias", _Kind.U16),
    PropertyId.MAXIMUM_QOS: _Spec("max_qos", _Kind.QOS),
    PropertyId.RETAIN_AVAILABLE: _Spec("retain_available", _Kind.BOOL),
    PropertyId.MAXIMUM_PACKET_SIZE: _Spec("max_packet_size", _Kind.U32),
    PropertyId.WILDCARD_SUBSCRIPTION_AVAILABLE: _Spec(
        "wildcard_subscription_available", _Kind.BOOL
    ),
    PropertyId.SUBSCRIPTION_IDENTIFIER_AVAILABLE: _Spec(
        "subscription_id_available", _Kind.BOOL
    ),
    PropertyId.SHARED_SUBSCRIPTION_AVAILABLE: _Spec(
        "shared_subscription_available", _Kind.BOOL
    ),
}


def _value_len(kind: _Kind, value: Any) -> int:
    if kind in (_Kind.BOOL, _Kind.QOS):
        return 1
    if kind is _Kind.U16:
        return 2
    if kind is _Kind.U32:
        return 4
    if kind is _Kind.VAR_INT:
        return var_int_len(int(value))
    if kind is _Kind.STRING:
        return 2 + len(value.encode("utf-8"))
    if kind is _Kind.TOPIC_NAME:
        return 2 + len(bytes(value))
    return 2 + len(bytes(value))


def _read_value(stream: BinaryIO, property_id: PropertyId, kind: _Kind) -> Any:
    if kind is _Kind.BOOL:
        value = read_u8(stream)
        if value > 1:
            raise InvalidByteProperty(property_id, value)
        return value == 1
    if kind is _Kind.QOS:
        value = read_u8(stream)
        if value > 1:
            raise InvalidByteProperty(property_id, value)
        return QoS(value)
    if kind is _Kind.U16:
        return read_u16(stream)
    if kind is _Kind.U32:
        return read_u32(stream)
    if kind is _Kind.VAR_INT:
        value, _ = decode_var_int(stream)
        return VarByteInt(value)
    if kind is _Kind.STRING:
        return read_string(stream)
    if kind is _Kind.TOPIC_NAME:
        content = read_string(stream)
        try:
            return TopicName(content)
        except InvalidTopicName:
            raise InvalidResponseTopic() from None
    return read_bytes(stream)


def _write_value(out: BinaryIO, kind: _Kind, value: Any) -> None:
    if kind is _Kind.BOOL:
        write_u8(out, 1 if value else 0)
    elif kind is _Kind.QOS:
        write_u8(out, int(value))
    elif kind is _Kind.U16:
        write_u16(out, value)
    elif kind is _Kind.U32:
        write_u32(out, value)
    elif kind is _Kind.VAR_INT:
        write_var_int(out, int(value))
    elif kind is _Kind.TOPIC_NAME:
        write_bytes(out, str(value))
    else:
        write_bytes(out, value)


def _specific(allowed: Iterable[PropertyId]) -> list[PropertyId]:
    return [pid for pid in allowed if pid is not PropertyId.USER_PROPERTY]


def property_len(properties: Any, property_id: PropertyId) -> int:
    """Encoded size of one property, identifier byte included; 0 when unset.

    For ``USER_PROPERTY`` this is the size of all user properties together.
    """
    if property_id is PropertyId.USER_PROPERTY:
        return sum(prop.encode_len() for prop in properties.user_properties)
    spec = _SPECS[property_id]
    value = getattr(properties, spec.attribute)
    if value is None:
        return 0
    return 1 + _value_len(spec.kind, value)


def _body_len(properties: Any, allowed: Iterable[PropertyId]) -> int:
    total = property_len(properties, PropertyId.USER_PROPERTY)
    return total + sum(property_len(properties, pid) for pid in _specific(allowed))


def properties_len(properties: Any, allowed: Iterable[PropertyId]) -> int:
    """Encoded size of the whole property list, length prefix included."""
    body = _body_len(properties, allowed)
    return var_int_len(body) + body


def encode_properties(
    out: BinaryIO, properties: Any, allowed: Iterable[PropertyId]
) -> None:
    """Write the property list: length prefix, allowed properties, user properties."""
    ordered = _specific(allowed)
    write_var_int(out, _body_len(properties, ordered))
    for property_id in ordered:
        spec = _SPECS[property_id]
        value = getattr(properties, spec.attribute)
        if value is not None:
            write_u8(out, int(property_id))
            _write_value(out, spec.kind, value)
    for prop in properties.user_properties:
        write_u8(out, int(PropertyId.USER_PROPERTY))
        write_bytes(out, prop.name)
        write_bytes(out, prop.value)


def decode_properties(
    stream: BinaryIO,
    packet_type: Optional[PacketType],
    properties: Any,
    allowed: Iterable[PropertyId],
) -> Any:
    """Read a property list into ``properties`` and return it.

    ``packet_type`` of ``None`` stands for the will properties of a CONNECT
    packet, where a disallowed property raises ``InvalidWillProperty``.
    """
    permitted = set(_specific(allowed))
    declared, _ = decode_var_int(stream)
    consumed = 0
    while declared > consumed:
        property_id = PropertyId.from_byte(read_u8(stream))
        if property_id is PropertyId.USER_PROPERTY:
            prop = UserProperty.decode(stream)
            properties.user_properties.append(prop)
            consumed += prop.encode_len()
        elif property_id in permitted:
            spec = _SPECS[property_id]
            if getattr(properties, spec.attribute) is not None:
                raise DuplicatedProperty(property_id)
            value = _read_value(stream, property_id, spec.kind)
            setattr(properties, spec.attribute, value)
            consumed += 1 + _value_len(spec.kind, value)
        elif packet_type is None:
            raise InvalidWillProperty(property_id)
        else:
            raise InvalidProperty(packet_type, property_id)
    if declared != consumed:
        raise InvalidPropertyLength(declared)
    return properties