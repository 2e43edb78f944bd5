"""Primitive wire types, errors and low-level readers and writers for MQTT v5."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import BinaryIO, Union

MAX_VAR_BYTE_INT = 268_435_455
MAX_U16 = 0xFFFF

BytesLike = Union[bytes, bytearray, memoryview, str]


class ErrorV5(Exception):
    """Base class of every decoding and validation error."""

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.args == other.args

    def __hash__(self) -> int:
        return hash((type(self), self.args))


class UnexpectedEof(ErrorV5):
    """The stream ended before a complete value could be read."""

    def __init__(self) -> None:
        super().__init__("unexpected end of stream")


class InvalidString(ErrorV5):
    """A length-prefixed string was not valid UTF-8."""

    def __init__(self) -> None:
        super().__init__("invalid UTF-8 string")


class InvalidRemainingLength(ErrorV5):
    """The remaining length disagrees with the packet contents."""

    def __init__(self) -> None:
        super().__init__("invalid remaining length")


class EmptySubscription(ErrorV5):
    """A subscribe or unsubscribe packet carried no topics."""

    def __init__(self) -> None:
        super().__init__("empty subscription")


class InvalidVarByteInt(ErrorV5):
    """A variable byte integer was malformed or out of range."""

    def __init__(self) -> None:
        super().__init__("invalid variable byte integer")


class InvalidTopicName(ErrorV5):
    """A topic name broke the topic name rules."""

    def __init__(self, value: str) -> None:
        super().__init__(value)
        self.value = value

    def __str__(self) -> str:
        return f"invalid topic name: {self.value!r}"


class InvalidTopicFilter(ErrorV5):
    """A topic filter broke the topic filter rules."""

    def __init__(self, value: str) -> None:
        super().__init__(value)
        self.value = value

    def __str__(self) -> str:
        return f"invalid topic filter: {self.value!r}"


class InvalidQos(ErrorV5):
    """A QoS value other than 0, 1 or 2."""

    def __init__(self, value: int) -> None:
        super().__init__(value)
        self.value = value

    def __str__(self) -> str:
        return f"invalid QoS: {self.value}"


class ZeroPid(ErrorV5):
    """A packet identifier of zero."""

    def __init__(self) -> None:
        super().__init__("packet identifier must not be zero")


class InvalidPropertyId(ErrorV5):
    """An unknown property identifier byte."""

    def __init__(self, value: int) -> None:
        super().__init__(value)
        self.value = value

    def __str__(self) -> str:
        return f"invalid property identifier: 0x{self.value:02X}"


class InvalidProperty(ErrorV5):
    """A known property that is not allowed in this packet type."""

    def __init__(self, packet_type: PacketType, property_id: PropertyId) -> None:
        super().__init__(packet_type, property_id)
        self.packet_type = packet_type
        self.property_id = property_id

    def __str__(self) -> str:
        return f"property {self.property_id} not allowed in {self.packet_type.name} packet"


class InvalidWillProperty(ErrorV5):
    """A property that is not allowed among the will properties."""

    def __init__(self, property_id: PropertyId) -> None:
        super().__init__(property_id)
        self.property_id = property_id

    def __str__(self) -> str:
        return f"property {self.property_id} not allowed in will properties"


class InvalidPropertyLength(ErrorV5):
    """The declared property length disagrees with the properties read."""

    def __init__(self, length: int) -> None:
        super().__init__(length)
        self.length = length

    def __str__(self) -> str:
        return f"invalid property length: {self.length}"


class DuplicatedProperty(ErrorV5):
    """A property that may appear once appeared again."""

    def __init__(self, property_id: PropertyId) -> None:
        super().__init__(property_id)
        self.property_id = property_id

    def __str__(self) -> str:
        return f"duplicated property: {self.property_id}"


class InvalidByteProperty(ErrorV5):
    """A byte property held a value other than the allowed ones."""

    def __init__(self, property_id: PropertyId, value: int) -> None:
        super().__init__(property_id, value)
        self.property_id = property_id
        self.value = value

    def __str__(self) -> str:
        return f"invalid value {self.value} for property {self.property_id}"


class InvalidReasonCode(ErrorV5):
    """A reason code not defined for this packet type."""

    def __init__(self, packet_type: PacketType, value: int) -> None:
        super().__init__(packet_type, value)
        self.packet_type = packet_type
        self.value = value

    def __str__(self) -> str:
        return f"invalid reason code 0x{self.value:02X} for {self.packet_type.name} packet"


class InvalidSubscriptionOption(ErrorV5):
    """A subscription options byte with reserved or invalid bits."""

    def __init__(self, value: int) -> None:
        super().__init__(value)
        self.value = value

    def __str__(self) -> str:
        return f"invalid subscription option: 0b{self.value:08b}"


class InvalidPayloadFormat(ErrorV5):
    """The payload is marked as UTF-8 but is not valid UTF-8."""

    def __init__(self) -> None:
        super().__init__("payload is not valid UTF-8")


class InvalidResponseTopic(ErrorV5):
    """The response topic property is not a valid topic name."""

    def __init__(self) -> None:
        super().__init__("invalid response topic")


class QoS(enum.IntEnum):
    """Quality of service level."""

    LEVEL0 = 0
    LEVEL1 = 1
    LEVEL2 = 2

    @classmethod
    def from_byte(cls, value: int) -> QoS:
        try:
            return cls(value)
        except ValueError:
            raise InvalidQos(value) from None


class PacketType(enum.IntEnum):
    """Control packet type, the high nibble of the first header byte."""

    CONNECT = 1
    CONNACK = 2
    PUBLISH = 3
    PUBACK = 4
    PUBREC = 5
    PUBREL = 6
    PUBCOMP = 7
    SUBSCRIBE = 8
    SUBACK = 9
    UNSUBSCRIBE = 10
    UNSUBACK = 11
    PINGREQ = 12
    PINGRESP = 13
    DISCONNECT = 14
    AUTH = 15


class PropertyId(enum.IntEnum):
    """Property identifier."""

    PAYLOAD_FORMAT_INDICATOR = 0x01
    MESSAGE_EXPIRY_INTERVAL = 0x02
    CONTENT_TYPE = 0x03
    RESPONSE_TOPIC = 0x08
    CORRELATION_DATA = 0x09
    SUBSCRIPTION_IDENTIFIER = 0x0B
    SESSION_EXPIRY_INTERVAL = 0x11
    ASSIGNED_CLIENT_IDENTIFIER = 0x12
    SERVER_KEEP_ALIVE = 0x13
    AUTHENTICATION_METHOD = 0x15
    AUTHENTICATION_DATA = 0x16
    REQUEST_PROBLEM_INFORMATION = 0x17
    WILL_DELAY_INTERVAL = 0x18
    REQUEST_RESPONSE_INFORMATION = 0x19
    RESPONSE_INFORMATION = 0x1A
    SERVER_REFERENCE = 0x1C
    REASON_STRING = 0x1F
    RECEIVE_MAXIMUM = 0x21
    TOPIC_ALIAS_MAXIMUM = 0x22
    TOPIC_ALIAS = 0x23
    MAXIMUM_QOS = 0x24
    RETAIN_AVAILABLE = 0x25
    USER_PROPERTY = 0x26
    MAXIMUM_PACKET_SIZE = 0x27
    WILDCARD_SUBSCRIPTION_AVAILABLE = 0x28
    SUBSCRIPTION_IDENTIFIER_AVAILABLE = 0x29
    SHARED_SUBSCRIPTION_AVAILABLE = 0x2A

    @classmethod
    def from_byte(cls, value: int) -> PropertyId:
        try:
            return cls(value)
        except ValueError:
            raise InvalidPropertyId(value) from None

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Header:
    """Fixed header of a control packet."""

    typ: PacketType
    dup: bool
    qos: QoS
    retain: bool
    remaining_len: int


@dataclass(frozen=True, order=True)
class Pid:
    """Packet identifier, a non-zero 16-bit integer."""

    value: int

    def __post_init__(self) -> None:
        if self.value == 0:
            raise ZeroPid()
        if not 0 < self.value <= MAX_U16:
            raise ValueError(f"packet identifier out of range: {self.value}")

    def __int__(self) -> int:
        return self.value


def _check_str(value: object) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected str, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class TopicName:
    """Topic name used when publishing; it holds no wildcards."""

    value: str

    def __post_init__(self) -> None:
        value = _check_str(self.value)
        if (
            len(value.encode("utf-8")) > MAX_U16
            or any(c in value for c in "+#\0")
        ):
            raise InvalidTopicName(value)

    def __str__(self) -> str:
        return self.value

    def __bytes__(self) -> bytes:
        return self.value.encode("utf-8")


def _filter_is_valid(value: str) -> bool:
    if not value or "\0" in value or len(value.encode("utf-8")) > MAX_U16:
        return False
    levels = value.split("/")
    if levels[0] == "$share":
        if len(levels) < 3 or not levels[1] or any(c in levels[1] for c in "+#"):
            return False
        levels = levels[2:]
    last = len(levels) - 1
    for index, level in enumerate(levels):
        if "#" in level and (level != "#" or index != last):
            return False
        if "+" in level and level != "+":
            return False
    return True


@dataclass(frozen=True)
class TopicFilter:
    """Topic filter used when subscribing; it may hold wildcards."""

    value: str

    def __post_init__(self) -> None:
        value = _check_str(self.value)
        if not _filter_is_valid(value):
            raise InvalidTopicFilter(value)

    def __str__(self) -> str:
        return self.value

    def __bytes__(self) -> bytes:
        return self.value.encode("utf-8")


@dataclass(frozen=True, order=True)
class VarByteInt:
    """Integer that fits the variable byte integer encoding."""

    value: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.value <= MAX_VAR_BYTE_INT:
            raise InvalidVarByteInt()

    def __int__(self) -> int:
        return self.value


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    data = stream.read(size)
    if data is None or len(data) < size:
        raise UnexpectedEof()
    return bytes(data)


def read_u8(stream: BinaryIO) -> int:
    """Read one unsigned byte."""
    return _read_exact(stream, 1)[0]


def read_u16(stream: BinaryIO) -> int:
    """Read a big-endian unsigned 16-bit integer."""
    return int.from_bytes(_read_exact(stream, 2), "big")


def read_u32(stream: BinaryIO) -> int:
    """Read a big-endian unsigned 32-bit integer."""
    return int.from_bytes(_read_exact(stream, 4), "big")


def read_bytes(stream: BinaryIO) -> bytes:
    """Read binary data prefixed by its 16-bit length."""
    return _read_exact(stream, read_u16(stream))


def read_string(stream: BinaryIO) -> str:
    """Read a UTF-8 string prefixed by its 16-bit length."""
    data = read_bytes(stream)
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        raise InvalidString() from None


def decode_var_int(stream: BinaryIO) -> tuple[int, int]:
    """Read a variable byte integer; return its value and the bytes it took."""
    value = 0
    for index in range(4):
        byte = read_u8(stream)
        value |= (byte & 0x7F) << (7 * index)
        if not byte & 0x80:
            return value, index + 1
    raise InvalidVarByteInt()


def write_u8(out: BinaryIO, value: int) -> None:
    """Write one unsigned byte."""
    out.write(value.to_bytes(1, "big"))


def write_u16(out: BinaryIO, value: int) -> None:
    """Write a big-endian unsigned 16-bit integer."""
    out.write(value.to_bytes(2, "big"))


def write_u32(out: BinaryIO, value: int) -> None:
    """Write a big-endian unsigned 32-bit integer."""
    out.write(value.to_bytes(4, "big"))


def write_bytes(out: BinaryIO, data: BytesLike) -> None:
    """Write data prefixed by its 16-bit length; strings are UTF-8 encoded."""
    raw = data.encode("utf-8") if isinstance(data, str) else bytes(data)
    if len(raw) > MAX_U16:
        raise ValueError(f"data too long for a 16-bit length prefix: {len(raw)}")
    write_u16(out, len(raw))
    out.write(raw)


def var_int_len(value: int) -> int:
    """Number of bytes the variable byte integer encoding of value takes."""
    if value < 0 or value > MAX_VAR_BYTE_INT:
        raise InvalidVarByteInt()
    if value < 0x80:
        return 1
    if value < 0x4000:
        return 2
    if value < 0x20_0000:
        return 3
    return 4


def write_var_int(out: BinaryIO, value: int) -> None:
    """Write a variable byte integer."""
    if value < 0 or value > MAX_VAR_BYTE_INT:
        raise InvalidVarByteInt()
    encoded = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            encoded.append(byte | 0x80)
        else:
            encoded.append(byte)
            break
    out.write(bytes(encoded))


@dataclass(frozen=True)
class UserProperty:
    """User property: a UTF-8 name and value pair."""

    name: str
    value: str = field(default="")

    @classmethod
    def decode(cls, stream: BinaryIO) -> UserProperty:
        name = read_string(stream)
        value = read_string(stream)
        return cls(name, value)

    def encode_len(self) -> int:
        """Encoded size including the property identifier byte."""
        return 1 + 4 + len(self.name.encode("utf-8")) + len(self.value.encode("utf-8"))