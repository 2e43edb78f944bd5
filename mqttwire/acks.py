"""PUBACK, PUBREC, PUBREL and PUBCOMP packet bodies and their property lists."""

from __future__ import annotations

import enum
import io
from dataclasses import dataclass, field
from typing import BinaryIO, ClassVar, Optional

from .properties import decode_properties, encode_properties, properties_len
from .types import (
    Header,
    InvalidReasonCode,
    PacketType,
    Pid,
    PropertyId,
    UserProperty,
    read_u8,
    read_u16,
    write_u8,
    write_u16,
)

_ALLOWED = (PropertyId.REASON_STRING,)


def _encode_props(properties) -> bytes:
    out = io.BytesIO()
    encode_properties(out, properties, _ALLOWED)
    return out.getvalue()


@dataclass
class _AckProperties:
    """Fields shared by the acknowledgement property lists."""

    reason_string: Optional[str] = None
    user_properties: list[UserProperty] = field(default_factory=list)


@dataclass
class PubackProperties(_AckProperties):
    """Property list of a PUBACK packet."""

    @classmethod
    def decode(cls, stream: BinaryIO, packet_type: PacketType) -> PubackProperties:
        return decode_properties(stream, packet_type, cls(), _ALLOWED)

    def encode(self) -> bytes:
        return _encode_props(self)

    def encode_len(self) -> int:
        return properties_len(self, _ALLOWED)


@dataclass
class PubrecProperties(_AckProperties):
    """Property list of a PUBREC packet."""

    @classmethod
    def decode(cls, stream: BinaryIO, packet_type: PacketType) -> PubrecProperties:
        return decode_properties(stream, packet_type, cls(), _ALLOWED)

    def encode(self) -> bytes:
        return _encode_props(self)

    def encode_len(self) -> int:
        return properties_len(self, _ALLOWED)


@dataclass
class PubrelProperties(_AckProperties):
    """Property list of a PUBREL packet."""

    @classmethod
    def decode(cls, stream: BinaryIO, packet_type: PacketType) -> PubrelProperties:
        return decode_properties(stream, packet_type, cls(), _ALLOWED)

    def encode(self) -> bytes:
        return _encode_props(self)

    def encode_len(self) -> int:
        return properties_len(self, _ALLOWED)


@dataclass
class PubcompProperties(_AckProperties):
    """Property list of a PUBCOMP packet."""

    @classmethod
    def decode(cls, stream: BinaryIO, packet_type: PacketType) -> PubcompProperties:
        return decode_properties(stream, packet_type, cls(), _ALLOWED)

    def encode(self) -> bytes:
        return _encode_props(self)

    def encode_len(self) -> int:
        return properties_len(self, _ALLOWED)


class PubackReasonCode(enum.IntEnum):
    """Reason code of a PUBACK packet."""

    SUCCESS = 0x00
    NO_MATCHING_SUBSCRIBERS = 0x10
    UNSPECIFIED_ERROR = 0x80
    IMPLEMENTATION_SPECIFIC_ERROR = 0x83
    NOT_AUTHORIZED = 0x87
    TOPIC_NAME_INVALID = 0x90
    PACKET_IDENTIFIER_IN_USE = 0x91
    QUOTA_EXCEEDED = 0x97
    PAYLOAD_FORMAT_INVALID = 0x99


class PubrecReasonCode(enum.IntEnum):
    """Reason code of a PUBREC packet."""

    SUCCESS = 0x00
    NO_MATCHING_SUBSCRIBERS = 0x10
    UNSPECIFIED_ERROR = 0x80
    IMPLEMENTATION_SPECIFIC_ERROR = 0x83
    NOT_AUTHORIZED = 0x87
    TOPIC_NAME_INVALID = 0x90
    PACKET_IDENTIFIER_IN_USE = 0x91
    QUOTA_EXCEEDED = 0x97
    PAYLOAD_FORMAT_INVALID = 0x99


class PubrelReasonCode(enum.IntEnum):
    """Reason code of a PUBREL packet."""

    SUCCESS = 0x00
    PACKET_IDENTIFIER_NOT_FOUND = 0x92


class PubcompReasonCode(enum.IntEnum):
    """Reason code of a PUBCOMP packet."""

    SUCCESS = 0x00
    PACKET_IDENTIFIER_NOT_FOUND = 0x92


class _AckBody:
    """Behaviour shared by the acknowledgement packet bodies."""

    _reason_type: ClassVar[type[enum.IntEnum]]
    _properties_type: ClassVar[type]

    pid: Pid
    reason_code: enum.IntEnum
    properties: _AckProperties

    def __post_init__(self) -> None:
        self.reason_code = self._reason_type(self.reason_code)

    @classmethod
    def _read_reason(cls, stream: BinaryIO, packet_type: PacketType) -> enum.IntEnum:
        value = read_u8(stream)
        try:
            return cls._reason_type(value)
        except ValueError:
            raise InvalidReasonCode(packet_type, value) from None

    @classmethod
    def _decode_body(cls, stream: BinaryIO, header: Header):
        pid = Pid(read_u16(stream))
        if header.remaining_len == 2:
            return cls(pid, cls._reason_type(0))
        reason_code = cls._read_reason(stream, header.typ)
        if header.remaining_len == 3:
            return cls(pid, reason_code)
        properties = cls._properties_type.decode(stream, header.typ)
        return cls(pid, reason_code, properties)

    def _has_default_properties(self) -> bool:
        return self.properties == self._properties_type()

    def _encode_body(self) -> bytes:
        out = io.BytesIO()
        write_u16(out, self.pid.value)
        if self._has_default_properties():
            if self.reason_code != 0:
                write_u8(out, int(self.reason_code))
        else:
            write_u8(out, int(self.reason_code))
            out.write(self.properties.encode())
        return out.getvalue()

    def _body_len(self) -> int:
        if self._has_default_properties():
            return 2 if self.reason_code == 0 else 3
        return 3 + self.properties.encode_len()


@dataclass
class Puback(_AckBody):
    """Body of a PUBACK packet."""

    pid: Pid
    reason_code: PubackReasonCode = PubackReasonCode.SUCCESS
    properties: PubackProperties = field(default_factory=PubackProperties)

    _reason_type: ClassVar[type[enum.IntEnum]] = PubackReasonCode
    _properties_type: ClassVar[type] = PubackProperties

    @classmethod
    def success(cls, pid: Pid) -> Puback:
        """An acknowledgement with the success reason code and no properties."""
        return cls(pid, PubackReasonCode.SUCCESS)

    @classmethod
    def decode(cls, stream: BinaryIO, header: Header) -> Puback:
        """Read the body that follows ``header`` from ``stream``."""
        return cls._decode_body(stream, header)

    def encode(self) -> bytes:
        """Encode the body, without the fixed header."""
        return self._encode_body()

    def encode_len(self) -> int:
        return self._body_len()


@dataclass
class Pubrec(_AckBody):
    """Body of a PUBREC packet."""

    pid: Pid
    reason_code: PubrecReasonCode = PubrecReasonCode.SUCCESS
    properties: PubrecProperties = field(default_factory=PubrecProperties)

    _reason_type: ClassVar[type[enum.IntEnum]] = PubrecReasonCode
    _properties_type: ClassVar[type] = PubrecProperties

    @classmethod
    def success(cls, pid: Pid) -> Pubrec:
        """An acknowledgement with the success reason code and no properties."""
        return cls(pid, PubrecReasonCode.SUCCESS)

    @classmethod
    def decode(cls, stream: BinaryIO, header: Header) -> Pubrec:
        """Read the body that follows ``header`` from ``stream``."""
        return cls._decode_body(stream, header)

    def encode(self) -> bytes:
        """Encode the body, without the fixed header."""
        return self._encode_body()

    def encode_len(self) -> int:
        return self._body_len()


@dataclass
class Pubrel(_AckBody):
    """Body of a PUBREL packet."""

    pid: Pid
    reason_code: PubrelReasonCode = PubrelReasonCode.SUCCESS
    properties: PubrelProperties = field(default_factory=PubrelProperties)

    _reason_type: ClassVar[type[enum.IntEnum]] = PubrelReasonCode
    _properties_type: ClassVar[type] = PubrelProperties

    @classmethod
    def success(cls, pid: Pid) -> Pubrel:
        """An acknowledgement with the success reason code and no properties."""
        return cls(pid, PubrelReasonCode.SUCCESS)

    @classmethod
    def decode(cls, stream: BinaryIO, header: Header) -> Pubrel:
        """Read the body that follows ``header`` from ``stream``."""
        return cls._decode_body(stream, header)

    def encode(self) -> bytes:
        """Encode the body, without the fixed header."""
        return self._encode_body()

    def encode_len(self) -> int:
        return self._body_len()


@dataclass
class Pubcomp(_AckBody):
    """Body of a PUBCOMP packet."""

    pid: Pid
    reason_code: PubcompReasonCode = PubcompReasonCode.SUCCESS
    properties: PubcompProperties = field(default_factory=PubcompProperties)

    _reason_type: ClassVar[type[enum.IntEnum]] = PubcompReasonCode
    _properties_type: ClassVar[type] = PubcompProperties

    @classmethod
    def success(cls, pid: Pid) -> Pubcomp:
        """An acknowledgement with the success reason code and no properties."""
        return cls(pid, PubcompReasonCode.SUCCESS)

    @classmethod
    def decode(cls, stream: BinaryIO, header: Header) -> Pubcomp:
        """Read the body that follows ``header`` from ``stream``."""
        return cls._decode_body(stream, header)

    def encode(self) -> bytes:
        """Encode the body, without the fixed header."""
        return self._encode_body()

    def encode_len(self) -> int:
        return self._body_len()