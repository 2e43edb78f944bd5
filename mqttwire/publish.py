"""PUBLISH packet body and its property list."""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from typing import BinaryIO, Optional

from .properties import decode_properties, encode_properties, properties_len
from .types import (
    Header,
    InvalidPayloadFormat,
    InvalidRemainingLength,
    PacketType,
    Pid,
    PropertyId,
    QoS,
    TopicName,
    UnexpectedEof,
    UserProperty,
    VarByteInt,
    read_string,
    read_u16,
    write_bytes,
    write_u16,
)

_ALLOWED = (
    PropertyId.PAYLOAD_FORMAT_INDICATOR,
    PropertyId.MESSAGE_EXPIRY_INTERVAL,
    PropertyId.TOPIC_ALIAS,
    PropertyId.RESPONSE_TOPIC,
    PropertyId.CORRELATION_DATA,
    PropertyId.SUBSCRIPTION_IDENTIFIER,
    PropertyId.CONTENT_TYPE,
)


@dataclass
class PublishProperties:
    """Property list of a PUBLISH packet."""

    payload_is_utf8: Optional[bool] = None
    message_expiry_interval: Optional[int] = None
    topic_alias: Optional[int] = None
    response_topic: Optional[TopicName] = None
    correlation_data: Optional[bytes] = None
    user_properties: list[UserProperty] = field(default_factory=list)
    subscription_id: Optional[VarByteInt] = None
    content_type: Optional[str] = None

    @classmethod
    def decode(cls, stream: BinaryIO, packet_type: PacketType) -> PublishProperties:
        return decode_properties(stream, packet_type, cls(), _ALLOWED)

    def encode(self) -> bytes:
        out = io.BytesIO()
        encode_properties(out, self, _ALLOWED)
        return out.getvalue()

    def encode_len(self) -> int:
        return properties_len(self, _ALLOWED)


def _take(remaining: int, amount: int) -> int:
    if amount > remaining:
        raise InvalidRemainingLength()
    return remaining - amount


@dataclass
class Publish:
    """Body of a PUBLISH packet.

    ``pid`` is present exactly when ``qos`` is above level 0.
    """

    dup: bool
    retain: bool
    qos: QoS
    pid: Optional[Pid]
    topic_name: TopicName
    payload: bytes = b""
    properties: PublishProperties = field(default_factory=PublishProperties)

    def __post_init__(self) -> None:
        self.qos = QoS(self.qos)
        self.payload = bytes(self.payload)
        if self.qos is QoS.LEVEL0:
            if self.pid is not None:
                raise ValueError("a QoS 0 publish carries no packet identifier")
        elif self.pid is None:
            raise ValueError(f"a QoS {int(self.qos)} publish needs a packet identifier")

    @classmethod
    def new(
        cls,
        qos: QoS,
        pid: Optional[Pid],
        topic_name: TopicName,
        payload: bytes,
    ) -> Publish:
        """A publish with no dup or retain flag and no properties."""
        return cls(
            dup=False,
            retain=False,
            qos=qos,
            pid=pid,
            topic_name=topic_name,
            payload=payload,
        )

    @classmethod
    def decode(cls, stream: BinaryIO, header: Header) -> Publish:
        """Read the body that follows ``header`` from ``stream``."""
        remaining = header.remaining_len
        topic = read_string(stream)
        remaining = _take(remaining, 2 + len(topic.encode("utf-8")))
        pid: Optional[Pid] = None
        if header.qos is not QoS.LEVEL0:
            remaining = _take(remaining, 2)
            pid = Pid(read_u16(stream))
        properties = PublishProperties.decode(stream, header.typ)
        remaining = _take(remaining, properties.encode_len())
        payload = b""
        if remaining > 0:
            data = stream.read(remaining)
            if data is None or len(data) < remaining:
                raise UnexpectedEof()
            payload = bytes(data)
            if properties.payload_is_utf8 is True:
                try:
                    payload.decode("utf-8")
                except UnicodeDecodeError:
                    raise InvalidPayloadFormat() from None
        return cls(
            dup=header.dup,
            retain=header.retain,
            qos=header.qos,
            pid=pid,
            topic_name=TopicName(topic),
            payload=payload,
            properties=properties,
        )

    def encode(self) -> bytes:
        """Encode the body, without the fixed header."""
        out = io.BytesIO()
        write_bytes(out, str(self.topic_name))
        if self.pid is not None:
            write_u16(out, self.pid.value)
        out.write(self.properties.encode())
        out.write(self.payload)
        return out.getvalue()

    def encode_len(self) -> int:
        length = 2 + len(bytes(self.topic_name))
        if self.pid is not None:
            length += 2
        return length + self.properties.encode_len() + len(self.payload)