import io

import pytest

from mqttwire.acks import (
    Puback,
    PubackProperties,
    PubackReasonCode,
    Pubcomp,
    PubcompProperties,
    PubcompReasonCode,
    Pubrec,
    PubrecProperties,
    PubrecReasonCode,
    Pubrel,
    PubrelProperties,
    PubrelReasonCode,
)
from mqttwire.types import (
    DuplicatedProperty,
    Header,
    InvalidProperty,
    InvalidReasonCode,
    PacketType,
    Pid,
    PropertyId,
    QoS,
    UnexpectedEof,
    UserProperty,
    ZeroPid,
)

# packet class, properties class, packet type, first header byte, error code
KINDS = [
    (Puback, PubackProperties, PacketType.PUBACK, 4 << 4, PubackReasonCode.NOT_AUTHORIZED),
    (Pubrec, PubrecProperties, PacketType.PUBREC, 5 << 4, PubrecReasonCode.NOT_AUTHORIZED),
    (
        Pubrel,
        PubrelProperties,
        PacketType.PUBREL,
        6 << 4 | 2,
        PubrelReasonCode.PACKET_IDENTIFIER_NOT_FOUND,
    ),
    (
        Pubcomp,
        PubcompProperties,
        PacketType.PUBCOMP,
        7 << 4,
        PubcompReasonCode.PACKET_IDENTIFIER_NOT_FOUND,
    ),
]

ENCODE_KINDS = [
    (Puback, PubackProperties, PacketType.PUBACK, PubackReasonCode.IMPLEMENTATION_SPECIFIC_ERROR),
    (Pubrec, PubrecProperties, PacketType.PUBREC, PubrecReasonCode.IMPLEMENTATION_SPECIFIC_ERROR),
    (Pubrel, PubrelProperties, PacketType.PUBREL, PubrelReasonCode.PACKET_IDENTIFIER_NOT_FOUND),
    (Pubcomp, PubcompProperties, PacketType.PUBCOMP, PubcompReasonCode.PACKET_IDENTIFIER_NOT_FOUND),
]


def _decode(cls, typ, data):
    header = Header(typ, False, QoS.LEVEL0, False, data[1])
    return cls.decode(io.BytesIO(bytes(data[2:])), header)


def _round_trip(packet, typ, expected_len):
    body = packet.encode()
    assert packet.encode_len() == expected_len
    assert len(body) == expected_len
    header = Header(typ, False, QoS.LEVEL0, False, len(body))
    decoded = type(packet).decode(io.BytesIO(body), header)
    assert decoded == packet


@pytest.mark.parametrize("cls, props_cls, typ, first, code", KINDS)
def test_decode_with_reason_and_properties(cls, props_cls, typ, first, code):
    data = [first, 8, 0x11, 0x22, int(code), 0x04, 0x1F, 0x00, 0x01, ord("e")]
    assert _decode(cls, typ, data) == cls(
        pid=Pid(0x1122),
        reason_code=code,
        properties=props_cls(reason_string="e", user_properties=[]),
    )


@pytest.mark.parametrize("cls, props_cls, typ, first, code", KINDS)
def test_decode_pid_only(cls, props_cls, typ, first, code):
    packet = _decode(cls, typ, [first, 2, 0x11, 0x22])
    assert packet == cls(Pid(0x1122), 0, props_cls())
    assert packet.reason_code == 0


@pytest.mark.parametrize("cls, props_cls, typ, first, code", KINDS)
def test_decode_with_success_byte(cls, props_cls, typ, first, code):
    packet = _decode(cls, typ, [first, 3, 0x11, 0x22, 0x00])
    assert packet == cls.success(Pid(0x1122))
    assert packet.properties == props_cls()


@pytest.mark.parametrize(
    "cls, typ, bad",
    [
        (Puback, PacketType.PUBACK, 0x92),
        (Pubrec, PacketType.PUBREC, 0x43),
        (Pubrel, PacketType.PUBREL, 0x87),
        (Pubcomp, PacketType.PUBCOMP, 0x10),
    ],
)
def test_decode_invalid_reason_code(cls, typ, bad):
    with pytest.raises(InvalidReasonCode) as info:
        _decode(cls, typ, [0, 3, 0x00, 0x01, bad])
    assert info.value == InvalidReasonCode(typ, bad)


def test_decode_zero_pid():
    with pytest.raises(ZeroPid):
        _decode(Puback, PacketType.PUBACK, [4 << 4, 2, 0x00, 0x00])


def test_decode_truncated():
    with pytest.raises(UnexpectedEof):
        _decode(Puback, PacketType.PUBACK, [4 << 4, 3, 0x00, 0x01])


def test_decode_disallowed_property():
    data = [4 << 4, 7, 0x00, 0x01, 0x00, 0x03, 0x23, 0x00, 0x05]
    with pytest.raises(InvalidProperty) as info:
        _decode(Puback, PacketType.PUBACK, data)
    assert info.value == InvalidProperty(PacketType.PUBACK, PropertyId.TOPIC_ALIAS)


def test_decode_duplicated_reason_string():
    data = [5 << 4, 12, 0x00, 0x01, 0x00, 0x08,
            0x1F, 0x00, 0x01, ord("a"), 0x1F, 0x00, 0x01, ord("b")]
    with pytest.raises(DuplicatedProperty) as info:
        _decode(Pubrec, PacketType.PUBREC, data)
    assert info.value == DuplicatedProperty(PropertyId.REASON_STRING)


@pytest.mark.parametrize("cls, props_cls, typ, code", ENCODE_KINDS)
def test_encode_full(cls, props_cls, typ, code):
    packet = cls(
        pid=Pid(10),
        reason_code=code,
        properties=props_cls(
            reason_string="auth",
            user_properties=[UserProperty("name", "value"), UserProperty("key", "value")],
        ),
    )
    assert packet.properties.encode_len() == 35
    _round_trip(packet, typ, 2 + 1 + 35)


@pytest.mark.parametrize("cls, props_cls, typ, code", ENCODE_KINDS)
def test_encode_reason_only(cls, props_cls, typ, code):
    packet = cls(pid=Pid(10), reason_code=code, properties=props_cls())
    assert packet.encode() == bytes([0x00, 0x0A, int(code)])
    _round_trip(packet, typ, 3)


@pytest.mark.parametrize("cls, props_cls, typ, code", ENCODE_KINDS)
def test_encode_success_default(cls, props_cls, typ, code):
    packet = cls(pid=Pid(10), reason_code=0, properties=props_cls())
    assert packet.encode() == b"\x00\x0a"
    _round_trip(packet, typ, 2)


@pytest.mark.parametrize("cls, props_cls, typ, code", ENCODE_KINDS)
def test_encode_success_with_empty_reason_string(cls, props_cls, typ, code):
    packet = cls(
        pid=Pid(10),
        reason_code=0,
        properties=props_cls(reason_string="", user_properties=[]),
    )
    assert packet.encode() == b"\x00\x0a\x00\x03\x1f\x00\x00"
    _round_trip(packet, typ, 2 + 1 + 4)


def test_success_constructor():
    packet = Pubrel.success(Pid(7))
    assert packet.reason_code is PubrelReasonCode.SUCCESS
    assert packet.properties == PubrelProperties()
    assert packet.encode_len() == 2


def test_reason_code_coerced_from_int():
    packet = Puback(Pid(1), 0x97)
    assert packet.reason_code is PubackReasonCode.QUOTA_EXCEEDED


def test_reason_code_rejected_when_undefined():
    with pytest.raises(ValueError):
        Pubcomp(Pid(1), 0x87)


def test_properties_types_distinct():
    assert PubackProperties() != PubrecProperties()
    assert PubackProperties(reason_string="x") == PubackProperties(reason_string="x")