# mqttwire

Encoding and decoding of MQTT v5.0 packet bodies for PUBLISH and its
acknowledgements (PUBACK, PUBREC, PUBREL, PUBCOMP), together with the
property lists and reason codes each of them carries.

It has no dependencies outside the standard library.

## Installing

```
pip install mqttwire
```

## Modules

`mqttwire.types` holds the shared pieces:

- primitive readers: `read_u8`, `read_u16`, `read_u32`, `read_bytes`,
  `read_string` and `decode_var_int` (which returns the value and the number
  of bytes it took). Each reads from a binary stream such as `io.BytesIO`.
- primitive writers: `write_u8`, `write_u16`, `write_u32`, `write_bytes`
  (a 16-bit length prefix followed by the data; a `str` is UTF-8 encoded)
  and `write_var_int`, which write to anything with a `write` method, and
  `var_int_len`, the encoded size of a variable byte integer.
- value types: `QoS`, `PacketType`, `Header`, `Pid` (non-zero 16-bit packet
  identifier), `TopicName` (no wildcards), `TopicFilter` (wildcards and
  `$share/` groups allowed), `PropertyId`, `UserProperty` and `VarByteInt`.
- the exceptions, all derived from `ErrorV5`.

`mqttwire.properties` decodes, encodes and measures property lists with
`decode_properties`, `encode_properties`, `properties_len` and
`property_len`. Which properties a packet may carry is passed in as an ordered
collection of `PropertyId`; user properties are always allowed and always
written last.

`mqttwire.publish` has `Publish` and `PublishProperties`.

`mqttwire.acks` has `Puback`, `Pubrec`, `Pubrel` and `Pubcomp`, their
property lists (`PubackProperties` and so on) and reason codes
(`PubackReasonCode` and so on).

Every packet body and property list has `encode()`, which returns `bytes`,
`encode_len()`, and a `decode` class method that reads from a stream.

## Encoding a packet body

```python
from mqttwire.types import Pid, QoS, TopicName
from mqttwire.publish import Publish, PublishProperties

packet = Publish.new(QoS.LEVEL1, Pid(10), TopicName("a/b"), b"\x01\x02\x03")
packet.properties = PublishProperties(topic_alias=23, correlation_data=b"\x00\x01")
body = packet.encode()
assert len(body) == packet.encode_len()
```

A `Publish` carries a `pid` exactly when its `qos` is above level 0; any
other combination raises `ValueError`.

An acknowledgement is written in its shortest form: just the packet
identifier when the reason code is success and there are no properties, the
identifier and reason code when there are no properties.

```python
from mqttwire.acks import Puback, PubackReasonCode
from mqttwire.types import Pid

assert Puback.success(Pid(10)).encode() == b"\x00\x0a"
assert Puback(Pid(10), PubackReasonCode.NOT_AUTHORIZED).encode() == b"\x00\x0a\x87"
```

## Decoding a packet body

A body is decoded from a stream positioned just after the fixed header,
given a `Header` that describes that fixed header:

```python
import io

from mqttwire.types import Header, PacketType, QoS
from mqttwire.acks import Puback

header = Header(PacketType.PUBACK, False, QoS.LEVEL0, False, 2)
ack = Puback.decode(io.BytesIO(b"\x11\x22"), header)
assert ack.pid.value == 0x1122
```

## Errors

A malformed body raises a subclass of `ErrorV5`, among them
`InvalidRemainingLength`, `InvalidReasonCode`, `InvalidPropertyId`,
`InvalidProperty`, `DuplicatedProperty`, `InvalidByteProperty`,
`InvalidPropertyLength`, `InvalidPayloadFormat` (a payload marked as UTF-8
that is not), `InvalidResponseTopic`, `InvalidString`, `InvalidTopicName` and
`ZeroPid`. A stream that ends too early raises `UnexpectedEof`. Errors
compare equal when they are of the same class and carry the same values.

## What it does not do

- It handles packet bodies only. It does not read or write the fixed header:
  `Header` is a plain value that the caller builds, and framing a whole
  packet off a connection is left to the caller.
- It has no bodies for SUBSCRIBE, SUBACK, UNSUBSCRIBE, UNSUBACK, CONNECT,
  CONNACK, DISCONNECT, AUTH, PINGREQ or PINGRESP packets.
- It is not a client or a broker: it opens no connections and keeps no
  session state.

## Running the tests

```
pip install -e ".[test]"
pytest
```