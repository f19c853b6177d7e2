"""Tests for the header codec and whole-message framing."""

import pytest

from emapi.models.device import DeviceEntry
from emapi.models.message import Header, Message
from emapi.protocol.commands import (
    MessageCategory,
    ObjectType,
    Opcode,
    build_connect,
    build_list_devices,
    build_list_devices_response,
)
from emapi.protocol.errors import CodecError, Decoded, ErrorKind
from emapi.protocol.framing import (
    HEADER_SIZE,
    MAX_PAYLOAD,
    decode_header,
    decode_message,
    deserialize,
    encode_header,
    encode_message,
    serialize,
)


def _sample_header() -> Header:
    return Header(
        version=0,
        category=MessageCategory.RESPONSE,
        tag=0x42,
        return_code=0xCD,
        opcode=0xAB,
        immediate_a=0x23,
        payload_len=0x1FFF,
        immediate_b=0x12345678,
    )


def test_encode_header_known_bytes():
    """The reference header should encode byte for byte."""
    data = encode_header(_sample_header())
    assert data == bytes.fromhex("01 42 CD AB 23 00 FF 1F 78 56 34 12")


def test_encode_header_size():
    """Every encoded header is exactly 12 bytes."""
    assert len(encode_header(Header())) == HEADER_SIZE
    assert len(encode_header(_sample_header())) == HEADER_SIZE


def test_header_roundtrip():
    """Decoding an encoded header reproduces it."""
    header = _sample_header()
    assert decode_header(encode_header(header)) == header


def test_header_version_nibble():
    """Version lands in the high nibble and category in the low nibble."""
    data = encode_header(Header(version=0x3, category=MessageCategory.EVENT))
    assert data[0] == 0x32
    decoded = decode_header(data)
    assert decoded.version == 3
    assert decoded.category == MessageCategory.EVENT


def test_header_nibbles_truncated():
    """Version and category above 15 keep only their low 4 bits."""
    decoded = decode_header(encode_header(Header(version=0x15, category=0x1F)))
    assert decoded.version == 0x5
    assert decoded.category == 0xF


def test_header_reserved_byte_zero():
    """The reserved byte is always written as zero."""
    data = encode_header(Header(tag=0xFF, immediate_a=0xFF, payload_len=0xFFFF))
    assert data[5] == 0


def test_decode_header_ignores_reserved():
    """A non-zero reserved byte does not stop decoding."""
    data = bytearray(encode_header(_sample_header()))
    data[5] = 0x99
    assert decode_header(bytes(data)) == _sample_header()


def test_decode_header_short_buffer():
    """Fewer than 12 bytes is rejected as invalid input."""
    result = decode_header(b"\x01" * 11)
    assert isinstance(result, CodecError)
    assert result.kind == ErrorKind.INVALID_INPUT


@pytest.mark.parametrize(
    "field, value",
    [
        ("tag", 0x100),
        ("return_code", -1),
        ("opcode", 0x100),
        ("immediate_a", 0x100),
        ("payload_len", 0x10000),
        ("immediate_b", 0x100000000),
        ("version", -1),
    ],
)
def test_encode_header_rejects_out_of_range(field, value):
    """Fields that do not fit their wire width are invalid input."""
    result = encode_header(Header(**{field: value}))
    assert isinstance(result, CodecError)
    assert result.kind == ErrorKind.INVALID_INPUT


def test_encode_message_request():
    """A connect request is a bare header with the immediates set."""
    data = encode_message(build_connect(process_id=7, device_id=3, tag=0x11))
    assert len(data) == HEADER_SIZE
    header = decode_header(data)
    assert header.opcode == Opcode.CONNECT_DEVICE
    assert header.tag == 0x11
    assert header.immediate_a == 7
    assert header.immediate_b == 3
    assert header.payload_len == 0


def test_encode_message_sets_payload_len():
    """payload_len is filled in from the encoded device list."""
    devices = [DeviceEntry(1, b"abc"), DeviceEntry(2, b"")]
    data = encode_message(build_list_devices_response(tag=1, devices=devices))
    header = decode_header(data)
    assert header.payload_len == 5 + 2
    assert len(data) == HEADER_SIZE + header.payload_len


def test_encode_message_ignores_stale_payload_len():
    """A caller-supplied payload_len is replaced, not trusted."""
    message = build_list_devices()
    message.header.payload_len = 99
    assert decode_header(encode_message(message)).payload_len == 0


def test_message_roundtrip_list_response():
    """A ListDevices response decodes to the same header and devices."""
    devices = [DeviceEntry.from_text(i, f"dev{i}") for i in range(4)]
    message = build_list_devices_response(tag=0x33, devices=devices, total=10)
    decoded = decode_message(encode_message(message))
    assert isinstance(decoded, Message)
    assert decoded.devices == tuple(devices)
    assert decoded.header.immediate_a == 4
    assert decoded.header.immediate_b == 10
    assert decoded.header.tag == 0x33


def test_message_roundtrip_max_listing():
    """64 devices with 125-byte names fit in one message."""
    devices = [DeviceEntry(i, bytes([0x41 + i % 26]) * 125) for i in range(64)]
    data = encode_message(build_list_devices_response(tag=0, devices=devices))
    assert len(data) - HEADER_SIZE == 64 * 127 <= MAX_PAYLOAD
    assert decode_message(data).devices == tuple(devices)


def test_decode_message_truncated_payload():
    """A buffer shorter than header + payload_len is truncated."""
    message = build_list_devices_response(tag=0, devices=[DeviceEntry(1, b"name")])
    data = encode_message(message)
    result = decode_message(data[:-1])
    assert isinstance(result, CodecError)
    assert result.kind == ErrorKind.TRUNCATED


def test_decode_message_payload_len_too_large():
    """A declared payload over 8180 bytes overflows."""
    data = encode_header(Header(payload_len=MAX_PAYLOAD + 1))
    result = decode_message(data + bytes(MAX_PAYLOAD + 1))
    assert isinstance(result, CodecError)
    assert result.kind == ErrorKind.OVERFLOW


def test_decode_message_count_exceeds_payload():
    """Immediate A claiming more entries than the payload holds is truncated."""
    header = Header(
        category=MessageCategory.RESPONSE,
        opcode=Opcode.LIST_DEVICES,
        immediate_a=2,
        payload_len=3,
    )
    data = encode_header(header) + bytes([1, 1, 0x41])
    result = decode_message(data)
    assert isinstance(result, CodecError)
    assert result.kind == ErrorKind.TRUNCATED


def test_decode_message_leftover_payload():
    """Payload bytes not accounted for by the object are invalid input."""
    header = Header(category=MessageCategory.REQUEST, opcode=Opcode.CONNECT_DEVICE, payload_len=2)
    result = decode_message(encode_header(header) + b"\x00\x00")
    assert isinstance(result, CodecError)
    assert result.kind == ErrorKind.INVALID_INPUT


def test_decode_message_unknown_opcode():
    """Unknown opcodes decode as payload-less messages."""
    data = encode_header(Header(category=MessageCategory.RESPONSE, opcode=0x7F, immediate_a=9))
    decoded = decode_message(data)
    assert isinstance(decoded, Message)
    assert decoded.header.opcode == 0x7F
    assert decoded.devices == ()


def test_encode_message_oversized_payload():
    """More devices than a listing allows is rejected before encoding."""
    devices = [DeviceEntry(i % 256, b"x") for i in range(65)]
    result = encode_message(build_list_devices_response(tag=0, devices=devices))
    assert isinstance(result, CodecError)
    assert result.kind == ErrorKind.INVALID_INPUT


def test_serialize_header():
    """serialize dispatches headers to the header codec."""
    assert serialize(_sample_header(), ObjectType.HEADER) == encode_header(_sample_header())


def test_serialize_single_device():
    """The reference device entry encodes with its trailing NUL counted."""
    entry = DeviceEntry.from_text(0x21, "Device name")
    data = serialize(entry, ObjectType.DEVICE_LIST)
    assert data[:13] == bytes.fromhex("21 0C 44 65 76 69 63 65 20 6E 61 6D 65")
    assert data[13:] == b"\x00"


def test_serialize_null_rejected():
    """The null object type cannot be serialized."""
    result = serialize(Header(), ObjectType.NULL)
    assert isinstance(result, CodecError)
    assert result.kind == ErrorKind.INVALID_INPUT


def test_serialize_unknown_type_rejected():
    """Unknown object types cannot be serialized."""
    result = serialize(Header(), 9)
    assert isinstance(result, CodecError)
    assert result.kind == ErrorKind.INVALID_INPUT


def test_deserialize_header_consumed():
    """Deserializing a header reports 12 bytes consumed."""
    result = deserialize(encode_header(_sample_header()), ObjectType.HEADER)
    assert result == Decoded(value=_sample_header(), consumed=HEADER_SIZE)


def test_deserialize_null():
    """The null object type consumes nothing and yields an empty tuple."""
    assert deserialize(b"\x01\x02", ObjectType.NULL) == Decoded(value=(), consumed=0)


def test_deserialize_unknown_type_rejected():
    """Unknown object types cannot be deserialized."""
    result = deserialize(b"\x00" * 12, 42)
    assert isinstance(result, CodecError)
    assert result.kind == ErrorKind.INVALID_INPUT


def test_consumed_matches_produced():
    """Bytes consumed by deserialize equal bytes produced by serialize."""
    devices = [DeviceEntry(5, b"hello"), DeviceEntry(6, b""), DeviceEntry(7, b"\x00" * 125)]
    data = serialize(devices, ObjectType.DEVICE_LIST)
    result = deserialize(data, ObjectType.DEVICE_LIST, len(devices))
    assert result.consumed == len(data)
    assert result.value == tuple(devices)


def test_serialize_header_as_device_list():
    """A header handed to the device list codec is invalid input."""
    result = serialize(Header(), ObjectType.DEVICE_LIST)
    assert isinstance(result, CodecError)
    assert result.kind == ErrorKind.INVALID_INPUT


def test_serialize_devices_as_header():
    """Device entries handed to the header codec are invalid input."""
    result = serialize([DeviceEntry(1, b"a")], ObjectType.HEADER)
    assert isinstance(result, CodecError)
    assert result.kind == ErrorKind.INVALID_INPUT


def test_serialize_mixed_device_list():
    """A device list holding anything but entries is invalid input."""
    for obj in ([DeviceEntry(1, b"a"), Header()], b"\x01\x00", [DeviceEntry(1, "text")]):
        result = serialize(obj, ObjectType.DEVICE_LIST)
        assert isinstance(result, CodecError)
        assert result.kind == ErrorKind.INVALID_INPUT


def test_deserialize_missing_data():
    """Deserializing from no buffer is invalid input for every codec."""
    for object_type in (ObjectType.HEADER, ObjectType.DEVICE_LIST):
        result = deserialize(None, object_type)
        assert isinstance(result, CodecError)
        assert result.kind == ErrorKind.INVALID_INPUT


@pytest.mark.parametrize("field", ["tag", "opcode", "immediate_b", "version", "category"])
def test_encode_header_rejects_non_integer(field):
    """Non-integer header fields are invalid input, not a packing error."""
    result = encode_header(Header(**{field: 1.5}))
    assert isinstance(result, CodecError)
    assert result.kind == ErrorKind.INVALID_INPUT


def test_encode_header_rejects_non_header():
    """Only headers can be encoded as headers."""
    result = encode_header(None)
    assert isinstance(result, CodecError)
    assert result.kind == ErrorKind.INVALID_INPUT


def test_null_payload_matches_message_devices():
    """Null payloads decode to the same empty tuple a message carries."""
    assert deserialize(b"", ObjectType.NULL).value == Message().devices
