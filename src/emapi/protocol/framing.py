"""Header codec and whole-message framing.

Message layout::

    +-----------+-----+----+--------+-----+------+-------------+-----------+-----------------+
    | ver | cat | tag | rc | opcode |  A  | rsvd | payload len |     B     |     Payload     |
    | 4b  | 4b  | 1 B | 1B | 1 B    | 1 B | 1 B  | 2 bytes LE  | 4 bytes LE| payload len B   |
    +-----------+-----+----+--------+-----+------+-------------+-----------+-----------------+

- ver: header format version, high nibble, currently 0
- cat: message category (request/response/event), low nibble
- rsvd: written as 0, ignored when read
- A/B: opcode-specific immediates
"""

from __future__ import annotations

import dataclasses
import struct

from ..models.device import DeviceEntry
from ..models.message import Header, Message
from .commands import ObjectType, object_for
from .errors import CodecError, Decoded, invalid_input, overflow, truncated
from .parser import decode_devices, decode_payload, encode_devices, encode_payload

HEADER_SIZE = 12
MAX_MESSAGE_SIZE = 8192
MAX_PAYLOAD = MAX_MESSAGE_SIZE - HEADER_SIZE  # 8180

# ver|cat, tag, rc, opcode, A, rsvd, payload len, B
HEADER_STRUCT = struct.Struct("<BBBBBBHI")

_FIELD_LIMITS = (
    ("tag", 0xFF),
    ("return_code", 0xFF),
    ("opcode", 0xFF),
    ("immediate_a", 0xFF),
    ("payload_len", 0xFFFF),
    ("immediate_b", 0xFFFFFFFF),
)


def encode_header(header: Header) -> bytes | CodecError:
    """Pack a header into exactly 12 bytes.

    ``version`` and ``category`` are truncated to 4 bits. Every other field
    must fit its byte width, otherwise ``INVALID_INPUT`` is returned.
    """
    if not isinstance(header, Header):
        return invalid_input(f"cannot encode {type(header).__name__} as a header")
    for name in ("version", "category"):
        if not isinstance(getattr(header, name), int):
            return invalid_input(f"{name} must be an integer, got {getattr(header, name)!r}")
    if header.version < 0 or header.category < 0:
        return invalid_input(
            f"version/category must not be negative, got {header.version}/{header.category}"
        )
    for name, limit in _FIELD_LIMITS:
        value = getattr(header, name)
        if not isinstance(value, int) or not 0 <= value <= limit:
            return invalid_input(f"{name} must be 0-{limit:#x}, got {value}")

    return HEADER_STRUCT.pack(
        ((header.version & 0x0F) << 4) | (header.category & 0x0F),
        header.tag,
        header.return_code,
        header.opcode,
        header.immediate_a,
        0,
        header.payload_len,
        header.immediate_b,
    )


def decode_header(data: bytes) -> Header | CodecError:
    """Unpack the first 12 bytes of ``data`` into a header."""
    if data is None or len(data) < HEADER_SIZE:
        size = 0 if data is None else len(data)
        return invalid_input(f"header needs {HEADER_SIZE} bytes, got {size}")

    ver_cat, tag, rc, opcode, a, _rsvd, payload_len, b = HEADER_STRUCT.unpack_from(data)
    return Header(
        version=(ver_cat >> 4) & 0x0F,
        category=ver_cat & 0x0F,
        tag=tag,
        return_code=rc,
        opcode=opcode,
        immediate_a=a,
        payload_len=payload_len,
        immediate_b=b,
    )


def encode_message(message: Message) -> bytes | CodecError:
    """Serialize a header and its payload into one wire buffer.

    The payload shape comes from the opcode registry and ``payload_len`` is
    filled in from the encoded payload, so callers never set it by hand.
    """
    if message is None:
        return invalid_input("no message to encode")

    payload = encode_payload(object_for(message.header), message.devices)
    if isinstance(payload, CodecError):
        return payload
    if len(payload) > MAX_PAYLOAD:
        return invalid_input(f"payload is {len(payload)} bytes, max {MAX_PAYLOAD}")

    header = encode_header(dataclasses.replace(message.header, payload_len=len(payload)))
    if isinstance(header, CodecError):
        return header
    return header + payload


def decode_message(data: bytes) -> Message | CodecError:
    """Parse one wire buffer into a message.

    ``data`` must hold exactly one message starting at offset 0; bytes after
    the declared payload are ignored. A device list is decoded using
    immediate A as the entry count.
    """
    header = decode_header(data)
    if isinstance(header, CodecError):
        return header

    if header.payload_len > MAX_PAYLOAD:
        return overflow(f"payload length {header.payload_len} exceeds {MAX_PAYLOAD}")
    end = HEADER_SIZE + header.payload_len
    if len(data) < end:
        return truncated(f"message declares {end} bytes, got {len(data)}")

    payload = data[HEADER_SIZE:end]
    decoded = decode_payload(payload, object_for(header), header.immediate_a)
    if isinstance(decoded, CodecError):
        return decoded
    if decoded.consumed != header.payload_len:
        return invalid_input(
            f"payload length {header.payload_len} but object used {decoded.consumed} bytes"
        )
    return Message(header=header, devices=decoded.value)


def serialize(obj, object_type: int) -> bytes | CodecError:
    """Serialize a header or a device list by object type.

    Args:
        obj: A :class:`Header`, an iterable of :class:`DeviceEntry`, or a
            single entry.
        object_type: Codec to use. ``NULL`` and unknown types are rejected.
    """
    if object_type == ObjectType.HEADER:
        if not isinstance(obj, Header):
            return invalid_input(f"cannot serialize {type(obj).__name__} as a header")
        return encode_header(obj)
    if object_type == ObjectType.DEVICE_LIST:
        if isinstance(obj, DeviceEntry):
            obj = (obj,)
        return encode_devices(obj)
    return invalid_input(f"cannot serialize object type {object_type}")


def deserialize(data: bytes, object_type: int, count: int = 1) -> Decoded | CodecError:
    """Deserialize a header or a device list by object type.

    ``count`` only applies to device lists. ``NULL`` consumes nothing and
    yields an empty tuple, matching payload-less messages.
    """
    if object_type == ObjectType.NULL:
        return Decoded(value=(), consumed=0)
    if object_type == ObjectType.HEADER:
        header = decode_header(data)
        if isinstance(header, CodecError):
            return header
        return Decoded(value=header, consumed=HEADER_SIZE)
    if object_type == ObjectType.DEVICE_LIST:
        return decode_devices(data, count)
    return invalid_input(f"cannot deserialize object type {object_type}")
