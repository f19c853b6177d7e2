"""Payload serialization and deserialization.

The only payload defined so far is the device-entry array returned by
ListDevices. Every length field read off the wire is checked against the
remaining buffer and the fixed capacities before it is used.
"""

from __future__ import annotations

from collections.abc import Iterable

from ..models.device import DEVICE_NAME_MAX, DEVICES_MAX, ENTRY_OVERHEAD, DeviceEntry
from .commands import ObjectType
from .errors import CodecError, Decoded, invalid_input, overflow, truncated


def encode_devices(entries: Iterable[DeviceEntry]) -> bytes | CodecError:
    """Serialize device entries back to back.

    Returns:
        ``sum(2 + name_len)`` bytes, or ``INVALID_INPUT`` if ``entries`` is
        not a sequence of :class:`DeviceEntry`, holds more than 64 entries,
        an id does not fit a byte, or a name is not bytes of at most 125.
    """
    if not isinstance(entries, Iterable) or isinstance(entries, (bytes, str)):
        return invalid_input(f"cannot encode {type(entries).__name__} as a device list")
    entries = list(entries)
    if len(entries) > DEVICES_MAX:
        return invalid_input(f"{len(entries)} devices exceeds the maximum of {DEVICES_MAX}")

    out = bytearray()
    for entry in entries:
        if not isinstance(entry, DeviceEntry):
            return invalid_input(f"cannot encode {type(entry).__name__} as a device entry")
        if not isinstance(entry.id, int) or not 0 <= entry.id <= 0xFF:
            return invalid_input(f"device id must be 0-255, got {entry.id}")
        if not isinstance(entry.name, (bytes, bytearray)):
            return invalid_input(f"device {entry.id} name must be bytes, got {type(entry.name).__name__}")
        if entry.name_len > DEVICE_NAME_MAX:
            return invalid_input(
                f"device {entry.id} name is {entry.name_len} bytes, max {DEVICE_NAME_MAX}"
            )
        out.append(entry.id)
        out.append(entry.name_len)
        out += entry.name
    return bytes(out)


def decode_devices(data: bytes, count: int = 1) -> Decoded | CodecError:
    """Deserialize ``count`` device entries from the start of ``data``.

    Args:
        data: Payload bytes.
        count: Number of entries to expect, normally immediate A of a
            ListDevices response.

    Returns:
        ``Decoded`` holding a tuple of entries and the bytes consumed, or
        an error. ``TRUNCATED`` if an entry runs past the end of ``data``,
        ``OVERFLOW`` if a name is longer than 125 bytes or more than 64
        entries are requested.
    """
    if data is None:
        return invalid_input("no data to decode device entries from")
    if not isinstance(count, int) or count < 0:
        return invalid_input(f"device count must be a non-negative integer, got {count}")
    if count > DEVICES_MAX:
        return overflow(f"{count} devices exceeds the maximum of {DEVICES_MAX}")

    entries: list[DeviceEntry] = []
    offset = 0
    for index in range(count):
        if len(data) - offset < ENTRY_OVERHEAD:
            return truncated(f"device entry {index} starts at {offset} past end of {len(data)} bytes")
        dev_id = data[offset]
        name_len = data[offset + 1]
        offset += ENTRY_OVERHEAD
        if name_len > DEVICE_NAME_MAX:
            return overflow(f"device entry {index} name length {name_len} exceeds {DEVICE_NAME_MAX}")
        if name_len > len(data) - offset:
            return truncated(
                f"device entry {index} name length {name_len} exceeds "
                f"remaining {len(data) - offset} bytes"
            )
        entries.append(DeviceEntry(id=dev_id, name=bytes(data[offset : offset + name_len])))
        offset += name_len

    return Decoded(value=tuple(entries), consumed=offset)


def encode_payload(object_type: int, devices: Iterable[DeviceEntry] = ()) -> bytes | CodecError:
    """Serialize the payload for a message of the given object type.

    Object types without a payload encode to nothing.
    """
    if object_type == ObjectType.DEVICE_LIST:
        return encode_devices(devices)
    return b""


def decode_payload(data: bytes, object_type: int, count: int = 1) -> Decoded | CodecError:
    """Deserialize a payload of the given object type."""
    if object_type == ObjectType.DEVICE_LIST:
        return decode_devices(data, count)
    return Decoded(value=(), consumed=0)

