"""Text renderings of headers, device entries, messages, and raw buffers."""

from __future__ import annotations

from ..models.device import DeviceEntry
from ..models.message import Header, Message
from ..protocol.commands import MessageCategory, ObjectType
from .strings import category_label, opcode_label, return_code_label


def format_header(header: Header) -> str:
    """Render every header field in hex, one per line."""
    lines = [
        "emapi_hdr:",
        f"Version:           0x{header.version:02x}",
        f"Type:              0x{header.category:02x}",
        f"Tag:               0x{header.tag:02x}",
        f"Return Code:       0x{header.return_code:02x}",
        f"Opcode:            0x{header.opcode:02x}",
        f"Immediate: A       0x{header.immediate_a:02x}",
        f"Len:               0x{header.payload_len:04x}",
        f"Immediate: B       0x{header.immediate_b:08x}",
    ]
    return "\n".join(lines)


def format_device(entry: DeviceEntry) -> str:
    """Render an entry as ``"<id> - <name>"``."""
    return f"{entry.id:02d} - {entry.label}"


def format_object(obj, object_type: int) -> str:
    """Render an object of the given type, or ``""`` for types with no view."""
    if object_type == ObjectType.HEADER:
        return format_header(obj)
    if object_type == ObjectType.DEVICE_LIST:
        if isinstance(obj, DeviceEntry):
            return format_device(obj)
        return "\n".join(format_device(entry) for entry in obj)
    return ""


def format_message(message: Message) -> str:
    """One-line summary of a message followed by its device entries."""
    h = message.header
    category = category_label(h.category) or f"category {h.category}"
    opcode = opcode_label(h.opcode) or f"opcode 0x{h.opcode:02x}"
    summary = f"{category} {opcode} tag=0x{h.tag:02x} A=0x{h.immediate_a:02x} B=0x{h.immediate_b:08x}"
    if h.category == MessageCategory.RESPONSE:
        rc = return_code_label(h.return_code) or f"0x{h.return_code:02x}"
        summary += f" rc={rc}"
    lines = [summary]
    lines.extend(f"  {format_device(entry)}" for entry in message.devices)
    return "\n".join(lines)


def format_buffer(data: bytes, width: int = 4, show_index: bool = True) -> str:
    """Hex dump ``data`` with ``width`` bytes per row.

    Example with the defaults::

        0000: 01 42 cd ab
        0004: 23 00 ff 1f
    """
    if width < 1:
        raise ValueError(f"width must be at least 1, got {width}")
    rows = []
    for offset in range(0, len(data), width):
        text = data[offset : offset + width].hex(" ")
        rows.append(f"{offset:04x}: {text}" if show_index else text)
    return "\n".join(rows)
