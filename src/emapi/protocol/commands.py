"""Opcodes, object types, the opcode registry, and message builders.

Each opcode is used for both the request and its response. The wire format
carries no payload type marker, so the registry below tells a decoder which
object shape to expect for a given opcode and direction.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Iterable

from ..models.device import DeviceEntry
from ..models.message import Header, Message
from .errors import CodecError, invalid_input


class MessageCategory(IntEnum):
    """Message category carried in the low nibble of header byte 0."""

    REQUEST = 0
    RESPONSE = 1
    EVENT = 2


class ObjectType(IntEnum):
    """Serializable object shapes."""

    NULL = 0
    HEADER = 1
    DEVICE_LIST = 2


class Opcode(IntEnum):
    """Operation identifiers."""

    EVENT = 0x00
    LIST_DEVICES = 0x01
    CONNECT_DEVICE = 0x02
    DISCONNECT_DEVICE = 0x03


class ReturnCode(IntEnum):
    """Outcome of a request, set in responses."""

    SUCCESS = 0x00
    BACKGROUND_OP_STARTED = 0x01
    INVALID_INPUT = 0x02
    UNSUPPORTED = 0x03
    INTERNAL_ERROR = 0x04
    BUSY = 0x05


# Immediate A of a ListDevices request meaning "every device"
LIST_ALL = 0

# opcode -> (request object, response object)
OPCODE_OBJECTS: dict[Opcode, tuple[ObjectType, ObjectType]] = {
    Opcode.EVENT: (ObjectType.NULL, ObjectType.NULL),
    Opcode.LIST_DEVICES: (ObjectType.NULL, ObjectType.DEVICE_LIST),
    Opcode.CONNECT_DEVICE: (ObjectType.NULL, ObjectType.NULL),
    Opcode.DISCONNECT_DEVICE: (ObjectType.NULL, ObjectType.NULL),
}

_NO_OBJECTS = (ObjectType.NULL, ObjectType.NULL)


def request_object(opcode: int) -> ObjectType:
    """Object type carried by a request with this opcode.

    Opcodes this build does not know map to ``NULL`` so that newer peers
    can still be parsed; range-check the opcode first if that matters.
    """
    return OPCODE_OBJECTS.get(opcode, _NO_OBJECTS)[0]


def response_object(opcode: int) -> ObjectType:
    """Object type carried by a response with this opcode."""
    return OPCODE_OBJECTS.get(opcode, _NO_OBJECTS)[1]


def object_for(header: Header) -> ObjectType:
    """Object type implied by a header's category and opcode."""
    if header.category == MessageCategory.RESPONSE:
        return response_object(header.opcode)
    return request_object(header.opcode)


# ─── BUILDERS ─────────────────────────────────────────────────────────

def _fill(message: Message | None, opcode: Opcode, a: int, b: int) -> CodecError | None:
    if message is None:
        return invalid_input(f"no message to fill for {opcode.name}")
    message.header = Header(opcode=opcode, immediate_a=a, immediate_b=b)
    return None


def fill_connect(message: Message | None, process_id: int, device_id: int) -> CodecError | None:
    """Prepare a ConnectDevice request.

    Args:
        message: Message whose header is replaced.
        process_id: Process the device is attached to (immediate A).
        device_id: Device to connect (immediate B).

    Returns:
        ``None`` on success, or an ``INVALID_INPUT`` error if ``message``
        is missing.
    """
    return _fill(message, Opcode.CONNECT_DEVICE, process_id, device_id)


def fill_disconnect(
    message: Message | None, process_id: int, disconnect_all: bool
) -> CodecError | None:
    """Prepare a DisconnectDevice request.

    Args:
        message: Message whose header is replaced.
        process_id: Process owning the device(s) (immediate A).
        disconnect_all: Disconnect every device owned by the process
            (immediate B = 1) rather than only the process itself (B = 0).
    """
    return _fill(message, Opcode.DISCONNECT_DEVICE, process_id, 1 if disconnect_all else 0)


def fill_list_devices(
    message: Message | None, requested_count: int | None = None, start_index: int = 0
) -> CodecError | None:
    """Prepare a ListDevices request.

    Args:
        message: Message whose header is replaced.
        requested_count: How many devices to return. ``None`` or 0 asks
            for all of them (:data:`LIST_ALL`).
        start_index: Device number to start listing at (immediate B).
    """
    count = LIST_ALL if not requested_count else requested_count
    return _fill(message, Opcode.LIST_DEVICES, count, start_index)


def build_connect(process_id: int, device_id: int, tag: int = 0) -> Message:
    """Build a ConnectDevice request."""
    message = Message()
    fill_connect(message, process_id, device_id)
    message.header.tag = tag
    return message


def build_disconnect(process_id: int, disconnect_all: bool = False, tag: int = 0) -> Message:
    """Build a DisconnectDevice request."""
    message = Message()
    fill_disconnect(message, process_id, disconnect_all)
    message.header.tag = tag
    return message


def build_list_devices(
    requested_count: int | None = None, start_index: int = 0, tag: int = 0
) -> Message:
    """Build a ListDevices request."""
    message = Message()
    fill_list_devices(message, requested_count, start_index)
    message.header.tag = tag
    return message


def build_list_devices_response(
    tag: int,
    devices: Iterable[DeviceEntry],
    total: int | None = None,
    return_code: int = ReturnCode.SUCCESS,
) -> Message:
    """Build the response to a ListDevices request.

    Immediate A is the number of entries returned and immediate B the total
    number of devices known to the manager.
    """
    entries = tuple(devices)
    header = Header(
        category=MessageCategory.RESPONSE,
        tag=tag,
        return_code=return_code,
        opcode=Opcode.LIST_DEVICES,
        immediate_a=len(entries),
        immediate_b=len(entries) if total is None else total,
    )
    return Message(header=header, devices=entries)


def build_response(request: Message, return_code: int = ReturnCode.SUCCESS) -> Message:
    """Build a payload-less response echoing the request's tag and opcode."""
    header = Header(
        category=MessageCategory.RESPONSE,
        tag=request.header.tag,
        return_code=return_code,
        opcode=request.header.opcode,
    )
    return Message(header=header)
