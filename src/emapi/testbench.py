"""Command-line test bench for the EM API codec.

Each test builds a sample object, prints it, encodes it, dumps the bytes,
decodes them again and prints the result, so a round trip can be checked
by eye::

    emapi-testbench        # list the available tests
    emapi-testbench 1      # header round trip
"""

from __future__ import annotations

import argparse
import logging
import sys

from .models.device import DEVICE_NAME_MAX, ENTRY_OVERHEAD, DeviceEntry
from .models.message import Header
from .protocol.commands import (
    MessageCategory,
    ObjectType,
    ReturnCode,
    build_list_devices,
    build_list_devices_response,
)
from .protocol.errors import CodecError
from .protocol.framing import (
    HEADER_SIZE,
    MAX_MESSAGE_SIZE,
    MAX_PAYLOAD,
    decode_message,
    deserialize,
    encode_message,
    serialize,
)
from .utils.printing import format_buffer, format_message, format_object
from .utils.strings import CATEGORY_LABELS, OBJECT_LABELS, OPCODE_LABELS, RETURN_CODE_LABELS

logger = logging.getLogger(__name__)


def print_strings() -> int:
    for i, label in enumerate(OPCODE_LABELS):
        print(f"emop {i}: {label}")
    for i, label in enumerate(CATEGORY_LABELS):
        print(f"emmt {i}: {label}")
    for i, label in enumerate(OBJECT_LABELS):
        print(f"emob {i}: {label}")
    for i, label in enumerate(RETURN_CODE_LABELS):
        print(f"emrc {i}: {label}")
    return 0


def verify_object(obj, object_type: ObjectType, count: int = 1) -> int:
    """Print, serialize, dump, deserialize, and print ``obj`` again."""
    print(format_object(obj, object_type))

    data = serialize(obj, object_type)
    if isinstance(data, CodecError):
        logger.error("Serialize failed: %r", data)
        return 1
    print(format_buffer(data))

    decoded = deserialize(data, object_type, count)
    if isinstance(decoded, CodecError):
        logger.error("Deserialize failed: %r", decoded)
        return 1
    logger.debug("Consumed %d of %d bytes", decoded.consumed, len(data))
    print(format_object(decoded.value, object_type))
    return 0


def verify_header() -> int:
    header = Header(
        version=0,
        category=MessageCategory.RESPONSE,
        tag=0x42,
        return_code=0xCD,
        opcode=0xAB,
        immediate_a=0x23,
        payload_len=0x1FFF,
        immediate_b=0x12345678,
    )
    return verify_object(header, ObjectType.HEADER)


def verify_device() -> int:
    return verify_object(DeviceEntry.from_text(0x21, "Device name"), ObjectType.DEVICE_LIST)


def verify_sizes() -> int:
    print("Sizeof:")
    print(f"header:                   {HEADER_SIZE}")
    print(f"device entry (max):       {ENTRY_OVERHEAD + DEVICE_NAME_MAX}")
    print(f"message (max):            {MAX_MESSAGE_SIZE}")
    print(f"payload (max):            {MAX_PAYLOAD}")
    return 0


def verify_message() -> int:
    """Round trip a ListDevices request and its response."""
    request = build_list_devices(tag=0x07)
    response = build_list_devices_response(
        tag=request.header.tag,
        devices=[DeviceEntry.from_text(i, f"emu{i}") for i in range(3)],
        total=5,
        return_code=ReturnCode.SUCCESS,
    )
    for message in (request, response):
        print(format_message(message))
        data = encode_message(message)
        if isinstance(data, CodecError):
            logger.error("Encode failed: %r", data)
            return 1
        print(format_buffer(data))
        decoded = decode_message(data)
        if isinstance(decoded, CodecError):
            logger.error("Decode failed: %r", decoded)
            return 1
        print(format_message(decoded))
    return 0


TESTS = [
    ("strings", print_strings),
    ("emapi_hdr", verify_header),
    ("emapi_dev", verify_device),
    ("sizeof()", verify_sizes),
    ("message", verify_message),
]


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="EM API codec test bench")
    parser.add_argument("test", nargs="?", type=int, help="index of the test to run")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    if args.test is None:
        for i, (name, _) in enumerate(TESTS):
            print(f"TEST {i}: {name}")
        return 0

    if not 0 <= args.test < len(TESTS):
        logger.error("No test %d (valid: 0-%d)", args.test, len(TESTS) - 1)
        return 1

    name, func = TESTS[args.test]
    print(f"TEST {args.test}: {name}")
    return func()


if __name__ == "__main__":
    sys.exit(main())
