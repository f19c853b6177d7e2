"""MCP server exposing the EM API codec.

Lets an assistant build, encode, and decode EM API messages through the
Model Context Protocol, using the official Python MCP SDK with stdio
transport. The server holds no connection; every tool is a pure codec call.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from .models.device import DEVICE_NAME_MAX, DEVICES_MAX
from .models.message import Header
from .protocol.commands import (
    OPCODE_OBJECTS,
    build_connect,
    build_disconnect,
    build_list_devices,
)
from .protocol.errors import CodecError
from .protocol.framing import (
    HEADER_SIZE,
    MAX_MESSAGE_SIZE,
    MAX_PAYLOAD,
    decode_header as _decode_header,
    decode_message as _decode_message,
    encode_header as _encode_header,
    encode_message,
)
from .utils.printing import format_message
from .utils.strings import (
    LABEL_LOOKUPS,
    OPCODE_LABELS,
    RETURN_CODE_LABELS,
    category_label,
    object_label,
    opcode_label,
    return_code_label,
)

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "emapi",
    instructions="Build, encode, and decode EM API emulated device manager messages",
)


def _error(result: CodecError) -> dict[str, Any]:
    logger.info("Codec rejected input: %r", result)
    return {"error": result.detail, "kind": result.kind.name}


def _parse_hex(data: str) -> bytes | None:
    try:
        return bytes.fromhex(data.replace(":", " "))
    except ValueError:
        return None


def _describe_header(header: Header) -> dict[str, Any]:
    result = header.to_dict()
    result["category_label"] = category_label(header.category)
    result["opcode_label"] = opcode_label(header.opcode)
    result["return_code_label"] = return_code_label(header.return_code)
    return result


# ─── CODEC TOOLS ─────────────────────────────────────────────────────

@mcp.tool()
def encode_header(
    category: int = 0,
    tag: int = 0,
    return_code: int = 0,
    opcode: int = 0,
    immediate_a: int = 0,
    payload_len: int = 0,
    immediate_b: int = 0,
) -> dict[str, Any]:
    """Encode a 12-byte EM API header.

    Args:
        category: 0=Request, 1=Response, 2=Event.
        tag: Correlation tag echoed in the response.
        return_code: Outcome code (responses only).
        opcode: 0=Event, 1=List Devices, 2=Connect, 3=Disconnect.
        immediate_a: Opcode-specific argument A (0-255).
        payload_len: Bytes of payload following the header.
        immediate_b: Opcode-specific argument B (0-0xFFFFFFFF).
    """
    header = Header(
        category=category,
        tag=tag,
        return_code=return_code,
        opcode=opcode,
        immediate_a=immediate_a,
        payload_len=payload_len,
        immediate_b=immediate_b,
    )
    data = _encode_header(header)
    if isinstance(data, CodecError):
        return _error(data)
    return {"hex": data.hex(" "), "length": len(data)}


@mcp.tool()
def decode_header(data: str) -> dict[str, Any]:
    """Decode a 12-byte EM API header from hex.

    Args:
        data: Hex string, spaces or colons allowed (e.g. "01 42 cd ab ...").
    """
    raw = _parse_hex(data)
    if raw is None:
        return {"error": "Data must be a hex string"}
    header = _decode_header(raw)
    if isinstance(header, CodecError):
        return _error(header)
    return _describe_header(header)


@mcp.tool()
def build_request(
    operation: str,
    tag: int = 0,
    process_id: int = 0,
    device_id: int = 0,
    disconnect_all: bool = False,
    requested_count: int = 0,
    start_index: int = 0,
) -> dict[str, Any]:
    """Build and encode an EM API request.

    Args:
        operation: One of "connect", "disconnect", "list".
        tag: Correlation tag.
        process_id: Process id for connect/disconnect.
        device_id: Device id for connect.
        disconnect_all: Disconnect every device of the process.
        requested_count: Devices to list, 0 for all.
        start_index: First device number to list.
    """
    if operation == "connect":
        message = build_connect(process_id, device_id, tag=tag)
    elif operation == "disconnect":
        message = build_disconnect(process_id, disconnect_all, tag=tag)
    elif operation == "list":
        message = build_list_devices(requested_count, start_index, tag=tag)
    else:
        return {"error": f"Unknown operation '{operation}'. Valid: connect, disconnect, list"}

    data = encode_message(message)
    if isinstance(data, CodecError):
        return _error(data)
    return {
        "hex": data.hex(" "),
        "length": len(data),
        "summary": format_message(message),
    }


@mcp.tool()
def decode_message(data: str) -> dict[str, Any]:
    """Decode a complete EM API message (header plus payload) from hex.

    Args:
        data: Hex string of the whole message.
    """
    raw = _parse_hex(data)
    if raw is None:
        return {"error": "Data must be a hex string"}
    message = _decode_message(raw)
    if isinstance(message, CodecError):
        return _error(message)
    result = message.to_dict()
    result["header"] = _describe_header(message.header)
    result["summary"] = format_message(message)
    return result


@mcp.tool()
def lookup_label(kind: str, value: int) -> dict[str, Any]:
    """Look up the label of a protocol value.

    Args:
        kind: One of "category", "object", "opcode", "return_code".
        value: Numeric value to look up.
    """
    lookup = LABEL_LOOKUPS.get(kind)
    if lookup is None:
        return {"error": f"Unknown kind '{kind}'. Valid: {list(LABEL_LOOKUPS)}"}
    return {"kind": kind, "value": value, "label": lookup(value)}


# ─── MCP RESOURCES ───────────────────────────────────────────────────

@mcp.resource("emapi://catalog/opcodes")
def resource_opcodes() -> str:
    """Known opcodes and the objects their requests and responses carry."""
    opcodes = []
    for opcode, (req, rsp) in OPCODE_OBJECTS.items():
        opcodes.append({
            "opcode": int(opcode),
            "label": OPCODE_LABELS[opcode],
            "request_object": object_label(req),
            "response_object": object_label(rsp),
        })
    return json.dumps({"opcodes": opcodes})


@mcp.resource("emapi://catalog/return-codes")
def resource_return_codes() -> str:
    """Return codes and their meanings."""
    return json.dumps({
        "return_codes": [
            {"code": code, "label": label} for code, label in enumerate(RETURN_CODE_LABELS)
        ]
    })


@mcp.resource("emapi://limits")
def resource_limits() -> str:
    """Fixed sizes of the wire format."""
    return json.dumps({
        "header": HEADER_SIZE,
        "max_message": MAX_MESSAGE_SIZE,
        "max_payload": MAX_PAYLOAD,
        "max_device_name": DEVICE_NAME_MAX,
        "max_devices": DEVICES_MAX,
    })


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=logging.INFO)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
