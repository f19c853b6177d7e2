"""Human-readable labels for protocol enumerations.

Each table is indexed by the enum value. Lookups outside a table return
``None`` instead of a placeholder so callers can tell "unknown" apart from a
real label.
"""

from __future__ import annotations

CATEGORY_LABELS: tuple[str, ...] = (
    "Request",   # MessageCategory.REQUEST
    "Response",  # MessageCategory.RESPONSE
    "Event",     # MessageCategory.EVENT
)

OBJECT_LABELS: tuple[str, ...] = (
    "Null",      # ObjectType.NULL
    "emob_hdr",  # ObjectType.HEADER
    "emob_dev",  # ObjectType.DEVICE_LIST
)

OPCODE_LABELS: tuple[str, ...] = (
    "Event Notification",
    "List Devices",
    "Connect Device",
    "Disconnect Device",
)

RETURN_CODE_LABELS: tuple[str, ...] = (
    "Success",
    "Background operation started",
    "Invalid input",
    "Unsupported",
    "Internal error",
    "Busy",
)


def _lookup(table: tuple[str, ...], value: int) -> str | None:
    if 0 <= value < len(table):
        return table[value]
    return None


def category_label(value: int) -> str | None:
    """Label of a message category, e.g. ``"Response"``."""
    return _lookup(CATEGORY_LABELS, value)


def object_label(value: int) -> str | None:
    """Label of an object type."""
    return _lookup(OBJECT_LABELS, value)


def opcode_label(value: int) -> str | None:
    """Label of an opcode, e.g. ``"List Devices"``."""
    return _lookup(OPCODE_LABELS, value)


def return_code_label(value: int) -> str | None:
    """Label of a return code."""
    return _lookup(RETURN_CODE_LABELS, value)


LABEL_LOOKUPS = {
    "category": category_label,
    "object": object_label,
    "opcode": opcode_label,
    "return_code": return_code_label,
}
