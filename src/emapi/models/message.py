"""Header and message models.

Header layout (all multi-byte fields little-endian)::

    +-----------+-----+----+--------+-----+------+-------------+-------------+
    | ver | cat | tag | rc | opcode |  A  | rsvd | payload len | B           |
    | 4b  | 4b  | 1 B | 1B | 1 B    | 1 B | 1 B  | 2 bytes     | 4 bytes     |
    +-----------+-----+----+--------+-----+------+-------------+-------------+
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .device import DeviceEntry


@dataclass
class Header:
    """The fixed 12-byte prefix of every EM API message.

    ``immediate_a`` and ``immediate_b`` carry opcode-specific arguments so
    that simple operations need no payload.
    """

    version: int = 0
    category: int = 0
    tag: int = 0
    return_code: int = 0
    opcode: int = 0
    immediate_a: int = 0
    payload_len: int = 0
    immediate_b: int = 0

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "category": self.category,
            "tag": self.tag,
            "return_code": self.return_code,
            "opcode": self.opcode,
            "immediate_a": self.immediate_a,
            "payload_len": self.payload_len,
            "immediate_b": self.immediate_b,
        }


@dataclass
class Message:
    """A header plus its decoded payload object.

    Only ListDevices responses carry a payload, so the object is simply the
    tuple of device entries; it is empty for every other message.
    """

    header: Header = field(default_factory=Header)
    devices: tuple[DeviceEntry, ...] = ()

    def to_dict(self) -> dict:
        return {
            "header": self.header.to_dict(),
            "devices": [d.to_dict() for d in self.devices],
        }
