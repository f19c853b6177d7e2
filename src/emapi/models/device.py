"""Device entry model: one record of a ListDevices response.

Layout::

    +------+----------+---------------------+
    | ID   | Name len | Name                |
    | 1 B  | 1 B      | name_len raw bytes  |
    +------+----------+---------------------+

The name is copied verbatim and is not required to carry a terminator.
"""

from __future__ import annotations

from dataclasses import dataclass

DEVICE_NAME_MAX = 125   # longest name a device entry can hold
DEVICES_MAX = 64        # most entries returned by one listing
ENTRY_OVERHEAD = 2      # id + name_len


@dataclass
class DeviceEntry:
    """An emulated device as reported by the EM API."""

    id: int = 0
    name: bytes = b""

    @property
    def name_len(self) -> int:
        return len(self.name)

    @property
    def encoded_size(self) -> int:
        return ENTRY_OVERHEAD + len(self.name)

    @property
    def label(self) -> str:
        """Printable name, cut at the first NUL."""
        return self.name.split(b"\x00")[0].decode("ascii", errors="replace")

    @classmethod
    def from_text(cls, dev_id: int, text: str) -> DeviceEntry:
        """Build an entry whose name is ``text`` plus a trailing NUL.

        Device managers write names this way, so ``name_len`` counts the
        terminator.
        """
        return cls(id=dev_id, name=text.encode("ascii", errors="replace") + b"\x00")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.label,
            "name_len": self.name_len,
            "name_hex": self.name.hex(" "),
        }
