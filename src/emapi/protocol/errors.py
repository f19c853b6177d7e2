"""Result values returned by the codec.

Codec functions never raise on bad input. They hand back either the decoded
value or a :class:`CodecError` describing why the bytes or fields were
rejected, so callers can decide whether to drop the message or answer with
an error return code.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any


class ErrorKind(IntEnum):
    """Why a codec operation failed."""

    INVALID_INPUT = 1  # missing destination, bad object type, out-of-range field
    TRUNCATED = 2      # source shorter than the structure it declares
    OVERFLOW = 3       # declared length exceeds a fixed-capacity field


@dataclass(frozen=True)
class CodecError:
    """A failed encode or decode."""

    kind: ErrorKind
    detail: str = ""

    def __repr__(self) -> str:
        return f"CodecError({self.kind.name}: {self.detail})"


@dataclass(frozen=True)
class Decoded:
    """A successfully decoded object and the number of bytes it consumed."""

    value: Any
    consumed: int


def invalid_input(detail: str) -> CodecError:
    return CodecError(ErrorKind.INVALID_INPUT, detail)


def truncated(detail: str) -> CodecError:
    return CodecError(ErrorKind.TRUNCATED, detail)


def overflow(detail: str) -> CodecError:
    return CodecError(ErrorKind.OVERFLOW, detail)
