"""Protocol layer: header codec, payload codec, opcode registry, and builders."""

from .errors import CodecError, Decoded, ErrorKind
from .commands import MessageCategory, ObjectType, Opcode, ReturnCode
from .framing import (
    HEADER_SIZE,
    MAX_MESSAGE_SIZE,
    MAX_PAYLOAD,
    decode_header,
    decode_message,
    deserialize,
    encode_header,
    encode_message,
    serialize,
)
