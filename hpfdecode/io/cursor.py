# hpfdecode/io/cursor.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
import logging
import struct
from typing import BinaryIO

from hpfdecode.core.config import DEFAULT_CHUNK_SIZE, MAX_CHUNK_SIZE
from hpfdecode.core.exceptions import (
    ChunkTooLarge,
    TruncatedChunk,
    UnknownChunkKind,
)

logger = logging.getLogger(__name__)

PREFIX = struct.Struct("<qq")   # kind, length


class ChunkKind(IntEnum):
    HEADER = 0x1000
    CHANNEL_INFO = 0x2000
    DATA = 0x3000
    EVENT_DEFINITION = 0x4000
    EVENT_DATA = 0x5000
    INDEX = 0x6000

    @property
    def label(self) -> str:
        return self.name.lower().replace("_", "")


@dataclass(frozen=True, slots=True)
class Chunk:
    """
    One framed chunk.

    `payload` is the whole chunk, 16-byte prefix included, as a view onto the
    cursor's buffer. It is only valid until the next call to next_chunk().
    """
    kind: ChunkKind
    length: int
    offset: int
    payload: memoryview = field(repr=False)

    def body(self) -> "BodyCursor":
        return BodyCursor(self.payload, kind=self.kind, offset=self.offset)


class ByteCursor:
    """
    Reads chunks one at a time from an open binary stream into one reusable
    buffer of `max_chunk_size` bytes.
    """

    def __init__(self, stream: BinaryIO, *, max_chunk_size: int = MAX_CHUNK_SIZE):
        self._stream = stream
        self._buffer = bytearray(max_chunk_size)
        self._view = memoryview(self._buffer)
        self.max_chunk_size = max_chunk_size
        self.chunks_read = 0

    def next_chunk(self) -> Chunk | None:
        """Return the next chunk, or None at the end of the stream."""
        here = self._stream.tell()
        prefix = self._stream.read(PREFIX.size)
        if len(prefix) < PREFIX.size:
            logger.debug("could only read %d bytes at %#x, end of stream", len(prefix), here)
            return None
        raw_kind, length = PREFIX.unpack(prefix)

        try:
            kind = ChunkKind(raw_kind)
        except ValueError:
            raise UnknownChunkKind(f"unknown chunk kind {raw_kind:#x}", offset=here) from None
        if length > self.max_chunk_size:
            raise ChunkTooLarge(
                f"buffer size {self.max_chunk_size:#x} is too small for chunk size {length:#x}",
                kind=kind.label,
                offset=here,
            )
        if length < PREFIX.size:
            raise TruncatedChunk(
                f"chunk length {length} is shorter than its own prefix",
                kind=kind.label,
                offset=here,
            )

        # the body re-reads its own prefix
        self._stream.seek(here)
        view = self._view[:length]
        n = self._stream.readinto(view)
        if n < length:
            logger.warning(
                "truncated %s chunk at %#x: %d of %d bytes present, end of stream",
                kind.label, here, n, length,
            )
            return None

        self.chunks_read += 1
        logger.debug(
            "chunk %s at %#x length %#x (%.2f default-size chunks from start)",
            kind.label, here, length, here / DEFAULT_CHUNK_SIZE,
        )
        return Chunk(kind=kind, length=length, offset=here, payload=view)


class BodyCursor:
    """Typed little-endian reads over one chunk payload, advancing an offset."""

    _I32 = struct.Struct("<i")
    _U32 = struct.Struct("<I")
    _I64 = struct.Struct("<q")

    def __init__(self, payload: memoryview | bytes, *, kind: ChunkKind | None = None, offset: int | None = None):
        self._data = memoryview(payload)
        self._kind = kind.label if kind is not None else None
        self._file_offset = offset
        self.pos = 0

    def __len__(self) -> int:
        return len(self._data)

    @property
    def file_offset(self) -> int | None:
        return self._file_offset

    @property
    def remaining(self) -> int:
        return len(self._data) - self.pos

    def _take(self, n: int, what: str) -> memoryview:
        if n < 0 or self.pos + n > len(self._data):
            raise TruncatedChunk(
                f"{what} at body offset {self.pos:#x} needs {n} bytes, chunk has {self.remaining} left",
                kind=self._kind,
                offset=self._file_offset,
            )
        out = self._data[self.pos:self.pos + n]
        self.pos += n
        return out

    def skip(self, n: int) -> None:
        self._take(n, "skipped bytes")

    def read_i32(self) -> int:
        return self._I32.unpack(self._take(4, "int32"))[0]

    def read_u32(self) -> int:
        return self._U32.unpack(self._take(4, "uint32"))[0]

    def read_i64(self) -> int:
        return self._I64.unpack(self._take(8, "int64"))[0]

    def read_fourcc(self) -> str:
        return bytes(self._take(4, "fourcc")).decode("latin-1")

    def read_cstring(self) -> bytes:
        """Bytes up to (not including) the next NUL, or to the end of the chunk."""
        rest = bytes(self._data[self.pos:])
        end = rest.find(b"\0")
        if end < 0:
            self.pos = len(self._data)
            return rest
        self.pos += end + 1
        return rest[:end]

    def slice(self, offset: int, length: int, what: str = "slice") -> memoryview:
        """View of [offset, offset+length) from the chunk start; position unchanged."""
        if offset < 0 or length < 0 or offset + length > len(self._data):
            raise TruncatedChunk(
                f"{what} [{offset:#x}, +{length:#x}) outside chunk of {len(self._data):#x} bytes",
                kind=self._kind,
                offset=self._file_offset,
            )
        return self._data[offset:offset + length]
