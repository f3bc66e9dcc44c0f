# hpfdecode/io/hpf_reader.py
from __future__ import annotations

from pathlib import Path
import logging
from typing import BinaryIO, Callable, Iterator

from hpfdecode.core.channel import DataBlock
from hpfdecode.core.config import MAX_CHUNK_SIZE
from hpfdecode.core.exceptions import DecodeError, DuplicateChunk, MissingChannelInfo
from hpfdecode.core.index import IndexAccumulator
from hpfdecode.core.metadata import ChannelInfo, FileHeader
from hpfdecode.io import decoders
from hpfdecode.io.cursor import ByteCursor, Chunk, ChunkKind

logger = logging.getLogger(__name__)


class HpfReader:
    """
    Sequential decoder for one HPF file.

    Walks the chunks in file order, decodes metadata chunks into reader
    state, and yields one DataBlock per Data chunk:

        with HpfReader("run.hpf") as reader:
            for block in reader.blocks():
                ...

    Any DecodeError ends the pass; there is no skip-and-continue.
    """

    def __init__(self, source: str | Path | BinaryIO, *, max_chunk_size: int = MAX_CHUNK_SIZE):
        if isinstance(source, (str, Path)):
            self.path: str | None = str(source)
            self._stream: BinaryIO = open(source, "rb")
            self._owns_stream = True
        else:
            self.path = getattr(source, "name", None)
            self._stream = source
            self._owns_stream = False
        self._cursor = ByteCursor(self._stream, max_chunk_size=max_chunk_size)

        self.header: FileHeader | None = None
        self.group_id: int | None = None
        self.channels: tuple[ChannelInfo, ...] = ()
        self.index = IndexAccumulator()
        self.event_definition_count = 0
        self.event_count = 0
        self._seen: set[ChunkKind] = set()

        self._handlers: dict[ChunkKind, Callable[[Chunk], DataBlock | None]] = {
            ChunkKind.HEADER: self._on_header,
            ChunkKind.CHANNEL_INFO: self._on_channel_info,
            ChunkKind.DATA: self._on_data,
            ChunkKind.EVENT_DEFINITION: self._on_event_definition,
            ChunkKind.EVENT_DATA: self._on_event_data,
            ChunkKind.INDEX: self._on_index,
        }

    # ------------------------------------------------------------------
    # Resource handling
    # ------------------------------------------------------------------
    def close(self) -> None:
        if self._owns_stream:
            self._stream.close()

    def __enter__(self) -> "HpfReader":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Iteration
    # ------------------------------------------------------------------
    def blocks(self) -> Iterator[DataBlock]:
        """Decode every chunk to the end of the stream, yielding data blocks."""
        while True:
            chunk = self._cursor.next_chunk()
            if chunk is None:
                break
            block = self.dispatch(chunk)
            if block is not None:
                yield block
        logger.info(
            "%s: %d chunks decoded, %d index entries",
            self.path or "<stream>", self._cursor.chunks_read, len(self.index),
        )

    def dispatch(self, chunk: Chunk) -> DataBlock | None:
        handler = self._handlers[chunk.kind]
        try:
            return handler(chunk)
        except DecodeError as e:
            e.attach(kind=chunk.kind.label, offset=chunk.offset)
            raise

    @property
    def channel_names(self) -> list[str]:
        return [c.name for c in self.channels]

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------
    def _once(self, kind: ChunkKind) -> None:
        if kind in self._seen:
            raise DuplicateChunk(f"{kind.label} chunk already seen; only one is allowed per file")
        self._seen.add(kind)

    def _on_header(self, chunk: Chunk) -> None:
        # the first header wins
        if self.header is not None:
            logger.warning("ignoring repeated header chunk at %#x", chunk.offset)
            return
        self.header = decoders.decode_header(chunk.body())

    def _on_channel_info(self, chunk: Chunk) -> None:
        self._once(chunk.kind)
        self.group_id, self.channels = decoders.decode_channel_info(chunk.body())
        logger.info("channels: %s", ", ".join(f"{c.name}:{c.data_type}" for c in self.channels))

    def _on_data(self, chunk: Chunk) -> DataBlock:
        if self.group_id is None:
            raise MissingChannelInfo("data chunk before any channelinfo chunk")
        return decoders.decode_data(chunk.body(), self.group_id, self.channels)

    def _on_event_definition(self, chunk: Chunk) -> None:
        self._once(chunk.kind)
        self.event_definition_count = len(decoders.decode_event_definition(chunk.body()))

    def _on_event_data(self, chunk: Chunk) -> None:
        self.event_count += decoders.decode_event_data(chunk.body())

    def _on_index(self, chunk: Chunk) -> None:
        self._once(chunk.kind)
        decoders.decode_index(chunk.body(), self.index)
