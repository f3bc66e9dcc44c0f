# test/test_cursor.py
import io
import struct

import pytest

from hpfdecode.core import ChunkTooLarge, TruncatedChunk, UnknownChunkKind
from hpfdecode.io.cursor import BodyCursor, ByteCursor, ChunkKind


def _cursor(data, **kw):
    return ByteCursor(io.BytesIO(data), **kw)


class TestByteCursor:
    """Chunk framing over a byte stream."""

    def test_reads_chunks_until_end_of_stream(self, hpf):
        data = hpf.header_chunk() + hpf.event_data_chunk(0) + hpf.index_chunk([])
        cur = _cursor(data)

        kinds = []
        while (c := cur.next_chunk()) is not None:
            kinds.append(c.kind)

        assert kinds == [ChunkKind.HEADER, ChunkKind.EVENT_DATA, ChunkKind.INDEX]
        assert cur.chunks_read == 3
        # further reads keep returning None
        assert cur.next_chunk() is None

    def test_payload_includes_prefix_and_offset_is_chunk_start(self, hpf):
        first = hpf.event_data_chunk(0)
        second = hpf.index_chunk([(0, 1, 0x3000, 1, 0)])
        cur = _cursor(first + second)

        c1 = cur.next_chunk()
        assert c1.offset == 0
        assert c1.length == len(first)
        assert bytes(c1.payload) == first

        c2 = cur.next_chunk()
        assert c2.offset == len(first)
        assert struct.unpack_from("<qq", c2.payload) == (0x6000, len(second))

    def test_empty_stream_is_end_of_stream(self):
        assert _cursor(b"").next_chunk() is None

    def test_short_prefix_is_end_of_stream(self):
        assert _cursor(b"\x00" * 15).next_chunk() is None

    def test_truncated_body_is_end_of_stream(self, hpf):
        data = hpf.header_chunk()
        assert _cursor(data[:-5]).next_chunk() is None

    def test_unknown_kind_is_fatal(self):
        data = struct.pack("<qq", 0x7000, 16)
        with pytest.raises(UnknownChunkKind) as info:
            _cursor(data).next_chunk()
        assert "0x7000" in str(info.value)
        assert info.value.offset == 0

    def test_length_over_buffer_is_fatal(self):
        data = struct.pack("<qq", 0x3000, 2048) + b"\0" * 2032
        with pytest.raises(ChunkTooLarge):
            _cursor(data, max_chunk_size=1024).next_chunk()

    def test_length_shorter_than_prefix_is_fatal(self):
        data = struct.pack("<qq", 0x5000, 8)
        with pytest.raises(TruncatedChunk):
            _cursor(data).next_chunk()


class TestBodyCursor:
    def test_typed_reads_advance(self):
        data = struct.pack("<iIq", -2, 0xFFFFFFFF, -(2**40)) + b"datx" + b"hello\0rest"
        body = BodyCursor(data)

        assert body.read_i32() == -2
        assert body.read_u32() == 0xFFFFFFFF
        assert body.read_i64() == -(2**40)
        assert body.read_fourcc() == "datx"
        assert body.read_cstring() == b"hello"
        assert body.remaining == 4

    def test_cstring_without_terminator_runs_to_end(self):
        body = BodyCursor(b"abc")
        assert body.read_cstring() == b"abc"
        assert body.remaining == 0

    def test_read_past_end_raises(self):
        body = BodyCursor(b"\x01\x02")
        with pytest.raises(TruncatedChunk):
            body.read_i32()

    def test_slice_bounds(self):
        body = BodyCursor(bytes(range(10)))
        assert bytes(body.slice(2, 3)) == b"\x02\x03\x04"
        assert body.pos == 0
        with pytest.raises(TruncatedChunk):
            body.slice(8, 4)

    def test_skip_moves_position(self):
        body = BodyCursor(b"\0" * 16 + struct.pack("<i", 7))
        body.skip(16)
        assert body.read_i32() == 7
        with pytest.raises(TruncatedChunk):
            body.skip(1)
