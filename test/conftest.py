# test/conftest.py
"""Builders for small synthetic HPF files."""
import struct
from types import SimpleNamespace

import pytest


HEADER, CHANNEL_INFO, DATA, EVENT_DEFINITION, EVENT_DATA, INDEX = (
    0x1000, 0x2000, 0x3000, 0x4000, 0x5000, 0x6000,
)


def chunk(kind, body):
    """Frame `body` with the kind/length prefix (length includes the prefix)."""
    return struct.pack("<qq", kind, 16 + len(body)) + body


def header_chunk(date="2024-01-01 00.00.00.000", *, creator=b"datx", version=0x10000, index_offset=0, root="RecordingDate"):
    xml = f"<{root}>{date}</{root}>".encode() + b"\0"
    return chunk(HEADER, creator + struct.pack("<qq", version, index_offset) + xml)


def channel_xml(name, scale=1.0, offset=0.0, *, data_type="Int16", rate=1000.0, unit="V", extra=""):
    return (
        "<ChannelInformation>"
        f"<Name>{name}</Name>"
        f"<Unit>{unit}</Unit>"
        "<ChannelType>RandomDataChannel</ChannelType>"
        f"<DataType>{data_type}</DataType>"
        f"<DataScale>{scale}</DataScale>"
        f"<DataOffset>{offset}</DataOffset>"
        f"<PerChannelSampleRate>{rate}</PerChannelSampleRate>"
        f"{extra}"
        "</ChannelInformation>"
    )


def channel_info_chunk(channels, *, group_id=1, count=None, root="ChannelInformationData", encoding="utf-8"):
    """`channels` is a list of channel_xml() strings."""
    count = len(channels) if count is None else count
    xml = f"<{root}>{''.join(channels)}</{root}>".encode(encoding) + b"\0"
    return chunk(CHANNEL_INFO, struct.pack("<ii", group_id, count) + xml)


def data_chunk(columns, *, group_id=1, start_index=0, fmt="h", reverse_layout=False):
    """
    Data chunk with one sample run per column.

    Runs are laid out after the descriptor table; with reverse_layout the
    last channel's run comes first in the byte region.
    """
    fixed = 32 + 8 * len(columns)
    runs = [struct.pack(f"<{len(c)}{fmt}", *c) for c in columns]
    order = list(range(len(runs)))
    if reverse_layout:
        order.reverse()
    offsets = {}
    pos = fixed
    for i in order:
        offsets[i] = pos
        pos += len(runs[i])
    descriptors = b"".join(struct.pack("<ii", offsets[i], len(runs[i])) for i in range(len(runs)))
    region = b"".join(runs[i] for i in order)
    body = struct.pack("<iqi", group_id, start_index, len(columns)) + descriptors + region
    return chunk(DATA, body)


def event_definition_xml(name="Trigger", *, event_id=1, event_class=1, event_type="Point", extra=""):
    return (
        "<EventDefinition>"
        f"<Name>{name}</Name>"
        f"<Class>{event_class}</Class>"
        f"<ID>{event_id}</ID>"
        f"<Type>{event_type}</Type>"
        "<UsesIData1>True</UsesIData1>"
        "<DescriptionIData1>count</DescriptionIData1>"
        "<UsesDData1>False</UsesDData1>"
        f"{extra}"
        "</EventDefinition>"
    )


def event_definition_chunk(definitions, *, count=None):
    count = len(definitions) if count is None else count
    xml = f"<EventDefinitionData>{''.join(definitions)}</EventDefinitionData>".encode() + b"\0"
    return chunk(EVENT_DEFINITION, struct.pack("<i", count) + xml)


def event_data_chunk(count=0):
    return chunk(EVENT_DATA, struct.pack("<q", count) + b"\0" * 68 * count)


def index_chunk(entries):
    """`entries` is a list of 5-tuples."""
    body = struct.pack("<q", len(entries)) + b"".join(struct.pack("<5q", *e) for e in entries)
    return chunk(INDEX, body)


@pytest.fixture
def hpf():
    return SimpleNamespace(
        chunk=chunk,
        header_chunk=header_chunk,
        channel_xml=channel_xml,
        channel_info_chunk=channel_info_chunk,
        data_chunk=data_chunk,
        event_definition_xml=event_definition_xml,
        event_definition_chunk=event_definition_chunk,
        event_data_chunk=event_data_chunk,
        index_chunk=index_chunk,
    )


@pytest.fixture
def write_hpf(tmp_path):
    """Write a list of chunks (bytes) to a file and return its path."""
    def _write(chunks, name="rec.hpf"):
        path = tmp_path / name
        path.write_bytes(b"".join(chunks))
        return path
    return _write


@pytest.fixture
def two_channel_file(hpf, write_hpf):
    return write_hpf([
        hpf.header_chunk("2024-01-01 00.00.00.000"),
        hpf.channel_info_chunk([hpf.channel_xml("A", 1, 0), hpf.channel_xml("B", 2, 1)]),
        hpf.data_chunk([[10, 20], [5, 6]]),
    ])
