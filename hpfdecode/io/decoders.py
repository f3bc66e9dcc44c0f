# hpfdecode/io/decoders.py
"""
Per-kind chunk body decoders.

Each decoder receives a BodyCursor positioned at the start of the chunk (the
16-byte kind/length prefix is part of the body) and returns plain records.
Cross-chunk rules (duplicates, group id binding) are enforced by the reader.
"""
from __future__ import annotations

import logging
from typing import Any, Sequence, TypeVar

import numpy as np

from hpfdecode.core.channel import ChannelLayout, ChannelSamples, DataBlock
from hpfdecode.core.exceptions import (
    ConsistencyError,
    CountMismatch,
    GroupIdMismatch,
    InvalidFieldValue,
    SchemaError,
    TruncatedChunk,
    UnknownField,
)
from hpfdecode.core.index import IndexAccumulator
from hpfdecode.core.metadata import (
    CHANNEL_FIELDS,
    EVENT_DEFINITION_FIELDS,
    ChannelInfo,
    EventDefinition,
    FieldTable,
    FileHeader,
    RecordingTime,
)
from hpfdecode.io import xmldoc
from hpfdecode.io.cursor import PREFIX, BodyCursor

logger = logging.getLogger(__name__)

T = TypeVar("T")

HEADER_ROOT = "RecordingDate"
CHANNEL_INFO_ROOT = "ChannelInformationData"
EVENT_DEFINITION_ROOT = "EventDefinitionData"


def _skip_prefix(body: BodyCursor) -> None:
    body.skip(PREFIX.size)


def build_record(cls: type[T], table: FieldTable, element: xmldoc.Element, **fixed: Any) -> T:
    """
    Build `cls` from the child elements of `element` through a field table.

    Every child tag must be in `table`; its text goes through the converter
    and lands on the mapped attribute. Unknown tags are fatal.
    """
    values: dict[str, Any] = dict(fixed)
    for child in xmldoc.children(element):
        try:
            attr, convert = table[child.tag]
        except KeyError:
            raise UnknownField(f"unknown child of <{element.tag}>: <{child.tag}>") from None
        try:
            values[attr] = convert(xmldoc.text(child))
        except SchemaError as e:
            raise type(e)(f"<{element.tag}>/<{child.tag}>: {e.message}") from e
    return cls(**values)


# ---------------------------------------------------------------------------
# Header
# ---------------------------------------------------------------------------
def decode_header(body: BodyCursor) -> FileHeader:
    _skip_prefix(body)
    creator = body.read_fourcc()
    file_version = body.read_i64()
    index_offset = body.read_i64()
    root = xmldoc.require_root(body.read_cstring(), HEADER_ROOT)
    recording_date = xmldoc.text(root)
    header = FileHeader(
        creator=creator,
        file_version=file_version,
        index_offset=index_offset,
        recording_date=recording_date,
        recording_time=RecordingTime.parse(recording_date),
    )
    logger.debug(
        "header: creator=%r fileversion=%#x indexchunkoffset=%#x recordingdate=%r (%s)",
        creator, file_version, index_offset, recording_date, header.recording_time,
    )
    return header


# ---------------------------------------------------------------------------
# ChannelInfo
# ---------------------------------------------------------------------------
def decode_channel_info(body: BodyCursor) -> tuple[int, tuple[ChannelInfo, ...]]:
    """Return (group id, channels in document order)."""
    _skip_prefix(body)
    group_id = body.read_i32()
    count = body.read_i32()
    root = xmldoc.require_root(body.read_cstring(), CHANNEL_INFO_ROOT)

    channels = tuple(
        build_record(ChannelInfo, CHANNEL_FIELDS, element, column=column)
        for column, element in enumerate(xmldoc.children(root))
    )
    if len(channels) != count:
        raise CountMismatch(f"observed {len(channels)} channels, header declares {count}")

    logger.debug("channelinfo: groupid=%d numberofchannels=%d", group_id, count)
    for c in channels:
        logger.debug(
            "channel %3d name=%r unit=%r datatype=%s scale=%r offset=%r rate=%r",
            c.column, c.name, c.unit, c.data_type, c.data_scale, c.data_offset, c.per_channel_sample_rate,
        )
    return group_id, channels


# ---------------------------------------------------------------------------
# Data
# ---------------------------------------------------------------------------
def decode_data(body: BodyCursor, group_id: int, channels: Sequence[ChannelInfo]) -> DataBlock:
    """
    Reassemble per-channel raw samples of one Data chunk.

    Descriptor i describes ChannelInfo column i. Sample runs are copied out
    of the chunk buffer, so the block stays valid after the next read.
    """
    _skip_prefix(body)
    chunk_group_id = body.read_i32()
    if chunk_group_id != group_id:
        raise GroupIdMismatch(
            f"groupid as recorded in data chunk {chunk_group_id} does not match "
            f"groupid as recorded in channelinfo {group_id}"
        )
    start_index = body.read_i64()
    count = body.read_i32()
    if count != len(channels):
        raise ConsistencyError(
            f"data chunk describes {count} channels, channelinfo declares {len(channels)}"
        )

    layouts: list[ChannelLayout] = []
    for info in channels:
        offset = body.read_i32()
        length = body.read_i32()
        layouts.append(ChannelLayout(column=info.column, offset=offset, length=length, sample_type=info.sample_type))

    samples = []
    for info, layout in zip(channels, layouts):
        run = body.slice(layout.offset, layout.length, what=f"channel {info.column} samples")
        # a trailing partial atom is ignored
        raw = np.frombuffer(run[:layout.n_bytes], dtype=layout.sample_type.dtype).copy()
        samples.append(ChannelSamples(info=info, raw=raw))
        logger.debug(
            "channel %3d data @ offset=%#x length=%#x datatype=%s atoms=%d",
            layout.column, layout.offset, layout.length, layout.sample_type.name, layout.n_samples,
        )

    logger.debug("data: groupid=%d datastartindex=%d channeldatacount=%d", chunk_group_id, start_index, count)
    return DataBlock(
        group_id=chunk_group_id,
        start_index=start_index,
        offset=body.file_offset,
        layouts=tuple(layouts),
        channels=tuple(samples),
    )


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------
def decode_event_definition(body: BodyCursor) -> list[EventDefinition]:
    _skip_prefix(body)
    count = body.read_i32()
    root = xmldoc.require_root(body.read_cstring(), EVENT_DEFINITION_ROOT)

    definitions = [
        build_record(EventDefinition, EVENT_DEFINITION_FIELDS, element, index=i)
        for i, element in enumerate(xmldoc.children(root))
    ]
    if len(definitions) != count:
        raise CountMismatch(f"observed eventdefs {len(definitions)} does not match definitioncount {count}")

    logger.debug(
        "eventdefinition: %d definitions: %s",
        count, ", ".join(f"{d.index}:{d.event_class}:{d.event_id}:{d.event_type}" for d in definitions),
    )
    return definitions


def decode_event_data(body: BodyCursor) -> int:
    """Read the event count; the event records themselves are not kept."""
    _skip_prefix(body)
    count = body.read_i64()
    if count < 0:
        raise InvalidFieldValue(f"negative event count {count}")
    logger.debug("eventdata: eventcount=%d (discarded)", count)
    return count


# ---------------------------------------------------------------------------
# Index
# ---------------------------------------------------------------------------
def decode_index(body: BodyCursor, index: IndexAccumulator) -> int:
    """Append this chunk's entries to `index`; return how many were read."""
    _skip_prefix(body)
    count = body.read_i64()
    if count < 0 or count * 40 > body.remaining:
        raise TruncatedChunk(f"index count {count} does not fit in {body.remaining} remaining bytes")
    for _ in range(count):
        entry = index.append(
            data_start_index=body.read_i64(),
            samples_per_channel=body.read_i64(),
            chunk_kind=body.read_i64(),
            group_id=body.read_i64(),
            file_offset=body.read_i64(),
        )
        logger.debug("%s", entry)
    logger.debug("index: indexcount=%d, %d entries in total", count, len(index))
    return count
