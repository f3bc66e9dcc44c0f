# hpfdecode/core/__init__.py
"""
Core domain objects for hpfdecode.

This module defines the format-independent data model:
- FileHeader / ChannelInfo / EventDefinition: metadata decoded from chunks
- ChannelSamples / DataBlock: raw per-channel samples of one Data chunk
- IndexAccumulator: trailing index records
- TimeSeries / Recording: physical-unit signals of a fully loaded file
- DecodeConfig: decoding and output options

The core layer is independent from the byte layout of HPF files.
"""

from .config import DecodeConfig
from .metadata import (
    RecordingTime,
    FileHeader,
    SampleType,
    ChannelInfo,
    EventDefinition,
    sample_type,
)
from .channel import ChannelLayout, ChannelSamples, DataBlock, to_physical
from .index import IndexEntry, IndexAccumulator
from .timeseries import TimeSeries, Recording
from .exceptions import (
    CoreError,
    InvalidConfig,
    InvalidTimeSeries,
    InvalidRecording,
    ChannelNotFound,
    DecodeError,
    StructuralError,
    ChunkTooLarge,
    UnknownChunkKind,
    TruncatedChunk,
    SchemaError,
    UnexpectedRoot,
    MalformedDocument,
    UnknownField,
    InvalidBoolean,
    InvalidFieldValue,
    UnsupportedDataType,
    CountMismatch,
    ConsistencyError,
    DuplicateChunk,
    GroupIdMismatch,
    MissingChannelInfo,
    SampleCountMismatch,
)


__all__ = [
    # config
    "DecodeConfig",

    # metadata
    "RecordingTime",
    "FileHeader",
    "SampleType",
    "ChannelInfo",
    "EventDefinition",
    "sample_type",

    # samples
    "ChannelLayout",
    "ChannelSamples",
    "DataBlock",
    "to_physical",

    # index
    "IndexEntry",
    "IndexAccumulator",

    # eager model
    "TimeSeries",
    "Recording",

    # exceptions
    "CoreError",
    "InvalidConfig",
    "InvalidTimeSeries",
    "InvalidRecording",
    "ChannelNotFound",
    "DecodeError",
    "StructuralError",
    "ChunkTooLarge",
    "UnknownChunkKind",
    "TruncatedChunk",
    "SchemaError",
    "UnexpectedRoot",
    "MalformedDocument",
    "UnknownField",
    "InvalidBoolean",
    "InvalidFieldValue",
    "UnsupportedDataType",
    "CountMismatch",
    "ConsistencyError",
    "DuplicateChunk",
    "GroupIdMismatch",
    "MissingChannelInfo",
    "SampleCountMismatch",
]
