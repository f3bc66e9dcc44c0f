# test/test_exceptions.py
import pytest

from hpfdecode.core import (
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
    DecodeConfig,
)


def test_exception_inheritance_taxonomy():
    for cls in (ChunkTooLarge, UnknownChunkKind, TruncatedChunk):
        assert issubclass(cls, StructuralError)
    for cls in (UnexpectedRoot, MalformedDocument, UnknownField, InvalidBoolean, InvalidFieldValue, UnsupportedDataType, CountMismatch):
        assert issubclass(cls, SchemaError)
    for cls in (DuplicateChunk, GroupIdMismatch, MissingChannelInfo, SampleCountMismatch):
        assert issubclass(cls, ConsistencyError)
    for cls in (StructuralError, SchemaError, ConsistencyError):
        assert issubclass(cls, DecodeError)
        assert issubclass(cls, CoreError)
    for cls in (InvalidConfig, InvalidTimeSeries, InvalidRecording):
        assert issubclass(cls, CoreError)


def test_lookup_errors_can_be_raised_and_caught_as_keyerror():
    assert issubclass(ChannelNotFound, KeyError)
    with pytest.raises(KeyError):
        raise ChannelNotFound("A")


def test_decode_error_context():
    err = GroupIdMismatch("groupid 2 != 1")
    assert str(err) == "groupid 2 != 1"

    err.attach(kind="data", offset=0x400)
    assert err.kind == "data"
    assert str(err) == "groupid 2 != 1 (chunk=data, offset=0x400)"

    # context already set is kept
    err.attach(kind="index", offset=0)
    assert err.kind == "data"
    assert err.offset == 0x400


@pytest.mark.parametrize(
    "kwargs",
    [{"downsample_count": 0}, {"max_chunk_size": 8}, {"separator": ""}],
)
def test_invalid_config(kwargs):
    with pytest.raises(InvalidConfig):
        DecodeConfig(**kwargs)


def test_config_keep_every():
    assert DecodeConfig().keep_every == 1000
    assert DecodeConfig(downsample=False, downsample_count=5).keep_every == 1
