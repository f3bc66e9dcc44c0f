# hpfdecode/core/exceptions.py
from __future__ import annotations


class CoreError(Exception):
    """Base error for all hpfdecode exceptions."""


class InvalidConfig(CoreError):
    """Raised when a DecodeConfig is constructed with invalid values."""


# ---- Eager data model ----
class InvalidTimeSeries(CoreError):
    """Raised when a TimeSeries is constructed with invalid inputs."""


class InvalidRecording(CoreError):
    """Raised when a Recording is constructed with invalid inputs."""


class ChannelNotFound(CoreError, KeyError):
    """Raised when a requested channel name is not present."""


# ---- Decoding ----
class DecodeError(CoreError):
    """
    Base error for anything that makes an HPF file undecodable.

    `kind` and `offset` locate the offending chunk. They are filled in by the
    reader when the error escapes a chunk handler, so decoders can raise
    without knowing where they are in the file.
    """

    def __init__(self, message: str, *, kind: str | None = None, offset: int | None = None):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.offset = offset

    def attach(self, *, kind: str | None = None, offset: int | None = None) -> "DecodeError":
        if self.kind is None:
            self.kind = kind
        if self.offset is None:
            self.offset = offset
        return self

    def __str__(self) -> str:
        context = []
        if self.kind is not None:
            context.append(f"chunk={self.kind}")
        if self.offset is not None:
            context.append(f"offset={self.offset:#x}")
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"


# (a) structure of the byte stream
class StructuralError(DecodeError):
    """The chunk framing itself is broken."""


class ChunkTooLarge(StructuralError):
    """Declared chunk length exceeds the decode buffer."""


class UnknownChunkKind(StructuralError):
    """Chunk kind tag matches no known chunk kind."""


class TruncatedChunk(StructuralError):
    """A field or sample run lies beyond the end of its chunk."""


# (b) embedded XML documents
class SchemaError(DecodeError):
    """An embedded metadata document does not have the expected shape."""


class UnexpectedRoot(SchemaError):
    """Document root is missing or has the wrong name."""


class MalformedDocument(SchemaError):
    """Embedded document is not well-formed XML."""


class UnknownField(SchemaError):
    """Metadata element carries a tag with no known field."""


class InvalidBoolean(SchemaError):
    """Boolean field is neither 'True' nor 'False'."""


class InvalidFieldValue(SchemaError):
    """Field text cannot be converted to the field's type."""


class UnsupportedDataType(SchemaError):
    """Channel declares a sample data type that cannot be decoded."""


class CountMismatch(SchemaError):
    """Number of described items differs from the declared count."""


# (c) consistency between chunks
class ConsistencyError(DecodeError):
    """Chunks contradict each other."""


class DuplicateChunk(ConsistencyError):
    """A chunk kind that may occur once per file occurred again."""


class GroupIdMismatch(ConsistencyError):
    """Data chunk group id differs from the ChannelInfo group id."""


class MissingChannelInfo(ConsistencyError):
    """Data chunk arrived before any ChannelInfo chunk."""


class SampleCountMismatch(ConsistencyError):
    """Channels of one data block carry different numbers of samples."""
