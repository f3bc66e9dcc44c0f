# hpfdecode/core/metadata.py
from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Any, Callable

import numpy as np

from .exceptions import (
    InvalidBoolean,
    InvalidFieldValue,
    UnsupportedDataType,
)


_LEADING_INT = re.compile(r"^\s*[+-]?\d+")
_LEADING_FLOAT = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def leading_int(text: str) -> int:
    """Parse the leading integer of `text` the way C's atol does (0 if none)."""
    m = _LEADING_INT.match(text or "")
    return int(m.group()) if m else 0


def leading_float(text: str) -> float:
    """Parse the leading number of `text` the way C's atof does (0.0 if none)."""
    m = _LEADING_FLOAT.match(text or "")
    return float(m.group()) if m else 0.0


def parse_bool(text: str) -> bool:
    if text == "True":
        return True
    if text == "False":
        return False
    raise InvalidBoolean(f"expected 'True' or 'False', got {text!r}")


# ---------------------------------------------------------------------------
# Recording time
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class RecordingTime:
    """
    Timestamp decomposed positionally from ``YYYY-MM-DD hh.mm.ss.xxx``.

    The all-zero value means "unset"; it is produced for empty text and for
    text whose leading integer is 0.
    """
    text: str = ""
    year: int = 0
    month: int = 0
    day: int = 0
    hour: int = 0
    minute: int = 0
    second: int = 0
    subsecond: int = 0
    seconds: float = 0.0  # second + fraction, e.g. 7.25

    @classmethod
    def parse(cls, text: str) -> "RecordingTime":
        text = text or ""
        if not text or leading_int(text) == 0:
            return cls(text=text)
        return cls(
            text=text,
            year=leading_int(text[0:4]),
            month=leading_int(text[5:7]),
            day=leading_int(text[8:10]),
            hour=leading_int(text[11:13]),
            minute=leading_int(text[14:16]),
            second=leading_int(text[17:19]),
            subsecond=leading_int(text[20:]),
            seconds=leading_float(text[17:]),
        )

    @property
    def is_set(self) -> bool:
        return any((self.year, self.month, self.day, self.hour, self.minute, self.second, self.subsecond))

    def __str__(self) -> str:
        return (
            f"{self.year:04d}-{self.month:02d}-{self.day:02d}"
            f"|{self.hour:02d}.{self.minute:02d}.{self.second:02d}.{self.subsecond}"
        )


@dataclass(frozen=True, slots=True)
class FileHeader:
    creator: str            # FourCC, e.g. "datx"
    file_version: int
    index_offset: int       # file offset of the trailing index chunk
    recording_date: str     # raw RecordingDate text
    recording_time: RecordingTime


# ---------------------------------------------------------------------------
# Sample data types
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class SampleType:
    name: str               # canonical spelling, e.g. "Int16"
    dtype: np.dtype

    @property
    def atom_size(self) -> int:
        return int(self.dtype.itemsize)

    @property
    def is_signed(self) -> bool:
        return self.dtype.kind in "if"

    @property
    def is_float(self) -> bool:
        return self.dtype.kind == "f"


_SAMPLE_TYPES: dict[str, SampleType] = {
    t.name.lower(): t
    for t in (
        SampleType("Int16", np.dtype("<i2")),
        SampleType("UInt16", np.dtype("<u2")),
        SampleType("Int32", np.dtype("<i4")),
        SampleType("Float", np.dtype("<f4")),
        SampleType("Double", np.dtype("<f8")),
    )
}


def sample_type(name: str) -> SampleType:
    """Look up a declared data type name (case-insensitive)."""
    try:
        return _SAMPLE_TYPES[(name or "").strip().lower()]
    except KeyError:
        raise UnsupportedDataType(f"unknown sample data type {name!r}") from None


# ---------------------------------------------------------------------------
# Channel metadata
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class ChannelInfo:
    """
    Scaling and description of one logical channel, from the ChannelInfo chunk.

    `column` is the position of the channel element in the document; it fixes
    the column order of the output and the descriptor order of Data chunks.
    """
    column: int
    name: str = ""
    unit: str = ""
    channel_type: str = ""
    assigned_time_channel_index: int = 0
    data_type: str = "Int16"
    data_index: int = 0
    start_time: RecordingTime = RecordingTime()
    time_increment: float = 0.0
    range_min: int = 0
    range_max: int = 0
    data_scale: float = 1.0
    data_offset: float = 0.0
    sensor_scale: float = 1.0
    sensor_offset: float = 0.0
    per_channel_sample_rate: float = 0.0
    physical_channel_number: int = 0
    uses_sensor_values: bool = False
    thermocouple_type: str = ""
    temperature_unit: str = ""
    use_thermocouple_values: bool = False

    @property
    def sample_type(self) -> SampleType:
        return sample_type(self.data_type)


def _canonical_data_type(text: str) -> str:
    return sample_type(text).name


# tag -> (attribute, converter)
FieldTable = dict[str, tuple[str, Callable[[str], Any]]]

CHANNEL_FIELDS: FieldTable = {
    "Name": ("name", str),
    "Unit": ("unit", str),
    "ChannelType": ("channel_type", str),
    "AssignedTimeChannelIndex": ("assigned_time_channel_index", leading_int),
    "DataType": ("data_type", _canonical_data_type),
    "DataIndex": ("data_index", leading_int),
    "StartTime": ("start_time", RecordingTime.parse),
    "TimeIncrement": ("time_increment", leading_float),
    "RangeMin": ("range_min", leading_int),
    "RangeMax": ("range_max", leading_int),
    "DataScale": ("data_scale", leading_float),
    "DataOffset": ("data_offset", leading_float),
    "SensorScale": ("sensor_scale", leading_float),
    "SensorOffset": ("sensor_offset", leading_float),
    "PerChannelSampleRate": ("per_channel_sample_rate", leading_float),
    "PhysicalChannelNumber": ("physical_channel_number", leading_int),
    "UsesSensorValues": ("uses_sensor_values", parse_bool),
    "ThermocoupleType": ("thermocouple_type", str),
    "TemperatureUnit": ("temperature_unit", str),
    "UseThermocoupleValues": ("use_thermocouple_values", parse_bool),
}


# ---------------------------------------------------------------------------
# Event definitions
# ---------------------------------------------------------------------------
def _event_class(text: str) -> int:
    # only class 1 (Data Translation event) exists
    if leading_int(text) != 1:
        raise InvalidFieldValue(f"unknown event class {text!r}")
    return 1


def _event_id(text: str) -> int:
    value = leading_int(text)
    if value == 0:
        raise InvalidFieldValue(f"event id is 0 or uninterpretable: {text!r}")
    return value


def _event_type(text: str) -> str:
    t = (text or "").strip().lower()
    if t == "point":
        return "Point"
    if t == "ranged":
        return "Ranged"
    raise InvalidFieldValue(f"unknown event type {text!r}")


@dataclass(frozen=True, slots=True)
class EventDefinition:
    index: int
    name: str = ""
    description: str = ""
    event_class: int = 1
    event_id: int = 0
    event_type: str = "Point"
    uses_idata1: bool = False
    uses_idata2: bool = False
    uses_ddata1: bool = False
    uses_ddata2: bool = False
    uses_ddata3: bool = False
    uses_ddata4: bool = False
    description_idata1: str = ""
    description_idata2: str = ""
    description_ddata1: str = ""
    description_ddata2: str = ""
    description_ddata3: str = ""
    description_ddata4: str = ""
    parameter1: str = ""
    parameter2: str = ""
    tolerance: str = ""
    uses_parameter1: bool = False
    uses_parameter2: bool = False
    uses_tolerance: bool = False
    description_parameter1: str = ""
    description_parameter2: str = ""
    description_tolerance: str = ""

    def used_fields(self) -> dict[str, str]:
        """Descriptions of the optional data fields this event type fills in."""
        out: dict[str, str] = {}
        for key in ("idata1", "idata2", "ddata1", "ddata2", "ddata3", "ddata4",
                    "parameter1", "parameter2", "tolerance"):
            if getattr(self, f"uses_{key}"):
                out[key] = getattr(self, f"description_{key}")
        return out


EVENT_DEFINITION_FIELDS: FieldTable = {
    "Name": ("name", str),
    "Description": ("description", str),
    "Class": ("event_class", _event_class),
    "ID": ("event_id", _event_id),
    "Type": ("event_type", _event_type),
    "UsesIData1": ("uses_idata1", parse_bool),
    "UsesIData2": ("uses_idata2", parse_bool),
    "UsesDData1": ("uses_ddata1", parse_bool),
    "UsesDData2": ("uses_ddata2", parse_bool),
    "UsesDData3": ("uses_ddata3", parse_bool),
    "UsesDData4": ("uses_ddata4", parse_bool),
    "DescriptionIData1": ("description_idata1", str),
    "DescriptionIData2": ("description_idata2", str),
    "DescriptionDData1": ("description_ddata1", str),
    "DescriptionDData2": ("description_ddata2", str),
    "DescriptionDData3": ("description_ddata3", str),
    "DescriptionDData4": ("description_ddata4", str),
    "Parameter1": ("parameter1", str),
    "Parameter2": ("parameter2", str),
    "Tolerance": ("tolerance", str),
    "UsesParameter1": ("uses_parameter1", parse_bool),
    "UsesParameter2": ("uses_parameter2", parse_bool),
    "UsesTolerance": ("uses_tolerance", parse_bool),
    "DescriptionParameter1": ("description_parameter1", str),
    "DescriptionParameter2": ("description_parameter2", str),
    "DescriptionTolerance": ("description_tolerance", str),
}
