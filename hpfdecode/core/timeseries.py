# hpfdecode/core/timeseries.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Mapping

import numpy as np

from .exceptions import ChannelNotFound, InvalidRecording, InvalidTimeSeries
from .metadata import ChannelInfo, FileHeader


@dataclass(frozen=True, slots=True)
class TimeSeries:
    """Immutable physical-unit signal: 1D time vector + 1D values vector."""

    time: np.ndarray = field(repr=False)
    values: np.ndarray = field(repr=False)
    unit: str | None = None
    name: str | None = None
    attrs: dict[str, Any] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        t = np.asarray(self.time)
        v = np.asarray(self.values)

        if t.ndim != 1:
            raise InvalidTimeSeries(f"`time` must be 1D, got shape {t.shape}")
        if v.ndim != 1:
            raise InvalidTimeSeries(f"`values` must be 1D, got shape {v.shape}")
        if t.size != v.size:
            raise InvalidTimeSeries(
                f"`time` and `values` must have same length, got {t.size} vs {v.size}"
            )

        if t.size > 0:
            if not np.isfinite(t).all():
                raise InvalidTimeSeries("`time` contains non-finite values (NaN/Inf).")
            if np.any(np.diff(t) < 0):
                raise InvalidTimeSeries("`time` must be monotonic non-decreasing.")

        if self.attrs is None:
            object.__setattr__(self, "attrs", {})
        elif not isinstance(self.attrs, dict):
            raise InvalidTimeSeries("`attrs` must be a dict.")

        object.__setattr__(self, "time", t)
        object.__setattr__(self, "values", v)

    @property
    def n(self) -> int:
        return int(self.time.size)

    @property
    def t_start(self) -> float | None:
        return None if self.n == 0 else float(self.time[0])

    @property
    def t_end(self) -> float | None:
        return None if self.n == 0 else float(self.time[-1])

    def to_numpy(self, *, copy: bool = False) -> tuple[np.ndarray, np.ndarray]:
        if copy:
            return self.time.copy(), self.values.copy()
        return self.time, self.values


def time_axis(info: ChannelInfo, sample_indices: np.ndarray) -> np.ndarray:
    """
    Seconds since the channel start for the given absolute sample indices.

    Uses TimeIncrement, falling back to 1/PerChannelSampleRate; with neither
    the sample index itself is returned.
    """
    idx = np.asarray(sample_indices, dtype=np.float64)
    if info.time_increment > 0:
        return idx * info.time_increment
    if info.per_channel_sample_rate > 0:
        return idx / info.per_channel_sample_rate
    return idx


@dataclass(frozen=True, slots=True)
class Recording:
    """
    A fully loaded HPF file: header plus one TimeSeries per channel.

    Channels are kept in ChannelInfo order and accessed by name:
    recording["Voltage 0"].
    """
    header: FileHeader | None
    channels: Mapping[str, TimeSeries] = field(default_factory=dict, repr=False)
    source: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.channels, Mapping):
            raise InvalidRecording("Recording.channels must be a mapping (e.g., dict).")

        normalized: dict[str, TimeSeries] = {}
        for key, ts in self.channels.items():
            if not isinstance(key, str):
                raise InvalidRecording("Recording.channels keys must be strings.")
            if not isinstance(ts, TimeSeries):
                raise InvalidRecording("Recording.channels values must be TimeSeries instances.")
            if ts.name is not None and ts.name != key:
                raise InvalidRecording(
                    f"Channel name mismatch: key '{key}' but TimeSeries.name is '{ts.name}'."
                )
            normalized[key] = ts

        object.__setattr__(self, "channels", normalized)

    # ---- dict-like API ----
    def __len__(self) -> int:
        return len(self.channels)

    def __iter__(self) -> Iterator[str]:
        return iter(self.channels)

    def __contains__(self, name: object) -> bool:
        return name in self.channels

    def __getitem__(self, name: str) -> TimeSeries:
        try:
            return self.channels[name]
        except KeyError as e:
            raise ChannelNotFound(name) from e

    def keys(self) -> Iterable[str]:
        return self.channels.keys()

    def items(self) -> Iterable[tuple[str, TimeSeries]]:
        return self.channels.items()

    def values(self) -> Iterable[TimeSeries]:
        return self.channels.values()

    def get(self, name: str, default: TimeSeries | None = None) -> TimeSeries | None:
        return self.channels.get(name, default)
