# hpfdecode/core/channel.py

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from .exceptions import SampleCountMismatch
from .metadata import ChannelInfo, SampleType


@dataclass(frozen=True, slots=True)
class ChannelLayout:
    """Where one channel's raw sample run lives inside a Data chunk."""
    column: int
    offset: int             # byte offset from the chunk start
    length: int             # byte length of the run
    sample_type: SampleType

    @property
    def n_samples(self) -> int:
        return self.length // self.sample_type.atom_size

    @property
    def n_bytes(self) -> int:
        """Bytes of whole samples in the run."""
        return self.n_samples * self.sample_type.atom_size


@dataclass(frozen=True, slots=True)
class ChannelSamples:
    """
    Raw samples of one channel for the Data chunk being processed.

    `raw` is a private copy, never a view onto the chunk buffer.
    """
    info: ChannelInfo
    raw: np.ndarray = field(repr=False)

    @property
    def name(self) -> str:
        return self.info.name

    @property
    def n(self) -> int:
        return int(self.raw.size)

    def to_physical(self) -> np.ndarray:
        return to_physical(self.raw, self.info.data_scale, self.info.data_offset)


def to_physical(raw: np.ndarray, scale: float, offset: float) -> np.ndarray:
    """physical = raw * scale + offset, in float64."""
    return np.asarray(raw, dtype=np.float64) * scale + offset


@dataclass(frozen=True, slots=True)
class DataBlock:
    """One decoded Data chunk: per-channel raw samples in ChannelInfo order."""
    group_id: int
    start_index: int
    layouts: tuple[ChannelLayout, ...] = field(repr=False)
    channels: tuple[ChannelSamples, ...] = field(repr=False)
    offset: int | None = None   # file offset of the Data chunk

    def __len__(self) -> int:
        return len(self.channels)

    @property
    def n_samples(self) -> int:
        """Samples per channel, taken from the first channel."""
        return self.channels[0].n if self.channels else 0

    def check_aligned(self) -> int:
        """
        Return the common per-channel sample count.

        Raises SampleCountMismatch if channels disagree, since rows are built
        by zipping columns sample by sample.
        """
        counts = [ch.n for ch in self.channels]
        if counts and any(c != counts[0] for c in counts):
            detail = ", ".join(f"{ch.name or ch.info.column}={ch.n}" for ch in self.channels)
            raise SampleCountMismatch(
                f"channels of data block starting at sample {self.start_index} "
                f"have different sample counts: {detail}",
                kind="data",
                offset=self.offset,
            )
        return counts[0] if counts else 0

    def physical(self) -> list[np.ndarray]:
        return [ch.to_physical() for ch in self.channels]
