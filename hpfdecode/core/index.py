# hpfdecode/core/index.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator


@dataclass(frozen=True, slots=True)
class IndexEntry:
    """One record of the trailing index chunk."""
    position: int           # running number over all entries read
    data_start_index: int
    samples_per_channel: int
    chunk_kind: int
    group_id: int
    file_offset: int

    def __str__(self) -> str:
        return (
            f"{self.position:>6d} datastartindex={self.data_start_index:#x}"
            f" perchanneldatalengthinsamples={self.samples_per_channel:#x}"
            f" chunkid={self.chunk_kind:#x} groupid={self.group_id:#x}"
            f" fileoffset={self.file_offset:#x}"
        )


@dataclass(slots=True)
class IndexAccumulator:
    """
    Collects index entries in document order.

    Kept for completeness only: decoding never seeks through it.
    """
    entries: list[IndexEntry] = field(default_factory=list, repr=False)

    def append(
        self,
        data_start_index: int,
        samples_per_channel: int,
        chunk_kind: int,
        group_id: int,
        file_offset: int,
    ) -> IndexEntry:
        entry = IndexEntry(
            position=len(self.entries),
            data_start_index=data_start_index,
            samples_per_channel=samples_per_channel,
            chunk_kind=chunk_kind,
            group_id=group_id,
            file_offset=file_offset,
        )
        self.entries.append(entry)
        return entry

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[IndexEntry]:
        return iter(self.entries)

    def __getitem__(self, i: int) -> IndexEntry:
        return self.entries[i]

    @property
    def total_samples(self) -> int:
        return sum(e.samples_per_channel for e in self.entries)
