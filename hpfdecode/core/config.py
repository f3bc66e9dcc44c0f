# hpfdecode/core/config.py
from __future__ import annotations

from dataclasses import dataclass

from .exceptions import InvalidConfig


DEFAULT_CHUNK_SIZE = 64 * 1024       # what QuickDAQ writes
MAX_CHUNK_SIZE = 1024 * 1024         # largest chunk accepted by default


@dataclass(frozen=True)
class DecodeConfig:
    """
    Options for decoding an HPF file into a table.

    downsample:
      - True: write only every `downsample_count`-th sample row.
      - False: write every row.
    downsample_count:
      Keep rows whose running sample number n (0-based) satisfies
      n % downsample_count == 0.
    include_sample_index:
      Prefix each row with its absolute sample index.
    separator:
      Field separator of the output table.
    max_chunk_size:
      Largest chunk (in bytes, prefix included) the decoder accepts.
    preamble:
      - True: write the recording/channel description block before the table.
      - False: write only the column-name line.
    """
    downsample: bool = True
    downsample_count: int = 1000
    include_sample_index: bool = False
    separator: str = "\t"
    max_chunk_size: int = MAX_CHUNK_SIZE
    preamble: bool = True

    def __post_init__(self) -> None:
        if int(self.downsample_count) < 1:
            raise InvalidConfig("downsample_count must be >= 1")
        if int(self.max_chunk_size) < 16:
            raise InvalidConfig("max_chunk_size must hold at least the 16-byte chunk prefix")
        if not isinstance(self.separator, str) or not self.separator:
            raise InvalidConfig("separator must be a non-empty string")

    @property
    def keep_every(self) -> int:
        return int(self.downsample_count) if self.downsample else 1
