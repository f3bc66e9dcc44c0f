# hpfdecode/io/load.py
from __future__ import annotations

from pathlib import Path
from typing import TextIO

import numpy as np

from hpfdecode.core import DecodeConfig, InvalidRecording, Recording, TimeSeries
from hpfdecode.core.timeseries import time_axis
from hpfdecode.io.hpf_reader import HpfReader
from hpfdecode.io.table import TableEmitter


def convert_hpf(path: str | Path, out: TextIO, config: DecodeConfig | None = None) -> TableEmitter:
    """Stream an HPF file into a delimited table on `out`."""
    config = config or DecodeConfig()
    emitter = TableEmitter(out, config)
    with HpfReader(path, max_chunk_size=config.max_chunk_size) as reader:
        for block in reader.blocks():
            emitter.emit(block, reader.header)
    return emitter


def load_hpf(path: str | Path, config: DecodeConfig | None = None) -> Recording:
    """
    Decode a whole HPF file into memory, one TimeSeries per channel.

    Intended for files that fit in memory; downsampling from `config` is
    applied the same way as for the table.
    """
    config = config or DecodeConfig()
    every = config.keep_every
    seen = 0
    indices: list[np.ndarray] = []
    values: list[list[np.ndarray]] = []

    with HpfReader(path, max_chunk_size=config.max_chunk_size) as reader:
        for block in reader.blocks():
            n = block.check_aligned()
            keep = np.flatnonzero((seen + np.arange(n, dtype=np.int64)) % every == 0)
            seen += n
            if not values:
                values = [[] for _ in block.channels]
            indices.append(block.start_index + keep)
            for acc, physical in zip(values, block.physical()):
                acc.append(physical[keep])
        header = reader.header
        channels = reader.channels

    names = [c.name for c in channels]
    if len(set(names)) != len(names):
        raise InvalidRecording(f"duplicate channel names in {path}: {names}")

    sample_index = np.concatenate(indices) if indices else np.array([], dtype=np.int64)
    series: dict[str, TimeSeries] = {}
    for column, info in enumerate(channels):
        v = np.concatenate(values[column]) if values else np.array([], dtype=np.float64)
        series[info.name] = TimeSeries(
            time=time_axis(info, sample_index),
            values=v,
            unit=info.unit or None,
            name=info.name,
            attrs={"column": info.column, "data_type": info.data_type},
        )
    return Recording(header=header, channels=series, source=str(path))
