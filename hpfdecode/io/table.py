# hpfdecode/io/table.py
from __future__ import annotations

import logging
from typing import Sequence, TextIO

import numpy as np

from hpfdecode.core.channel import DataBlock
from hpfdecode.core.config import DecodeConfig
from hpfdecode.core.metadata import ChannelInfo, FileHeader

logger = logging.getLogger(__name__)

SAMPLE_INDEX_COLUMN = "SampleIndex"


def fmt(value: float | int) -> str:
    """Render a number with 15 significant digits."""
    if isinstance(value, (int, np.integer)):
        return str(int(value))
    return format(float(value), ".15g")


class TableEmitter:
    """
    Writes data blocks as a delimited table, one row per retained sample.

    State carries across blocks: `data_lines` counts every sample row seen,
    `table_data_lines` counts rows actually written. The preamble goes out
    once, just before the first block's rows.
    """

    def __init__(self, out: TextIO, config: DecodeConfig | None = None):
        self.out = out
        self.config = config or DecodeConfig()
        self.data_lines = 0
        self.table_data_lines = 0
        self._started = False

    # ------------------------------------------------------------------
    # Preamble
    # ------------------------------------------------------------------
    def preamble(self, header: FileHeader | None, channels: Sequence[ChannelInfo]) -> str:
        cfg = self.config
        sep = cfg.separator
        lines: list[str] = []
        if cfg.preamble:
            rate = channels[0].per_channel_sample_rate if channels else 0.0
            lines.append(f"RecordingDate :{sep}{header.recording_date if header else ''}")
            lines.append(f"Channels Recorded {sep}{len(channels)}")
            lines.append(f"PerChannelSamplingFreq :{sep}{fmt(rate)}")
            if cfg.downsample:
                lines.append(f"DownsampleCount :{sep}{cfg.downsample_count}")
            lines.append(sep)
            lines.append(sep.join((
                "ChannelName", "ChannelNumber", "Units", "DataType", "RangeMin", "RangeMax",
                "DataScale", "DataOffset", "SensorScale", "SensorOffset",
            )))
            for c in channels:
                lines.append(sep.join((
                    c.name, fmt(c.data_index), c.unit, c.data_type, fmt(c.range_min), fmt(c.range_max),
                    fmt(c.data_scale), fmt(c.data_offset), fmt(c.sensor_scale), fmt(c.sensor_offset),
                )))
            lines.append(sep)
        names = [c.name for c in channels]
        if cfg.include_sample_index:
            names.insert(0, SAMPLE_INDEX_COLUMN)
        lines.append(sep.join(names))
        return "\n".join(lines) + "\n"

    # ------------------------------------------------------------------
    # Rows
    # ------------------------------------------------------------------
    def rows(self, block: DataBlock) -> list[str]:
        """
        Format the retained rows of `block` and advance the line counters.

        Raises SampleCountMismatch before touching the counters if the
        channels of the block are not the same length.
        """
        cfg = self.config
        sep = cfg.separator
        n = block.check_aligned()

        positions = self.data_lines + np.arange(n, dtype=np.int64)
        keep = np.flatnonzero(positions % cfg.keep_every == 0)
        self.data_lines += n
        if keep.size == 0:
            return []

        columns = [values[keep].tolist() for values in block.physical()]
        lines = []
        for k, i in enumerate(keep.tolist()):
            fields = [fmt(col[k]) for col in columns]
            if cfg.include_sample_index:
                fields.insert(0, str(block.start_index + i))
            lines.append(sep.join(fields))
        self.table_data_lines += len(lines)
        return lines

    def emit(self, block: DataBlock, header: FileHeader | None = None) -> int:
        """Write one block (and the preamble before the first); return rows written."""
        lines = self.rows(block)
        if not self._started:
            self.out.write(self.preamble(header, [ch.info for ch in block.channels]))
            self._started = True
        if lines:
            self.out.write("\n".join(lines) + "\n")
        self.out.flush()
        logger.debug(
            "block @ sample %d: %d rows written, %d/%d lines so far",
            block.start_index, len(lines), self.table_data_lines, self.data_lines,
        )
        return len(lines)
