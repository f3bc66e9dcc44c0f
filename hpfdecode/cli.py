# hpfdecode/cli.py
from __future__ import annotations

import argparse
import logging
import sys

from hpfdecode.core import CoreError, DecodeConfig
from hpfdecode.core.config import MAX_CHUNK_SIZE
from hpfdecode.io.load import convert_hpf

logger = logging.getLogger("hpfdecode")

_ESCAPES = {"\\t": "\t"}


def separator(text: str) -> str:
    """Field separator from the command line; `\\t` typed in a shell means TAB."""
    return _ESCAPES.get(text, text)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="hpfdecode",
        description="Convert a QuickDAQ .hpf recording into a delimited text table on stdout.",
    )
    p.add_argument("file", help="HPF file to read")
    p.add_argument("-v", "--verbose", action="count", default=0,
                   help="diagnostics on stderr (-v info, -vv debug)")
    p.add_argument("--no-downsample", dest="downsample", action="store_false",
                   help="write every sample row")
    p.add_argument("-n", "--downsample-count", type=int, default=1000,
                   help="keep every N-th sample row (default: %(default)s)")
    p.add_argument("--sample-index", action="store_true",
                   help="prefix each row with its absolute sample index")
    p.add_argument("--sep", type=separator, default="\t",
                   help="field separator, \\t accepted for TAB (default: TAB)")
    p.add_argument("--max-chunk-size", type=int, default=MAX_CHUNK_SIZE,
                   help="largest chunk in bytes (default: %(default)s)")
    p.add_argument("--no-preamble", dest="preamble", action="store_false",
                   help="write only the column-name line before the rows")
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        stream=sys.stderr,
        level=level,
        format="%(name)-24s %(levelname)-7s %(message)s",
    )

    try:
        config = DecodeConfig(
            downsample=args.downsample,
            downsample_count=args.downsample_count,
            include_sample_index=args.sample_index,
            separator=args.sep,
            max_chunk_size=args.max_chunk_size,
            preamble=args.preamble,
        )
        emitter = convert_hpf(args.file, sys.stdout, config)
    except CoreError as e:
        logger.error("%s: %s", args.file, e)
        return 1
    except OSError as e:
        logger.error("cannot read %s: %s", args.file, e)
        return 1

    logger.info("%d of %d sample rows written", emitter.table_data_lines, emitter.data_lines)
    return 0


if __name__ == "__main__":
    sys.exit(main())
