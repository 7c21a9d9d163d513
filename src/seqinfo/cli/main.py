#!/usr/bin/env python3
"""
seqinfo: Report image sequences and movie files found under a directory.

Walks a search root, collapses frame-numbered images into sequences, probes
movie files with ffprobe, evaluates the configured field expressions for
every sequence and movie, and prints the table or writes it to an xlsx file.
"""

from __future__ import annotations

# Standard library imports
import argparse
import sys
from collections.abc import Sequence as SequenceABC
from pathlib import Path

# Local application imports
from ..config import AppSettings, load_report_config
from ..core.constants import DEFAULT_OUTPUT_FILE, DEFAULT_SEPARATOR, FFPROBE_BIN, MAX_WORKER_CAP
from ..core.types import Entity, Mov, Sequence
from ..errors import SeqinfoError, TimecodeError
from ..output.logger import SimpleLogger
from ..output.writers import print_table, write_xlsx
from ..processing.fields import FieldEvaluator, HelperTable
from ..processing.grouper import SequenceGrouper
from ..processing.table import TableAssembler, pick_worker_count
from ..tools.check import check_tools
from ..tools.probe import describe_movie
from ..utils.path import extension_of, normalize_exts, walk_files


def parse_args(argv: SequenceABC[str] | None = None, settings: AppSettings | None = None) -> argparse.Namespace:
    """Parse CLI arguments, taking defaults from the environment settings."""
    settings = settings or AppSettings()
    p = argparse.ArgumentParser(
        prog="seqinfo",
        description="Report image sequences and movie files under a search root.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    p.add_argument("searchroot", type=Path, nargs="?", help="Directory to scan")
    p.add_argument(
        "--config",
        default=settings.config,
        help="Path of config file (default may come from the SEQINFO_CONFIG environment variable)",
    )
    p.add_argument("--img-exts", default=settings.img_exts, help="Image sequence extensions, comma separated")
    p.add_argument("--mov-exts", default=settings.mov_exts, help="Movie extensions, comma separated")
    p.add_argument("--sep", default=DEFAULT_SEPARATOR, help="Field separator used when printing")
    p.add_argument("-v", "--verbose", action="store_true", help="Report errors from value calculation")
    p.add_argument("-w", "--write", action="store_true", help="Write an excel file instead of printing")
    p.add_argument(
        "-o",
        "--output",
        default=DEFAULT_OUTPUT_FILE,
        help="Excel file to write when -w is given; an existing file is replaced, an empty value prints instead",
    )
    p.add_argument("-m", "--max-workers", type=int, help=f"Max parallel workers (capped at {MAX_WORKER_CAP})")
    p.add_argument("-s", "--sequential", action="store_true", help="Evaluate fields on a single worker")
    p.add_argument("--check-tools", action="store_true", help="Verify external tools and exit")
    args = p.parse_args(argv)
    if args.searchroot is None and not args.check_tools:
        p.error("the following arguments are required: searchroot")
    return args


def find_entities(
    search_root: Path,
    img_exts: frozenset[str],
    mov_exts: frozenset[str],
    *,
    verbose: bool = False,
    ffprobe_bin: str = FFPROBE_BIN,
) -> tuple[list[Sequence], list[Mov]]:
    """
    Walk search_root and detect sequences and movies.

    Image files are grouped into sequences in walk order; each movie file is
    probed as it is found.

    Args:
        search_root: Root directory to scan
        img_exts: Extensions (no dot) of sequence frames
        mov_exts: Extensions (no dot) of movie files
        verbose: Render movie field errors into the fields
        ffprobe_bin: ffprobe executable

    Returns:
        Tuple of (sequences, movies), each in discovery order
    """
    grouper = SequenceGrouper()
    movies: list[Mov] = []
    for path in walk_files(search_root):
        ext = extension_of(path)
        if not ext:
            continue
        if ext in img_exts:
            grouper.add(path)
        if ext in mov_exts:
            movies.append(describe_movie(path, verbose=verbose, ffprobe_bin=ffprobe_bin))
    return grouper.sequences, movies


def main(argv: SequenceABC[str] | None = None) -> int:
    """CLI entry point."""
    settings = AppSettings()
    args = parse_args(argv, settings)
    logger = SimpleLogger(settings.log_file)

    if args.check_tools:
        ok, probs = check_tools(settings.ffprobe_bin)
        if ok:
            print(f"Tools OK: {settings.ffprobe_bin}")
            return 0
        for p in probs:
            logger.error(f"Missing: {p}")
        return 1

    write = bool(args.write and args.output)
    workers = pick_worker_count(args.max_workers, args.sequential)

    try:
        report = load_report_config(Path(args.config))
        evaluator = FieldEvaluator(
            report.seq.expressions(),
            report.mov.expressions(),
            HelperTable(allowed_commands=settings.allowed_command_set),
        )

        sequences, movies = find_entities(
            Path(args.searchroot),
            normalize_exts(args.img_exts.split(",")),
            normalize_exts(args.mov_exts.split(",")),
            verbose=args.verbose,
            ffprobe_bin=settings.ffprobe_bin,
        )
        if args.verbose:
            logger.info(f"found {len(sequences)} sequences and {len(movies)} movies; {workers} workers")

        entities: list[Entity] = [*sequences, *movies]
        assembler = TableAssembler(report.fields, evaluator, workers=workers, verbose=args.verbose, logger=logger)
        table = assembler.assemble(entities)
    except (SeqinfoError, TimecodeError) as e:
        logger.error(str(e))
        return 1

    if not write:
        print_table(table, args.sep)
        return 0

    try:
        out = write_xlsx(table, Path(args.output))
    except (OSError, ValueError) as e:
        logger.error(f"could not write {args.output}: {e}")
        return 1
    if args.verbose:
        logger.success(f"wrote {out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
