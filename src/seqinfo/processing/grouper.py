"""
Frame sequence detection for seqinfo.

Files arrive in walk order. A file whose name ends in a digit run joins the
most recently opened sequence when it shares that sequence's pattern, and
opens a new sequence otherwise. Only the most recent sequence is ever
widened: a pattern interrupted by another pattern starts a fresh record
when it shows up again. Walks that list a directory out of order will
split sequences.
"""

from __future__ import annotations

import os
from collections.abc import Iterable

from ..core.constants import FRAME_TOKEN
from ..core.types import Sequence
from ..utils.path import split_frame_name


class SequenceGrouper:
    """Single-pass streaming merge of frame-numbered file paths."""

    def __init__(self) -> None:
        self._sequences: list[Sequence] = []

    def add(self, path: str) -> Sequence | None:
        """Feed one file path.

        Args:
            path: File path as produced by the walk.

        Returns:
            Optional[Sequence]: The sequence the file was merged into, or None
            when the name carries no frame number.
        """
        dirname, basename = os.path.split(path)
        parts = split_frame_name(basename)
        if parts is None:
            return None
        prefix, digits, suffix = parts
        pattern = os.path.join(dirname, prefix + FRAME_TOKEN + suffix)

        current = self._sequences[-1] if self._sequences else None
        if current is None or current.name != pattern:
            current = Sequence(name=pattern, first_frame=digits, last_frame=digits)
            self._sequences.append(current)
        else:
            current.include(digits)
        return current

    @property
    def sequences(self) -> list[Sequence]:
        """Sequences in the order their patterns were first opened."""
        return list(self._sequences)


def group_sequences(paths: Iterable[str]) -> list[Sequence]:
    """Group an ordered stream of file paths into sequences."""
    grouper = SequenceGrouper()
    for p in paths:
        grouper.add(p)
    return grouper.sequences
