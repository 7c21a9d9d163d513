"""
Core data types for seqinfo.

Sequence and Mov are the two entity kinds a report row can describe. Field
expressions read their attributes, so attribute names here are part of the
configuration surface.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from ..errors import FieldError
from .constants import FRAME_TOKEN


class EntityKind(str, Enum):
    """Tag for the entity a report row describes."""

    SEQUENCE = "seq"
    MOVIE = "mov"


@dataclass
class Sequence:
    """A run of same-pattern, frame-numbered files.

    ``first_frame`` and ``last_frame`` keep the literal digit strings so file
    names rebuild with their original padding.
    """

    name: str
    first_frame: str
    last_frame: str

    kind = EntityKind.SEQUENCE

    @property
    def start(self) -> int:
        """First frame as an int; padding is dropped, use ``first_frame`` to keep it."""
        return int(self.first_frame)

    @property
    def end(self) -> int:
        """Last frame as an int; use ``last_frame`` for the padded digits."""
        return int(self.last_frame)

    @property
    def length(self) -> int:
        """Number of frames in the inclusive range."""
        return self.end - self.start + 1

    @property
    def first_file(self) -> str:
        return self._file_for(self.first_frame)

    @property
    def last_file(self) -> str:
        return self._file_for(self.last_frame)

    def include(self, digits: str) -> None:
        """Widen the frame range so it contains ``digits``."""
        frame = int(digits)
        if frame < self.start:
            self.first_frame = digits
        elif frame > self.end:
            self.last_frame = digits

    def _file_for(self, digits: str) -> str:
        head, _, tail = self.name.rpartition(FRAME_TOKEN)
        return head + digits + tail

    def __len__(self) -> int:
        return self.length


@dataclass
class Mov:
    """Report-ready description of one movie file."""

    file: str = ""
    timecode_in: str = ""
    timecode_out: str = ""
    duration: str = ""
    fps: str = ""
    resolution: str = ""
    codec: str = ""
    colorspace: str = ""
    errors: dict[str, FieldError] = field(default_factory=dict, repr=False, compare=False)

    kind = EntityKind.MOVIE


Entity = Union[Sequence, Mov]


@dataclass(frozen=True)
class Job:
    """One table cell to compute."""

    row: int
    column: int
    field_name: str
    entity: Entity
