"""
Error types for seqinfo.

Fatal errors derive from SeqinfoError and abort the run. FieldError and its
subclasses are per-cell failures that never escape the table assembly.
"""

from __future__ import annotations

from enum import Enum


class SeqinfoError(RuntimeError):
    """Base error type."""


class ConfigError(SeqinfoError):
    """Config contract violation."""


class WalkError(SeqinfoError):
    """Filesystem walk failed."""


class ProbeError(SeqinfoError):
    """ffprobe execution/parsing problem."""


class NoVideoStreamError(ProbeError):
    """Probe record has no video stream."""


class MultipleVideoStreamsError(ProbeError):
    """Probe record has more than one video stream."""


class TimecodeError(ValueError):
    """Base error for timecode construction."""


class InvalidTimecodeError(TimecodeError):
    """Timecode text is not in HH:MM:SS:FF layout."""


class UnsupportedBaseError(TimecodeError):
    """Timecode base is neither 24 nor 30."""


class FieldErrorKind(str, Enum):
    """Why a single report cell could not be computed."""

    MISSING_FRAME_RATE = "missing-frame-rate"
    UNKNOWN_FRAME_RATE = "unknown-frame-rate"
    MISSING_FRAME_COUNT = "missing-frame-count"
    BAD_FRAME_COUNT = "bad-frame-count"
    BAD_TIMECODE = "bad-timecode"
    BAD_DIMENSION = "bad-dimension"
    MISSING_CODEC = "missing-codec"
    EVALUATION = "evaluation"
    UNSAFE_COMMAND = "unsafe-command"


class FieldError(SeqinfoError):
    """A per-field failure, rendered into the cell or dropped."""

    def __init__(self, kind: FieldErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind


class FieldEvaluationError(FieldError):
    """A field expression failed while rendering against an entity."""


class HelperError(SeqinfoError):
    """A field helper function refused or failed."""


class CommandError(HelperError):
    """An allow-listed command could not be run or exited non-zero."""


class UnsafeCommandError(HelperError):
    """A command outside the allow-list was requested."""
