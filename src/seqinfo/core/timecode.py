"""
SMPTE-style timecode arithmetic for 24 and 30 base frame rates.

A Timecode stores an absolute frame count from 00:00:00:00. For 30-base
drop-frame timecode the count is the real number of frames, so the frame
numbers skipped by the drop-frame encoding (2 per minute, except every
tenth minute) are removed when parsing and reinserted when formatting.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import InvalidTimecodeError, UnsupportedBaseError

SUPPORTED_BASES = (24, 30)
TIMECODE_LENGTH = 11

# 30-base drop-frame chunk sizes in real frames
FRAMES_PER_10_MINUTES_DF = 17982
FRAMES_PER_MINUTE_DF = 1798


@dataclass
class Timecode:
    """Frame count with a base rate and optional drop-frame encoding."""

    base: int
    drop_frame: bool
    frame_count: int

    @classmethod
    def parse(cls, code: str, base: int, drop_frame: bool = False) -> Timecode:
        """Parse ``HH:MM:SS:FF`` (or ``HH:MM:SS;FF``) into a Timecode.

        Args:
            code: Timecode text, exactly 11 characters.
            base: Frame rate base, 24 or 30.
            drop_frame: Whether the code uses drop-frame numbering. Ignored
                for base 24, which never drops frames.

        Returns:
            Timecode: The parsed value.

        Raises:
            UnsupportedBaseError: If base is not 24 or 30.
            InvalidTimecodeError: If the text is not a well formed timecode.
        """
        if base not in SUPPORTED_BASES:
            raise UnsupportedBaseError(f"unknown base for timecode: {base}")
        if base == 24:
            drop_frame = False

        h, m, s, f = _split_code(code)
        frame_count = 3600 * h * base + 60 * m * base + s * base + f
        if drop_frame:
            total_minutes = 60 * h + m
            frame_count -= 2 * (total_minutes - total_minutes // 10)
        return cls(base=base, drop_frame=drop_frame, frame_count=frame_count)

    def add(self, frames: int) -> None:
        """Move the timecode by ``frames`` frames."""
        total = self.frame_count + frames
        if total < 0:
            raise ValueError(f"timecode cannot go below zero frames: {total}")
        self.frame_count = total

    def format(self) -> str:
        """Render the timecode, using ``;`` before the frame field when drop-frame."""
        frame = self.frame_count
        if self.drop_frame:
            chunks, remainder = divmod(frame, FRAMES_PER_10_MINUTES_DF)
            # the first minute of each 10 minute chunk keeps its two frame numbers
            minutes = (remainder - 2) // FRAMES_PER_MINUTE_DF if remainder >= 2 else 0
            frame += 18 * chunks + 2 * minutes

        base = self.base
        h = frame // base // 3600 % 24
        m = frame // base // 60 % 60
        s = frame // base % 60
        f = frame % base
        sep = ";" if self.drop_frame else ":"
        return f"{h:02d}:{m:02d}:{s:02d}{sep}{f:02d}"

    def __str__(self) -> str:
        return self.format()


def _split_code(code: str) -> tuple[int, int, int, int]:
    """Split validated timecode text into (hours, minutes, seconds, frames)."""
    if len(code) != TIMECODE_LENGTH:
        raise InvalidTimecodeError(f"invalid timecode: {code}")
    if code[2] != ":" or code[5] != ":" or code[8] not in ":;":
        raise InvalidTimecodeError(f"invalid timecode: {code}")

    groups = [code[i : i + 2] for i in range(0, TIMECODE_LENGTH, 3)]
    if not all(g.isascii() and g.isdigit() for g in groups):
        raise InvalidTimecodeError(f"invalid timecode: {code}")
    h, m, s, f = (int(g) for g in groups)
    return h, m, s, f
