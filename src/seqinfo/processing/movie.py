"""
Movie descriptor building for seqinfo.

This module maps ffprobe JSON for a single movie file onto a Mov record:
- Pydantic models for the subset of ffprobe output that is read
- One function per Mov field, each failing independently with a FieldError
- The verbose/quiet rendering policy for failed fields
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..core.timecode import Timecode
from ..core.types import Mov
from ..errors import (
    FieldError,
    FieldErrorKind,
    MultipleVideoStreamsError,
    NoVideoStreamError,
    ProbeError,
    TimecodeError,
    UnsupportedBaseError,
)

# =============================================================================
# PROBE RECORD
# =============================================================================


class StreamTags(BaseModel):
    """Video stream tags."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    timecode: str = ""


class ProbeStream(BaseModel):
    """A video stream as reported by ffprobe."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    nb_frames: str = ""
    r_frame_rate: str = ""
    codec_name: str = ""
    profile: str = ""
    width: int = 0
    height: int = 0
    tags: StreamTags = Field(default_factory=StreamTags)


class FormatTags(BaseModel):
    """Container level tags."""

    model_config = ConfigDict(populate_by_name=True)

    foundry_colorspace: str = Field(default="", alias="uk.co.thefoundry.Colorspace")


class ProbeFormat(BaseModel):
    """Container information."""

    tags: FormatTags = Field(default_factory=FormatTags)


class ProbeOutput(BaseModel):
    """ffprobe output restricted to the selected video streams and the format."""

    streams: list[ProbeStream] = Field(default_factory=list)
    format: ProbeFormat = Field(default_factory=ProbeFormat)

    def video_stream(self) -> ProbeStream:
        """Return the only video stream.

        Raises:
            NoVideoStreamError: If there is no stream.
            MultipleVideoStreamsError: If there is more than one stream.
        """
        if not self.streams:
            raise NoVideoStreamError("no video streams")
        if len(self.streams) > 1:
            raise MultipleVideoStreamsError("too many video streams")
        return self.streams[0]


def parse_probe_json(data: str | bytes) -> ProbeOutput:
    """Decode ffprobe JSON output.

    Raises:
        ProbeError: If the output is not JSON or does not fit the probe schema.
    """
    try:
        return ProbeOutput.model_validate_json(data)
    except ValidationError as e:
        raise ProbeError(f"failed to decode ffprobe output: {e}") from e


# =============================================================================
# FRAME RATES
# =============================================================================


class FrameRate(NamedTuple):
    """A supported ffprobe r_frame_rate."""

    label: str
    base: int
    drop_frame: bool


FRAME_RATES: dict[str, FrameRate] = {
    "24/1": FrameRate("24", 24, False),
    "24000/1001": FrameRate("23.976", 24, True),
    "30/1": FrameRate("30", 30, False),
}


def lookup_frame_rate(raw: str) -> FrameRate:
    if not raw:
        raise FieldError(FieldErrorKind.MISSING_FRAME_RATE, "missing r_frame_rate information")
    rate = FRAME_RATES.get(raw)
    if rate is None:
        raise FieldError(FieldErrorKind.UNKNOWN_FRAME_RATE, f"unknown r_frame_rate: {raw}")
    return rate


# =============================================================================
# FIELDS
# =============================================================================


def movie_timecode_in(video: ProbeStream, fmt: ProbeFormat) -> str:
    return video.tags.timecode


def movie_timecode_out(video: ProbeStream, fmt: ProbeFormat) -> str:
    """Timecode of the last frame: timecode in + (frame count - 1)."""
    if not video.tags.timecode:
        return ""
    rate = lookup_frame_rate(video.r_frame_rate)
    if not video.nb_frames:
        raise FieldError(FieldErrorKind.MISSING_FRAME_COUNT, "missing nb_frames information")
    try:
        frames = int(video.nb_frames)
    except ValueError as e:
        raise FieldError(FieldErrorKind.BAD_FRAME_COUNT, f"invalid nb_frames: {video.nb_frames}") from e
    try:
        tc = Timecode.parse(video.tags.timecode, rate.base, rate.drop_frame)
        tc.add(frames - 1)
    except UnsupportedBaseError:
        raise
    except (TimecodeError, ValueError) as e:
        raise FieldError(FieldErrorKind.BAD_TIMECODE, str(e)) from e
    return tc.format()


def movie_duration(video: ProbeStream, fmt: ProbeFormat) -> str:
    if not video.nb_frames:
        raise FieldError(FieldErrorKind.MISSING_FRAME_COUNT, "missing nb_frames information")
    return video.nb_frames


def movie_fps(video: ProbeStream, fmt: ProbeFormat) -> str:
    return lookup_frame_rate(video.r_frame_rate).label


def movie_resolution(video: ProbeStream, fmt: ProbeFormat) -> str:
    if not video.width:
        raise FieldError(FieldErrorKind.BAD_DIMENSION, "missing width information")
    if not video.height:
        raise FieldError(FieldErrorKind.BAD_DIMENSION, "missing height information")
    return f"{video.width}*{video.height}"


# a word starts after whitespace or punctuation; digits and "_" continue it
WORD_START_RE = re.compile(r"(^|[^\w])(\w)")


def title_words(text: str) -> str:
    """Upper-case the first character of each word: ``mpeg2video`` -> ``Mpeg2video``."""
    return WORD_START_RE.sub(lambda m: m.group(1) + m.group(2).upper(), text)


def movie_codec(video: ProbeStream, fmt: ProbeFormat) -> str:
    if not video.codec_name:
        raise FieldError(FieldErrorKind.MISSING_CODEC, "missing codec_name information")
    if not video.profile:
        raise FieldError(FieldErrorKind.MISSING_CODEC, "missing codec_profile information")
    return f"{title_words(video.codec_name.lower())} {video.profile}"


def movie_colorspace(video: ProbeStream, fmt: ProbeFormat) -> str:
    return fmt.tags.foundry_colorspace


MOVIE_FIELDS: dict[str, Callable[[ProbeStream, ProbeFormat], str]] = {
    "timecode_in": movie_timecode_in,
    "timecode_out": movie_timecode_out,
    "duration": movie_duration,
    "fps": movie_fps,
    "resolution": movie_resolution,
    "codec": movie_codec,
    "colorspace": movie_colorspace,
}


def render_field(value: str | FieldError, verbose: bool) -> str:
    """Turn a field result into cell text: errors show their message only when verbose."""
    if isinstance(value, FieldError):
        return str(value) if verbose else ""
    return value


def build_mov(probe: ProbeOutput, file: str = "", *, verbose: bool = False) -> Mov:
    """Build a Mov from a probe record.

    Args:
        probe: Decoded ffprobe output.
        file: Source path recorded on the Mov.
        verbose: Put field error messages into the fields instead of leaving them empty.

    Returns:
        Mov: The descriptor, with failed fields also listed in ``errors``.

    Raises:
        NoVideoStreamError: If the record has no video stream.
        MultipleVideoStreamsError: If the record has several video streams.
    """
    video = probe.video_stream()
    mov = Mov(file=file)
    for name, compute in MOVIE_FIELDS.items():
        result: str | FieldError
        try:
            result = compute(video, probe.format)
        except FieldError as e:
            mov.errors[name] = e
            result = e
        setattr(mov, name, render_field(result, verbose))
    return mov
