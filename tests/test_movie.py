from __future__ import annotations

import json

import pytest

from seqinfo.core.types import Mov
from seqinfo.errors import FieldErrorKind, MultipleVideoStreamsError, NoVideoStreamError, ProbeError
from seqinfo.processing.movie import ProbeOutput, build_mov, parse_probe_json


def make_probe(
    *,
    rate: str = "24000/1001",
    timecode: str | None = "00:00:00:00",
    frames: str | int | None = 22,
    width: int | None = 1920,
    height: int | None = 1080,
    codec: str = "prores",
    profile: str = "HQ",
    colorspace: str | None = None,
) -> dict:
    stream: dict = {"r_frame_rate": rate, "codec_name": codec, "profile": profile}
    if timecode is not None:
        stream["tags"] = {"timecode": timecode}
    if frames is not None:
        stream["nb_frames"] = frames
    if width is not None:
        stream["width"] = width
    if height is not None:
        stream["height"] = height
    fmt: dict = {}
    if colorspace is not None:
        fmt["tags"] = {"uk.co.thefoundry.Colorspace": colorspace}
    return {"streams": [stream], "format": fmt}


@pytest.mark.parametrize(
    "probe,expected",
    [
        (
            make_probe(frames="22"),
            Mov(
                timecode_in="00:00:00:00",
                timecode_out="00:00:00:21",
                duration="22",
                fps="23.976",
                resolution="1920*1080",
                codec="Prores HQ",
            ),
        ),
        (
            make_probe(frames="107", colorspace="rec709"),
            Mov(
                timecode_in="00:00:00:00",
                timecode_out="00:00:04:10",
                duration="107",
                fps="23.976",
                resolution="1920*1080",
                codec="Prores HQ",
                colorspace="rec709",
            ),
        ),
        (
            make_probe(timecode="12:14:20:17", frames="30"),
            Mov(
                timecode_in="12:14:20:17",
                timecode_out="12:14:21:22",
                duration="30",
                fps="23.976",
                resolution="1920*1080",
                codec="Prores HQ",
            ),
        ),
        (
            make_probe(frames="29", height=1134, profile="Standard", colorspace="Output - Rec.709"),
            Mov(
                timecode_in="00:00:00:00",
                timecode_out="00:00:01:04",
                duration="29",
                fps="23.976",
                resolution="1920*1134",
                codec="Prores Standard",
                colorspace="Output - Rec.709",
            ),
        ),
    ],
)
def test_build_mov_from_probe(probe: dict, expected: Mov):
    mov = build_mov(ProbeOutput.model_validate(probe))
    assert mov == expected
    assert mov.errors == {}


def test_numeric_frame_count_is_accepted():
    mov = build_mov(ProbeOutput.model_validate(make_probe(frames=22)))
    assert mov.duration == "22"
    assert mov.timecode_out == "00:00:00:21"


def test_file_is_recorded():
    mov = build_mov(ProbeOutput.model_validate(make_probe()), "/shows/a.mov")
    assert mov.file == "/shows/a.mov"


def test_missing_width_only_affects_resolution():
    mov = build_mov(ProbeOutput.model_validate(make_probe(width=None)), verbose=True)

    assert mov.resolution == "missing width information"
    assert mov.errors["resolution"].kind is FieldErrorKind.BAD_DIMENSION
    assert mov.codec == "Prores HQ"
    assert mov.duration == "22"
    assert mov.timecode_out == "00:00:00:21"


def test_missing_height_is_reported():
    mov = build_mov(ProbeOutput.model_validate(make_probe(height=None)), verbose=True)
    assert mov.resolution == "missing height information"


def test_quiet_mode_leaves_failed_fields_empty():
    mov = build_mov(ProbeOutput.model_validate(make_probe(rate="25/1")))

    assert mov.fps == ""
    assert mov.timecode_out == ""
    assert mov.errors["fps"].kind is FieldErrorKind.UNKNOWN_FRAME_RATE
    assert mov.errors["timecode_out"].kind is FieldErrorKind.UNKNOWN_FRAME_RATE
    assert mov.timecode_in == "00:00:00:00"


def test_verbose_mode_shows_error_text():
    mov = build_mov(ProbeOutput.model_validate(make_probe(rate="25/1")), verbose=True)
    assert mov.fps == "unknown r_frame_rate: 25/1"


def test_missing_frame_rate():
    mov = build_mov(ProbeOutput.model_validate(make_probe(rate="")), verbose=True)
    assert mov.fps == "missing r_frame_rate information"
    assert mov.errors["fps"].kind is FieldErrorKind.MISSING_FRAME_RATE


def test_missing_frame_count():
    mov = build_mov(ProbeOutput.model_validate(make_probe(frames=None)), verbose=True)

    assert mov.duration == "missing nb_frames information"
    assert mov.errors["timecode_out"].kind is FieldErrorKind.MISSING_FRAME_COUNT


def test_bad_frame_count():
    mov = build_mov(ProbeOutput.model_validate(make_probe(frames="N/A")))
    assert mov.errors["timecode_out"].kind is FieldErrorKind.BAD_FRAME_COUNT
    assert mov.duration == "N/A"


def test_bad_timecode_tag():
    mov = build_mov(ProbeOutput.model_validate(make_probe(timecode="1:00:00:00")))

    assert mov.timecode_in == "1:00:00:00"
    assert mov.timecode_out == ""
    assert mov.errors["timecode_out"].kind is FieldErrorKind.BAD_TIMECODE


def test_no_timecode_tag_leaves_both_timecodes_empty():
    mov = build_mov(ProbeOutput.model_validate(make_probe(timecode=None)), verbose=True)

    assert mov.timecode_in == ""
    assert mov.timecode_out == ""
    assert "timecode_out" not in mov.errors


def test_missing_codec_profile():
    mov = build_mov(ProbeOutput.model_validate(make_probe(profile="")), verbose=True)
    assert mov.codec == "missing codec_profile information"


def test_no_video_stream():
    with pytest.raises(NoVideoStreamError):
        build_mov(ProbeOutput.model_validate({"streams": [], "format": {}}))


def test_multiple_video_streams():
    probe = make_probe()
    probe["streams"].append(dict(probe["streams"][0]))
    with pytest.raises(MultipleVideoStreamsError):
        build_mov(ProbeOutput.model_validate(probe))


def test_parse_probe_json():
    probe = parse_probe_json(json.dumps(make_probe(colorspace="ACES")))
    assert probe.video_stream().codec_name == "prores"
    assert probe.format.tags.foundry_colorspace == "ACES"


def test_parse_probe_json_rejects_garbage():
    with pytest.raises(ProbeError):
        parse_probe_json("not json")


@pytest.mark.parametrize(
    "codec,profile,expected",
    [
        ("mpeg2video", "Main", "Mpeg2video Main"),
        ("prores_ks", "HQ", "Prores_ks HQ"),
        ("H264", "High", "H264 High"),
        ("dnxhd", "DNXHR HQX", "Dnxhd DNXHR HQX"),
    ],
)
def test_codec_title_cases_word_starts_only(codec: str, profile: str, expected: str):
    mov = build_mov(ProbeOutput.model_validate(make_probe(codec=codec, profile=profile)))
    assert mov.codec == expected
