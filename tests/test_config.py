from __future__ import annotations

from pathlib import Path

import pytest

from seqinfo.config import AppSettings, load_report_config
from seqinfo.errors import ConfigError

GOOD = """
fields = ["file", "frames", "fps"]

[[seq.fields]]
name = "file"
value = "{{ seq.name }}"

[[seq.fields]]
name = "frames"
value = "{{ seq.length }}"

[[mov.fields]]
name = "fps"
value = "{{ mov.fps }}"
"""


def write_config(tmp_path: Path, text: str) -> Path:
    p = tmp_path / "config.toml"
    p.write_text(text, encoding="utf-8")
    return p


def test_load_report_config(tmp_path: Path):
    cfg = load_report_config(write_config(tmp_path, GOOD))

    assert cfg.fields == ["file", "frames", "fps"]
    assert cfg.seq.expressions() == {"file": "{{ seq.name }}", "frames": "{{ seq.length }}"}
    assert cfg.mov.expressions() == {"fps": "{{ mov.fps }}"}


def test_entity_groups_are_optional(tmp_path: Path):
    cfg = load_report_config(write_config(tmp_path, 'fields = ["a"]\n'))
    assert cfg.seq.expressions() == {}
    assert cfg.mov.expressions() == {}


def test_missing_file(tmp_path: Path):
    with pytest.raises(ConfigError, match="not found"):
        load_report_config(tmp_path / "absent.toml")


def test_invalid_toml(tmp_path: Path):
    with pytest.raises(ConfigError, match="toml"):
        load_report_config(write_config(tmp_path, "fields = [\n"))


def test_missing_fields_list(tmp_path: Path):
    with pytest.raises(ConfigError):
        load_report_config(write_config(tmp_path, '[[seq.fields]]\nname = "a"\nvalue = "1"\n'))


def test_field_not_listed_in_columns(tmp_path: Path):
    text = 'fields = ["a"]\n[[mov.fields]]\nname = "b"\nvalue = "1"\n'
    with pytest.raises(ConfigError, match="mov field 'b'"):
        load_report_config(write_config(tmp_path, text))


def test_duplicate_columns(tmp_path: Path):
    with pytest.raises(ConfigError, match="duplicate"):
        load_report_config(write_config(tmp_path, 'fields = ["a", "a"]\n'))


def test_duplicate_field_in_group(tmp_path: Path):
    text = 'fields = ["a"]\n' + '[[seq.fields]]\nname = "a"\nvalue = "1"\n' * 2
    with pytest.raises(ConfigError, match="duplicate"):
        load_report_config(write_config(tmp_path, text))


def test_example_config_is_valid():
    example = Path(__file__).resolve().parent.parent / "config.example.toml"
    cfg = load_report_config(example)
    assert cfg.fields[0] == "file"


def test_settings_from_environment(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("SEQINFO_CONFIG", "/shows/abc/seqinfo.toml")
    monkeypatch.setenv("SEQINFO_ALLOWED_COMMANDS", "ffprobe, mediainfo,")

    settings = AppSettings()

    assert settings.config == "/shows/abc/seqinfo.toml"
    assert settings.allowed_command_set == frozenset({"ffprobe", "mediainfo"})


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch):
    for name in ("SEQINFO_CONFIG", "SEQINFO_IMG_EXTS", "SEQINFO_MOV_EXTS", "SEQINFO_ALLOWED_COMMANDS"):
        monkeypatch.delenv(name, raising=False)

    settings = AppSettings()

    assert settings.config == "config.toml"
    assert settings.img_exts == "dpx,exr"
    assert settings.mov_exts == "mov,mp4"
    assert settings.allowed_command_set == frozenset({"ffprobe"})
