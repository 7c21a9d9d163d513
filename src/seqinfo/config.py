"""
Configuration system for seqinfo.

Two layers:
- AppSettings: run settings read from SEQINFO_* environment variables
  (pydantic-settings); command line flags override them.
- ReportConfig: the TOML report definition, i.e. the ordered report columns
  and the field expressions for sequence rows and movie rows.
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Annotated, Any

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.constants import (
    DEFAULT_ALLOWED_COMMANDS,
    DEFAULT_CONFIG_FILE,
    DEFAULT_IMAGE_EXTS,
    DEFAULT_MOVIE_EXTS,
    FFPROBE_BIN,
)
from .errors import ConfigError

# =============================================================================
# RUN SETTINGS
# =============================================================================


class AppSettings(BaseSettings):
    """
    Run settings with environment variable support.

    All settings can be overridden via environment variables with SEQINFO_ prefix.
    Example: SEQINFO_CONFIG=/shows/abc/seqinfo.toml
    """

    model_config = SettingsConfigDict(env_prefix="SEQINFO_", case_sensitive=False)

    config: Annotated[str, Field(description="Path of the report config file")] = DEFAULT_CONFIG_FILE

    img_exts: Annotated[str, Field(description="Comma separated image sequence extensions")] = ",".join(
        DEFAULT_IMAGE_EXTS
    )

    mov_exts: Annotated[str, Field(description="Comma separated movie extensions")] = ",".join(DEFAULT_MOVIE_EXTS)

    ffprobe_bin: Annotated[str, Field(min_length=1, description="ffprobe executable")] = FFPROBE_BIN

    allowed_commands: Annotated[
        str, Field(description="Comma separated commands the output() helper may run")
    ] = ",".join(DEFAULT_ALLOWED_COMMANDS)

    log_file: Annotated[Path | None, Field(description="Optional file that receives a copy of the log")] = None

    @property
    def allowed_command_set(self) -> frozenset[str]:
        return frozenset(c.strip() for c in self.allowed_commands.split(",") if c.strip())


# =============================================================================
# REPORT CONFIGURATION
# =============================================================================


class FieldSpec(BaseModel):
    """One configured field: a column name and its expression."""

    name: Annotated[str, Field(min_length=1)]
    value: str


class FieldGroup(BaseModel):
    """Fields evaluated for one entity kind."""

    fields: list[FieldSpec] = Field(default_factory=list)

    @field_validator("fields")
    @classmethod
    def validate_unique_names(cls, v):
        """Ensure a field name is defined once per entity kind."""
        seen: set[str] = set()
        for spec in v:
            if spec.name in seen:
                raise ValueError(f"duplicate field name: {spec.name}")
            seen.add(spec.name)
        return v

    def expressions(self) -> dict[str, str]:
        return {spec.name: spec.value for spec in self.fields}


class ReportConfig(BaseModel):
    """Report columns and the expressions that fill them."""

    fields: list[str]
    seq: FieldGroup = Field(default_factory=FieldGroup)
    mov: FieldGroup = Field(default_factory=FieldGroup)

    @model_validator(mode="after")
    def validate_columns(self):
        """Every sequence and movie field must name a report column."""
        if len(set(self.fields)) != len(self.fields):
            raise ValueError("fields contains duplicate names")
        columns = set(self.fields)
        for group_name, group in (("seq", self.seq), ("mov", self.mov)):
            for spec in group.fields:
                if spec.name not in columns:
                    raise ValueError(f"{group_name} field '{spec.name}' is not listed in fields")
        return self


def parse_report_config(root: dict[str, Any]) -> ReportConfig:
    """Validate a decoded TOML document."""
    try:
        return ReportConfig.model_validate(root)
    except ValidationError as e:
        raise ConfigError(f"invalid report config: {e}") from e


def load_report_config(path: Path) -> ReportConfig:
    """Read and validate the TOML report config at ``path``.

    Raises:
        ConfigError: If the file is missing, unreadable, not TOML, or does
            not describe a valid report.
    """
    try:
        raw = path.read_bytes()
    except FileNotFoundError as e:
        raise ConfigError(f"config file not found: {path}") from e
    except OSError as e:
        raise ConfigError(f"could not read config file {path}: {e}") from e
    try:
        root = tomllib.loads(raw.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise ConfigError(f"config is not valid UTF-8: {path}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"could not decode config file (toml) {path}: {e}") from e
    return parse_report_config(root)
