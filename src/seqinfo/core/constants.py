"""Centralized constants for the application."""

# Placeholder substituted for the frame digits in a sequence name
FRAME_TOKEN = "{FRAME}"

# Worker configuration
MAX_WORKER_CAP = 8
WORKERS_PER_CPU = 2

# File extensions (without dot)
DEFAULT_IMAGE_EXTS = ("dpx", "exr")
DEFAULT_MOVIE_EXTS = ("mov", "mp4")

# Report defaults
DEFAULT_CONFIG_FILE = "config.toml"
DEFAULT_OUTPUT_FILE = "seqinfo_output.xlsx"
DEFAULT_SEPARATOR = "\t"
SHEET_NAME = "Sheet1"

# ffprobe invocation
FFPROBE_BIN = "ffprobe"
FFPROBE_ARGS = ("-v", "quiet", "-show_format", "-show_streams", "-select_streams", "v:0", "-of", "json")

# Commands the field helper ``output`` may run
DEFAULT_ALLOWED_COMMANDS = ("ffprobe",)
