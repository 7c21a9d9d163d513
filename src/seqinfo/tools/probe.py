"""
ffprobe invocation for movie files.
"""

from __future__ import annotations

from collections.abc import Sequence

from ..core.constants import FFPROBE_ARGS, FFPROBE_BIN
from ..core.types import Mov
from ..errors import ProbeError
from ..processing.movie import ProbeOutput, build_mov, parse_probe_json
from ..utils.subprocess import run_subprocess


def run_ffprobe(path: str, ffprobe_bin: str = FFPROBE_BIN, args: Sequence[str] = FFPROBE_ARGS) -> ProbeOutput:
    """Probe a movie file.

    Raises:
        ProbeError: If ffprobe cannot run, exits non-zero, or prints
            output that is not a probe record.
    """
    code, out = run_subprocess([ffprobe_bin, *args, path])
    if code != 0:
        raise ProbeError(f"failed to execute ffprobe on {path}: {out.strip() or f'exit {code}'}")
    return parse_probe_json(out)


def describe_movie(
    path: str,
    *,
    verbose: bool = False,
    ffprobe_bin: str = FFPROBE_BIN,
    args: Sequence[str] = FFPROBE_ARGS,
) -> Mov:
    """Probe ``path`` and build its Mov descriptor."""
    return build_mov(run_ffprobe(path, ffprobe_bin, args), path, verbose=verbose)
