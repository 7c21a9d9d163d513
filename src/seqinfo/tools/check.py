"""
External tool validation utilities for seqinfo.

This module handles validation of the external tools needed to describe
movie files.
"""

from __future__ import annotations

from shutil import which

from ..core.constants import FFPROBE_BIN


def check_tools(ffprobe_bin: str = FFPROBE_BIN) -> tuple[bool, list[str]]:
    """Check availability of required external tools.

    Args:
        ffprobe_bin: ffprobe executable name or path.

    Returns:
        Tuple[bool, List[str]]: (all_ok, problems). If `all_ok` is False, problems lists the issues.
    """
    problems: list[str] = []
    if which(ffprobe_bin) is None:
        problems.append(f"{ffprobe_bin} not found in PATH")
    return (len(problems) == 0, problems)
