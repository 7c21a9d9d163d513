"""
Path and file system utilities for seqinfo.

This module handles all path-related functionality including:
- Ordered, depth-first directory walking
- Filename parsing for frame sequences
- Extension matching
- Path prefix remapping
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterable, Iterator

from ..errors import WalkError

# prefix ending in a non-digit, the last digit run, and whatever follows it
FRAME_NAME_RE = re.compile(r"(.*\D)?(\d+)(.*?)", re.ASCII | re.DOTALL)


def walk_files(root: str | os.PathLike[str]) -> Iterator[str]:
    """Yield every regular file under ``root`` depth-first.

    Directory and file names are visited in sorted order so frames of one
    sequence arrive contiguously.

    Args:
        root: Directory to walk.

    Yields:
        str: File paths, joined onto ``root``.

    Raises:
        WalkError: If a directory (including ``root``) cannot be listed.
    """

    def fail(err: OSError) -> None:
        raise WalkError(f"{err.strerror or err}: {err.filename}") from err

    for dirpath, dirnames, filenames in os.walk(os.fspath(root), onerror=fail):
        dirnames.sort()
        for name in sorted(filenames):
            yield os.path.join(dirpath, name)


def split_frame_name(name: str) -> tuple[str, str, str] | None:
    """Split a file name around its last run of digits.

    Examples:
        "shot_001.exr" -> ("shot_", "001", ".exr")
        "v2_0100"      -> ("v2_", "0100", "")
        "plate.exr"    -> None

    Args:
        name: Base file name (no directory).

    Returns:
        Optional[Tuple[str, str, str]]: (prefix, digits, suffix) if matched, else None.
    """
    match = FRAME_NAME_RE.fullmatch(name)
    if not match:
        return None
    prefix, digits, suffix = match.groups()
    return prefix or "", digits, suffix


def extension_of(path: str) -> str:
    """Return the lower-cased extension of ``path`` without its dot ("" if none)."""
    return os.path.splitext(path)[1][1:].lower()


def normalize_exts(exts: Iterable[str]) -> frozenset[str]:
    """Normalize an extension list such as ``["exr", ".dpx", " "]`` to ``{"exr", "dpx"}``."""
    return frozenset(e.strip().lstrip(".").lower() for e in exts if e.strip())


def remap_prefix(path: str, old: str, new: str) -> str:
    """Replace a leading ``old`` in ``path`` with ``new``; other paths pass through."""
    if not path.startswith(old):
        return path
    return new + path[len(old) :]
