"""Subprocess and external command utilities."""

import subprocess
from collections.abc import Sequence


def run_subprocess(cmd: Sequence[str], *, timeout: int | None = None) -> tuple[int, str]:
    """Run subprocess command with proper error handling.

    Args:
        cmd: Command and arguments list
        timeout: Optional timeout in seconds

    Returns:
        Tuple of (return_code, combined stdout and stderr output)
    """
    try:
        result = subprocess.run(
            list(cmd),
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            timeout=timeout,
            check=False,
        )
        return result.returncode, result.stdout
    except subprocess.TimeoutExpired:
        return -1, f"Command timed out after {timeout} seconds"
    except OSError as e:
        return -1, str(e)
