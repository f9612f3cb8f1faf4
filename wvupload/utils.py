"""
CLI Utilities

Path and output helpers shared by commands and services.
"""

import sys
from pathlib import Path
from typing import Optional, TextIO

from wvupload.constants import (
    CONFIG_DIR_NAME,
    CONFIG_FILE_NAME,
    LOGS_DIR_NAME,
    DIST_DIR,
    ARTIFACT_NAME,
)


def get_program_name() -> str:
    """Name used as the prefix of error messages."""
    name = Path(sys.argv[0]).name if sys.argv and sys.argv[0] else ""
    return name or "wv-upload"


def get_project_root() -> Path:
    """
    Get the Worldview checkout being deployed.

    Returns:
        Current working directory (contains package.json, dist/, etc.)
    """
    return Path.cwd()


def get_config_dir() -> Path:
    """Get ~/.worldview (resolved at call time)."""
    return Path.home() / CONFIG_DIR_NAME


def get_config_file() -> Path:
    """Get path of the persisted upload configuration."""
    return get_config_dir() / CONFIG_FILE_NAME


def get_logs_dir() -> Path:
    """Get directory holding upload run logs."""
    return get_config_dir() / LOGS_DIR_NAME


def get_artifact_path(project_root: Optional[Path] = None) -> Path:
    """Get path of the archive produced by the build."""
    root = project_root if project_root is not None else get_project_root()
    return root / DIST_DIR / ARTIFACT_NAME


def write_passthrough(text: str, stream: Optional[TextIO] = None) -> None:
    """
    Write command output through to the operator unchanged.

    Args:
        text: Output text (may be empty)
        stream: Target stream (default: current sys.stdout)
    """
    if not text:
        return
    target = stream if stream is not None else sys.stdout
    target.write(text)
    target.flush()


def write_bytes(data: bytes, stream: TextIO) -> None:
    """
    Write raw bytes to a text stream's underlying buffer.

    Streams without a buffer (e.g. io.StringIO) get the decoded text.
    """
    buffer = getattr(stream, "buffer", None)
    if buffer is None:
        write_passthrough(decode_output(data), stream)
        return
    # Pending text must land before the raw bytes
    stream.flush()
    buffer.write(data)
    buffer.flush()


def decode_output(data: bytes) -> str:
    """Decode process output for logs and results; bad bytes become U+FFFD."""
    return data.decode("utf-8", errors="replace")
