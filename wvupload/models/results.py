"""
Result Models

Dataclass models for build and remote command outputs.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class BuildResult:
    """Result of the local build process."""

    command: str
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def is_success(self) -> bool:
        """Check if build succeeded."""
        return self.returncode == 0

    def __repr__(self) -> str:
        return f"BuildResult(returncode={self.returncode}, command='{self.command}')"


@dataclass
class RemoteCommandResult:
    """Result of one remote command (exit_status is not checked)."""

    command: str
    stdout: str = ""
    stderr: str = ""
    exit_status: Optional[int] = None

    def __repr__(self) -> str:
        return f"RemoteCommandResult(exit_status={self.exit_status}, command='{self.command[:50]}...')"
