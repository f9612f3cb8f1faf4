"""
Upload Configuration Models

Dataclass models for command-line overrides and the resolved configuration.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from wvupload.constants import DEFAULT_SSH_PORT


@dataclass
class UploadOptions:
    """Options for upload command (as given on the command line)."""

    name: Optional[str] = None
    dist: bool = False
    env: Optional[str] = None
    host: Optional[str] = None
    key: Optional[str] = None
    root: Optional[str] = None
    user: Optional[str] = None
    port: Optional[int] = None
    init: bool = False


@dataclass(frozen=True)
class UploadConfig:
    """Effective configuration for one upload run."""

    host: str
    root: str
    username: str
    key_path: Path
    deployment_name: str
    build_env: Optional[str] = None
    use_existing_artifacts: bool = False
    port: int = DEFAULT_SSH_PORT
    init: bool = False

    @property
    def connection_string(self) -> str:
        """Get SSH connection string (user@host)."""
        if self.port != DEFAULT_SSH_PORT:
            return f"{self.username}@{self.host}:{self.port}"
        return f"{self.username}@{self.host}"

    @property
    def key_exists(self) -> bool:
        """Check if private key file exists."""
        return self.key_path.exists()

    def __repr__(self) -> str:
        return (
            f"UploadConfig(target={self.connection_string}, "
            f"root={self.root}, name={self.deployment_name})"
        )
