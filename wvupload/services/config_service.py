"""
Configuration Management Service

Merges the persisted upload config with command-line overrides.
"""

import getpass
import json
from pathlib import Path
from typing import Any, Dict, Optional

from wvupload.constants import DEFAULT_SSH_KEY_PATH, DEFAULT_SSH_PORT, MAX_PORT, MIN_PORT
from wvupload.exceptions import ConfigurationError
from wvupload.models.config import UploadConfig, UploadOptions
from wvupload.remote_commands import validate_deployment_name, validate_root

STRING_KEYS = ("host", "root", "user", "key")


def _first(*values):
    """First value that is set and non-empty."""
    for value in values:
        if value:
            return value
    return None


def default_username() -> Optional[str]:
    """Current OS user, or None when it cannot be determined."""
    try:
        return getpass.getuser()
    except (OSError, KeyError):
        return None


class ConfigService:
    """
    Upload configuration service.

    Responsibilities:
    - Read the persisted JSON config (absent file is fine)
    - Apply command-line > file > environment precedence
    - Refuse to continue without host, root, user and name
    """

    def __init__(self, config_file: Path):
        self.config_file = Path(config_file)
        self._persisted: Optional[Dict[str, Any]] = None

    def load(self, force_reload: bool = False) -> Dict[str, Any]:
        """
        Load persisted configuration with caching.

        Returns:
            Parsed config dict ({} if the file is absent or unreadable)

        Raises:
            ConfigurationError: If the file exists but is not a valid JSON object
        """
        if self._persisted is not None and not force_reload:
            return self._persisted

        try:
            content = self.config_file.read_text()
        except (OSError, UnicodeDecodeError):
            self._persisted = {}
            return self._persisted

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"{self.config_file}:\n{e}")

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"{self.config_file}:\nexpected a JSON object, got {type(data).__name__}"
            )

        for key in STRING_KEYS:
            if key in data and data[key] is not None and not isinstance(data[key], str):
                raise ConfigurationError(
                    f"{self.config_file}:\n'{key}' must be a string"
                )

        port = data.get("port")
        if port is not None and (isinstance(port, bool) or not isinstance(port, int)):
            raise ConfigurationError(f"{self.config_file}:\n'port' must be an integer")

        self._persisted = data
        return self._persisted

    def resolve(self, options: UploadOptions) -> UploadConfig:
        """
        Build the effective configuration for this run.

        Args:
            options: Command-line overrides

        Returns:
            Immutable UploadConfig

        Raises:
            ConfigurationError: If a required value is missing or unsafe
        """
        config = self.load()

        host = _first(options.host, config.get("host"))
        root = _first(options.root, config.get("root"))
        username = _first(options.user, config.get("user"), default_username())
        key = _first(options.key, config.get("key"), DEFAULT_SSH_KEY_PATH)
        port = options.port if options.port is not None else config.get("port")
        if port is None:
            port = DEFAULT_SSH_PORT

        if not host:
            raise ConfigurationError("host not found in config file or command line")
        if not root:
            raise ConfigurationError("root not found in config file or command line")
        if not username:
            raise ConfigurationError("user not found in config file or command line")
        if not MIN_PORT <= port <= MAX_PORT:
            raise ConfigurationError(f"invalid port {port}: must be {MIN_PORT}-{MAX_PORT}")

        validate_root(root)
        name = validate_deployment_name(options.name or "")

        return UploadConfig(
            host=host,
            root=root,
            username=username,
            key_path=Path(key).expanduser(),
            deployment_name=name,
            build_env=options.env or None,
            use_existing_artifacts=options.dist,
            port=port,
            init=options.init,
        )
