"""
Remote Command Builder

Composes the shell commands run on the web host. Root and deployment name
come from the operator, so every path built from them is quoted; only the
web root glob is left for the remote shell to expand.
"""

import posixpath
import shlex

from wvupload.constants import (
    ARTIFACT_NAME,
    EXTRACTED_MARKER,
    RELOCATED_MARKER,
    SCAFFOLD_DIR,
    WEB_ROOT_DIR,
    HIDDEN_WEB_FILES,
    TAR_OPTIONS,
)
from wvupload.exceptions import ConfigurationError

_FORBIDDEN_CHARS = ("\x00", "\n", "\r")


def validate_deployment_name(name: str) -> str:
    """
    Check that a deployment name is a single directory name.

    Args:
        name: Operator-supplied deployment name

    Returns:
        The name, unchanged

    Raises:
        ConfigurationError: If name is empty, '.', '..', or contains '/'
            or control characters
    """
    if not name:
        raise ConfigurationError("name is required")
    if name in (".", "..") or "/" in name:
        raise ConfigurationError(
            f"invalid name '{name}'",
            context="name must be a single directory name under root",
        )
    if any(char in name for char in _FORBIDDEN_CHARS):
        raise ConfigurationError(
            f"invalid name {name!r}", context="name contains control characters"
        )
    return name


def validate_root(root: str) -> str:
    """
    Check that a remote root path is usable in a shell command.

    Raises:
        ConfigurationError: If root is empty or contains control characters
    """
    if not root:
        raise ConfigurationError("root not found in config file or command line")
    if any(char in root for char in _FORBIDDEN_CHARS):
        raise ConfigurationError(
            f"invalid root {root!r}", context="root contains control characters"
        )
    return root


class DeploymentLayout:
    """
    Remote paths and commands for one deployment directory.

    Layout on the host:
        {root}/{name}/                         deployment directory
        {root}/{name}/site-worldview-debug.tar.bz2
        {root}/{name}/site-worldview-debug/    extraction scaffold
    """

    def __init__(self, root: str, name: str, archive_name: str = ARTIFACT_NAME):
        self.root = validate_root(root)
        self.name = validate_deployment_name(name)
        self.archive_name = archive_name

    @property
    def directory(self) -> str:
        return posixpath.join(self.root, self.name)

    @property
    def archive_path(self) -> str:
        """Remote destination of the uploaded archive."""
        return posixpath.join(self.directory, self.archive_name)

    def _in_directory(self, command: str) -> str:
        return f"cd {shlex.quote(self.directory)} && {command}"

    def prepare_directory(self, init: bool = False) -> str:
        """
        Remove and recreate the deployment directory.

        The directory is only touched when a previous archive sits in it,
        so an unrelated directory is never wiped. With init, a missing
        directory is created as well.
        """
        directory = shlex.quote(self.directory)
        archive = shlex.quote(self.archive_path)
        recreate = f"[ -e {archive} ] && rm -rf {directory} && mkdir -p {directory}"
        if not init:
            return recreate
        return f"if [ -e {directory} ]; then {recreate}; else mkdir -p {directory}; fi"

    def _marker(self, name: str) -> str:
        return shlex.quote(posixpath.join(SCAFFOLD_DIR, name))

    def extract(self) -> str:
        """Unpack the archive inside the deployment directory."""
        parts = ["tar", "xf", shlex.quote(self.archive_name)] + TAR_OPTIONS
        return self._in_directory(
            f"{' '.join(parts)} && touch {self._marker(EXTRACTED_MARKER)}"
        )

    def relocate(self) -> str:
        """
        Move the web root contents (including hidden files) up one level.

        Runs only after a successful extract.
        """
        web_root = shlex.quote(posixpath.join(SCAFFOLD_DIR, WEB_ROOT_DIR))
        sources = [f"{web_root}/*"]
        sources += [f"{web_root}/{shlex.quote(name)}" for name in HIDDEN_WEB_FILES]
        return self._in_directory(
            f"[ -e {self._marker(EXTRACTED_MARKER)} ] && "
            f"mv {' '.join(sources)} . && "
            f"touch {self._marker(RELOCATED_MARKER)}"
        )

    def cleanup(self) -> str:
        """
        Delete the emptied extraction scaffold.

        A scaffold left by a failed extract or relocate is kept for inspection.
        """
        return self._in_directory(
            f"[ -e {self._marker(RELOCATED_MARKER)} ] && rm -rf {shlex.quote(SCAFFOLD_DIR)}"
        )

    def __repr__(self) -> str:
        return f"DeploymentLayout(directory={self.directory})"
