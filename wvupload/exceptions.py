"""
Worldview Upload Exception Hierarchy

Clean exception hierarchy for consistent error handling across the CLI.
"""

from typing import Optional


class UploadError(Exception):
    """Base exception for all upload errors."""

    def __init__(self, message: str, context: Optional[str] = None):
        self.message = message
        self.context = context
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format error message with optional context."""
        if self.context:
            return f"{self.message}\nContext: {self.context}"
        return self.message


class ConfigurationError(UploadError):
    """Raised when configuration is invalid or missing."""

    pass


class BuildFailure(UploadError):
    """Raised when the local build fails or cannot be launched."""

    pass


class ArtifactNotFoundError(BuildFailure):
    """Raised when the build artifact is missing before upload."""

    def __init__(self, artifact_path: str):
        self.artifact_path = artifact_path
        super().__init__(
            f"artifact not found: {artifact_path} (run without --dist to build it first)"
        )


class DeploymentError(UploadError):
    """Raised when remote deployment operations fail."""

    pass


class SessionError(DeploymentError):
    """Raised when the SSH session cannot be established."""

    pass


class RemoteExecutionError(DeploymentError):
    """Raised when a remote command cannot be dispatched."""

    pass


class TransferError(DeploymentError):
    """Raised when copying a file to the remote host fails."""

    pass


class StateError(UploadError):
    """Raised when the pipeline is driven out of order."""

    pass
