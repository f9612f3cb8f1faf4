"""
Worldview Upload Domain Models

Clean dataclass-based models for type-safe data handling.
"""

from .config import (
    UploadOptions,
    UploadConfig,
)
from .results import (
    BuildResult,
    RemoteCommandResult,
)
from .deployment import (
    PipelineStage,
    PipelineState,
)

__all__ = [
    # Config
    "UploadOptions",
    "UploadConfig",
    # Results
    "BuildResult",
    "RemoteCommandResult",
    # Deployment
    "PipelineStage",
    "PipelineState",
]
