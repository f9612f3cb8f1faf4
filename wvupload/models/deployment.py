"""
Deployment State Models

Linear state machine for one upload run.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from wvupload.exceptions import StateError


class PipelineStage(Enum):
    """Stage reached by an upload run."""

    UNRESOLVED = "unresolved"
    CONFIG_RESOLVED = "config_resolved"
    BUILD_SKIPPED = "build_skipped"
    BUILD_SUCCEEDED = "build_succeeded"
    SESSION_OPEN = "session_open"
    DIRECTORY_PREPARED = "directory_prepared"
    ARTIFACT_TRANSFERRED = "artifact_transferred"
    EXTRACTED = "extracted"
    RELOCATED = "relocated"
    DONE = "done"
    FAILED = "failed"


_TRANSITIONS = {
    PipelineStage.UNRESOLVED: {PipelineStage.CONFIG_RESOLVED},
    PipelineStage.CONFIG_RESOLVED: {
        PipelineStage.BUILD_SKIPPED,
        PipelineStage.BUILD_SUCCEEDED,
    },
    PipelineStage.BUILD_SKIPPED: {PipelineStage.SESSION_OPEN},
    PipelineStage.BUILD_SUCCEEDED: {PipelineStage.SESSION_OPEN},
    PipelineStage.SESSION_OPEN: {PipelineStage.DIRECTORY_PREPARED},
    PipelineStage.DIRECTORY_PREPARED: {PipelineStage.ARTIFACT_TRANSFERRED},
    PipelineStage.ARTIFACT_TRANSFERRED: {PipelineStage.EXTRACTED},
    PipelineStage.EXTRACTED: {PipelineStage.RELOCATED},
    PipelineStage.RELOCATED: {PipelineStage.DONE},
    PipelineStage.DONE: set(),
    PipelineStage.FAILED: set(),
}


@dataclass
class PipelineState:
    """Current stage of an upload run, plus how it got there."""

    stage: PipelineStage = PipelineStage.UNRESOLVED
    failure_reason: Optional[str] = None
    history: list[PipelineStage] = field(default_factory=list)

    @property
    def is_terminal(self) -> bool:
        """Check if no further transitions are possible."""
        return self.stage in (PipelineStage.DONE, PipelineStage.FAILED)

    @property
    def is_failed(self) -> bool:
        return self.stage == PipelineStage.FAILED

    def advance(self, stage: PipelineStage) -> None:
        """
        Move to the next stage.

        Raises:
            StateError: If stage does not directly follow the current one
        """
        if stage not in _TRANSITIONS[self.stage]:
            raise StateError(
                f"Cannot move from {self.stage.value} to {stage.value}"
            )
        self.history.append(self.stage)
        self.stage = stage

    def fail(self, reason: str) -> None:
        """Enter the terminal failed state (first failure wins)."""
        if self.is_failed:
            return
        self.history.append(self.stage)
        self.stage = PipelineStage.FAILED
        self.failure_reason = reason

    def __repr__(self) -> str:
        if self.is_failed:
            return f"PipelineState(failed: {self.failure_reason})"
        return f"PipelineState(stage={self.stage.value})"
