"""
Deployment Service

Runs the remote steps of an upload, in order, over one session.
"""

import sys
from pathlib import Path
from typing import Optional

from wvupload.exceptions import DeploymentError
from wvupload.logger import DeployLogger
from wvupload.models.deployment import PipelineStage, PipelineState
from wvupload.models.results import RemoteCommandResult
from wvupload.remote_commands import DeploymentLayout
from wvupload.services.ssh_service import RemoteSession
from wvupload.utils import write_passthrough


class DeploymentService:
    """
    Sequences one deployment on the remote host.

    Steps:
        1. Guarded remove + recreate of {root}/{name}
        2. Transfer the archive into it
        3. Extract the archive
        4. Move the web root up one level
        5. Remove the extraction scaffold

    Steps 3-5 are gated in the shell: each runs only if the previous one
    succeeded. Remote exit statuses are only logged. There is no retry and
    no rollback.
    """

    def __init__(
        self,
        session: RemoteSession,
        layout: DeploymentLayout,
        state: Optional[PipelineState] = None,
        logger: Optional[DeployLogger] = None,
        init: bool = False,
    ):
        self.session = session
        self.layout = layout
        self.state = state or PipelineState(stage=PipelineStage.SESSION_OPEN)
        self.logger = logger
        self.init = init

    async def _run_remote(self, command: str) -> RemoteCommandResult:
        """Run a command and show its output as-is."""
        result = await self.session.execute_command(command)

        write_passthrough(result.stdout, sys.stdout)
        write_passthrough(result.stderr, sys.stderr)

        if self.logger:
            self.logger.log_output(result.stdout, "stdout")
            self.logger.log_output(result.stderr, "stderr")
            if result.exit_status:
                self.logger.warning(f"Remote command exited with status {result.exit_status}")
        return result

    def _step(self, name: str) -> None:
        if self.logger:
            self.logger.step(name)

    def _done(self, stage: PipelineStage, message: str) -> None:
        self.state.advance(stage)
        if self.logger:
            self.logger.success(message)

    async def deploy(self, artifact: Path) -> PipelineState:
        """
        Publish artifact as {root}/{name}.

        Args:
            artifact: Local archive to upload

        Returns:
            Final PipelineState (stage DONE)

        Raises:
            DeploymentError: If any session operation fails; state is FAILED
        """
        layout = self.layout

        try:
            self._step(f"Preparing {layout.directory}")
            await self._run_remote(layout.prepare_directory(init=self.init))
            self._done(PipelineStage.DIRECTORY_PREPARED, "Directory prepared")

            self._step(f"Uploading {artifact.name}")
            await self.session.transfer_file(artifact, layout.archive_path)
            self._done(PipelineStage.ARTIFACT_TRANSFERRED, f"Uploaded to {layout.archive_path}")

            self._step("Extracting archive")
            await self._run_remote(layout.extract())
            self._done(PipelineStage.EXTRACTED, "Archive extracted")

            self._step("Relocating web root")
            await self._run_remote(layout.relocate())
            self._done(PipelineStage.RELOCATED, "Web root relocated")

            await self._run_remote(layout.cleanup())
            self._done(PipelineStage.DONE, "Scaffold removed")
        except DeploymentError as e:
            self.state.fail(e.message)
            raise

        return self.state
