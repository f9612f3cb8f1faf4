"""
Build Service

Runs the Worldview build locally and streams its output.
"""

import subprocess
import sys
import threading
from pathlib import Path
from typing import IO, List, Optional, TextIO

from rich.console import Console

from wvupload.constants import BUILD_ARGS, BUILD_TOOL, BUILD_TOOL_WINDOWS
from wvupload.exceptions import BuildFailure
from wvupload.logger import DeployLogger
from wvupload.models.results import BuildResult
from wvupload.utils import decode_output, write_bytes


def build_command(env: Optional[str] = None, platform: Optional[str] = None) -> List[str]:
    """
    Build the npm command line.

    Args:
        env: Named build configuration (passed after '--')
        platform: sys.platform override

    Returns:
        Command as an argument list
    """
    platform = platform or sys.platform
    tool = BUILD_TOOL_WINDOWS if platform == "win32" else BUILD_TOOL
    args = [tool] + BUILD_ARGS
    if env:
        args += ["--", env]
    return args


class BuildService:
    """Service for the local build step."""

    def __init__(
        self,
        project_root: Path,
        logger: Optional[DeployLogger] = None,
        console: Optional[Console] = None,
    ):
        """
        Initialize build service.

        Args:
            project_root: Worldview checkout to build in
            logger: Run logger (output lines are copied to its file)
            console: Console for the command banner
        """
        self.project_root = Path(project_root)
        self.logger = logger
        self.console = console or Console()

    def _pump(self, source: IO[bytes], target: TextIO, stream: str, chunks: List[bytes]) -> None:
        """Copy one child stream to ours, byte for byte, as lines arrive."""
        passthrough = True
        for chunk in iter(source.readline, b""):
            chunks.append(chunk)
            if passthrough:
                try:
                    write_bytes(chunk, target)
                except OSError:
                    # Keep draining so the child never blocks on a full pipe
                    passthrough = False
            if self.logger:
                self.logger.log_output(decode_output(chunk).rstrip("\n"), stream)
        source.close()

    def run(self, env: Optional[str] = None) -> BuildResult:
        """
        Run the build and wait for it.

        Args:
            env: Named build configuration, if not the default

        Returns:
            BuildResult for a zero exit status

        Raises:
            BuildFailure: If the build cannot start or exits non-zero
        """
        cmd = build_command(env)
        cmd_str = " ".join(cmd)

        self.console.print(f"===> {cmd_str}", markup=False, highlight=False)
        if self.logger:
            self.logger.log_command(cmd_str)

        try:
            process = subprocess.Popen(
                cmd,
                cwd=str(self.project_root),
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as e:
            raise BuildFailure(f"build failed: {e}")

        stdout_chunks: List[bytes] = []
        stderr_chunks: List[bytes] = []

        # Targets are looked up now so redirected streams are honoured
        readers = [
            threading.Thread(
                target=self._pump,
                args=(process.stdout, sys.stdout, "stdout", stdout_chunks),
                daemon=True,
            ),
            threading.Thread(
                target=self._pump,
                args=(process.stderr, sys.stderr, "stderr", stderr_chunks),
                daemon=True,
            ),
        ]
        for reader in readers:
            reader.start()

        returncode = process.wait()
        for reader in readers:
            reader.join()

        result = BuildResult(
            command=cmd_str,
            returncode=returncode,
            stdout=decode_output(b"".join(stdout_chunks)),
            stderr=decode_output(b"".join(stderr_chunks)),
        )

        if not result.is_success:
            raise BuildFailure(
                f"build failed: {cmd_str} exited with status {returncode}"
            )

        if self.logger:
            self.logger.success("Build completed")
        return result
