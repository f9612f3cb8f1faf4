"""SSH session service for the upload host."""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Callable, Optional

import asyncssh

from wvupload.exceptions import RemoteExecutionError, SessionError, TransferError
from wvupload.logger import DeployLogger
from wvupload.models.config import UploadConfig
from wvupload.models.results import RemoteCommandResult


class RemoteSession:
    """One authenticated connection to the upload host."""

    def __init__(
        self,
        connection: asyncssh.SSHClientConnection,
        host: str,
        logger: Optional[DeployLogger] = None,
    ):
        self.connection = connection
        self.host = host
        self.logger = logger

    async def execute_command(self, command: str) -> RemoteCommandResult:
        """
        Run a shell command on the host.

        The remote exit status is recorded but not checked.

        Args:
            command: Shell command string

        Returns:
            RemoteCommandResult with stdout/stderr

        Raises:
            RemoteExecutionError: If the command could not be run at all
        """
        if self.logger:
            self.logger.log_command(command)

        try:
            result = await self.connection.run(command, check=False)
        except (OSError, asyncssh.Error) as e:
            raise RemoteExecutionError(
                f"remote command failed: {e}",
                context=f"Host: {self.host}, Command: {command.strip()}",
            )

        if self.logger:
            self.logger.log(f"Exit status: {result.exit_status}", "DEBUG")

        return RemoteCommandResult(
            command=command,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
            exit_status=result.exit_status,
        )

    async def transfer_file(self, local_path: Path, remote_path: str) -> None:
        """
        Copy a local file to the host over SFTP.

        Raises:
            TransferError: On local I/O, SFTP, or connection failure
        """
        if self.logger:
            self.logger.log(f"Uploading {local_path} -> {self.host}:{remote_path}", "DEBUG")

        try:
            async with self.connection.start_sftp_client() as sftp:
                await sftp.put(str(local_path), remote_path)
        except (OSError, asyncssh.Error) as e:
            raise TransferError(
                f"transfer failed: {e}",
                context=f"{local_path} -> {self.host}:{remote_path}",
            )

    def __repr__(self) -> str:
        return f"RemoteSession(host={self.host})"


class SSHService:
    """Service for SSH sessions to the upload host."""

    def __init__(
        self,
        config: UploadConfig,
        logger: Optional[DeployLogger] = None,
        connector: Optional[Callable] = None,
    ):
        """
        Initialize SSH service.

        Args:
            config: Resolved upload configuration
            logger: Run logger
            connector: Replacement for asyncssh.connect
        """
        self.config = config
        self.logger = logger
        self._connector = connector

    async def connect(self) -> asyncssh.SSHClientConnection:
        """
        Open an authenticated connection.

        Raises:
            SessionError: If the host is unreachable or rejects the key
        """
        connect = self._connector or asyncssh.connect

        if self.logger:
            self.logger.log(f"Connecting to {self.config.connection_string}")

        try:
            return await connect(
                self.config.host,
                port=self.config.port,
                username=self.config.username,
                client_keys=[str(self.config.key_path)],
                known_hosts=None,
            )
        except (OSError, asyncssh.Error, asyncssh.KeyImportError) as e:
            raise SessionError(
                f"could not connect to {self.config.connection_string}: {e}",
                context=f"Key: {self.config.key_path}",
            )

    @asynccontextmanager
    async def session(self) -> AsyncIterator[RemoteSession]:
        """
        Scoped session: the connection is closed however the block exits.

        Example:
            async with ssh_service.session() as remote:
                await remote.execute_command("uname -a")
        """
        connection = await self.connect()
        try:
            yield RemoteSession(connection, self.config.host, logger=self.logger)
        finally:
            connection.close()
            await connection.wait_closed()
            if self.logger:
                self.logger.log(f"Disconnected from {self.config.host}", "DEBUG")
