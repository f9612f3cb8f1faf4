"""
Base Command Class

Abstract base for Worldview Upload commands.
Provides common functionality and structure.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.text import Text

from wvupload.exceptions import ConfigurationError, UploadError
from wvupload.logger import DeployLogger
from wvupload.ui_components import show_header
from wvupload.utils import get_logs_dir, get_program_name, get_project_root


class BaseCommand(ABC):
    """
    Abstract base command class.

    Provides:
    - Logger initialization
    - Header display
    - Error handling (one "<prog>: error: <message>" line, exit 1)
    - Consistent structure
    """

    def __init__(
        self,
        verbose: bool = False,
        project_root: Optional[Path] = None,
        logs_dir: Optional[Path] = None,
    ):
        self.verbose = verbose
        self.console = Console()
        self.error_console = Console(stderr=True)
        self.project_root = project_root if project_root is not None else get_project_root()
        self.logs_dir = logs_dir if logs_dir is not None else get_logs_dir()
        self.logger: Optional[DeployLogger] = None

    def init_logger(self, deployment_name: str, command_name: str) -> DeployLogger:
        """
        Initialize command logger.

        Args:
            deployment_name: Deployment the run belongs to
            command_name: Command name

        Returns:
            DeployLogger instance

        Raises:
            ConfigurationError: If the log directory or file cannot be created
        """
        try:
            self.logger = DeployLogger(
                deployment_name, command_name, self.logs_dir, verbose=self.verbose
            )
        except OSError as e:
            raise ConfigurationError(f"cannot write run log under {self.logs_dir}: {e}")
        return self.logger

    def show_header(self, title: str, details: Optional[dict] = None) -> None:
        """Show command header (skip in verbose mode)."""
        if not self.verbose:
            show_header(title=title, details=details, console=self.console)

    def print_success(self, message: str) -> None:
        self.console.print(Text(f"✓ {message}", style="green"))

    def print_dim(self, message: str) -> None:
        self.console.print(Text(message, style="dim"))

    def print_error(self, message: str) -> None:
        """Print a fatal error as '<prog>: error: <message>' on stderr."""
        self.error_console.print(
            Text.assemble((f"{get_program_name()}: error: ", "bold red"), message),
            soft_wrap=True,
        )

    def handle_error(self, error: Exception, context: Optional[str] = None) -> None:
        """
        Report an error: one line on stderr, full context in the log file.

        Args:
            error: Exception object
            context: Optional context message
        """
        message = error.message if isinstance(error, UploadError) else str(error)
        if context is None and isinstance(error, UploadError):
            context = error.context
        if self.logger:
            self.logger.log_error(message, context=context)
        self.print_error(message)

    @abstractmethod
    def execute(self, **kwargs) -> None:
        """
        Execute command logic.

        Must be implemented by subclasses.
        """
        pass

    def run(self, **kwargs) -> None:
        """
        Run command with error handling.

        Args:
            **kwargs: Command arguments
        """
        try:
            self.execute(**kwargs)
        except KeyboardInterrupt:
            self.error_console.print(Text("\n⚠️  Operation cancelled by user", style="yellow"))
            if self.logger:
                self.logger.log_error("Operation cancelled by user")
            raise SystemExit(130)
        except SystemExit:
            raise
        except UploadError as e:
            self.handle_error(e)
            self._show_log_location()
            raise SystemExit(1)
        except Exception as e:
            error_type = type(e).__name__
            if self.logger:
                self.logger.log_error(str(e), context=error_type)
            self.print_error(f"{error_type}: {e}")
            self._show_log_location()
            raise SystemExit(1)
        finally:
            if self.logger:
                self.logger.close()

    def _show_log_location(self) -> None:
        if self.logger and self.logger.log_path:
            self.console.print(
                Text(f"Logs saved to: {self.logger.log_path}", style="dim"), soft_wrap=True
            )
