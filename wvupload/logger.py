"""
Logging system for Worldview Upload
Provides real-time logging to files with clean console output
"""

import re
from datetime import datetime
from pathlib import Path
from typing import Optional, TextIO

from rich.console import Console
from rich.text import Text

from wvupload.constants import LOG_DATE_FORMAT, LOG_TIME_FORMAT

console = Console()

ANSI_ESCAPE = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")


class DeployLogger:
    """
    Manages logging for one upload run
    - Writes all output to a log file in real-time
    - Shows clean step markers in console (unless verbose)
    - Captures errors with context
    """

    def __init__(
        self,
        deployment_name: str,
        operation: str,
        logs_dir: Path,
        verbose: bool = False,
    ):
        """
        Initialize logger

        Args:
            deployment_name: Name of the deployment being uploaded
            operation: Operation name (e.g., 'upload')
            logs_dir: Base directory for log files
            verbose: If True, show all output in console
        """
        self.deployment_name = deployment_name
        self.operation = operation
        self.verbose = verbose
        self.log_file: Optional[TextIO] = None
        self.log_path: Optional[Path] = None
        self.current_step = ""
        self.has_errors = False

        # Structure: logs/{deployment}/{date}/{time}_{operation}.log
        now = datetime.now()
        run_logs_dir = Path(logs_dir) / deployment_name / now.strftime(LOG_DATE_FORMAT)
        run_logs_dir.mkdir(parents=True, exist_ok=True)

        self.log_path = run_logs_dir / f"{now.strftime(LOG_TIME_FORMAT)}_{operation}.log"

        # Line buffered for real-time
        self.log_file = open(self.log_path, "w", buffering=1)

        self._write_log_header()

    def _write_log_header(self):
        """Write log file header"""
        header = f"""
{"=" * 80}
Worldview Upload Log
{"=" * 80}
Deployment: {self.deployment_name}
Operation: {self.operation}
Started: {datetime.now().isoformat()}
{"=" * 80}

"""
        self.log_file.write(header)
        self.log_file.flush()

    def log(self, message: str, level: str = "INFO"):
        """
        Log a message to file and optionally console

        Args:
            message: Message to log
            level: Log level (INFO, WARNING, ERROR, DEBUG)
        """
        timestamp = datetime.now().strftime("%H:%M:%S")

        if self.log_file:
            self.log_file.write(f"[{timestamp}] [{level}] {message}\n")
            self.log_file.flush()

        if self.verbose:
            if level == "ERROR":
                console.print(Text(message, style="red"))
            elif level == "WARNING":
                console.print(Text(message, style="yellow"))
            elif level == "DEBUG":
                console.print(Text(message, style="dim"))
            else:
                console.print(Text(message))

    def log_command(self, command: str):
        """Log a command being executed"""
        self.log(f"Executing: {command}", "DEBUG")

    def log_output(self, output: str, stream: str = "stdout"):
        """
        Log command output to the file only.

        The caller has already passed the output through to the terminal.

        Args:
            output: Command output (single line or multiline)
            stream: Stream name (stdout, stderr)
        """
        if not output or not self.log_file:
            return

        clean_output = ANSI_ESCAPE.sub("", output)
        for line in clean_output.splitlines():
            self.log_file.write(f"  [{stream}] {line}\n")
        self.log_file.flush()

    def log_error(self, error: str, context: Optional[str] = None):
        """
        Log an error with context (file only, console reporting is the caller's)

        Args:
            error: Error message
            context: Additional context (e.g., command that failed)
        """
        self.has_errors = True

        if not self.log_file:
            return

        error_block = f"""
{"!" * 80}
ERROR OCCURRED
{"!" * 80}
{error}
"""
        if context:
            error_block += f"\nContext: {context}\n"

        error_block += f"{'!' * 80}\n\n"

        self.log_file.write(error_block)
        self.log_file.flush()

    def step(self, step_name: str):
        """
        Start a new step

        Args:
            step_name: Name of the step
        """
        self.current_step = step_name
        self.log(f"Step: {step_name}", "INFO")

        if not self.verbose:
            console.print(Text.assemble(("▶ ", "color(214)"), (step_name, "white")))

    def success(self, message: str):
        """Log a success message"""
        self.log(message, "INFO")

        if not self.verbose:
            console.print(Text(f"  ✓ {message}", style="dim"))

    def warning(self, message: str):
        """Log a warning message"""
        self.log(message, "WARNING")

        if not self.verbose:
            console.print(Text(f"  ⚠ {message}", style="yellow"))

    def close(self):
        """Close log file"""
        if self.log_file:
            footer = f"""
{"=" * 80}
Completed: {datetime.now().isoformat()}
Status: {"FAILED" if self.has_errors else "SUCCESS"}
{"=" * 80}
"""
            self.log_file.write(footer)
            self.log_file.close()
            self.log_file = None
