"""Unit tests for BuildService (local npm build)."""

import io
import subprocess
import sys
from unittest.mock import MagicMock, patch

import pytest

from wvupload.exceptions import BuildFailure
from wvupload.services.build_service import BuildService, build_command


def make_process(stdout="", stderr="", returncode=0):
    process = MagicMock()
    process.stdout = io.BytesIO(stdout.encode())
    process.stderr = io.BytesIO(stderr.encode())
    process.wait.return_value = returncode
    return process


class TestBuildCommand:
    def test_default(self):
        assert build_command(platform="linux") == ["npm", "run", "build"]

    def test_named_environment(self):
        assert build_command("uat", platform="darwin") == ["npm", "run", "build", "--", "uat"]

    def test_windows_uses_npm_cmd(self):
        assert build_command(platform="win32")[0] == "npm.cmd"


class TestRun:
    @patch("wvupload.services.build_service.subprocess.Popen")
    def test_success_streams_output(self, mock_popen, tmp_path, capsys):
        mock_popen.return_value = make_process("built 1\nbuilt 2\n", "warn\n", 0)

        result = BuildService(tmp_path).run()

        captured = capsys.readouterr()
        assert "===> npm run build" in captured.out
        assert "built 1\nbuilt 2\n" in captured.out
        assert captured.err == "warn\n"
        assert result.returncode == 0
        assert result.stdout == "built 1\nbuilt 2\n"
        assert result.stderr == "warn\n"

    @patch("wvupload.services.build_service.subprocess.Popen")
    def test_runs_in_project_root(self, mock_popen, tmp_path):
        mock_popen.return_value = make_process()

        BuildService(tmp_path).run("uat")

        args, kwargs = mock_popen.call_args
        assert args[0][-2:] == ["--", "uat"]
        assert kwargs["cwd"] == str(tmp_path)
        assert kwargs["stdout"] == subprocess.PIPE
        assert kwargs["stderr"] == subprocess.PIPE

    @patch("wvupload.services.build_service.subprocess.Popen")
    def test_nonzero_exit_fails(self, mock_popen, tmp_path):
        mock_popen.return_value = make_process(stderr="ERR!\n", returncode=2)

        with pytest.raises(BuildFailure) as exc_info:
            BuildService(tmp_path).run()

        assert exc_info.value.message == "build failed: npm run build exited with status 2"
        assert exc_info.value.context is None

    @patch("wvupload.services.build_service.subprocess.Popen")
    def test_launch_failure(self, mock_popen, tmp_path):
        mock_popen.side_effect = FileNotFoundError(2, "No such file or directory", "npm")

        with pytest.raises(BuildFailure, match="build failed: "):
            BuildService(tmp_path).run()

    @patch("wvupload.services.build_service.subprocess.Popen")
    def test_output_copied_to_log(self, mock_popen, tmp_path):
        mock_popen.return_value = make_process("line one\n", "line two\n", 0)
        logger = MagicMock()

        BuildService(tmp_path, logger=logger).run()

        logger.log_output.assert_any_call("line one", "stdout")
        logger.log_output.assert_any_call("line two", "stderr")
        logger.log_command.assert_called_once_with("npm run build")


BUILD_COMMAND = "wvupload.services.build_service.build_command"

MIXED_OUTPUT = r"""
import sys
print("step 1", flush=True)
sys.stderr.write("warning: deprecated\n")
print("step 2")
"""

FAILING_BUILD = r"""
import sys
print("compiling")
sys.stderr.write("ERR! missing module\n")
sys.exit(2)
"""

# Non-UTF-8 byte first, then more than a pipe buffer of output
LATIN1_OUTPUT = r"""
import sys
out = sys.stdout.buffer
out.write(b"caf\xe9 built\n")
for _ in range(20000):
    out.write(b"x" * 39 + b"\n")
"""


def python_build(script):
    return patch(BUILD_COMMAND, return_value=[sys.executable, "-c", script])


class TestRealProcess:
    """The build runs as a real child process with live pipes."""

    def test_streams_both_pipes(self, tmp_path, capfd):
        with python_build(MIXED_OUTPUT):
            result = BuildService(tmp_path).run()

        out, err = capfd.readouterr()
        assert "step 1\nstep 2\n" in out
        assert err == "warning: deprecated\n"
        assert result.returncode == 0
        assert result.stdout == "step 1\nstep 2\n"

    def test_exit_status_two_fails(self, tmp_path, capfd):
        with python_build(FAILING_BUILD):
            with pytest.raises(BuildFailure, match="exited with status 2"):
                BuildService(tmp_path).run()

        out, err = capfd.readouterr()
        assert "compiling" in out
        assert "ERR! missing module" in err

    def test_invalid_utf8_passed_through_unchanged(self, tmp_path, capfdbinary):
        logger = MagicMock()

        with python_build(LATIN1_OUTPUT):
            result = BuildService(tmp_path, logger=logger).run()

        out, _ = capfdbinary.readouterr()
        assert b"caf\xe9 built\n" in out
        assert out.count(b"x" * 39 + b"\n") == 20000
        assert result.stdout.startswith("caf� built\n")
        logger.log_output.assert_any_call("caf� built", "stdout")

    def test_missing_executable(self, tmp_path):
        missing = tmp_path / "no-such-npm"
        with patch(BUILD_COMMAND, return_value=[str(missing)]):
            with pytest.raises(BuildFailure, match="build failed: "):
                BuildService(tmp_path).run()
