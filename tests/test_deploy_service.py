"""Unit tests for DeploymentService (remote step sequencing)."""

import asyncio
import io
import shutil
import subprocess
import tarfile
from unittest.mock import MagicMock

import asyncssh
import pytest

from tests.fakes import FakeConnection, LocalShellConnection
from wvupload.exceptions import DeploymentError, RemoteExecutionError, TransferError
from wvupload.models import PipelineStage, PipelineState
from wvupload.remote_commands import DeploymentLayout
from wvupload.services.deploy_service import DeploymentService
from wvupload.services.ssh_service import RemoteSession


def deploy(connection, artifact, init=False):
    layout = DeploymentLayout("/srv/app", "mysite")
    state = PipelineState(stage=PipelineStage.SESSION_OPEN)
    service = DeploymentService(RemoteSession(connection, "h1"), layout, state=state, init=init)
    return service, asyncio.run(service.deploy(artifact))


@pytest.fixture
def artifact(project_root):
    return project_root / "dist" / "site-worldview-debug.tar.bz2"


class TestSequencing:
    def test_steps_run_in_order_over_one_session(self, artifact):
        connection = FakeConnection()
        layout = DeploymentLayout("/srv/app", "mysite")

        _, state = deploy(connection, artifact)

        assert connection.calls == [
            ("run", layout.prepare_directory()),
            ("put", str(artifact), "/srv/app/mysite/site-worldview-debug.tar.bz2"),
            ("run", layout.extract()),
            ("run", layout.relocate()),
            ("run", layout.cleanup()),
        ]
        assert state.stage == PipelineStage.DONE

    def test_state_walks_every_stage(self, artifact):
        _, state = deploy(FakeConnection(), artifact)

        assert state.history == [
            PipelineStage.SESSION_OPEN,
            PipelineStage.DIRECTORY_PREPARED,
            PipelineStage.ARTIFACT_TRANSFERRED,
            PipelineStage.EXTRACTED,
            PipelineStage.RELOCATED,
        ]

    def test_rerun_issues_identical_commands(self, artifact):
        first, second = FakeConnection(), FakeConnection()
        deploy(first, artifact)
        deploy(second, artifact)
        assert first.calls == second.calls

    def test_init_prepare_command(self, artifact):
        connection = FakeConnection()
        deploy(connection, artifact, init=True)
        assert connection.commands[0].startswith("if [ -e /srv/app/mysite ]")


class TestOutput:
    def test_remote_output_passed_through(self, artifact, capsys):
        connection = FakeConnection(outputs={"tar xf": ("extracted\n", "tar: warning\n")})

        deploy(connection, artifact)

        captured = capsys.readouterr()
        assert "extracted\n" in captured.out
        assert "tar: warning\n" in captured.err

    def test_output_copied_to_log(self, artifact):
        connection = FakeConnection(outputs={"mv ": ("moved\n", "")})
        logger = MagicMock()
        layout = DeploymentLayout("/srv/app", "mysite")
        service = DeploymentService(RemoteSession(connection, "h1"), layout, logger=logger)

        asyncio.run(service.deploy(artifact))

        logger.log_output.assert_any_call("moved\n", "stdout")
        assert logger.step.call_count == 4


class TestFailures:
    def test_transfer_failure_stops_sequence(self, artifact, transfer_failure):
        connection = FakeConnection(transfer_error=transfer_failure)
        layout = DeploymentLayout("/srv/app", "mysite")
        state = PipelineState(stage=PipelineStage.SESSION_OPEN)
        service = DeploymentService(RemoteSession(connection, "h1"), layout, state=state)

        with pytest.raises(TransferError):
            asyncio.run(service.deploy(artifact))

        # Extraction and relocation never attempted
        assert connection.commands == [layout.prepare_directory()]
        assert state.stage == PipelineStage.FAILED
        assert "transfer failed" in state.failure_reason

    def test_remote_failure_is_deployment_error(self, artifact):
        connection = FakeConnection(run_error=asyncssh.ConnectionLost("reset by peer"))
        layout = DeploymentLayout("/srv/app", "mysite")
        state = PipelineState(stage=PipelineStage.SESSION_OPEN)
        service = DeploymentService(RemoteSession(connection, "h1"), layout, state=state)

        with pytest.raises(DeploymentError) as exc_info:
            asyncio.run(service.deploy(artifact))

        assert isinstance(exc_info.value, RemoteExecutionError)
        assert len(connection.calls) == 1
        assert state.is_failed


class TestShellGating:
    """Later steps only act when the earlier ones succeeded."""

    def test_failed_extract_gates_relocate_and_cleanup(self, artifact):
        connection = FakeConnection(outputs={"tar xf": ("", "tar: corrupt\n", 2)})
        layout = DeploymentLayout("/srv/app", "mysite")
        logger = MagicMock()
        service = DeploymentService(RemoteSession(connection, "h1"), layout, logger=logger)

        asyncio.run(service.deploy(artifact))

        relocate, cleanup = connection.commands[2:]
        assert "[ -e site-worldview-debug/.wv-extracted ] && mv" in relocate
        assert "[ -e site-worldview-debug/.wv-relocated ] && rm -rf" in cleanup
        logger.warning.assert_called_once_with("Remote command exited with status 2")


def _has_gnu_tar():
    tar = shutil.which("tar")
    if tar is None or shutil.which("bzip2") is None:
        return False
    version = subprocess.run([tar, "--version"], capture_output=True, text=True)
    return "GNU tar" in version.stdout


requires_gnu_tar = pytest.mark.skipif(not _has_gnu_tar(), reason="needs GNU tar and bzip2")


def make_archive(path, files):
    with tarfile.open(path, "w:bz2") as archive:
        for name, content in files.items():
            info = tarfile.TarInfo(f"site-worldview-debug/web/{name}")
            info.size = len(content)
            info.mtime = 1700000000
            archive.addfile(info, io.BytesIO(content))
    return path


@requires_gnu_tar
class TestLocalShell:
    """Commands run by a real shell against a real archive."""

    def deploy_locally(self, tmp_path, files):
        artifact = make_archive(tmp_path / "site-worldview-debug.tar.bz2", files)
        layout = DeploymentLayout(str(tmp_path / "srv"), "mysite")
        connection = LocalShellConnection()
        service = DeploymentService(RemoteSession(connection, "localhost"), layout, init=True)
        asyncio.run(service.deploy(artifact))
        return tmp_path / "srv" / "mysite"

    def test_web_root_published(self, tmp_path):
        directory = self.deploy_locally(
            tmp_path, {"index.html": b"<html></html>", ".htaccess": b"Options -Indexes"}
        )

        assert (directory / "index.html").read_bytes() == b"<html></html>"
        assert (directory / ".htaccess").is_file()
        assert not (directory / "site-worldview-debug").exists()

    def test_failed_relocate_keeps_scaffold(self, tmp_path):
        # No .htaccess in the archive, so mv fails
        directory = self.deploy_locally(tmp_path, {"index.html": b"<html></html>"})

        assert (directory / "site-worldview-debug").is_dir()
        assert not (directory / "site-worldview-debug" / ".wv-relocated").exists()

    def test_corrupt_archive_skips_later_steps(self, tmp_path):
        artifact = tmp_path / "site-worldview-debug.tar.bz2"
        artifact.write_bytes(b"not an archive")
        layout = DeploymentLayout(str(tmp_path / "srv"), "mysite")
        connection = LocalShellConnection()
        service = DeploymentService(RemoteSession(connection, "localhost"), layout, init=True)

        asyncio.run(service.deploy(artifact))

        directory = tmp_path / "srv" / "mysite"
        assert sorted(p.name for p in directory.iterdir()) == ["site-worldview-debug.tar.bz2"]
