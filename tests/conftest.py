"""Shared fixtures: fake asyncssh connections and isolated home/project dirs."""

import json

import asyncssh
import pytest

from tests.fakes import FakeConnection, FakeConnector
from wvupload.constants import ARTIFACT_NAME, DIST_DIR


@pytest.fixture
def fake_connection():
    return FakeConnection()


@pytest.fixture
def connector(fake_connection):
    return FakeConnector(fake_connection)


@pytest.fixture
def home(tmp_path, monkeypatch):
    """Isolated home directory (config file and logs live under it)."""
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    monkeypatch.setenv("HOME", str(home_dir))
    return home_dir


@pytest.fixture
def write_config(home):
    """Write ~/.worldview/upload.config."""

    def _write(data):
        config_dir = home / ".worldview"
        config_dir.mkdir(exist_ok=True)
        config_file = config_dir / "upload.config"
        if isinstance(data, str):
            config_file.write_text(data)
        else:
            config_file.write_text(json.dumps(data))
        return config_file

    return _write


@pytest.fixture
def project_root(tmp_path):
    """Worldview checkout with a built archive in dist/."""
    root = tmp_path / "worldview"
    dist = root / DIST_DIR
    dist.mkdir(parents=True)
    (dist / ARTIFACT_NAME).write_bytes(b"archive")
    return root


@pytest.fixture
def transfer_failure():
    return asyncssh.SFTPNoSuchFile("No such file")
