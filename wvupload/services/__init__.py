"""
Worldview Upload Services Layer

Configuration, build, SSH session and deployment operations.
"""

from .config_service import ConfigService
from .build_service import BuildService
from .ssh_service import SSHService, RemoteSession
from .deploy_service import DeploymentService

__all__ = [
    "ConfigService",
    "BuildService",
    "SSHService",
    "RemoteSession",
    "DeploymentService",
]
