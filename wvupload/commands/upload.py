"""
Upload Command

Build Worldview and publish it to {root}/{name} on a web host.
"""

import asyncio
from pathlib import Path
from typing import Callable, Optional

import rich_click as click

from wvupload import __version__
from wvupload.base import BaseCommand
from wvupload.exceptions import ArtifactNotFoundError, UploadError
from wvupload.models import PipelineStage, PipelineState, UploadConfig, UploadOptions
from wvupload.remote_commands import DeploymentLayout
from wvupload.services import BuildService, ConfigService, DeploymentService, SSHService
from wvupload.utils import get_artifact_path, get_config_file


class UploadCommand(BaseCommand):
    """
    Upload a build to the web host.

    Features:
    - Config file + command line merge
    - Optional local build with live output
    - Scoped SSH session (always closed)
    - Guarded directory reset, transfer, extract, relocate
    - Automatic logging
    """

    def __init__(
        self,
        options: UploadOptions,
        verbose: bool = False,
        config_file: Optional[Path] = None,
        project_root: Optional[Path] = None,
        logs_dir: Optional[Path] = None,
        connector: Optional[Callable] = None,
    ):
        """
        Initialize upload command.

        Args:
            options: UploadOptions from the command line
            verbose: Whether to show verbose output
            config_file: Persisted config (default: ~/.worldview/upload.config)
            project_root: Worldview checkout (default: current directory)
            logs_dir: Log directory (default: ~/.worldview/logs)
            connector: Replacement for asyncssh.connect
        """
        super().__init__(verbose=verbose, project_root=project_root, logs_dir=logs_dir)
        self.options = options
        self.config_file = config_file if config_file is not None else get_config_file()
        self.connector = connector
        self.state = PipelineState()
        self.config: Optional[UploadConfig] = None
        self.layout: Optional[DeploymentLayout] = None

    def execute(self) -> None:
        """Execute upload command."""
        try:
            self._upload()
        except UploadError as e:
            self.state.fail(e.message)
            raise

        self._print_summary()

    def _upload(self) -> None:
        # Nothing is spawned or contacted until the config is complete
        self.config = ConfigService(self.config_file).resolve(self.options)
        self.state.advance(PipelineStage.CONFIG_RESOLVED)
        config = self.config
        layout = self.layout = DeploymentLayout(config.root, config.deployment_name)

        self.show_header(
            title="Upload",
            details={
                "Deployment": config.deployment_name,
                "Target": f"{config.connection_string}:{layout.directory}",
            },
        )

        logger = self.init_logger(config.deployment_name, "upload")
        logger.log(repr(config))
        if not config.key_exists:
            logger.warning(f"SSH key not found: {config.key_path}")

        if config.use_existing_artifacts:
            logger.step("Using existing build")
            self.state.advance(PipelineStage.BUILD_SKIPPED)
        else:
            logger.step("Building Worldview")
            BuildService(self.project_root, logger=logger, console=self.console).run(
                config.build_env
            )
            self.state.advance(PipelineStage.BUILD_SUCCEEDED)

        artifact = get_artifact_path(self.project_root)
        if not artifact.is_file():
            raise ArtifactNotFoundError(str(artifact))

        asyncio.run(self._deploy(config, layout, artifact))

    async def _deploy(
        self, config: UploadConfig, layout: DeploymentLayout, artifact: Path
    ) -> None:
        ssh_service = SSHService(config, logger=self.logger, connector=self.connector)

        self.logger.step(f"Connecting to {config.connection_string}")
        async with ssh_service.session() as remote:
            self.state.advance(PipelineStage.SESSION_OPEN)
            deployer = DeploymentService(
                remote, layout, state=self.state, logger=self.logger, init=config.init
            )
            await deployer.deploy(artifact)

    def _print_summary(self) -> None:
        """Print upload summary."""
        config = self.config
        self.logger.success("Upload complete")
        if not self.verbose:
            self.console.print()
            self.print_success(
                f"Deployed {config.deployment_name} to {config.host}:{self.layout.directory}"
            )
            self.print_dim(f"Logs saved to: {self.logger.log_path}")


EPILOG = """
Defaults for "host", "key", "root", "user" and "port" should be placed in a
JSON file found at "~/.worldview/upload.config".

Values on the command line override those found in the configuration file.

If "host" or "root" is not found in the configuration file, it must
appear on the command line.
"""


@click.command(
    "upload",
    epilog=EPILOG,
    context_settings={"help_option_names": ["--help"]},
)
@click.argument("name", required=False)
@click.option(
    "-d", "--dist", is_flag=True,
    help="do not build, use artifacts found in dist directory",
)
@click.option("-e", "--env", metavar="ENV", help='configuration environment if not "release"')
@click.option("-h", "--host", metavar="HOST", help="upload to this host")
@click.option("-k", "--key", metavar="PATH", help="path to private ssh key")
@click.option("-r", "--root", metavar="PATH", help="extract application to this directory")
@click.option("-u", "--user", metavar="USER", help="login to remote host using this user name")
@click.option("-p", "--port", type=int, metavar="PORT", help="ssh port on remote host")
@click.option(
    "--init", is_flag=True,
    help="create the deployment directory if it does not exist yet",
)
@click.option("--verbose", "-v", is_flag=True, help="Show all log output")
@click.version_option(version=__version__)
def upload(name, dist, env, host, key, root, user, port, init, verbose):
    """
    Build Worldview and upload it to NAME under the remote root

    The build archive is copied to ROOT/NAME on the host, extracted, and
    its web directory moved into place.

    \b
    Examples:
        # Build and deploy to /srv/app/mysite
        wv-upload -h web1 -r /srv/app mysite

        # Deploy the existing dist/ build
        wv-upload --dist mysite
    """
    options = UploadOptions(
        name=name,
        dist=dist,
        env=env,
        host=host,
        key=key,
        root=root,
        user=user,
        port=port,
        init=init,
    )
    cmd = UploadCommand(options, verbose=verbose)
    cmd.run()
