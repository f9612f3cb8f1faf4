"""
Worldview Upload Constants

Centralized constants for file names, defaults, and remote layout.
"""

# Configuration
CONFIG_DIR_NAME = ".worldview"
CONFIG_FILE_NAME = "upload.config"
LOGS_DIR_NAME = "logs"

# Default SSH Configuration
DEFAULT_SSH_KEY_PATH = "~/.ssh/id_rsa"
DEFAULT_SSH_PORT = 22
MIN_PORT = 1
MAX_PORT = 65535

# Build Configuration
BUILD_TOOL = "npm"
BUILD_TOOL_WINDOWS = "npm.cmd"
BUILD_ARGS = ["run", "build"]

# Build Artifact
DIST_DIR = "dist"
ARTIFACT_NAME = "site-worldview-debug.tar.bz2"

# Remote Layout
# The archive extracts into a scaffold directory whose web root is moved up
SCAFFOLD_DIR = "site-worldview-debug"
WEB_ROOT_DIR = "web"
HIDDEN_WEB_FILES = [".htaccess"]
TAR_OPTIONS = ["--warning=no-unknown-keyword"]
# Written into the scaffold after each step succeeds; gates the next step
EXTRACTED_MARKER = ".wv-extracted"
RELOCATED_MARKER = ".wv-relocated"

# Log Configuration
LOG_DATE_FORMAT = "%Y-%m-%d"
LOG_TIME_FORMAT = "%H-%M-%S"
