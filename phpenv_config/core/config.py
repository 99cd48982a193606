import os
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

# --- Application ---
APP_NAME = "phpenv-config"
APP_VERSION = "1.2.0"

# --- phpenv Integration ---
PHPENV_ROOT_ENV = "PHPENV_ROOT"
PHPENV_COMMAND_ENV = "PHPENV_COMMAND"
PHPENV_COMMAND = os.environ.get(PHPENV_COMMAND_ENV) or "phpenv"

# Version name phpenv reports when no managed PHP is selected
SYSTEM_VERSION = "system"

VERSIONS_SUBDIR = "versions"
ETC_SUBDIR = "etc"
ENABLED_DIR_NAME = "conf.d" # Scanned by PHP at startup
AVAILABLE_DIR_NAME = "conf.d-available"

# --- Fragment Naming ---
INI_SUFFIX = ".ini"
SO_SUFFIX = ".so"
CFG_PREFIX = "cfg"
EXT_PREFIX = "ext"
FRAGMENT_KINDS = (CFG_PREFIX, EXT_PREFIX)

# --- Enabled State Backend ---
ENABLE_MODE_ENV = "PHPENV_CONFIG_ENABLE_MODE"
ENABLE_MODE_SYMLINK = "symlink"
ENABLE_MODE_COPY = "copy"
ENABLE_MODES = (ENABLE_MODE_SYMLINK, ENABLE_MODE_COPY)
ENABLE_MODE = (os.environ.get(ENABLE_MODE_ENV) or ENABLE_MODE_SYMLINK).strip().lower()

# --- Logging ---
LOG_LEVEL_ENV = "PHPENV_CONFIG_LOG_LEVEL"
LOG_FILE_ENV = "PHPENV_CONFIG_LOG_FILE"
LOG_LEVEL = (os.environ.get(LOG_LEVEL_ENV) or "WARNING").strip().upper()
LOG_FILE = Path(os.environ[LOG_FILE_ENV]).expanduser() if os.environ.get(LOG_FILE_ENV) else None
LOG_FORMAT = '%(asctime)s [%(levelname)-7s] %(name)s: %(message)s'
LOG_DATE_FORMAT = '%H:%M:%S'
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUP_COUNT = 3

# --- Version Reporting ---
# Checkout that holds this package; used to derive the repository name and revision.
SOURCE_ROOT = Path(__file__).resolve().parent.parent.parent
GIT_COMMAND = "git"


# --- Helper function ---
def ensure_dir(path: Path):
    """Creates a directory if it doesn't exist. Returns True on success."""
    try:
        path.mkdir(parents=True, exist_ok=True)
        logger.debug(f"Ensured directory exists: {path}")
        return True
    except OSError as e:
        logger.error(f"CONFIG_ERROR: Error creating directory {path}: {e}", exc_info=True)
        return False
