# phpenv_config/managers/fragment_manager.py

import shutil
import logging
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)  # Use __name__ for module-specific logger

# --- Import Core Modules ---
from ..core import config
from ..core import system_utils
from ..core.errors import (
    InvalidSourcePath,
    MissingArgument,
    UnknownFragment,
    AlreadyEnabled,
    UnsupportedVersion,
)
from ..core.phpenv import Host
from .enabled_store import EnabledStore, create_enabled_store
# --- End Imports ---


# --- Path Definitions ---
def get_confd_paths(root: Path, version_str: str) -> Dict[str, Path]:
    """
    Constructs the managed directories for a given PHP version.

    'enabled' is the conf.d directory PHP scans at startup; 'available' holds
    every known fragment.
    """
    etc_dir = Path(root) / config.VERSIONS_SUBDIR / version_str / config.ETC_SUBDIR
    return {
        "etc": etc_dir,
        "enabled": etc_dir / config.ENABLED_DIR_NAME,
        "available": etc_dir / config.AVAILABLE_DIR_NAME,
    }


# --- Naming Helpers ---
def fragment_name(value: str) -> str:
    """
    Canonical fragment name for a path or name: the basename with a trailing
    '.ini' and then a trailing '.so' removed. 'xdebug.so.ini' -> 'xdebug'.
    """
    name = Path(value).name
    if name.endswith(config.INI_SUFFIX):
        name = name[:-len(config.INI_SUFFIX)]
    if name.endswith(config.SO_SUFFIX):
        name = name[:-len(config.SO_SUFFIX)]
    return name


def stored_name(kind: str, value: str) -> str:
    """Name a fragment is stored under in the available directory, e.g. 'ext-igbinary'."""
    return f"{kind}-{fragment_name(value)}"


def format_fragment_lines(name: str, content: str, counter: Iterator[int]) -> List[str]:
    """
    Annotates each line of a fragment as '[name:N] = line'.

    N is drawn from `counter`, so numbering carries on across fragments when
    the caller passes the same counter again.
    """
    return [f"[{name}:{next(counter)}] = {line}" for line in content.splitlines()]


# --- Version Reporting ---
def get_version_string(source_root: Optional[Path] = None) -> str:
    """'<repository> v<version> (<revision>)', falling back to the app name outside a git checkout."""
    source_root = source_root or config.SOURCE_ROOT
    # An installed copy sits inside site-packages; git would report whatever checkout encloses the venv
    toplevel = system_utils.get_git_toplevel(source_root)
    if toplevel is None or toplevel.resolve() != Path(source_root).resolve():
        logger.debug(f"FRAGMENT_MANAGER: {source_root} is not the top of a git checkout; reporting plain version.")
        return f"{config.APP_NAME} v{config.APP_VERSION}"
    remote_url = system_utils.get_git_remote_url(source_root)
    repo_name = system_utils.repo_short_name(remote_url) if remote_url else config.APP_NAME
    revision = system_utils.get_git_revision(source_root)
    if revision:
        return f"{repo_name} v{config.APP_VERSION} ({revision})"
    return f"{repo_name} v{config.APP_VERSION}"


class ConfigFragmentManager:
    """
    Manages the ini fragments of the PHP version currently selected in phpenv.

    Every fragment operation first checks that the active version is managed
    by phpenv, then creates the enabled/available directories if needed.
    Failures are raised as ConfigFragmentError subclasses.
    """

    def __init__(self, host: Host, enable_mode: Optional[str] = None):
        self.host = host
        self.enable_mode = enable_mode or config.ENABLE_MODE
        self._store: Optional[EnabledStore] = None

    # --- Internal ---
    def _require_managed_version(self) -> str:
        version = self.host.active_version()
        if not version or version == config.SYSTEM_VERSION:
            logger.error(f"FRAGMENT_MANAGER: Refusing to manage configs for unmanaged PHP version '{version}'.")
            raise UnsupportedVersion(version or config.SYSTEM_VERSION)
        return version

    def _prepare(self) -> EnabledStore:
        """Validates the active version and returns the enabled-state store for it."""
        version = self._require_managed_version()
        if self._store is None:
            paths = get_confd_paths(self.host.root(), version)
            store = create_enabled_store(self.enable_mode, paths["enabled"], paths["available"])
            for dir_path in (paths["available"], paths["enabled"]):
                if not config.ensure_dir(dir_path):
                    raise OSError(f"Could not create directory {dir_path}")
            self._store = store
            logger.debug(f"FRAGMENT_MANAGER: Managing PHP {version} configs in {paths['etc']} ({self.enable_mode} mode)")
        return self._store

    @staticmethod
    def _require(value: Optional[str], argument: str) -> str:
        if value is None or not str(value).strip():
            raise MissingArgument(argument)
        return str(value).strip()

    def _add(self, kind: str, source_path: Optional[str]) -> str:
        source_str = self._require(source_path, "path to an ini file")
        store = self._prepare()
        source = Path(source_str).expanduser()
        if not source.is_file():
            logger.error(f"FRAGMENT_MANAGER: Source {source} is not a regular file.")
            raise InvalidSourcePath(source_str)

        name = stored_name(kind, source.name)
        target = store.available_path(name)
        shutil.copyfile(source, target)
        logger.info(f"FRAGMENT_MANAGER: Copied {source} to {target}")
        return name

    # --- Operations ---
    def add_config(self, source_path: str) -> str:
        """Stores a general config file as 'cfg-<name>'. Returns the stored name."""
        return self._add(config.CFG_PREFIX, source_path)

    def add_extension(self, source_path: str) -> str:
        """Stores an extension config file as 'ext-<name>'. Returns the stored name."""
        return self._add(config.EXT_PREFIX, source_path)

    def new_extension(self, ext_name: str) -> str:
        """Writes 'extension=<ext_name>.so' as 'ext-<ext_name>', replacing any existing one."""
        ext_name = fragment_name(self._require(ext_name, "extension name"))
        if not ext_name:
            raise MissingArgument("extension name")
        store = self._prepare()
        name = stored_name(config.EXT_PREFIX, ext_name)
        target = store.available_path(name)
        target.write_text(f"extension={ext_name}{config.SO_SUFFIX}\n", encoding='utf-8')
        logger.info(f"FRAGMENT_MANAGER: Wrote extension config {target}")
        return name

    def enable(self, name: str) -> str:
        name = fragment_name(self._require(name, "config name"))
        store = self._prepare()
        if not store.available_path(name).is_file():
            raise UnknownFragment(name, "available")
        if store.is_enabled(name):
            raise AlreadyEnabled(name)
        store.enable(name)
        logger.info(f"FRAGMENT_MANAGER: Enabled {name}")
        return name

    def disable(self, name: str) -> str:
        name = fragment_name(self._require(name, "config name"))
        store = self._prepare()
        if not store.is_enabled(name):
            raise UnknownFragment(name, "enabled")
        store.disable(name)
        logger.info(f"FRAGMENT_MANAGER: Disabled {name}")
        return name

    def remove(self, name: str) -> str:
        """Deletes a fragment and its enabled entry. Not reversible."""
        name = fragment_name(self._require(name, "config name"))
        store = self._prepare()
        available_path = store.available_path(name)
        if not available_path.is_file():
            raise UnknownFragment(name, "available")

        enabled_path = store.enabled_path(name)
        try:
            enabled_path.unlink()
            logger.debug(f"FRAGMENT_MANAGER: Removed enabled entry {enabled_path}")
        except FileNotFoundError:
            pass
        available_path.unlink()
        logger.info(f"FRAGMENT_MANAGER: Removed {available_path}")
        return name

    def list_fragments(self) -> Tuple[List[str], List[str]]:
        """Returns (enabled, disabled) fragment names, each sorted."""
        store = self._prepare()
        enabled = store.enabled_names()
        disabled = [name for name in self._available_names(store) if not store.is_enabled(name)]
        return enabled, disabled

    def show(self, name: str, counter: Iterator[int]) -> List[str]:
        name = fragment_name(self._require(name, "config name"))
        store = self._prepare()
        path = store.available_path(name)
        if not path.is_file():
            raise UnknownFragment(name, "available")
        return format_fragment_lines(name, path.read_text(encoding='utf-8', errors='replace'), counter)

    def available_names(self) -> List[str]:
        return self._available_names(self._prepare())

    @staticmethod
    def _available_names(store: EnabledStore) -> List[str]:
        names = [
            item.name[:-len(config.INI_SUFFIX)]
            for item in store.available_dir.glob(f"*{config.INI_SUFFIX}")
            if item.is_file()
        ]
        return sorted(names)
