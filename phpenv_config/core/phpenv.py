import os
import logging
from pathlib import Path
from typing import List, Optional

from . import config
from .errors import HostCommandError
from .system_utils import run_command

logger = logging.getLogger(__name__)


class Host:
    """
    What the fragment manager needs to know about the host version manager:
    where it is installed, which PHP version is active, and which versions exist.
    """

    def root(self) -> Path:
        raise NotImplementedError

    def active_version(self) -> str:
        raise NotImplementedError

    def list_installed_versions(self) -> List[str]:
        raise NotImplementedError


class PhpenvHost(Host):
    """Queries a phpenv installation through its command line."""

    def __init__(self, command: Optional[str] = None):
        self.command = command or config.PHPENV_COMMAND
        self._root: Optional[Path] = None
        self._version: Optional[str] = None

    def _query(self, *args: str) -> str:
        code, out, err = run_command([self.command, *args])
        if code != 0:
            logger.error(f"PHPENV_HOST: '{self.command} {' '.join(args)}' failed (code {code}): {err}")
            raise HostCommandError(f"Could not run '{self.command} {' '.join(args)}': {err or 'exit code ' + str(code)}")
        return out

    def root(self) -> Path:
        if self._root is None:
            env_root = os.environ.get(config.PHPENV_ROOT_ENV)
            if env_root:
                self._root = Path(env_root).expanduser()
                logger.debug(f"PHPENV_HOST: Using root from ${config.PHPENV_ROOT_ENV}: {self._root}")
            else:
                self._root = Path(self._query("root"))
                logger.debug(f"PHPENV_HOST: Using root reported by {self.command}: {self._root}")
        return self._root

    def active_version(self) -> str:
        if self._version is None:
            self._version = self._query("version-name")
            logger.debug(f"PHPENV_HOST: Active PHP version is '{self._version}'")
        return self._version

    def list_installed_versions(self) -> List[str]:
        out = self._query("versions", "--bare")
        return [line.strip() for line in out.splitlines() if line.strip()]


class StaticHost(Host):
    """A host with fixed answers."""

    def __init__(self, root: Path, version: str, installed: Optional[List[str]] = None):
        self._root = Path(root)
        self._version = version
        self._installed = list(installed) if installed is not None else []

    def root(self) -> Path:
        return self._root

    def active_version(self) -> str:
        return self._version

    def list_installed_versions(self) -> List[str]:
        return list(self._installed)
