# phpenv_config/managers/enabled_store.py

import os
import shutil
import logging
from pathlib import Path
from typing import List

logger = logging.getLogger(__name__)

from ..core import config
from ..core.errors import ConfigurationError


class EnabledStore:
    """
    Tracks which available fragments are enabled.

    Entries in enabled_dir are named exactly like their counterpart in
    available_dir (`<name>.ini`). Subclasses only decide how an entry is created.
    """

    def __init__(self, enabled_dir: Path, available_dir: Path):
        self.enabled_dir = Path(enabled_dir)
        self.available_dir = Path(available_dir)

    def enabled_path(self, name: str) -> Path:
        return self.enabled_dir / f"{name}{config.INI_SUFFIX}"

    def available_path(self, name: str) -> Path:
        return self.available_dir / f"{name}{config.INI_SUFFIX}"

    def is_enabled(self, name: str) -> bool:
        path = self.enabled_path(name)
        # A dangling symlink still occupies the name
        return path.is_symlink() or path.exists()

    def enabled_names(self) -> List[str]:
        if not self.enabled_dir.is_dir():
            return []
        names = []
        for item in self.enabled_dir.iterdir():
            if item.name.endswith(config.INI_SUFFIX) and (item.is_symlink() or item.is_file()):
                names.append(item.name[:-len(config.INI_SUFFIX)])
        return sorted(names)

    def enable(self, name: str) -> None:
        raise NotImplementedError

    def disable(self, name: str) -> None:
        enabled_path = self.enabled_path(name)
        available_path = self.available_path(name)
        if not enabled_path.is_symlink() and enabled_path.is_file() and not available_path.exists():
            # Not created by enable(); keep the content instead of discarding it
            self.available_dir.mkdir(parents=True, exist_ok=True)
            shutil.move(str(enabled_path), str(available_path))
            logger.info(f"ENABLED_STORE: Moved plain file {enabled_path} to {available_path}")
            return
        enabled_path.unlink()
        logger.debug(f"ENABLED_STORE: Removed {enabled_path}")


class SymlinkEnabledStore(EnabledStore):
    """Enables a fragment with a relative symlink into the available directory."""

    def enable(self, name: str) -> None:
        link_path = self.enabled_path(name)
        source_path = self.available_path(name)
        link_path.parent.mkdir(parents=True, exist_ok=True)
        # conf.d/<name>.ini -> ../conf.d-available/<name>.ini
        relative_target = Path(os.path.relpath(source_path.resolve(), link_path.parent.resolve()))
        os.symlink(relative_target, link_path)
        logger.debug(f"ENABLED_STORE: Created symlink {link_path} -> {relative_target}")


class CopyEnabledStore(EnabledStore):
    """Enables a fragment by copying it, for file systems without symlinks."""

    def enable(self, name: str) -> None:
        target_path = self.enabled_path(name)
        source_path = self.available_path(name)
        target_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source_path, target_path)
        logger.debug(f"ENABLED_STORE: Copied {source_path} to {target_path}")


ENABLED_STORES = {
    config.ENABLE_MODE_SYMLINK: SymlinkEnabledStore,
    config.ENABLE_MODE_COPY: CopyEnabledStore,
}


def create_enabled_store(mode: str, enabled_dir: Path, available_dir: Path) -> EnabledStore:
    """Returns the backend registered for `mode` ('symlink' or 'copy')."""
    store_cls = ENABLED_STORES.get(mode)
    if store_cls is None:
        raise ConfigurationError(
            f"Unknown enable mode '{mode}' in ${config.ENABLE_MODE_ENV}; expected one of: {', '.join(config.ENABLE_MODES)}."
        )
    return store_cls(enabled_dir, available_dir)
