"""Shared fixtures: a throwaway phpenv root with one managed PHP version."""

import pytest
from pathlib import Path

from phpenv_config.core.phpenv import StaticHost
from phpenv_config.managers.fragment_manager import ConfigFragmentManager, get_confd_paths

PHP_VERSION = "8.2.10"
INSTALLED_VERSIONS = ["8.1.27", "8.2.10"]


@pytest.fixture
def phpenv_root(tmp_path):
    root = tmp_path / "phpenv"
    (root / "versions" / PHP_VERSION).mkdir(parents=True)
    return root


@pytest.fixture
def host(phpenv_root):
    return StaticHost(phpenv_root, PHP_VERSION, INSTALLED_VERSIONS)


@pytest.fixture
def system_host(phpenv_root):
    return StaticHost(phpenv_root, "system", INSTALLED_VERSIONS)


@pytest.fixture
def confd(phpenv_root):
    """The enabled/available directories of the managed version, created up front."""
    paths = get_confd_paths(phpenv_root, PHP_VERSION)
    paths["enabled"].mkdir(parents=True, exist_ok=True)
    paths["available"].mkdir(parents=True, exist_ok=True)
    return paths


@pytest.fixture
def manager(host):
    return ConfigFragmentManager(host, enable_mode="symlink")


@pytest.fixture
def ini_file(tmp_path):
    """Factory writing a source ini file outside the phpenv root."""
    source_dir = tmp_path / "sources"
    source_dir.mkdir()

    def _make(filename: str, content: str = "memory_limit = 512M\n") -> Path:
        path = source_dir / filename
        path.write_text(content, encoding="utf-8")
        return path

    return _make
