import pytest

from phpenv_config.core.errors import ConfigurationError
from phpenv_config.managers.enabled_store import (
    CopyEnabledStore,
    SymlinkEnabledStore,
    create_enabled_store,
)
from phpenv_config.managers.fragment_manager import ConfigFragmentManager


@pytest.fixture
def stores(confd):
    (confd["available"] / "ext-redis.ini").write_text("extension=redis.so\n")
    return {
        "symlink": SymlinkEnabledStore(confd["enabled"], confd["available"]),
        "copy": CopyEnabledStore(confd["enabled"], confd["available"]),
    }


def test_factory_returns_backend_for_mode(confd):
    assert isinstance(create_enabled_store("symlink", confd["enabled"], confd["available"]), SymlinkEnabledStore)
    assert isinstance(create_enabled_store("copy", confd["enabled"], confd["available"]), CopyEnabledStore)


def test_factory_rejects_unknown_mode(confd):
    with pytest.raises(ConfigurationError) as excinfo:
        create_enabled_store("hardlink", confd["enabled"], confd["available"])
    assert "hardlink" in str(excinfo.value)


def test_unknown_mode_fails_before_creating_directories(host, phpenv_root):
    manager = ConfigFragmentManager(host, enable_mode="hardlink")
    with pytest.raises(ConfigurationError):
        manager.new_extension("redis")
    assert not (phpenv_root / "versions" / "8.2.10" / "etc").exists()


@pytest.mark.parametrize("mode", ["symlink", "copy"])
def test_enable_then_disable(stores, confd, mode):
    store = stores[mode]

    store.enable("ext-redis")
    assert store.is_enabled("ext-redis")
    assert store.enabled_names() == ["ext-redis"]
    assert (confd["enabled"] / "ext-redis.ini").read_text() == "extension=redis.so\n"

    store.disable("ext-redis")
    assert not store.is_enabled("ext-redis")
    assert (confd["available"] / "ext-redis.ini").is_file()


def test_symlink_backend_links_into_available(stores, confd):
    stores["symlink"].enable("ext-redis")
    assert (confd["enabled"] / "ext-redis.ini").is_symlink()


def test_copy_backend_writes_plain_file(stores, confd):
    stores["copy"].enable("ext-redis")
    enabled = confd["enabled"] / "ext-redis.ini"
    assert enabled.is_file() and not enabled.is_symlink()


def test_copy_backend_disable_keeps_orphaned_copy(stores, confd):
    store = stores["copy"]
    store.enable("ext-redis")
    (confd["available"] / "ext-redis.ini").unlink()

    store.disable("ext-redis")

    assert not (confd["enabled"] / "ext-redis.ini").exists()
    assert (confd["available"] / "ext-redis.ini").read_text() == "extension=redis.so\n"


def test_dangling_symlink_counts_as_enabled(stores, confd):
    store = stores["symlink"]
    store.enable("ext-redis")
    (confd["available"] / "ext-redis.ini").unlink()

    assert store.is_enabled("ext-redis")
    assert store.enabled_names() == ["ext-redis"]


def test_enabled_names_without_directory(tmp_path):
    store = SymlinkEnabledStore(tmp_path / "missing", tmp_path / "available")
    assert store.enabled_names() == []


def test_manager_in_copy_mode(host, confd):
    manager = ConfigFragmentManager(host, enable_mode="copy")
    manager.new_extension("apcu")

    manager.enable("ext-apcu")

    enabled = confd["enabled"] / "ext-apcu.ini"
    assert enabled.read_text() == "extension=apcu.so\n"
    assert not enabled.is_symlink()
    assert manager.list_fragments() == (["ext-apcu"], [])
