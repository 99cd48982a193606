from pathlib import Path

import pytest

from phpenv_config.core import phpenv, system_utils
from phpenv_config.core.errors import HostCommandError
from phpenv_config.core.phpenv import PhpenvHost, StaticHost


class FakeRunner:
    """Stands in for run_command, answering by the phpenv subcommand."""

    def __init__(self, answers):
        self.answers = answers
        self.calls = []

    def __call__(self, command_list):
        self.calls.append(command_list)
        return self.answers.get(tuple(command_list[1:]), (1, "", "no such command"))


@pytest.fixture
def runner(monkeypatch):
    fake = FakeRunner({
        ("root",): (0, "/home/dev/.phpenv", ""),
        ("version-name",): (0, "8.3.4", ""),
        ("versions", "--bare"): (0, "8.1.27\n8.3.4\n\n", ""),
    })
    monkeypatch.setattr(phpenv, "run_command", fake)
    return fake


def test_root_prefers_environment(monkeypatch, runner, tmp_path):
    monkeypatch.setenv("PHPENV_ROOT", str(tmp_path))
    assert PhpenvHost().root() == tmp_path
    assert runner.calls == []


def test_root_queries_phpenv(monkeypatch, runner):
    monkeypatch.delenv("PHPENV_ROOT", raising=False)
    host = PhpenvHost(command="phpenv")

    assert host.root() == Path("/home/dev/.phpenv")
    assert host.root() == Path("/home/dev/.phpenv")
    assert runner.calls == [["phpenv", "root"]]


def test_active_version(runner):
    assert PhpenvHost(command="phpenv").active_version() == "8.3.4"


def test_list_installed_versions(runner):
    assert PhpenvHost(command="phpenv").list_installed_versions() == ["8.1.27", "8.3.4"]


def test_failed_query_raises(monkeypatch):
    monkeypatch.setattr(phpenv, "run_command", lambda command_list: (-1, "", "Command not found: phpenv"))
    with pytest.raises(HostCommandError) as excinfo:
        PhpenvHost(command="phpenv").active_version()
    assert "phpenv version-name" in str(excinfo.value)


def test_static_host(tmp_path):
    host = StaticHost(tmp_path, "8.2.10", ["8.2.10"])
    assert host.root() == tmp_path
    assert host.active_version() == "8.2.10"
    assert host.list_installed_versions() == ["8.2.10"]


@pytest.mark.parametrize("url", [
    "https://github.com/someone/phpenv-config.git",
    "https://github.com/someone/phpenv-config/",
    "git@github.com:someone/phpenv-config.git",
    "/srv/git/phpenv-config.git",
    "phpenv-config",
])
def test_repo_short_name(url):
    assert system_utils.repo_short_name(url) == "phpenv-config"


def test_run_command_missing_binary():
    code, out, err = system_utils.run_command(["phpenv-config-definitely-not-installed"])
    assert code == -1
    assert out == ""
    assert "Command not found" in err


def test_run_command_strips_output_and_keeps_exit_code(tmp_path):
    script = tmp_path / "noisy.sh"
    script.write_text("#!/bin/sh\necho '  out  '\necho ' err ' >&2\nexit 3\n")
    script.chmod(0o755)

    assert system_utils.run_command([str(script)]) == (3, "out", "err")


def test_git_toplevel_outside_checkout(monkeypatch, tmp_path):
    monkeypatch.setattr(system_utils, "run_command", lambda command_list: (128, "", "fatal: not a git repository"))
    assert system_utils.get_git_toplevel(tmp_path) is None
