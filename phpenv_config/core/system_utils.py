import subprocess
import shlex
import logging
from pathlib import Path
from typing import List, Tuple, Optional

from . import config

logger = logging.getLogger(__name__)


def run_command(command_list: List[str]) -> Tuple[int, str, str]:
    """
    Runs a command and returns (exit code, stdout, stderr), both outputs stripped.

    A missing executable is reported as exit code -1 and other OS failures as -2,
    so callers only ever inspect the tuple.
    """
    joined_command = shlex.join(command_list)
    try:
        result = subprocess.run(command_list, capture_output=True, check=False,
                                encoding='utf-8', errors='replace')
    except FileNotFoundError:
        logger.debug(f"SYSTEM_UTILS: Command not found: {command_list[0]}")
        return -1, "", f"Command not found: {command_list[0]}"
    except OSError as e:
        logger.error(f"SYSTEM_UTILS: Could not run '{joined_command}': {e}", exc_info=True)
        return -2, "", str(e)

    out, err = result.stdout.strip(), result.stderr.strip()
    logger.debug(f"SYSTEM_UTILS: '{joined_command}' exited {result.returncode}" + (f": {err}" if err else ""))
    return result.returncode, out, err


def _git_output(repo_dir: Path, *args: str) -> Optional[str]:
    code, out, _ = run_command([config.GIT_COMMAND, "-C", str(repo_dir), *args])
    if code != 0 or not out:
        return None
    return out


def get_git_toplevel(repo_dir: Path) -> Optional[Path]:
    """Returns the root of the checkout enclosing repo_dir, or None outside one."""
    out = _git_output(repo_dir, "rev-parse", "--show-toplevel")
    return Path(out) if out else None


def get_git_remote_url(repo_dir: Path, remote: str = "origin") -> Optional[str]:
    """Returns the URL of `remote` for the checkout at repo_dir, or None."""
    return _git_output(repo_dir, "config", "--get", f"remote.{remote}.url")


def get_git_revision(repo_dir: Path) -> Optional[str]:
    """Returns the abbreviated HEAD revision of the checkout at repo_dir, or None."""
    return _git_output(repo_dir, "rev-parse", "--short", "HEAD")


def repo_short_name(remote_url: str) -> str:
    """
    Derives a repository short name from a remote URL.

    Handles https URLs, scp-like ssh URLs and local paths:
    'git@github.com:owner/phpenv-config.git' -> 'phpenv-config'
    """
    tail = remote_url.strip().rstrip("/")
    tail = tail.rsplit("/", 1)[-1].rsplit(":", 1)[-1]
    if tail.endswith(".git"):
        tail = tail[:-len(".git")]
    return tail
