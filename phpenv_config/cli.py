import sys
import argparse
import itertools
import logging
from typing import Callable, Dict, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)

from phpenv_config.core.errors import (
    ConfigFragmentError,
    AlreadyEnabled,
    HostCommandError,
    UnsupportedVersion,
    UsageError,
    EXIT_OK,
    EXIT_FAILURE,
)
from phpenv_config.core.phpenv import Host, PhpenvHost
from phpenv_config.managers.fragment_manager import ConfigFragmentManager, get_version_string

PROG = "phpenv config"

# (short flag, long flag, metavar or None for flags without an argument, help)
COMMAND_FLAGS: List[Tuple[str, str, Optional[str], str]] = [
    ("-c", "--cfg-add", "PATH", "Add a general ini file as cfg-<name> (not enabled)"),
    ("-x", "--ext-add", "PATH", "Add an extension ini file as ext-<name> (not enabled)"),
    ("-X", "--ext-new", "EXTENSION", "Create ext-<EXTENSION> containing 'extension=<EXTENSION>.so'"),
    ("-r", "--rm", "NAME", "Remove config NAME and its enabled entry"),
    ("-e", "--enable", "NAME", "Enable config NAME"),
    ("-d", "--disable", "NAME", "Disable config NAME"),
    ("-l", "--list", None, "List enabled and disabled configs"),
    ("-s", "--show", "NAME", "Print config NAME with numbered lines"),
    ("-V", "--version", None, "Print version information"),
    ("-h", "--help", None, "Show this help"),
]


# --- Argument Parsing ---
class _ArgumentParser(argparse.ArgumentParser):
    """Reports usage problems as UsageError instead of exiting with status 2."""

    def error(self, message):
        raise UsageError(message)


class _OrderedAction(argparse.Action):
    """Records every command flag in command-line order on namespace.actions."""

    def __call__(self, parser, namespace, values, option_string=None):
        actions = list(getattr(namespace, 'actions', None) or [])
        actions.append((self.dest, values))
        namespace.actions = actions


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog=PROG,
        description="Manage ini config fragments of the active phpenv PHP version.",
        epilog="Several commands may be given at once; they run in order and stop at the first error.",
        add_help=False,
    )
    for short_flag, long_flag, metavar, help_text in COMMAND_FLAGS:
        dest = long_flag.lstrip('-').replace('-', '_')
        if metavar:
            parser.add_argument(short_flag, long_flag, dest=dest, metavar=metavar, nargs='?',
                                action=_OrderedAction, help=help_text)
        else:
            parser.add_argument(short_flag, long_flag, dest=dest, nargs=0,
                                action=_OrderedAction, help=help_text)
    parser.add_argument('-v', '--verbose', action='store_true', help='Log debug output to stderr')
    parser.set_defaults(actions=None)
    return parser


# --- Completion ---
def completion_candidates(manager: ConfigFragmentManager, flag: str) -> List[str]:
    """Candidates a shell should offer after `flag`; every flag when `flag` has no dynamic candidates."""
    if flag in ("-e", "--enable"):
        return manager.list_fragments()[1]
    if flag in ("-d", "--disable"):
        return manager.list_fragments()[0]
    if flag in ("-r", "--rm", "-s", "--show"):
        return manager.available_names()
    if flag in ("-c", "--cfg-add", "-x", "--ext-add"):
        return []  # Left to the shell's file completion
    flags = []
    for short_flag, long_flag, _, _ in COMMAND_FLAGS:
        flags.extend([short_flag, long_flag])
    return flags


def _complete(manager: ConfigFragmentManager, flag: str) -> int:
    try:
        candidates = completion_candidates(manager, flag)
    except (ConfigFragmentError, OSError) as e:
        logger.debug(f"CLI: No completion candidates for '{flag}': {e}")
        return EXIT_OK
    for candidate in candidates:
        print(candidate)
    return EXIT_OK


# --- Command Handlers ---
def _print_list(manager: ConfigFragmentManager, value: Optional[str], counter: Iterator[int]) -> None:
    enabled, disabled = manager.list_fragments()
    for title, names in (("Enabled", enabled), ("Disabled", disabled)):
        print(f"{title} configs:")
        if not names:
            print("  (none)")
        for name in names:
            print(f"  {name}")


def _print_show(manager: ConfigFragmentManager, value: Optional[str], counter: Iterator[int]) -> None:
    for line in manager.show(value, counter):
        print(line)


def _print_version(manager: ConfigFragmentManager, value: Optional[str], counter: Iterator[int]) -> None:
    print(get_version_string())


def _added(kind_label: str, method_name: str) -> Callable:
    def handler(manager, value, counter):
        name = getattr(manager, method_name)(value)
        print(f"Added {kind_label} {name}. Enable it with: {PROG} -e {name}")
    return handler


def _report(verb: str, method_name: str) -> Callable:
    def handler(manager, value, counter):
        name = getattr(manager, method_name)(value)
        print(f"{verb} {name}")
    return handler


COMMAND_HANDLERS: Dict[str, Callable] = {
    "cfg_add": _added("config", "add_config"),
    "ext_add": _added("extension config", "add_extension"),
    "ext_new": _report("Created", "new_extension"),
    "rm": _report("Removed", "remove"),
    "enable": _report("Enabled", "enable"),
    "disable": _report("Disabled", "disable"),
    "list": _print_list,
    "show": _print_show,
    "version": _print_version,
}


def _report_unsupported_version(host: Host, error: UnsupportedVersion) -> None:
    print(f"Error: {error}")
    try:
        versions = host.list_installed_versions()
    except HostCommandError as e:
        logger.warning(f"CLI: Could not list installed PHP versions: {e}")
        return
    print("Installed versions:")
    for version in versions:
        print(f"  {version}")


def run_actions(manager: ConfigFragmentManager, actions: List[Tuple[str, Optional[str]]]) -> int:
    """Runs actions in order and returns the exit status of the first failure, or 0."""
    counter = itertools.count(1)  # [name:N] numbering shared by every --show in this run
    for action, value in actions:
        logger.debug(f"CLI: Running '{action}' with argument {value!r}")
        try:
            COMMAND_HANDLERS[action](manager, value, counter)
        except AlreadyEnabled as e:
            print(str(e))
            return e.exit_code
        except UnsupportedVersion as e:
            _report_unsupported_version(manager.host, e)
            return e.exit_code
        except ConfigFragmentError as e:
            logger.debug(f"CLI: '{action}' failed: {e}")
            print(f"Error: {e}")
            return e.exit_code
        except OSError as e:
            logger.error(f"CLI: File operation failed during '{action}': {e}", exc_info=True)
            print(f"Error: {e}")
            return EXIT_FAILURE
    return EXIT_OK


# --- Main CLI Execution ---
def main(argv: Optional[List[str]] = None, host: Optional[Host] = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    parser = build_parser()

    if not argv:
        parser.print_help()
        return EXIT_FAILURE
    if argv[0] == "help":
        parser.print_help()
        return EXIT_OK
    if argv[0] == "--complete":
        # Hidden: used by phpenv's completion hook, e.g. `phpenv config --complete -e`
        flag = argv[1] if len(argv) > 1 else ""
        return _complete(ConfigFragmentManager(host or PhpenvHost()), flag)

    try:
        args = parser.parse_args(argv)
    except UsageError as e:
        print(f"Error: {e}")
        parser.print_usage(sys.stdout)
        return EXIT_FAILURE

    actions = args.actions or []
    if not actions or any(action == "help" for action, _ in actions):
        parser.print_help()
        return EXIT_OK if actions else EXIT_FAILURE

    manager = ConfigFragmentManager(host or PhpenvHost())
    return run_actions(manager, actions)


if __name__ == "__main__":
    sys.exit(main())
