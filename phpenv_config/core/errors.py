"""
Error kinds raised by the fragment manager and the host adapter.

Every error carries the process exit status the CLI reports for it:

- 0: idempotent "already" conditions (AlreadyEnabled)
- 1: validation, lookup, host and configuration failures
- 255: the active PHP version is not managed by phpenv
"""

from typing import Optional

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_UNSUPPORTED_VERSION = 255


class ConfigFragmentError(Exception):
    """Base class for all errors reported to the user as a single line."""

    exit_code: int = EXIT_FAILURE

    def __init__(self, message: str, name: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.name = name

    def __str__(self) -> str:
        return self.message


class MissingArgument(ConfigFragmentError):
    def __init__(self, argument: str):
        super().__init__(f"Missing required argument: {argument}.", name=argument)


class InvalidSourcePath(ConfigFragmentError):
    def __init__(self, path: str):
        super().__init__(f"Source file '{path}' does not exist or is not a regular file.", name=path)


class UnknownFragment(ConfigFragmentError):
    def __init__(self, name: str, store: str):
        super().__init__(f"No {store} config named '{name}'.", name=name)


class AlreadyEnabled(ConfigFragmentError):
    exit_code = EXIT_OK

    def __init__(self, name: str):
        super().__init__(f"Config '{name}' is already enabled.", name=name)


class UnsupportedVersion(ConfigFragmentError):
    exit_code = EXIT_UNSUPPORTED_VERSION

    def __init__(self, version: str):
        super().__init__(
            f"PHP version '{version}' is not managed by phpenv. Select a managed version first (phpenv global|local|shell <version>).",
            name=version,
        )


class HostCommandError(ConfigFragmentError):
    pass


class ConfigurationError(ConfigFragmentError):
    pass


class UsageError(ConfigFragmentError):
    pass
