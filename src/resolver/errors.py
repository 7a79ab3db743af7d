"""Errors raised while resolving crate names from a manifest."""

from __future__ import annotations

from constants import Constants


class ManifestError(Exception):
    """Base class for all resolution failures.

    Every subclass is terminal: callers are expected to abort the operation
    that needed the resolution and show the message to a human.
    """


class EnvNotSet(ManifestError):
    """The manifest directory environment variable is missing."""

    def __init__(self, var_name: str = Constants.ENV_MANIFEST_DIR):
        self.var_name = var_name
        super().__init__(f"`{var_name}` env variable not set.")


class ManifestNotFound(ManifestError):
    """No manifest file exists in the manifest directory."""

    def __init__(self, directory: str, filename: str = Constants.MANIFEST_FILE):
        self.directory = directory
        self.filename = filename
        super().__init__(f"Could not find `{filename}` in manifest dir: `{directory}`.")


class CouldNotRead(ManifestError):
    """The manifest exists but reading it failed."""

    def __init__(self, path: str, cause: BaseException):
        self.path = path
        self.cause = cause
        super().__init__(f"Could not read `{path}`: {cause}")


class InvalidDocument(ManifestError):
    """The manifest content is not a valid TOML table."""

    def __init__(self, path: str, cause: object):
        self.path = path
        self.cause = cause
        super().__init__(f"Invalid toml file `{path}`: {cause}")


class CrateNotFound(ManifestError):
    """The requested crate is not declared in the manifest."""

    def __init__(self, crate_name: str, path: str):
        self.crate_name = crate_name
        self.path = path
        super().__init__(
            f"Could not find `{crate_name}` in `dependencies` or `dev-dependencies` in `{path}`!"
        )


class ManifestDirChanged(RuntimeError):
    """The manifest directory changed after the cache was built.

    Not a ``ManifestError``: this indicates corrupted process state rather
    than a problem with the manifest.
    """

    def __init__(self, cached: str, current: str):
        self.cached = cached
        self.current = current
        super().__init__(
            f"{Constants.ENV_MANIFEST_DIR} must not change within one process "
            f"(cached `{cached}`, now `{current}`)"
        )
