"""Resolve the local name of a dependency declared in the current ``Cargo.toml``.

Code generators that must reference a crate by its published name call
``crate_name("my-crate")`` and receive either ``FoundCrate.itself()`` (the
manifest's own package) or ``FoundCrate.named(ident)`` where ``ident`` is the
name the manifest imports it under, sanitized to a valid identifier. The
manifest is located through ``CARGO_MANIFEST_DIR`` and read once per process.
"""

import threading
from typing import Optional

from .cache import ManifestResolver, ResolverCache
from .errors import (
    CouldNotRead,
    CrateNotFound,
    EnvNotSet,
    InvalidDocument,
    ManifestDirChanged,
    ManifestError,
    ManifestNotFound,
)
from .extractor import extract_crate_names
from .models import DependencyDeclaration, FoundCrate, ResolutionTable, sanitize_crate_name

_default_lock = threading.Lock()
_default_resolver: Optional[ManifestResolver] = None


def default_resolver() -> ManifestResolver:
    """Return the process-wide resolver, creating it on first use."""
    global _default_resolver  # pylint: disable=global-statement
    if _default_resolver is None:
        with _default_lock:
            if _default_resolver is None:
                _default_resolver = ManifestResolver()
    return _default_resolver


def crate_name(orig_name: str) -> FoundCrate:
    """Find the crate name for ``orig_name`` in the current manifest.

    See ``ManifestResolver.resolve`` for the returned values and errors.
    """
    return default_resolver().resolve(orig_name)


resolve = crate_name

__all__ = [
    "CouldNotRead",
    "CrateNotFound",
    "DependencyDeclaration",
    "EnvNotSet",
    "FoundCrate",
    "InvalidDocument",
    "ManifestDirChanged",
    "ManifestError",
    "ManifestNotFound",
    "ManifestResolver",
    "ResolutionTable",
    "ResolverCache",
    "crate_name",
    "default_resolver",
    "extract_crate_names",
    "resolve",
    "sanitize_crate_name",
]
