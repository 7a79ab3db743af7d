"""Process-wide memoization of the resolution table.

The manifest is read at most once per ``ManifestResolver``. The first caller
runs the locator and extractor under a lock while concurrent callers wait;
afterwards every caller sees the same outcome, be it the table or the error
that initialization raised.
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from constants import Constants, SelfReferencePolicy
from cli_config import load_config, resolver_setting, self_reference_policy
from common.logging_utils import extra_context, is_debug_enabled
from .document import read_manifest
from .errors import CrateNotFound, ManifestDirChanged, ManifestError
from .extractor import extract_crate_names
from .locator import locate_manifest, manifest_dir_from_env
from .models import FoundCrate, ResolutionTable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolverCache:
    """Everything derived from one manifest directory."""
    manifest_dir: str
    manifest_path: str
    crate_names: ResolutionTable


class ManifestResolver:
    """Resolve canonical crate names against the current build unit's manifest.

    Args:
        environ: Environment mapping; defaults to ``os.environ``.
        self_reference: Policy name (``auto``/``itself``/``named``) or
            ``SelfReferencePolicy``; when None it comes from the environment
            or configuration.
        manifest_filename: Manifest file name inside the manifest directory.
        manifest_dir_env: Variable holding the manifest directory.
        secondary_marker_env: Variable whose presence marks a test/example
            build under the ``auto`` policy.
        config: Loaded YAML config supplying ``resolver.*`` defaults; when
            None it is read with ``cli_config.load_config()``.
    """

    def __init__(
        self,
        environ: Optional[Mapping[str, str]] = None,
        self_reference: Union[str, SelfReferencePolicy, None] = None,
        manifest_filename: Optional[str] = None,
        manifest_dir_env: Optional[str] = None,
        secondary_marker_env: Optional[str] = None,
        config: Optional[Mapping[str, Any]] = None,
    ):
        self._environ = os.environ if environ is None else environ
        self._self_reference = self_reference
        self._config = load_config() if config is None else config
        self.manifest_filename = (
            manifest_filename
            or resolver_setting(self._config, "manifest_filename")
            or Constants.MANIFEST_FILE
        )
        self.manifest_dir_env = (
            manifest_dir_env
            or resolver_setting(self._config, "manifest_dir_env")
            or Constants.ENV_MANIFEST_DIR
        )
        self.secondary_marker_env = (
            secondary_marker_env
            or resolver_setting(self._config, "secondary_marker_env")
            or Constants.ENV_SECONDARY_MARKER
        )

        self._lock = threading.Lock()
        self._initialized = False
        self._init_dir: Optional[str] = None
        self._cache: Optional[ResolverCache] = None
        self._error: Optional[Exception] = None

    def _is_secondary_artifact(self) -> bool:
        if isinstance(self._self_reference, SelfReferencePolicy):
            policy = self._self_reference
        else:
            policy = self_reference_policy(self._self_reference, self._environ, self._config)
        if policy is SelfReferencePolicy.ITSELF:
            return False
        if policy is SelfReferencePolicy.NAMED:
            return True
        return self.secondary_marker_env in self._environ

    def _build(self, manifest_dir: str) -> ResolverCache:
        secondary_artifact = self._is_secondary_artifact()
        manifest_path = locate_manifest(manifest_dir, self.manifest_filename)
        manifest = read_manifest(manifest_path)
        crate_names = extract_crate_names(
            manifest,
            secondary_artifact=secondary_artifact,
            manifest_path=manifest_path,
            manifest_filename=self.manifest_filename,
        )
        return ResolverCache(manifest_dir, manifest_path, crate_names)

    def _get_or_init(self, manifest_dir: str) -> ResolverCache:
        if not self._initialized:
            with self._lock:
                if not self._initialized:
                    if is_debug_enabled(logger):
                        logger.debug(
                            "Resolver cache miss",
                            extra=extra_context(
                                event="cache_miss",
                                component="cache",
                                action="initialize",
                                target=manifest_dir,
                            ),
                        )
                    try:
                        self._cache = self._build(manifest_dir)
                    except (ManifestError, ValueError) as e:
                        self._error = e
                    self._init_dir = manifest_dir
                    self._initialized = True

        if manifest_dir != self._init_dir:
            raise ManifestDirChanged(str(self._init_dir), manifest_dir)
        if self._error is not None:
            raise self._error.with_traceback(None)
        if self._cache is None:
            raise RuntimeError("resolver initialized without a cache or an error")
        return self._cache

    def cache(self) -> ResolverCache:
        """Return the cache, initializing it on first use."""
        manifest_dir = manifest_dir_from_env(self._environ, self.manifest_dir_env)
        return self._get_or_init(manifest_dir)

    def resolve(self, orig_name: str) -> FoundCrate:
        """Find the local name for the crate published as ``orig_name``.

        Returns:
            ``FoundCrate.itself()`` when ``orig_name`` is the manifest's own
            package, else ``FoundCrate.named(identifier)``.

        Raises:
            EnvNotSet, ManifestNotFound, CouldNotRead, InvalidDocument:
                the manifest could not be loaded.
            CrateNotFound: ``orig_name`` is not declared in the manifest.
            ValueError: the configured self-reference policy is unknown.
            ManifestDirChanged: the manifest directory changed between calls.
        """
        cache = self.cache()
        found = cache.crate_names.get(orig_name)
        if found is None:
            raise CrateNotFound(orig_name, cache.manifest_path)
        return found

    def table(self) -> ResolutionTable:
        """Return a copy of the whole resolution table."""
        return dict(self.cache().crate_names)
