"""Locate the manifest of the current build unit."""

from __future__ import annotations

import logging
import os
from typing import Mapping, Optional

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled
from .errors import EnvNotSet, ManifestNotFound

logger = logging.getLogger(__name__)


def manifest_dir_from_env(
    environ: Optional[Mapping[str, str]] = None,
    var_name: str = Constants.ENV_MANIFEST_DIR,
) -> str:
    """Return the manifest directory supplied by the build process.

    Raises:
        EnvNotSet: the variable is missing.
    """
    env = os.environ if environ is None else environ
    value = env.get(var_name)
    if value is None:
        raise EnvNotSet(var_name)
    return value


def locate_manifest(directory: str, filename: str = Constants.MANIFEST_FILE) -> str:
    """Return the path of ``filename`` inside ``directory``.

    Raises:
        ManifestNotFound: no such file.
    """
    path = os.path.join(directory, filename)
    if not os.path.isfile(path):
        raise ManifestNotFound(directory, filename)

    if is_debug_enabled(logger):
        logger.debug(
            "Manifest located",
            extra=extra_context(
                event="locate",
                component="locator",
                action="locate_manifest",
                target=path,
            ),
        )
    return path
