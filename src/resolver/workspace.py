"""Workspace manifest discovery for inherited (``workspace = true``) dependencies."""

from __future__ import annotations

import logging
import os
from typing import Optional, Tuple

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled
from .document import Table, get_str, get_table, read_manifest

logger = logging.getLogger(__name__)


def _is_workspace_root(document: Table) -> bool:
    return get_table(document, "workspace") is not None


def find_workspace_manifest(
    manifest_path: str,
    document: Table,
    filename: str = Constants.MANIFEST_FILE,
) -> Optional[Tuple[str, Table]]:
    """Find the workspace manifest enclosing ``manifest_path``.

    Order:
      * the manifest itself when it has a ``[workspace]`` table;
      * the directory named by ``package.workspace``, relative to the manifest;
      * the nearest ancestor directory whose manifest has a ``[workspace]`` table.

    Returns ``(path, document)`` or None when the package is not part of a
    workspace. Read/parse errors of candidate manifests propagate.
    """
    manifest_path = os.path.abspath(manifest_path)
    if _is_workspace_root(document):
        return manifest_path, document

    manifest_dir = os.path.dirname(manifest_path)
    explicit = get_str(get_table(document, "package"), "workspace")
    if explicit is not None:
        candidate = os.path.join(os.path.normpath(os.path.join(manifest_dir, explicit)), filename)
        if os.path.isfile(candidate):
            ws_doc = read_manifest(candidate)
            if _is_workspace_root(ws_doc):
                _trace(candidate)
                return candidate, ws_doc
        logger.warning("`package.workspace` in %s does not point at a workspace root", manifest_path)
        return None

    current = manifest_dir
    while True:
        parent = os.path.dirname(current)
        if parent == current:
            return None
        current = parent
        candidate = os.path.join(current, filename)
        if not os.path.isfile(candidate):
            continue
        ws_doc = read_manifest(candidate)
        if _is_workspace_root(ws_doc):
            _trace(candidate)
            return candidate, ws_doc


def workspace_dependencies(workspace_document: Optional[Table]) -> Optional[Table]:
    """Return the ``[workspace.dependencies]`` table, if any."""
    return get_table(get_table(workspace_document, "workspace"), "dependencies")


def _trace(path: str) -> None:
    if is_debug_enabled(logger):
        logger.debug(
            "Workspace manifest found",
            extra=extra_context(
                event="discover",
                component="workspace",
                action="find_workspace_manifest",
                target=path,
            ),
        )
