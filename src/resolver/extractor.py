"""Build the canonical-name -> local-identifier table from a parsed manifest.

Precedence:
  * The manifest's own package (``[package] name``) is entered first.
  * Then every entry of ``[dependencies]`` and ``[dev-dependencies]``,
    followed by the same tables under every ``[target.<cfg>]`` section.
    Later entries overwrite earlier ones with the same canonical name.

The canonical name of a dependency is its ``package`` field when the value
is a table carrying one, else the declared key. Only the identifier side of
the mapping is sanitized; lookup keys are kept verbatim.
"""

from __future__ import annotations

import logging
from typing import Iterator, List, Optional

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled
from .document import Table, get_str, get_table, iter_tables
from .models import DependencyDeclaration, FoundCrate, ResolutionTable, sanitize_crate_name
from .workspace import find_workspace_manifest, workspace_dependencies

logger = logging.getLogger(__name__)


def extract_package_name(cargo_toml: Table) -> Optional[str]:
    return get_str(get_table(cargo_toml, "package"), "name")


def dep_tables(table: Table) -> Iterator[Table]:
    """Yield the ``dependencies`` and ``dev-dependencies`` tables present in ``table``."""
    for key in Constants.DEPENDENCY_TABLES:
        deps = get_table(table, key)
        if deps is not None:
            yield deps


def target_dep_tables(cargo_toml: Table) -> Iterator[Table]:
    """Yield dependency tables of every ``[target.<cfg>]`` section.

    The condition keys are opaque and never inspected.
    """
    for _cfg, target in iter_tables(get_table(cargo_toml, "target")):
        yield from dep_tables(target)


def collect_declarations(cargo_toml: Table) -> List[DependencyDeclaration]:
    """Flatten direct and target-specific dependency tables into declarations."""
    declarations = []
    for table in list(dep_tables(cargo_toml)) + list(target_dep_tables(cargo_toml)):
        for key, value in table.items():
            declarations.append(DependencyDeclaration(key, value))
    return declarations


class _WorkspaceLookup:
    """Reads the workspace manifest at most once, and only when needed."""

    def __init__(self, manifest_path: Optional[str], cargo_toml: Table, filename: str):
        self._manifest_path = manifest_path
        self._cargo_toml = cargo_toml
        self._filename = filename
        self._loaded = False
        self._deps: Optional[Table] = None

    def package_for(self, declared_key: str) -> Optional[str]:
        if not self._loaded:
            self._loaded = True
            if self._manifest_path is not None:
                found = find_workspace_manifest(self._manifest_path, self._cargo_toml, self._filename)
                if found is not None:
                    self._deps = workspace_dependencies(found[1])
        return get_str(get_table(self._deps, declared_key), "package")


def canonical_name(decl: DependencyDeclaration, workspace: Optional[_WorkspaceLookup] = None) -> str:
    """Return the published name a declaration refers to."""
    if isinstance(decl.value, dict) and "package" in decl.value:
        package = decl.value["package"]
        if isinstance(package, str):
            return package
        logger.warning("Ignoring non-string `package` field of dependency `%s`", decl.declared_key)
    if workspace is not None and decl.inherits_workspace:
        package = workspace.package_for(decl.declared_key)
        if package is not None:
            return package
    return decl.declared_key


def extract_crate_names(
    cargo_toml: Table,
    secondary_artifact: bool = False,
    manifest_path: Optional[str] = None,
    manifest_filename: str = Constants.MANIFEST_FILE,
) -> ResolutionTable:
    """Extract all crate names from the given manifest.

    Args:
        cargo_toml: Decoded manifest.
        secondary_artifact: True when building a test/example artifact, which
            must refer to its own package by name rather than as ``Itself``.
        manifest_path: Location of ``cargo_toml``; enables resolving
            ``workspace = true`` dependencies through the workspace manifest.
        manifest_filename: File name used when searching for the workspace root.

    Returns:
        Mapping of canonical crate name to ``FoundCrate``.
    """
    table: ResolutionTable = {}

    package_name = extract_package_name(cargo_toml)
    if package_name is not None:
        if secondary_artifact:
            table[package_name] = FoundCrate.named(sanitize_crate_name(package_name))
        else:
            table[package_name] = FoundCrate.itself()

    workspace = _WorkspaceLookup(manifest_path, cargo_toml, manifest_filename)
    for decl in collect_declarations(cargo_toml):
        table[canonical_name(decl, workspace)] = FoundCrate.named(sanitize_crate_name(decl.declared_key))

    if is_debug_enabled(logger):
        logger.debug(
            "Resolution table built",
            extra=extra_context(
                event="build",
                component="extractor",
                action="extract_crate_names",
                count=len(table),
                secondary_artifact=secondary_artifact,
            ),
        )
    return table
