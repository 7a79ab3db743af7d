"""Data models for manifest dependency resolution."""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class FoundCrate:
    """A crate as found in the manifest.

    ``name`` is None when the searched crate is the manifest's own package
    (``Itself``); otherwise it holds the sanitized local identifier.
    """
    name: Optional[str] = None

    @classmethod
    def itself(cls) -> "FoundCrate":
        return cls(None)

    @classmethod
    def named(cls, identifier: str) -> "FoundCrate":
        return cls(identifier)

    @property
    def is_itself(self) -> bool:
        return self.name is None

    def to_dict(self) -> Dict[str, Optional[str]]:
        if self.is_itself:
            return {"kind": "itself", "name": None}
        return {"kind": "named", "name": self.name}

    def __str__(self) -> str:
        return "crate" if self.is_itself else str(self.name)


@dataclass(frozen=True)
class DependencyDeclaration:
    """A single entry of a ``dependencies``-style table."""
    declared_key: str  # name the manifest uses locally
    value: Any  # version string or inline/expanded table

    @property
    def inherits_workspace(self) -> bool:
        return isinstance(self.value, dict) and self.value.get("workspace") is True


# Canonical (published) crate name -> resolution.
ResolutionTable = Dict[str, FoundCrate]


def sanitize_crate_name(name: str) -> str:
    """Make sure the given crate name is a valid identifier."""
    return name.replace("-", "_")
