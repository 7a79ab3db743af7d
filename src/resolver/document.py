"""Manifest reading and untyped TOML tree traversal.

The decoded document is a plain nested ``dict``/``list``/scalar tree. The
helpers below never raise on a missing or mistyped key: they return None so
that optional sections are handled as absent rather than as errors.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, Optional, Tuple

try:
    import tomllib as toml  # type: ignore
except ImportError:  # Python < 3.11
    import tomli as toml  # type: ignore

from common.logging_utils import Timer, extra_context, is_debug_enabled
from .errors import CouldNotRead, InvalidDocument

logger = logging.getLogger(__name__)

Table = Dict[str, Any]


def read_manifest(path: str) -> Table:
    """Read and decode the TOML manifest at ``path``.

    Raises:
        CouldNotRead: opening or reading the file failed.
        InvalidDocument: the content is not UTF-8 TOML.
    """
    with Timer() as t:
        try:
            with open(path, "rb") as fh:
                raw = fh.read()
        except OSError as e:
            raise CouldNotRead(path, e) from e

        try:
            data = toml.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, toml.TOMLDecodeError) as e:
            raise InvalidDocument(path, e) from e

    if is_debug_enabled(logger):
        logger.debug(
            "Manifest parsed",
            extra=extra_context(
                event="parse",
                component="document",
                action="read_manifest",
                target=path,
                duration_ms=t.duration_ms(),
            ),
        )
    return data


def get_table(table: Optional[Table], key: str) -> Optional[Table]:
    """Return ``table[key]`` if it is a table, else None."""
    if not isinstance(table, dict):
        return None
    value = table.get(key)
    return value if isinstance(value, dict) else None


def get_str(table: Optional[Table], key: str) -> Optional[str]:
    """Return ``table[key]`` if it is a string, else None."""
    if not isinstance(table, dict):
        return None
    value = table.get(key)
    return value if isinstance(value, str) else None


def iter_tables(table: Optional[Table]) -> Iterator[Tuple[str, Table]]:
    """Yield ``(key, value)`` for every value of ``table`` that is a table.

    Non-table values are skipped with a warning.
    """
    if not isinstance(table, dict):
        return
    for key, value in table.items():
        if isinstance(value, dict):
            yield key, value
        else:
            logger.warning("Skipping non-table entry `%s` (%s)", key, type(value).__name__)
