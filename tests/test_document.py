"""Tests for manifest reading and tree traversal helpers."""

import logging

from common.logging_utils import Timer, extra_context, is_debug_enabled
from resolver.document import get_str, get_table, iter_tables, read_manifest


def test_read_manifest(tmp_path):
    path = tmp_path / "Cargo.toml"
    path.write_text('[package]\nname = "héllo"\n', encoding="utf-8")
    assert read_manifest(str(path)) == {"package": {"name": "héllo"}}


def test_read_manifest_debug_trace(tmp_path, caplog):
    path = tmp_path / "Cargo.toml"
    path.write_text("[dependencies]\n", encoding="utf-8")
    with caplog.at_level(logging.DEBUG, logger="resolver.document"):
        read_manifest(str(path))
    record = next(r for r in caplog.records if r.getMessage() == "Manifest parsed")
    assert record.target == str(path)
    assert record.duration_ms >= 0


class TestTraversal:
    """Helpers return None instead of raising."""

    def test_get_table(self):
        doc = {"a": {"b": 1}, "s": "x"}
        assert get_table(doc, "a") == {"b": 1}
        assert get_table(doc, "s") is None
        assert get_table(doc, "missing") is None
        assert get_table(None, "a") is None
        assert get_table(get_table(doc, "missing"), "b") is None

    def test_get_str(self):
        doc = {"name": "foo", "n": 1}
        assert get_str(doc, "name") == "foo"
        assert get_str(doc, "n") is None
        assert get_str(["name"], "name") is None

    def test_iter_tables_skips_scalars(self):
        doc = {"a": {"x": 1}, "b": [1, 2], "c": {"y": 2}}
        assert list(iter_tables(doc)) == [("a", {"x": 1}), ("c", {"y": 2})]
        assert list(iter_tables(None)) == []


def test_extra_context_drops_none():
    assert extra_context(event="x", target=None) == {"event": "x"}


def test_is_debug_enabled():
    logger = logging.getLogger("crateref.test")
    logger.setLevel(logging.DEBUG)
    assert is_debug_enabled(logger)
    logger.setLevel(logging.INFO)
    assert not is_debug_enabled(logger)


def test_timer():
    with Timer() as t:
        pass
    assert t.duration_ms() >= 0
