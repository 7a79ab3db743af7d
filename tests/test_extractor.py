"""Tests for building the resolution table from a parsed Cargo.toml."""

import logging

try:
    import tomllib as toml  # type: ignore
except ImportError:
    import tomli as toml  # type: ignore

from resolver.extractor import collect_declarations, extract_crate_names
from resolver.models import FoundCrate


def _names(content, **kwargs):
    return extract_crate_names(toml.loads(content), **kwargs)


class TestDependencyTables:
    """Plain, dev and target-specific dependency tables."""

    def test_deps_with_crate(self):
        """A plain version dependency resolves to its own name."""
        table = _names("""
[dependencies]
my_crate = "0.1"
""")
        assert table["my_crate"] == FoundCrate.named("my_crate")

    def test_dev_deps_with_crate(self):
        """dev-dependencies are searched as well."""
        table = _names("""
[dev-dependencies]
my_crate = "0.1"
""")
        assert table["my_crate"] == FoundCrate.named("my_crate")

    def test_deps_with_crate_renamed(self):
        """An inline table with `package` maps the published name to the local key."""
        table = _names("""
[dependencies]
cool = { package = "my_crate", version = "0.1" }
""")
        assert table["my_crate"] == FoundCrate.named("cool")
        assert "cool" not in table

    def test_deps_with_crate_renamed_expanded_table(self):
        """The expanded `[dependencies.cool]` form behaves like the inline form."""
        table = _names("""
[dependencies.cool]
package = "my_crate"
version = "0.1"
""")
        assert table["my_crate"] == FoundCrate.named("cool")
        assert "cool" not in table

    def test_deps_empty(self):
        """An empty dependencies table yields an empty mapping."""
        assert _names("[dependencies]\n") == {}

    def test_crate_not_declared(self):
        """Undeclared crates are absent."""
        table = _names("""
[dependencies]
serde = "1.0"
""")
        assert "my_crate" not in table

    def test_no_dependency_tables(self):
        """A manifest without any dependency table is not an error."""
        assert _names('[features]\ndefault = []\n') == {}

    def test_target_cfg_dependency(self):
        """cfg() expressions as target keys are opaque."""
        table = _names("""
[target.'cfg(target_os="android")'.dependencies]
my_crate = "0.1"
""")
        assert table["my_crate"] == FoundCrate.named("my_crate")

    def test_target_triple_dependency(self):
        """Target triples as keys work the same as cfg() expressions."""
        table = _names("""
[target.x86_64-pc-windows-gnu.dependencies]
my_crate = "0.1"
""")
        assert table["my_crate"] == FoundCrate.named("my_crate")

    def test_target_dev_dependency_renamed(self):
        """Renames inside target dev-dependencies are honoured."""
        table = _names("""
[target.'cfg(unix)'.dev-dependencies]
cool-thing = { package = "my_crate", version = "0.1" }
""")
        assert table["my_crate"] == FoundCrate.named("cool_thing")

    def test_same_dependency_under_multiple_targets_collapses(self):
        """Identical declarations under different conditions produce one entry."""
        table = _names("""
[target.'cfg(unix)'.dependencies]
my_crate = "0.1"

[target.'cfg(windows)'.dependencies]
my_crate = "0.1"
""")
        assert table == {"my_crate": FoundCrate.named("my_crate")}

    def test_non_table_target_entry_is_skipped(self, caplog):
        """A scalar under `target` is ignored with a warning."""
        with caplog.at_level(logging.WARNING):
            table = _names("""
[target]
bogus = "x"

[target.'cfg(unix)'.dependencies]
my_crate = "0.1"
""")
        assert table == {"my_crate": FoundCrate.named("my_crate")}
        assert "bogus" in caplog.text

    def test_non_table_target_section_is_ignored(self):
        """A scalar `target` key yields no entries."""
        assert _names('target = "x"\n') == {}


class TestSanitization:
    """Identifier sanitization applies to the local name only."""

    def test_dashes_replaced_in_identifier(self):
        table = _names("""
[dependencies]
my-crate = "0.1"
""")
        assert table["my-crate"] == FoundCrate.named("my_crate")
        assert "my_crate" not in table

    def test_dashes_replaced_for_renamed_target_dependency(self):
        table = _names("""
[target.'cfg(unix)'.dependencies]
my-cool-dep = { package = "real-name", version = "1" }
""")
        assert table["real-name"] == FoundCrate.named("my_cool_dep")

    def test_non_string_package_falls_back_to_key(self, caplog):
        """A mistyped `package` field is ignored."""
        with caplog.at_level(logging.WARNING):
            table = _names("""
[dependencies]
cool = { package = 5, version = "0.1" }
""")
        assert table["cool"] == FoundCrate.named("cool")
        assert "cool" in caplog.text


class TestOwnPackage:
    """Entry for the manifest's own package."""

    def test_own_crate_is_itself(self):
        table = _names("""
[package]
name = "my_crate"
""")
        assert table["my_crate"] == FoundCrate.itself()
        assert table["my_crate"].is_itself

    def test_own_crate_in_secondary_artifact(self):
        """Tests and examples refer to their own package by sanitized name."""
        table = _names("""
[package]
name = "my-crate"
""", secondary_artifact=True)
        assert table["my-crate"] == FoundCrate.named("my_crate")

    def test_package_without_name(self):
        assert _names("[package]\nversion = \"0.1.0\"\n") == {}

    def test_dependency_overrides_own_package(self):
        """Dependencies are merged after the own package entry."""
        table = _names("""
[package]
name = "my_crate"

[dev-dependencies]
my_crate = { path = "." }
""")
        assert table["my_crate"] == FoundCrate.named("my_crate")

    def test_later_table_overwrites_earlier(self):
        """Duplicate canonical names keep the last one seen."""
        table = _names("""
[dependencies]
first = { package = "my_crate", version = "0.1" }

[dev-dependencies]
second = { package = "my_crate", version = "0.1" }
""")
        assert table["my_crate"] == FoundCrate.named("second")


def test_collect_declarations_order():
    """Direct tables come before target tables."""
    doc = toml.loads("""
[target.'cfg(unix)'.dependencies]
c = "1"

[dependencies]
a = "1"

[dev-dependencies]
b = "1"
""")
    assert [d.declared_key for d in collect_declarations(doc)] == ["a", "b", "c"]
