"""Constants used in the project."""

import os
from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    NOT_FOUND = 2


class SelfReferencePolicy(Enum):
    """How the manifest's own package is reported.

    Args:
        Enum (string): Policy names accepted by config, env and CLI.
    """

    AUTO = "auto"
    ITSELF = "itself"
    NAMED = "named"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    MANIFEST_FILE = "Cargo.toml"
    ENV_MANIFEST_DIR = "CARGO_MANIFEST_DIR"
    # Only set by cargo when building integration tests, benches and examples
    ENV_SECONDARY_MARKER = "CARGO_TARGET_TMPDIR"
    ENV_SELF_REFERENCE = "CRATEREF_SELF_REFERENCE"
    ENV_LOG_LEVEL = "CRATEREF_LOG_LEVEL"
    DEPENDENCY_TABLES = ["dependencies", "dev-dependencies"]
    SELF_REFERENCE_POLICIES = [p.value for p in SelfReferencePolicy]
    DEFAULT_SELF_REFERENCE = SelfReferencePolicy.AUTO.value
    OUTPUT_FORMATS = ["text", "json"]
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    CONFIG_SEARCH_PATHS = [
        "crateref.yml",
        "crateref.yaml",
        os.path.join(os.path.expanduser("~"), ".config", "crateref", "crateref.yml"),
    ]
