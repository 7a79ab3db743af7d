"""Argument parsing functionality for crateref."""

import argparse
from constants import Constants

def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="crateref",
        description=(
            "crateref - Resolve the local name of a crate declared in Cargo.toml"
        ),
        add_help=True,
    )

    parser.add_argument("names",
                        metavar="NAME",
                        help="Published (canonical) crate name to resolve",
                        nargs="*")
    parser.add_argument("-d", "--directory",
                        dest="MANIFEST_DIR",
                        help=f"Manifest directory (default: ${Constants.ENV_MANIFEST_DIR})",
                        action="store",
                        type=str)
    parser.add_argument("-l", "--list",
                        dest="LIST",
                        help="Print the whole resolution table",
                        action="store_true")
    parser.add_argument("-f", "--format",
                        dest="OUTPUT_FORMAT",
                        help="Output format (default: text)",
                        action="store",
                        type=str.lower,
                        default="text",
                        choices=Constants.OUTPUT_FORMATS)
    parser.add_argument("--self-reference",
                        dest="SELF_REFERENCE",
                        help="How the manifest's own package is reported (default: auto)",
                        action="store",
                        type=str.lower,
                        choices=Constants.SELF_REFERENCE_POLICIES)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML)",
                        action="store",
                        type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'])

    args = parser.parse_args(argv)
    if not args.names and not args.LIST:
        parser.error("at least one NAME or --list is required")
    return args
