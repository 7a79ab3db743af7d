"""crateref - resolve the local name of a crate declared in Cargo.toml

    Returns:
        int: Exit code
"""
import json
import logging
import os
import sys

from args import parse_args
from cli_config import apply_config_overrides, config_log_level, load_config
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from constants import Constants, ExitCodes
from resolver import CrateNotFound, ManifestError, ManifestResolver


def _exit_code_for(error):
    if isinstance(error, CrateNotFound):
        return ExitCodes.NOT_FOUND.value
    return ExitCodes.FILE_ERROR.value


def build_resolver(args, cfg=None):
    """Create a resolver honoring the CLI manifest directory, policy and config."""
    environ = dict(os.environ)
    if args.MANIFEST_DIR:
        environ[Constants.ENV_MANIFEST_DIR] = args.MANIFEST_DIR
    return ManifestResolver(environ=environ, self_reference=args.SELF_REFERENCE, config=cfg or {})


def render(results, output_format):
    """Render ``{name: FoundCrate}`` as text lines or a JSON object."""
    if output_format == "json":
        return json.dumps({k: v.to_dict() for k, v in results.items()}, indent=2, sort_keys=True)
    return "\n".join(f"{k} -> {v}" for k, v in sorted(results.items()))


def main(argv=None):
    """Main function of the program."""
    logger = logging.getLogger(__name__)

    args = parse_args(argv)
    cfg = load_config(args.CONFIG)
    apply_config_overrides(cfg)
    level_name = args.LOG_LEVEL or config_log_level(cfg)
    configure_logging(getattr(logging, level_name, None) if level_name else None)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action="main")
        )

    try:
        resolver = build_resolver(args, cfg)
        if args.LIST:
            results = resolver.table()
        else:
            results = {name: resolver.resolve(name) for name in args.names}
    except ManifestError as e:
        logging.error("%s", e)
        return _exit_code_for(e)
    except ValueError as e:
        logging.error("Invalid configuration: %s", e)
        return ExitCodes.FILE_ERROR.value

    print(render(results, args.OUTPUT_FORMAT))
    return ExitCodes.SUCCESS.value


def run():
    """Console script entrypoint."""
    sys.exit(main())


if __name__ == "__main__":
    run()
