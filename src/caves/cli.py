from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from . import __version__
from .config import GenerationSettings
from .exceptions import ConfigError, InvalidMapKey, UnsatisfiableConfig
from .generator import GameGenerator, MapKey
from .logging_config import configure_logging

logger = logging.getLogger(__name__)


def _log_level(verbosity: int) -> int:
    if verbosity == 1:
        return logging.INFO
    if verbosity >= 2:
        return logging.DEBUG
    return logging.WARNING


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="caves",
        description="Generate a multi-level dungeon from a map key",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--key", default=None, help="Map key to regenerate (default: a new random key)")
    parser.add_argument("--config", default=None, help="YAML file overriding the default settings")
    parser.add_argument("--levels", type=int, default=None, help="Number of levels to generate")
    parser.add_argument("--workers", type=int, default=None, help="Worker processes (0 = one per CPU)")
    parser.add_argument(
        "--format",
        choices=("json", "ascii"),
        default="json",
        help="Print the dungeon as JSON or as ASCII maps",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity (-v, -vv)")
    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> GenerationSettings:
    """Defaults, then the YAML file, then the environment, then the command line."""
    if args.config:
        settings = GenerationSettings.from_yaml(args.config)
    else:
        settings = GenerationSettings.default()
    settings = GenerationSettings.from_env(settings)

    overrides = {}
    if args.levels is not None:
        overrides["levels"] = args.levels
    if args.workers is not None:
        overrides["workers"] = args.workers
    if overrides:
        settings = settings.with_overrides(**overrides)
    return settings


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(_log_level(args.verbose))

    try:
        settings = build_settings(args)
        key = MapKey.parse(args.key) if args.key is not None else MapKey.random()
    except (ConfigError, InvalidMapKey) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    try:
        game = GameGenerator(settings).generate_with_key(key)
    except UnsatisfiableConfig as e:
        logger.error("%s", e)
        print(f"error: {e}", file=sys.stderr)
        return 3

    if args.format == "ascii":
        print(f"key: {game.key}")
        for index, level in enumerate(game.levels(), start=1):
            print(f"\nlevel {index} ({level.signature()})")
            print(level.render_ascii())
    else:
        # JSON so runs can be diffed by key
        print(json.dumps(game.to_dict(), indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
