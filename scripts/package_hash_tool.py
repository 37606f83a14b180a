#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from package_hash.config import CONFIG_PATH_DEFAULT, load_config  # noqa: E402
from package_hash.core import hash_packages  # noqa: E402


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Print a deterministic cache key for one or more packages."
    )
    parser.add_argument(
        "paths",
        nargs="+",
        help="Package directories or manifest files, hashed in the order given.",
    )
    salt_group = parser.add_mutually_exclusive_group()
    salt_group.add_argument("--salt", default=None, help="Salt text.")
    salt_group.add_argument(
        "--salt-json",
        default=None,
        help="Salt as a JSON object or array; serialized compactly in the given key order.",
    )
    parser.add_argument(
        "--config",
        default=CONFIG_PATH_DEFAULT,
        help="TOML config path (missing file falls back to defaults).",
    )
    parser.add_argument("--verbose", action="store_true", help="Log degraded inputs to stderr.")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s %(message)s",
    )

    salt = args.salt
    if args.salt_json is not None:
        try:
            salt = json.loads(args.salt_json)
        except json.JSONDecodeError as exc:
            print(f"invalid --salt-json: {exc}", file=sys.stderr)
            return 2

    try:
        key = hash_packages(args.paths, salt, config=load_config(args.config))
    except FileNotFoundError as exc:
        print(f"package not found: {exc.filename}", file=sys.stderr)
        return 1
    except (TypeError, ValueError) as exc:
        print(str(exc), file=sys.stderr)
        return 2
    print(key)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
