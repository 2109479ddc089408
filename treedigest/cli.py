"""Command-line front end: ``treedigest [<options>] <paths>``."""

from __future__ import annotations

import argparse
import logging
import os
import sys

from pydantic import ValidationError

from treedigest.config import SQUASH_VERSIONS, VERSION_STRING
from treedigest.errors import TreeDigestError, UnsupportedAlgorithmError
from treedigest.hashing.algorithms import available_algorithms
from treedigest.logging_utils import configure_logging, parse_level
from treedigest.settings import SettingsLoader
from treedigest.walk.options import WalkOptions
from treedigest.walk.walker import TreeWalker

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="treedigest",
        usage="%(prog)s [<options>] <paths>",
        description="Print message digests of files under the given paths.",
    )
    ap.add_argument("paths", nargs="*", help="Files or directories to hash")
    ap.add_argument("--hash_algo", metavar="<string>",
                    help="Hash algorithm to use (default \"sha256\")")
    ap.add_argument("--hash_verify", metavar="<string>", default="",
                    help="Message digest to verify in hex string")
    ap.add_argument("--hash_only", action="store_true", help="Do not print file path")
    ap.add_argument("--ignore_dot", action="store_true", help="Ignore entry starts with .")
    ap.add_argument("--ignore_dot_dir", action="store_true", help="Ignore directory starts with .")
    ap.add_argument("--ignore_dot_file", action="store_true", help="Ignore file starts with .")
    ap.add_argument("--ignore_symlink", action="store_true", help="Ignore symbolic link")
    ap.add_argument("--lstat", action="store_true", help="Do not resolve symbolic link")
    ap.add_argument("--abs", action="store_true", help="Print file path in absolute path")
    ap.add_argument("--swap", action="store_true", help="Print file path before digest")
    ap.add_argument("--sort", action="store_true",
                    help="Sort entries before hashing (reproducible squash v2)")
    ap.add_argument("--squash", action="store_true",
                    help="Print squashed message digest instead of per file")
    ap.add_argument("--squash_version", type=int, metavar="<int>",
                    help=f"Squash folding version {list(SQUASH_VERSIONS)}")
    ap.add_argument("--config", metavar="<path>", help="JSON config file")
    ap.add_argument("--print_config_template", metavar="<path>",
                    help="Write an example config file and exit")
    ap.add_argument("--verbose", action="store_true", help="Enable verbose print")
    ap.add_argument("--debug", action="store_true", help="Enable debug print")
    ap.add_argument("-v", "--version", action="version", version=VERSION_STRING)
    return ap


def _error(message: str) -> int:
    print(f"treedigest: {message}", file=sys.stderr)
    return 1


def build_options(args: argparse.Namespace, settings: dict[str, str]) -> WalkOptions:
    """Merge parsed flags over loaded settings into a validated option set."""
    squash_version = args.squash_version
    if squash_version is None:
        squash_version = int(settings["TREEDIGEST_SQUASH_VERSION"])
    return WalkOptions(
        hash_algo=args.hash_algo or settings["TREEDIGEST_HASH_ALGO"],
        hash_verify=args.hash_verify,
        hash_only=args.hash_only,
        ignore_dot=args.ignore_dot,
        ignore_dot_dir=args.ignore_dot_dir,
        ignore_dot_file=args.ignore_dot_file,
        ignore_symlink=args.ignore_symlink,
        follow_symlink=not args.lstat,
        abs=args.abs,
        swap=args.swap,
        sort=args.sort,
        squash=args.squash,
        squash_version=squash_version,
        verbose=args.verbose,
        debug=args.debug,
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    loader = SettingsLoader(config_path=args.config)
    if args.print_config_template:
        print(loader.generate_template(args.print_config_template))
        return 0

    settings = loader.load_settings()
    level = logging.DEBUG if args.debug else parse_level(settings["TREEDIGEST_LOG_LEVEL"])
    configure_logging(level)

    try:
        options = build_options(args, settings)
    except UnsupportedAlgorithmError as exc:
        logger.debug("Rejected options", exc_info=True)
        _error(str(exc))
        return _error(f"Available hash algorithm {available_algorithms()}")
    except (TreeDigestError, ValueError, ValidationError) as exc:
        return _error(str(exc))

    if os.sep != "/":
        return _error(f"Invalid path separator {os.sep}")

    if not args.paths:
        parser.print_usage(sys.stderr)
        return 1

    if options.verbose:
        print(VERSION_STRING)
        print(options.hash_algo)
    logger.debug("Options: %s", options.model_dump())
    logger.debug("Available: %s", available_algorithms())

    walker = TreeWalker(options)
    for i, path in enumerate(args.paths):
        try:
            walker.walk(path)
        except TreeDigestError as exc:
            logger.debug("Walk of %s failed", path, exc_info=True)
            return _error(str(exc))
        if options.verbose and i != len(args.paths) - 1:
            print()
    return 0
