# SPDX-License-Identifier: MIT
"""Command-line interface for linkprobe."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from linkprobe.core.errors import LinkprobeError
from linkprobe.core.linkargs import to_dict
from linkprobe.core.selector import TargetPlatform, extract_link_arguments
from linkprobe.directives import directives_for, render_cargo

# Set up logging
logger = logging.getLogger("linkprobe")


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Configure logging based on verbosity level.

    Setting LINKPROBE_DEBUG in the environment also enables debug output,
    for when linkprobe runs inside another build tool.
    """
    if debug or os.environ.get("LINKPROBE_DEBUG"):
        level = logging.DEBUG
        fmt = "%(levelname)s: %(name)s: %(message)s"
    elif verbose:
        level = logging.INFO
        fmt = "%(levelname)s: %(message)s"
    else:
        level = logging.WARNING
        fmt = "%(levelname)s: %(message)s"

    logging.basicConfig(level=level, format=fmt)


def parse_variables(args: list[str]) -> tuple[dict[str, str], list[str]]:
    """Parse KEY=value arguments from a list.

    Args:
        args: List of arguments.

    Returns:
        Tuple of (variables dict, remaining args).
    """
    variables: dict[str, str] = {}
    remaining: list[str] = []

    for arg in args:
        if "=" in arg and not arg.startswith("-"):
            key, _, value = arg.partition("=")
            if key:  # Valid KEY=value
                variables[key] = value
            else:
                remaining.append(arg)
        else:
            remaining.append(arg)

    return variables, remaining


def cmd_extract(args: argparse.Namespace) -> int:
    """Print the link arguments recovered from a CMake build tree."""
    setup_logging(args.verbose, args.debug)

    platform = TargetPlatform(args.platform) if args.platform else None
    try:
        link_args = extract_link_arguments(
            Path(args.build_dir),
            args.target,
            args.config,
            platform=platform,
        )
    except LinkprobeError as e:
        logger.error("%s", e)
        return 1

    if args.format == "json":
        print(json.dumps([to_dict(arg) for arg in link_args], indent=2))
    elif args.format == "cargo":
        for line in render_cargo(directives_for(link_args)):
            print(line)
    else:
        for arg in link_args:
            print(repr(arg))

    return 0


def cmd_build(args: argparse.Namespace) -> int:
    """Build the wrapper library and its dependencies, print directives.

    KEY=value arguments override environment variables for this build,
    e.g. ``linkprobe build LINKPROBE_OPENEXR_BUILD_TYPE=Debug``.
    """
    setup_logging(args.verbose, args.debug)

    from linkprobe.build import build
    from linkprobe.configure.manifest import load_manifest

    variables, remaining = parse_variables(getattr(args, "extra", []))
    if remaining:
        logger.error("Unexpected arguments: %s", " ".join(remaining))
        return 1

    environ = dict(os.environ)
    environ.update(variables)
    for key, value in variables.items():
        logger.debug("  %s=%s", key, value)

    try:
        manifest = load_manifest(args.manifest)
        directives = build(manifest, Path(args.target_dir), environ=environ)
    except LinkprobeError as e:
        logger.error("%s", e)
        return 1

    for line in render_cargo(directives):
        print(line)
    return 0


def add_common_args(parser: argparse.ArgumentParser) -> None:
    """Add common arguments to a parser."""
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--debug", action="store_true", help="Debug output")


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the linkprobe CLI."""
    parser = argparse.ArgumentParser(
        prog="linkprobe",
        description="Recover the link arguments of a CMake-built native library.",
        epilog="Run 'linkprobe <command> --help' for command-specific help.",
    )
    from linkprobe import __version__

    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # linkprobe extract
    extract_parser = subparsers.add_parser(
        "extract", help="Print the link arguments of a built CMake target"
    )
    add_common_args(extract_parser)
    extract_parser.add_argument(
        "-B", "--build-dir", default="build", help="CMake build tree (default: build)"
    )
    extract_parser.add_argument(
        "-t", "--target", required=True, help="Versioned CMake target name"
    )
    extract_parser.add_argument(
        "-c",
        "--config",
        default="Release",
        help="Build configuration (default: Release)",
    )
    extract_parser.add_argument(
        "--platform",
        choices=[p.value for p in TargetPlatform],
        help="Artifact family to read (default: host platform)",
    )
    extract_parser.add_argument(
        "-f",
        "--format",
        choices=["text", "json", "cargo"],
        default="text",
        help="Output format (default: text)",
    )
    extract_parser.set_defaults(func=cmd_extract)

    # linkprobe build
    build_parser = subparsers.add_parser(
        "build", help="Build the wrapper library and print link directives"
    )
    add_common_args(build_parser)
    build_parser.add_argument(
        "-m",
        "--manifest",
        default="linkprobe.toml",
        help="Project manifest (default: linkprobe.toml)",
    )
    build_parser.add_argument(
        "--target-dir",
        default="target",
        help="Directory for build outputs (default: target)",
    )
    build_parser.add_argument(
        "extra",
        nargs="*",
        help="Build variables (KEY=value)",
    )
    build_parser.set_defaults(func=cmd_build)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    result: int = args.func(args)
    return result


if __name__ == "__main__":
    sys.exit(main())
