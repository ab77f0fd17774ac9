#!/usr/bin/env python3
"""
giftwrap CLI - seal signed notes to a shared key.

Commands:
  giftwrap demo                  Wrap and unwrap through a shared key
  giftwrap keys [SECRET]         Show a keypair as hex and bech32
  giftwrap shared SECRET PUBLIC  Derive the shared keypair of two parties
"""

from __future__ import annotations

import argparse
import sys

from ..core.exceptions import ConfigException
from ..core.logging import configure_logging
from .commands import COMMAND_MODULES
from .output import output_error


def app() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="giftwrap",
        description="Seal signed notes so only the holder of a (shared) key can read them",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  giftwrap demo                           Run the Alice / Bob walkthrough
  giftwrap demo -m "hello" --json         Same, with a custom message, as JSON
  giftwrap keys nsec1...                  Show hex / bech32 encodings
  giftwrap shared <secret> <npub>         Print the shared keypair
        """,
    )
    parser.add_argument("--json", action="store_true", help="Output JSON")
    parser.add_argument("--log-level", default=None, help="Log level (default: GIFTWRAP_LOG_LEVEL)")

    subparsers = parser.add_subparsers(dest="command", required=True)
    for module in COMMAND_MODULES:
        module.register(subparsers)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = app()
    args = parser.parse_args(argv)

    try:
        configure_logging(level=args.log_level, json_format=False)
    except ConfigException as e:
        output_error(e.message)
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
