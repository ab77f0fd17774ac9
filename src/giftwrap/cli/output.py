# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Output formatting for CLI commands.

Handles JSON vs human-readable text output.
"""

from __future__ import annotations

import json
import sys
from typing import Any


def output_result(data: dict[str, Any], as_json: bool = False) -> None:
    """Print a command result.

    With ``as_json`` the whole mapping is pretty-printed as JSON. Otherwise
    each top-level key is printed on its own line; nested values (events)
    are rendered as indented JSON beneath their label.
    """
    if as_json:
        print(json.dumps(data, indent=2, default=str))
        return

    for key, value in data.items():
        label = key.replace("_", " ").capitalize()
        if isinstance(value, dict | list):
            print(f"{label}:")
            print(json.dumps(value, indent=2, default=str, ensure_ascii=False))
        else:
            print(f"{label + ':':<22}{value}")


def output_error(message: str) -> None:
    """Print error message to stderr."""
    print(f"Error: {message}", file=sys.stderr)
