# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""giftwrap CLI - demonstrate and inspect the gift wrap protocol."""

from .main import app, main

__all__ = ["main", "app"]
