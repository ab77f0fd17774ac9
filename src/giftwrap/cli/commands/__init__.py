"""CLI command modules for giftwrap.

Each module exposes a ``register(subparsers)`` function that wires up
its argparse sub-commands and sets ``parser.set_defaults(func=handler)``.
"""

from . import demo, keys
from .demo import cmd_demo
from .keys import cmd_keys, cmd_shared

# All command modules with register() functions, in registration order.
COMMAND_MODULES = [
    demo,
    keys,
]

__all__ = [
    "COMMAND_MODULES",
    "cmd_demo",
    "cmd_keys",
    "cmd_shared",
]
