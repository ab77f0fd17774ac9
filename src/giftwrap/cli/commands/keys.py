"""Key inspection commands: ``keys`` and ``shared``."""

from __future__ import annotations

import argparse

from ...core.exceptions import GiftWrapException
from ...crypto.ecdh import shared_keys
from ...crypto.keys import Keys, PublicKey
from ..output import output_error, output_result


def register(subparsers: argparse._SubParsersAction) -> None:
    """Register the key commands on the CLI parser."""
    keys_parser = subparsers.add_parser("keys", help="Show hex and bech32 forms of a keypair")
    keys_parser.add_argument("secret", nargs="?", help="Secret key (hex or nsec); generated if omitted")
    keys_parser.set_defaults(func=cmd_keys)

    shared_parser = subparsers.add_parser("shared", help="Derive the shared keys of two parties")
    shared_parser.add_argument("secret", help="Own secret key (hex or nsec)")
    shared_parser.add_argument("public", help="Peer public key (hex or npub)")
    shared_parser.set_defaults(func=cmd_shared)


def cmd_keys(args: argparse.Namespace) -> int:
    """Show a keypair in every encoding."""
    try:
        keys = Keys.parse(args.secret) if args.secret else Keys.generate()
    except GiftWrapException as e:
        output_error(e.message)
        return 1

    output_result(
        {
            "hex_public_key": keys.public_key.to_hex(),
            "hex_private_key": keys.secret_key.to_secret_hex(),
            "npub_public_key": keys.public_key.to_bech32(),
            "nsec_private_key": keys.secret_key.to_bech32(),
        },
        as_json=args.json,
    )
    return 0


def cmd_shared(args: argparse.Namespace) -> int:
    """Derive the shared keypair for ``secret`` and ``public``."""
    try:
        keys = Keys.parse(args.secret)
        peer = PublicKey.parse(args.public)
        shared = shared_keys(keys.secret_key, peer)
    except GiftWrapException as e:
        output_error(e.message)
        return 1

    output_result(
        {
            "hex_shared_pubkey": shared.public_key.to_hex(),
            "hex_shared_private_key": shared.secret_key.to_secret_hex(),
        },
        as_json=args.json,
    )
    return 0
