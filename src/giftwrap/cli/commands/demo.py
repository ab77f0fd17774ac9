"""Demo command: the dispute-resolution walkthrough.

Alice and Bob each derive the same shared key. Alice wraps a message to the
shared public key; anyone holding the shared keys (Bob, or an arbiter Bob
discloses them to) can unwrap it and verify that Alice wrote it.
"""

from __future__ import annotations

import argparse
import logging

from ...core.exceptions import GiftWrapException
from ...core.logging import correlation_context
from ...crypto.ecdh import derive_shared, shared_keys
from ...crypto.keys import Keys
from ...events.seal import unwrap, wrap
from ..output import output_error, output_result

logger = logging.getLogger(__name__)

# Fixed demonstration identities
ALICE_SECRET = "548f68890c49fa42f104c60352395e60ff030b0b407e955f1eed1400d6c0347a"
BOB_SECRET = "f258e73f07386d37133718b6127f873dd7c391b8f43b331ff8254034a13d2943"

DEFAULT_MESSAGE = "Let’s reestablish the peer-to-peer nature of Bitcoin!"


def register(subparsers: argparse._SubParsersAction) -> None:
    """Register the demo command on the CLI parser."""
    demo_parser = subparsers.add_parser("demo", help="Wrap and unwrap a message through a shared key")
    demo_parser.add_argument("--message", "-m", default=DEFAULT_MESSAGE, help="Message to wrap")
    demo_parser.add_argument("--alice", default=ALICE_SECRET, help="Sender secret key (hex or nsec)")
    demo_parser.add_argument("--bob", default=BOB_SECRET, help="Counterparty secret key (hex or nsec)")
    demo_parser.set_defaults(func=cmd_demo)


def cmd_demo(args: argparse.Namespace) -> int:
    """Run the wrap / unwrap demonstration."""
    try:
        alice = Keys.parse(args.alice)
        bob = Keys.parse(args.bob)

        shared = shared_keys(alice.secret_key, bob.public_key)
        if derive_shared(bob.secret_key, alice.public_key) != shared.secret_key.data:
            output_error("shared keys differ between the two parties")
            return 1

        # One correlation id ties the envelope to its unwrap in the logs
        with correlation_context():
            envelope = wrap(alice, shared.public_key, args.message)
            inner = unwrap(shared, envelope)
    except GiftWrapException as e:
        logger.debug("demo failed", exc_info=True)
        output_error(f"{e.__class__.__name__}: {e.message}")
        return 1

    output_result(
        {
            "alice_pubkey": alice.public_key.to_bech32(),
            "bob_pubkey": bob.public_key.to_bech32(),
            "shared_pubkey": shared.public_key.to_hex(),
            "shared_secret_key": shared.secret_key.to_secret_hex(),
            "outer_event": envelope.to_dict(),
            "inner_event": inner.to_dict(),
        },
        as_json=args.json,
    )
    return 0
