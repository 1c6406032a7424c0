"""
Ed25519 key and signature tests.
"""

import pytest
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))
from helpers import mk_keypair

from stellar_multisig.crypto import Ed25519Keypair
from stellar_multisig.crypto.ed25519 import Ed25519Error, verify_for_account, verify_signature


def test_zero_seed_public_key():
    keypair = Ed25519Keypair(b"\x00" * 32)
    assert keypair.public_key.hex() == "3b6a27bcceb6a42d62a3a8d02a6f0d73653215771de243a63ac048a18b59da29"
    assert keypair.account_id.startswith("G")


def test_seed_length_checked():
    with pytest.raises(Ed25519Error):
        Ed25519Keypair(b"\x01" * 31)


def test_signatures_are_deterministic():
    keypair = mk_keypair(0)
    assert keypair.sign(b"x" * 32) == keypair.sign(b"x" * 32)
    assert len(keypair.sign(b"x" * 32)) == 64


def test_verify():
    keypair = mk_keypair(0)
    sig = keypair.sign(b"tx-id")

    assert verify_signature(keypair.public_key, sig, b"tx-id")
    assert not verify_signature(keypair.public_key, sig, b"other")
    assert not verify_signature(mk_keypair(1).public_key, sig, b"tx-id")
    assert not verify_signature(b"\x00" * 5, sig, b"tx-id")


def test_verify_for_account():
    keypair = mk_keypair(2)
    sig = keypair.sign(b"tx-id")

    assert verify_for_account(keypair.account_id, sig, b"tx-id")
    assert not verify_for_account("GNOTVALID", sig, b"tx-id")
