"""
Test bootstrap:
- Make src/ importable without an editable install
- Shared fixtures: deterministic signers, accounts, fake ledger, recording sleeper
"""
import sys
import pathlib
import pytest

ROOT = pathlib.Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
TESTS = ROOT / "tests"

for path in (SRC, TESTS):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from helpers import (  # noqa: E402
    FakeLedger, RecordingSleeper, mk_keypair, mk_account_state, fixed_clock,
)


@pytest.fixture
def keypairs():
    """Three deterministic signer keys: A, B, C."""
    return [mk_keypair(i) for i in range(3)]


@pytest.fixture
def account_id(keypairs):
    """Shared account, controlled by the first key."""
    return keypairs[0].account_id


@pytest.fixture
def two_of_two_state(keypairs):
    """Signers (A,1),(B,1); thresholds all 2."""
    return mk_account_state(keypairs[0].account_id,
                            [(keypairs[0].account_id, 1), (keypairs[1].account_id, 1)],
                            thresholds=(2, 2, 2))


@pytest.fixture
def two_of_three_state(keypairs):
    """Signers (A,1),(B,1),(C,1); medium threshold 2."""
    return mk_account_state(keypairs[0].account_id,
                            [(kp.account_id, 1) for kp in keypairs],
                            thresholds=(1, 2, 3))


@pytest.fixture
def ledger():
    return FakeLedger()


@pytest.fixture
def sleeper():
    return RecordingSleeper()


@pytest.fixture
def clock():
    return fixed_clock
