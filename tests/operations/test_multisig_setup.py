"""
Multisig setup operation tests.
"""

import pytest
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))
from helpers import mk_account_id

from stellar_multisig.account import AccountState, Thresholds
from stellar_multisig.operations.multisig_setup import (
    DEFAULT_SETUP_THRESHOLDS, build_multisig_setup_operations, needs_multisig_setup,
    validate_multisig_setup,
)
from stellar_multisig.runtime.errors import ErrorCode, ValidationError
from stellar_multisig.tx import SetSigner, SetThresholds


MASTER = mk_account_id(0)


def test_default_setup():
    ops = build_multisig_setup_operations([mk_account_id(1), mk_account_id(2)], master_account=MASTER)

    assert ops == [
        SetSigner(identity=mk_account_id(1), weight=1),
        SetSigner(identity=mk_account_id(2), weight=1),
        SetThresholds(low=3, medium=3, high=3, master_weight=1),
    ]


def test_custom_thresholds_and_weights():
    ops = build_multisig_setup_operations([mk_account_id(1)], Thresholds(low=1, medium=2, high=2),
                                          master_weight=1, signer_weight=1, master_account=MASTER)
    assert ops[-1] == SetThresholds(low=1, medium=2, high=2, master_weight=1)


@pytest.mark.parametrize("signer_ids,fragment", [
    ([], "At least one"),
    (["GBAD"], "not a valid account id"),
    ([MASTER, mk_account_id(1), mk_account_id(2)], "master account"),
    ([mk_account_id(1), mk_account_id(1), mk_account_id(2)], "listed twice"),
    ([mk_account_id(1)], "locked"),
])
def test_invalid_setups(signer_ids, fragment):
    errors = validate_multisig_setup(MASTER, signer_ids, DEFAULT_SETUP_THRESHOLDS)
    assert any(fragment in e for e in errors)


def test_weight_range():
    errors = validate_multisig_setup(MASTER, [mk_account_id(1)], Thresholds(), master_weight=256)
    assert any("master_weight" in e for e in errors)


def test_build_raises_with_all_errors():
    with pytest.raises(ValidationError) as exc:
        build_multisig_setup_operations(["GBAD"], master_account=MASTER)
    assert exc.value.code == ErrorCode.INVALID_PARAMETER
    assert len(exc.value.issues) == 2


def test_needs_setup():
    assert needs_multisig_setup(AccountState.single_key(MASTER, 1))
