"""
Multisig account setup operations.

Turning a single-key account into a multisig account is itself a
transaction: one SetSigner per co-signer, then one SetThresholds that
raises the thresholds and pins the master key weight.
"""

from __future__ import annotations
from typing import List, Optional, Sequence

from ..account import AccountState, Thresholds
from ..runtime.errors import ErrorCode, ValidationError
from ..runtime.strkey import is_valid_account_id
from ..tx.operations import Operation, SetSigner, SetThresholds


DEFAULT_SETUP_THRESHOLDS = Thresholds(low=3, medium=3, high=3)


def validate_multisig_setup(master_account: str,
                            signer_ids: Sequence[str],
                            thresholds: Thresholds,
                            master_weight: int = 1,
                            signer_weight: int = 1) -> List[str]:
    """
    Validate a multisig setup request.

    Args:
        master_account: Account being converted
        signer_ids: Co-signers to add
        thresholds: Thresholds to set
        master_weight: Weight the master key keeps
        signer_weight: Weight given to each co-signer

    Returns:
        List of error messages (empty if valid)
    """
    errors = []
    if not signer_ids:
        errors.append("At least one co-signer is required")

    seen = set()
    for i, signer_id in enumerate(signer_ids):
        if not is_valid_account_id(signer_id):
            errors.append(f"signer_ids[{i}] is not a valid account id: {signer_id!r}")
        elif signer_id == master_account:
            errors.append(f"signer_ids[{i}] is the master account itself")
        elif signer_id in seen:
            errors.append(f"signer_ids[{i}] is listed twice: {signer_id}")
        else:
            seen.add(signer_id)

    for label, weight in (("master_weight", master_weight), ("signer_weight", signer_weight)):
        if not 0 <= weight <= 255:
            errors.append(f"{label} must be between 0 and 255")

    # The account must still be able to meet its own high threshold afterwards
    total = master_weight + signer_weight * len(seen)
    if total < thresholds.high:
        errors.append(f"Total signer weight {total} cannot reach the high threshold "
                      f"{thresholds.high}; the account would be locked")
    return errors


def build_multisig_setup_operations(signer_ids: Sequence[str],
                                    thresholds: Optional[Thresholds] = None,
                                    master_weight: int = 1,
                                    signer_weight: int = 1,
                                    master_account: Optional[str] = None) -> List[Operation]:
    """
    Operations that convert an account to multisig.

    Args:
        signer_ids: Co-signers to add, in order
        thresholds: Thresholds to set; defaults to 3/3/3
        master_weight: Weight the master key keeps
        signer_weight: Weight given to each co-signer
        master_account: Account being converted, checked against signer_ids

    Returns:
        One SetSigner per co-signer followed by one SetThresholds

    Raises:
        ValidationError: If the request is malformed or would lock the account
    """
    thresholds = thresholds or DEFAULT_SETUP_THRESHOLDS
    errors = validate_multisig_setup(master_account or "", signer_ids, thresholds,
                                     master_weight, signer_weight)
    if errors:
        raise ValidationError("Invalid multisig setup", errors, code=ErrorCode.INVALID_PARAMETER)

    operations: List[Operation] = [SetSigner(identity=s, weight=signer_weight) for s in signer_ids]
    operations.append(SetThresholds(
        low=thresholds.low,
        medium=thresholds.medium,
        high=thresholds.high,
        master_weight=master_weight,
    ))
    return operations


def needs_multisig_setup(account_state: AccountState) -> bool:
    return not account_state.is_multisig


__all__ = [
    "DEFAULT_SETUP_THRESHOLDS",
    "validate_multisig_setup",
    "build_multisig_setup_operations",
    "needs_multisig_setup",
]
