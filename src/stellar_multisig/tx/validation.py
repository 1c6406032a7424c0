"""
Structural validation for envelope inputs.

Checks everything that can be checked locally before an envelope is
encoded: identity formats, contract ids, the operation count and the fee
floor. Every problem found is collected into a single ValidationError.
"""

from __future__ import annotations
from typing import List, Optional, Sequence, Tuple

from ..runtime.errors import ErrorCode, ValidationError
from ..runtime.strkey import is_valid_account_id, is_valid_contract_id
from .operations import ContractInvoke, CreateAccount, Operation, Payment, SetSigner
from .values import AddressValue
from .transaction import MAX_OPERATIONS


Issue = Tuple[ErrorCode, str]


def _check_account(value: str, label: str, issues: List[Issue]) -> None:
    if not is_valid_account_id(value):
        issues.append((ErrorCode.INVALID_ADDRESS, f"{label} is not a valid account id: {value!r}"))


def _check_operation(index: int, op: Operation, issues: List[Issue]) -> None:
    """Validate the identities carried by a single operation."""
    prefix = f"operations[{index}]"

    if isinstance(op, (Payment, CreateAccount)):
        _check_account(op.destination, f"{prefix}.destination", issues)
    if isinstance(op, Payment) and not op.asset.is_native:
        _check_account(op.asset.issuer, f"{prefix}.asset.issuer", issues)
    elif isinstance(op, SetSigner):
        _check_account(op.identity, f"{prefix}.identity", issues)
    elif isinstance(op, ContractInvoke):
        if not is_valid_contract_id(op.contract_id):
            issues.append((ErrorCode.INVALID_CONTRACT_ID,
                           f"{prefix}.contract_id is not a valid contract id: {op.contract_id!r}"))
        for j, param in enumerate(op.params):
            if isinstance(param, AddressValue) and not (
                    is_valid_account_id(param.value) or is_valid_contract_id(param.value)):
                issues.append((ErrorCode.INVALID_PARAMETER,
                               f"{prefix}.params[{j}] is not a valid address: {param.value!r}"))


def collect_issues(source_account: str,
                   operations: Sequence[Operation],
                   fee: int,
                   min_fee: int,
                   timeout_seconds: Optional[int] = None) -> List[Issue]:
    """
    Collect every structural problem with a set of envelope inputs.

    Args:
        source_account: Source account id
        operations: Operations to place in the envelope
        fee: Total fee offered, in stroops
        min_fee: Protocol floor per operation, in stroops
        timeout_seconds: Validity window, when one is requested

    Returns:
        List of (error code, message) pairs; empty if the inputs are valid
    """
    issues: List[Issue] = []

    _check_account(source_account, "source_account", issues)

    if not operations:
        issues.append((ErrorCode.EMPTY_OPERATIONS, "At least one operation is required"))
    elif len(operations) > MAX_OPERATIONS:
        issues.append((ErrorCode.VALIDATION_ERROR,
                       f"Too many operations: {len(operations)} (limit {MAX_OPERATIONS})"))

    for i, op in enumerate(operations or ()):
        _check_operation(i, op, issues)

    floor = min_fee * max(len(operations or ()), 1)
    if fee < floor:
        issues.append((ErrorCode.FEE_TOO_LOW, f"Fee {fee} is below the network minimum {floor}"))

    if timeout_seconds is not None and timeout_seconds <= 0:
        issues.append((ErrorCode.VALIDATION_ERROR, "timeout_seconds must be positive"))

    return issues


def raise_for_issues(issues: Sequence[Issue], message: str = "Envelope validation failed") -> None:
    """
    Raise a ValidationError listing `issues`, if there are any.

    The error code is the shared code of all issues, or the generic
    validation code when they differ.
    """
    if not issues:
        return
    codes = {code for code, _ in issues}
    code = codes.pop() if len(codes) == 1 else ErrorCode.VALIDATION_ERROR
    raise ValidationError(message, [text for _, text in issues], code=code)


def validate_envelope_inputs(source_account: str,
                             operations: Sequence[Operation],
                             fee: int,
                             min_fee: int,
                             timeout_seconds: Optional[int] = None) -> None:
    """
    Validate envelope inputs.

    Raises:
        ValidationError: If any check fails
    """
    raise_for_issues(collect_issues(source_account, operations, fee, min_fee, timeout_seconds))


__all__ = ["collect_issues", "raise_for_issues", "validate_envelope_inputs"]
