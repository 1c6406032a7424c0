"""
Threshold resolution.

Maps an operation class to the threshold tier it must satisfy on a given
account and returns the signature weight that tier demands.
"""

from __future__ import annotations
from enum import Enum
from typing import Dict, Iterable, Union

from ..account import AccountState
from .operations import Operation, OperationClass


class ThresholdTier(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


OPERATION_TIERS: Dict[OperationClass, ThresholdTier] = {
    OperationClass.PAYMENT: ThresholdTier.MEDIUM,
    OperationClass.CREATE_ACCOUNT: ThresholdTier.MEDIUM,
    OperationClass.PATH_PAYMENT: ThresholdTier.MEDIUM,
    OperationClass.SET_OPTIONS: ThresholdTier.HIGH,
    OperationClass.MANAGE_SIGNER: ThresholdTier.HIGH,
    OperationClass.CHANGE_TRUST: ThresholdTier.LOW,
    OperationClass.ALLOW_TRUST: ThresholdTier.LOW,
}

# Unclassified operations never fall to the low tier
DEFAULT_TIER = ThresholdTier.MEDIUM


def tier_for(operation_class: Union[OperationClass, str]) -> ThresholdTier:
    """Threshold tier for an operation class; unknown classes map to medium."""
    try:
        key = OperationClass(operation_class)
    except ValueError:
        return DEFAULT_TIER
    return OPERATION_TIERS.get(key, DEFAULT_TIER)


class ThresholdResolver:
    """
    Resolves the signature weight an operation class requires.

    A tier of 0 still needs one signature, so the result is never below 1.
    """

    def resolve(self, account_state: AccountState, operation_class: Union[OperationClass, str]) -> int:
        """
        Required cumulative weight for `operation_class` on this account.

        Args:
            account_state: Account snapshot
            operation_class: Operation class or its string name

        Returns:
            Required weight, at least 1

        Raises:
            TypeError: If account_state is None
        """
        if account_state is None:
            raise TypeError("account_state must not be None")
        tier = tier_for(operation_class)
        return max(getattr(account_state.thresholds, tier.value), 1)

    def required_weight(self, account_state: AccountState, operations: Iterable[Operation]) -> int:
        """Highest requirement across every operation in an envelope."""
        if account_state is None:
            raise TypeError("account_state must not be None")
        return max((self.resolve(account_state, op.operation_class) for op in operations),
                   default=max(getattr(account_state.thresholds, DEFAULT_TIER.value), 1))


_default_resolver = ThresholdResolver()


def resolve_threshold(account_state: AccountState, operation_class: Union[OperationClass, str]) -> int:
    return _default_resolver.resolve(account_state, operation_class)


def required_weight(account_state: AccountState, operations: Iterable[Operation]) -> int:
    return _default_resolver.required_weight(account_state, operations)


__all__ = [
    "ThresholdTier",
    "OPERATION_TIERS",
    "DEFAULT_TIER",
    "tier_for",
    "ThresholdResolver",
    "resolve_threshold",
    "required_weight",
]
