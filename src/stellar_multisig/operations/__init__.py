"""
Composite operation builders.

- multisig_setup.py: Convert a single-key account to a weighted multisig account
"""

from .multisig_setup import (
    DEFAULT_SETUP_THRESHOLDS,
    validate_multisig_setup,
    build_multisig_setup_operations,
    needs_multisig_setup,
)

__all__ = [
    "DEFAULT_SETUP_THRESHOLDS",
    "validate_multisig_setup",
    "build_multisig_setup_operations",
    "needs_multisig_setup",
]
