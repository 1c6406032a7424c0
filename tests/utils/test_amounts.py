"""
Amount conversion tests.
"""

from decimal import Decimal

import pytest

from stellar_multisig.utils.amounts import AmountConstants, from_stroops, to_stroops


@pytest.mark.parametrize("amount,stroops", [
    ("1", 10_000_000),
    ("12.5", 125_000_000),
    ("0.0000001", 1),
    (3, 30_000_000),
    (Decimal("0.25"), 2_500_000),
    ("0", 0),
])
def test_to_stroops(amount, stroops):
    assert to_stroops(amount) == stroops


@pytest.mark.parametrize("bad", ["abc", "-1", "0.00000001", "NaN", "Infinity", "922337203686.4775808"])
def test_to_stroops_rejects(bad):
    with pytest.raises(ValueError):
        to_stroops(bad)


def test_floats_refused():
    with pytest.raises(ValueError, match="float"):
        to_stroops(0.1)


@pytest.mark.parametrize("stroops,text", [
    (0, "0"),
    (1, "0.0000001"),
    (15_000_000, "1.5"),
    (10_000_000, "1"),
    (AmountConstants.MAX_STROOPS, "922337203685.4775807"),
])
def test_from_stroops(stroops, text):
    assert from_stroops(stroops) == text


@pytest.mark.parametrize("huge", ["1e30", "1E+100", Decimal("9" * 40)])
def test_to_stroops_huge_amounts_raise_value_error(huge):
    with pytest.raises(ValueError, match="too large"):
        to_stroops(huge)


def test_to_stroops_largest_amount():
    assert to_stroops("922337203685.4775807") == AmountConstants.MAX_STROOPS
