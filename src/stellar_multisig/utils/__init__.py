"""
Utility helpers.
"""

from .amounts import AmountConstants, to_stroops, from_stroops

__all__ = ["AmountConstants", "to_stroops", "from_stroops"]
