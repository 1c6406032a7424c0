"""
Signature set.

An immutable, ordered mapping from signer identity to signature. Adding a
signature returns a new set; a second signature from the same identity
replaces the first in place, so weight is never counted twice.
"""

from __future__ import annotations
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from ..account import AccountState
from ..tx.transaction import DecoratedSignature


class SignatureSet:
    """
    Collection of envelope signatures keyed by signer identity.

    Insertion order is signing order. Weight summation does not depend on
    order.
    """

    __slots__ = ("_entries",)

    def __init__(self, signatures: Iterable[DecoratedSignature] = ()):
        entries: Dict[str, DecoratedSignature] = {}
        for sig in signatures:
            # dict keeps the first position of a key when its value is replaced
            entries[sig.identity] = sig
        self._entries = entries

    @classmethod
    def from_signatures(cls, signatures: Iterable[DecoratedSignature]) -> SignatureSet:
        return cls(signatures)

    def with_signature(self, signature: DecoratedSignature) -> SignatureSet:
        """Return a new set with `signature` added or replacing its identity's entry."""
        return SignatureSet(list(self._entries.values()) + [signature])

    @property
    def signatures(self) -> Tuple[DecoratedSignature, ...]:
        return tuple(self._entries.values())

    @property
    def identities(self) -> Tuple[str, ...]:
        return tuple(self._entries)

    def get(self, identity: str) -> Optional[DecoratedSignature]:
        return self._entries.get(identity)

    def weight_against(self, account_state: AccountState) -> Tuple[int, List[str]]:
        """
        Cumulative weight of this set against an account snapshot.

        Args:
            account_state: Account whose signer weights apply

        Returns:
            Tuple of (total weight, identities that are not account signers)
        """
        weight = 0
        unknown: List[str] = []
        for identity in self._entries:
            signer_weight = account_state.weight_of(identity)
            if signer_weight is None:
                unknown.append(identity)
            else:
                weight += signer_weight
        return weight, unknown

    def weight(self, account_state: AccountState) -> int:
        return self.weight_against(account_state)[0]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[DecoratedSignature]:
        return iter(self._entries.values())

    def __contains__(self, identity: object) -> bool:
        return identity in self._entries

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SignatureSet):
            return NotImplemented
        return self.signatures == other.signatures

    def __hash__(self) -> int:
        return hash(self.signatures)

    def __repr__(self) -> str:
        return f"SignatureSet({list(self._entries)})"


__all__ = ["SignatureSet"]
