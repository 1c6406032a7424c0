"""
Transaction envelope builder.

Assembles operations, a source account and a sequence number into an
unsigned envelope. The builder does no I/O: the caller supplies the
sequence number and the clock, so identical inputs always produce a
byte-identical encoding and the same transaction id.
"""

from __future__ import annotations
import logging
import time
from typing import Callable, Optional, Sequence

from ..config import MIN_BASE_FEE
from ..runtime.errors import EncodingError, ValidationError
from .envelope import TransactionEnvelope
from .operations import Operation
from .transaction import SimulationFootprint, TimeBounds, Transaction
from .validation import validate_envelope_inputs

logger = logging.getLogger(__name__)


Clock = Callable[[], float]


class TransactionEnvelopeBuilder:
    """
    Builds unsigned transaction envelopes for one network.
    """

    def __init__(self, network_passphrase: str, min_fee: int = MIN_BASE_FEE,
                 clock: Clock = time.time):
        """
        Initialize builder.

        Args:
            network_passphrase: Network the envelopes are bound to
            min_fee: Protocol floor fee per operation, in stroops
            clock: Returns the current unix time; used for time bounds
        """
        self.network_passphrase = network_passphrase
        self.min_fee = min_fee
        self._clock = clock

    def time_bounds_for(self, timeout_seconds: int) -> TimeBounds:
        """Time bounds expiring `timeout_seconds` from now."""
        return TimeBounds(min_time=0, max_time=int(self._clock()) + timeout_seconds)

    def build(self,
              source_account: str,
              sequence: int,
              operations: Sequence[Operation],
              fee: int,
              timeout_seconds: int,
              time_bounds: Optional[TimeBounds] = None,
              soroban_data: Optional[SimulationFootprint] = None) -> TransactionEnvelope:
        """
        Build an unsigned envelope.

        Args:
            source_account: Source account id ('G...')
            sequence: Sequence number to embed (the account's current sequence + 1)
            operations: Non-empty ordered operations
            fee: Total fee in stroops, at least min_fee per operation
            timeout_seconds: Validity window; ignored when time_bounds is given
            time_bounds: Explicit validity window
            soroban_data: Simulation footprint for contract calls

        Returns:
            Unsigned TransactionEnvelope

        Raises:
            ValidationError: If any input fails a structural check
        """
        operations = list(operations or ())
        validate_envelope_inputs(source_account, operations, fee, self.min_fee,
                                 None if time_bounds is not None else timeout_seconds)

        try:
            transaction = Transaction(
                source_account=source_account,
                sequence=sequence,
                fee=fee,
                time_bounds=time_bounds or self.time_bounds_for(timeout_seconds),
                operations=tuple(operations),
                soroban_data=soroban_data,
            )
        except ValueError as e:
            # pydantic range errors (sequence, fee) surface as validation failures
            raise ValidationError("Envelope validation failed", [str(e)], cause=e) from e

        envelope = TransactionEnvelope(transaction=transaction, network_passphrase=self.network_passphrase)
        try:
            tx_id = envelope.id_hex
        except EncodingError as e:
            raise ValidationError("Envelope validation failed", [e.message], cause=e) from e

        logger.debug(f"Built envelope {tx_id} for {source_account} seq={sequence} "
                     f"ops={len(operations)} fee={fee}")
        return envelope


__all__ = ["Clock", "TransactionEnvelopeBuilder"]
