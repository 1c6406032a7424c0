"""
Multisig coordinator facade.

Single entry point that wires the threshold resolver, envelope builder,
contract call adapter, signature collector and submission coordinator
around injected ledger access and signer capabilities.

Example:
    ```python
    from stellar_multisig import MultisigCoordinator, KeypairSigner, Payment

    coordinator = MultisigCoordinator.testnet(ledger, KeypairSigner.from_seeds([seed_a, seed_b]))

    session = await coordinator.open_session(account_id, [Payment(destination=dest, amount=10_000_000)])
    session = await coordinator.add_signature(session.session_id, signer_a)
    session = await coordinator.add_signature(session.session_id, signer_b)
    outcome = await coordinator.submit(session.session_id)
    ```
"""

from __future__ import annotations
import asyncio
import logging
import time
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from .account import AccountState, Thresholds
from .config import CoordinatorConfig
from .coordinator.collector import SignatureCollector
from .coordinator.outcomes import Outcome
from .coordinator.session import CoordinationSession, SessionStatus, signature_report
from .coordinator.submission import Sleep, SubmissionCoordinator
from .ledger.access import LedgerAccess
from .operations.multisig_setup import build_multisig_setup_operations
from .runtime.errors import SessionStateError, SubmissionError, UnknownSessionError
from .signers.signer import ExternalSigner
from .tx.builder import Clock, TransactionEnvelopeBuilder
from .tx.contract import ContractCallAdapter, ParamInput
from .tx.envelope import TransactionEnvelope
from .tx.operations import Operation, OperationClass
from .tx.thresholds import ThresholdResolver
from .tx.transaction import SimulationFootprint, TimeBounds
from .tx.validation import validate_envelope_inputs
from .tx.values import TypedValue

logger = logging.getLogger(__name__)


_REPOLLABLE = frozenset({SessionStatus.SUBMITTED, SessionStatus.TIMED_OUT, SessionStatus.CANCELLED})


class MultisigCoordinator:
    """
    Coordinates multi-party authorization of ledger transactions.

    Keeps the latest value of every open session in a registry and
    serializes operations on the same session with a per-session lock.
    Distinct sessions proceed independently.

    Attributes:
        config: Network, fee and polling configuration
        builder: Envelope builder bound to the configured network
        resolver: Threshold resolver
        contracts: Contract call adapter
    """

    def __init__(self,
                 ledger: LedgerAccess,
                 signer: ExternalSigner,
                 config: Optional[CoordinatorConfig] = None,
                 clock: Clock = time.time,
                 sleep: Sleep = asyncio.sleep):
        """
        Initialize the coordinator.

        Args:
            ledger: Ledger access capability
            signer: External signer capability
            config: Configuration; defaults to testnet settings
            clock: Current unix time, used for envelope time bounds
            sleep: Awaitable sleep used between outcome polls
        """
        self.config = config or CoordinatorConfig()
        self.ledger = ledger
        self.signer = signer
        self.builder = TransactionEnvelopeBuilder(self.config.network_passphrase, self.config.min_fee, clock)
        self.resolver = ThresholdResolver()
        self.contracts = ContractCallAdapter(ledger, self.builder, self.config)
        self._collector = SignatureCollector(signer)
        self._submitter = SubmissionCoordinator(ledger, self.config, sleep)
        self._sessions: Dict[str, CoordinationSession] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    @classmethod
    def testnet(cls, ledger: LedgerAccess, signer: ExternalSigner, **kwargs) -> MultisigCoordinator:
        return cls(ledger, signer, CoordinatorConfig.for_network("testnet"), **kwargs)

    @classmethod
    def public(cls, ledger: LedgerAccess, signer: ExternalSigner, **kwargs) -> MultisigCoordinator:
        return cls(ledger, signer, CoordinatorConfig.for_network("public"), **kwargs)

    # =========================================================================
    # Pure building blocks
    # =========================================================================

    def resolve_threshold(self, account_state: AccountState,
                          operation_class: Union[OperationClass, str]) -> int:
        return self.resolver.resolve(account_state, operation_class)

    def build_envelope(self,
                       source_account: str,
                       sequence: int,
                       operations: Sequence[Operation],
                       fee: Optional[int] = None,
                       timeout_seconds: Optional[int] = None,
                       time_bounds: Optional[TimeBounds] = None) -> TransactionEnvelope:
        """
        Build an unsigned envelope without touching the network.

        Args:
            source_account: Source account id
            sequence: Sequence number to embed
            operations: Operations, in order
            fee: Total fee; defaults to the recommended fee for the operation count
            timeout_seconds: Validity window; defaults to the configured timeout
            time_bounds: Explicit validity window

        Returns:
            Unsigned envelope
        """
        operations = list(operations or ())
        return self.builder.build(
            source_account=source_account,
            sequence=sequence,
            operations=operations,
            fee=fee if fee is not None else self.config.fee_for(len(operations)),
            timeout_seconds=self._timeout(timeout_seconds),
            time_bounds=time_bounds,
        )

    async def build_contract_call(self, source_account: str, contract_id: str, method: str,
                                  params: Sequence[ParamInput] = (), fee: Optional[int] = None
                                  ) -> Tuple[TransactionEnvelope, SimulationFootprint]:
        return await self.contracts.build_call(source_account, contract_id, method, params, fee)

    async def build_transfer_call(self, source_account: str, contract_id: str,
                                  from_address: str, to_address: str, amount: int,
                                  fee: Optional[int] = None
                                  ) -> Tuple[TransactionEnvelope, SimulationFootprint]:
        return await self.contracts.build_transfer_call(source_account, contract_id,
                                                        from_address, to_address, amount, fee)

    async def read_contract(self, source_account: str, contract_id: str, method: str,
                            params: Sequence[ParamInput] = ()) -> Optional[TypedValue]:
        return await self.contracts.read_contract(source_account, contract_id, method, params)

    # =========================================================================
    # Sessions
    # =========================================================================

    async def open_session(self,
                           source_account: str,
                           operations: Sequence[Operation],
                           fee: Optional[int] = None,
                           timeout_seconds: Optional[int] = None) -> CoordinationSession:
        """
        Fetch the account, build an envelope and open a session for it.

        Args:
            source_account: Source account id
            operations: Operations, in order
            fee: Total fee; defaults to the recommended fee
            timeout_seconds: Validity window

        Returns:
            New session in DRAFT

        Raises:
            AccountNotFoundError: If the account does not exist
            ValidationError: If the inputs are malformed
        """
        operations = list(operations or ())
        validate_envelope_inputs(source_account, operations,
                                 fee if fee is not None else self.config.fee_for(len(operations)),
                                 self.builder.min_fee, self._timeout(timeout_seconds))
        account_state = await self.ledger.get_account(source_account)
        if fee is None:
            fee = self.config.fee_for(len(operations), await self.ledger.get_base_fee())
        envelope = self.build_envelope(source_account, account_state.next_sequence, operations,
                                       fee, timeout_seconds)
        required = self.resolver.required_weight(account_state, operations)
        return self._register(CoordinationSession.open(account_state, envelope, required))

    async def open_contract_session(self,
                                    source_account: str,
                                    contract_id: str,
                                    method: str,
                                    params: Sequence[ParamInput] = (),
                                    fee: Optional[int] = None) -> CoordinationSession:
        """Simulate a contract call and open a session for the resulting envelope."""
        account_state = await self.ledger.get_account(source_account)
        envelope, footprint = await self.contracts.prepare_call(account_state, contract_id, method, params, fee)
        required = self.resolver.resolve(account_state, OperationClass.INVOKE_CONTRACT)
        return self._register(CoordinationSession.open(account_state, envelope, required, footprint))

    async def setup_multisig(self,
                             account_id: str,
                             signer_ids: Sequence[str],
                             thresholds: Optional[Thresholds] = None,
                             master_weight: int = 1,
                             signer_weight: int = 1,
                             fee: Optional[int] = None) -> Optional[CoordinationSession]:
        """
        Open a session that converts `account_id` to a multisig account.

        Returns:
            The new session, or None if the account is already multisig-enabled
        """
        account_state = await self.ledger.get_account(account_id)
        if account_state.is_multisig:
            logger.info(f"Account {account_id} is already multisig; nothing to set up")
            return None

        operations = build_multisig_setup_operations(signer_ids, thresholds, master_weight,
                                                     signer_weight, master_account=account_id)
        if fee is None:
            fee = self.config.fee_for(len(operations), await self.ledger.get_base_fee())
        envelope = self.build_envelope(account_id, account_state.next_sequence, operations, fee)
        required = self.resolver.required_weight(account_state, operations)
        return self._register(CoordinationSession.open(account_state, envelope, required))

    async def add_signature(self, session_id: str, identity: str) -> CoordinationSession:
        """
        Collect a signature from `identity` for a session.

        Concurrent calls for the same session are queued.

        Raises:
            UnknownSessionError: If no such session is registered
            SessionStateError: If the session no longer accepts signatures
            SigningDenied: If the signer refused; the session is unchanged
        """
        async with self._lock_for(session_id):
            session = self.get_session(session_id)
            updated = await self._collector.add_signature(session, identity)
            self._sessions[session_id] = updated
            return updated

    async def submit(self, session_id: str, cancel: Optional[asyncio.Event] = None) -> Outcome:
        """
        Submit a ready session and wait for its outcome.

        A session that is not READY_TO_SUBMIT is refused before anything
        is sent. On a submission error the session moves to FAILED with the
        error recorded and its envelope untouched, and the error is raised.

        Raises:
            SessionStateError: If the session is not ready
            SubmissionError: If the ledger rejected the envelope
        """
        async with self._lock_for(session_id):
            session = self.get_session(session_id)
            submitted = session.mark_submitted()
            self._sessions[session_id] = submitted
            try:
                outcome = await self._submitter.submit(session, cancel)
            except SubmissionError as e:
                self._sessions[session_id] = submitted.with_error(e)
                raise
            self._sessions[session_id] = submitted.with_outcome(outcome)
            logger.info(f"Session {session_id} finished: {type(outcome).__name__}")
            return outcome

    async def poll_outcome(self, session_id: str, cancel: Optional[asyncio.Event] = None) -> Outcome:
        """
        Poll again for a submitted session whose outcome is still unknown.

        Valid after TimedOut or Cancelled; never resubmits.
        """
        async with self._lock_for(session_id):
            session = self.get_session(session_id)
            if session.status not in _REPOLLABLE:
                raise SessionStateError(
                    f"Session {session_id} has no pending submission ({session.status.value})")
            tx_id = session.outcome.tx_id if session.outcome is not None else session.tx_id
            outcome = await self._submitter.wait_for_outcome(tx_id, cancel)
            self._sessions[session_id] = session.with_outcome(outcome)
            return outcome

    async def signature_report(self, session_id: str, refresh: bool = False) -> Dict[str, Any]:
        """
        Readiness report for a session.

        Args:
            session_id: Session to report on
            refresh: Re-fetch the account first, to spot signer or threshold
                changes made since the session was opened
        """
        session = self.get_session(session_id)
        account_state = None
        if refresh:
            account_state = await self.ledger.get_account(session.account_state.account_id)
        return signature_report(session, account_state)

    async def abandon(self, session_id: str) -> CoordinationSession:
        async with self._lock_for(session_id):
            abandoned = self.get_session(session_id).abandon()
            self._sessions[session_id] = abandoned
            logger.info(f"Session {session_id} abandoned")
            return abandoned

    async def discard(self, session_id: str) -> None:
        """Drop a finished session from the registry."""
        async with self._lock_for(session_id):
            session = self.get_session(session_id)
            if not session.is_terminal:
                raise SessionStateError(f"Session {session_id} is still active ({session.status.value})")
            del self._sessions[session_id]
            self._locks.pop(session_id, None)

    def get_session(self, session_id: str) -> CoordinationSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise UnknownSessionError(session_id)
        return session

    @property
    def sessions(self) -> List[CoordinationSession]:
        return list(self._sessions.values())

    def _register(self, session: CoordinationSession) -> CoordinationSession:
        self._sessions[session.session_id] = session
        logger.info(f"Opened session {session.session_id} for {session.account_state.account_id}: "
                    f"tx {session.tx_id}, required weight {session.required_weight}")
        return session

    def _timeout(self, timeout_seconds: Optional[int]) -> int:
        return timeout_seconds if timeout_seconds is not None else self.config.default_timeout_seconds

    def _lock_for(self, session_id: str) -> asyncio.Lock:
        if session_id not in self._sessions:
            raise UnknownSessionError(session_id)
        return self._locks.setdefault(session_id, asyncio.Lock())


__all__ = ["MultisigCoordinator"]
