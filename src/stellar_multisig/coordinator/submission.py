"""
Submission and bounded outcome polling.

Submits a fully authorized envelope exactly once, then polls for its
outcome at a fixed interval until the ledger reports a result, the
attempt ceiling is reached, or the caller cancels. Nothing is retried:
resubmitting a consumed or stale envelope is unsafe, so that decision is
left to the caller.
"""

from __future__ import annotations
import asyncio
import logging
from typing import Awaitable, Callable, Optional

from ..config import CoordinatorConfig
from ..ledger.access import LedgerAccess, PollStatus, ResultCodes, SubmitStatus
from ..runtime.errors import SessionStateError, error_from_result_codes
from .outcomes import Cancelled, Failed, Outcome, Success, TimedOut
from .session import CoordinationSession, SessionStatus

logger = logging.getLogger(__name__)


Sleep = Callable[[float], Awaitable[None]]


def _is_cancelled(cancel: Optional[asyncio.Event]) -> bool:
    return cancel is not None and cancel.is_set()


class SubmissionCoordinator:
    """
    Submits ready sessions and drives them to a terminal outcome.
    """

    def __init__(self, ledger: LedgerAccess, config: Optional[CoordinatorConfig] = None,
                 sleep: Sleep = asyncio.sleep):
        """
        Initialize the coordinator.

        Args:
            ledger: Ledger access capability
            config: Poll interval and attempt ceiling
            sleep: Awaitable sleep; injected so tests can simulate time
        """
        self._ledger = ledger
        self._config = config or CoordinatorConfig()
        self._sleep = sleep

    async def submit(self, session: CoordinationSession,
                     cancel: Optional[asyncio.Event] = None) -> Outcome:
        """
        Submit a session's envelope and wait for its outcome.

        Args:
            session: Session in READY_TO_SUBMIT
            cancel: Set by the caller to stop polling

        Returns:
            Success, Failed, TimedOut or Cancelled

        Raises:
            SessionStateError: If the session is not ready; nothing is sent
            SubmissionError: If the ledger rejects the envelope at submission
        """
        if session.status != SessionStatus.READY_TO_SUBMIT:
            raise SessionStateError(
                f"Session {session.session_id} is not ready to submit ({session.status.value})",
                {"currentWeight": session.current_weight, "requiredWeight": session.required_weight})

        logger.info(f"Submitting {session.tx_id} for session {session.session_id}")
        response = await self._ledger.submit(session.envelope)
        tx_id = response.tx_id or session.tx_id

        if response.status == SubmitStatus.ERROR:
            codes = response.result_codes or ResultCodes()
            error = error_from_result_codes(codes.transaction, codes.operations, tx_id)
            logger.info(f"Submission of {tx_id} rejected: {error.code.name}")
            raise error

        if response.status == SubmitStatus.SUCCESS:
            logger.info(f"Transaction {tx_id} applied in ledger {response.ledger_sequence}")
            return Success(tx_id, response.ledger_sequence, response.return_value)

        return await self.wait_for_outcome(tx_id, cancel)

    async def wait_for_outcome(self, tx_id: str, cancel: Optional[asyncio.Event] = None) -> Outcome:
        """
        Poll for a submitted transaction's outcome.

        Also usable on its own to look up a transaction that previously
        timed out.

        Args:
            tx_id: Transaction id
            cancel: Set by the caller to stop polling

        Returns:
            Success, Failed, TimedOut or Cancelled
        """
        max_attempts = self._config.max_poll_attempts
        attempts = 0

        while True:
            if _is_cancelled(cancel):
                logger.info(f"Polling for {tx_id} cancelled after {attempts} attempts")
                return Cancelled(tx_id, attempts)

            attempts += 1
            poll = await self._ledger.poll_outcome(tx_id)
            logger.debug(f"Poll {attempts}/{max_attempts} for {tx_id}: {poll.status.value}")

            if poll.status == PollStatus.SUCCESS:
                logger.info(f"Transaction {tx_id} applied in ledger {poll.ledger_sequence}")
                return Success(tx_id, poll.ledger_sequence, poll.return_value)
            if poll.status == PollStatus.FAILED:
                codes = poll.result_codes or ResultCodes()
                logger.info(f"Transaction {tx_id} failed: {codes.transaction}")
                return Failed(tx_id, codes)

            if attempts >= max_attempts:
                logger.warning(f"Transaction {tx_id} still pending after {attempts} polls")
                return TimedOut(tx_id, attempts)

            if _is_cancelled(cancel):
                logger.info(f"Polling for {tx_id} cancelled after {attempts} attempts")
                return Cancelled(tx_id, attempts)
            await self._sleep(self._config.poll_interval)


__all__ = ["Sleep", "SubmissionCoordinator"]
