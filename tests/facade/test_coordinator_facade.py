"""
Coordinator facade tests: end-to-end sessions against the in-memory ledger.
"""

import asyncio
import pytest
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))
from helpers import mk_account_id, mk_contract_id, mk_footprint, mk_payment

from stellar_multisig import (
    AccountState, CoordinatorConfig, KeypairSigner, MultisigCoordinator, OperationClass,
    PollResponse, PollStatus, ResultCodes, SessionStatus, SetSigner, SetThresholds,
    SimulationResult, SubmitResponse, SubmitStatus, Success, TimedOut,
)
from stellar_multisig.runtime.errors import (
    SessionStateError, SigningDenied, StaleSequence, UnknownSessionError, ValidationError,
)
from stellar_multisig.tx.values import string


@pytest.fixture
def coordinator(ledger, keypairs, two_of_two_state, clock, sleeper):
    ledger.add_account(two_of_two_state)
    return MultisigCoordinator(ledger, KeypairSigner(keypairs), CoordinatorConfig(), clock=clock, sleep=sleeper)


@pytest.mark.asyncio
async def test_two_of_two_payment_end_to_end(coordinator, ledger, keypairs, account_id, sleeper):
    a, b = keypairs[0].account_id, keypairs[1].account_id

    session = await coordinator.open_session(account_id, [mk_payment()])
    assert session.status == SessionStatus.DRAFT
    assert session.required_weight == 2
    assert session.envelope.sequence == 101
    assert session.envelope.fee == 200

    session = await coordinator.add_signature(session.session_id, a)
    assert session.status == SessionStatus.PARTIALLY_SIGNED

    # Only half the weight: refused without touching the network
    with pytest.raises(SessionStateError):
        await coordinator.submit(session.session_id)
    assert ledger.calls["submit"] == 0
    assert coordinator.get_session(session.session_id).status == SessionStatus.PARTIALLY_SIGNED

    session = await coordinator.add_signature(session.session_id, b)
    assert session.status == SessionStatus.READY_TO_SUBMIT

    ledger.script_polls(2, PollResponse(status=PollStatus.SUCCESS, ledger_sequence=500))
    outcome = await coordinator.submit(session.session_id)

    assert outcome == Success(session.tx_id, 500)
    assert ledger.calls["submit"] == 1
    assert sleeper.calls == [1.0, 1.0]
    final = coordinator.get_session(session.session_id)
    assert final.status == SessionStatus.SUCCEEDED
    assert final.outcome == outcome


@pytest.mark.asyncio
async def test_concurrent_signatures_both_kept(coordinator, keypairs, account_id):
    session = await coordinator.open_session(account_id, [mk_payment()])

    await asyncio.gather(
        coordinator.add_signature(session.session_id, keypairs[0].account_id),
        coordinator.add_signature(session.session_id, keypairs[1].account_id),
    )

    final = coordinator.get_session(session.session_id)
    assert set(final.signature_set.identities) == {keypairs[0].account_id, keypairs[1].account_id}
    assert final.current_weight == 2
    assert final.status == SessionStatus.READY_TO_SUBMIT


@pytest.mark.asyncio
async def test_denied_signature_leaves_session(coordinator, account_id):
    session = await coordinator.open_session(account_id, [mk_payment()])

    with pytest.raises(SigningDenied):
        await coordinator.add_signature(session.session_id, mk_account_id(9))

    assert coordinator.get_session(session.session_id) == session


@pytest.mark.asyncio
async def test_rejected_submission_fails_session(coordinator, ledger, keypairs, account_id):
    session = await coordinator.open_session(account_id, [mk_payment()])
    for kp in keypairs[:2]:
        session = await coordinator.add_signature(session.session_id, kp.account_id)
    ledger.submit_response = SubmitResponse(
        tx_id=session.tx_id, status=SubmitStatus.ERROR, result_codes=ResultCodes(transaction="tx_bad_seq"))

    with pytest.raises(StaleSequence):
        await coordinator.submit(session.session_id)

    failed = coordinator.get_session(session.session_id)
    assert failed.status == SessionStatus.FAILED
    assert isinstance(failed.error, StaleSequence)
    assert failed.envelope == session.envelope
    with pytest.raises(SessionStateError):
        await coordinator.submit(session.session_id)
    assert ledger.calls["submit"] == 1


@pytest.mark.asyncio
async def test_poll_again_after_timeout(ledger, keypairs, two_of_two_state, account_id, clock, sleeper):
    ledger.add_account(two_of_two_state)
    coordinator = MultisigCoordinator(ledger, KeypairSigner(keypairs),
                                      CoordinatorConfig(max_poll_attempts=3), clock=clock, sleep=sleeper)
    session = await coordinator.open_session(account_id, [mk_payment()])
    for kp in keypairs[:2]:
        await coordinator.add_signature(session.session_id, kp.account_id)

    outcome = await coordinator.submit(session.session_id)
    assert outcome == TimedOut(session.tx_id, 3)
    assert coordinator.get_session(session.session_id).status == SessionStatus.TIMED_OUT

    ledger.script_polls(1, PollResponse(status=PollStatus.SUCCESS, ledger_sequence=42))
    outcome = await coordinator.poll_outcome(session.session_id)

    assert outcome == Success(session.tx_id, 42)
    assert coordinator.get_session(session.session_id).status == SessionStatus.SUCCEEDED
    assert ledger.calls["submit"] == 1


@pytest.mark.asyncio
async def test_poll_again_uses_id_reported_at_submission(ledger, keypairs, two_of_two_state, account_id,
                                                         clock, sleeper):
    ledger.add_account(two_of_two_state)
    coordinator = MultisigCoordinator(ledger, KeypairSigner(keypairs),
                                      CoordinatorConfig(max_poll_attempts=3), clock=clock, sleep=sleeper)
    session = await coordinator.open_session(account_id, [mk_payment()])
    for kp in keypairs[:2]:
        await coordinator.add_signature(session.session_id, kp.account_id)
    reported = "ff" * 32
    ledger.submit_response = SubmitResponse(tx_id=reported, status=SubmitStatus.PENDING)

    outcome = await coordinator.submit(session.session_id)
    assert outcome == TimedOut(reported, 3)

    ledger.script_polls(0, PollResponse(status=PollStatus.SUCCESS, ledger_sequence=9))
    outcome = await coordinator.poll_outcome(session.session_id)

    assert outcome == Success(reported, 9)
    assert set(ledger.polled) == {reported}

@pytest.mark.asyncio
async def test_poll_requires_submission(coordinator, account_id):
    session = await coordinator.open_session(account_id, [mk_payment()])
    with pytest.raises(SessionStateError):
        await coordinator.poll_outcome(session.session_id)


@pytest.mark.asyncio
async def test_contract_session(coordinator, ledger, account_id, keypairs):
    footprint = mk_footprint()
    ledger.simulation = SimulationResult(footprint=footprint)

    session = await coordinator.open_contract_session(account_id, mk_contract_id(), "set_name", [string("bob")])

    assert session.footprint == footprint
    assert session.required_weight == coordinator.resolve_threshold(
        session.account_state, OperationClass.INVOKE_CONTRACT)
    assert session.envelope.transaction.soroban_data is not None
    assert ledger.calls["simulate"] == 1

    session = await coordinator.add_signature(session.session_id, keypairs[0].account_id)
    session = await coordinator.add_signature(session.session_id, keypairs[1].account_id)
    assert session.status == SessionStatus.READY_TO_SUBMIT


@pytest.mark.asyncio
async def test_setup_multisig(ledger, keypairs, clock, sleeper):
    master = keypairs[0].account_id
    ledger.add_account(AccountState.single_key(master, 10))
    coordinator = MultisigCoordinator(ledger, KeypairSigner(keypairs), clock=clock, sleep=sleeper)
    co_signers = [keypairs[1].account_id, keypairs[2].account_id]

    session = await coordinator.setup_multisig(master, co_signers)

    ops = session.envelope.operations
    assert [type(op) for op in ops] == [SetSigner, SetSigner, SetThresholds]
    assert session.required_weight == 1
    assert session.envelope.fee == 600

    session = await coordinator.add_signature(session.session_id, master)
    assert session.status == SessionStatus.READY_TO_SUBMIT


@pytest.mark.asyncio
async def test_setup_skipped_for_multisig_account(coordinator, ledger, account_id, keypairs):
    result = await coordinator.setup_multisig(account_id, [keypairs[2].account_id])

    assert result is None
    assert coordinator.sessions == []


@pytest.mark.asyncio
async def test_setup_rejects_lockout(ledger, keypairs, clock):
    master = keypairs[0].account_id
    ledger.add_account(AccountState.single_key(master, 10))
    coordinator = MultisigCoordinator(ledger, KeypairSigner(keypairs), clock=clock)

    with pytest.raises(ValidationError):
        await coordinator.setup_multisig(master, [keypairs[1].account_id])


@pytest.mark.asyncio
async def test_abandon_and_discard(coordinator, account_id):
    session = await coordinator.open_session(account_id, [mk_payment()])

    with pytest.raises(SessionStateError):
        await coordinator.discard(session.session_id)

    abandoned = await coordinator.abandon(session.session_id)
    assert abandoned.status == SessionStatus.ABANDONED

    await coordinator.discard(session.session_id)
    with pytest.raises(UnknownSessionError):
        coordinator.get_session(session.session_id)


@pytest.mark.asyncio
async def test_unknown_session(coordinator):
    with pytest.raises(UnknownSessionError):
        await coordinator.add_signature("missing", mk_account_id(0))
    with pytest.raises(UnknownSessionError):
        await coordinator.submit("missing")


@pytest.mark.asyncio
async def test_signature_report_refresh(coordinator, ledger, account_id, keypairs):
    session = await coordinator.open_session(account_id, [mk_payment()])
    await coordinator.add_signature(session.session_id, keypairs[0].account_id)

    report = await coordinator.signature_report(session.session_id)
    assert report["missingWeight"] == 1
    assert ledger.calls["get_account"] == 1

    await coordinator.signature_report(session.session_id, refresh=True)
    assert ledger.calls["get_account"] == 2


def test_build_envelope_is_offline(coordinator, ledger, account_id):
    envelope = coordinator.build_envelope(account_id, 7, [mk_payment(), mk_payment()])

    assert envelope.fee == 400
    assert envelope.sequence == 7
    assert sum(ledger.calls.values()) == 0


def test_build_envelope_rejects_zero_timeout(coordinator, ledger, account_id):
    with pytest.raises(ValidationError, match="timeout_seconds"):
        coordinator.build_envelope(account_id, 7, [mk_payment()], timeout_seconds=0)
    assert sum(ledger.calls.values()) == 0


@pytest.mark.asyncio
async def test_open_session_rejects_zero_timeout(coordinator, ledger, account_id):
    with pytest.raises(ValidationError):
        await coordinator.open_session(account_id, [mk_payment()], timeout_seconds=0)

    assert sum(ledger.calls.values()) == 0
    assert coordinator.sessions == []


@pytest.mark.asyncio
async def test_discard_waits_for_running_poll(ledger, keypairs, two_of_two_state, account_id, clock):
    gate = asyncio.Event()
    gate.set()

    async def gated_sleep(seconds):
        await gate.wait()

    ledger.add_account(two_of_two_state)
    coordinator = MultisigCoordinator(ledger, KeypairSigner(keypairs),
                                      CoordinatorConfig(max_poll_attempts=3), clock=clock, sleep=gated_sleep)
    session = await coordinator.open_session(account_id, [mk_payment()])
    for kp in keypairs[:2]:
        await coordinator.add_signature(session.session_id, kp.account_id)
    await coordinator.submit(session.session_id)

    gate.clear()
    poll = asyncio.create_task(coordinator.poll_outcome(session.session_id))
    await asyncio.sleep(0)
    discard = asyncio.create_task(coordinator.discard(session.session_id))
    await asyncio.sleep(0)
    assert not discard.done()

    gate.set()
    assert await poll == TimedOut(session.tx_id, 3)
    await discard

    with pytest.raises(UnknownSessionError):
        coordinator.get_session(session.session_id)
    assert coordinator.sessions == []
