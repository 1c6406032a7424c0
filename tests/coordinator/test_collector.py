"""
Signature collection tests.

Walks sessions through partial and full authorization and checks that
every bad signer response leaves the session untouched.
"""

import logging
import pytest
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))
from helpers import ScriptedSigner, fixed_clock, mk_account_id, mk_keypair, mk_payment

from stellar_multisig.config import TESTNET_PASSPHRASE
from stellar_multisig.coordinator import CoordinationSession, SessionStatus, SignatureCollector
from stellar_multisig.runtime.errors import (
    DenialReason, EnvelopeDecodeError, EnvelopeMismatchError, InvalidSignatureError,
    SessionStateError, SigningDenied,
)
from stellar_multisig.signers import KeypairSigner
from stellar_multisig.tx import DecoratedSignature, TransactionEnvelope
from stellar_multisig.tx.builder import TransactionEnvelopeBuilder
from stellar_multisig.tx.thresholds import required_weight


@pytest.fixture
def builder():
    return TransactionEnvelopeBuilder(TESTNET_PASSPHRASE, clock=fixed_clock)


@pytest.fixture
def session(builder, two_of_three_state):
    ops = [mk_payment()]
    envelope = builder.build(two_of_three_state.account_id, two_of_three_state.next_sequence,
                             ops, fee=100, timeout_seconds=300)
    return CoordinationSession.open(two_of_three_state, envelope,
                                    required_weight(two_of_three_state, ops))


@pytest.fixture
def collector(keypairs):
    return SignatureCollector(KeypairSigner(keypairs + [mk_keypair(7)]))


def test_session_starts_as_draft(session):
    assert session.status == SessionStatus.DRAFT
    assert session.required_weight == 2
    assert session.current_weight == 0


@pytest.mark.asyncio
async def test_partial_then_ready(collector, session, keypairs):
    a, b, c = (kp.account_id for kp in keypairs)

    session = await collector.add_signature(session, a)
    assert session.status == SessionStatus.PARTIALLY_SIGNED
    assert session.current_weight == 1

    session = await collector.add_signature(session, b)
    assert session.status == SessionStatus.READY_TO_SUBMIT
    assert session.current_weight == 2

    # Exceeding the threshold is still ready
    session = await collector.add_signature(session, c)
    assert session.status == SessionStatus.READY_TO_SUBMIT
    assert session.current_weight == 3
    assert [s.identity for s in session.envelope.signatures] == [a, b, c]


@pytest.mark.asyncio
async def test_order_does_not_matter(collector, session, keypairs):
    a, b, _ = (kp.account_id for kp in keypairs)

    ab = await collector.add_signature(await collector.add_signature(session, a), b)
    ba = await collector.add_signature(await collector.add_signature(session, b), a)

    assert ab.current_weight == ba.current_weight == 2
    assert ab.status == ba.status == SessionStatus.READY_TO_SUBMIT
    assert ab.envelope.transaction_bytes == ba.envelope.transaction_bytes


@pytest.mark.asyncio
async def test_resign_does_not_add_weight(collector, session, keypairs):
    a = keypairs[0].account_id

    once = await collector.add_signature(session, a)
    twice = await collector.add_signature(once, a)

    assert twice.current_weight == 1
    assert len(twice.signature_set) == 1
    assert twice.status == SessionStatus.PARTIALLY_SIGNED


@pytest.mark.asyncio
async def test_non_signer_carries_no_weight(collector, session, caplog):
    outsider = mk_account_id(7)

    with caplog.at_level(logging.WARNING, logger="stellar_multisig.coordinator.collector"):
        updated = await collector.add_signature(session, outsider)

    assert updated.status == SessionStatus.DRAFT
    assert updated.current_weight == 0
    assert outsider in updated.signature_set
    assert any(outsider in w for w in updated.warnings)
    assert any("not a signer" in r.getMessage() for r in caplog.records)


@pytest.mark.asyncio
async def test_original_session_untouched(collector, session, keypairs):
    await collector.add_signature(session, keypairs[0].account_id)

    assert session.status == SessionStatus.DRAFT
    assert session.envelope.signatures == ()
    assert len(session.signature_set) == 0


@pytest.mark.asyncio
async def test_denial_propagates(session, keypairs):
    signer = KeypairSigner(keypairs)
    signer.lock()

    with pytest.raises(SigningDenied) as exc:
        await SignatureCollector(signer).add_signature(session, keypairs[0].account_id)
    assert exc.value.reason == DenialReason.LOCKED


@pytest.mark.asyncio
async def test_envelope_mismatch(session, builder, keypairs):
    other = builder.build(session.account_state.account_id, 999, [mk_payment()], fee=100, timeout_seconds=300)

    async def swap(encoding, identity, passphrase):
        kp = keypairs[0]
        signed = other.with_signatures([DecoratedSignature(public_key=kp.public_key, signature=kp.sign(other.id))])
        return signed.encoding

    with pytest.raises(EnvelopeMismatchError):
        await SignatureCollector(ScriptedSigner(swap)).add_signature(session, keypairs[0].account_id)


@pytest.mark.asyncio
async def test_invalid_signature(session, keypairs):
    async def forge(encoding, identity, passphrase):
        envelope = TransactionEnvelope.from_encoding(encoding, passphrase)
        kp = keypairs[0]
        bad = DecoratedSignature(public_key=kp.public_key, signature=kp.sign(b"not the tx id"))
        return envelope.with_signatures([bad]).encoding

    with pytest.raises(InvalidSignatureError):
        await SignatureCollector(ScriptedSigner(forge)).add_signature(session, keypairs[0].account_id)


@pytest.mark.asyncio
async def test_missing_signature(session, keypairs):
    async def echo(encoding, identity, passphrase):
        return encoding

    with pytest.raises(SigningDenied) as exc:
        await SignatureCollector(ScriptedSigner(echo)).add_signature(session, keypairs[0].account_id)
    assert exc.value.reason == DenialReason.NO_SIGNATURE


@pytest.mark.asyncio
async def test_malformed_response(session, keypairs):
    async def garbage(encoding, identity, passphrase):
        return b"\x00\x00\x00\x02"

    with pytest.raises(EnvelopeDecodeError):
        await SignatureCollector(ScriptedSigner(garbage)).add_signature(session, keypairs[0].account_id)


@pytest.mark.asyncio
async def test_dropped_signatures_warned(collector, session, keypairs):
    a, b = keypairs[0].account_id, keypairs[1].account_id
    signed_by_a = await collector.add_signature(session, a)

    async def fresh_sign(encoding, identity, passphrase):
        envelope = TransactionEnvelope.from_encoding(encoding, passphrase)
        kp = keypairs[1]
        only_b = DecoratedSignature(public_key=kp.public_key, signature=kp.sign(envelope.id))
        return envelope.with_signatures([only_b]).encoding

    updated = await SignatureCollector(ScriptedSigner(fresh_sign)).add_signature(signed_by_a, b)

    assert updated.signature_set.identities == (b,)
    assert updated.current_weight == 1
    assert any("dropped" in w for w in updated.warnings)


@pytest.mark.asyncio
async def test_finished_session_refuses_signatures(collector, session, keypairs):
    abandoned = session.abandon()
    signer_requests = ScriptedSigner(None)

    with pytest.raises(SessionStateError):
        await SignatureCollector(signer_requests).add_signature(abandoned, keypairs[0].account_id)
    assert signer_requests.requests == []
