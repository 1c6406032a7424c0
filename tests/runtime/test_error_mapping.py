"""
Error taxonomy and result-code translation tests.
"""

import pytest

from stellar_multisig.runtime.errors import (
    DenialReason, ErrorCode, ErrorHandler, InsufficientAuthorization, InsufficientFunds,
    MultisigError, RedundantSignatures, SigningDenied, SimulationError, SimulationErrorReason,
    StaleSequence, SubmissionError, SubmissionFailed, ValidationError, error_from_result_codes,
)


class TestResultCodeTranslation:
    """Submission-time ledger codes map to distinct categories."""

    def test_bad_auth(self):
        error = error_from_result_codes("tx_bad_auth", tx_id="abc")
        assert isinstance(error, InsufficientAuthorization)
        assert error.code == ErrorCode.INSUFFICIENT_AUTHORIZATION
        assert error.tx_id == "abc"

    def test_bad_auth_extra(self):
        assert isinstance(error_from_result_codes("tx_bad_auth_extra"), RedundantSignatures)

    def test_bad_seq(self):
        error = error_from_result_codes("tx_bad_seq")
        assert isinstance(error, StaleSequence)
        assert not isinstance(error, InsufficientAuthorization)

    def test_insufficient_balance(self):
        assert isinstance(error_from_result_codes("tx_insufficient_balance"), InsufficientFunds)

    def test_underfunded_operation(self):
        error = error_from_result_codes("tx_failed", ["op_success", "op_underfunded"])
        assert isinstance(error, InsufficientFunds)
        assert error.result_codes == {"transaction": "tx_failed",
                                      "operations": ["op_success", "op_underfunded"]}

    def test_unknown_code_keeps_raw(self):
        error = error_from_result_codes("tx_too_late", ["op_no_destination"])
        assert type(error) is SubmissionFailed
        assert error.raw == "tx_too_late (op_no_destination)"
        assert "tx_too_late" in str(error)

    def test_missing_code(self):
        error = error_from_result_codes(None)
        assert isinstance(error, SubmissionFailed)
        assert error.raw == "unknown"


def test_all_submission_errors_share_base():
    for code in ("tx_bad_auth", "tx_bad_auth_extra", "tx_bad_seq", "tx_insufficient_balance", "tx_x"):
        error = error_from_result_codes(code)
        assert isinstance(error, SubmissionError)
        assert isinstance(error, MultisigError)


def test_error_handler_categories():
    stale = StaleSequence()
    bad_auth = InsufficientAuthorization()
    denied = SigningDenied("GABC", DenialReason.LOCKED)

    assert ErrorHandler.requires_rebuild(stale)
    assert not ErrorHandler.requires_rebuild(bad_auth)
    assert ErrorHandler.is_terminal_for_envelope(bad_auth)
    assert ErrorHandler.is_terminal_for_envelope(SimulationError(SimulationErrorReason.METHOD_TRAPPED))
    assert not ErrorHandler.is_terminal_for_envelope(denied)
    assert ErrorHandler.is_retryable(denied)
    assert not ErrorHandler.is_retryable(stale)


def test_validation_error_lists_issues():
    error = ValidationError("Envelope validation failed", ["bad fee", "bad source"])
    assert error.issues == ["bad fee", "bad source"]
    assert "bad fee; bad source" in str(error)


def test_to_dict():
    error = SimulationError(SimulationErrorReason.CONTRACT_NOT_FOUND, details={"code": "contract_not_found"})
    data = error.to_dict()
    assert data["code"] == ErrorCode.CONTRACT_NOT_FOUND.value
    assert data["name"] == "CONTRACT_NOT_FOUND"
    assert data["details"] == {"code": "contract_not_found"}


def test_signing_denied_carries_reason():
    error = SigningDenied("GABC", DenialReason.NOT_AUTHORIZED)
    assert error.identity == "GABC"
    assert error.reason == DenialReason.NOT_AUTHORIZED
    assert error.code == ErrorCode.SIGNING_DENIED
