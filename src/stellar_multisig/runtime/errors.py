"""
Stellar Multisig Error Model

This module provides the error handling framework for the multisig
coordination engine. Every expected failure is raised as a subclass of
MultisigError carrying a stable ErrorCode, so callers can branch on the
category without parsing messages.
"""

from __future__ import annotations
from typing import Optional, Dict, Any, List, Sequence
from enum import IntEnum, Enum


class ErrorCode(IntEnum):
    """Coordination engine error codes."""

    # Success
    OK = 0

    # General errors (1-99)
    UNKNOWN = 1
    INTERNAL = 2
    NOT_FOUND = 4
    CONFIGURATION = 5

    # Validation errors (100-199)
    VALIDATION_ERROR = 100
    INVALID_ADDRESS = 101
    INVALID_CONTRACT_ID = 102
    EMPTY_OPERATIONS = 103
    FEE_TOO_LOW = 104
    INVALID_AMOUNT = 105
    INVALID_PARAMETER = 106

    # Encoding errors (200-299)
    ENCODING_ERROR = 200
    DECODE_ERROR = 201

    # Simulation errors (300-399)
    SIMULATION_FAILED = 300
    CONTRACT_NOT_FOUND = 301
    CONTRACT_TRAPPED = 302
    RESOURCE_LIMIT_EXCEEDED = 303
    INSUFFICIENT_RESOURCE_FEE = 304

    # Signing errors (400-499)
    SIGNING_FAILED = 400
    SIGNING_DENIED = 401
    INVALID_SIGNATURE = 402
    ENVELOPE_MISMATCH = 403

    # Submission errors (500-599)
    SUBMISSION_FAILED = 500
    INSUFFICIENT_AUTHORIZATION = 501
    REDUNDANT_SIGNATURES = 502
    STALE_SEQUENCE = 503
    INSUFFICIENT_FUNDS = 504

    # Session errors (600-699)
    SESSION_STATE = 600
    UNKNOWN_SESSION = 601


class MultisigError(Exception):
    """
    Base class for all coordination engine errors.

    Provides structured error information: a message, a stable code,
    free-form details and the underlying cause when there is one.
    """

    def __init__(self, message: str, code: ErrorCode = ErrorCode.UNKNOWN,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        """
        Initialize a coordination error.

        Args:
            message: Error message
            code: Error code
            details: Additional error details
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        """String representation of the error."""
        parts = [f"[{self.code.name}] {self.message}"]
        if self.details:
            parts.append(f"Details: {self.details}")
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        result = {
            "code": self.code.value,
            "name": self.code.name,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.cause:
            result["cause"] = str(self.cause)
        return result


class ConfigurationError(MultisigError):
    """Invalid coordinator configuration."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.CONFIGURATION, details, cause)


class ValidationError(MultisigError):
    """
    Malformed caller input, detected locally before anything is sent.

    Collects every problem found in one pass so the caller can fix the
    input in one go.
    """

    def __init__(self, message: str, issues: Optional[List[str]] = None,
                 code: ErrorCode = ErrorCode.VALIDATION_ERROR,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, code, details, cause)
        self.issues = list(issues or [])

    def __str__(self) -> str:
        base_message = super().__str__()
        if self.issues:
            return f"{base_message}: {'; '.join(self.issues)}"
        return base_message


class EncodingError(MultisigError):
    """Envelope encoding errors."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.ENCODING_ERROR,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, code, details, cause)


class EnvelopeDecodeError(EncodingError):
    """An envelope encoding could not be parsed."""

    def __init__(self, message: str = "Malformed envelope encoding",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.DECODE_ERROR, details, cause)


class AccountNotFoundError(MultisigError):
    """Account does not exist on the ledger."""

    def __init__(self, message: str = "Account not found",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.NOT_FOUND, details, cause)


class SimulationErrorReason(str, Enum):
    """Why a contract call dry-run refused to produce an envelope."""
    CONTRACT_NOT_FOUND = "contract_not_found"
    METHOD_TRAPPED = "method_trapped"
    RESOURCE_LIMIT_EXCEEDED = "resource_limit_exceeded"
    INSUFFICIENT_BALANCE = "insufficient_balance"
    UNKNOWN = "unknown"


_SIMULATION_CODES = {
    SimulationErrorReason.CONTRACT_NOT_FOUND: ErrorCode.CONTRACT_NOT_FOUND,
    SimulationErrorReason.METHOD_TRAPPED: ErrorCode.CONTRACT_TRAPPED,
    SimulationErrorReason.RESOURCE_LIMIT_EXCEEDED: ErrorCode.RESOURCE_LIMIT_EXCEEDED,
    SimulationErrorReason.INSUFFICIENT_BALANCE: ErrorCode.INSUFFICIENT_RESOURCE_FEE,
    SimulationErrorReason.UNKNOWN: ErrorCode.SIMULATION_FAILED,
}


class SimulationError(MultisigError):
    """Contract call simulation failed; no envelope is produced."""

    def __init__(self, reason: SimulationErrorReason, message: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message or f"Simulation failed: {reason.value}",
                         _SIMULATION_CODES[reason], details, cause)
        self.reason = reason


class SigningError(MultisigError):
    """The external signer did not produce a usable signature."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.SIGNING_FAILED,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, code, details, cause)


class DenialReason(str, Enum):
    """Why an external signer refused to sign."""
    DECLINED = "declined"
    LOCKED = "locked"
    NOT_AUTHORIZED = "not_authorized"
    NO_SIGNATURE = "no_signature"


class SigningDenied(SigningError):
    """Signer refused. Recoverable: retry with the same or another signer."""

    def __init__(self, identity: str, reason: DenialReason = DenialReason.DECLINED,
                 message: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message or f"Signer {identity} denied the request ({reason.value})",
                         ErrorCode.SIGNING_DENIED, details, cause)
        self.identity = identity
        self.reason = reason


class InvalidSignatureError(SigningError):
    """A returned signature does not verify against the transaction id."""

    def __init__(self, message: str = "Invalid signature",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.INVALID_SIGNATURE, details, cause)


class EnvelopeMismatchError(SigningError):
    """The signer returned an envelope for a different transaction."""

    def __init__(self, message: str = "Signed envelope does not match the session transaction",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.ENVELOPE_MISMATCH, details, cause)


class SubmissionError(MultisigError):
    """
    The ledger rejected the envelope. Terminal for this envelope.

    Carries the transaction id and the raw result codes for diagnostics.
    """

    def __init__(self, message: str, code: ErrorCode = ErrorCode.SUBMISSION_FAILED,
                 tx_id: Optional[str] = None, result_codes: Optional[Dict[str, Any]] = None,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        merged = dict(details or {})
        if tx_id:
            merged.setdefault("txId", tx_id)
        if result_codes:
            merged.setdefault("resultCodes", result_codes)
        super().__init__(message, code, merged, cause)
        self.tx_id = tx_id
        self.result_codes = result_codes or {}


class InsufficientAuthorization(SubmissionError):
    """Signature weight did not satisfy the ledger's current thresholds."""

    def __init__(self, message: str = ("Signatures present but their weight does not meet "
                                       "the account's current threshold on the ledger"), **kwargs):
        super().__init__(message, ErrorCode.INSUFFICIENT_AUTHORIZATION, **kwargs)


class RedundantSignatures(SubmissionError):
    """Too many or duplicate signatures."""

    def __init__(self, message: str = "Too many signatures or duplicate signatures", **kwargs):
        super().__init__(message, ErrorCode.REDUNDANT_SIGNATURES, **kwargs)


class StaleSequence(SubmissionError):
    """Another transaction from the source account confirmed first."""

    def __init__(self, message: str = ("Sequence number is stale; rebuild the session "
                                       "from a fresh account state"), **kwargs):
        super().__init__(message, ErrorCode.STALE_SEQUENCE, **kwargs)


class InsufficientFunds(SubmissionError):
    """Source account cannot cover the fee or an operation amount."""

    def __init__(self, message: str = "Insufficient balance to complete transaction", **kwargs):
        super().__init__(message, ErrorCode.INSUFFICIENT_FUNDS, **kwargs)


class SubmissionFailed(SubmissionError):
    """Unrecognized ledger failure; `raw` holds the original code."""

    def __init__(self, raw: str, message: Optional[str] = None, **kwargs):
        super().__init__(message or f"Submission failed: {raw}", ErrorCode.SUBMISSION_FAILED, **kwargs)
        self.raw = raw


class SessionStateError(MultisigError):
    """An operation was attempted in a session state that does not allow it."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.SESSION_STATE, details, cause)


class UnknownSessionError(MultisigError):
    """No session is registered under the given id."""

    def __init__(self, session_id: str):
        super().__init__(f"Unknown session: {session_id}", ErrorCode.UNKNOWN_SESSION,
                         {"sessionId": session_id})
        self.session_id = session_id


def error_from_result_codes(transaction_code: Optional[str],
                            operation_codes: Sequence[str] = (),
                            tx_id: Optional[str] = None) -> SubmissionError:
    """
    Translate ledger result codes into the matching submission error.

    Args:
        transaction_code: Transaction-level result code (e.g. "tx_bad_seq")
        operation_codes: Per-operation result codes
        tx_id: Transaction id, kept for later out-of-band lookup

    Returns:
        SubmissionError subclass for the codes
    """
    op_codes = list(operation_codes or [])
    raw_codes = {"transaction": transaction_code, "operations": op_codes}
    kwargs = {"tx_id": tx_id, "result_codes": raw_codes}

    if transaction_code == "tx_bad_auth":
        return InsufficientAuthorization(**kwargs)
    if transaction_code == "tx_bad_auth_extra":
        return RedundantSignatures(**kwargs)
    if transaction_code == "tx_bad_seq":
        return StaleSequence(**kwargs)
    if transaction_code == "tx_insufficient_balance" or "op_underfunded" in op_codes:
        return InsufficientFunds(**kwargs)

    raw = transaction_code or "unknown"
    if op_codes:
        raw = f"{raw} ({', '.join(op_codes)})"
    return SubmissionFailed(raw, **kwargs)


class ErrorHandler:
    """
    Utility class for categorizing coordination errors.
    """

    @staticmethod
    def requires_rebuild(error: Exception) -> bool:
        """
        Check if the session must be discarded and rebuilt from fresh state.

        Args:
            error: Exception to check

        Returns:
            True for stale-sequence rejections
        """
        return isinstance(error, StaleSequence)

    @staticmethod
    def is_terminal_for_envelope(error: Exception) -> bool:
        """
        Check if the envelope can no longer be used after this error.

        Signing denials and validation errors leave the envelope usable;
        every ledger rejection consumes it.
        """
        return isinstance(error, (SubmissionError, SimulationError))

    @staticmethod
    def is_retryable(error: Exception) -> bool:
        """
        Check if the caller may simply retry the same step.

        Only signing denials qualify; submissions are never retried blindly.
        """
        return isinstance(error, SigningDenied)


# Re-export key error types for convenience
__all__ = [
    "ErrorCode",
    "MultisigError",
    "ConfigurationError",
    "ValidationError",
    "EncodingError",
    "EnvelopeDecodeError",
    "AccountNotFoundError",
    "SimulationErrorReason",
    "SimulationError",
    "SigningError",
    "DenialReason",
    "SigningDenied",
    "InvalidSignatureError",
    "EnvelopeMismatchError",
    "SubmissionError",
    "InsufficientAuthorization",
    "RedundantSignatures",
    "StaleSequence",
    "InsufficientFunds",
    "SubmissionFailed",
    "SessionStateError",
    "UnknownSessionError",
    "error_from_result_codes",
    "ErrorHandler",
]
