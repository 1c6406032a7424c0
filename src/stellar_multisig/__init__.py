"""
Stellar Multisig Coordinator

Coordinates weighted multi-signature authorization of ledger transactions:
threshold resolution, deterministic envelope building, contract call
simulation, incremental signature collection and bounded submission
polling. Ledger access and signing are injected capabilities.
"""

# Error model and identity encoding
from .runtime.errors import *
from .runtime.strkey import (
    StrKeyError, encode_account_id, decode_account_id,
    encode_contract_id, decode_contract_id,
    is_valid_account_id, is_valid_contract_id,
)

# Configuration and account snapshots
from .config import CoordinatorConfig, NETWORKS, TESTNET_PASSPHRASE, PUBLIC_PASSPHRASE, MIN_BASE_FEE
from .account import AccountSigner, Thresholds, AccountState

# Transaction models and building
from .tx import *
from .tx.values import address, i128, u32, string, boolean, bytes_value
from .tx.builder import TransactionEnvelopeBuilder
from .tx.contract import ContractCallAdapter
from .tx.thresholds import ThresholdResolver, ThresholdTier, resolve_threshold, required_weight
from .operations import build_multisig_setup_operations

# Capabilities
from .ledger import *
from .signers import *
from .crypto import Ed25519Keypair

# Coordination
from .coordinator import *
from .facade import MultisigCoordinator

from .utils.amounts import to_stroops, from_stroops

__version__ = "0.1.0"
__all__ = [
    # Facade
    "MultisigCoordinator",

    # Configuration
    "CoordinatorConfig",
    "NETWORKS",
    "TESTNET_PASSPHRASE",
    "PUBLIC_PASSPHRASE",
    "MIN_BASE_FEE",

    # Account state
    "AccountSigner",
    "Thresholds",
    "AccountState",

    # Transactions
    "TypedValue",
    "AddressValue",
    "I128Value",
    "U32Value",
    "StringValue",
    "BoolValue",
    "BytesValue",
    "parse_typed_value",
    "address",
    "i128",
    "u32",
    "string",
    "boolean",
    "bytes_value",
    "OperationClass",
    "Asset",
    "Operation",
    "Payment",
    "CreateAccount",
    "SetSigner",
    "SetThresholds",
    "ContractInvoke",
    "TimeBounds",
    "SimulationFootprint",
    "DecoratedSignature",
    "Transaction",
    "TransactionEnvelope",
    "TransactionEnvelopeBuilder",
    "ContractCallAdapter",
    "ThresholdResolver",
    "ThresholdTier",
    "resolve_threshold",
    "required_weight",
    "build_multisig_setup_operations",

    # Capabilities
    "LedgerAccess",
    "ResultCodes",
    "SimulationResult",
    "SubmitStatus",
    "SubmitResponse",
    "PollStatus",
    "PollResponse",
    "ExternalSigner",
    "KeypairSigner",
    "SignatureSet",
    "Ed25519Keypair",

    # Coordination
    "Success",
    "Failed",
    "TimedOut",
    "Cancelled",
    "Outcome",
    "SessionStatus",
    "CoordinationSession",
    "signature_report",
    "SignatureCollector",
    "SubmissionCoordinator",

    # Errors
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

    # Identities and amounts
    "StrKeyError",
    "encode_account_id",
    "decode_account_id",
    "encode_contract_id",
    "decode_contract_id",
    "is_valid_account_id",
    "is_valid_contract_id",
    "to_stroops",
    "from_stroops",
]
