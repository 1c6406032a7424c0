"""
Ledger access capability.

The coordinator never talks to the network itself. It consumes this
abstract interface, which a transport layer (RPC client, Horizon client,
test double) implements. Every method is a coroutine: each call is a
suspension point that lets other sessions make progress.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field

from ..account import AccountState
from ..tx.envelope import TransactionEnvelope
from ..tx.transaction import SimulationFootprint
from ..tx.values import TypedValue


class ResultCodes(BaseModel):
    """Transaction-level result code plus one code per operation."""
    transaction: Optional[str] = None
    operations: Tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True)

    def to_dict(self) -> Dict[str, Any]:
        return {"transaction": self.transaction, "operations": list(self.operations)}


class SimulationResult(BaseModel):
    """
    Outcome of a contract call dry-run.

    `error` holds the ledger's error code when the simulation itself failed
    (e.g. "contract_not_found"); `trapped` is set when the method ran and
    trapped.
    """
    footprint: Optional[SimulationFootprint] = None
    trapped: bool = False
    result_value: Optional[TypedValue] = None
    error: Optional[str] = None
    min_resource_fee: int = Field(default=0, ge=0)

    model_config = ConfigDict(frozen=True)


class SubmitStatus(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"


class SubmitResponse(BaseModel):
    """Immediate answer to a submission."""
    tx_id: str
    status: SubmitStatus
    ledger_sequence: Optional[int] = None
    result_codes: Optional[ResultCodes] = None
    return_value: Optional[TypedValue] = None

    model_config = ConfigDict(frozen=True)


class PollStatus(str, Enum):
    NOT_FOUND = "not_found"
    SUCCESS = "success"
    FAILED = "failed"


class PollResponse(BaseModel):
    """Answer to one outcome poll. NOT_FOUND means still pending."""
    status: PollStatus
    ledger_sequence: Optional[int] = None
    result_codes: Optional[ResultCodes] = None
    return_value: Optional[TypedValue] = None

    model_config = ConfigDict(frozen=True)


class LedgerAccess(ABC):
    """
    Abstract ledger access used by the coordinator.
    """

    @abstractmethod
    async def get_account(self, account_id: str) -> AccountState:
        """
        Fetch a fresh account snapshot.

        Raises:
            AccountNotFoundError: If the account does not exist
        """

    @abstractmethod
    async def simulate(self, envelope: TransactionEnvelope) -> SimulationResult:
        """Dry-run an unsigned envelope containing a contract call."""

    @abstractmethod
    async def submit(self, envelope: TransactionEnvelope) -> SubmitResponse:
        """Submit a signed envelope once."""

    @abstractmethod
    async def poll_outcome(self, tx_id: str) -> PollResponse:
        """Look up the final outcome of a submitted transaction."""

    async def get_base_fee(self) -> Optional[int]:
        """Current network base fee per operation, if the transport knows it."""
        return None


__all__ = [
    "ResultCodes",
    "SimulationResult",
    "SubmitStatus",
    "SubmitResponse",
    "PollStatus",
    "PollResponse",
    "LedgerAccess",
]
