"""
Contract call adapter.

Specializes the envelope builder for a single contract invocation. Every
call is simulated before an envelope is returned: the simulation proves
the call does not trap and yields the resource footprint and
authorization entries, which are folded into the final encoding. No
envelope is ever returned from a failed simulation.
"""

from __future__ import annotations
import logging
from typing import Any, Dict, Optional, Sequence, Tuple, Union

import pydantic

from ..account import AccountState
from ..config import CoordinatorConfig
from ..runtime.errors import ErrorCode, SimulationError, SimulationErrorReason, ValidationError
from .builder import TransactionEnvelopeBuilder
from .envelope import TransactionEnvelope
from .operations import ContractInvoke
from .transaction import SimulationFootprint
from .validation import collect_issues, raise_for_issues
from .values import TypedValue, address, i128, parse_typed_value

logger = logging.getLogger(__name__)


ParamInput = Union[TypedValue, Dict[str, Any]]

TRANSFER_METHOD = "transfer"

# Ledger error codes seen during simulation, by failure category
SIMULATION_ERROR_REASONS: Dict[str, SimulationErrorReason] = {
    "contract_not_found": SimulationErrorReason.CONTRACT_NOT_FOUND,
    "-32001": SimulationErrorReason.CONTRACT_NOT_FOUND,
    "op_invoke_host_function_trapped": SimulationErrorReason.METHOD_TRAPPED,
    "op_invoke_host_function_resource_limit_exceeded": SimulationErrorReason.RESOURCE_LIMIT_EXCEEDED,
    "resource_limit_exceeded": SimulationErrorReason.RESOURCE_LIMIT_EXCEEDED,
    "op_invoke_host_function_insufficient_balance": SimulationErrorReason.INSUFFICIENT_BALANCE,
    "tx_insufficient_balance": SimulationErrorReason.INSUFFICIENT_BALANCE,
    "insufficient_balance": SimulationErrorReason.INSUFFICIENT_BALANCE,
}


def simulation_reason(error_code: Optional[str]) -> SimulationErrorReason:
    """Failure category for a simulation error code; unknown codes map to UNKNOWN."""
    if error_code is None:
        return SimulationErrorReason.UNKNOWN
    return SIMULATION_ERROR_REASONS.get(str(error_code), SimulationErrorReason.UNKNOWN)


def make_invoke(contract_id: str, method: str, params: Sequence[ParamInput] = ()) -> ContractInvoke:
    """
    Create an unsimulated ContractInvoke operation.

    Params may be TypedValue instances or {"type": ..., "value": ...}
    mappings; the wire type is always explicit.

    Raises:
        ValidationError: If the method name or a parameter is malformed
    """
    try:
        typed = tuple(parse_typed_value(p) for p in params)
        return ContractInvoke(contract_id=contract_id, method=method, params=typed)
    except pydantic.ValidationError as e:
        issues = [f"{'.'.join(str(p) for p in err['loc']) or 'value'}: {err['msg']}" for err in e.errors()]
        raise ValidationError("Invalid contract call", issues,
                              code=ErrorCode.INVALID_PARAMETER, cause=e) from e


class ContractCallAdapter:
    """
    Builds simulated single-invocation envelopes.
    """

    def __init__(self, ledger, builder: TransactionEnvelopeBuilder,
                 config: Optional[CoordinatorConfig] = None):
        """
        Initialize adapter.

        Args:
            ledger: LedgerAccess implementation used for account lookups and simulation
            builder: Envelope builder bound to the target network
            config: Fee policy and default timeout
        """
        self._ledger = ledger
        self._builder = builder
        self._config = config or CoordinatorConfig(network_passphrase=builder.network_passphrase)

    async def build_call(self,
                         source_account: str,
                         contract_id: str,
                         method: str,
                         params: Sequence[ParamInput] = (),
                         fee: Optional[int] = None,
                         timeout_seconds: Optional[int] = None
                         ) -> Tuple[TransactionEnvelope, SimulationFootprint]:
        """
        Build a simulated contract call envelope for `source_account`.

        Args:
            source_account: Account paying for and authorizing the call
            contract_id: Contract id ('C...')
            method: Method name
            params: Explicitly typed parameters
            fee: Inclusion fee in stroops; defaults to the recommended fee
            timeout_seconds: Validity window; defaults to the configured timeout

        Returns:
            Tuple of (unsigned envelope, simulation footprint)

        Raises:
            ValidationError: If any input is malformed
            AccountNotFoundError: If the source account does not exist
            SimulationError: If the simulation fails
        """
        invoke = self._checked_invoke(source_account, contract_id, method, params, timeout_seconds)
        account_state = await self._ledger.get_account(source_account)
        return await self._prepare(account_state, invoke, fee, timeout_seconds)

    async def prepare_call(self,
                           account_state: AccountState,
                           contract_id: str,
                           method: str,
                           params: Sequence[ParamInput] = (),
                           fee: Optional[int] = None,
                           timeout_seconds: Optional[int] = None
                           ) -> Tuple[TransactionEnvelope, SimulationFootprint]:
        """Same as build_call, against an account snapshot the caller already holds."""
        invoke = self._checked_invoke(account_state.account_id, contract_id, method, params,
                                      timeout_seconds)
        return await self._prepare(account_state, invoke, fee, timeout_seconds)

    async def build_transfer_call(self, source_account: str, contract_id: str,
                                  from_address: str, to_address: str, amount: int,
                                  fee: Optional[int] = None
                                  ) -> Tuple[TransactionEnvelope, SimulationFootprint]:
        """Token transfer: transfer(from: Address, to: Address, amount: i128)."""
        params = [address(from_address), address(to_address), i128(amount)]
        return await self.build_call(source_account, contract_id, TRANSFER_METHOD, params, fee)

    async def read_contract(self, source_account: str, contract_id: str, method: str,
                            params: Sequence[ParamInput] = ()) -> Optional[TypedValue]:
        """
        Simulate a read-only call and return its result.

        Nothing is signed or submitted.

        Raises:
            SimulationError: If the simulation fails
        """
        invoke = self._checked_invoke(source_account, contract_id, method, params)
        account_state = await self._ledger.get_account(source_account)
        draft = self._draft(account_state, invoke, None, None)
        result = await self._simulate(draft)
        logger.debug(f"Read {contract_id}.{method} -> {result.result_value!r}")
        return result.result_value

    def _timeout(self, timeout_seconds: Optional[int]) -> int:
        return timeout_seconds if timeout_seconds is not None else self._config.default_timeout_seconds

    def _checked_invoke(self, source_account: str, contract_id: str, method: str,
                        params: Sequence[ParamInput],
                        timeout_seconds: Optional[int] = None) -> ContractInvoke:
        invoke = make_invoke(contract_id, method, params)
        issues = collect_issues(source_account, [invoke], self._builder.min_fee, self._builder.min_fee,
                                timeout_seconds)
        raise_for_issues(issues, "Invalid contract call")
        return invoke

    def _draft(self, account_state: AccountState, invoke: ContractInvoke,
               fee: Optional[int], timeout_seconds: Optional[int]) -> TransactionEnvelope:
        return self._builder.build(
            source_account=account_state.account_id,
            sequence=account_state.next_sequence,
            operations=[invoke],
            fee=fee if fee is not None else self._config.fee_for(1),
            timeout_seconds=self._timeout(timeout_seconds),
        )

    async def _simulate(self, draft: TransactionEnvelope):
        result = await self._ledger.simulate(draft)
        if result.error is not None:
            reason = simulation_reason(result.error)
            logger.info(f"Simulation of {draft.id_hex} failed: {result.error} ({reason.value})")
            raise SimulationError(reason, details={"code": result.error})
        if result.trapped:
            logger.info(f"Simulation of {draft.id_hex} trapped")
            raise SimulationError(SimulationErrorReason.METHOD_TRAPPED)
        return result

    async def _prepare(self, account_state: AccountState, invoke: ContractInvoke,
                       fee: Optional[int], timeout_seconds: Optional[int]
                       ) -> Tuple[TransactionEnvelope, SimulationFootprint]:
        if fee is None:
            fee = self._config.fee_for(1, await self._ledger.get_base_fee())
        draft = self._draft(account_state, invoke, fee, timeout_seconds)
        result = await self._simulate(draft)
        footprint = result.footprint
        if footprint is None:
            raise SimulationError(SimulationErrorReason.UNKNOWN, "Simulation returned no footprint")

        resource_fee = max(footprint.resource_fee, result.min_resource_fee)
        if resource_fee != footprint.resource_fee:
            footprint = footprint.model_copy(update={"resource_fee": resource_fee})

        authorized = invoke.model_copy(update={"auth": footprint.auth})
        envelope = self._builder.build(
            source_account=account_state.account_id,
            sequence=draft.sequence,
            operations=[authorized],
            fee=fee + resource_fee,
            timeout_seconds=self._timeout(timeout_seconds),
            time_bounds=draft.time_bounds,
            soroban_data=footprint.without_auth(),
        )
        logger.debug(f"Prepared contract call {envelope.id_hex}: {invoke.contract_id}.{invoke.method} "
                     f"resource_fee={resource_fee}")
        return envelope, footprint


__all__ = [
    "SIMULATION_ERROR_REASONS",
    "TRANSFER_METHOD",
    "simulation_reason",
    "make_invoke",
    "ContractCallAdapter",
]
