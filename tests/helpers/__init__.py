from .factories import (
    FIXED_NOW, fixed_clock, mk_keypair, mk_account_id, mk_contract_id, mk_account_state,
    mk_payment, mk_footprint,
)
from .fakes import FakeLedger, RecordingSleeper, ScriptedSigner

__all__ = [
    "FIXED_NOW",
    "fixed_clock",
    "mk_keypair",
    "mk_account_id",
    "mk_contract_id",
    "mk_account_state",
    "mk_payment",
    "mk_footprint",
    "FakeLedger",
    "RecordingSleeper",
    "ScriptedSigner",
]
