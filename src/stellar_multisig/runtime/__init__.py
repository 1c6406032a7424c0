"""
Runtime support: error model and identity encoding.
"""

from .errors import *
from .strkey import (
    StrKeyError, encode_account_id, decode_account_id,
    encode_contract_id, decode_contract_id,
    is_valid_account_id, is_valid_contract_id,
)
