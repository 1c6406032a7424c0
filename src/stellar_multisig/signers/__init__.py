"""
Signing: the external signer capability, a local key signer and the
signature set carried by a coordination session.
"""

from .signer import ExternalSigner
from .keypair import KeypairSigner
from .signature_set import SignatureSet

__all__ = [
    "ExternalSigner",
    "KeypairSigner",
    "SignatureSet",
]
