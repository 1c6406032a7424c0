"""
External signer capability.

Signing happens outside the coordinator: a wallet extension, a hardware
device or a remote co-signer. The coordinator hands over the current
envelope encoding and the identity it wants a signature from, and gets
back an envelope that carries every prior signature plus the new one.
"""

from __future__ import annotations
from abc import ABC, abstractmethod


class ExternalSigner(ABC):
    """
    Base external signer interface.
    """

    @abstractmethod
    async def sign(self, encoding: bytes, identity: str, network_passphrase: str) -> bytes:
        """
        Sign an envelope as `identity`.

        Args:
            encoding: Current envelope bytes, including prior signatures
            identity: Account id ('G...') whose signature is requested
            network_passphrase: Network the transaction id is bound to

        Returns:
            Envelope bytes carrying all prior signatures plus the new one

        Raises:
            SigningDenied: If the signer declines, is locked, or does not
                hold the requested identity
        """


__all__ = ["ExternalSigner"]
