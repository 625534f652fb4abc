"""
TokenPort - Interface for the base currency token.

The adapter acts as the gateway's own account: approvals and transfers
are made from the gateway's balance.
"""
from abc import ABC, abstractmethod


class TokenPort(ABC):
    """
    Port interface for base token operations.

    All methods are remote calls into untrusted code. Implementations may
    raise any exception; the gateway treats that as an adapter failure.
    """

    @property
    @abstractmethod
    def address(self) -> str:
        """Token address."""
        pass

    @abstractmethod
    async def approve(self, spender: str, amount: int) -> bool:
        """
        Set the spending allowance of spender over the gateway's balance.

        Args:
            spender: Address allowed to spend (the router)
            amount: Exact allowance (replaces any previous allowance)

        Returns:
            True if the approval was accepted
        """
        pass

    @abstractmethod
    async def transfer(self, recipient: str, amount: int) -> bool:
        """
        Transfer tokens from the gateway to recipient.

        Args:
            recipient: Receiving address
            amount: Token units to transfer

        Returns:
            True if the transfer succeeded
        """
        pass

    @abstractmethod
    async def balance_of(self, holder: str) -> int:
        """
        Get the token balance of holder.

        Args:
            holder: Address to query

        Returns:
            Balance in token units
        """
        pass
