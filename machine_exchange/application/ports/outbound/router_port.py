"""
ExchangeRouterPort - Interface for the external exchange router.

Price discovery and order matching are delegated entirely to the router.
The gateway only quotes, sets a minimum output, and swaps.
"""
from abc import ABC, abstractmethod
from typing import List, Sequence


class ExchangeRouterPort(ABC):
    """
    Port interface for swap execution.

    The router is untrusted: it may fail, return unexpected amounts, or call
    back into the gateway before a swap returns.
    """

    @property
    @abstractmethod
    def address(self) -> str:
        """Router address (spender for token approvals)."""
        pass

    @abstractmethod
    async def native_wrapper_address(self) -> str:
        """
        Get the wrapped native currency address.

        Returns:
            Address used as the intermediate currency in swap paths
        """
        pass

    @abstractmethod
    async def get_amounts_out(self, amount_in: int, path: Sequence[str]) -> List[int]:
        """
        Quote a swap along path.

        Args:
            amount_in: Input amount of path[0]
            path: Token addresses from input to output

        Returns:
            Amounts for every hop; the last entry is the output amount
        """
        pass

    @abstractmethod
    async def swap_exact_input_for_output(
        self,
        amount_in: int,
        amount_out_min: int,
        path: Sequence[str],
        recipient: str,
        deadline: int,
    ) -> int:
        """
        Swap an exact token input, pulled via allowance, for at least amount_out_min.

        Args:
            amount_in: Exact input amount of path[0]
            amount_out_min: Minimum acceptable output of path[-1]
            path: Token addresses from input to output
            recipient: Receiver of the output
            deadline: Unix timestamp after which the swap must revert

        Returns:
            Output amount delivered to recipient
        """
        pass

    @abstractmethod
    async def swap_exact_native_for_output(
        self,
        amount_out_min: int,
        path: Sequence[str],
        recipient: str,
        deadline: int,
        value: int,
    ) -> int:
        """
        Swap an exact native currency input for at least amount_out_min.

        Args:
            amount_out_min: Minimum acceptable output of path[-1]
            path: Token addresses, starting with the native wrapper
            recipient: Receiver of the output
            deadline: Unix timestamp after which the swap must revert
            value: Native currency attached to the call

        Returns:
            Output amount delivered to recipient
        """
        pass
