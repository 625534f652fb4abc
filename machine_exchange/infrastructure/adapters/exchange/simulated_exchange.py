"""
Simulated exchange adapters.

In-process stand-ins for the base token and the exchange router, for
paper runs and tests. Swaps fill at fixed rates from the router's own
reserves; no price discovery or matching is modelled.

Each swap validates everything (deadline, quote, minimum output,
allowance, balances) before moving any balance, so a failed swap leaves
the ledger untouched.
"""
from typing import Awaitable, Callable, Dict, List, Optional, Sequence, Tuple

from machine_exchange.application.ports.outbound.router_port import ExchangeRouterPort
from machine_exchange.application.ports.outbound.time_provider_port import TimeProviderPort
from machine_exchange.application.ports.outbound.token_port import TokenPort

# Ledger key for the native currency
NATIVE = "native"


class SimulatedLedger:
    """Token balances and allowances shared by the simulated adapters."""

    def __init__(self):
        # Dict[token, Dict[holder, amount]]
        self._balances: Dict[str, Dict[str, int]] = {}
        # Dict[(token, owner, spender), amount]
        self._allowances: Dict[Tuple[str, str, str], int] = {}

    def balance(self, token: str, holder: str) -> int:
        return self._balances.get(token, {}).get(holder, 0)

    def mint(self, token: str, holder: str, amount: int) -> None:
        """Credit holder out of thin air (test setup)."""
        if amount < 0:
            raise ValueError("mint amount must be non-negative")
        holders = self._balances.setdefault(token, {})
        holders[holder] = holders.get(holder, 0) + amount

    def transfer(self, token: str, sender: str, recipient: str, amount: int) -> None:
        """Move amount of token from sender to recipient."""
        if amount < 0:
            raise ValueError("transfer amount must be non-negative")
        if self.balance(token, sender) < amount:
            raise ValueError(f"insufficient {token} balance for {sender}")
        holders = self._balances.setdefault(token, {})
        holders[sender] = holders.get(sender, 0) - amount
        holders[recipient] = holders.get(recipient, 0) + amount

    def allowance(self, token: str, owner: str, spender: str) -> int:
        return self._allowances.get((token, owner, spender), 0)

    def set_allowance(self, token: str, owner: str, spender: str, amount: int) -> None:
        self._allowances[(token, owner, spender)] = amount


class SimulatedTokenAdapter(TokenPort):
    """Base token adapter acting as the gateway account."""

    def __init__(self, ledger: SimulatedLedger, token_address: str, account: str):
        """
        Args:
            ledger: Shared ledger
            token_address: Address of the simulated token
            account: Account the adapter acts for (the gateway address)
        """
        self.ledger = ledger
        self._address = token_address
        self.account = account

    @property
    def address(self) -> str:
        return self._address

    async def approve(self, spender: str, amount: int) -> bool:
        self.ledger.set_allowance(self._address, self.account, spender, amount)
        return True

    async def transfer(self, recipient: str, amount: int) -> bool:
        self.ledger.transfer(self._address, self.account, recipient, amount)
        return True

    async def balance_of(self, holder: str) -> int:
        return self.ledger.balance(self._address, holder)


class SimulatedRouterAdapter(ExchangeRouterPort):
    """
    Fixed-rate router over the shared ledger.

    Rates are (numerator, denominator) per hop: output = input * num // den.
    The router pays outputs from its own ledger balance.

    on_swap, when set, is awaited at the start of every swap, before its checks;
    tests use it to call back into the gateway mid-swap.
    """

    def __init__(
        self,
        ledger: SimulatedLedger,
        address: str,
        native_wrapper: str,
        account: str,
        time_provider: TimeProviderPort,
        rates: Optional[Dict[Tuple[str, str], Tuple[int, int]]] = None,
    ):
        """
        Args:
            ledger: Shared ledger
            address: Router address
            native_wrapper: Wrapped native currency address
            account: Account swapping through the router (the gateway address)
            time_provider: Clock for deadline checks
            rates: Exchange rate per (token_in, token_out) hop
        """
        self.ledger = ledger
        self._address = address
        self.native_wrapper = native_wrapper
        self.account = account
        self.time_provider = time_provider
        self.rates: Dict[Tuple[str, str], Tuple[int, int]] = dict(rates or {})
        self.on_swap: Optional[Callable[[], Awaitable[None]]] = None
        self.swap_count = 0

    @property
    def address(self) -> str:
        return self._address

    def set_rate(self, token_in: str, token_out: str, numerator: int, denominator: int) -> None:
        if denominator <= 0 or numerator < 0:
            raise ValueError("rate must be non-negative with a positive denominator")
        self.rates[(token_in, token_out)] = (numerator, denominator)

    async def native_wrapper_address(self) -> str:
        return self.native_wrapper

    async def get_amounts_out(self, amount_in: int, path: Sequence[str]) -> List[int]:
        if len(path) < 2:
            raise ValueError("INVALID_PATH")
        amounts = [amount_in]
        for token_in, token_out in zip(path, path[1:]):
            rate = self.rates.get((token_in, token_out))
            if rate is None:
                raise ValueError(f"no liquidity for {token_in} -> {token_out}")
            numerator, denominator = rate
            amounts.append(amounts[-1] * numerator // denominator)
        return amounts

    async def swap_exact_input_for_output(
        self,
        amount_in: int,
        amount_out_min: int,
        path: Sequence[str],
        recipient: str,
        deadline: int,
    ) -> int:
        await self._notify()
        self._check_deadline(deadline)
        amount_out = (await self.get_amounts_out(amount_in, path))[-1]
        if amount_out < amount_out_min:
            raise RuntimeError("INSUFFICIENT_OUTPUT_AMOUNT")

        token_in, token_out = path[0], path[-1]
        allowance = self.ledger.allowance(token_in, self.account, self._address)
        if allowance < amount_in:
            raise RuntimeError("TRANSFER_FROM_FAILED: allowance too low")
        if self.ledger.balance(token_in, self.account) < amount_in:
            raise RuntimeError("TRANSFER_FROM_FAILED: balance too low")
        self._check_reserve(token_out, amount_out)

        self.ledger.set_allowance(token_in, self.account, self._address, allowance - amount_in)
        self.ledger.transfer(token_in, self.account, self._address, amount_in)
        self.ledger.transfer(token_out, self._address, recipient, amount_out)
        self.swap_count += 1
        return amount_out

    async def swap_exact_native_for_output(
        self,
        amount_out_min: int,
        path: Sequence[str],
        recipient: str,
        deadline: int,
        value: int,
    ) -> int:
        await self._notify()
        self._check_deadline(deadline)
        if not path or path[0] != self.native_wrapper:
            raise RuntimeError("INVALID_PATH")
        amount_out = (await self.get_amounts_out(value, path))[-1]
        if amount_out < amount_out_min:
            raise RuntimeError("INSUFFICIENT_OUTPUT_AMOUNT")
        if self.ledger.balance(NATIVE, self.account) < value:
            raise RuntimeError("insufficient native value")
        token_out = path[-1]
        self._check_reserve(token_out, amount_out)

        self.ledger.transfer(NATIVE, self.account, self._address, value)
        self.ledger.transfer(token_out, self._address, recipient, amount_out)
        self.swap_count += 1
        return amount_out

    def _check_deadline(self, deadline: int) -> None:
        if self.time_provider.timestamp() > deadline:
            raise RuntimeError("EXPIRED")

    def _check_reserve(self, token: str, amount: int) -> None:
        if self.ledger.balance(token, self._address) < amount:
            raise RuntimeError(f"insufficient {token} reserve")

    async def _notify(self) -> None:
        if self.on_swap is not None:
            await self.on_swap()
