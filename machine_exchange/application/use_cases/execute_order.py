"""
ExecuteOrderUseCase - Agent-gated order execution against the router.

Each flow runs in three phases:
1. checks: caller authorization, fee arithmetic, order parameters
2. effects: local state changes (order flows have none)
3. interactions: token and router calls

Nothing in GatewayState is written once the interaction phase starts, so a
router that calls back into the gateway mid-swap sees the same, still valid
registry and cannot skip authorization.
"""
import logging
from typing import Any, Awaitable, Callable, Sequence

from machine_exchange.application.ports.outbound.lock_port import LockPort, SELL_FLOW_LOCK
from machine_exchange.application.ports.outbound.router_port import ExchangeRouterPort
from machine_exchange.application.ports.outbound.time_provider_port import TimeProviderPort
from machine_exchange.application.ports.outbound.token_port import TokenPort
from machine_exchange.domain.entities.agent import Agent, OrderDirection
from machine_exchange.domain.entities.gateway import GatewayState
from machine_exchange.domain.entities.order import OrderReceipt, OrderRequest
from machine_exchange.domain.exceptions import (
    DomainError,
    InvalidOrderError,
    ReentrantCallError,
)
from machine_exchange.domain.services.agent_registry import AgentRegistry
from machine_exchange.domain.services.fee_calculator import FeeCalculator, FeeResult
from machine_exchange.domain.value_objects.units import Address, UINT256_MAX, checked_add
from machine_exchange.exceptions import ExternalAdapterFailure, GatewayError

logger = logging.getLogger(__name__)


class ExecuteOrderUseCase:
    """
    Use case for executing orders submitted by registered machines.

    Buy (base to target): approve exactly the net amount to the router and
    swap it for the target currency, delivered straight to the user.

    Sell (target to base): swap the net native amount for base tokens
    received by the gateway, then forward the residual to the user. The sell
    flow holds a lock across its external calls so it cannot be re-entered.
    """

    def __init__(
        self,
        registry: AgentRegistry,
        fee_calculator: FeeCalculator,
        token: TokenPort,
        router: ExchangeRouterPort,
        lock: LockPort,
        time_provider: TimeProviderPort,
        deadline_seconds: int,
        default_tolerance: int,
    ):
        """
        Args:
            registry: Machine registry used for authorization
            fee_calculator: Fee arithmetic
            token: Base token port (acts as the gateway account)
            router: Exchange router port
            lock: Lock port guarding the sell flow
            time_provider: Clock for swap deadlines
            deadline_seconds: Default deadline window for swaps
            default_tolerance: Slippage tolerance used when a sell order names none

        Raises:
            ValueError: If the defaults are out of range
        """
        if deadline_seconds <= 0:
            raise ValueError("deadline_seconds must be positive")
        if not fee_calculator.is_valid_fee(default_tolerance):
            raise ValueError(
                f"default_tolerance must be in [0, {fee_calculator.granularity})"
            )
        self.registry = registry
        self.fee_calculator = fee_calculator
        self.token = token
        self.router = router
        self.lock = lock
        self.time_provider = time_provider
        self.deadline_seconds = deadline_seconds
        self.default_tolerance = default_tolerance

    # --- Buy Flow ---

    async def order_base_to_target(
        self,
        state: GatewayState,
        caller: Address,
        request: OrderRequest,
    ) -> OrderReceipt:
        """
        Execute a base-to-target order for request.user.

        Args:
            state: Gateway state
            caller: Authenticated caller identity
            request: Buy order request

        Returns:
            OrderReceipt with amounts and swap parameters

        Raises:
            UnauthorizedAgentError: If caller is not a registered machine
            ArithmeticOverflowError: If fee or deadline arithmetic overflows
            InvalidOrderError: If order parameters are invalid
            ExternalAdapterFailure: If the token or router fails
        """
        if request.direction != OrderDirection.BASE_TO_TARGET:
            raise InvalidOrderError("expected a base_to_target request")

        # --- Checks ---
        agent = self._authorize(state, caller)
        fees = self._calculate_fees(agent.fee_for(request.direction), request)
        deadline = self._deadline(request)

        # --- Interactions ---
        wrapper = await self._call("router", "native_wrapper_address", self.router.native_wrapper_address)
        path = (state.base_token, wrapper)
        quoted_out = await self._quote(fees.net_amount, path)
        amount_out_min = self.fee_calculator.min_amount_out(quoted_out, request.tolerance)

        approved = await self._call("token", "approve", self.token.approve, state.router, fees.net_amount)
        if approved is not True:
            raise ExternalAdapterFailure("token", "approve", "approval was not accepted")

        amount_out = await self._call(
            "router",
            "swap_exact_input_for_output",
            self.router.swap_exact_input_for_output,
            fees.net_amount,
            amount_out_min,
            list(path),
            request.user,
            deadline,
        )
        amount_out = self._require_amount("router", "swap_exact_input_for_output", amount_out)

        receipt = OrderReceipt(
            direction=request.direction,
            agent=agent.identity,
            user=request.user,
            amount=fees.gross_amount,
            fee=fees.fee,
            net_amount=fees.net_amount,
            path=path,
            quoted_out=quoted_out,
            amount_out_min=amount_out_min,
            amount_out=amount_out,
            deadline=deadline,
        )
        logger.info(
            f"Buy order executed by {agent.identity} for {request.user}: "
            f"amount={fees.gross_amount}, fee={fees.fee}, net={fees.net_amount}, "
            f"amount_out={amount_out} (min {amount_out_min})"
        )
        return receipt

    # --- Sell Flow ---

    async def order_target_to_base(
        self,
        state: GatewayState,
        caller: Address,
        request: OrderRequest,
    ) -> OrderReceipt:
        """
        Execute a target-to-base order for request.user.

        The residual forwarded to the user is the gateway's base token
        balance increase across the swap, measured while the sell lock is
        held so no nested sell can inflate it.

        Raises:
            UnauthorizedAgentError: If caller is not a registered machine
            ArithmeticOverflowError: If fee or deadline arithmetic overflows
            InvalidOrderError: If order parameters are invalid
            ReentrantCallError: If a sell is already in progress
            ExternalAdapterFailure: If the token or router fails
        """
        if request.direction != OrderDirection.TARGET_TO_BASE:
            raise InvalidOrderError("expected a target_to_base request")

        # --- Checks ---
        agent = self._authorize(state, caller)
        fees = self._calculate_fees(agent.fee_for(request.direction), request)
        deadline = self._deadline(request)

        async with self.lock.lock(SELL_FLOW_LOCK) as acquired:
            if not acquired:
                logger.warning(f"Rejected reentrant sell order from {caller}")
                raise ReentrantCallError("order_target_to_base")

            # --- Interactions ---
            wrapper = await self._call("router", "native_wrapper_address", self.router.native_wrapper_address)
            path = (wrapper, state.base_token)
            quoted_out = await self._quote(fees.net_amount, path)
            amount_out_min = self.fee_calculator.min_amount_out(quoted_out, request.tolerance)

            balance_before = await self._balance(state.address)
            reported_out = await self._call(
                "router",
                "swap_exact_native_for_output",
                self.router.swap_exact_native_for_output,
                amount_out_min,
                list(path),
                state.address,
                deadline,
                fees.net_amount,
            )
            balance_after = await self._balance(state.address)

            if balance_after < balance_before:
                raise ExternalAdapterFailure(
                    "router",
                    "swap_exact_native_for_output",
                    f"gateway balance decreased from {balance_before} to {balance_after}",
                )
            residual = balance_after - balance_before
            if residual < amount_out_min:
                raise ExternalAdapterFailure(
                    "router",
                    "swap_exact_native_for_output",
                    f"received {residual}, below minimum {amount_out_min}",
                )
            if reported_out != residual:
                logger.warning(
                    f"Router reported {reported_out} but gateway received {residual}; "
                    f"forwarding received amount"
                )

            transferred = await self._call("token", "transfer", self.token.transfer, request.user, residual)
            if transferred is not True:
                raise ExternalAdapterFailure("token", "transfer", "transfer was not accepted")

        receipt = OrderReceipt(
            direction=request.direction,
            agent=agent.identity,
            user=request.user,
            amount=fees.gross_amount,
            fee=fees.fee,
            net_amount=fees.net_amount,
            path=path,
            quoted_out=quoted_out,
            amount_out_min=amount_out_min,
            amount_out=residual,
            deadline=deadline,
        )
        logger.info(
            f"Sell order executed by {agent.identity} for {request.user}: "
            f"amount={fees.gross_amount}, fee={fees.fee}, net={fees.net_amount}, "
            f"forwarded={residual} (min {amount_out_min})"
        )
        return receipt

    # --- Checks ---

    def _authorize(self, state: GatewayState, caller: Address) -> Agent:
        """Resolve caller to a registered machine or raise UnauthorizedAgentError."""
        authorization = self.registry.authorize(state, caller)
        if not authorization:
            logger.warning(f"Rejected order from unregistered identity {caller}")
        return authorization.unwrap()

    def _calculate_fees(self, fee: int, request: OrderRequest) -> FeeResult:
        """Apply the machine fee and validate the resulting order."""
        if not self.fee_calculator.is_valid_fee(request.tolerance):
            raise InvalidOrderError(
                f"tolerance {request.tolerance} must be below {self.fee_calculator.granularity}"
            )
        fees = self.fee_calculator.calculate(request.amount, fee)
        if fees.net_amount == 0:
            raise InvalidOrderError("net amount after fee is zero")
        return fees

    def _deadline(self, request: OrderRequest) -> int:
        """Unix timestamp after which the router must reject the swap."""
        window = request.deadline_seconds or self.deadline_seconds
        return checked_add(self.time_provider.timestamp(), window)

    # --- Interactions ---

    async def _call(
        self,
        adapter: str,
        operation: str,
        method: Callable[..., Awaitable[Any]],
        *args: Any,
    ) -> Any:
        """
        Await an adapter method, wrapping foreign errors in ExternalAdapterFailure.

        Domain and gateway errors (e.g. from a reentrant call) pass through.
        """
        try:
            return await method(*args)
        except (DomainError, GatewayError):
            raise
        except Exception as e:
            logger.error(f"{adapter}.{operation} failed: {e}")
            raise ExternalAdapterFailure(adapter, operation, str(e)) from e

    async def _quote(self, amount_in: int, path: Sequence[str]) -> int:
        """Router quote for the output of path[-1]."""
        amounts = await self._call("router", "get_amounts_out", self.router.get_amounts_out, amount_in, list(path))
        if not amounts:
            raise ExternalAdapterFailure("router", "get_amounts_out", "empty quote")
        return self._require_amount("router", "get_amounts_out", amounts[-1])

    async def _balance(self, holder: Address) -> int:
        balance = await self._call("token", "balance_of", self.token.balance_of, holder)
        return self._require_amount("token", "balance_of", balance)

    @staticmethod
    def _require_amount(adapter: str, operation: str, value: Any) -> int:
        """Reject adapter results that are not uint256 values."""
        if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= UINT256_MAX:
            raise ExternalAdapterFailure(adapter, operation, f"invalid amount {value!r}")
        return value
