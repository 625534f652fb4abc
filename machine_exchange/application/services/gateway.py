"""
MachineExchangeGateway - Top-level entry point.

Composes the administrative and order use cases and provides the execution
guarantees they rely on:

- invocations are serialized: one top-level call runs at a time
- each top-level call is one StatePort transaction, committed on success
  and discarded on any error (all-or-nothing)
- a call arriving while another call is in progress in the same task
  context (an external adapter calling back into the gateway) joins the
  active transaction instead of waiting, and its own changes are rolled
  back if it fails
"""
import asyncio
import logging
from contextvars import ContextVar
from typing import Awaitable, Callable, List, Optional, TypeVar

from machine_exchange.application.ports.outbound.state_port import StatePort
from machine_exchange.application.ports.outbound.router_port import ExchangeRouterPort
from machine_exchange.application.ports.outbound.token_port import TokenPort
from machine_exchange.application.use_cases.execute_order import ExecuteOrderUseCase
from machine_exchange.application.use_cases.manage_machines import ManageMachinesUseCase
from machine_exchange.domain.entities.agent import Agent
from machine_exchange.domain.entities.gateway import GatewayState
from machine_exchange.domain.entities.order import OrderReceipt, OrderRequest
from machine_exchange.domain.value_objects.units import Address
from machine_exchange.exceptions import DeploymentError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MachineExchangeGateway:
    """
    Access-controlled exchange intermediary.

    Every operation takes the authenticated caller identity as its first
    argument. The gateway never infers or trusts an identity from anywhere
    else.

    Usage:
        gateway = container.get_gateway()
        await gateway.deploy(deployer="owner", address="gateway")
        await gateway.add_machine("owner", "machine-1")
        receipt = await gateway.order_base_to_target(
            "machine-1", amount=1000, tolerance=50, user="alice"
        )
    """

    def __init__(
        self,
        state_port: StatePort,
        token: TokenPort,
        router: ExchangeRouterPort,
        manage_machines: ManageMachinesUseCase,
        execute_order: ExecuteOrderUseCase,
    ):
        """
        Args:
            state_port: State store
            token: Base token port
            router: Exchange router port
            manage_machines: Administrative use case
            execute_order: Order use case
        """
        self.state_port = state_port
        self.token = token
        self.router = router
        self.manage_machines = manage_machines
        self.execute_order = execute_order

        self._serial = asyncio.Lock()
        # Working state of the call in progress, visible to nested calls
        self._active_state: ContextVar[Optional[GatewayState]] = ContextVar(
            f"gateway_active_state_{id(self)}", default=None
        )

    # --- Construction ---

    async def deploy(self, deployer: Address, address: Address) -> GatewayState:
        """
        Initialize the gateway: deployer becomes owner, registry is empty.

        Base token and router addresses are taken from the injected ports.

        Args:
            deployer: Identity deploying the gateway (becomes owner)
            address: The gateway's own identity

        Raises:
            DeploymentError: If the gateway is already deployed
        """
        # A state is active only inside a running call, so the gateway exists.
        if self._active_state.get() is not None:
            raise DeploymentError("gateway is already deployed")

        async with self._serial:
            if await self.state_port.load() is not None:
                raise DeploymentError("gateway is already deployed")

            state = GatewayState.deploy(
                deployer=deployer,
                address=address,
                base_token=self.token.address,
                router=self.router.address,
            )
            await self.state_port.save(state)

        logger.info(
            f"Gateway deployed at {state.address} by {state.owner} "
            f"(base_token={state.base_token}, router={state.router})"
        )
        return state

    # --- Administrative Surface ---

    async def add_machine(self, caller: Address, identity: Address) -> Agent:
        """Register a machine with default fees (owner only)."""
        return await self._invoke(
            "add_machine",
            lambda state: self._sync(self.manage_machines.add_machine, state, caller, identity),
        )

    async def remove_machine(self, caller: Address, identity: Address) -> bool:
        """Remove a machine; absent identities are a no-op (owner only)."""
        return await self._invoke(
            "remove_machine",
            lambda state: self._sync(self.manage_machines.remove_machine, state, caller, identity),
        )

    async def edit_machine_fees(
        self,
        caller: Address,
        identity: Address,
        buy_fee: int,
        sell_fee: int,
    ) -> Agent:
        """Replace a machine's buy and sell fees (owner only)."""
        return await self._invoke(
            "edit_machine_fees",
            lambda state: self._sync(
                self.manage_machines.edit_machine_fees, state, caller, identity, buy_fee, sell_fee
            ),
        )

    async def transfer_ownership(self, caller: Address, new_owner: Address) -> Address:
        """Hand ownership to new_owner immediately (owner only). Returns the previous owner."""
        return await self._invoke(
            "transfer_ownership",
            lambda state: self._sync(self.manage_machines.transfer_ownership, state, caller, new_owner),
        )

    # --- Order Surface ---

    async def order_base_to_target(
        self,
        caller: Address,
        amount: int,
        tolerance: int,
        user: Address,
        deadline_seconds: Optional[int] = None,
    ) -> OrderReceipt:
        """Buy the target currency for user with the base currency (machines only)."""
        request = OrderRequest.buy(
            amount=amount,
            tolerance=tolerance,
            user=user,
            deadline_seconds=deadline_seconds,
        )
        return await self._invoke(
            "order_base_to_target",
            lambda state: self.execute_order.order_base_to_target(state, caller, request),
        )

    async def order_target_to_base(
        self,
        caller: Address,
        amount: int,
        user: Address,
        tolerance: Optional[int] = None,
        deadline_seconds: Optional[int] = None,
    ) -> OrderReceipt:
        """Sell the native currency for base tokens delivered to user (machines only)."""
        request = OrderRequest.sell(
            amount=amount,
            tolerance=self.execute_order.default_tolerance if tolerance is None else tolerance,
            user=user,
            deadline_seconds=deadline_seconds,
        )
        return await self._invoke(
            "order_target_to_base",
            lambda state: self.execute_order.order_target_to_base(state, caller, request),
        )

    # --- Read Surface ---

    async def owner(self) -> Address:
        """Current owner."""
        return await self._read(lambda state: state.owner)

    async def get_machine(self, identity: Address) -> Optional[Agent]:
        """Registered machine, or None."""
        return await self._read(lambda state: self.manage_machines.registry.lookup(state, identity))

    async def list_machines(self) -> List[Agent]:
        """All registered machines sorted by identity."""
        return await self._read(self.manage_machines.registry.list_agents)

    async def get_state(self) -> GatewayState:
        """Copy of the current state."""
        return await self._read(lambda state: state.snapshot())

    # --- Execution ---

    async def _invoke(
        self,
        operation: str,
        body: Callable[[GatewayState], Awaitable[T]],
    ) -> T:
        """Run body against the gateway state with commit/rollback semantics."""
        active = self._active_state.get()
        if active is not None:
            logger.debug(f"Reentrant call to {operation} joins the active transaction")
            checkpoint = active.snapshot()
            try:
                return await body(active)
            except Exception:
                active.restore(checkpoint)
                raise

        async with self._serial:
            try:
                async with self.state_port.transaction() as state:
                    token = self._active_state.set(state)
                    try:
                        return await body(state)
                    finally:
                        self._active_state.reset(token)
            except Exception as e:
                logger.debug(f"{operation} rolled back: {e}")
                raise

    async def _read(self, reader: Callable[[GatewayState], T]) -> T:
        """Run a read-only accessor without committing."""
        active = self._active_state.get()
        if active is not None:
            return reader(active)

        async with self._serial:
            state = await self.state_port.load()
        if state is None:
            raise DeploymentError("gateway has not been deployed")
        return reader(state)

    @staticmethod
    async def _sync(method: Callable[..., T], *args) -> T:
        """Adapt a synchronous use case method to the async body signature."""
        return method(*args)
