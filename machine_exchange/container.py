"""
Dependency Injection Container.

This module provides a central container for wiring dependencies
following the Dependency Inversion Principle.

Usage:
    # Production
    container = Container(token_port=token, router_port=router)
    gateway = container.get_gateway()

    # Testing
    container = Container.create_for_testing()
    # or with custom mocks
    container = Container(token_port=mock_token, router_port=mock_router)
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from machine_exchange.application.ports.outbound.lock_port import LockPort
from machine_exchange.application.ports.outbound.router_port import ExchangeRouterPort
from machine_exchange.application.ports.outbound.state_port import StatePort
from machine_exchange.application.ports.outbound.time_provider_port import (
    SystemTimeAdapter,
    TimeProviderPort,
)
from machine_exchange.application.ports.outbound.token_port import TokenPort
from machine_exchange.application.services.gateway import MachineExchangeGateway
from machine_exchange.application.use_cases.execute_order import ExecuteOrderUseCase
from machine_exchange.application.use_cases.manage_machines import ManageMachinesUseCase
from machine_exchange.config.settings import DatabaseConfig, FeeConfig, OrderConfig
from machine_exchange.domain.services.agent_registry import AgentRegistry
from machine_exchange.domain.services.fee_calculator import FeeCalculator
from machine_exchange.domain.services.ownership_guard import OwnershipGuard
from machine_exchange.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class Container:
    """
    Dependency Injection Container.

    Manages the creation and wiring of application dependencies.
    Implements singleton pattern for port instances.
    """

    def __init__(
        self,
        state_port: Optional[StatePort] = None,
        token_port: Optional[TokenPort] = None,
        router_port: Optional[ExchangeRouterPort] = None,
        lock_port: Optional[LockPort] = None,
        time_provider: Optional[TimeProviderPort] = None,
        fee_granularity: Optional[int] = None,
        default_fee: Optional[int] = None,
        deadline_seconds: Optional[int] = None,
        default_tolerance: Optional[int] = None,
    ):
        """
        Initialize container with optional port overrides.

        Args:
            state_port: State store (SQL when GATEWAY_DATABASE_URL is set, else in-memory)
            token_port: Base token port (required)
            router_port: Exchange router port (required)
            lock_port: Lock port implementation (uses in-memory if None)
            time_provider: Clock (uses system UTC time if None)
            fee_granularity: Fee denominator (FeeConfig.GRANULARITY if None)
            default_fee: Fee for newly added machines (FeeConfig.DEFAULT_FEE if None)
            deadline_seconds: Swap deadline window (OrderConfig.DEADLINE_SECONDS if None)
            default_tolerance: Sell slippage default (OrderConfig.DEFAULT_SLIPPAGE_TOLERANCE if None)
        """
        self._state_port = state_port
        self._token_port = token_port
        self._router_port = router_port
        self._lock_port = lock_port
        self._time_provider = time_provider

        self.fee_granularity = FeeConfig.GRANULARITY if fee_granularity is None else fee_granularity
        self.default_fee = FeeConfig.DEFAULT_FEE if default_fee is None else default_fee
        self.deadline_seconds = OrderConfig.DEADLINE_SECONDS if deadline_seconds is None else deadline_seconds
        self.default_tolerance = (
            OrderConfig.DEFAULT_SLIPPAGE_TOLERANCE if default_tolerance is None else default_tolerance
        )

        # Cached services
        self._fee_calculator: Optional[FeeCalculator] = None
        self._registry: Optional[AgentRegistry] = None
        self._manage_machines_use_case: Optional[ManageMachinesUseCase] = None
        self._execute_order_use_case: Optional[ExecuteOrderUseCase] = None
        self._gateway: Optional[MachineExchangeGateway] = None

    @classmethod
    def create_for_testing(
        cls,
        gateway_address: str = "gateway",
        base_token: str = "BASE",
        router_address: str = "router",
        native_wrapper: str = "WNATIVE",
        now: Optional[datetime] = None,
        state_port: Optional[StatePort] = None,
        **overrides,
    ) -> "Container":
        """
        Create container with in-memory and simulated adapters for testing.

        The simulated router trades 1:1 in both directions; adjust with
        router.set_rate() and fund balances through the shared ledger.

        Args:
            gateway_address: Account the simulated token and router act for
            base_token: Simulated base token address
            router_address: Simulated router address
            native_wrapper: Wrapped native currency address
            now: Fixed clock start (defaults to 2024-01-01 UTC)
            state_port: State store (in-memory if None)
            **overrides: Forwarded to the constructor (fees, deadline, tolerance)

        Returns:
            Container with test adapters
        """
        from machine_exchange.application.ports.outbound.time_provider_port import FixedTimeAdapter
        from machine_exchange.infrastructure.adapters.exchange.simulated_exchange import (
            SimulatedLedger,
            SimulatedRouterAdapter,
            SimulatedTokenAdapter,
        )
        from machine_exchange.infrastructure.adapters.persistence.memory_lock_adapter import InMemoryLockAdapter
        from machine_exchange.infrastructure.adapters.persistence.memory_state_adapter import InMemoryStateAdapter

        time_provider = FixedTimeAdapter(now or datetime(2024, 1, 1, tzinfo=timezone.utc))
        ledger = SimulatedLedger()
        router = SimulatedRouterAdapter(
            ledger=ledger,
            address=router_address,
            native_wrapper=native_wrapper,
            account=gateway_address,
            time_provider=time_provider,
            rates={
                (base_token, native_wrapper): (1, 1),
                (native_wrapper, base_token): (1, 1),
            },
        )

        return cls(
            state_port=state_port or InMemoryStateAdapter(),
            token_port=SimulatedTokenAdapter(ledger, base_token, gateway_address),
            router_port=router,
            lock_port=InMemoryLockAdapter(),
            time_provider=time_provider,
            **overrides,
        )

    # --- Port Getters ---

    def get_state_port(self) -> StatePort:
        """Get state port implementation."""
        if self._state_port is None:
            if DatabaseConfig.URL:
                from machine_exchange.infrastructure.adapters.persistence.sql_state_adapter import (
                    SqlAlchemyStateAdapter,
                )
                self._state_port = SqlAlchemyStateAdapter.from_url(
                    DatabaseConfig.URL, echo=DatabaseConfig.ECHO
                )
            else:
                from machine_exchange.infrastructure.adapters.persistence.memory_state_adapter import (
                    InMemoryStateAdapter,
                )
                logger.warning("GATEWAY_DATABASE_URL is not set; gateway state is kept in memory")
                self._state_port = InMemoryStateAdapter()
        return self._state_port

    def get_token_port(self) -> TokenPort:
        """Get base token port. There is no default implementation."""
        if self._token_port is None:
            raise ConfigurationError("token_port", "a base token adapter must be provided")
        return self._token_port

    def get_router_port(self) -> ExchangeRouterPort:
        """Get exchange router port. There is no default implementation."""
        if self._router_port is None:
            raise ConfigurationError("router_port", "an exchange router adapter must be provided")
        return self._router_port

    def get_lock_port(self) -> LockPort:
        """Get lock port implementation."""
        if self._lock_port is None:
            from machine_exchange.infrastructure.adapters.persistence.memory_lock_adapter import InMemoryLockAdapter
            self._lock_port = InMemoryLockAdapter()
        return self._lock_port

    def get_time_provider(self) -> TimeProviderPort:
        """Get time provider implementation."""
        if self._time_provider is None:
            self._time_provider = SystemTimeAdapter()
        return self._time_provider

    # --- Domain Services ---

    def get_fee_calculator(self) -> FeeCalculator:
        if self._fee_calculator is None:
            self._fee_calculator = FeeCalculator(granularity=self.fee_granularity)
        return self._fee_calculator

    def get_registry(self) -> AgentRegistry:
        if self._registry is None:
            self._registry = AgentRegistry(
                fee_calculator=self.get_fee_calculator(),
                default_fee=self.default_fee,
            )
        return self._registry

    # --- Use Case Getters ---

    def get_manage_machines_use_case(self) -> ManageMachinesUseCase:
        """Get ManageMachinesUseCase with wired dependencies."""
        if self._manage_machines_use_case is None:
            self._manage_machines_use_case = ManageMachinesUseCase(
                registry=self.get_registry(),
                guard=OwnershipGuard(),
            )
        return self._manage_machines_use_case

    def get_execute_order_use_case(self) -> ExecuteOrderUseCase:
        """Get ExecuteOrderUseCase with wired dependencies."""
        if self._execute_order_use_case is None:
            self._execute_order_use_case = ExecuteOrderUseCase(
                registry=self.get_registry(),
                fee_calculator=self.get_fee_calculator(),
                token=self.get_token_port(),
                router=self.get_router_port(),
                lock=self.get_lock_port(),
                time_provider=self.get_time_provider(),
                deadline_seconds=self.deadline_seconds,
                default_tolerance=self.default_tolerance,
            )
        return self._execute_order_use_case

    # --- Application Services ---

    def get_gateway(self) -> MachineExchangeGateway:
        """
        Get the MachineExchangeGateway.

        The same instance is returned on every call so that all callers
        share its serialization lock.
        """
        if self._gateway is None:
            self._gateway = MachineExchangeGateway(
                state_port=self.get_state_port(),
                token=self.get_token_port(),
                router=self.get_router_port(),
                manage_machines=self.get_manage_machines_use_case(),
                execute_order=self.get_execute_order_use_case(),
            )
        return self._gateway
