"""
Shared fixtures.

The default gateway is deployed at "gateway" by "owner" on top of the
simulated token and router (1:1 rates, fixed clock).
"""
import pytest
import pytest_asyncio

from machine_exchange.container import Container
from machine_exchange.infrastructure.adapters.exchange.simulated_exchange import NATIVE

OWNER = "owner"
GATEWAY = "gateway"
MACHINE = "machine-1"
USER = "alice"
BASE = "BASE"
WNATIVE = "WNATIVE"
ROUTER = "router"


@pytest.fixture
def container():
    """Container wired with in-memory and simulated adapters."""
    return Container.create_for_testing(
        gateway_address=GATEWAY,
        base_token=BASE,
        router_address=ROUTER,
        native_wrapper=WNATIVE,
        fee_granularity=10000,
        default_fee=1000,
        deadline_seconds=300,
        default_tolerance=50,
    )


@pytest.fixture
def router(container):
    return container.get_router_port()


@pytest.fixture
def token(container):
    return container.get_token_port()


@pytest.fixture
def ledger(router):
    """Ledger shared by the simulated token and router."""
    return router.ledger


@pytest.fixture
def funded_ledger(ledger):
    """Gateway holds base and native funds; the router holds reserves of both sides."""
    ledger.mint(BASE, GATEWAY, 1_000_000)
    ledger.mint(NATIVE, GATEWAY, 1_000_000)
    ledger.mint(BASE, ROUTER, 1_000_000)
    ledger.mint(WNATIVE, ROUTER, 1_000_000)
    return ledger


@pytest_asyncio.fixture
async def gateway(container, funded_ledger):
    """Deployed gateway with an empty registry."""
    gateway = container.get_gateway()
    await gateway.deploy(deployer=OWNER, address=GATEWAY)
    return gateway


@pytest_asyncio.fixture
async def gateway_with_machine(gateway):
    """Deployed gateway with MACHINE registered at the default fees."""
    await gateway.add_machine(OWNER, MACHINE)
    return gateway
