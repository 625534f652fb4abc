"""
End-to-end gateway flow on SQL-backed state.

The gateway is wired through the Container with the simulated exchange and
a SqlAlchemyStateAdapter over a file-backed SQLite database, so every call
commits through the ORM.
"""
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from machine_exchange.container import Container
from machine_exchange.domain.entities.agent import Agent
from machine_exchange.domain.exceptions import NotOwnerError, UnauthorizedAgentError
from machine_exchange.exceptions import ExternalAdapterFailure
from machine_exchange.infrastructure.adapters.exchange.simulated_exchange import NATIVE
from machine_exchange.infrastructure.adapters.persistence.sql_state_adapter import (
    SqlAlchemyStateAdapter,
    create_schema,
)

pytestmark = pytest.mark.integration


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'gateway.db'}")
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def state_port(engine):
    return SqlAlchemyStateAdapter(
        async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    )


@pytest_asyncio.fixture
async def container(state_port):
    container = Container.create_for_testing(
        state_port=state_port,
        default_fee=1000,
        default_tolerance=50,
    )

    ledger = container.get_router_port().ledger
    ledger.mint("BASE", "gateway", 100_000)
    ledger.mint(NATIVE, "gateway", 100_000)
    ledger.mint("BASE", "router", 100_000)
    ledger.mint("WNATIVE", "router", 100_000)

    await container.get_gateway().deploy(deployer="owner", address="gateway")
    return container


class TestGatewayFlow:

    @pytest.mark.asyncio
    async def test_machine_lifecycle_is_persisted(self, container, state_port):
        gateway = container.get_gateway()

        await gateway.add_machine("owner", "machine-1")
        await gateway.edit_machine_fees("owner", "machine-1", 250, 500)

        stored = await state_port.load()
        assert stored.machines == {"machine-1": Agent("machine-1", 250, 500)}

        await gateway.remove_machine("owner", "machine-1")
        assert (await state_port.load()).machines == {}

    @pytest.mark.asyncio
    async def test_orders_round_trip(self, container):
        gateway = container.get_gateway()
        ledger = container.get_router_port().ledger
        await gateway.add_machine("owner", "machine-1")

        buy = await gateway.order_base_to_target("machine-1", 1000, 50, "alice")
        sell = await gateway.order_target_to_base("machine-1", 2000, "alice")

        assert buy.net_amount == 900
        assert sell.net_amount == 1800
        assert ledger.balance("WNATIVE", "alice") == 900
        assert ledger.balance("BASE", "alice") == 1800

    @pytest.mark.asyncio
    async def test_rejected_calls_leave_store_unchanged(self, container, state_port):
        gateway = container.get_gateway()
        await gateway.add_machine("owner", "machine-1")
        before = await state_port.load()

        with pytest.raises(NotOwnerError):
            await gateway.transfer_ownership("machine-1", "machine-1")
        with pytest.raises(UnauthorizedAgentError):
            await gateway.order_base_to_target("owner", 1000, 50, "alice")

        assert await state_port.load() == before

    @pytest.mark.asyncio
    async def test_failed_order_discards_nested_changes(self, container, state_port):
        gateway = container.get_gateway()
        router = container.get_router_port()
        await gateway.add_machine("owner", "machine-1")

        async def reenter():
            router.on_swap = None
            await gateway.transfer_ownership("owner", "bob")
            router.set_rate("BASE", "WNATIVE", 0, 1)

        router.on_swap = reenter

        with pytest.raises(ExternalAdapterFailure):
            await gateway.order_base_to_target("machine-1", 1000, 50, "alice")

        assert (await state_port.load()).owner == "owner"

    @pytest.mark.asyncio
    async def test_ownership_transfer_is_persisted(self, container, state_port):
        gateway = container.get_gateway()
        await gateway.transfer_ownership("owner", "bob")
        assert (await state_port.load()).owner == "bob"
