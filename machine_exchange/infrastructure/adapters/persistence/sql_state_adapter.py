"""
SqlAlchemyStateAdapter - SQL implementation of StatePort.

Persists the GatewayState aggregate with SQLAlchemy async sessions and
handles the mapping between the domain aggregate and DB models.
"""
import logging
from typing import Callable, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from machine_exchange.application.ports.outbound.state_port import StatePort
from machine_exchange.domain.entities.agent import Agent
from machine_exchange.domain.entities.gateway import GatewayState
from machine_exchange.exceptions import PersistenceError
from machine_exchange.infrastructure.adapters.persistence.models import (
    Base,
    GATEWAY_ROW_ID,
    GatewayRecord,
    MachineRecord,
)

logger = logging.getLogger(__name__)


async def create_schema(engine: AsyncEngine) -> None:
    """Create the gateway tables if they do not exist."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


class SqlAlchemyStateAdapter(StatePort):
    """
    SQL state adapter implementing StatePort.

    Every save() writes the whole aggregate in one DB transaction, so a
    gateway transaction is committed entirely or not at all.
    """

    def __init__(self, session_factory: Callable[[], AsyncSession]):
        """
        Initialize with SQLAlchemy async session factory.

        Args:
            session_factory: Callable that returns an AsyncSession
        """
        self._session_factory = session_factory

    @classmethod
    def from_url(cls, database_url: str, echo: bool = False) -> "SqlAlchemyStateAdapter":
        """
        Create an adapter with its own engine.

        Args:
            database_url: Async SQLAlchemy URL (e.g. postgresql+asyncpg://...)
            echo: Log SQL statements
        """
        engine = create_async_engine(database_url, echo=echo, pool_pre_ping=True)
        session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        return cls(session_factory)

    async def load(self) -> Optional[GatewayState]:
        """Load the gateway row and machine registry."""
        async with self._session_factory() as session:
            try:
                gateway = await session.get(GatewayRecord, GATEWAY_ROW_ID)
                if gateway is None:
                    return None

                result = await session.execute(select(MachineRecord))
                machines = {
                    record.identity: self._map_db_machine_to_domain(record)
                    for record in result.scalars().all()
                }
            except SQLAlchemyError as e:
                logger.error(f"Failed to load gateway state: {e}")
                raise PersistenceError("load", str(e)) from e

        return GatewayState(
            address=gateway.address,
            owner=gateway.owner,
            base_token=gateway.base_token,
            router=gateway.router,
            machines=machines,
        )

    async def save(self, state: GatewayState) -> None:
        """Write the gateway row and reconcile the machine registry."""
        async with self._session_factory() as session:
            try:
                gateway = await session.get(GatewayRecord, GATEWAY_ROW_ID)
                if gateway is None:
                    gateway = GatewayRecord(id=GATEWAY_ROW_ID)
                    session.add(gateway)
                gateway.address = state.address
                gateway.owner = state.owner
                gateway.base_token = state.base_token
                gateway.router = state.router

                result = await session.execute(select(MachineRecord))
                stored = {record.identity: record for record in result.scalars().all()}

                removed = [identity for identity in stored if identity not in state.machines]
                if removed:
                    await session.execute(
                        delete(MachineRecord).where(MachineRecord.identity.in_(removed))
                    )

                for identity, agent in state.machines.items():
                    record = stored.get(identity)
                    if record is None:
                        session.add(MachineRecord(
                            identity=identity,
                            buy_fee=agent.buy_fee,
                            sell_fee=agent.sell_fee,
                        ))
                    else:
                        record.buy_fee = agent.buy_fee
                        record.sell_fee = agent.sell_fee

                await session.commit()
                logger.debug(
                    f"Gateway state saved: owner={state.owner}, machines={len(state.machines)}"
                )
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(f"Failed to save gateway state: {e}")
                raise PersistenceError("save", str(e)) from e

    # --- Mapping Helpers ---

    def _map_db_machine_to_domain(self, record: MachineRecord) -> Agent:
        """Map a MachineRecord to an Agent entity."""
        return Agent(
            identity=record.identity,
            buy_fee=int(record.buy_fee),
            sell_fee=int(record.sell_fee),
        )
