"""
SQLAlchemy ORM models for gateway state.

Only the current state is stored: one gateway row and the machine
registry. Orders are never recorded.
"""
from datetime import datetime

from sqlalchemy import BigInteger, DateTime, MetaData, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


# Naming convention for constraints
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s"
}

metadata = MetaData(naming_convention=convention)


class Base(DeclarativeBase):
    """Base class for all ORM models."""
    metadata = metadata


# The gateway table holds exactly one row
GATEWAY_ROW_ID = 1


class GatewayRecord(Base):
    """Gateway addresses and owner."""
    __tablename__ = "gateway"

    id: Mapped[int] = mapped_column(primary_key=True)
    address: Mapped[str] = mapped_column(String(128), nullable=False)
    owner: Mapped[str] = mapped_column(String(128), nullable=False)
    base_token: Mapped[str] = mapped_column(String(128), nullable=False)
    router: Mapped[str] = mapped_column(String(128), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.now, onupdate=datetime.now
    )

    def __repr__(self) -> str:
        return f"<GatewayRecord(address={self.address}, owner={self.owner})>"


class MachineRecord(Base):
    """Registered machine and its fees."""
    __tablename__ = "machines"

    identity: Mapped[str] = mapped_column(String(128), primary_key=True)
    buy_fee: Mapped[int] = mapped_column(BigInteger, nullable=False)
    sell_fee: Mapped[int] = mapped_column(BigInteger, nullable=False)
    registered_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.now
    )

    def __repr__(self) -> str:
        return (
            f"<MachineRecord(identity={self.identity}, "
            f"buy_fee={self.buy_fee}, sell_fee={self.sell_fee})>"
        )
