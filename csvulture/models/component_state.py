from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func


class Base(DeclarativeBase):
    pass


class ComponentState(Base):
    """One persisted key of one component instance. Values are JSON-encoded."""

    __tablename__ = "component_state"
    __table_args__ = (UniqueConstraint("instance_id", "key", name="uq_component_state_key"),)

    id:             Mapped[int]      = mapped_column(Integer, primary_key=True)
    instance_id:    Mapped[str]      = mapped_column(String(36), nullable=False, index=True)
    component_guid: Mapped[str]      = mapped_column(String(36), nullable=False)
    key:            Mapped[str]      = mapped_column(String(255), nullable=False)
    value:          Mapped[str]      = mapped_column(Text, nullable=False)
    updated_at:     Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now()
    )
