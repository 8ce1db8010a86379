from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Declarative base for the taskgantt store."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )


class GraphRecord(Base):
    __tablename__ = "graphs"
    __table_args__ = (UniqueConstraint("name", name="uq_graphs_name"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    directed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    nodes: Mapped[list["TaskNodeRecord"]] = relationship(
        back_populates="graph",
        cascade="all, delete-orphan",
        order_by="TaskNodeRecord.position",
    )
    edges: Mapped[list["TaskEdgeRecord"]] = relationship(
        back_populates="graph",
        cascade="all, delete-orphan",
        order_by="TaskEdgeRecord.position",
    )


class TaskNodeRecord(Base):
    __tablename__ = "task_nodes"
    __table_args__ = (UniqueConstraint("graph_id", "node_id", name="uq_task_nodes_graph_node"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    graph_id: Mapped[int] = mapped_column(
        ForeignKey("graphs.id", ondelete="CASCADE"), nullable=False
    )
    node_id: Mapped[int] = mapped_column(Integer, nullable=False)
    weight: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    position: Mapped[int] = mapped_column(Integer, nullable=False)

    graph: Mapped["GraphRecord"] = relationship(back_populates="nodes")


class TaskEdgeRecord(Base):
    __tablename__ = "task_edges"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    graph_id: Mapped[int] = mapped_column(
        ForeignKey("graphs.id", ondelete="CASCADE"), nullable=False
    )
    source_node_id: Mapped[int] = mapped_column(Integer, nullable=False)
    target_node_id: Mapped[int] = mapped_column(Integer, nullable=False)
    weight: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    # None means "same as the graph".
    directed: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True, default=None)
    position: Mapped[int] = mapped_column(Integer, nullable=False)

    graph: Mapped["GraphRecord"] = relationship(back_populates="edges")
