"""Audit columns mixin, audit-trail model and async helpers for recording entity changes."""

from __future__ import annotations

import time
import uuid
from typing import Any, Optional, Sequence

from sqlalchemy import (
    JSON,
    BigInteger,
    Index,
    String,
    Uuid,
    select,
)
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Mapped, mapped_column

from hrms.database import Base


def now_millis() -> int:
    """Current time as epoch milliseconds."""
    return time.time_ns() // 1_000_000


# ── Mixin for any auditable model ───────────────────────────────────

class AuditMixin:
    """
    Add ``created_by``, ``last_modified_by``, ``created_time`` and
    ``last_modified_time`` (epoch milliseconds) to a model via::

        class Employee(Base, AuditMixin):
            ...

    Values are set by the service layer, never by the database.
    """

    created_by: Mapped[str] = mapped_column(String(64), nullable=False)
    last_modified_by: Mapped[Optional[str]] = mapped_column(String(64))
    created_time: Mapped[int] = mapped_column(BigInteger, nullable=False)
    last_modified_time: Mapped[Optional[int]] = mapped_column(BigInteger)


# ── Immutable audit-trail table ─────────────────────────────────────

class AuditTrail(Base):
    """Immutable log of every employee / jurisdiction mutation."""

    __tablename__ = "hrms_audit_trail"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    tenant_id: Mapped[str] = mapped_column(String(64), nullable=False)
    actor: Mapped[str] = mapped_column(String(64), nullable=False)
    action: Mapped[str] = mapped_column(String(50), nullable=False)
    entity_type: Mapped[str] = mapped_column(String(50), nullable=False)
    entity_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False)
    old_values: Mapped[Optional[dict]] = mapped_column(JSON)
    new_values: Mapped[Optional[dict]] = mapped_column(JSON)
    created_time: Mapped[int] = mapped_column(BigInteger, nullable=False)

    __table_args__ = (
        Index("ix_audit_trail_entity", "entity_type", "entity_id"),
        Index("ix_audit_trail_tenant", "tenant_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<AuditTrail {self.action} {self.entity_type}"
            f"/{self.entity_id} by {self.actor}>"
        )


# ── Helpers ─────────────────────────────────────────────────────────

async def create_audit_entry(
    session: AsyncSession,
    *,
    tenant_id: str,
    actor: str,
    action: str,
    entity_type: str,
    entity_id: uuid.UUID,
    old_values: Optional[dict[str, Any]] = None,
    new_values: Optional[dict[str, Any]] = None,
) -> AuditTrail:
    """
    Create and flush an audit-trail entry.

    Args:
        session: Async SQLAlchemy session.
        tenant_id: Tenant owning the affected entity.
        actor: Client id performing the action.
        action: create | update | patch | deactivate | reactivate | delete.
        entity_type: "employee" or "jurisdiction".
        entity_id: UUID of the affected entity.
        old_values: Previous state (for updates/deletes), JSON-safe.
        new_values: New state (for creates/updates), JSON-safe.
    """
    entry = AuditTrail(
        tenant_id=tenant_id,
        actor=actor,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        old_values=old_values,
        new_values=new_values,
        created_time=now_millis(),
    )
    session.add(entry)
    await session.flush()
    return entry


async def list_audit_entries(
    session: AsyncSession,
    *,
    tenant_id: str,
    entity_type: str,
    entity_id: uuid.UUID,
) -> Sequence[AuditTrail]:
    """Audit entries for one entity, oldest first."""
    result = await session.execute(
        select(AuditTrail)
        .where(
            AuditTrail.tenant_id == tenant_id,
            AuditTrail.entity_type == entity_type,
            AuditTrail.entity_id == entity_id,
        )
        .order_by(AuditTrail.created_time.asc())
    )
    return result.scalars().all()
