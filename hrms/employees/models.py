"""Employee ORM model.

SQLAlchemy 2.0 async-compatible model with Mapped[] annotations.
Column names match the schema in alembic/versions/001_initial_schema.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hrms.common.audit import AuditMixin
from hrms.common.constants import EmployeeStatus
from hrms.database import Base
from hrms.jurisdictions.models import Jurisdiction


class Employee(Base, AuditMixin):
    """Tenant-scoped employee record."""

    __tablename__ = "eg_hrms_employee_v3"
    __table_args__ = (
        sa.UniqueConstraint("code", "tenant_id", name="uk_employee_code_tenant"),
    )

    # ── Identity ────────────────────────────────────────────────────
    id: Mapped[uuid.UUID] = mapped_column(sa.Uuid(as_uuid=True), primary_key=True)
    code: Mapped[Optional[str]] = mapped_column(sa.String(64), index=True)

    # ── External identity references ────────────────────────────────
    user_id: Mapped[Optional[str]] = mapped_column(sa.String(64))
    individual_id: Mapped[Optional[str]] = mapped_column(sa.String(64))

    # ── Employment ──────────────────────────────────────────────────
    employee_type: Mapped[str] = mapped_column(sa.String(50), nullable=False)
    status: Mapped[str] = mapped_column(
        sa.String(20), nullable=False, default=EmployeeStatus.ACTIVE.value,
    )
    department: Mapped[str] = mapped_column(sa.String(64), nullable=False)
    designation: Mapped[str] = mapped_column(sa.String(64), nullable=False)
    date_of_appointment: Mapped[Optional[datetime]] = mapped_column(
        sa.DateTime(timezone=True),
    )

    # ── Contact ─────────────────────────────────────────────────────
    phone: Mapped[Optional[str]] = mapped_column(sa.String(20))
    email: Mapped[Optional[str]] = mapped_column(sa.String(255))

    # ── Status / tenancy ────────────────────────────────────────────
    is_active: Mapped[bool] = mapped_column(sa.Boolean, nullable=False, default=True)
    tenant_id: Mapped[str] = mapped_column(sa.String(64), nullable=False, index=True)

    # ── Relationships ───────────────────────────────────────────────
    # selectin so async loads never hit an implicit lazy load
    jurisdictions: Mapped[list[Jurisdiction]] = relationship(
        Jurisdiction,
        lazy="selectin",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by=Jurisdiction.created_time,
    )

    def __repr__(self) -> str:
        return f"<Employee {self.code} tenant={self.tenant_id}>"
