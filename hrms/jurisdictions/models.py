"""Jurisdiction ORM model."""

from __future__ import annotations

import uuid

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from hrms.common.audit import AuditMixin
from hrms.database import Base


class Jurisdiction(Base, AuditMixin):
    """Assignment of an employee to one or more boundary codes.

    ``employee_id`` is a plain back-reference: the owning Employee cascades
    deletes onto this table, this side holds no relationship of its own.
    """

    __tablename__ = "eg_hrms_jurisdiction_v3"

    id: Mapped[uuid.UUID] = mapped_column(sa.Uuid(as_uuid=True), primary_key=True)
    employee_id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid(as_uuid=True),
        sa.ForeignKey(
            "eg_hrms_employee_v3.id",
            name="fk_jurisdiction_employee",
            ondelete="CASCADE",
        ),
        nullable=False,
        index=True,
    )
    # Ordered list of boundary codes; JSONB on PostgreSQL for ``@>`` lookups.
    boundary_relation: Mapped[list[str]] = mapped_column(
        sa.JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
        default=list,
    )
    is_active: Mapped[bool] = mapped_column(sa.Boolean, nullable=False, default=True)
    tenant_id: Mapped[str] = mapped_column(sa.String(64), nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<Jurisdiction {self.id} employee={self.employee_id} {self.boundary_relation}>"
