"""Jurisdiction service layer — async CRUD + business logic.

Uses:
  - ``JurisdictionRepository`` for every query
  - an ``EmployeeLookup`` (normally ``EmployeeRepository``) to check that
    the referenced employee exists in the tenant
  - ``BoundaryClient`` when boundary validation is switched on
  - ``create_audit_entry`` from hrms.common.audit
"""

from __future__ import annotations

import logging
import uuid
from typing import Optional, Protocol, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from hrms.clients.boundary import BoundaryClient
from hrms.common.audit import create_audit_entry, now_millis
from hrms.common.constants import AuditAction
from hrms.common.exceptions import NotFoundException, ValidationException
from hrms.employees.repository import EmployeeRepository
from hrms.jurisdictions import validators
from hrms.jurisdictions.models import Jurisdiction
from hrms.jurisdictions.repository import JurisdictionRepository
from hrms.jurisdictions.schemas import (
    JurisdictionCreate,
    JurisdictionResponse,
    JurisdictionSearchCriteria,
    JurisdictionUpdate,
)

logger = logging.getLogger(__name__)

ENTITY_TYPE = "jurisdiction"


class EmployeeLookup(Protocol):
    """Read-only employee existence check."""

    async def exists(self, employee_id: uuid.UUID, tenant_id: str) -> bool: ...


async def validate_boundary_codes(
    client: BoundaryClient,
    tenant_id: str,
    codes: Sequence[str],
) -> None:
    """Reject codes the boundary service does not know."""
    unique_codes = list(dict.fromkeys(codes))
    records = await client.search_by_codes(tenant_id, unique_codes)
    known = {record.get("code") for record in records}
    unknown = [code for code in unique_codes if code not in known]
    if unknown:
        raise ValidationException(
            f"Unknown boundary codes: {', '.join(unknown)}",
            field="boundaryRelation",
        )


def to_response(jurisdiction: Jurisdiction) -> JurisdictionResponse:
    return JurisdictionResponse.model_validate(jurisdiction)


def snapshot(jurisdiction: Jurisdiction) -> dict:
    """JSON-safe column values for the audit trail."""
    return to_response(jurisdiction).model_dump(
        mode="json", by_alias=True, exclude={"created_at", "updated_at"},
    )


# ═════════════════════════════════════════════════════════════════════
# JurisdictionService
# ═════════════════════════════════════════════════════════════════════


class JurisdictionService:
    """Async CRUD operations for jurisdictions."""

    def __init__(
        self,
        db: AsyncSession,
        *,
        employee_lookup: Optional[EmployeeLookup] = None,
        boundary_client: Optional[BoundaryClient] = None,
    ) -> None:
        self.db = db
        self.repository = JurisdictionRepository(db)
        self.employees = employee_lookup or EmployeeRepository(db)
        # None means boundary validation is off
        self.boundary_client = boundary_client

    # ── Create ──────────────────────────────────────────────────────

    async def create(
        self,
        request: JurisdictionCreate,
        tenant_id: str,
        actor: str,
    ) -> JurisdictionResponse:
        validators.validate_create(request, tenant_id)
        await self._ensure_employee(request.employee_id, tenant_id)
        if self.boundary_client is not None:
            await validate_boundary_codes(
                self.boundary_client, tenant_id, request.boundary_relation,
            )

        jurisdiction = Jurisdiction(
            id=uuid.uuid4(),
            employee_id=request.employee_id,
            boundary_relation=list(request.boundary_relation),
            is_active=True if request.is_active is None else request.is_active,
            tenant_id=tenant_id,
            created_by=actor,
            created_time=now_millis(),
            last_modified_by=None,
            last_modified_time=None,
        )
        await self.repository.create(jurisdiction)

        await create_audit_entry(
            self.db,
            tenant_id=tenant_id,
            actor=actor,
            action=AuditAction.create.value,
            entity_type=ENTITY_TYPE,
            entity_id=jurisdiction.id,
            new_values=snapshot(jurisdiction),
        )
        logger.info(
            "Created jurisdiction %s for employee %s (tenant=%s)",
            jurisdiction.id, jurisdiction.employee_id, tenant_id,
        )
        return to_response(jurisdiction)

    # ── Read ────────────────────────────────────────────────────────

    async def search(
        self,
        criteria: JurisdictionSearchCriteria,
    ) -> tuple[list[JurisdictionResponse], JurisdictionSearchCriteria]:
        """Return matches plus the normalised criteria actually applied."""
        criteria = validators.validate_search(criteria)
        rows = await self.repository.search(criteria)
        return [to_response(row) for row in rows], criteria

    async def get(self, jurisdiction_id: uuid.UUID, tenant_id: str) -> JurisdictionResponse:
        return to_response(await self.repository.find_by_uuid(jurisdiction_id, tenant_id))

    # ── Replace ─────────────────────────────────────────────────────

    async def replace(
        self,
        jurisdiction_id: uuid.UUID,
        request: JurisdictionUpdate,
        tenant_id: str,
        actor: str,
    ) -> JurisdictionResponse:
        """Overwrite the supplied fields; absent ones keep their value."""
        existing = await self.repository.find_by_uuid(jurisdiction_id, tenant_id)
        validators.validate_update(request, tenant_id)
        old_values = snapshot(existing)

        if request.employee_id is not None and request.employee_id != existing.employee_id:
            await self._ensure_employee(request.employee_id, tenant_id)
        if request.boundary_relation is not None and self.boundary_client is not None:
            await validate_boundary_codes(
                self.boundary_client, tenant_id, request.boundary_relation,
            )

        values = {
            key: value
            for key, value in request.model_dump(exclude_unset=True).items()
            if value is not None
        }
        values["last_modified_by"] = actor
        values["last_modified_time"] = now_millis()
        await self.repository.update(jurisdiction_id, tenant_id, values)

        updated = await self.repository.find_by_uuid(jurisdiction_id, tenant_id)
        await create_audit_entry(
            self.db,
            tenant_id=tenant_id,
            actor=actor,
            action=AuditAction.update.value,
            entity_type=ENTITY_TYPE,
            entity_id=jurisdiction_id,
            old_values=old_values,
            new_values=snapshot(updated),
        )
        return to_response(updated)

    # ── Delete ──────────────────────────────────────────────────────

    async def delete(self, jurisdiction_id: uuid.UUID, tenant_id: str, actor: str) -> None:
        existing = await self.repository.find_by_uuid(jurisdiction_id, tenant_id)
        old_values = snapshot(existing)
        await self.repository.delete(jurisdiction_id, tenant_id)
        await create_audit_entry(
            self.db,
            tenant_id=tenant_id,
            actor=actor,
            action=AuditAction.delete.value,
            entity_type=ENTITY_TYPE,
            entity_id=jurisdiction_id,
            old_values=old_values,
        )
        logger.info("Deleted jurisdiction %s (tenant=%s)", jurisdiction_id, tenant_id)

    # ── Internal helpers ────────────────────────────────────────────

    async def _ensure_employee(self, employee_id: uuid.UUID, tenant_id: str) -> None:
        if not await self.employees.exists(employee_id, tenant_id):
            raise NotFoundException("Employee", employee_id)
