"""Employee service layer — async CRUD + business logic.

Uses:
  - ``EmployeeRepository`` / ``JurisdictionRepository`` for every query
  - ``EmployeeValidator`` for request rules and duplicate codes
  - ``IdGenClient`` for codes of employees created without one
  - ``create_audit_entry`` from hrms.common.audit
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from hrms.clients.boundary import BoundaryClient
from hrms.clients.idgen import IdGenClient, fallback_code
from hrms.common.audit import create_audit_entry, list_audit_entries, now_millis
from hrms.common.constants import AuditAction, EmployeeStatus
from hrms.common.exceptions import (
    DuplicateException,
    InvalidStateTransitionException,
    ValidationException,
)
from hrms.employees.models import Employee
from hrms.employees.repository import EmployeeRepository
from hrms.employees.schemas import (
    DeactivationDetails,
    EmployeeCreate,
    EmployeePatch,
    EmployeeResponse,
    EmployeeSearchCriteria,
    ReactivationDetails,
)
from hrms.employees.validators import EmployeeValidator
from hrms.jurisdictions.models import Jurisdiction
from hrms.jurisdictions.repository import JurisdictionRepository
from hrms.jurisdictions.schemas import JurisdictionResponse
from hrms.jurisdictions.service import to_response as jurisdiction_response
from hrms.jurisdictions.service import validate_boundary_codes

logger = logging.getLogger(__name__)

ENTITY_TYPE = "employee"


def to_response(employee: Employee) -> EmployeeResponse:
    return EmployeeResponse.model_validate(employee)


def snapshot(employee: Employee) -> dict[str, Any]:
    """JSON-safe column values for the audit trail (jurisdictions excluded)."""
    return to_response(employee).model_dump(
        mode="json",
        by_alias=True,
        exclude={"jurisdictions", "created_at", "updated_at"},
    )


# ═════════════════════════════════════════════════════════════════════
# EmployeeService
# ═════════════════════════════════════════════════════════════════════


class EmployeeService:
    """Async CRUD and lifecycle operations for employees."""

    def __init__(
        self,
        db: AsyncSession,
        *,
        idgen_client: Optional[IdGenClient] = None,
        boundary_client: Optional[BoundaryClient] = None,
    ) -> None:
        self.db = db
        self.repository = EmployeeRepository(db)
        self.jurisdictions = JurisdictionRepository(db)
        self.validator = EmployeeValidator(self.repository)
        self.idgen = idgen_client or IdGenClient()
        # None means boundary validation is off
        self.boundary_client = boundary_client

    # ── Create ──────────────────────────────────────────────────────

    async def create_employees(
        self,
        requests: Sequence[EmployeeCreate],
        tenant_id: str,
        actor: str,
    ) -> list[EmployeeResponse]:
        """Validate the whole batch, fill missing codes, persist in one flush.

        A validation failure on any request rejects the batch. ID
        generation never does: items it cannot serve get a fallback code.
        """
        if not requests:
            raise ValidationException("At least one employee is required", field="employees")

        seen_codes: set[str] = set()
        for request in requests:
            self.validator.validate_create_shape(request, tenant_id)
            if request.code:
                if request.code in seen_codes:
                    raise DuplicateException("code", request.code)
                seen_codes.add(request.code)
        for code in seen_codes:
            await self.validator.check_duplicate_code(code, tenant_id)

        if self.boundary_client is not None:
            boundary_codes = [
                code
                for request in requests
                for jurisdiction in request.jurisdictions
                for code in jurisdiction.boundary_relation
            ]
            if boundary_codes:
                await validate_boundary_codes(self.boundary_client, tenant_id, boundary_codes)

        generated = await self._generate_codes(
            tenant_id, sum(1 for request in requests if not request.code),
        )

        now = now_millis()
        employees = [
            self._build_employee(
                request,
                tenant_id=tenant_id,
                actor=actor,
                now=now,
                code=request.code or generated.pop(0),
            )
            for request in requests
        ]
        await self.repository.create_many(employees)

        for employee in employees:
            await create_audit_entry(
                self.db,
                tenant_id=tenant_id,
                actor=actor,
                action=AuditAction.create.value,
                entity_type=ENTITY_TYPE,
                entity_id=employee.id,
                new_values=snapshot(employee),
            )
        logger.info("Created %d employee(s) for tenant %s", len(employees), tenant_id)
        return [to_response(employee) for employee in employees]

    # ── Read ────────────────────────────────────────────────────────

    async def search(
        self,
        criteria: EmployeeSearchCriteria,
    ) -> tuple[list[EmployeeResponse], EmployeeSearchCriteria]:
        """Return matches plus the normalised criteria actually applied."""
        criteria = self.validator.validate_search(criteria)
        rows = await self.repository.search(criteria)
        return [to_response(row) for row in rows], criteria

    async def get(self, employee_id: uuid.UUID, tenant_id: str) -> EmployeeResponse:
        return to_response(await self.repository.find_by_uuid(employee_id, tenant_id))

    async def list_jurisdictions(
        self,
        employee_id: uuid.UUID,
        tenant_id: str,
    ) -> list[JurisdictionResponse]:
        await self.repository.find_by_uuid(employee_id, tenant_id)
        rows = await self.jurisdictions.find_by_employee(employee_id, tenant_id)
        return [jurisdiction_response(row) for row in rows]

    async def audit_history(self, employee_id: uuid.UUID, tenant_id: str) -> list[dict]:
        entries = await list_audit_entries(
            self.db, tenant_id=tenant_id, entity_type=ENTITY_TYPE, entity_id=employee_id,
        )
        return [
            {
                "action": entry.action,
                "actor": entry.actor,
                "oldValues": entry.old_values,
                "newValues": entry.new_values,
                "createdTime": entry.created_time,
            }
            for entry in entries
        ]

    # ── Update (PUT) ────────────────────────────────────────────────

    async def update(
        self,
        employee_id: uuid.UUID,
        request: EmployeeCreate,
        tenant_id: str,
        actor: str,
    ) -> EmployeeResponse:
        """Full update with create rules; an omitted code keeps the stored one.

        A supplied ``isActive`` also sets ``status`` (ACTIVE or INACTIVE)
        unless the employee is SUSPENDED. Embedded jurisdictions are not
        touched here; they have their own endpoints.
        """
        existing = await self.repository.find_by_uuid(employee_id, tenant_id)
        await self.validator.validate_create(request, tenant_id, exclude_id=employee_id)
        old_values = snapshot(existing)

        values: dict[str, Any] = {
            "code": request.code or existing.code,
            "user_id": request.user_id,
            "individual_id": request.individual_id,
            "employee_type": request.employee_type,
            "department": request.department,
            "designation": request.designation,
            "date_of_appointment": request.date_of_appointment,
            "phone": request.phone,
            "email": request.email,
            "last_modified_by": actor,
            "last_modified_time": now_millis(),
        }
        if request.is_active is not None:
            values["is_active"] = request.is_active
            # status follows isActive; SUSPENDED is left as it is
            if existing.status != EmployeeStatus.SUSPENDED.value:
                values["status"] = (
                    EmployeeStatus.ACTIVE if request.is_active else EmployeeStatus.INACTIVE
                ).value
        await self.repository.update(employee_id, tenant_id, values)

        return await self._reload_and_audit(
            employee_id, tenant_id, actor, AuditAction.update, old_values,
        )

    # ── Patch ───────────────────────────────────────────────────────

    async def patch(
        self,
        employee_id: uuid.UUID,
        patch: EmployeePatch,
        tenant_id: str,
        actor: str,
    ) -> EmployeeResponse:
        """Write only the fields present in *patch*."""
        existing = await self.repository.find_by_uuid(employee_id, tenant_id)
        present = await self.validator.validate_patch(patch, tenant_id, employee_id)
        if not present:
            return to_response(existing)
        old_values = snapshot(existing)

        values = dict(present)
        if "code" in values and not values["code"]:
            # an empty code is stored as NULL so it never collides on the unique key
            values["code"] = None
        values["last_modified_by"] = actor
        values["last_modified_time"] = now_millis()
        await self.repository.update(employee_id, tenant_id, values)

        return await self._reload_and_audit(
            employee_id, tenant_id, actor, AuditAction.patch, old_values,
        )

    # ── Delete ──────────────────────────────────────────────────────

    async def hard_delete(self, employee_id: uuid.UUID, tenant_id: str, actor: str) -> None:
        """Remove the employee and its jurisdictions. Irreversible."""
        existing = await self.repository.find_by_uuid(employee_id, tenant_id)
        old_values = snapshot(existing)
        await self.repository.delete(employee_id, tenant_id)
        await create_audit_entry(
            self.db,
            tenant_id=tenant_id,
            actor=actor,
            action=AuditAction.delete.value,
            entity_type=ENTITY_TYPE,
            entity_id=employee_id,
            old_values=old_values,
        )
        logger.info("Hard-deleted employee %s (tenant=%s)", employee_id, tenant_id)

    # ── Lifecycle ───────────────────────────────────────────────────

    async def deactivate(
        self,
        employee_id: uuid.UUID,
        details: DeactivationDetails,
        tenant_id: str,
        actor: str,
    ) -> EmployeeResponse:
        """ACTIVE → INACTIVE."""
        self.validator.validate_deactivation(details)
        return await self._transition(
            employee_id,
            tenant_id,
            actor,
            action=AuditAction.deactivate,
            source=EmployeeStatus.ACTIVE,
            target=EmployeeStatus.INACTIVE,
            metadata={
                "reason": details.reason_for_deactivation,
                "effectiveFrom": details.effective_from.isoformat(),
                "remarks": details.remarks,
            },
        )

    async def reactivate(
        self,
        employee_id: uuid.UUID,
        details: ReactivationDetails,
        tenant_id: str,
        actor: str,
    ) -> EmployeeResponse:
        """INACTIVE → ACTIVE."""
        self.validator.validate_reactivation(details)
        return await self._transition(
            employee_id,
            tenant_id,
            actor,
            action=AuditAction.reactivate,
            source=EmployeeStatus.INACTIVE,
            target=EmployeeStatus.ACTIVE,
            metadata={
                "reason": details.reason_for_reactivation,
                "effectiveFrom": details.effective_from.isoformat(),
                "remarks": details.remarks,
            },
        )

    # ── Internal helpers ────────────────────────────────────────────

    async def _transition(
        self,
        employee_id: uuid.UUID,
        tenant_id: str,
        actor: str,
        *,
        action: AuditAction,
        source: EmployeeStatus,
        target: EmployeeStatus,
        metadata: dict[str, Any],
    ) -> EmployeeResponse:
        existing = await self.repository.find_by_uuid(employee_id, tenant_id)
        if existing.status != source.value:
            raise InvalidStateTransitionException(existing.status, action.value)
        old_values = snapshot(existing)

        now = now_millis()
        await self.repository.update_status(
            employee_id, tenant_id, target.value, modified_by=actor, modified_time=now,
        )
        await self.repository.update_is_active(
            employee_id,
            tenant_id,
            target is EmployeeStatus.ACTIVE,
            modified_by=actor,
            modified_time=now,
        )

        updated = await self.repository.find_by_uuid(employee_id, tenant_id)
        await create_audit_entry(
            self.db,
            tenant_id=tenant_id,
            actor=actor,
            action=action.value,
            entity_type=ENTITY_TYPE,
            entity_id=employee_id,
            old_values=old_values,
            new_values={**snapshot(updated), **metadata},
        )
        logger.info(
            "Employee %s %s: %s -> %s (tenant=%s)",
            employee_id, action.value, source.value, target.value, tenant_id,
        )
        return to_response(updated)

    async def _reload_and_audit(
        self,
        employee_id: uuid.UUID,
        tenant_id: str,
        actor: str,
        action: AuditAction,
        old_values: dict[str, Any],
    ) -> EmployeeResponse:
        updated = await self.repository.find_by_uuid(employee_id, tenant_id)
        await create_audit_entry(
            self.db,
            tenant_id=tenant_id,
            actor=actor,
            action=action.value,
            entity_type=ENTITY_TYPE,
            entity_id=employee_id,
            old_values=old_values,
            new_values=snapshot(updated),
        )
        return to_response(updated)

    async def _generate_codes(self, tenant_id: str, count: int) -> list[str]:
        codes = await self.idgen.generate_ids(tenant_id, count, {"ORG": tenant_id})
        while len(codes) < count:
            codes.append(fallback_code())
        return codes[:count]

    @staticmethod
    def _build_employee(
        request: EmployeeCreate,
        *,
        tenant_id: str,
        actor: str,
        now: int,
        code: str,
    ) -> Employee:
        employee_id = uuid.uuid4()
        is_active = True if request.is_active is None else request.is_active
        return Employee(
            id=employee_id,
            code=code,
            user_id=request.user_id,
            individual_id=request.individual_id,
            employee_type=request.employee_type,
            status=(EmployeeStatus.ACTIVE if is_active else EmployeeStatus.INACTIVE).value,
            department=request.department,
            designation=request.designation,
            date_of_appointment=request.date_of_appointment,
            phone=request.phone,
            email=request.email,
            is_active=is_active,
            tenant_id=tenant_id,
            created_by=actor,
            created_time=now,
            last_modified_by=None,
            last_modified_time=None,
            jurisdictions=[
                Jurisdiction(
                    id=uuid.uuid4(),
                    employee_id=employee_id,
                    boundary_relation=list(item.boundary_relation),
                    is_active=True if item.is_active is None else item.is_active,
                    tenant_id=tenant_id,
                    created_by=actor,
                    created_time=now,
                    last_modified_by=None,
                    last_modified_time=None,
                )
                for item in request.jurisdictions
            ],
        )
