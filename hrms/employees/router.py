"""Employee router — /employees/v3 API endpoints.

Routes:
    ""                    — Create (batch), search employees
    /{id}                 — Get, replace, patch, hard-delete an employee
    /{id}/deactivate      — ACTIVE → INACTIVE
    /{id}/reactivate      — INACTIVE → ACTIVE
    /{id}/jurisdictions   — Jurisdictions owned by the employee
    /{id}/audit           — Audit trail of the employee

The jurisdiction router must be included before this one so that
``/jurisdictions`` is never parsed as an employee id.
"""


import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from hrms.common.pagination import list_envelope
from hrms.dependencies import get_actor, get_employee_service, get_tenant_id
from hrms.employees.schemas import (
    DeactivationDetails,
    EmployeeCreate,
    EmployeePatch,
    EmployeeSearchCriteria,
    ReactivationDetails,
)
from hrms.employees.service import EmployeeService

router = APIRouter(prefix="", tags=["employees"])


# ── POST "" — Create employees ──────────────────────────────────────

@router.post("", status_code=201)
async def create_employees(
    body: list[EmployeeCreate],
    tenant_id: str = Depends(get_tenant_id),
    actor: str = Depends(get_actor),
    service: EmployeeService = Depends(get_employee_service),
):
    """Create a batch of employees; codes are generated where omitted."""
    employees = await service.create_employees(body, tenant_id, actor)
    return {
        "data": [e.model_dump(mode="json", by_alias=True) for e in employees],
        "message": f"{len(employees)} employee(s) created successfully.",
    }


# ── GET "" — Search employees ───────────────────────────────────────

@router.get("")
async def search_employees(
    tenant_id: str = Depends(get_tenant_id),
    service: EmployeeService = Depends(get_employee_service),
    ids: list[uuid.UUID] = Query([]),
    uuids: list[uuid.UUID] = Query([]),
    codes: list[str] = Query([]),
    departments: list[str] = Query([]),
    designations: list[str] = Query([]),
    phone: Optional[str] = Query(None),
    is_active: Optional[bool] = Query(None, alias="isActive"),
    limit: int = Query(10),
    offset: int = Query(0),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder"),
):
    """Search employees in the tenant; ``limit < 1`` falls back to the default."""
    criteria = EmployeeSearchCriteria(
        tenant_id=tenant_id,
        ids=[*ids, *uuids],
        codes=codes,
        departments=departments,
        designations=designations,
        phone=phone,
        is_active=is_active,
        limit=limit,
        offset=offset,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    employees, applied = await service.search(criteria)
    return list_envelope(employees, limit=applied.limit, offset=applied.offset)


# ── GET /{id} — Single employee ─────────────────────────────────────

@router.get("/{employee_id}")
async def get_employee(
    employee_id: uuid.UUID,
    tenant_id: str = Depends(get_tenant_id),
    service: EmployeeService = Depends(get_employee_service),
):
    employee = await service.get(employee_id, tenant_id)
    return {
        "data": employee.model_dump(mode="json", by_alias=True),
        "message": "Employee retrieved successfully.",
    }


# ── PUT /{id} — Full update ─────────────────────────────────────────

@router.put("/{employee_id}")
async def update_employee(
    employee_id: uuid.UUID,
    body: EmployeeCreate,
    tenant_id: str = Depends(get_tenant_id),
    actor: str = Depends(get_actor),
    service: EmployeeService = Depends(get_employee_service),
):
    employee = await service.update(employee_id, body, tenant_id, actor)
    return {
        "data": employee.model_dump(mode="json", by_alias=True),
        "message": "Employee updated successfully.",
    }


# ── PATCH /{id} — Partial update ────────────────────────────────────

@router.patch("/{employee_id}")
async def patch_employee(
    employee_id: uuid.UUID,
    body: EmployeePatch,
    tenant_id: str = Depends(get_tenant_id),
    actor: str = Depends(get_actor),
    service: EmployeeService = Depends(get_employee_service),
):
    """Only fields present in the body are written; ``null`` clears optional ones.

    An empty ``code`` is stored as ``null``; other empty strings are kept.
    """
    employee = await service.patch(employee_id, body, tenant_id, actor)
    return {
        "data": employee.model_dump(mode="json", by_alias=True),
        "message": "Employee updated successfully.",
    }


# ── DELETE /{id} — Hard delete ──────────────────────────────────────

@router.delete("/{employee_id}", status_code=204)
async def delete_employee(
    employee_id: uuid.UUID,
    tenant_id: str = Depends(get_tenant_id),
    actor: str = Depends(get_actor),
    service: EmployeeService = Depends(get_employee_service),
):
    await service.hard_delete(employee_id, tenant_id, actor)
    return Response(status_code=204)


# ── POST /{id}/deactivate, /{id}/reactivate ─────────────────────────

@router.post("/{employee_id}/deactivate")
async def deactivate_employee(
    employee_id: uuid.UUID,
    body: DeactivationDetails,
    tenant_id: str = Depends(get_tenant_id),
    actor: str = Depends(get_actor),
    service: EmployeeService = Depends(get_employee_service),
):
    """Requires ``reasonForDeactivation`` and ``effectiveFrom``."""
    employee = await service.deactivate(employee_id, body, tenant_id, actor)
    return {
        "data": employee.model_dump(mode="json", by_alias=True),
        "message": "Employee deactivated successfully.",
    }


@router.post("/{employee_id}/reactivate")
async def reactivate_employee(
    employee_id: uuid.UUID,
    body: ReactivationDetails,
    tenant_id: str = Depends(get_tenant_id),
    actor: str = Depends(get_actor),
    service: EmployeeService = Depends(get_employee_service),
):
    """Requires ``reasonForReactivation`` and ``effectiveFrom``."""
    employee = await service.reactivate(employee_id, body, tenant_id, actor)
    return {
        "data": employee.model_dump(mode="json", by_alias=True),
        "message": "Employee reactivated successfully.",
    }


# ── GET /{id}/jurisdictions, /{id}/audit ────────────────────────────

@router.get("/{employee_id}/jurisdictions")
async def list_employee_jurisdictions(
    employee_id: uuid.UUID,
    tenant_id: str = Depends(get_tenant_id),
    service: EmployeeService = Depends(get_employee_service),
):
    jurisdictions = await service.list_jurisdictions(employee_id, tenant_id)
    return {
        "data": [j.model_dump(mode="json", by_alias=True) for j in jurisdictions],
        "message": "Jurisdictions retrieved successfully.",
    }


@router.get("/{employee_id}/audit")
async def get_employee_audit(
    employee_id: uuid.UUID,
    tenant_id: str = Depends(get_tenant_id),
    service: EmployeeService = Depends(get_employee_service),
):
    entries = await service.audit_history(employee_id, tenant_id)
    return {"data": entries, "message": "Audit trail retrieved successfully."}
