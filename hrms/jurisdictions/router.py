"""Jurisdiction router — /employees/v3/jurisdictions API endpoints.

Routes:
    /jurisdictions         — Create, search jurisdictions
    /jurisdictions/{id}    — Get, replace, delete a jurisdiction
"""


import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from hrms.common.pagination import list_envelope
from hrms.dependencies import get_actor, get_jurisdiction_service, get_tenant_id
from hrms.jurisdictions.schemas import (
    JurisdictionCreate,
    JurisdictionSearchCriteria,
    JurisdictionUpdate,
)
from hrms.jurisdictions.service import JurisdictionService

router = APIRouter(prefix="/jurisdictions", tags=["jurisdictions"])


@router.post("", status_code=201)
async def create_jurisdiction(
    body: JurisdictionCreate,
    tenant_id: str = Depends(get_tenant_id),
    actor: str = Depends(get_actor),
    service: JurisdictionService = Depends(get_jurisdiction_service),
):
    """Assign boundary codes to an existing employee of the tenant."""
    jurisdiction = await service.create(body, tenant_id, actor)
    return {
        "data": jurisdiction.model_dump(mode="json", by_alias=True),
        "message": "Jurisdiction created successfully.",
    }


@router.get("")
async def search_jurisdictions(
    tenant_id: str = Depends(get_tenant_id),
    service: JurisdictionService = Depends(get_jurisdiction_service),
    ids: list[uuid.UUID] = Query([]),
    employee_ids: list[uuid.UUID] = Query([], alias="employeeIds"),
    boundary_relation: list[str] = Query([], alias="boundaryRelation"),
    is_active: Optional[bool] = Query(None, alias="isActive"),
    limit: int = Query(10),
    offset: int = Query(0),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder"),
):
    """Search jurisdictions; every ``boundaryRelation`` code must be present."""
    criteria = JurisdictionSearchCriteria(
        tenant_id=tenant_id,
        ids=ids,
        employee_ids=employee_ids,
        boundary_relations=boundary_relation,
        is_active=is_active,
        limit=limit,
        offset=offset,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    jurisdictions, applied = await service.search(criteria)
    return list_envelope(jurisdictions, limit=applied.limit, offset=applied.offset)


@router.get("/{jurisdiction_id}")
async def get_jurisdiction(
    jurisdiction_id: uuid.UUID,
    tenant_id: str = Depends(get_tenant_id),
    service: JurisdictionService = Depends(get_jurisdiction_service),
):
    jurisdiction = await service.get(jurisdiction_id, tenant_id)
    return {
        "data": jurisdiction.model_dump(mode="json", by_alias=True),
        "message": "Jurisdiction retrieved successfully.",
    }


@router.put("/{jurisdiction_id}")
async def replace_jurisdiction(
    jurisdiction_id: uuid.UUID,
    body: JurisdictionUpdate,
    tenant_id: str = Depends(get_tenant_id),
    actor: str = Depends(get_actor),
    service: JurisdictionService = Depends(get_jurisdiction_service),
):
    jurisdiction = await service.replace(jurisdiction_id, body, tenant_id, actor)
    return {
        "data": jurisdiction.model_dump(mode="json", by_alias=True),
        "message": "Jurisdiction updated successfully.",
    }


@router.delete("/{jurisdiction_id}", status_code=204)
async def delete_jurisdiction(
    jurisdiction_id: uuid.UUID,
    tenant_id: str = Depends(get_tenant_id),
    actor: str = Depends(get_actor),
    service: JurisdictionService = Depends(get_jurisdiction_service),
):
    await service.delete(jurisdiction_id, tenant_id, actor)
    return Response(status_code=204)
