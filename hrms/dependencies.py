"""Shared FastAPI dependencies: request headers, collaborator clients, services."""

from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.clients.boundary import BoundaryClient
from hrms.clients.idgen import IdGenClient
from hrms.common.constants import CLIENT_HEADER, SYSTEM_ACTOR, TENANT_HEADER
from hrms.common.exceptions import MissingHeaderException
from hrms.config import settings
from hrms.database import get_db
from hrms.employees.service import EmployeeService
from hrms.jurisdictions.service import JurisdictionService


async def get_tenant_id(
    tenant_id: Optional[str] = Header(None, alias=TENANT_HEADER),
) -> str:
    """The tenant every query is scoped to; required on all API routes."""
    if tenant_id is None or not tenant_id.strip():
        raise MissingHeaderException(TENANT_HEADER)
    return tenant_id.strip()


async def get_actor(
    client_id: Optional[str] = Header(None, alias=CLIENT_HEADER),
) -> str:
    """Who is making the change, recorded in the audit columns."""
    if client_id is None or not client_id.strip():
        return SYSTEM_ACTOR
    return client_id.strip()


def get_idgen_client() -> IdGenClient:
    return IdGenClient()


def get_boundary_client() -> Optional[BoundaryClient]:
    """``None`` while boundary validation is switched off."""
    if not settings.BOUNDARY_VALIDATION_ENABLED:
        return None
    return BoundaryClient()


def get_employee_service(
    db: AsyncSession = Depends(get_db),
    idgen_client: IdGenClient = Depends(get_idgen_client),
    boundary_client: Optional[BoundaryClient] = Depends(get_boundary_client),
) -> EmployeeService:
    return EmployeeService(db, idgen_client=idgen_client, boundary_client=boundary_client)


def get_jurisdiction_service(
    db: AsyncSession = Depends(get_db),
    boundary_client: Optional[BoundaryClient] = Depends(get_boundary_client),
) -> JurisdictionService:
    return JurisdictionService(db, boundary_client=boundary_client)
