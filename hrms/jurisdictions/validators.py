"""Jurisdiction request validation."""

from __future__ import annotations

from hrms.common.constants import JURISDICTION_SORT_FIELDS
from hrms.common.pagination import normalize_limit_offset
from hrms.employees.validators import check_boundary_relation, check_sorting, require_tenant
from hrms.jurisdictions.schemas import (
    JurisdictionCreate,
    JurisdictionSearchCriteria,
    JurisdictionUpdate,
)


def validate_create(request: JurisdictionCreate, tenant_id: str) -> None:
    require_tenant(tenant_id)
    check_boundary_relation(request.boundary_relation)


def validate_update(request: JurisdictionUpdate, tenant_id: str) -> None:
    require_tenant(tenant_id)
    if request.boundary_relation is not None:
        check_boundary_relation(request.boundary_relation)


def validate_search(criteria: JurisdictionSearchCriteria) -> JurisdictionSearchCriteria:
    """Return a copy with limit, offset and sort order normalised."""
    require_tenant(criteria.tenant_id)
    sort_order = check_sorting(
        criteria.sort_by, criteria.sort_order, JURISDICTION_SORT_FIELDS,
    )
    limit, offset = normalize_limit_offset(criteria.limit, criteria.offset)
    return criteria.model_copy(
        update={"limit": limit, "offset": offset, "sort_order": sort_order},
    )
