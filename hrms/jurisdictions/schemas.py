"""Jurisdiction pydantic v2 schemas — request / response validation.

Naming conventions:
  - *Create / *Update / *Inline → request bodies (write)
  - *Response                    → response bodies (read)
  - *SearchCriteria              → internal search input
"""

import uuid
from typing import Optional

from pydantic import BaseModel, Field

from hrms.common.schemas import AuditedResponse, CamelModel


# ═════════════════════════════════════════════════════════════════════
# Write schemas
# ═════════════════════════════════════════════════════════════════════


class JurisdictionInline(CamelModel):
    """Jurisdiction embedded in an employee create request."""

    boundary_relation: list[str] = Field(..., min_length=1)
    is_active: Optional[bool] = None


class JurisdictionCreate(JurisdictionInline):
    """Payload for creating a jurisdiction for an existing employee."""

    employee_id: uuid.UUID


class JurisdictionUpdate(CamelModel):
    """Replace payload; absent fields keep their stored value."""

    employee_id: Optional[uuid.UUID] = None
    boundary_relation: Optional[list[str]] = Field(None, min_length=1)
    is_active: Optional[bool] = None


# ═════════════════════════════════════════════════════════════════════
# Read schemas
# ═════════════════════════════════════════════════════════════════════


class JurisdictionResponse(AuditedResponse):
    """Full jurisdiction projection."""

    id: uuid.UUID
    employee_id: uuid.UUID
    boundary_relation: list[str]
    is_active: bool
    tenant_id: str


# ═════════════════════════════════════════════════════════════════════
# Search
# ═════════════════════════════════════════════════════════════════════


class JurisdictionSearchCriteria(BaseModel):
    """Search filters; every non-empty filter narrows the result."""

    tenant_id: str
    ids: list[uuid.UUID] = Field(default_factory=list)
    employee_ids: list[uuid.UUID] = Field(default_factory=list)
    # Each code adds its own containment predicate, combined with AND.
    boundary_relations: list[str] = Field(default_factory=list)
    is_active: Optional[bool] = None
    limit: int = 10
    offset: int = 0
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None
