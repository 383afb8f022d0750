"""Employee pydantic v2 schemas — request / response validation.

Naming conventions:
  - *Create / *Patch → request bodies (write)
  - *Response        → response bodies (read)
  - *Details         → lifecycle transition payloads

Field formats (enumerations, phone, email, code length) are checked by
``hrms.employees.validators`` so that rule order and error codes stay
under our control; the schemas only fix shapes and types.
"""


import uuid
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from hrms.common.schemas import AuditedResponse, CamelModel
from hrms.jurisdictions.schemas import JurisdictionInline, JurisdictionResponse


# ═════════════════════════════════════════════════════════════════════
# Employee — write schemas
# ═════════════════════════════════════════════════════════════════════


class EmployeeCreate(CamelModel):
    """Payload for creating (or fully replacing) an employee."""

    code: Optional[str] = None
    user_id: Optional[str] = None
    individual_id: Optional[str] = None
    employee_type: Optional[str] = None
    department: Optional[str] = None
    designation: Optional[str] = None
    date_of_appointment: Optional[datetime] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    is_active: Optional[bool] = None
    jurisdictions: list[JurisdictionInline] = Field(default_factory=list)


class EmployeePatch(CamelModel):
    """Partial-update payload.

    Every field has three states: absent (not in ``model_fields_set``),
    present with a value, or present as an explicit ``null``. Only
    present fields are validated and written.

    A present empty string is written as given, except for ``code``: an
    empty code is stored as ``null`` so employees without a code never
    collide on the ``(code, tenant_id)`` unique key.
    """

    code: Optional[str] = None
    user_id: Optional[str] = None
    individual_id: Optional[str] = None
    employee_type: Optional[str] = None
    status: Optional[str] = None
    department: Optional[str] = None
    designation: Optional[str] = None
    date_of_appointment: Optional[datetime] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    is_active: Optional[bool] = None

    def present_fields(self) -> dict[str, Any]:
        """Fields supplied by the caller, including explicit nulls."""
        return self.model_dump(exclude_unset=True)


class DeactivationDetails(CamelModel):
    reason_for_deactivation: Optional[str] = None
    effective_from: Optional[datetime] = None
    remarks: Optional[str] = None


class ReactivationDetails(CamelModel):
    reason_for_reactivation: Optional[str] = None
    effective_from: Optional[datetime] = None
    remarks: Optional[str] = None


# ═════════════════════════════════════════════════════════════════════
# Employee — read schemas
# ═════════════════════════════════════════════════════════════════════


class EmployeeResponse(AuditedResponse):
    """Full employee projection, jurisdictions included."""

    id: uuid.UUID
    code: Optional[str] = None
    user_id: Optional[str] = None
    individual_id: Optional[str] = None
    employee_type: str
    status: str
    department: str
    designation: str
    date_of_appointment: Optional[datetime] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    is_active: bool
    tenant_id: str
    jurisdictions: list[JurisdictionResponse] = Field(default_factory=list)


# ═════════════════════════════════════════════════════════════════════
# Search
# ═════════════════════════════════════════════════════════════════════


class EmployeeSearchCriteria(BaseModel):
    """Search filters; ``tenant_id`` always scopes the query."""

    tenant_id: str
    ids: list[uuid.UUID] = Field(default_factory=list)
    codes: list[str] = Field(default_factory=list)
    departments: list[str] = Field(default_factory=list)
    designations: list[str] = Field(default_factory=list)
    phone: Optional[str] = None
    is_active: Optional[bool] = None
    limit: int = 10
    offset: int = 0
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None
