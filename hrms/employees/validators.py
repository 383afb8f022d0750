"""Employee request validation.

Each ``validate_*`` runs its rules in a fixed order and raises on the
first violation, so the reported error is deterministic.
"""

from __future__ import annotations

import uuid
from typing import Any, Optional

from email_validator import EmailNotValidError, validate_email

from hrms.common.constants import (
    CODE_MAX_LENGTH,
    CODE_MIN_LENGTH,
    EMPLOYEE_SORT_FIELDS,
    EMPLOYEE_STATUSES,
    EMPLOYEE_TYPES,
    PHONE_PATTERN,
    SORT_ORDERS,
)
from hrms.common.exceptions import DuplicateException, ValidationException
from hrms.common.pagination import normalize_limit_offset
from hrms.employees.repository import EmployeeRepository
from hrms.employees.schemas import (
    DeactivationDetails,
    EmployeeCreate,
    EmployeePatch,
    EmployeeSearchCriteria,
    ReactivationDetails,
)

# Columns that may not be cleared with an explicit null on PATCH.
NON_NULLABLE_PATCH_FIELDS: dict[str, str] = {
    "employee_type": "employeeType",
    "department": "department",
    "designation": "designation",
    "status": "status",
    "is_active": "isActive",
}


# ── Field rules ─────────────────────────────────────────────────────

def require_tenant(tenant_id: Optional[str]) -> None:
    if not tenant_id or not tenant_id.strip():
        raise ValidationException("tenantId is required", field="tenantId")


def require_value(value: Optional[str], field: str) -> None:
    if value is None or not value.strip():
        raise ValidationException(f"{field} is required", field=field)


def check_employee_type(value: str) -> None:
    if value not in EMPLOYEE_TYPES:
        raise ValidationException(
            f"employeeType must be one of {', '.join(sorted(EMPLOYEE_TYPES))}",
            field="employeeType",
        )


def check_status(value: str) -> None:
    if value not in EMPLOYEE_STATUSES:
        raise ValidationException(
            f"status must be one of {', '.join(sorted(EMPLOYEE_STATUSES))}",
            field="status",
        )


def check_code_length(code: str) -> None:
    if not CODE_MIN_LENGTH <= len(code) <= CODE_MAX_LENGTH:
        raise ValidationException(
            f"code must be between {CODE_MIN_LENGTH} and {CODE_MAX_LENGTH} characters",
            field="code",
        )


def check_phone(phone: Optional[str]) -> None:
    if phone and not PHONE_PATTERN.match(phone):
        raise ValidationException(
            "phone must be 10 digits starting with 6-9", field="phone",
        )


def check_email(email: Optional[str]) -> None:
    if not email:
        return
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValidationException("email must be a valid address", field="email") from exc


def check_boundary_relation(codes: list[str]) -> None:
    if not codes:
        raise ValidationException(
            "boundaryRelation must contain at least one code", field="boundaryRelation",
        )
    if any(not code or not code.strip() for code in codes):
        raise ValidationException(
            "boundaryRelation codes must not be blank", field="boundaryRelation",
        )


def check_sorting(
    sort_by: Optional[str],
    sort_order: Optional[str],
    allowed: dict[str, str],
) -> Optional[str]:
    """Validate sort parameters; return the normalised sort order."""
    if sort_by and sort_by not in allowed:
        raise ValidationException(
            f"sortBy must be one of {', '.join(allowed)}", field="sortBy",
        )
    if sort_order:
        sort_order = sort_order.lower()
        if sort_order not in SORT_ORDERS:
            raise ValidationException("sortOrder must be asc or desc", field="sortOrder")
    return sort_order


# ── Request validators ──────────────────────────────────────────────

class EmployeeValidator:
    """Validates employee requests; reads the repository for duplicate codes."""

    def __init__(self, repository: EmployeeRepository) -> None:
        self.repository = repository

    async def validate_create(
        self,
        request: EmployeeCreate,
        tenant_id: str,
        *,
        exclude_id: Optional[uuid.UUID] = None,
    ) -> None:
        """Rules for create and full update.

        ``exclude_id`` lets a full update keep its own code.
        """
        self.validate_create_shape(request, tenant_id)
        if request.code:
            await self.check_duplicate_code(request.code, tenant_id, exclude_id=exclude_id)

    @staticmethod
    def validate_create_shape(request: EmployeeCreate, tenant_id: str) -> None:
        """Every create rule that needs no database read."""
        require_tenant(tenant_id)
        require_value(request.employee_type, "employeeType")
        require_value(request.department, "department")
        require_value(request.designation, "designation")
        check_employee_type(request.employee_type)
        if request.code:
            check_code_length(request.code)
        check_phone(request.phone)
        check_email(request.email)
        for jurisdiction in request.jurisdictions:
            check_boundary_relation(jurisdiction.boundary_relation)

    async def validate_patch(
        self,
        patch: EmployeePatch,
        tenant_id: str,
        employee_id: uuid.UUID,
    ) -> dict[str, Any]:
        """Validate the present fields only and return them."""
        require_tenant(tenant_id)
        present = patch.present_fields()

        for name, wire_name in NON_NULLABLE_PATCH_FIELDS.items():
            if name in present and present[name] is None:
                raise ValidationException(f"{wire_name} cannot be null", field=wire_name)

        if "employee_type" in present:
            check_employee_type(present["employee_type"])
        if "status" in present:
            check_status(present["status"])
        if "phone" in present:
            check_phone(present["phone"])
        if "email" in present:
            check_email(present["email"])
        if present.get("code"):
            check_code_length(present["code"])
            await self.check_duplicate_code(
                present["code"], tenant_id, exclude_id=employee_id,
            )
        return present

    async def check_duplicate_code(
        self,
        code: str,
        tenant_id: str,
        *,
        exclude_id: Optional[uuid.UUID] = None,
    ) -> None:
        if await self.repository.employee_code_exists(
            code, tenant_id, exclude_id=exclude_id,
        ):
            raise DuplicateException("code", code)

    @staticmethod
    def validate_search(criteria: EmployeeSearchCriteria) -> EmployeeSearchCriteria:
        """Return a copy with limit, offset and sort order normalised."""
        require_tenant(criteria.tenant_id)
        sort_order = check_sorting(criteria.sort_by, criteria.sort_order, EMPLOYEE_SORT_FIELDS)
        limit, offset = normalize_limit_offset(criteria.limit, criteria.offset)
        return criteria.model_copy(
            update={"limit": limit, "offset": offset, "sort_order": sort_order},
        )

    @staticmethod
    def validate_deactivation(details: DeactivationDetails) -> None:
        require_value(details.reason_for_deactivation, "reasonForDeactivation")
        if details.effective_from is None:
            raise ValidationException("effectiveFrom is required", field="effectiveFrom")

    @staticmethod
    def validate_reactivation(details: ReactivationDetails) -> None:
        require_value(details.reason_for_reactivation, "reasonForReactivation")
        if details.effective_from is None:
            raise ValidationException("effectiveFrom is required", field="effectiveFrom")
