"""Validation rule tests, independent of the HTTP layer."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.common.constants import EMPLOYEE_SORT_FIELDS
from hrms.common.exceptions import DuplicateException, ValidationException
from hrms.employees.repository import EmployeeRepository
from hrms.employees.schemas import (
    DeactivationDetails,
    EmployeeCreate,
    EmployeePatch,
    EmployeeSearchCriteria,
    ReactivationDetails,
)
from hrms.employees.validators import (
    EmployeeValidator,
    check_boundary_relation,
    check_email,
    check_phone,
    check_sorting,
    require_tenant,
)
from hrms.jurisdictions import validators as jurisdiction_validators
from hrms.jurisdictions.schemas import JurisdictionSearchCriteria, JurisdictionUpdate
from tests.conftest import TENANT, _seed_employee

EFFECTIVE = datetime(2024, 4, 1, tzinfo=timezone.utc)


def _create(**fields) -> EmployeeCreate:
    base = {"employeeType": "PERMANENT", "department": "D1", "designation": "DESG1"}
    base.update(fields)
    return EmployeeCreate.model_validate(base)


class TestFieldRules:

    @pytest.mark.parametrize("tenant", ["", "   ", None])
    def test_tenant_required(self, tenant):
        with pytest.raises(ValidationException) as exc_info:
            require_tenant(tenant)
        assert exc_info.value.field == "tenantId"

    @pytest.mark.parametrize("phone", ["9876543210", "6000000000", "", None])
    def test_phone_accepted(self, phone):
        check_phone(phone)

    @pytest.mark.parametrize("phone", ["5876543210", "98765", "98765432101", "98765abcde"])
    def test_phone_rejected(self, phone):
        with pytest.raises(ValidationException):
            check_phone(phone)

    @pytest.mark.parametrize("email", ["a.b@example.org", "", None])
    def test_email_accepted(self, email):
        check_email(email)

    @pytest.mark.parametrize("email", ["plain", "a@b", "@example.org", "a..b@example.org"])
    def test_email_rejected(self, email):
        with pytest.raises(ValidationException):
            check_email(email)

    @pytest.mark.parametrize("codes", [[], ["PB", ""], ["  "]])
    def test_boundary_relation_rejected(self, codes):
        with pytest.raises(ValidationException) as exc_info:
            check_boundary_relation(codes)
        assert exc_info.value.field == "boundaryRelation"


class TestCheckSorting:

    def test_order_normalised(self):
        assert check_sorting("code", "DESC", EMPLOYEE_SORT_FIELDS) == "desc"
        assert check_sorting(None, None, EMPLOYEE_SORT_FIELDS) is None

    def test_unknown_field(self):
        with pytest.raises(ValidationException) as exc_info:
            check_sorting("salary", None, EMPLOYEE_SORT_FIELDS)
        assert exc_info.value.field == "sortBy"

    def test_unknown_order(self):
        with pytest.raises(ValidationException) as exc_info:
            check_sorting("code", "sideways", EMPLOYEE_SORT_FIELDS)
        assert exc_info.value.field == "sortOrder"


class TestCreateShape:

    def test_first_violation_wins(self):
        request = _create(employeeType=None, department=None, phone="1")
        with pytest.raises(ValidationException) as exc_info:
            EmployeeValidator.validate_create_shape(request, TENANT)
        assert exc_info.value.field == "employeeType"

    def test_code_length(self):
        with pytest.raises(ValidationException) as exc_info:
            EmployeeValidator.validate_create_shape(_create(code="X"), TENANT)
        assert exc_info.value.field == "code"

    def test_no_code_is_fine(self):
        EmployeeValidator.validate_create_shape(_create(), TENANT)


class TestEmployeeValidator:

    async def test_duplicate_code_excluding_self(self, db: AsyncSession):
        emp = await _seed_employee(db, code="EMP-1")
        validator = EmployeeValidator(EmployeeRepository(db))

        with pytest.raises(DuplicateException):
            await validator.validate_create(_create(code="EMP-1"), TENANT)
        await validator.validate_create(_create(code="EMP-1"), TENANT, exclude_id=emp.id)

    async def test_patch_returns_present_fields(self, db: AsyncSession):
        validator = EmployeeValidator(EmployeeRepository(db))
        patch = EmployeePatch.model_validate({"department": "D9", "phone": None})

        present = await validator.validate_patch(patch, TENANT, uuid.uuid4())
        assert present == {"department": "D9", "phone": None}

    @pytest.mark.parametrize(
        "body, field",
        [
            ({"status": None}, "status"),
            ({"isActive": None}, "isActive"),
            ({"status": "RETIRED"}, "status"),
            ({"employeeType": "INTERN"}, "employeeType"),
            ({"code": "X"}, "code"),
        ],
    )
    async def test_patch_rejections(self, db: AsyncSession, body, field):
        validator = EmployeeValidator(EmployeeRepository(db))
        with pytest.raises(ValidationException) as exc_info:
            await validator.validate_patch(EmployeePatch.model_validate(body), TENANT, uuid.uuid4())
        assert exc_info.value.field == field

    def test_search_normalised(self):
        criteria = EmployeeSearchCriteria(tenant_id=TENANT, limit=0, offset=-3, sort_order="ASC")
        normalised = EmployeeValidator.validate_search(criteria)
        assert (normalised.limit, normalised.offset, normalised.sort_order) == (10, 0, "asc")
        assert criteria.limit == 0

    def test_deactivation_rules(self):
        with pytest.raises(ValidationException) as exc_info:
            EmployeeValidator.validate_deactivation(DeactivationDetails(effective_from=EFFECTIVE))
        assert exc_info.value.field == "reasonForDeactivation"

        with pytest.raises(ValidationException) as exc_info:
            EmployeeValidator.validate_deactivation(
                DeactivationDetails(reason_for_deactivation="RETIRED"),
            )
        assert exc_info.value.field == "effectiveFrom"

    def test_reactivation_rules(self):
        with pytest.raises(ValidationException) as exc_info:
            EmployeeValidator.validate_reactivation(ReactivationDetails(reason_for_reactivation=" "))
        assert exc_info.value.field == "reasonForReactivation"

        EmployeeValidator.validate_reactivation(
            ReactivationDetails(reason_for_reactivation="RETURNED", effective_from=EFFECTIVE),
        )


class TestJurisdictionValidators:

    def test_update_without_relation_passes(self):
        jurisdiction_validators.validate_update(JurisdictionUpdate(is_active=False), TENANT)

    def test_update_requires_tenant(self):
        with pytest.raises(ValidationException):
            jurisdiction_validators.validate_update(JurisdictionUpdate(), "")

    def test_search_sort_fields(self):
        criteria = JurisdictionSearchCriteria(tenant_id=TENANT, sort_by="employeeId")
        assert jurisdiction_validators.validate_search(criteria).limit == 10

        with pytest.raises(ValidationException):
            jurisdiction_validators.validate_search(
                JurisdictionSearchCriteria(tenant_id=TENANT, sort_by="code"),
            )
