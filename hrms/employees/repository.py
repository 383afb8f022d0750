"""Employee data access — every query is scoped by tenant."""

from __future__ import annotations

import uuid
from typing import Any, Optional, Sequence

from sqlalchemy import delete, exists, select, update

from hrms.common.constants import (
    DEFAULT_SORT_COLUMN,
    EMPLOYEE_SORT_FIELDS,
    SORT_DESC,
)
from hrms.common.exceptions import NotFoundException
from hrms.common.filters import apply_filters, apply_limit_offset, apply_sorting
from hrms.common.repository import BaseRepository
from hrms.employees.models import Employee
from hrms.employees.schemas import EmployeeSearchCriteria
from hrms.jurisdictions.models import Jurisdiction


class EmployeeRepository(BaseRepository):
    """Persistence for ``eg_hrms_employee_v3``.

    Identifiers and audit columns are assigned by the service before any
    write reaches this class.
    """

    entity_name = "Employee"

    # ── Writes ──────────────────────────────────────────────────────

    async def create(self, employee: Employee) -> Employee:
        async with self._operation(
            "create employee", tenant_id=employee.tenant_id, code=employee.code,
        ) as session:
            session.add(employee)
        return employee

    async def create_many(self, employees: Sequence[Employee]) -> Sequence[Employee]:
        """Insert a whole batch in one flush."""
        if not employees:
            return employees
        first = employees[0]
        async with self._operation(
            "create employees",
            tenant_id=first.tenant_id,
            code=", ".join(e.code for e in employees if e.code),
        ) as session:
            session.add_all(employees)
        return employees

    async def update(
        self,
        employee_id: uuid.UUID,
        tenant_id: str,
        values: dict[str, Any],
    ) -> None:
        """Write *values* onto one row; ``NotFoundException`` if none matched."""
        async with self._operation(
            "update employee", tenant_id=tenant_id, code=values.get("code"),
        ) as session:
            result = await session.execute(
                update(Employee)
                .where(Employee.id == employee_id, Employee.tenant_id == tenant_id)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
        if result.rowcount == 0:
            raise NotFoundException("Employee", employee_id)

    async def update_is_active(
        self,
        employee_id: uuid.UUID,
        tenant_id: str,
        is_active: bool,
        *,
        modified_by: str,
        modified_time: int,
    ) -> None:
        await self.update(
            employee_id,
            tenant_id,
            {
                "is_active": is_active,
                "last_modified_by": modified_by,
                "last_modified_time": modified_time,
            },
        )

    async def update_status(
        self,
        employee_id: uuid.UUID,
        tenant_id: str,
        status: str,
        *,
        modified_by: str,
        modified_time: int,
    ) -> None:
        await self.update(
            employee_id,
            tenant_id,
            {
                "status": status,
                "last_modified_by": modified_by,
                "last_modified_time": modified_time,
            },
        )

    async def delete(self, employee_id: uuid.UUID, tenant_id: str) -> None:
        """Hard delete; dependent jurisdictions go first."""
        async with self._operation("delete employee", tenant_id=tenant_id) as session:
            await session.execute(
                delete(Jurisdiction)
                .where(
                    Jurisdiction.employee_id == employee_id,
                    Jurisdiction.tenant_id == tenant_id,
                )
                .execution_options(synchronize_session=False)
            )
            result = await session.execute(
                delete(Employee)
                .where(Employee.id == employee_id, Employee.tenant_id == tenant_id)
                .execution_options(synchronize_session=False)
            )
        if result.rowcount == 0:
            raise NotFoundException("Employee", employee_id)

    # ── Reads ───────────────────────────────────────────────────────

    async def find_by_uuid(self, employee_id: uuid.UUID, tenant_id: str) -> Employee:
        async with self._operation(
            "find employee", tenant_id=tenant_id, flush=False,
        ) as session:
            result = await session.execute(
                select(Employee)
                .where(Employee.id == employee_id, Employee.tenant_id == tenant_id)
                .execution_options(populate_existing=True)
            )
            employee = result.scalars().first()
        if employee is None:
            raise NotFoundException("Employee", employee_id)
        return employee

    async def find_by_code(self, code: str, tenant_id: str) -> Employee:
        async with self._operation(
            "find employee", tenant_id=tenant_id, flush=False,
        ) as session:
            result = await session.execute(
                select(Employee)
                .where(Employee.code == code, Employee.tenant_id == tenant_id)
                .execution_options(populate_existing=True)
            )
            employee = result.scalars().first()
        if employee is None:
            raise NotFoundException("Employee", code)
        return employee

    async def exists(self, employee_id: uuid.UUID, tenant_id: str) -> bool:
        async with self._operation(
            "check employee", tenant_id=tenant_id, flush=False,
        ) as session:
            result = await session.execute(
                select(
                    exists().where(
                        Employee.id == employee_id, Employee.tenant_id == tenant_id,
                    )
                )
            )
            return bool(result.scalar())

    async def employee_code_exists(
        self,
        code: str,
        tenant_id: str,
        *,
        exclude_id: Optional[uuid.UUID] = None,
    ) -> bool:
        """True when another row in the tenant already uses *code*."""
        condition = [Employee.code == code, Employee.tenant_id == tenant_id]
        if exclude_id is not None:
            condition.append(Employee.id != exclude_id)
        async with self._operation(
            "check employee code", tenant_id=tenant_id, flush=False,
        ) as session:
            result = await session.execute(select(exists().where(*condition)))
            return bool(result.scalar())

    async def search(self, criteria: EmployeeSearchCriteria) -> Sequence[Employee]:
        """Filtered, sorted, paginated search. Never raises on zero matches."""
        query = select(Employee).where(Employee.tenant_id == criteria.tenant_id)
        query = apply_filters(
            query,
            Employee,
            {
                "id__in": criteria.ids,
                "code__in": criteria.codes,
                "department__in": criteria.departments,
                "designation__in": criteria.designations,
                "phone": criteria.phone,
                "is_active": criteria.is_active,
            },
        )
        column = (
            EMPLOYEE_SORT_FIELDS[criteria.sort_by]
            if criteria.sort_by
            else DEFAULT_SORT_COLUMN
        )
        query = apply_sorting(
            query, Employee, column, descending=criteria.sort_order == SORT_DESC,
        )
        query = apply_limit_offset(query, criteria.limit, criteria.offset)

        async with self._operation(
            "search employees", tenant_id=criteria.tenant_id, flush=False,
        ) as session:
            result = await session.execute(
                query.execution_options(populate_existing=True)
            )
            return result.scalars().all()
