"""Jurisdiction data access — every query is scoped by tenant."""

from __future__ import annotations

import uuid
from typing import Any, Sequence

from sqlalchemy import and_, delete, select, update

from hrms.common.constants import (
    DEFAULT_SORT_COLUMN,
    JURISDICTION_SORT_FIELDS,
    SORT_DESC,
)
from hrms.common.exceptions import NotFoundException
from hrms.common.filters import (
    apply_filters,
    apply_limit_offset,
    apply_sorting,
    json_array_contains,
)
from hrms.common.repository import BaseRepository
from hrms.jurisdictions.models import Jurisdiction
from hrms.jurisdictions.schemas import JurisdictionSearchCriteria


class JurisdictionRepository(BaseRepository):
    """Persistence for ``eg_hrms_jurisdiction_v3``."""

    entity_name = "Jurisdiction"

    async def create(self, jurisdiction: Jurisdiction) -> Jurisdiction:
        async with self._operation(
            "create jurisdiction", tenant_id=jurisdiction.tenant_id,
        ) as session:
            session.add(jurisdiction)
        return jurisdiction

    async def update(
        self,
        jurisdiction_id: uuid.UUID,
        tenant_id: str,
        values: dict[str, Any],
    ) -> None:
        async with self._operation("update jurisdiction", tenant_id=tenant_id) as session:
            result = await session.execute(
                update(Jurisdiction)
                .where(
                    Jurisdiction.id == jurisdiction_id,
                    Jurisdiction.tenant_id == tenant_id,
                )
                .values(**values)
                .execution_options(synchronize_session=False)
            )
        if result.rowcount == 0:
            raise NotFoundException("Jurisdiction", jurisdiction_id)

    async def delete(self, jurisdiction_id: uuid.UUID, tenant_id: str) -> None:
        async with self._operation("delete jurisdiction", tenant_id=tenant_id) as session:
            result = await session.execute(
                delete(Jurisdiction)
                .where(
                    Jurisdiction.id == jurisdiction_id,
                    Jurisdiction.tenant_id == tenant_id,
                )
                .execution_options(synchronize_session=False)
            )
        if result.rowcount == 0:
            raise NotFoundException("Jurisdiction", jurisdiction_id)

    async def find_by_uuid(
        self,
        jurisdiction_id: uuid.UUID,
        tenant_id: str,
    ) -> Jurisdiction:
        async with self._operation(
            "find jurisdiction", tenant_id=tenant_id, flush=False,
        ) as session:
            result = await session.execute(
                select(Jurisdiction)
                .where(
                    Jurisdiction.id == jurisdiction_id,
                    Jurisdiction.tenant_id == tenant_id,
                )
                .execution_options(populate_existing=True)
            )
            jurisdiction = result.scalars().first()
        if jurisdiction is None:
            raise NotFoundException("Jurisdiction", jurisdiction_id)
        return jurisdiction

    async def find_by_employee(
        self,
        employee_id: uuid.UUID,
        tenant_id: str,
    ) -> Sequence[Jurisdiction]:
        async with self._operation(
            "list jurisdictions", tenant_id=tenant_id, flush=False,
        ) as session:
            result = await session.execute(
                select(Jurisdiction)
                .where(
                    Jurisdiction.employee_id == employee_id,
                    Jurisdiction.tenant_id == tenant_id,
                )
                .order_by(Jurisdiction.created_time.asc())
                .execution_options(populate_existing=True)
            )
            return result.scalars().all()

    async def search(self, criteria: JurisdictionSearchCriteria) -> Sequence[Jurisdiction]:
        """Filtered search; each boundary code narrows the match further."""
        query = select(Jurisdiction).where(Jurisdiction.tenant_id == criteria.tenant_id)
        query = apply_filters(
            query,
            Jurisdiction,
            {
                "id__in": criteria.ids,
                "employee_id__in": criteria.employee_ids,
                "is_active": criteria.is_active,
            },
        )
        if criteria.boundary_relations:
            dialect = self.dialect_name
            query = query.where(
                and_(
                    *(
                        json_array_contains(Jurisdiction.boundary_relation, code, dialect)
                        for code in criteria.boundary_relations
                    )
                )
            )
        column = (
            JURISDICTION_SORT_FIELDS[criteria.sort_by]
            if criteria.sort_by
            else DEFAULT_SORT_COLUMN
        )
        query = apply_sorting(
            query, Jurisdiction, column, descending=criteria.sort_order == SORT_DESC,
        )
        query = apply_limit_offset(query, criteria.limit, criteria.offset)

        async with self._operation(
            "search jurisdictions", tenant_id=criteria.tenant_id, flush=False,
        ) as session:
            result = await session.execute(
                query.execution_options(populate_existing=True)
            )
            return result.scalars().all()
