"""Jurisdiction module test suite — create, employee reference checks,
boundary-code search semantics, replace, delete and the HTTP API.
"""

from __future__ import annotations

import uuid

import httpx
import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.clients.boundary import BoundaryClient
from hrms.common.audit import list_audit_entries
from hrms.common.exceptions import NotFoundException, StorageException, ValidationException
from hrms.jurisdictions.models import Jurisdiction
from hrms.jurisdictions.schemas import (
    JurisdictionCreate,
    JurisdictionSearchCriteria,
    JurisdictionUpdate,
)
from hrms.jurisdictions.service import JurisdictionService
from tests.conftest import (
    OTHER_TENANT,
    TENANT,
    TENANT_HEADERS,
    _seed_employee,
    _seed_jurisdiction,
)

BASE = "/employees/v3/jurisdictions"


def _boundary_client(known: list[str]) -> BoundaryClient:
    def handler(request: httpx.Request) -> httpx.Response:
        asked = request.url.params["codes"].split(",")
        return httpx.Response(
            200, json=[{"code": c, "name": c.title()} for c in asked if c in known],
        )

    return BoundaryClient(base_url="http://boundary", transport=httpx.MockTransport(handler))


# ═════════════════════════════════════════════════════════════════════
# 1. CREATE — Service Layer
# ═════════════════════════════════════════════════════════════════════


class TestJurisdictionCreate:

    async def test_create_for_existing_employee(self, db: AsyncSession):
        emp = await _seed_employee(db)
        result = await JurisdictionService(db).create(
            JurisdictionCreate(employee_id=emp.id, boundary_relation=["PB", "PB.AMRITSAR"]),
            TENANT,
            "tester",
        )
        assert result.employee_id == emp.id
        assert result.boundary_relation == ["PB", "PB.AMRITSAR"]
        assert result.is_active is True
        assert result.created_by == "tester"

        entries = await list_audit_entries(
            db, tenant_id=TENANT, entity_type="jurisdiction", entity_id=result.id,
        )
        assert [e.action for e in entries] == ["create"]

    async def test_unknown_employee_is_not_found_and_nothing_persisted(self, db: AsyncSession):
        with pytest.raises(NotFoundException) as exc_info:
            await JurisdictionService(db).create(
                JurisdictionCreate(employee_id=uuid.uuid4(), boundary_relation=["PB"]),
                TENANT,
                "tester",
            )
        assert "employee not found" in exc_info.value.detail
        count = await db.scalar(select(func.count()).select_from(Jurisdiction))
        assert count == 0

    async def test_employee_of_other_tenant_is_not_found(self, db: AsyncSession):
        emp = await _seed_employee(db, tenant_id=OTHER_TENANT)
        with pytest.raises(NotFoundException):
            await JurisdictionService(db).create(
                JurisdictionCreate(employee_id=emp.id, boundary_relation=["PB"]),
                TENANT,
                "tester",
            )

    async def test_blank_boundary_code_rejected(self, db: AsyncSession):
        emp = await _seed_employee(db)
        with pytest.raises(ValidationException) as exc_info:
            await JurisdictionService(db).create(
                JurisdictionCreate(employee_id=emp.id, boundary_relation=["PB", " "]),
                TENANT,
                "tester",
            )
        assert exc_info.value.field == "boundaryRelation"

    async def test_boundary_validation_rejects_unknown_codes(self, db: AsyncSession):
        emp = await _seed_employee(db)
        service = JurisdictionService(db, boundary_client=_boundary_client(["PB"]))

        with pytest.raises(ValidationException) as exc_info:
            await service.create(
                JurisdictionCreate(employee_id=emp.id, boundary_relation=["PB", "XX"]),
                TENANT,
                "tester",
            )
        assert "XX" in exc_info.value.detail

        ok = await service.create(
            JurisdictionCreate(employee_id=emp.id, boundary_relation=["PB"]),
            TENANT,
            "tester",
        )
        assert ok.boundary_relation == ["PB"]

    async def test_boundary_service_failure_is_storage_error(self, db: AsyncSession):
        emp = await _seed_employee(db)
        failing = BoundaryClient(
            base_url="http://boundary",
            transport=httpx.MockTransport(lambda request: httpx.Response(503)),
        )
        with pytest.raises(StorageException) as exc_info:
            await JurisdictionService(db, boundary_client=failing).create(
                JurisdictionCreate(employee_id=emp.id, boundary_relation=["PB"]),
                TENANT,
                "tester",
            )
        assert exc_info.value.code == "BOUNDARY_SERVICE_ERROR"

    async def test_uses_injected_employee_lookup(self, db: AsyncSession):
        class AlwaysThere:
            async def exists(self, employee_id, tenant_id):
                return True

        emp = await _seed_employee(db)
        result = await JurisdictionService(db, employee_lookup=AlwaysThere()).create(
            JurisdictionCreate(employee_id=emp.id, boundary_relation=["PB"]),
            TENANT,
            "tester",
        )
        assert result.employee_id == emp.id


# ═════════════════════════════════════════════════════════════════════
# 2. SEARCH
# ═════════════════════════════════════════════════════════════════════


class TestJurisdictionSearch:

    async def test_each_boundary_code_narrows(self, db: AsyncSession):
        emp = await _seed_employee(db)
        both = await _seed_jurisdiction(db, emp.id, boundary_relation=["PB", "PB.AMRITSAR"])
        only_pb = await _seed_jurisdiction(db, emp.id, boundary_relation=["PB"])
        await _seed_jurisdiction(db, emp.id, boundary_relation=["HR"])

        service = JurisdictionService(db)
        results, _ = await service.search(
            JurisdictionSearchCriteria(tenant_id=TENANT, boundary_relations=["PB"]),
        )
        assert {r.id for r in results} == {both.id, only_pb.id}

        results, _ = await service.search(
            JurisdictionSearchCriteria(
                tenant_id=TENANT, boundary_relations=["PB", "PB.AMRITSAR"],
            ),
        )
        assert [r.id for r in results] == [both.id]

    async def test_code_match_is_whole_element(self, db: AsyncSession):
        emp = await _seed_employee(db)
        await _seed_jurisdiction(db, emp.id, boundary_relation=["PB.AMRITSAR"])

        results, _ = await JurisdictionService(db).search(
            JurisdictionSearchCriteria(tenant_id=TENANT, boundary_relations=["PB"]),
        )
        assert results == []

    async def test_filter_by_employee_and_active(self, db: AsyncSession):
        a = await _seed_employee(db, code="A-1")
        b = await _seed_employee(db, code="B-1")
        await _seed_jurisdiction(db, a.id)
        inactive = await _seed_jurisdiction(db, b.id, is_active=False)
        await _seed_jurisdiction(db, b.id)

        results, _ = await JurisdictionService(db).search(
            JurisdictionSearchCriteria(tenant_id=TENANT, employee_ids=[b.id], is_active=False),
        )
        assert [r.id for r in results] == [inactive.id]

    async def test_search_is_tenant_scoped(self, db: AsyncSession):
        mine = await _seed_employee(db, code="MINE")
        theirs = await _seed_employee(db, code="THEIRS", tenant_id=OTHER_TENANT)
        own = await _seed_jurisdiction(db, mine.id)
        await _seed_jurisdiction(db, theirs.id, tenant_id=OTHER_TENANT)

        results, _ = await JurisdictionService(db).search(
            JurisdictionSearchCriteria(tenant_id=TENANT),
        )
        assert [r.id for r in results] == [own.id]

    async def test_limit_below_one_uses_default(self, db: AsyncSession):
        emp = await _seed_employee(db)
        for _ in range(11):
            await _seed_jurisdiction(db, emp.id)

        results, applied = await JurisdictionService(db).search(
            JurisdictionSearchCriteria(tenant_id=TENANT, limit=0),
        )
        assert applied.limit == 10
        assert len(results) == 10

    async def test_unknown_sort_field_rejected(self, db: AsyncSession):
        with pytest.raises(ValidationException):
            await JurisdictionService(db).search(
                JurisdictionSearchCriteria(tenant_id=TENANT, sort_by="code"),
            )


# ═════════════════════════════════════════════════════════════════════
# 3. REPLACE / DELETE
# ═════════════════════════════════════════════════════════════════════


class TestJurisdictionReplaceDelete:

    async def test_replace_overwrites_supplied_fields(self, db: AsyncSession):
        emp = await _seed_employee(db)
        j = await _seed_jurisdiction(db, emp.id, boundary_relation=["PB"])

        result = await JurisdictionService(db).replace(
            j.id,
            JurisdictionUpdate(boundary_relation=["PB", "PB.JALANDHAR"]),
            TENANT,
            "editor",
        )
        assert result.boundary_relation == ["PB", "PB.JALANDHAR"]
        assert result.is_active is True
        assert result.employee_id == emp.id
        assert result.last_modified_by == "editor"

    async def test_replace_to_unknown_employee_is_not_found(self, db: AsyncSession):
        emp = await _seed_employee(db)
        j = await _seed_jurisdiction(db, emp.id)
        with pytest.raises(NotFoundException):
            await JurisdictionService(db).replace(
                j.id, JurisdictionUpdate(employee_id=uuid.uuid4()), TENANT, "editor",
            )

    async def test_replace_moves_to_other_employee(self, db: AsyncSession):
        a = await _seed_employee(db, code="A-1")
        b = await _seed_employee(db, code="B-1")
        j = await _seed_jurisdiction(db, a.id)

        result = await JurisdictionService(db).replace(
            j.id, JurisdictionUpdate(employee_id=b.id, is_active=False), TENANT, "editor",
        )
        assert result.employee_id == b.id
        assert result.is_active is False

    async def test_replace_unknown_is_not_found(self, db: AsyncSession):
        with pytest.raises(NotFoundException):
            await JurisdictionService(db).replace(
                uuid.uuid4(), JurisdictionUpdate(is_active=False), TENANT, "editor",
            )

    async def test_delete_removes_row(self, db: AsyncSession):
        emp = await _seed_employee(db)
        j = await _seed_jurisdiction(db, emp.id)
        service = JurisdictionService(db)

        await service.delete(j.id, TENANT, "editor")

        with pytest.raises(NotFoundException):
            await service.get(j.id, TENANT)
        entries = await list_audit_entries(
            db, tenant_id=TENANT, entity_type="jurisdiction", entity_id=j.id,
        )
        assert [e.action for e in entries] == ["delete"]


# ═════════════════════════════════════════════════════════════════════
# 4. HTTP API
# ═════════════════════════════════════════════════════════════════════


class TestJurisdictionAPI:

    async def test_collection_path_is_not_an_employee_id(self, client: AsyncClient):
        resp = await client.get(BASE, headers=TENANT_HEADERS)
        assert resp.status_code == 200
        assert resp.json() == {"data": [], "meta": {"limit": 10, "offset": 0, "count": 0}}

    async def test_create_get_replace_delete(self, client: AsyncClient, db: AsyncSession):
        emp = await _seed_employee(db)

        resp = await client.post(
            BASE,
            json={"employeeId": str(emp.id), "boundaryRelation": ["PB"]},
            headers=TENANT_HEADERS,
        )
        assert resp.status_code == 201
        created = resp.json()["data"]
        assert created["boundaryRelation"] == ["PB"]
        assert created["isActive"] is True

        resp = await client.get(f"{BASE}/{created['id']}", headers=TENANT_HEADERS)
        assert resp.status_code == 200
        assert resp.json()["data"]["employeeId"] == str(emp.id)

        resp = await client.put(
            f"{BASE}/{created['id']}",
            json={"boundaryRelation": ["PB", "PB.AMRITSAR"]},
            headers=TENANT_HEADERS,
        )
        assert resp.status_code == 200
        assert resp.json()["data"]["boundaryRelation"] == ["PB", "PB.AMRITSAR"]

        resp = await client.get(
            BASE,
            params=[("boundaryRelation", "PB"), ("boundaryRelation", "PB.AMRITSAR")],
            headers=TENANT_HEADERS,
        )
        assert [j["id"] for j in resp.json()["data"]] == [created["id"]]

        resp = await client.delete(f"{BASE}/{created['id']}", headers=TENANT_HEADERS)
        assert resp.status_code == 204
        resp = await client.get(f"{BASE}/{created['id']}", headers=TENANT_HEADERS)
        assert resp.status_code == 404

    async def test_create_for_unknown_employee_is_404(self, client: AsyncClient):
        resp = await client.post(
            BASE,
            json={"employeeId": str(uuid.uuid4()), "boundaryRelation": ["PB"]},
            headers=TENANT_HEADERS,
        )
        assert resp.status_code == 404
        assert "employee not found" in resp.json()["detail"]

    async def test_empty_boundary_relation_is_400(self, client: AsyncClient, db: AsyncSession):
        emp = await _seed_employee(db)
        resp = await client.post(
            BASE,
            json={"employeeId": str(emp.id), "boundaryRelation": []},
            headers=TENANT_HEADERS,
        )
        assert resp.status_code == 400
        assert resp.json()["code"] == "VALIDATION_ERROR"

    async def test_requires_tenant_header(self, client: AsyncClient):
        resp = await client.get(BASE)
        assert resp.status_code == 400
        assert resp.json()["code"] == "MISSING_HEADER"

    async def test_employee_delete_cascades(self, client: AsyncClient, db: AsyncSession):
        emp = await _seed_employee(db)
        j = await _seed_jurisdiction(db, emp.id)

        resp = await client.delete(f"/employees/v3/{emp.id}", headers=TENANT_HEADERS)
        assert resp.status_code == 204

        resp = await client.get(f"{BASE}/{j.id}", headers=TENANT_HEADERS)
        assert resp.status_code == 404
