"""Enums and constants for the HRMS service.

Everything here is built once at import time and never mutated afterwards,
so it is safe to share between concurrent requests.
"""

from __future__ import annotations

import enum
import re


# ── Employee ────────────────────────────────────────────────────────

class EmployeeType(str, enum.Enum):
    PERMANENT = "PERMANENT"
    CONTRACT = "CONTRACT"
    TEMPORARY = "TEMPORARY"


class EmployeeStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED"


EMPLOYEE_TYPES: frozenset[str] = frozenset(t.value for t in EmployeeType)
EMPLOYEE_STATUSES: frozenset[str] = frozenset(s.value for s in EmployeeStatus)

CODE_MIN_LENGTH = 2
CODE_MAX_LENGTH = 64

# 10 digits, first digit 6-9
PHONE_PATTERN = re.compile(r"^[6-9][0-9]{9}$")


# ── Search ──────────────────────────────────────────────────────────

SORT_ASC = "asc"
SORT_DESC = "desc"
SORT_ORDERS: frozenset[str] = frozenset({SORT_ASC, SORT_DESC})

# API sort key → mapped column attribute name
EMPLOYEE_SORT_FIELDS: dict[str, str] = {
    "code": "code",
    "createdAt": "created_time",
    "updatedAt": "last_modified_time",
    "employeeType": "employee_type",
    "status": "status",
}

JURISDICTION_SORT_FIELDS: dict[str, str] = {
    "createdAt": "created_time",
    "updatedAt": "last_modified_time",
    "employeeId": "employee_id",
}

DEFAULT_SORT_COLUMN = "created_time"


# ── Identifiers / headers ───────────────────────────────────────────

FALLBACK_CODE_PREFIX = "EMP-"
TENANT_HEADER = "X-Tenant-ID"
CLIENT_HEADER = "X-Client-ID"
SYSTEM_ACTOR = "system"


# ── Audit ───────────────────────────────────────────────────────────

class AuditAction(str, enum.Enum):
    create = "create"
    update = "update"
    patch = "patch"
    deactivate = "deactivate"
    reactivate = "reactivate"
    delete = "delete"
