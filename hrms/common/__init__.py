"""Common module — shared utilities for the HRMS service."""

from hrms.common.audit import AuditMixin, AuditTrail, create_audit_entry, now_millis
from hrms.common.constants import AuditAction, EmployeeStatus, EmployeeType
from hrms.common.exceptions import (
    AppException,
    DuplicateException,
    InternalException,
    InvalidStateTransitionException,
    MissingHeaderException,
    NotFoundException,
    StorageException,
    ValidationException,
    register_exception_handlers,
)
from hrms.common.filters import (
    apply_filters,
    apply_limit_offset,
    apply_sorting,
    json_array_contains,
)
from hrms.common.pagination import ListMeta, list_envelope, normalize_limit_offset

__all__ = [
    # Audit
    "AuditMixin",
    "AuditTrail",
    "create_audit_entry",
    "now_millis",
    # Constants / Enums
    "AuditAction",
    "EmployeeStatus",
    "EmployeeType",
    # Exceptions
    "AppException",
    "DuplicateException",
    "InternalException",
    "InvalidStateTransitionException",
    "MissingHeaderException",
    "NotFoundException",
    "StorageException",
    "ValidationException",
    "register_exception_handlers",
    # Filters
    "apply_filters",
    "apply_limit_offset",
    "apply_sorting",
    "json_array_contains",
    # Pagination
    "ListMeta",
    "list_envelope",
    "normalize_limit_offset",
]
