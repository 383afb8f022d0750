"""Shared repository plumbing: session handle and database-error mapping."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, NoReturn, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.common.exceptions import DuplicateException, StorageException

# Constraint name (PostgreSQL) / column list (SQLite) that identify a
# duplicate employee code in an IntegrityError message.
_CODE_CONSTRAINT_MARKERS = ("uk_employee_code_tenant", "eg_hrms_employee_v3.code")


class BaseRepository:
    """Base for tenant-scoped repositories.

    The repository never commits or rolls back: the request-scoped session
    from ``get_db`` owns the transaction. Writes are flushed inside
    ``_operation`` so constraint violations surface at the call site.
    """

    entity_name = "entity"

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    def dialect_name(self) -> str:
        return self.session.get_bind().dialect.name

    @asynccontextmanager
    async def _operation(
        self,
        operation_name: str,
        *,
        tenant_id: Optional[str] = None,
        flush: bool = True,
        **context: Any,
    ) -> AsyncIterator[AsyncSession]:
        try:
            yield self.session
            if flush:
                await self.session.flush()
        except SQLAlchemyError as exc:
            self._handle_db_error(exc, operation_name, tenant_id=tenant_id, **context)

    def _handle_db_error(
        self,
        exc: SQLAlchemyError,
        operation_name: str,
        *,
        tenant_id: Optional[str] = None,
        **context: Any,
    ) -> NoReturn:
        """Map a SQLAlchemy failure onto the application exception hierarchy.

        A unique violation on the employee code constraint becomes a
        ``DuplicateException``; everything else is a ``StorageException``
        naming the operation, with the original error chained.
        """
        if isinstance(exc, IntegrityError):
            message = str(exc.orig).lower() if exc.orig is not None else str(exc).lower()
            if any(marker in message for marker in _CODE_CONSTRAINT_MARKERS):
                self.logger.info(
                    "Duplicate %s code in %s (tenant=%s)",
                    self.entity_name, operation_name, tenant_id,
                )
                raise DuplicateException("code", context.get("code", "")) from exc

        self.logger.error(
            "Database error in %s (tenant=%s): %s", operation_name, tenant_id, exc,
        )
        raise StorageException(operation_name) from exc
