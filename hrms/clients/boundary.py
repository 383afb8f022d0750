"""Boundary service client: look up boundary records by code."""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

import httpx

from hrms.common.constants import TENANT_HEADER
from hrms.common.exceptions import StorageException
from hrms.config import settings

logger = logging.getLogger(__name__)

BOUNDARY_SEARCH_PATH = "/boundary/v1"


class BoundaryClient:
    """``GET {BOUNDARY_HOST}/boundary/v1?codes=a,b`` → ``[{"code", "name"}, ...]``."""

    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or settings.BOUNDARY_HOST).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.BOUNDARY_TIMEOUT_SECONDS
        self._transport = transport

    async def search_by_codes(
        self,
        tenant_id: str,
        codes: Sequence[str],
    ) -> list[dict[str, Any]]:
        """Return the boundary records known for *codes*.

        Raises:
            StorageException: ``BOUNDARY_SERVICE_ERROR`` on any transport,
                status or decoding failure.
        """
        if not codes:
            return []

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                resp = await client.get(
                    BOUNDARY_SEARCH_PATH,
                    params={"codes": ",".join(codes)},
                    headers={TENANT_HEADER: tenant_id},
                )
                resp.raise_for_status()
                body = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Boundary lookup failed for tenant %s: %s", tenant_id, exc)
            raise StorageException(
                "look up boundaries", code="BOUNDARY_SERVICE_ERROR",
            ) from exc

        if not isinstance(body, list):
            logger.error("Boundary lookup returned a non-list body for tenant %s", tenant_id)
            raise StorageException("look up boundaries", code="BOUNDARY_SERVICE_ERROR")
        return [item for item in body if isinstance(item, dict)]
