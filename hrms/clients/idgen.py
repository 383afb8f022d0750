"""ID-generation service client.

Codes are requested one at a time from the remote naming service. Any
failure for a single item (disabled client, network error, non-200,
undecodable or empty body) degrades that item to a locally synthesised
``EMP-xxxxxxxx`` code; the batch as a whole never fails.
"""

from __future__ import annotations

import logging
import uuid
from typing import Optional

import httpx

from hrms.common.constants import FALLBACK_CODE_PREFIX, TENANT_HEADER
from hrms.config import settings

logger = logging.getLogger(__name__)


def fallback_code() -> str:
    """``EMP-`` followed by eight lowercase hex characters."""
    return f"{FALLBACK_CODE_PREFIX}{uuid.uuid4().hex[:8]}"


class IdGenClient:
    """Thin async wrapper around ``POST {IDGEN_HOST}{IDGEN_PATH}``."""

    def __init__(
        self,
        *,
        enabled: Optional[bool] = None,
        base_url: Optional[str] = None,
        path: Optional[str] = None,
        template_code: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.enabled = settings.IDGEN_ENABLED if enabled is None else enabled
        self.base_url = (base_url or settings.IDGEN_HOST).rstrip("/")
        self.path = path or settings.IDGEN_PATH
        self.template_code = template_code or settings.IDGEN_NAME
        self.timeout = timeout if timeout is not None else settings.IDGEN_TIMEOUT_SECONDS
        self._transport = transport

    async def generate_ids(
        self,
        tenant_id: str,
        count: int,
        custom_vars: Optional[dict[str, str]] = None,
    ) -> list[str]:
        """Return exactly *count* codes, remote where possible."""
        if count <= 0:
            return []

        if not self.enabled:
            logger.warning(
                "ID generation disabled, using %d fallback code(s) for tenant %s",
                count, tenant_id,
            )
            return [fallback_code() for _ in range(count)]

        variables = dict(custom_vars or {})
        variables.setdefault("ORG", tenant_id)

        codes: list[str] = []
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        ) as client:
            for _ in range(count):
                code = await self._generate_one(client, tenant_id, variables)
                codes.append(code or fallback_code())
        return codes

    async def _generate_one(
        self,
        client: httpx.AsyncClient,
        tenant_id: str,
        variables: dict[str, str],
    ) -> Optional[str]:
        try:
            resp = await client.post(
                self.path,
                json={"templateCode": self.template_code, "variables": variables},
                headers={TENANT_HEADER: tenant_id},
            )
        except httpx.HTTPError as exc:
            logger.error("ID generation call failed for tenant %s: %s", tenant_id, exc)
            return None

        if resp.status_code != 200:
            logger.error(
                "ID generation returned %d for tenant %s", resp.status_code, tenant_id,
            )
            return None

        try:
            body = resp.json()
        except ValueError:
            logger.error("ID generation returned a non-JSON body for tenant %s", tenant_id)
            return None

        generated = body.get("id") if isinstance(body, dict) else None
        if not generated:
            logger.error("ID generation returned no id for tenant %s", tenant_id)
            return None
        return str(generated)
