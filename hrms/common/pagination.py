"""Search envelope models and the limit/offset normalisation shared by searches."""


from typing import Any, Sequence

from pydantic import BaseModel

from hrms.config import settings


# ── Normalisation ───────────────────────────────────────────────────

def normalize_limit_offset(limit: int, offset: int) -> tuple[int, int]:
    """``limit < 1`` → configured default; negative ``offset`` → 0."""
    if limit < 1:
        limit = settings.DEFAULT_SEARCH_LIMIT
    if offset < 0:
        offset = 0
    return limit, offset


# ── Pydantic response models ───────────────────────────────────────

class ListMeta(BaseModel):
    """Metadata block embedded in every search response."""

    limit: int
    offset: int
    count: int


def list_envelope(items: Sequence[Any], *, limit: int, offset: int) -> dict[str, Any]:
    """Serialise *items* (pydantic models) into the search envelope."""
    return {
        "data": [item.model_dump(mode="json", by_alias=True) for item in items],
        "meta": ListMeta(limit=limit, offset=offset, count=len(items)).model_dump(),
    }
