"""Generic filtering, sorting and JSON-containment utilities."""

from __future__ import annotations

import json
from typing import Any, Optional

from sqlalchemy import ColumnElement, Select, String, and_, cast, func
from sqlalchemy.orm import InstrumentedAttribute


# ── Sorting ─────────────────────────────────────────────────────────

def apply_sorting(
    query: Select,
    model: Any,
    column_name: str,
    *,
    descending: bool = False,
) -> Select:
    """Apply ORDER BY on a mapped column of *model*.

    Callers resolve *column_name* from an allow-list first; an unknown
    name is a programming error.
    """
    col = _get_column(model, column_name)
    if col is None:
        raise ValueError(f"{model.__name__} has no sortable column {column_name!r}")
    return query.order_by(col.desc() if descending else col.asc())


# ── Generic filtering ──────────────────────────────────────────────

def apply_filters(
    query: Select,
    model: Any,
    filters: dict[str, Any],
) -> Select:
    """
    Apply a dict of filter parameters to a SQLAlchemy ``Select``.

    Key suffixes determine the operator:

    ============  ==================
    Suffix        Operator
    ============  ==================
    (none)        ``==``
    ``__in``      ``IN (…)``
    ============  ==================

    ``None`` values and empty ``__in`` sequences are silently skipped.
    """
    conditions: list = []

    for key, value in filters.items():
        if value is None:
            continue

        if key.endswith("__in"):
            if not value:
                continue
            col = _get_column(model, key.removesuffix("__in"))
            if col is not None:
                conditions.append(col.in_(list(value)))

        else:
            col = _get_column(model, key)
            if col is not None:
                conditions.append(col == value)

    if conditions:
        query = query.where(and_(*conditions))

    return query


# ── Pagination ──────────────────────────────────────────────────────

def apply_limit_offset(query: Select, limit: int, offset: int) -> Select:
    """LIMIT only when positive, OFFSET only when positive."""
    if limit > 0:
        query = query.limit(limit)
    if offset > 0:
        query = query.offset(offset)
    return query


# ── JSON array containment ──────────────────────────────────────────

def json_array_contains(
    column: InstrumentedAttribute,
    value: str,
    dialect_name: str,
) -> ColumnElement[bool]:
    """Predicate: the JSON array stored in *column* has *value* as an element.

    PostgreSQL uses the JSONB ``@>`` operator. Other backends store the
    array as JSON text, so the match is done on the quoted element.
    """
    if dialect_name == "postgresql":
        from sqlalchemy.dialects.postgresql import JSONB

        return column.op("@>")(cast(json.dumps([value]), JSONB))
    return func.instr(cast(column, String), json.dumps(value)) > 0


# ── Internal helper ─────────────────────────────────────────────────

def _get_column(model: Any, name: str) -> Optional[InstrumentedAttribute]:
    """Safely retrieve a mapped column attribute by name."""
    return getattr(model, name, None)
