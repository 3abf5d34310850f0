"""Dialect-specific INSERT ... ON CONFLICT DO UPDATE builder."""

from __future__ import annotations

from typing import Any, Dict, Sequence

from sqlalchemy.dialects import postgresql, sqlite


def build_upsert(
    dialect_name: str,
    model: Any,
    values: Dict[str, Any],
    index_elements: Sequence[str],
    update_columns: Sequence[str],
):
    """
    Build a single-statement upsert for ``model``.

    On conflict over ``index_elements`` only ``update_columns`` are overwritten
    (with the values that were proposed for insert); every other column keeps
    its stored value. The statement returns the resulting row.
    """
    if dialect_name == "sqlite":
        insert = sqlite.insert
    elif dialect_name == "postgresql":
        insert = postgresql.insert
    else:
        raise ValueError(f"Upsert is not supported on dialect {dialect_name!r}")

    stmt = insert(model).values(**values)
    stmt = stmt.on_conflict_do_update(
        index_elements=list(index_elements),
        set_={column: stmt.excluded[column] for column in update_columns},
    )
    return stmt.returning(model).execution_options(populate_existing=True)
