"""
PURPOSE: Dialect-aware insert-if-absent helper.

Shopify delivers webhooks at least once, so create handlers insert with
ON CONFLICT DO NOTHING on the record's identity columns. PostgreSQL and
SQLite both support the clause but expose it through dialect-specific
insert constructs.

CALLED BY: services/*_service.py create() operations
"""

from typing import Any, Dict, Sequence, Type

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from shopsync.db.base import Base

_INSERT_BY_DIALECT = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


async def insert_if_absent(
    db: AsyncSession,
    model: Type[Base],
    values: Dict[str, Any],
    index_elements: Sequence[str],
) -> bool:
    """
    PURPOSE: Insert a row unless one already exists for the given unique columns.

    Does not commit; the caller owns the transaction.

    Args:
        db: Async database session.
        model: Mapped model class to insert into.
        values: Column values for the new row.
        index_elements: Column names forming the unique constraint.

    Returns:
        bool: True if a row was inserted, False if it already existed.

    Raises:
        NotImplementedError: If the bound database dialect has no ON CONFLICT support here.
    """
    dialect_name = db.bind.dialect.name
    insert_factory = _INSERT_BY_DIALECT.get(dialect_name)
    if insert_factory is None:
        raise NotImplementedError(f"insert_if_absent is not supported for dialect {dialect_name!r}")

    stmt = (
        insert_factory(model)
        .values(**values)
        .on_conflict_do_nothing(index_elements=list(index_elements))
        .returning(model.id)
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none() is not None
