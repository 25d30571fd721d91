"""
Query capability interface used by the storage layer.

`QueryClient` names exactly the operations the storage facade needs
(filtered/ordered/limited selects, a left join to the author, and
insert/update/delete with returning). `SqlAlchemyQueryClient` implements it
on an async SQLAlchemy sessionmaker.

Every call runs in its own session: it commits on success, rolls back and
re-raises on failure. Rows come back as plain dicts of column values.
"""

from collections.abc import AsyncIterator, Mapping, Sequence
from contextlib import asynccontextmanager
from typing import Any, Protocol

from sqlalchemy import ColumnElement, delete, insert, inspect, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ummah_api.core.observability import db_metrics
from ummah_api.db.models import Base, User

Record = dict[str, Any]


class QueryClient(Protocol):
    """Narrow interface over the relational client."""

    async def select(
        self,
        model: type[Base],
        *where: ColumnElement[bool],
        order_by: Sequence[ColumnElement[Any]] = (),
        limit: int | None = None,
    ) -> list[Record]: ...

    async def select_with_author(
        self,
        model: type[Base],
        author_column: ColumnElement[Any],
        *where: ColumnElement[bool],
        order_by: Sequence[ColumnElement[Any]] = (),
        limit: int | None = None,
    ) -> list[tuple[Record, Record | None]]: ...

    async def insert(self, model: type[Base], values: Mapping[str, Any]) -> Record: ...

    async def update(
        self, model: type[Base], values: Mapping[str, Any], *where: ColumnElement[bool]
    ) -> Record | None: ...

    async def delete(self, model: type[Base], *where: ColumnElement[bool]) -> int: ...

    async def ping(self) -> None: ...


def to_record(obj: Base) -> Record:
    """Convert an ORM instance into a dict of its column attributes."""
    return {attr.key: getattr(obj, attr.key) for attr in inspect(obj).mapper.column_attrs}


class SqlAlchemyQueryClient:
    """QueryClient backed by an async SQLAlchemy sessionmaker."""

    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession]) -> None:
        self._sessionmaker = sessionmaker

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        async with self._sessionmaker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def select(
        self,
        model: type[Base],
        *where: ColumnElement[bool],
        order_by: Sequence[ColumnElement[Any]] = (),
        limit: int | None = None,
    ) -> list[Record]:
        stmt = select(model).where(*where).order_by(*order_by)
        if limit is not None:
            stmt = stmt.limit(limit)

        with db_metrics.track(f"select_{model.__tablename__}"):
            async with self._session() as session:
                result = await session.execute(stmt)
                return [to_record(obj) for obj in result.scalars().all()]

    async def select_with_author(
        self,
        model: type[Base],
        author_column: ColumnElement[Any],
        *where: ColumnElement[bool],
        order_by: Sequence[ColumnElement[Any]] = (),
        limit: int | None = None,
    ) -> list[tuple[Record, Record | None]]:
        """Select rows of `model` left-joined to the user referenced by `author_column`."""
        stmt = (
            select(model, User)
            .outerjoin(User, author_column == User.id)
            .where(*where)
            .order_by(*order_by)
        )
        if limit is not None:
            stmt = stmt.limit(limit)

        with db_metrics.track(f"select_{model.__tablename__}_with_author"):
            async with self._session() as session:
                result = await session.execute(stmt)
                return [
                    (to_record(entity), to_record(author) if author is not None else None)
                    for entity, author in result.all()
                ]

    async def insert(self, model: type[Base], values: Mapping[str, Any]) -> Record:
        table = model.__table__
        stmt = insert(table).values(dict(values)).returning(*table.c)

        with db_metrics.track(f"insert_{model.__tablename__}"):
            async with self._session() as session:
                result = await session.execute(stmt)
                return dict(result.mappings().one())

    async def update(
        self, model: type[Base], values: Mapping[str, Any], *where: ColumnElement[bool]
    ) -> Record | None:
        table = model.__table__
        stmt = update(table).where(*where).values(dict(values)).returning(*table.c)

        with db_metrics.track(f"update_{model.__tablename__}"):
            async with self._session() as session:
                result = await session.execute(stmt)
                row = result.mappings().first()
                return dict(row) if row is not None else None

    async def delete(self, model: type[Base], *where: ColumnElement[bool]) -> int:
        stmt = delete(model.__table__).where(*where)

        with db_metrics.track(f"delete_{model.__tablename__}"):
            async with self._session() as session:
                result = await session.execute(stmt)
                return result.rowcount or 0

    async def ping(self) -> None:
        with db_metrics.track("ping"):
            async with self._session() as session:
                await session.execute(select(User.id).limit(1))
