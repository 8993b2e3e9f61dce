"""
RecordStore: the per-entity data-access layer.

Handlers and services talk to RecordStore instead of building INSERT/UPDATE/
DELETE statements themselves. Every value goes through bound parameters, and
every SQLAlchemy failure leaves here as a StoreError subclass after the
session has been rolled back.
"""

from __future__ import annotations

import logging
from typing import Any, Generic, List, Optional, Type, TypeVar

from sqlalchemy import Select, delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from personal_manager.core.errors import StoreError, from_sqlalchemy

log = logging.getLogger(__name__)

M = TypeVar("M")


async def run_query(db: AsyncSession, stmt: Select) -> List[Any]:
    """Execute an ad-hoc SELECT (joins, aggregates) with error translation."""
    try:
        return list((await db.execute(stmt)).all())
    except SQLAlchemyError as e:
        await db.rollback()
        raise _translate(e) from e


def _translate(e: SQLAlchemyError) -> StoreError:
    err = from_sqlalchemy(e)
    log.warning("[store] %s error: %s", err.kind, err.message)
    return err


class RecordStore(Generic[M]):
    """CRUD for one mapped entity, scoped by owner."""

    def __init__(self, db: AsyncSession, model: Type[M]) -> None:
        self.db = db
        self.model = model

    async def insert(self, **fields: Any) -> M:
        record = self.model(**fields)
        try:
            self.db.add(record)
            await self.db.commit()
            await self.db.refresh(record)
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise _translate(e) from e
        return record

    async def select_all(self, owner_id: int, *order_by: Any) -> List[M]:
        stmt = select(self.model).where(self.model.owner_id == owner_id).order_by(*order_by, self.model.id)
        try:
            return list((await self.db.scalars(stmt)).all())
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise _translate(e) from e

    async def select_by_id(self, record_id: int, owner_id: int) -> Optional[M]:
        stmt = select(self.model).where(self.model.id == record_id, self.model.owner_id == owner_id)
        # bulk UPDATEs skip the identity map, so always reload the row
        stmt = stmt.execution_options(populate_existing=True)
        try:
            return await self.db.scalar(stmt)
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise _translate(e) from e

    async def update(self, record_id: int, owner_id: int, **fields: Any) -> int:
        stmt = (
            update(self.model)
            .where(self.model.id == record_id, self.model.owner_id == owner_id)
            .values(**fields)
            .execution_options(synchronize_session=False)
        )
        return await self._write(stmt)

    async def delete(self, record_id: int, owner_id: int) -> int:
        stmt = (
            delete(self.model)
            .where(self.model.id == record_id, self.model.owner_id == owner_id)
            .execution_options(synchronize_session=False)
        )
        return await self._write(stmt)

    async def _write(self, stmt: Any) -> int:
        try:
            result = await self.db.execute(stmt)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise _translate(e) from e
        return result.rowcount or 0
