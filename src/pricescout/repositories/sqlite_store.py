from __future__ import annotations

import asyncio

from sqlalchemy import CursorResult, String, Text, delete, select
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from pricescout.repositories.base import AbstractKeyValueStore, Updater


class Base(DeclarativeBase):
    pass


class KeyValueORM(Base):
    __tablename__ = "kv_entries"

    key: Mapped[str] = mapped_column(String, primary_key=True)
    # JSON document, serialized by the owning store
    value: Mapped[str] = mapped_column(Text, nullable=False)


class SQLiteKeyValueStore(AbstractKeyValueStore):
    """
    Durable Backend auf SQLite (SQLAlchemy async + aiosqlite).
    Schreibzugriffe laufen seriell über einen gemeinsamen Lock, damit ein
    update() nicht von anderen Writern derselben Instanz unterbrochen wird.
    """

    def __init__(self, database_url: str) -> None:
        self.engine = create_async_engine(database_url)
        self.async_session_maker = async_sessionmaker(self.engine, expire_on_commit=False)
        self._write_lock = asyncio.Lock()

    async def initialize(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        await self.engine.dispose()

    async def get(self, key: str) -> str | None:
        async with self.async_session_maker() as session:
            return await self._select_value(session, key)

    async def set(self, key: str, value: str) -> None:
        async with self._write_lock:
            async with self.async_session_maker() as session, session.begin():
                await self._upsert(session, key, value)

    async def update(self, key: str, updater: Updater) -> str:
        async with self._write_lock:
            async with self.async_session_maker() as session, session.begin():
                value = updater(await self._select_value(session, key))
                await self._upsert(session, key, value)
                return value

    async def delete(self, key: str) -> bool:
        async with self._write_lock:
            async with self.async_session_maker() as session, session.begin():
                result = await session.execute(delete(KeyValueORM).where(KeyValueORM.key == key))
                if isinstance(result, CursorResult):
                    return bool(result.rowcount > 0)
                return False

    async def keys(self, prefix: str = "") -> list[str]:
        async with self.async_session_maker() as session:
            stmt = select(KeyValueORM.key)
            if prefix:
                stmt = stmt.where(KeyValueORM.key.startswith(prefix, autoescape=True))
            result = await session.execute(stmt)
            return list(result.scalars())

    @staticmethod
    async def _select_value(session: AsyncSession, key: str) -> str | None:
        result = await session.execute(select(KeyValueORM.value).where(KeyValueORM.key == key))
        return result.scalar_one_or_none()

    @staticmethod
    async def _upsert(session: AsyncSession, key: str, value: str) -> None:
        stmt = insert(KeyValueORM).values(key=key, value=value)
        await session.execute(
            stmt.on_conflict_do_update(
                index_elements=[KeyValueORM.key], set_={"value": stmt.excluded.value}
            )
        )
