from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import String, Text, delete, select
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from storefront.domain.ports import KeyValueStorePort, StorageError


class Base(DeclarativeBase):
    pass


class KeyValueItemORM(Base):
    __tablename__ = "kv_items"

    key: Mapped[str] = mapped_column(String, primary_key=True)
    # Raw string as written by the caller (JSON documents for history and drafts)
    value: Mapped[str] = mapped_column(Text, nullable=False)


class SQLiteKeyValueStore(KeyValueStorePort):
    def __init__(self, database_url: str) -> None:
        self.engine = create_async_engine(database_url)
        self.async_session_maker = async_sessionmaker(self.engine, expire_on_commit=False)

    async def initialize(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()

    async def get_item(self, key: str) -> str | None:
        try:
            async with self.async_session_maker() as session:
                result = await session.execute(
                    select(KeyValueItemORM.value).where(KeyValueItemORM.key == key)
                )
                return result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise StorageError("get", key, str(exc)) from exc

    async def set_item(self, key: str, value: str) -> None:
        stmt = insert(KeyValueItemORM).values(key=key, value=value)
        stmt = stmt.on_conflict_do_update(
            index_elements=[KeyValueItemORM.key], set_={"value": stmt.excluded["value"]}
        )
        try:
            async with self.async_session_maker() as session, session.begin():
                await session.execute(stmt)
        except SQLAlchemyError as exc:
            raise StorageError("set", key, str(exc)) from exc

    async def remove_item(self, key: str) -> None:
        try:
            async with self.async_session_maker() as session, session.begin():
                await session.execute(delete(KeyValueItemORM).where(KeyValueItemORM.key == key))
        except SQLAlchemyError as exc:
            raise StorageError("remove", key, str(exc)) from exc

    async def multi_remove(self, keys: Sequence[str]) -> None:
        if not keys:
            return
        try:
            async with self.async_session_maker() as session, session.begin():
                await session.execute(
                    delete(KeyValueItemORM).where(KeyValueItemORM.key.in_(list(keys)))
                )
        except SQLAlchemyError as exc:
            raise StorageError("multi_remove", None, str(exc)) from exc

    async def get_all_keys(self) -> list[str]:
        try:
            async with self.async_session_maker() as session:
                result = await session.execute(
                    select(KeyValueItemORM.key).order_by(KeyValueItemORM.key)
                )
                return list(result.scalars())
        except SQLAlchemyError as exc:
            raise StorageError("get_all_keys", None, str(exc)) from exc
