# src/db/store.py
# generic id-keyed collections persisted as JSON arrays in the kv table
from __future__ import annotations

import dataclasses
from typing import Callable, Generic, List, Optional, TypeVar

import aiosqlite

from db import models
from db.database import read_value, transaction, write_value
from utils.errors import DuplicateId
from utils.logger import get_logger

_logger = get_logger(__name__)

T = TypeVar("T")


class EntityStore(Generic[T]):
    """
    CRUD over one named collection.

    Every call reads the whole collection and mutating calls write it back
    before returning. Pass `conn` to run a call inside a caller's transaction;
    without it each call commits on its own.
    """

    def __init__(self, collection: str, model: type[T]) -> None:
        self.collection = collection
        self.model = model

    @property
    def _seq_key(self) -> str:
        return f"seq:{self.collection}"

    async def _load(self, conn: aiosqlite.Connection) -> List[T]:
        records = await read_value(conn, self.collection)
        return [self.model.from_record(r) for r in records or []]

    async def _save(self, conn: aiosqlite.Connection, entities: List[T]) -> None:
        await write_value(conn, self.collection, [e.to_record() for e in entities])

    async def list(self, conn: Optional[aiosqlite.Connection] = None) -> List[T]:
        """All entities in insertion order; empty if the collection never existed."""
        async with transaction(conn) as c:
            return await self._load(c)

    async def filter(
        self, pred: Callable[[T], bool], conn: Optional[aiosqlite.Connection] = None
    ) -> List[T]:
        return [e for e in await self.list(conn) if pred(e)]

    async def find(
        self, entity_id: int, conn: Optional[aiosqlite.Connection] = None
    ) -> Optional[T]:
        for e in await self.list(conn):
            if e.id == entity_id:
                return e
        return None

    async def next_id(self, conn: Optional[aiosqlite.Connection] = None) -> int:
        """Allocate an id above both the last allocation and every stored id."""
        async with transaction(conn) as c:
            last = await read_value(c, self._seq_key) or 0
            existing = max((e.id for e in await self._load(c)), default=0)
            new_id = max(int(last), existing) + 1
            await write_value(c, self._seq_key, new_id)
            return new_id

    async def add(self, entity: T, conn: Optional[aiosqlite.Connection] = None) -> T:
        async with transaction(conn) as c:
            entities = await self._load(c)
            if any(e.id == entity.id for e in entities):
                raise DuplicateId(self.collection, entity.id)
            entities.append(entity)
            await self._save(c, entities)
        _logger.debug(f"{self.collection}: added id {entity.id}")
        return entity

    async def update(
        self,
        entity_id: int,
        patch: models.Patch,
        conn: Optional[aiosqlite.Connection] = None,
    ) -> bool:
        """
        Merge the fields set on `patch` onto the entity with `entity_id`.
        Return False without writing if there is no such entity.
        """
        patch.validate()
        async with transaction(conn) as c:
            entities = await self._load(c)
            for idx, e in enumerate(entities):
                if e.id == entity_id:
                    entities[idx] = dataclasses.replace(e, **patch.changes())
                    await self._save(c, entities)
                    return True
        return False

    async def remove(
        self, entity_id: int, conn: Optional[aiosqlite.Connection] = None
    ) -> bool:
        """Delete the entity with `entity_id`. Returns whether anything was removed."""
        async with transaction(conn) as c:
            entities = await self._load(c)
            kept = [e for e in entities if e.id != entity_id]
            if len(kept) == len(entities):
                return False
            await self._save(c, kept)
        _logger.debug(f"{self.collection}: removed id {entity_id}")
        return True


users = EntityStore("users", models.User)
products = EntityStore("products", models.Product)
orders = EntityStore("orders", models.Order)
