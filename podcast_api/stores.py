"""
Generic async persistence store, one instance per entity type.

A ``Store`` is the only thing services know about the database: they
receive one through their constructor and call the primitives below.
Criteria are plain ``{column: value}`` mappings handed to ``filter_by``.

Design notes
------------
- ``relations`` eager-loads one-to-many collections with
  ``selectinload``; every relationship on the models is
  ``lazy="noload"`` so nothing is fetched implicitly.
- ``load`` undefers columns that are hidden by default (the user's
  password hash).
- ``populate_existing`` is applied whenever either option is used so an
  entity that is already in the identity map gets its collection /
  deferred column filled in instead of being returned as-is.
- Stores flush but never commit; the transaction boundary is owned by
  the ``get_db`` dependency.
"""
import logging
from typing import Any, Generic, Mapping, Sequence, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload, undefer

from podcast_api.database import Base

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class EntityNotFoundError(Exception):
    """Raised by ``find_one_or_fail`` when no row matches the criteria."""

    def __init__(self, model: type, criteria: Mapping[str, Any]):
        self.model = model
        self.criteria = dict(criteria)
        super().__init__(f"Could not find any {model.__name__} matching {self.criteria!r}")


class Store(Generic[ModelT]):
    def __init__(self, session: AsyncSession, model: type[ModelT]) -> None:
        self.session = session
        self.model = model

    def _select(self, relations: Sequence[str] = (), load: Sequence[str] = ()):
        stmt = select(self.model)
        options = [selectinload(getattr(self.model, name)) for name in relations]
        options += [undefer(getattr(self.model, name)) for name in load]
        if options:
            stmt = stmt.options(*options).execution_options(populate_existing=True)
        return stmt

    async def find(self, *, relations: Sequence[str] = ()) -> list[ModelT]:
        """Return every row, ordered by primary key."""
        stmt = self._select(relations).order_by(self.model.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def find_one(
        self,
        criteria: Mapping[str, Any],
        *,
        relations: Sequence[str] = (),
        load: Sequence[str] = (),
    ) -> ModelT | None:
        """Return the first row matching *criteria*, or None."""
        stmt = self._select(relations, load).filter_by(**criteria).limit(1)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def find_one_or_fail(
        self,
        criteria: Mapping[str, Any],
        *,
        relations: Sequence[str] = (),
        load: Sequence[str] = (),
    ) -> ModelT:
        entity = await self.find_one(criteria, relations=relations, load=load)
        if entity is None:
            raise EntityNotFoundError(self.model, criteria)
        return entity

    def create(self, **fields: Any) -> ModelT:
        """Build a transient entity; nothing is written until ``save``."""
        return self.model(**fields)

    async def save(self, entity: ModelT) -> ModelT:
        """Insert or update *entity* and return it with its id assigned."""
        self.session.add(entity)
        await self.session.flush()
        return entity

    async def delete(self, criteria: Mapping[str, Any]) -> int:
        """
        Delete every row matching *criteria* and return the affected count.

        Deleting rows that do not exist is a no-op, so callers that must
        report "not found" check existence themselves beforehand.
        """
        stmt = delete(self.model).filter_by(**criteria)
        result = await self.session.execute(stmt)
        logger.debug("Deleted %d %s row(s) matching %r", result.rowcount, self.model.__name__, dict(criteria))
        return result.rowcount
