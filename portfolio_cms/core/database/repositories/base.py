"""
Base repository interfaces and utilities.

This module provides the foundational repository patterns and interfaces
used across all repository implementations. Built with async SQLAlchemy.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, Sequence, Tuple, Type, TypeVar

from sqlalchemy import func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

from ..base import utc_now

# Generic type for SQLModel entities
EntityType = TypeVar("EntityType", bound=SQLModel)


class AsyncBaseRepository(ABC, Generic[EntityType]):
    """Base async repository interface with common CRUD operations using SQLModel."""

    def __init__(self, session: AsyncSession, model: Type[EntityType]) -> None:
        """Initialize repository with async database session and SQLModel entity class.

        Args:
            session: Async SQLAlchemy session for database operations
            model: SQLModel entity class for this repository
        """
        self.session = session
        self.model = model

    @abstractmethod
    async def create(self, entity: EntityType) -> EntityType:
        """Create a new entity record.

        Args:
            entity: SQLModel instance to persist

        Returns:
            Persisted entity with generated fields populated
        """

    @abstractmethod
    async def get_by_id(self, entity_id: str) -> Optional[EntityType]:
        """Get entity by its primary identifier.

        Args:
            entity_id: Primary key value

        Returns:
            Entity instance or None if not found
        """

    @abstractmethod
    async def update(self, entity: EntityType) -> EntityType:
        """Update an existing entity record.

        Args:
            entity: SQLModel instance with updated fields

        Returns:
            Updated entity instance
        """

    @abstractmethod
    async def delete(self, entity_id: str) -> bool:
        """Delete entity by its primary identifier.

        Args:
            entity_id: Primary key value

        Returns:
            True if deleted, False if not found
        """

    @abstractmethod
    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[EntityType]:
        """List entities with optional pagination and filtering.

        Args:
            limit: Maximum number of records to return
            offset: Number of records to skip
            filters: Dictionary of field filters

        Returns:
            List of entity instances
        """


class QueryBuilder:
    """Utility class for building SQLModel-based database queries."""

    @staticmethod
    def apply_filters(stmt, model: Type[EntityType], filters: Dict[str, Any]):
        """Apply equality filters to a SQLModel select statement.

        Args:
            stmt: SQLModel select statement
            model: SQLModel entity class
            filters: Dictionary of field filters; ``None`` values and unknown fields are ignored

        Returns:
            Modified select statement with filters applied
        """
        for key, value in filters.items():
            if value is not None and hasattr(model, key):
                stmt = stmt.where(getattr(model, key) == value)
        return stmt

    @staticmethod
    def apply_search(stmt, model: Type[EntityType], search: Optional[str], fields: Sequence[str]):
        """Restrict a statement to rows where any of ``fields`` contains ``search`` (case-insensitive)."""
        if not search or not fields:
            return stmt
        pattern = f"%{search.strip()}%"
        return stmt.where(or_(*(getattr(model, name).ilike(pattern) for name in fields)))

    @staticmethod
    def apply_pagination(stmt, limit: Optional[int], offset: Optional[int]):
        """Apply pagination to a SQLModel select statement.

        Args:
            stmt: SQLModel select statement
            limit: Maximum number of records
            offset: Number of records to skip

        Returns:
            Modified select statement with pagination applied
        """
        if limit is not None:
            stmt = stmt.limit(limit)
        if offset is not None:
            stmt = stmt.offset(offset)
        return stmt


class SqlRepository(AsyncBaseRepository[EntityType]):
    """Generic repository for entities with an ``id`` primary key.

    Subclasses (or callers) set ``search_fields`` and ``order_by``; entities with
    an ``is_active`` column get soft delete and active-only listing.
    """

    search_fields: Tuple[str, ...] = ()

    def __init__(
        self,
        session: AsyncSession,
        model: Type[EntityType],
        search_fields: Optional[Sequence[str]] = None,
        order_by: Optional[Sequence[Any]] = None,
    ) -> None:
        super().__init__(session, model)
        if search_fields is not None:
            self.search_fields = tuple(search_fields)
        self._order_by = tuple(order_by) if order_by is not None else self.default_order()

    def default_order(self) -> Tuple[Any, ...]:
        """``sort_order`` ascending then newest first, or just newest first."""
        if hasattr(self.model, "sort_order"):
            return (self.model.sort_order.asc(), self.model.created_at.desc())
        return (self.model.created_at.desc(),)

    @property
    def soft_deletable(self) -> bool:
        return hasattr(self.model, "is_active")

    async def create(self, entity: EntityType) -> EntityType:
        self.session.add(entity)
        await self.session.commit()
        await self.session.refresh(entity)
        return entity

    async def get_by_id(self, entity_id: str) -> Optional[EntityType]:
        return await self.session.get(self.model, entity_id)

    async def update(self, entity: EntityType) -> EntityType:
        if hasattr(entity, "updated_at"):
            entity.updated_at = utc_now()
        self.session.add(entity)
        await self.session.commit()
        await self.session.refresh(entity)
        return entity

    async def apply_changes(self, entity: EntityType, changes: Dict[str, Any]) -> EntityType:
        """Assign ``changes`` onto ``entity`` and persist it."""
        for key, value in changes.items():
            setattr(entity, key, value)
        return await self.update(entity)

    async def delete(self, entity_id: str) -> bool:
        entity = await self.get_by_id(entity_id)
        if entity is None:
            return False
        await self.session.delete(entity)
        await self.session.commit()
        return True

    async def soft_delete(self, entity_id: str) -> Optional[EntityType]:
        """Mark the entity inactive; returns it, or None when it does not exist."""
        entity = await self.get_by_id(entity_id)
        if entity is None:
            return None
        entity.is_active = False
        return await self.update(entity)

    def build_query(
        self,
        filters: Optional[Dict[str, Any]] = None,
        search: Optional[str] = None,
        include_inactive: bool = False,
    ):
        stmt = select(self.model)
        if self.soft_deletable and not include_inactive:
            stmt = stmt.where(self.model.is_active == True)  # noqa: E712
        stmt = QueryBuilder.apply_filters(stmt, self.model, filters or {})
        return QueryBuilder.apply_search(stmt, self.model, search, self.search_fields)

    async def list(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        filters: Optional[Dict[str, Any]] = None,
        search: Optional[str] = None,
        include_inactive: bool = False,
    ) -> List[EntityType]:
        stmt = self.build_query(filters, search, include_inactive).order_by(*self._order_by)
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count(
        self,
        filters: Optional[Dict[str, Any]] = None,
        search: Optional[str] = None,
        include_inactive: bool = False,
    ) -> int:
        stmt = self.build_query(filters, search, include_inactive)
        return await self.count_statement(stmt)

    async def count_statement(self, stmt) -> int:
        result = await self.session.execute(select(func.count()).select_from(stmt.subquery()))
        return int(result.scalar_one())

    async def paginate(
        self,
        page: int = 1,
        limit: int = 10,
        filters: Optional[Dict[str, Any]] = None,
        search: Optional[str] = None,
        include_inactive: bool = False,
    ) -> Tuple[List[EntityType], int]:
        """Return one page of rows and the total number of matching rows."""
        items = await self.list(limit, (page - 1) * limit, filters, search, include_inactive)
        total = await self.count(filters, search, include_inactive)
        return items, total


class SlugRepository(SqlRepository[EntityType]):
    """Repository for entities addressed by a unique ``slug``."""

    async def get_by_slug(self, slug: str, include_inactive: bool = False) -> Optional[EntityType]:
        stmt = self.build_query({"slug": slug}, include_inactive=include_inactive)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def slug_exists(self, slug: str, exclude_id: Optional[str] = None) -> bool:
        stmt = select(self.model.id).where(self.model.slug == slug)
        if exclude_id is not None:
            stmt = stmt.where(self.model.id != exclude_id)
        result = await self.session.execute(stmt)
        return result.first() is not None
