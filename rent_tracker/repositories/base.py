"""
Base repository classes for tenant-scoped document access.
"""

from abc import ABC
from collections.abc import Iterable, Mapping
from datetime import timedelta
from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import Select, and_, delete, func, insert, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from rent_tracker.core.exceptions import ConcurrencyConflictError, ValidationError
from rent_tracker.core.identifiers import (
    SYSTEM_TENANT_ID,
    is_system_tenant,
    new_document_id,
    parse_document_id,
    require_tenant_id,
)
from rent_tracker.core.logger import get_logger
from rent_tracker.models.base import DocumentModel
from rent_tracker.schemas.base import BaseDocument, Include, utc_now

logger = get_logger()
DocumentType = TypeVar("DocumentType", bound=BaseDocument)

# Columns fixed at creation; updates never rewrite them
PROTECTED_COLUMNS = frozenset({"id", "tenant_id", "created_at"})


def parse_includes(includes: Iterable[str | Include] | None) -> set[Include]:
    """Convert caller-supplied include names into known includes."""
    if not includes:
        return set()
    parsed: set[Include] = set()
    for name in includes:
        try:
            parsed.add(Include(name))
        except ValueError as exc:
            allowed = ", ".join(item.value for item in Include)
            raise ValidationError(
                f"Unknown include '{name}'. Allowed includes: {allowed}",
                field="includes",
            ) from exc
    return parsed


class TenantRepository(ABC, Generic[DocumentType]):
    """Repository with tenant isolation and optimistic concurrency.

    Every statement carries the tenant predicate. Statements run against the
    table directly and results are mapped to pydantic documents, so a write
    only ever happens through the explicit insert, conditional update or
    delete issued here.
    """

    def __init__(
        self,
        session: AsyncSession,
        model: type[DocumentModel],
        document_type: type[DocumentType],
    ) -> None:
        self.session = session
        self.model = model
        self.document_type = document_type
        self.table = model.__table__

    @property
    def entity_name(self) -> str:
        return self.document_type.__name__

    # Row mapping hooks

    def _to_document(self, row: Mapping[str, Any]) -> DocumentType:
        """Build a document from a table row."""
        return self.document_type.model_validate(dict(row))

    def _to_values(self, entity: DocumentType) -> dict[str, Any]:
        """Build column values from a document."""
        return entity.model_dump(include=set(self.table.c.keys()))

    # Statement helpers

    def _tenant_clause(self, tenant_id: str, include_system: bool = False):
        if include_system and not is_system_tenant(tenant_id):
            return self.table.c.tenant_id.in_([tenant_id, SYSTEM_TENANT_ID])
        return self.table.c.tenant_id == tenant_id

    def _select(self, tenant_id: str, include_system: bool = False) -> Select:
        return select(self.table).where(self._tenant_clause(tenant_id, include_system))

    async def _fetch_all(self, stmt: Select) -> list[DocumentType]:
        result = await self.session.execute(stmt)
        return [self._to_document(row) for row in result.mappings()]

    async def _fetch_one(self, stmt: Select) -> DocumentType | None:
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return self._to_document(row) if row is not None else None

    # CRUD

    async def get_all(
        self, tenant_id: str, include_system: bool = False
    ) -> list[DocumentType]:
        """Get all documents of a tenant, optionally with system defaults."""
        require_tenant_id(tenant_id)
        stmt = self._select(tenant_id, include_system).order_by(
            self.table.c.created_at
        )
        return await self._fetch_all(stmt)

    async def get_by_id(
        self, tenant_id: str, entity_id: str | UUID
    ) -> DocumentType | None:
        """Get a document by id within a tenant."""
        require_tenant_id(tenant_id)
        document_id = parse_document_id(entity_id)
        stmt = self._select(tenant_id).where(self.table.c.id == document_id)
        return await self._fetch_one(stmt)

    async def get_by_ids(
        self,
        tenant_id: str,
        entity_ids: Iterable[str | UUID],
        include_system: bool = False,
    ) -> list[DocumentType]:
        """Get documents for a set of ids in a single query."""
        require_tenant_id(tenant_id)
        document_ids = {parse_document_id(value) for value in entity_ids}
        if not document_ids:
            return []
        stmt = self._select(tenant_id, include_system).where(
            self.table.c.id.in_(sorted(document_ids))
        )
        return await self._fetch_all(stmt)

    async def count(self, tenant_id: str) -> int:
        """Count documents within a tenant."""
        require_tenant_id(tenant_id)
        stmt = (
            select(func.count())
            .select_from(self.table)
            .where(self._tenant_clause(tenant_id))
        )
        result = await self.session.execute(stmt)
        return int(result.scalar() or 0)

    async def create(self, entity: DocumentType | None) -> DocumentType:
        """Insert a new document stamped with timestamps and version 1."""
        if entity is None:
            raise ValidationError("entity cannot be null", field="entity")
        require_tenant_id(entity.tenant_id)

        previous = (entity.id, entity.created_at, entity.updated_at, entity.version)
        now = utc_now()
        if entity.id is None:
            entity.id = new_document_id()
        entity.created_at = now
        entity.updated_at = now
        entity.version = 1

        try:
            await self.session.execute(
                insert(self.table).values(**self._to_values(entity))
            )
        except SQLAlchemyError as exc:
            entity.id, entity.created_at, entity.updated_at, entity.version = previous
            await self.session.rollback()
            logger.error(
                "Failed to create entity",
                model=self.entity_name,
                tenant_id=entity.tenant_id,
                error=str(exc),
            )
            raise

        logger.info(
            "Created entity",
            model=self.entity_name,
            entity_id=entity.formatted_id,
            tenant_id=entity.tenant_id,
        )
        return entity

    async def update(
        self, tenant_id: str, entity_id: str | UUID, entity: DocumentType | None
    ) -> DocumentType:
        """Replace a document if its stored version matches ``entity.version``.

        On success the entity carries the new version and timestamp. When no
        row matched, the entity's version and timestamp are restored and
        ConcurrencyConflictError is raised.
        """
        require_tenant_id(tenant_id)
        document_id = parse_document_id(entity_id)
        if entity is None:
            raise ValidationError("entity cannot be null", field="entity")

        expected_version = entity.version
        previous_updated_at = entity.updated_at

        now = utc_now()
        if previous_updated_at is not None and now <= previous_updated_at:
            now = previous_updated_at + timedelta(microseconds=1)
        entity.updated_at = now
        entity.version = expected_version + 1

        values = {
            key: value
            for key, value in self._to_values(entity).items()
            if key not in PROTECTED_COLUMNS
        }
        stmt = (
            update(self.table)
            .where(
                and_(
                    self.table.c.id == document_id,
                    self.table.c.tenant_id == tenant_id,
                    self.table.c.version == expected_version,
                )
            )
            .values(**values)
        )

        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            entity.version = expected_version
            entity.updated_at = previous_updated_at
            await self.session.rollback()
            logger.error(
                "Failed to update entity",
                model=self.entity_name,
                entity_id=str(document_id),
                tenant_id=tenant_id,
                error=str(exc),
            )
            raise

        if result.rowcount == 0:
            entity.version = expected_version
            entity.updated_at = previous_updated_at
            logger.warning(
                "Concurrency conflict on update",
                model=self.entity_name,
                entity_id=str(document_id),
                tenant_id=tenant_id,
                expected_version=expected_version,
            )
            raise ConcurrencyConflictError(
                f"Concurrency conflict: {self.entity_name} {document_id} "
                f"was modified or does not exist (expected version {expected_version})",
                entity_type=self.entity_name,
                entity_id=str(document_id),
                expected_version=expected_version,
            )

        if entity.id is None:
            entity.id = document_id
        logger.info(
            "Updated entity",
            model=self.entity_name,
            entity_id=str(document_id),
            tenant_id=tenant_id,
            version=entity.version,
        )
        return entity

    async def delete(self, tenant_id: str, entity_id: str | UUID) -> None:
        """Delete a document; deleting a missing document is not an error."""
        require_tenant_id(tenant_id)
        document_id = parse_document_id(entity_id)
        stmt = delete(self.table).where(
            and_(
                self.table.c.id == document_id,
                self.table.c.tenant_id == tenant_id,
            )
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.error(
                "Failed to delete entity",
                model=self.entity_name,
                entity_id=str(document_id),
                tenant_id=tenant_id,
                error=str(exc),
            )
            raise

        logger.info(
            "Deleted entity",
            model=self.entity_name,
            entity_id=str(document_id),
            tenant_id=tenant_id,
            deleted=result.rowcount,
        )


class SharedRepository(TenantRepository[DocumentType]):
    """Repository for documents with tenant-private and system-wide instances."""

    async def get_all_shared(self) -> list[DocumentType]:
        """Get every document regardless of tenant."""
        stmt = select(self.table).order_by(self.table.c.created_at)
        return await self._fetch_all(stmt)

    async def get_shared_by_id(self, entity_id: str | UUID) -> DocumentType | None:
        """Get a document by id, preferring the system-owned copy."""
        document_id = parse_document_id(entity_id)

        system_stmt = select(self.table).where(
            and_(
                self.table.c.id == document_id,
                self.table.c.tenant_id == SYSTEM_TENANT_ID,
            )
        )
        document = await self._fetch_one(system_stmt)
        if document is not None:
            return document

        any_tenant_stmt = (
            select(self.table).where(self.table.c.id == document_id).limit(1)
        )
        return await self._fetch_one(any_tenant_stmt)


LIKE_ESCAPE = "\\"


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term matches literally."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", f"{LIKE_ESCAPE}%")
        .replace("_", f"{LIKE_ESCAPE}_")
    )


def matches_any(columns: Iterable[Any], term: str):
    """Case-insensitive substring predicate across several columns."""
    pattern = f"%{escape_like(term)}%"
    return or_(*(column.ilike(pattern, escape=LIKE_ESCAPE) for column in columns))
