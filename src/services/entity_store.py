"""Entity store adapter - typed collections over Supabase tables."""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ValidationError
from ulid import ULID

from src.models.agent import Agent
from src.models.neighborhood import Neighborhood
from src.models.property import Property
from src.models.transaction import Transaction
from src.services.field_aliasing import EntityKind
from src.services.supabase_client import SupabaseClient
from src.utils.errors import NotFoundError, StoreError
from src.utils.logging import get_structured_logger
from src.utils.settings import AppConfig

logger = get_structured_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# (field, descending)
SortSpec = tuple[str, bool]


def generate_entity_id() -> str:
    """Generate a text-based entity ID (ULID format)."""
    return str(ULID())


class EntityCollection(Generic[ModelT]):
    """
    Typed accessor over one table.

    Records go in and come out as storage-shaped pydantic models. Lookups by
    id return None for unknown ids; ``get`` raises NotFoundError instead.
    """

    def __init__(self, table: str, model: type[ModelT]):
        self.table = table
        self.model = model

    @property
    def label(self) -> str:
        return self.model.__name__

    async def create(self, record: dict) -> ModelT:
        """Insert a new record under a freshly generated id."""
        row = dict(record)
        row["id"] = generate_entity_id()
        try:
            entity = self.model.model_validate(row)
        except ValidationError as e:
            raise StoreError(f"Invalid {self.label} record: {e}") from e

        stored = await self._insert(entity.model_dump(mode="json"))
        logger.info(f"{self.label} created", table=self.table, entity_id=entity.id)
        return self.model.model_validate(stored)

    async def find_by_id(self, entity_id: Optional[str]) -> Optional[ModelT]:
        if not entity_id:
            return None
        rows = await self._select({"id": entity_id}, limit=1)
        return self.model.model_validate(rows[0]) if rows else None

    async def get(self, entity_id: Optional[str]) -> ModelT:
        """Fetch by id, raising NotFoundError when the record does not exist."""
        entity = await self.find_by_id(entity_id)
        if entity is None:
            raise NotFoundError(self.label, entity_id)
        return entity

    async def find(self, filters: Optional[dict] = None) -> list[ModelT]:
        rows = await self._select(filters)
        return [self.model.model_validate(row) for row in rows]

    async def find_one(self, filters: Optional[dict] = None, sort: Optional[SortSpec] = None) -> Optional[ModelT]:
        rows = await self._select(filters, order=sort, limit=1)
        return self.model.model_validate(rows[0]) if rows else None

    async def _insert(self, row: dict) -> dict:
        async with SupabaseClient() as client:
            query = client.table(self.table).insert(row)
            try:
                result = await query.execute()
            except Exception as e:
                raise StoreError(f"Failed to create {self.label}: {e}") from e

            if result.data and len(result.data) > 0:
                return result.data[0]
            raise StoreError(f"Failed to create {self.label}: no data returned")

    async def _select(
        self,
        filters: Optional[dict] = None,
        order: Optional[SortSpec] = None,
        limit: Optional[int] = None,
    ) -> list[dict]:
        async with SupabaseClient() as client:
            query = client.table(self.table).select("*")
            for field, value in (filters or {}).items():
                query = query.is_(field, "null") if value is None else query.eq(field, value)
            if order:
                field, descending = order
                query = query.order(field, desc=descending, nullsfirst=False)
            if limit:
                query = query.limit(limit)

            try:
                result = await query.execute()
            except Exception as e:
                raise StoreError(f"Failed to read {self.table}: {e}") from e
            return result.data if result.data else []


class EntityStore:
    """The four collections of the document store."""

    def __init__(self, collection_class: type[EntityCollection] = EntityCollection):
        self.properties: EntityCollection[Property] = collection_class(AppConfig.PROPERTIES_TABLE, Property)
        self.transactions: EntityCollection[Transaction] = collection_class(AppConfig.TRANSACTIONS_TABLE, Transaction)
        self.agents: EntityCollection[Agent] = collection_class(AppConfig.AGENTS_TABLE, Agent)
        self.neighborhoods: EntityCollection[Neighborhood] = collection_class(AppConfig.NEIGHBORHOODS_TABLE, Neighborhood)

    def collection(self, kind: EntityKind) -> EntityCollection:
        return {
            EntityKind.PROPERTY: self.properties,
            EntityKind.TRANSACTION: self.transactions,
            EntityKind.AGENT: self.agents,
            EntityKind.NEIGHBORHOOD: self.neighborhoods,
        }[kind]


# Global store instance (singleton pattern)
_store: Optional[EntityStore] = None


def get_entity_store() -> EntityStore:
    """Get or create the entity store singleton."""
    global _store
    if _store is None:
        _store = EntityStore()
    return _store


def set_entity_store(store: Optional[EntityStore]) -> None:
    """Replace the store singleton (None resets it)."""
    global _store
    _store = store
