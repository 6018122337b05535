"""
Adapter-backed repository base

Every repository wraps one DatabaseAdapter plus a table name and maps
plain records to domain models. Repositories built from the same
adapter share its connection and its transaction.

Author: TM3
Date: 2025-11-21
"""
import logging
from typing import Any, Callable, Dict, Generic, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel

from invoice_processor.adapters.base import DatabaseAdapter, Record
from invoice_processor.core.exceptions import ConflictError, InvalidEntityError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class AdapterRepository(Generic[T]):
    """
    Generic CRUD repository over a DatabaseAdapter

    Subclasses set `table` and `entity_class` and may override
    _to_entity/_to_record when the stored shape differs from the model.
    """

    table: str = ""
    entity_class: Type[T]

    def __init__(self, adapter: DatabaseAdapter, table: Optional[str] = None):
        self.adapter = adapter
        if table:
            self.table = table

    def _to_entity(self, record: Record) -> T:
        return self.entity_class(**record)

    def _to_record(self, entity: T) -> Dict[str, Any]:
        return entity.model_dump(exclude={"id"})

    def find_by_id(self, entity_id: Any) -> Optional[T]:
        """
        Find entity by ID

        Returns:
            Entity or None if not found
        """
        record = self.adapter.find_by_id(self.table, entity_id)
        if record is None:
            return None
        return self._to_entity(record)

    def find_all(self, page: int = 1, per_page: int = 20) -> List[T]:
        """One page of entities ordered by id"""
        return [
            self._to_entity(record)
            for record in self.adapter.find_all(self.table, page, per_page)
        ]

    def save(self, entity: T) -> T:
        """
        Insert (no id) or update (has id) an entity

        Returns:
            The same entity, with its id populated after an insert

        Raises:
            InvalidEntityError: If entity is not an instance of entity_class
        """
        if not isinstance(entity, self.entity_class):
            raise InvalidEntityError(
                f"{type(self).__name__} can only save {self.entity_class.__name__}, "
                f"got {type(entity).__name__}"
            )

        record = self._to_record(entity)
        if entity.id is None:
            entity.id = self.adapter.insert(self.table, record)
        else:
            self.adapter.update(self.table, entity.id, record)
        return entity

    def delete(self, entity_id: Any) -> bool:
        return self.adapter.delete(self.table, entity_id)

    def count(self) -> int:
        return self.adapter.count(self.table)


class NamedRepository(AdapterRepository[T]):
    """Repository whose entities are deduplicated by their `name` field"""

    def find_by_name(self, name: str) -> Optional[T]:
        """First entity (lowest id) with this exact name, or None"""
        record = self.adapter.find_by_field(self.table, "name", name)
        if record is None:
            return None
        return self._to_entity(record)

    def _get_or_create(self, name: str, build: Callable[[], T]) -> Tuple[T, bool]:
        """
        Find by name, or save the entity produced by build()

        Optimistic: when the insert loses a race against a unique index on
        name (ConflictError), the winner is re-read and returned instead.

        Returns:
            (entity, created)
        """
        existing = self.find_by_name(name)
        if existing is not None:
            return existing, False

        entity = build()
        try:
            self.save(entity)
        except ConflictError:
            winner = self.find_by_name(name)
            if winner is None:
                raise
            logger.info(f"{self.table}: {name!r} was created concurrently, using id={winner.id}")
            return winner, False

        logger.info(f"{self.table}: created {name!r} (id={entity.id})")
        return entity, True
