"""Persistence context interface and shared unit-of-work logic."""

import dataclasses
import logging
import re
from abc import ABC, abstractmethod
from collections import deque
from typing import Any, Protocol, runtime_checkable

from seedwright.dependency import DependencyGraph

logger = logging.getLogger(__name__)


@runtime_checkable
class PersistenceContext(Protocol):
    """
    What factories and seed units need from a persistence layer.

    create_record() builds an entity (registering it when persist=True),
    persist() registers an already built entity, flush() writes every
    registered change and clear() detaches all tracked entities.
    """

    def create_record(
        self, entity_type: type, attributes: dict[str, Any], persist: bool = False
    ) -> Any: ...

    def persist(self, entity: Any) -> None: ...

    async def flush(self) -> None: ...

    def clear(self) -> None: ...


def is_entity(value: Any) -> bool:
    """
    Check if value is an entity instance.

    Entities are instances of classes declaring __tablename__, or of
    dataclasses with an `id` field. Other dataclasses (an Address on an
    Author, say) are value objects: stored inline, never written as rows.
    """
    if isinstance(value, type):
        return False
    if hasattr(value, "__tablename__"):
        return True
    return dataclasses.is_dataclass(value) and any(
        f.name == "id" for f in dataclasses.fields(value)
    )


def entity_attributes(entity: Any) -> dict[str, Any]:
    """
    Get an entity's attribute values.

    Returns:
        Field name → value, in declaration order for dataclasses
    """
    if dataclasses.is_dataclass(entity):
        return {f.name: getattr(entity, f.name) for f in dataclasses.fields(entity)}
    return {k: v for k, v in vars(entity).items() if not k.startswith("_")}


def single_relations(entity: Any) -> dict[str, Any]:
    """Get single-valued relation fields (attribute holding another entity)."""
    return {k: v for k, v in entity_attributes(entity).items() if is_entity(v)}


def table_name(entity_type: type) -> str:
    """
    Get table name for an entity type.

    Uses __tablename__ if declared, else snake_case of the class name
    (BookReview → book_review).
    """
    explicit = getattr(entity_type, "__tablename__", None)
    if explicit:
        return explicit
    return re.sub(r"(?<!^)(?=[A-Z])", "_", entity_type.__name__).lower()


class UnitOfWork(ABC):
    """
    Identity map plus pending queue shared by the bundled contexts.

    Subclasses implement _write_batch() to store pending entities; the
    batch is already in dependency order (related entities first).
    """

    def __init__(self):
        self._identity_map: dict[int, Any] = {}
        self._pending: list[Any] = []
        self.flush_count = 0
        self.clear_count = 0

    @property
    def tracked(self) -> list[Any]:
        """All entities registered since the last clear()."""
        return list(self._identity_map.values())

    @property
    def pending(self) -> list[Any]:
        """Registered entities not yet flushed."""
        return list(self._pending)

    def is_tracked(self, entity: Any) -> bool:
        return id(entity) in self._identity_map

    def create_record(
        self, entity_type: type, attributes: dict[str, Any], persist: bool = False
    ) -> Any:
        """
        Instantiate entity_type from attributes.

        Args:
            entity_type: Entity class
            attributes: Keyword arguments for the constructor
            persist: Register the entity for the next flush()

        Returns:
            New entity
        """
        entity = entity_type(**attributes)
        if persist:
            self.persist(entity)
        return entity

    def persist(self, entity: Any) -> None:
        """Register entity for the next flush() (no-op if already tracked)."""
        if id(entity) in self._identity_map:
            return
        self._identity_map[id(entity)] = entity
        self._pending.append(entity)

    async def flush(self) -> None:
        """Write all pending entities, related entities before their owners."""
        self.flush_count += 1
        if not self._pending:
            return

        batch = self._ordered_pending()
        logger.debug(f"Flushing {len(batch)} entities")
        await self._write_batch(batch)
        self._pending.clear()

    def clear(self) -> None:
        """Detach every tracked entity; pending changes are discarded."""
        self.clear_count += 1
        if self._pending:
            logger.warning(
                f"Clearing context with {len(self._pending)} unflushed entities"
            )
        self._identity_map.clear()
        self._pending.clear()

    def _ordered_pending(self) -> list[Any]:
        # Related entities reachable through single-valued relations are
        # pulled into the batch, even if nobody persisted them explicitly.
        graph = DependencyGraph()
        by_key: dict[int, Any] = {}
        queue = deque(self._pending)
        while queue:
            entity = queue.popleft()
            key = id(entity)
            if key in by_key:
                continue
            by_key[key] = entity
            graph.add_node(key, type(entity).__name__)
            for related in single_relations(entity).values():
                if self._needs_write(related):
                    graph.add_dependency(key, id(related))
                    queue.append(related)

        for key, entity in by_key.items():
            self._identity_map.setdefault(key, entity)
        return [by_key[key] for key in graph.topological_sort()]

    def _needs_write(self, entity: Any) -> bool:
        return getattr(entity, "id", None) is None

    @abstractmethod
    async def _write_batch(self, entities: list[Any]) -> None:
        """Store entities (already in dependency order)."""
        pass
