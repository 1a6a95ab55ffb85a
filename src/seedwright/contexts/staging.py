"""Staging context - in-memory unit of work for testing without database."""

from typing import Any

from seedwright.contexts.base import UnitOfWork, single_relations


class StagingContext(UnitOfWork):
    """
    In-memory persistence context for testing seeds without database.

    Simulates database behavior:
    - Generates id columns (sequential per entity type, starting from 1)
    - Fills <relation>_id attributes from flushed related entities
    - Stores data in memory (not database)

    Use case: Fast unit tests, offline development, prototyping seeders.
    """

    def __init__(self):
        super().__init__()
        self._data: dict[type, list[Any]] = {}
        self._id_sequences: dict[type, int] = {}

    async def _write_batch(self, entities: list[Any]) -> None:
        for entity in entities:
            entity_type = type(entity)

            # Like database IDENTITY: only fill ids nobody set
            if getattr(entity, "id", None) is None:
                next_id = self._id_sequences.get(entity_type, 1)
                entity.id = next_id
                self._id_sequences[entity_type] = next_id + 1

            for name, related in single_relations(entity).items():
                fk = f"{name}_id"
                if hasattr(entity, fk):
                    setattr(entity, fk, getattr(related, "id", None))

            self._data.setdefault(entity_type, []).append(entity)

    def get_data(self, entity_type: type) -> list[Any]:
        """
        Get stored entities for inspection.

        Args:
            entity_type: Entity class

        Returns:
            Flushed entities of that type, in write order
        """
        return self._data.get(entity_type, [])

    def reset(self) -> None:
        """Drop all stored data and id sequences (clear() keeps them)."""
        self.clear()
        self._data.clear()
        self._id_sequences.clear()
