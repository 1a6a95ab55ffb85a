"""Seed units: runnable, composable seeding steps."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from seedwright.contexts.base import PersistenceContext
from seedwright.models import SharedContext

if TYPE_CHECKING:
    from seedwright.orchestrator import SeedOrchestrator


@runtime_checkable
class SeedUnit(Protocol):
    """Anything with an async run(context, shared) can be seeded."""

    async def run(self, context: PersistenceContext, shared: SharedContext) -> None: ...


class Seeder(ABC):
    """
    Convenience base class for seed units.

    Example:
        >>> class DatabaseSeeder(Seeder):
        ...     async def run(self, context, shared):
        ...         shared["authors"] = await AuthorFactory(context).create(5)
        ...         await self.call(context, shared, [BookSeeder, "reviews"])

    The orchestrator that instantiates a seeder binds itself to it, so
    call() resolves references the same way the top-level run did.
    """

    orchestrator: "SeedOrchestrator | None" = None

    @abstractmethod
    async def run(self, context: PersistenceContext, shared: SharedContext) -> None:
        """Seed the context, reading and writing shared state."""
        pass

    async def call(
        self,
        context: PersistenceContext,
        shared: SharedContext,
        units: Sequence[Any],
    ) -> None:
        """
        Run other seed units with the same contexts.

        Units run sequentially in the given order. No flush/clear happens
        here; the top-level run does that once at the end.
        """
        orchestrator = self.orchestrator
        if orchestrator is None:
            from seedwright.orchestrator import SeedOrchestrator

            orchestrator = SeedOrchestrator()
        await orchestrator.call(context, shared, units)
