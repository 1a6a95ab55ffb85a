"""Seed orchestrator: runs seed units and bounds each run with flush/clear."""

import logging
from collections.abc import Callable, Sequence
from typing import Any

from seedwright.contexts.base import PersistenceContext
from seedwright.exceptions import SeedwrightError, UnitResolutionError, UnitRunError
from seedwright.models import RunState, SeedRun, SharedContext
from seedwright.registry import get_seeder
from seedwright.seeder import Seeder

logger = logging.getLogger(__name__)

# Maps a seed unit reference (usually a name) to a seed unit class
Resolver = Callable[[Any], type]


class SeedOrchestrator:
    """
    Run seed units against a persistence context.

    A top-level run() creates a fresh SharedContext, runs the unit, then
    flushes and clears the context exactly once. Units started through
    call() share the caller's contexts and never flush or clear.
    """

    def __init__(self, resolver: Resolver | None = None):
        """
        Initialize orchestrator.

        Args:
            resolver: Maps a reference to a seed unit class. Defaults to the
                seeder registry for names; classes are always accepted as is.
        """
        self.resolver = resolver
        self.history: list[SeedRun] = []

    def resolve(self, reference: Any) -> type:
        """
        Resolve a seed unit reference to a constructible class.

        Raises:
            UnitResolutionError: If reference cannot be resolved
        """
        if isinstance(reference, type):
            unit_type = reference
        else:
            try:
                if self.resolver is not None:
                    unit_type = self.resolver(reference)
                elif isinstance(reference, str):
                    unit_type = get_seeder(reference)
                else:
                    raise UnitResolutionError(
                        reference, "expected a seeder class or a registered name"
                    )
            except UnitResolutionError:
                raise
            except Exception as exc:
                raise UnitResolutionError(reference, str(exc)) from exc

        if unit_type is None:
            raise UnitResolutionError(reference, "no seeder registered under this name")
        if not isinstance(unit_type, type) or not callable(getattr(unit_type, "run", None)):
            raise UnitResolutionError(reference, "resolved object is not a seed unit class")
        return unit_type

    async def run(self, reference: Any, context: PersistenceContext) -> SeedRun:
        """
        Run a seed unit as a top-level invocation.

        On success the context is flushed, then cleared. On failure nothing
        is flushed or cleared and the error propagates.

        Returns:
            SeedRun record in COMPLETED state

        Raises:
            UnitResolutionError: If the unit (or a nested one) can't be resolved
            UnitRunError: If a unit's run() raised a non-seedwright error
            SeedwrightError: Any other seedwright error, unchanged
        """
        seed_run = SeedRun(unit=_reference_name(reference))
        self.history.append(seed_run)
        logger.info(f"Seeding {seed_run.unit}")

        try:
            unit = self._instantiate(reference)
            seed_run.state = RunState.RUNNING
            await self._invoke(unit, context, seed_run.shared)
            await context.flush()
        except BaseException as exc:
            seed_run.state = RunState.FAILED
            seed_run.error = exc
            logger.error(f"Seeding {seed_run.unit} failed: {type(exc).__name__}")
            raise

        context.clear()
        seed_run.state = RunState.COMPLETED
        logger.info(f"Seeding {seed_run.unit} completed")
        return seed_run

    async def call(
        self,
        context: PersistenceContext,
        shared: SharedContext,
        references: Sequence[Any],
    ) -> None:
        """
        Run seed units in order with the caller's contexts.

        Meant to be used from inside a running unit. Does not flush or clear.
        """
        for reference in references:
            unit = self._instantiate(reference)
            logger.debug(f"Calling {type(unit).__name__}")
            await self._invoke(unit, context, shared)

    async def seed(self, context: PersistenceContext, *references: Any) -> list[SeedRun]:
        """Run each reference as its own top-level run (own flush/clear)."""
        return [await self.run(reference, context) for reference in references]

    async def seed_string(self, context: PersistenceContext, *names: str) -> list[SeedRun]:
        """Like seed(), for seeders referenced by name only."""
        for name in names:
            if not isinstance(name, str):
                raise UnitResolutionError(name, "expected a seeder name")
        return await self.seed(context, *names)

    def _instantiate(self, reference: Any) -> Any:
        unit_type = self.resolve(reference)
        try:
            unit = unit_type()
        except Exception as exc:
            raise UnitResolutionError(
                reference, f"could not instantiate {unit_type.__name__}: {exc}"
            ) from exc
        if isinstance(unit, Seeder):
            unit.orchestrator = self
        return unit

    async def _invoke(
        self, unit: Any, context: PersistenceContext, shared: SharedContext
    ) -> None:
        try:
            await unit.run(context, shared)
        except SeedwrightError:
            raise
        except Exception as exc:
            raise UnitRunError(
                type(unit).__name__, f"{type(exc).__name__}: {exc}"
            ) from exc


def _reference_name(reference: Any) -> str:
    if isinstance(reference, type):
        return reference.__name__
    return str(reference)


async def run_seed(
    reference: Any,
    context: PersistenceContext,
    resolver: Resolver | None = None,
) -> SeedRun:
    """
    Run one seed unit as a top-level invocation.

    Example:
        >>> ctx = StagingContext()
        >>> await run_seed(DatabaseSeeder, ctx)
        >>> await run_seed("database", ctx)  # registered name
    """
    return await SeedOrchestrator(resolver=resolver).run(reference, context)
