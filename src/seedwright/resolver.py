"""Attribute resolution: definition output merged with overrides."""

import inspect
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from seedwright.exceptions import (
    DefinitionError,
    PersistenceError,
    RelationBuildError,
    SeedwrightError,
)

if TYPE_CHECKING:
    from seedwright.factory import Factory


class AttributeResolver:
    """
    Resolve the attribute mapping of one entity.

    Steps:
    1. Call factory.definition(params), awaiting it if it is a coroutine.
       params is a copy of the overrides so the definition can branch on
       supplied values (e.g. reuse a given author instead of building one).
    2. Shallow merge: {**definition_output, **overrides}. Overrides always
       win, even if the definition ignored them.
    3. Evaluate lazy values: callables are called with no argument, or with
       the 1-based instance number when they require one. Awaitable results
       are awaited. Classes are kept as values.
    """

    async def resolve(
        self,
        factory: "Factory",
        overrides: Mapping[str, Any] | None = None,
        instance: int = 1,
    ) -> dict[str, Any]:
        """
        Resolve attributes for one entity.

        Args:
            factory: Factory whose definition provides defaults
            overrides: Attribute overrides (value or lazy callable)
            instance: 1-based position of the entity in its batch

        Returns:
            Attribute mapping ready for the model constructor

        Raises:
            DefinitionError: If definition fails or returns a non-mapping
            RelationBuildError: If a nested factory call inside it fails
            PersistenceError: Unchanged, from nested create() calls
        """
        name = type(factory).__name__
        overrides = dict(overrides or {})

        try:
            defaults = factory.definition(dict(overrides))
            if inspect.isawaitable(defaults):
                defaults = await defaults
        except (PersistenceError, RelationBuildError):
            raise
        except SeedwrightError as exc:
            raise RelationBuildError(
                name, f"nested factory call failed with {type(exc).__name__}"
            ) from exc
        except Exception as exc:
            raise DefinitionError(name, f"{type(exc).__name__}: {exc}") from exc

        if not isinstance(defaults, Mapping):
            raise DefinitionError(
                name, f"definition() returned {type(defaults).__name__}, expected a dict"
            )

        merged = {**defaults, **overrides}

        resolved: dict[str, Any] = {}
        for key, value in merged.items():
            try:
                resolved[key] = await self._evaluate(value, instance)
            except SeedwrightError:
                raise
            except Exception as exc:
                raise DefinitionError(
                    name, f"lazy value for '{key}' failed: {type(exc).__name__}: {exc}"
                ) from exc

        return resolved

    async def _evaluate(self, value: Any, instance: int) -> Any:
        if not callable(value) or isinstance(value, type):
            return value

        if _required_params(value) > 0:
            result = value(instance)
        else:
            result = value()

        if inspect.isawaitable(result):
            result = await result
        return result


def _required_params(func: Any) -> int:
    """Count positional parameters without defaults."""
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        # Builtins without signature metadata
        return 0
    return sum(
        1
        for p in sig.parameters.values()
        if p.default is p.empty
        and p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)
    )
