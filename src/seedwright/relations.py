"""Relation building: post-build hooks and inline related entities."""

import inspect
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from seedwright.exceptions import PersistenceError, RelationBuildError

if TYPE_CHECKING:
    from seedwright.factory import Factory

# Receives the freshly built entity and assigns relation fields on it
RelationHook = Callable[[Any], Awaitable[Any] | None]


async def apply_hooks(factory_name: str, entity: Any, hooks: Sequence[RelationHook]) -> None:
    """
    Run hooks on an entity in registration order.

    Raises:
        RelationBuildError: If a hook fails
        PersistenceError: Unchanged, when a hook's create() fails to write
    """
    for position, hook in enumerate(hooks, start=1):
        try:
            result = hook(entity)
            if inspect.isawaitable(result):
                await result
        except (PersistenceError, RelationBuildError):
            raise
        except Exception as exc:
            hook_name = getattr(hook, "__name__", repr(hook))
            raise RelationBuildError(
                factory_name,
                f"hook #{position} ({hook_name}) raised {type(exc).__name__}: {exc}",
            ) from exc


async def related(
    params: Mapping[str, Any],
    key: str,
    factory: "Factory",
    persist: bool = False,
) -> Any:
    """
    Use the related entity passed in params, or build a new one.

    Meant for definitions:

        async def definition(self, params):
            author = await related(params, "author", AuthorFactory(self.context))
            return {"author": author, "title": f"{author.name}'s memoir"}

    Args:
        params: Overrides given to the definition
        key: Relation field name
        factory: Factory for the related entity type
        persist: Use create_one() instead of make_one()
    """
    if params.get(key) is not None:
        return params[key]
    if persist:
        return await factory.create_one()
    return await factory.make_one()
