"""Entity factories: make in memory, create through a persistence context."""

import copy
import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Mapping
from typing import Any, ClassVar, Generic, TypeVar

from faker import Faker

from seedwright.config import get_faker
from seedwright.contexts.base import PersistenceContext
from seedwright.exceptions import DefinitionError, SeedwrightError
from seedwright.models import GenerationRequest
from seedwright.relations import RelationHook, apply_hooks
from seedwright.resolver import AttributeResolver

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Shared by factories that are not given their own Faker
fake = get_faker()


class Factory(ABC, Generic[T]):
    """
    Base class for entity factories.

    Subclass with a model and a definition:

        class AuthorFactory(Factory[Author]):
            model = Author

            def definition(self, params):
                return {"name": self.faker.name(), "email": self.faker.email()}

        author = await AuthorFactory().make_one({"name": "John Snow"})
        authors = await AuthorFactory(ctx).create(10)

    definition() may be async and may await other factories. Values in the
    returned dict may be lazy (see AttributeResolver).
    """

    model: ClassVar[type]

    def __init__(
        self,
        context: PersistenceContext | None = None,
        faker: Faker | None = None,
    ):
        """
        Initialize factory.

        Args:
            context: Persistence context (required for create/create_one)
            faker: Faker instance for definitions (default: shared instance)
        """
        self.context = context
        self.faker = faker or fake
        self.resolver = AttributeResolver()
        self._hooks: list[RelationHook] = []

    @abstractmethod
    def definition(self, params: dict[str, Any]) -> Mapping[str, Any] | Awaitable[Mapping[str, Any]]:
        """
        Produce default attributes for one entity.

        Args:
            params: Overrides supplied by the caller (may be empty)

        Returns:
            Attribute mapping (or an awaitable of one)
        """
        pass

    def each(self, hook: RelationHook) -> "Factory[T]":
        """
        Return a copy of this factory with hook appended.

        Hooks run on every built entity, in registration order, before it
        is returned or registered for persistence. The original factory is
        left unchanged, so chained calls accumulate:

            BookFactory().each(attach_author).each(attach_tags)
        """
        configured = copy.copy(self)
        configured._hooks = [*self._hooks, hook]
        return configured

    async def make(self, count: int, overrides: Mapping[str, Any] | None = None) -> list[T]:
        """
        Build count entities in memory (never registered for persistence).

        Args:
            count: Number of entities (0 returns an empty list)
            overrides: Attribute overrides applied to every entity

        Returns:
            List of new entities
        """
        request = GenerationRequest(count=count, overrides=dict(overrides or {}))
        return await self._build(request)

    async def make_one(self, overrides: Mapping[str, Any] | None = None) -> T:
        """Build one entity in memory."""
        entities = await self.make(1, overrides)
        return entities[0]

    async def create(self, count: int, overrides: Mapping[str, Any] | None = None) -> list[T]:
        """
        Build count entities, register them all, then flush once.

        Raises:
            ValueError: If the factory has no persistence context
        """
        context = self._require_context()
        request = GenerationRequest(count=count, overrides=dict(overrides or {}))
        entities = await self._build(request)

        for entity in entities:
            context.persist(entity)
        await context.flush()

        logger.debug(f"{type(self).__name__}: created {len(entities)} entities")
        return entities

    async def create_one(self, overrides: Mapping[str, Any] | None = None) -> T:
        """Build, register and flush one entity."""
        entities = await self.create(1, overrides)
        return entities[0]

    async def _build(self, request: GenerationRequest) -> list[T]:
        name = type(self).__name__
        entities: list[T] = []

        for instance in range(1, request.count + 1):
            attributes = await self.resolver.resolve(self, request.overrides, instance)
            entity = self._instantiate(attributes)
            await apply_hooks(name, entity, self._hooks)
            entities.append(entity)

        return entities

    def _instantiate(self, attributes: dict[str, Any]) -> T:
        name = type(self).__name__
        try:
            if self.context is not None:
                return self.context.create_record(self.model, attributes)
            return self.model(**attributes)
        except SeedwrightError:
            raise
        except Exception as exc:
            raise DefinitionError(
                name,
                f"{self.model.__name__} rejected attributes: {type(exc).__name__}: {exc}",
            ) from exc

    def _require_context(self) -> PersistenceContext:
        if self.context is None:
            raise ValueError(
                f"{type(self).__name__} has no persistence context. "
                f"Pass one to use create(): {type(self).__name__}(context)"
            )
        return self.context
