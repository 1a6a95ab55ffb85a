"""Data models and type definitions."""

from collections.abc import Iterator, Mapping, MutableMapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class SharedContext(MutableMapping[str, Any]):
    """
    Mutable key/value store shared by every seed unit of one run.

    Created once per top-level run and passed by reference to every nested
    call, so later units see what earlier ones stored:

        shared["authors"] = await AuthorFactory(ctx).create(10)
        ...
        shared.authors  # same list, in a later unit

    Last writer wins; nothing is merged.
    """

    def __init__(self, initial: Mapping[str, Any] | None = None):
        self._data: dict[str, Any] = dict(initial or {})

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._data[key] = value

    def __delitem__(self, key: str) -> None:
        del self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __getattr__(self, name: str) -> Any:
        """
        Allow attribute access to stored values.

        Raises:
            AttributeError: If key doesn't exist
        """
        if name.startswith("_"):
            raise AttributeError(f"No attribute '{name}'")
        if name in self._data:
            return self._data[name]
        raise AttributeError(f"No key '{name}' in shared context")

    def __repr__(self) -> str:
        return f"SharedContext({self._data!r})"


@dataclass
class GenerationRequest:
    """
    Request to generate entities with one factory.

    Attributes:
        count: Number of entities to generate
        overrides: Attribute overrides (value or lazy callable)
    """

    count: int
    overrides: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.count < 0:
            raise ValueError(f"count must be non-negative, got {self.count}")
        self.overrides = dict(self.overrides or {})


class RunState(Enum):
    """Lifecycle of a top-level seed run."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class SeedRun:
    """
    Record of one top-level seed run.

    Attributes:
        unit: Name of the seed unit
        state: Current lifecycle state
        shared: Shared context created for the run
        error: Exception that failed the run, if any
    """

    unit: str
    state: RunState = RunState.IDLE
    shared: SharedContext = field(default_factory=SharedContext)
    error: BaseException | None = None

    @property
    def succeeded(self) -> bool:
        return self.state is RunState.COMPLETED
