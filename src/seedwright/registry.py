"""Named seed units, so run() and call() accept a string reference."""

from collections.abc import Callable

_seeders: dict[str, type] = {}


def register_seeder(name: str, seeder_class: type | None = None) -> Callable | None:
    """
    Register a seed unit type under a name.

    Works as a plain call or as a class decorator:

        >>> register_seeder("authors", AuthorSeeder)
        >>>
        >>> @register_seeder("books")
        ... class BookSeeder(Seeder):
        ...     async def run(self, context, shared): ...

    Raises:
        ValueError: If the class has no 'run' method
    """

    def decorator(cls: type) -> type:
        if not callable(getattr(cls, "run", None)):
            raise ValueError(f"{cls.__name__} cannot be a seeder: no 'run' method")
        _seeders[name] = cls
        return cls

    if seeder_class is not None:
        decorator(seeder_class)
        return None
    return decorator


def get_seeder(name: str) -> type | None:
    return _seeders.get(name)


def list_seeders() -> list[str]:
    return list(_seeders)


def clear_seeders() -> None:
    _seeders.clear()
