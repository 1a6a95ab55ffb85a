"""Pytest decorators for running seeders before a test."""

from collections.abc import Callable
from typing import Any


def seed_with(*units: Any):
    """
    Decorator to run seed units before a pytest test function.

    Usage:
        @seed_with(AuthorSeeder, "books")
        async def test_api(seeded):
            assert len(seeded.shared.authors) == 5

    The decorator only records the units; the `seeded` fixture (see
    tests/conftest.py) runs them through SeedOrchestrator. Stacked
    decorators run top to bottom.
    """

    def decorator(func: Callable) -> Callable:
        if not hasattr(func, "_seed_units"):
            func._seed_units = []

        # Decorators apply bottom-up; prepend to keep source order
        func._seed_units[:0] = list(units)
        return func

    return decorator
