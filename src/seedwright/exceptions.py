"""Custom exceptions with helpful error messages."""

from typing import Any


class SeedwrightError(Exception):
    """Base exception for seedwright errors."""

    pass


class DefinitionError(SeedwrightError):
    """Factory definition failed or returned an invalid attribute mapping."""

    def __init__(self, factory: str, reason: str):
        self.factory = factory
        self.reason = reason
        super().__init__(
            f"Definition of factory '{factory}' failed: {reason}\n\n"
            f"Suggestions:\n"
            f"1. Make sure {factory}.definition() returns a dict of attributes\n"
            f"2. Check that every key is accepted by the model constructor\n"
            f"3. Pass explicit overrides for values that cannot be generated:\n"
            f"   await {factory}().make_one({{'field': value}})"
        )


class RelationBuildError(SeedwrightError):
    """Relation hook or nested factory call failed."""

    def __init__(self, factory: str, reason: str):
        self.factory = factory
        self.reason = reason
        super().__init__(
            f"Could not build relations for factory '{factory}': {reason}\n\n"
            f"Suggestions:\n"
            f"1. Check the hooks registered with {factory}().each(...)\n"
            f"2. Check nested factories awaited inside {factory}.definition()\n"
            f"3. Supply the related entity as an override instead of generating it"
        )


class PersistenceError(SeedwrightError):
    """Persistence context rejected a write or flush."""

    def __init__(self, message: str, entity: Any = None):
        self.entity = entity
        super().__init__(message)


class UnitResolutionError(SeedwrightError):
    """Seed unit reference cannot be resolved to a constructible type."""

    def __init__(self, reference: Any, reason: str | None = None):
        self.reference = reference
        detail = f": {reason}" if reason else ""
        super().__init__(
            f"Could not resolve seed unit '{reference}'{detail}\n\n"
            f"Suggestions:\n"
            f"1. Register the seeder: register_seeder('{reference}', MySeeder)\n"
            f"2. Pass the seeder class itself instead of its name\n"
            f"3. Use list_seeders() to see registered names"
        )


class UnitRunError(SeedwrightError):
    """Seed unit's run() raised an error."""

    def __init__(self, unit: str, reason: str):
        self.unit = unit
        self.reason = reason
        super().__init__(
            f"Seed unit '{unit}' failed: {reason}\n\n"
            f"Suggestions:\n"
            f"1. Check the traceback of the original exception (__cause__)\n"
            f"2. Nothing was flushed by the orchestrator; "
            f"retry the whole run once fixed"
        )
