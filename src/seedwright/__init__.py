"""
seedwright - Composable Factories and Seeders

Generates sample entities with factories and populates a persistence
context through composable, async seed units.
"""

from seedwright.config import SeedSettings, get_faker
from seedwright.contexts import DirectContext, PersistenceContext, StagingContext
from seedwright.decorators import seed_with
from seedwright.exceptions import (
    DefinitionError,
    PersistenceError,
    RelationBuildError,
    SeedwrightError,
    UnitResolutionError,
    UnitRunError,
)
from seedwright.factory import Factory
from seedwright.models import GenerationRequest, RunState, SeedRun, SharedContext
from seedwright.orchestrator import SeedOrchestrator, run_seed
from seedwright.registry import (
    clear_seeders,
    get_seeder,
    list_seeders,
    register_seeder,
)
from seedwright.relations import related
from seedwright.resolver import AttributeResolver
from seedwright.seeder import Seeder, SeedUnit

__version__ = "0.1.0"

__all__ = [
    "Factory",
    "AttributeResolver",
    "related",
    "Seeder",
    "SeedUnit",
    "SeedOrchestrator",
    "run_seed",
    "SharedContext",
    "SeedRun",
    "RunState",
    "GenerationRequest",
    "PersistenceContext",
    "StagingContext",
    "DirectContext",
    "SeedSettings",
    "get_faker",
    "seed_with",
    "register_seeder",
    "get_seeder",
    "list_seeders",
    "clear_seeders",
    "SeedwrightError",
    "DefinitionError",
    "RelationBuildError",
    "PersistenceError",
    "UnitResolutionError",
    "UnitRunError",
]
