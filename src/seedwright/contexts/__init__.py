"""Persistence contexts that factories and seeders write through."""

from seedwright.contexts.base import PersistenceContext, UnitOfWork
from seedwright.contexts.direct import DirectContext
from seedwright.contexts.staging import StagingContext

__all__ = ["PersistenceContext", "UnitOfWork", "DirectContext", "StagingContext"]
