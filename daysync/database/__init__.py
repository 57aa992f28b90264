"""Database module for daysync."""

from .connection import Database
from .models import Dataset, ImportSession, ImportStatus, Run, Setup, TestDay, TireSet
from .schema import create_schema
from .store import CatalogStore

__all__ = [
    "Database",
    "CatalogStore",
    "create_schema",
    "Dataset",
    "TestDay",
    "Run",
    "Setup",
    "TireSet",
    "ImportSession",
    "ImportStatus",
]
