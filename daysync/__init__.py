"""daysync - Discover test-day folders and merge them into a local catalog."""

__version__ = "0.1.0"

from daysync.database import CatalogStore, Database
from daysync.merge import merge
from daysync.scanner import Scanner

__all__ = ["CatalogStore", "Database", "Scanner", "merge"]
