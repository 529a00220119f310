"""Persistence layer - storage adapters and configuration."""

from modelforge.persistence.adapter import PersistenceAdapter
from modelforge.persistence.config import DatabaseConfig, create_adapter
from modelforge.persistence.memory import MemoryAdapter
from modelforge.persistence.sql import SQLAdapter

__all__ = [
    "DatabaseConfig",
    "MemoryAdapter",
    "PersistenceAdapter",
    "SQLAdapter",
    "create_adapter",
]
