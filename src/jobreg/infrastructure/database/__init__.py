"""SQLite database engine and schema via SQLAlchemy Core."""

from jobreg.infrastructure.database.engine import create_db_engine, init_database
from jobreg.infrastructure.database.schema import (
    ATTRIBUTE_TABLES,
    ENTITY_TABLES,
    applications,
    cluster_commands,
    clusters,
    commands,
    metadata,
)

__all__ = [
    "ATTRIBUTE_TABLES",
    "ENTITY_TABLES",
    "applications",
    "cluster_commands",
    "clusters",
    "commands",
    "create_db_engine",
    "init_database",
    "metadata",
]
