"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, jobreg.toml only contains overrides.
A fresh registry needs no config file at all.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class DatabaseConfig(BaseModel):
    """[database] section."""

    model_config = {"frozen": True}

    path: str = ".jobreg/registry.db"  # relative paths resolve against the root
    echo: bool = False


class QueryConfig(BaseModel):
    """[query] section."""

    model_config = {"frozen": True}

    default_page_size: int = 64


class RegistryConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    query: QueryConfig = Field(default_factory=QueryConfig)
