"""Pydantic models for database configuration."""

from pydantic import BaseModel, Field


class DatabaseProfile(BaseModel):
    """Database connection profile from db.toml."""

    url: str
    description: str = ""
    db_password: str | None = None  # For [YOUR-PASSWORD] placeholder substitution
    provider: str = "mysql"
    schema_name: str | None = None  # Defaults to the database named in the URL


class DatabaseConfig(BaseModel):
    """Complete database configuration from db.toml."""

    profiles: dict[str, DatabaseProfile] = Field(default_factory=dict)
    tables_file: str = "tables.toml"
    allow_drop: bool = False
