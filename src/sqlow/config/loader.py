"""Load ``db.toml`` profile configuration."""

import tomllib
from pathlib import Path

from pydantic import ValidationError

from sqlow.config.models import DatabaseConfig, DatabaseProfile


def load_db_config(config_path: Path | None = None) -> DatabaseConfig:
    """Load database configuration from TOML file.

    Args:
        config_path: Path to db.toml (default: ./db.toml)

    Returns:
        DatabaseConfig with all profiles

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config format is invalid
    """
    if config_path is None:
        config_path = Path.cwd() / "db.toml"
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(
            f"Database config not found: {config_path}\n"
            f"Create db.toml with a [profiles.<name>] section."
        )

    with open(config_path, "rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML in {config_path}: {e}") from e

    # Parse profiles
    profiles = {}
    try:
        for name, profile_data in data.get("profiles", {}).items():
            profiles[name] = DatabaseProfile(**profile_data)
    except ValidationError as e:
        raise ValueError(f"Invalid profile in {config_path}: {e}") from e

    # Parse schema settings
    schema_settings = data.get("schema", {})

    return DatabaseConfig(
        profiles=profiles,
        tables_file=schema_settings.get("file", "tables.toml"),
        allow_drop=schema_settings.get("allow_drop", False),
    )
