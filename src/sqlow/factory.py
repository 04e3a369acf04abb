"""Database client and schema context factory.

Resolves a connection from one of two sources:
1. Profile mode (db.toml): named profiles selected by ``{PREFIX}DB_PROFILE``
2. Direct mode: an explicit ``database_url`` argument

Usage:
    from sqlow.factory import connect

    context = await connect()                      # profile from DB_PROFILE
    context = await connect(profile_name="local")  # explicit profile
    context = await connect(database_url="mysql://root@localhost/app")
"""

import logging
import os
from pathlib import Path
from urllib.parse import quote

from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

from sqlow.adapters.base import DatabaseClient
from sqlow.adapters.mysql import AsyncMySQLAdapter
from sqlow.config.loader import load_db_config
from sqlow.config.models import DatabaseProfile
from sqlow.errors import QueryFailure, SchemaUninitialized, UnsupportedDialect
from sqlow.schema.context import SUPPORTED_DIALECTS, SchemaContext, initialize_context

logger = logging.getLogger(__name__)


class ProfileNotFoundError(Exception):
    """Raised when no database profile is configured or the name is unknown."""

    pass


# ============================================================================
# Profile Resolution
# ============================================================================


def get_active_profile_name(env_prefix: str = "") -> str:
    """Get active profile name from the ``{env_prefix}DB_PROFILE`` env var.

    Args:
        env_prefix: Prefix for the variable, e.g. ``"APP_"`` reads
            ``APP_DB_PROFILE``.

    Raises:
        ProfileNotFoundError: If the variable is unset or empty.
    """
    env_var = f"{env_prefix}DB_PROFILE"
    env_profile = os.environ.get(env_var)
    if env_profile:
        return env_profile

    raise ProfileNotFoundError(
        f"No database profile configured.\n"
        f"Set {env_var}=<name> or pass a profile name explicitly."
    )


def get_active_profile(
    profile_name: str | None = None,
    env_prefix: str = "",
    config_path: Path | None = None,
) -> tuple[str, DatabaseProfile]:
    """Get the profile name and configuration.

    Returns:
        Tuple of (profile_name, DatabaseProfile)

    Raises:
        ProfileNotFoundError: If no profile configured or not in db.toml
        FileNotFoundError: If db.toml doesn't exist
    """
    if profile_name is None:
        profile_name = get_active_profile_name(env_prefix)
    config = load_db_config(config_path)

    if profile_name not in config.profiles:
        raise ProfileNotFoundError(
            f"Profile '{profile_name}' not found in db.toml.\n"
            f"Available profiles: {', '.join(config.profiles.keys())}"
        )

    return profile_name, config.profiles[profile_name]


def resolve_url(profile: DatabaseProfile) -> str:
    """Resolve profile URL with password substitution.

    ``[YOUR-PASSWORD]`` in the URL is replaced by the URL-quoted
    ``db_password``.
    """
    url = profile.url
    if profile.db_password and "[YOUR-PASSWORD]" in url:
        url = url.replace("[YOUR-PASSWORD]", quote(profile.db_password, safe=""))
    return url


def resolve_schema_name(url: str, schema_name: str | None = None) -> str:
    """Pick the schema name: explicit value first, then the URL's database.

    Raises:
        SchemaUninitialized: If neither provides a name.
    """
    if schema_name:
        return schema_name
    try:
        database = make_url(url).database
    except ArgumentError:
        database = None
    if not database:
        raise SchemaUninitialized(
            "No schema name: set schema_name in the profile or include the "
            "database in the URL"
        )
    return database


def _check_provider(provider: str) -> str:
    normalized = provider.strip().lower()
    if normalized not in SUPPORTED_DIALECTS:
        raise UnsupportedDialect(
            f"Unsupported provider: {provider}",
            details={"supported": ",".join(sorted(SUPPORTED_DIALECTS))},
        )
    return normalized


# ============================================================================
# Adapter and Context Factory
# ============================================================================


async def get_adapter(
    profile_name: str | None = None,
    env_prefix: str = "",
    database_url: str | None = None,
    config_path: Path | None = None,
) -> DatabaseClient:
    """Create a database adapter.

    Args:
        profile_name: Profile in db.toml; defaults to ``{env_prefix}DB_PROFILE``.
        env_prefix: Prefix for the profile environment variable.
        database_url: Direct URL; bypasses db.toml when given.
        config_path: Path to db.toml (default: ./db.toml).

    Returns:
        ``AsyncMySQLAdapter`` for the resolved URL.

    Raises:
        ProfileNotFoundError: If no profile is configured or found.
        UnsupportedDialect: If the profile's provider is not MySQL-family.
        ValueError: If the URL is not a MySQL URL.
    """
    if database_url:
        return AsyncMySQLAdapter(database_url)

    name, profile = get_active_profile(profile_name, env_prefix, config_path)
    _check_provider(profile.provider)
    logger.debug(f"Creating adapter for profile '{name}'")
    return AsyncMySQLAdapter(resolve_url(profile))


async def connect(
    profile_name: str | None = None,
    env_prefix: str = "",
    database_url: str | None = None,
    schema_name: str | None = None,
    config_path: Path | None = None,
) -> SchemaContext:
    """Create an adapter, verify it answers, and build the schema context.

    The schema name is taken from ``schema_name``, then the profile's
    ``schema_name``, then the database in the URL.

    Raises:
        ProfileNotFoundError, UnsupportedDialect, SchemaUninitialized:
            Configuration problems.
        QueryFailure: If the database does not answer.
    """
    if database_url:
        url, provider = database_url, "mysql"
    else:
        _, profile = get_active_profile(profile_name, env_prefix, config_path)
        url, provider = resolve_url(profile), _check_provider(profile.provider)
        schema_name = schema_name or profile.schema_name

    schema_name = resolve_schema_name(url, schema_name)
    adapter = await get_adapter(
        profile_name=profile_name,
        env_prefix=env_prefix,
        database_url=url,
    )

    try:
        await adapter.ping()
    except Exception as e:
        await adapter.close()
        raise QueryFailure("Failed to connect to database", cause=e) from e

    return initialize_context(adapter, schema_name, dialect=provider)
