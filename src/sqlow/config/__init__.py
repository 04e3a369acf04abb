"""Configuration management: profiles, TOML loading, and config models.

Usage:
    >>> from sqlow.config import load_db_config, DatabaseProfile, DatabaseConfig
"""

from sqlow.config.loader import load_db_config
from sqlow.config.models import DatabaseConfig, DatabaseProfile

__all__ = ["load_db_config", "DatabaseConfig", "DatabaseProfile"]
