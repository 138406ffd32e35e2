"""Configuration models and loaders."""

from .config import (
    DEFAULT_IGNORED_EMAILS,
    APIConfig,
    BackupConfig,
    Config,
    ConfigError,
    LoggingConfig,
    MemberAction,
    MigrationOptions,
    TeamConfig,
    load_teams_file,
)

__all__ = [
    'DEFAULT_IGNORED_EMAILS',
    'APIConfig',
    'BackupConfig',
    'Config',
    'ConfigError',
    'LoggingConfig',
    'MemberAction',
    'MigrationOptions',
    'TeamConfig',
    'load_teams_file',
]
