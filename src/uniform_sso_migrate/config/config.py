"""Configuration management for the Uniform SSO migration tool."""

import json
import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Accounts that are never migrated, in addition to the configured ignore list.
DEFAULT_IGNORED_EMAILS: List[str] = []


class ConfigError(ValueError):
    """Invalid or incomplete configuration."""


class MemberAction(str, Enum):
    """What happens to an existing member record before re-invitation."""

    NONE = 'none'
    MARK_OBSOLETE = 'mark_obsolete'
    DELETE = 'delete'


class APIConfig(BaseModel):
    """Uniform API endpoint configuration."""

    url: str = Field(..., description='Uniform API base URL')
    timeout: int = Field(default=30, description='Request timeout in seconds')

    @field_validator('url')
    def validate_url(cls, v):
        """Validate API URL format."""
        if not v.startswith(('http://', 'https://')):
            raise ValueError('URL must start with http:// or https://')
        return v.rstrip('/')

    @field_validator('timeout')
    def validate_timeout(cls, v):
        """Validate timeout is positive."""
        if v <= 0:
            raise ValueError('Timeout must be positive')
        return v


class TeamConfig(BaseModel):
    """A team and the API key that authorizes calls against it."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    team_id: str = Field(..., alias='teamId', description='Team ID')
    api_key: str = Field(..., alias='apiKey', repr=False, description='Team API key')

    @field_validator('team_id', 'api_key')
    def validate_not_blank(cls, v):
        """Team ID and API key are both required."""
        v = v.strip()
        if not v:
            raise ValueError('must not be empty')
        return v

    @property
    def masked_key(self) -> str:
        """API key prefix that is safe to log."""
        return f'{self.api_key[:5]}...'


class BackupConfig(BaseModel):
    """Backup settings."""

    enabled: bool = Field(default=True, description='Back up members before changes')
    directory: str = Field(default='./backups', description='Backup directory')


class MigrationOptions(BaseModel):
    """Options shared by the migration and restore runs."""

    mark_obsolete: bool = Field(
        default=False, description='Rename existing members to OBSOLETE - <name>'
    )
    delete_members: bool = Field(
        default=False, description='Delete existing members (wins over mark_obsolete)'
    )
    dry_run: bool = Field(default=False, description='Simulate without changes')
    backup: BackupConfig = Field(
        default_factory=BackupConfig, description='Backup settings'
    )
    ignored_emails: List[str] = Field(
        default_factory=list,
        validate_default=True,
        description='Emails that are never touched',
    )
    restore_from: Optional[str] = Field(
        default=None, description='Backup file to restore instead of migrating'
    )

    @field_validator('ignored_emails')
    def normalize_ignored_emails(cls, v):
        """Merge with the built-in list, lower-case and de-duplicate."""
        merged = []
        for email in [*v, *DEFAULT_IGNORED_EMAILS]:
            email = email.strip().lower()
            if email and email not in merged:
                merged.append(email)
        return merged

    @property
    def action(self) -> MemberAction:
        """The single mutation applied to each existing member; deletion wins.

        Both flags keep the values they were given.
        """
        if self.delete_members:
            return MemberAction.DELETE
        if self.mark_obsolete:
            return MemberAction.MARK_OBSOLETE
        return MemberAction.NONE

    def is_ignored(self, email: str) -> bool:
        """Case-insensitive match against the ignore list."""
        return email.strip().lower() in self.ignored_emails


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default='INFO', description='Log level')
    file: Optional[str] = Field(default=None, description='Log file path')
    format: Optional[str] = Field(default=None, description='Console log format')

    @field_validator('level')
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'Log level must be one of: {valid_levels}')
        return v.upper()


def load_teams_file(path: str) -> List[TeamConfig]:
    """Load team credentials from a JSON file of ``{teamId, apiKey}`` objects.

    Args:
        path: Path to the teams file

    Returns:
        Team configurations in file order

    Raises:
        ConfigError: If the file is missing or malformed
    """
    teams_path = Path(path)
    if not teams_path.exists():
        raise ConfigError(f'Teams file not found: {path}')

    try:
        with open(teams_path, 'r', encoding='utf-8') as f:
            entries = json.load(f)
    except ValueError as e:
        raise ConfigError(f'Error loading teams file: {e}') from e

    if not isinstance(entries, list):
        raise ConfigError('Teams file must contain an array of team configurations')

    teams = []
    for entry in entries:
        if not isinstance(entry, dict) or not entry.get('teamId') or not entry.get(
            'apiKey'
        ):
            raise ConfigError(
                'Each team configuration must have teamId and apiKey properties'
            )
        teams.append(TeamConfig(team_id=entry['teamId'], api_key=entry['apiKey']))

    return teams


def _env_flag(name: str) -> Optional[bool]:
    value = os.getenv(name)
    if value is None or value == '':
        return None
    return value.strip().lower() == 'true'


def _env_list(name: str) -> List[str]:
    value = os.getenv(name, '')
    return [item.strip() for item in value.split(',') if item.strip()]


class Config(BaseModel):
    """Main configuration class for the Uniform SSO migration tool."""

    model_config = ConfigDict(extra='forbid')

    api: APIConfig = Field(..., description='Uniform API settings')
    teams: List[TeamConfig] = Field(
        default_factory=list, description='Teams to process'
    )
    teams_file: Optional[str] = Field(
        default=None, description='JSON file with {teamId, apiKey} entries'
    )
    migration: MigrationOptions = Field(
        default_factory=MigrationOptions, description='Migration settings'
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description='Logging settings'
    )

    @classmethod
    def from_file(cls, config_path: str) -> 'Config':
        """Load configuration from YAML file."""
        config_file = Path(config_path)

        if not config_file.exists():
            raise FileNotFoundError(f'Configuration file not found: {config_path}')

        with open(config_file, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}

        return cls(**config_data)

    @classmethod
    def from_env(cls) -> 'Config':
        """Load configuration from environment variables."""
        # Load .env file if it exists
        load_dotenv()

        api_key = os.getenv('UNIFORM_API_KEY')
        teams = [
            {'team_id': team_id, 'api_key': api_key}
            for team_id in _env_list('TEAM_IDS')
            if api_key
        ]

        config_data = {
            'api': {
                'url': os.getenv('UNIFORM_API_URL'),
                'timeout': os.getenv('UNIFORM_API_TIMEOUT'),
            },
            'teams': teams,
            'teams_file': os.getenv('TEAMS_FILE') or None,
            'migration': {
                'mark_obsolete': _env_flag('MARK_OBSOLETE'),
                'delete_members': _env_flag('DELETE_MEMBERS'),
                'dry_run': _env_flag('DRY_RUN'),
                'backup': {
                    'enabled': _env_flag('BACKUP'),
                    'directory': os.getenv('BACKUP_DIR'),
                },
                'ignored_emails': _env_list('IGNORED_EMAILS'),
                'restore_from': os.getenv('RESTORE_FROM') or None,
            },
            'logging': {
                'level': os.getenv('LOG_LEVEL'),
                'file': os.getenv('LOG_FILE'),
            },
        }

        # Remove None values
        config_data = cls._remove_none_values(config_data)

        return cls(**config_data)

    @staticmethod
    def _remove_none_values(data: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively remove None values from dictionary."""
        if isinstance(data, dict):
            return {
                k: Config._remove_none_values(v)
                for k, v in data.items()
                if v is not None
            }
        return data

    def resolve_teams(self) -> List[TeamConfig]:
        """Teams to process; a teams file takes precedence over inline teams.

        Raises:
            ConfigError: If no team is configured
        """
        teams = load_teams_file(self.teams_file) if self.teams_file else self.teams

        if not teams:
            raise ConfigError(
                'No team configurations provided. Use --teams-file or set '
                'TEAM_IDS and UNIFORM_API_KEY'
            )
        return list(teams)

    def to_file(self, config_path: str) -> None:
        """Save configuration to YAML file."""
        config_file = Path(config_path)
        config_file.parent.mkdir(parents=True, exist_ok=True)

        with open(config_file, 'w', encoding='utf-8') as f:
            yaml.dump(
                self.model_dump(mode='json', exclude_none=True),
                f,
                default_flow_style=False,
                indent=2,
                sort_keys=False,
            )

    @classmethod
    def create_template(cls, output_path: str) -> None:
        """Create a configuration template file."""
        template = {
            'api': {
                'url': 'https://uniform.app/api/v1',
                'timeout': 30,
            },
            'teams': [
                {
                    'team_id': 'your-team-id',
                    'api_key': 'your-team-api-key',
                },
            ],
            'migration': {
                'mark_obsolete': True,
                'delete_members': False,
                'dry_run': True,
                'backup': {
                    'enabled': True,
                    'directory': './backups',
                },
                'ignored_emails': [],
            },
            'logging': {
                'level': 'INFO',
                'file': 'migration.log',
            },
        }

        cls(**template).to_file(output_path)
