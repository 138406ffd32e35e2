"""Tests for configuration management."""

import json
import os
import tempfile
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from uniform_sso_migrate.config import config as config_module
from uniform_sso_migrate.config.config import (
    APIConfig,
    Config,
    ConfigError,
    MemberAction,
    MigrationOptions,
    TeamConfig,
    load_teams_file,
)


class TestAPIConfig:
    """Test API endpoint configuration."""

    def test_valid_config(self):
        """Test valid configuration creation."""
        config = APIConfig(url='https://uniform.app/api/v1/', timeout=10)

        assert config.url == 'https://uniform.app/api/v1'
        assert config.timeout == 10

    def test_url_validation(self):
        """Test URL validation."""
        with pytest.raises(ValueError):
            APIConfig(url='uniform.app/api')

    def test_timeout_validation(self):
        """Test timeout must be positive."""
        with pytest.raises(ValueError):
            APIConfig(url='https://uniform.app', timeout=0)


class TestTeamConfig:
    """Test team credentials."""

    def test_aliases(self):
        """Test teams accept the teams-file field names."""
        team = TeamConfig(teamId='team-1', apiKey='secret-key')

        assert team.team_id == 'team-1'
        assert team.api_key == 'secret-key'

    def test_key_is_hidden(self):
        """Test the API key is not part of the repr and is masked."""
        team = TeamConfig(team_id='team-1', api_key='secret-key')

        assert 'secret-key' not in repr(team)
        assert team.masked_key == 'secre...'

    def test_immutable(self):
        """Test team configuration cannot change during a run."""
        team = TeamConfig(team_id='team-1', api_key='secret-key')

        with pytest.raises(ValidationError):
            team.api_key = 'other'

    def test_blank_values(self):
        """Test blank team IDs are rejected."""
        with pytest.raises(ValueError):
            TeamConfig(team_id='  ', api_key='secret-key')


class TestMigrationOptions:
    """Test migration options."""

    def test_defaults(self):
        """Test default options only re-invite, with backups on."""
        options = MigrationOptions()

        assert options.action is MemberAction.NONE
        assert options.dry_run is False
        assert options.backup.enabled is True
        assert options.backup.directory == './backups'

    def test_delete_wins(self):
        """Test delete_members takes priority without clearing mark_obsolete."""
        options = MigrationOptions(mark_obsolete=True, delete_members=True)

        assert options.mark_obsolete is True
        assert options.delete_members is True
        assert options.action is MemberAction.DELETE

    def test_mark_obsolete_action(self):
        """Test mark_obsolete alone selects renaming."""
        options = MigrationOptions(mark_obsolete=True)

        assert options.action is MemberAction.MARK_OBSOLETE

    def test_ignored_emails_normalized(self):
        """Test ignored emails are trimmed, lower-cased and de-duplicated."""
        options = MigrationOptions(
            ignored_emails=[' Admin@Example.com', 'admin@example.com', '', 'b@x.io']
        )

        assert options.ignored_emails == ['admin@example.com', 'b@x.io']
        assert options.is_ignored('ADMIN@example.COM') is True
        assert options.is_ignored('other@example.com') is False

    def test_built_in_ignored_emails(self):
        """Test the built-in ignore list is merged in."""
        with patch.object(config_module, 'DEFAULT_IGNORED_EMAILS', ['ops@uniform.dev']):
            options = MigrationOptions(ignored_emails=['a@example.com'])
            default_options = MigrationOptions()

        assert options.ignored_emails == ['a@example.com', 'ops@uniform.dev']
        assert default_options.ignored_emails == ['ops@uniform.dev']


class TestTeamsFile:
    """Test loading team credentials from JSON."""

    def write(self, tmp_path, content):
        path = tmp_path / 'teams.json'
        path.write_text(content, encoding='utf-8')
        return str(path)

    def test_load(self, tmp_path):
        """Test a valid teams file."""
        path = self.write(
            tmp_path,
            json.dumps(
                [
                    {'teamId': 'team-1', 'apiKey': 'key-1'},
                    {'teamId': 'team-2', 'apiKey': 'key-2'},
                ]
            ),
        )

        teams = load_teams_file(path)

        assert [team.team_id for team in teams] == ['team-1', 'team-2']
        assert teams[1].api_key == 'key-2'

    def test_missing_file(self, tmp_path):
        """Test a missing teams file."""
        with pytest.raises(ConfigError, match='Teams file not found'):
            load_teams_file(str(tmp_path / 'missing.json'))

    def test_not_an_array(self, tmp_path):
        """Test a teams file must hold an array."""
        path = self.write(tmp_path, '{"teamId": "team-1", "apiKey": "key-1"}')

        with pytest.raises(ConfigError, match='array'):
            load_teams_file(path)

    def test_missing_fields(self, tmp_path):
        """Test every entry needs both fields."""
        path = self.write(tmp_path, '[{"teamId": "team-1"}]')

        with pytest.raises(ConfigError, match='teamId and apiKey'):
            load_teams_file(path)

    def test_invalid_json(self, tmp_path):
        """Test invalid JSON is a configuration error."""
        path = self.write(tmp_path, '[{')

        with pytest.raises(ConfigError):
            load_teams_file(path)


class TestConfig:
    """Test main configuration class."""

    def test_config_from_dict(self):
        """Test configuration creation from dictionary."""
        config = Config(
            api={'url': 'https://uniform.app/api/v1'},
            teams=[{'team_id': 'team-1', 'api_key': 'key-1'}],
            migration={'delete_members': True, 'backup': {'directory': '/tmp/b'}},
        )

        assert config.api.timeout == 30
        assert config.resolve_teams()[0].team_id == 'team-1'
        assert config.migration.action is MemberAction.DELETE
        assert config.migration.backup.directory == '/tmp/b'
        assert config.logging.level == 'INFO'

    def test_extra_fields_forbidden(self):
        """Test unknown top-level keys are rejected."""
        with pytest.raises(ValidationError):
            Config(api={'url': 'https://uniform.app'}, unknown=True)

    def test_config_from_file(self):
        """Test configuration loading from YAML file."""
        config_content = """
api:
  url: https://uniform.app/api/v1

teams:
  - teamId: team-1
    apiKey: key-1

migration:
  mark_obsolete: true
  dry_run: true
  ignored_emails:
    - Admin@Example.com
"""

        with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
            f.write(config_content)
            f.flush()

        try:
            config = Config.from_file(f.name)
            assert config.api.url == 'https://uniform.app/api/v1'
            assert config.teams[0].api_key == 'key-1'
            assert config.migration.action is MemberAction.MARK_OBSOLETE
            assert config.migration.dry_run is True
            assert config.migration.ignored_emails == ['admin@example.com']
        finally:
            os.unlink(f.name)

    def test_missing_config_file(self):
        """Test handling of missing configuration file."""
        with pytest.raises(FileNotFoundError):
            Config.from_file('/nonexistent/config.yaml')

    def test_invalid_config_file(self):
        """Test handling of invalid configuration file."""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
            f.write('invalid: yaml: content:')
            f.flush()

        try:
            with pytest.raises(Exception):
                Config.from_file(f.name)
        finally:
            os.unlink(f.name)

    def test_config_from_env(self, monkeypatch, tmp_path):
        """Test configuration loading from environment variables."""
        monkeypatch.chdir(tmp_path)
        env_vars = {
            'UNIFORM_API_URL': 'https://uniform.app/api/v1',
            'UNIFORM_API_KEY': 'shared-key',
            'TEAM_IDS': 'team-1, team-2,,',
            'MARK_OBSOLETE': 'true',
            'DELETE_MEMBERS': 'false',
            'DRY_RUN': 'true',
            'BACKUP': 'false',
            'BACKUP_DIR': '/var/backups/uniform',
            'IGNORED_EMAILS': 'a@example.com, B@example.com',
            'LOG_LEVEL': 'debug',
        }
        for key, value in env_vars.items():
            monkeypatch.setenv(key, value)
        for key in ('TEAMS_FILE', 'RESTORE_FROM', 'LOG_FILE', 'UNIFORM_API_TIMEOUT'):
            monkeypatch.delenv(key, raising=False)

        config = Config.from_env()

        assert config.api.url == 'https://uniform.app/api/v1'
        assert [team.team_id for team in config.resolve_teams()] == ['team-1', 'team-2']
        assert all(team.api_key == 'shared-key' for team in config.teams)
        assert config.migration.action is MemberAction.MARK_OBSOLETE
        assert config.migration.dry_run is True
        assert config.migration.backup.enabled is False
        assert config.migration.backup.directory == '/var/backups/uniform'
        assert config.migration.ignored_emails == ['a@example.com', 'b@example.com']
        assert config.logging.level == 'DEBUG'

    def test_teams_file_wins(self, tmp_path):
        """Test a teams file replaces inline teams."""
        teams_path = tmp_path / 'teams.json'
        teams_path.write_text(
            json.dumps([{'teamId': 'from-file', 'apiKey': 'key-f'}]), encoding='utf-8'
        )
        config = Config(
            api={'url': 'https://uniform.app'},
            teams=[{'team_id': 'inline', 'api_key': 'key-i'}],
            teams_file=str(teams_path),
        )

        assert [team.team_id for team in config.resolve_teams()] == ['from-file']

    def test_no_teams(self):
        """Test a configuration without teams cannot run."""
        config = Config(api={'url': 'https://uniform.app'})

        with pytest.raises(ConfigError, match='No team configurations'):
            config.resolve_teams()

    def test_create_template(self, tmp_path):
        """Test the template is a loadable configuration."""
        path = tmp_path / 'config.yaml'

        Config.create_template(str(path))
        config = Config.from_file(str(path))

        assert config.migration.dry_run is True
        assert config.migration.action is MemberAction.MARK_OBSOLETE
        assert config.resolve_teams()[0].team_id == 'your-team-id'
        assert 'teams_file' not in path.read_text(encoding='utf-8')

    def test_to_file_round_trip(self, tmp_path):
        """Test saving and reloading a configuration."""
        config = Config(
            api={'url': 'https://uniform.app'},
            teams=[{'team_id': 'team-1', 'api_key': 'key-1'}],
            migration={'mark_obsolete': True},
        )
        path = tmp_path / 'saved.yaml'

        config.to_file(str(path))

        assert Config.from_file(str(path)) == config
