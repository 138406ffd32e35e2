"""Migration engine - main entry point for migration operations."""

from typing import Callable, List, Optional

from loguru import logger

from ..api.client import UniformClient, UniformClientFactory
from ..backup.store import BackupStore
from ..config.config import Config, TeamConfig
from .orchestrator import MigrationOrchestrator
from .restore import RestoreOrchestrator
from .results import MigrationResult, MigrationSummary, RestoreResult, RestoreSummary

TeamCallback = Callable[[TeamConfig], None]


class MigrationEngine:
    """Runs a migration or restore over every configured team, one by one."""

    def __init__(self, config: Config, client: Optional[UniformClient] = None):
        """Initialize migration engine.

        Args:
            config: Tool configuration
            client: Uniform client (created from ``config.api`` if omitted)
        """
        self.config = config
        self.options = config.migration
        self.logger = logger.bind(component='MigrationEngine')

        self.client = client or UniformClientFactory.create_client(config.api)
        backup_store = BackupStore(self.options.backup.directory)

        self.migrator = MigrationOrchestrator(self.client, self.options, backup_store)
        self.restorer = RestoreOrchestrator(self.client, self.options, backup_store)

    def migrate(
        self,
        teams: List[TeamConfig],
        on_team_start: Optional[TeamCallback] = None,
    ) -> MigrationSummary:
        """Migrate every team in order.

        Args:
            teams: Teams to migrate
            on_team_start: Called before each team is processed

        Returns:
            Migration summary
        """
        self.logger.info(
            f'Starting Uniform SSO migration for teams: '
            f'{", ".join(t.team_id for t in teams)}'
        )
        results: List[MigrationResult] = []

        try:
            for team in teams:
                if on_team_start:
                    on_team_start(team)
                self.logger.info(
                    f'Processing team {team.team_id} with API key {team.masked_key}'
                )
                try:
                    results.append(self.migrator.migrate_team(team))
                except Exception as e:
                    self.logger.error(f'Error migrating team {team.team_id}: {e}')
        finally:
            self.client.close()

        summary = MigrationSummary.from_results(results)
        self.logger.info(
            f'Migration finished: {summary.invitations_sent} invitations sent, '
            f'{summary.errors} errors'
        )
        return summary

    def restore(
        self,
        backup_path: str,
        teams: List[TeamConfig],
        on_team_start: Optional[TeamCallback] = None,
    ) -> RestoreSummary:
        """Restore a backup file into every team in order.

        Args:
            backup_path: Backup file to replay
            teams: Teams to restore into
            on_team_start: Called before each team is processed

        Returns:
            Restore summary
        """
        self.logger.info(f'Starting Uniform SSO restore from {backup_path}')
        results: List[RestoreResult] = []

        try:
            for team in teams:
                if on_team_start:
                    on_team_start(team)
                self.logger.info(
                    f'Processing team {team.team_id} with API key {team.masked_key}'
                )
                try:
                    results.append(self.restorer.restore_from_backup(backup_path, team))
                except Exception as e:
                    self.logger.error(f'Error restoring team {team.team_id}: {e}')
        finally:
            self.client.close()

        summary = RestoreSummary.from_results(results)
        self.logger.info(
            f'Restore finished: {summary.members_restored} members restored, '
            f'{summary.errors} errors'
        )
        return summary
