"""Replay a member backup as fresh invitations."""

from typing import Optional

from loguru import logger

from ..api.client import UniformClient
from ..backup.store import BackupError, BackupStore
from ..config.config import MigrationOptions, TeamConfig
from ..models.member import Member
from .operations import MemberOperations
from .results import RestoreResult


class RestoreOrchestrator:
    """Re-invites every member of a backup file into a team."""

    def __init__(
        self,
        client: UniformClient,
        options: MigrationOptions,
        backup_store: Optional[BackupStore] = None,
    ):
        """Initialize restore orchestrator.

        Args:
            client: Uniform API client
            options: Migration options (dry run and ignore list apply)
            backup_store: Backup store (built from ``options.backup`` if omitted)
        """
        self.client = client
        self.options = options
        self.backup_store = backup_store or BackupStore(options.backup.directory)
        self.operations = MemberOperations(client, dry_run=options.dry_run)
        self.logger = logger.bind(component='RestoreOrchestrator')

    def restore_from_backup(self, backup_path: str, team: TeamConfig) -> RestoreResult:
        """Restore members of a team from a backup file.

        A dry run only loads the file; it does not simulate each invitation.

        Args:
            backup_path: Path to the backup file
            team: Team ID and API key

        Returns:
            Restore result; ``success`` is True only if a member was restored
        """
        result = RestoreResult(team_id=team.team_id)

        self.logger.info(f'Restoring members for team: {team.team_id}')
        self.logger.info(f'From backup file: {backup_path}')
        self.logger.info(f'Mode: {"DRY RUN" if self.options.dry_run else "LIVE"}')

        try:
            try:
                members = self.backup_store.load(backup_path)
            except BackupError as e:
                self.logger.error(str(e))
                result.errors.append(str(e))
                return result

            self.logger.info(f'Found {len(members)} members in backup file')

            if self.options.dry_run:
                self.logger.info(f'[DRY RUN] Would restore {len(members)} members')
                result.success = True
                return result

            for record in members:
                email = record.get('email')
                try:
                    if email and self.options.is_ignored(email):
                        self.logger.info(
                            f'Skipping ignored member: {record.get("name")} ({email})'
                        )
                        continue

                    member = Member.model_validate(record)
                    if self.operations.invite(member, team, result.errors):
                        result.members_restored += 1
                except Exception as e:
                    self.logger.error(f'Error restoring member {email}: {e}')
                    result.errors.append(f'Error restoring member {email}: {e}')

            result.success = result.members_restored > 0

        except Exception as e:
            self.logger.error(f'Error restoring from backup: {e}')
            result.errors.append(f'Error restoring from backup: {e}')

        return result
