"""Per-team migration of members to SSO invitations."""

from typing import List, Optional

from loguru import logger

from ..api.client import UniformClient
from ..backup.store import BackupStore, MemberRecord
from ..config.config import MemberAction, MigrationOptions, TeamConfig
from ..models.member import Member
from .operations import MemberOperations
from .results import MigrationResult

BACKUP_ABORT_MESSAGE = (
    'Migration aborted because backup failed and delete members is enabled'
)


class MigrationOrchestrator:
    """Runs backup, mutation and re-invitation for one team at a time.

    Sequence per team:

    1. list members; a non-200 status ends the team's run
    2. back up the members when backups are enabled; when members are about
       to be deleted for real, a failed backup ends the team's run
    3. for each member in API order: skip ignored emails, validate the record,
       apply the configured action (delete or mark obsolete), then re-invite
       with the original identity and roles; a bad record only fails itself

    Errors are collected as strings on the returned result. Nothing raised
    while processing a team escapes ``migrate_team``.
    """

    def __init__(
        self,
        client: UniformClient,
        options: MigrationOptions,
        backup_store: Optional[BackupStore] = None,
    ):
        """Initialize migration orchestrator.

        Args:
            client: Uniform API client
            options: Migration options
            backup_store: Backup store (built from ``options.backup`` if omitted)
        """
        self.client = client
        self.options = options
        self.backup_store = backup_store or BackupStore(options.backup.directory)
        self.operations = MemberOperations(client, dry_run=options.dry_run)
        self.logger = logger.bind(component='MigrationOrchestrator')

    def migrate_team(self, team: TeamConfig) -> MigrationResult:
        """Migrate all members of a team.

        Args:
            team: Team ID and API key

        Returns:
            Migration result for the team
        """
        result = MigrationResult(team_id=team.team_id)

        self.logger.info(f'Starting migration for team: {team.team_id}')
        self.logger.info(f'Mode: {"DRY RUN" if self.options.dry_run else "LIVE"}')
        self.logger.info(f'Action: {self.options.action.value}')
        self.logger.info(f'Backup enabled: {self.options.backup.enabled}')
        self.logger.info(
            f'Ignored emails: {", ".join(self.options.ignored_emails) or "None"}'
        )

        try:
            response = self.client.list_members(team.team_id, team.api_key)

            if response.status_code != 200:
                result.errors.append(f'Failed to get members: {response.status_text}')
                return result

            records: List[MemberRecord] = response.data
            result.members_found = len(records)
            self.logger.info(f'Found {len(records)} members in team {team.team_id}')

            if self.options.backup.enabled and records:
                if not self._backup(team, records, result):
                    return result

            for record in records:
                email = record.get('email')
                try:
                    if email and self.options.is_ignored(email):
                        self.logger.info(
                            f'Skipping ignored member: {record.get("name")} ({email})'
                        )
                        result.skipped_members += 1
                        continue

                    member = Member.model_validate(record)
                    self._process_member(member, team, result)
                except Exception as e:
                    self.logger.error(f'Error processing member {email}: {e}')
                    result.errors.append(f'Error processing member {email}: {e}')

        except Exception as e:
            self.logger.error(f'Error migrating team {team.team_id}: {e}')
            result.errors.append(f'Error migrating team {team.team_id}: {e}')

        return result

    def _backup(
        self, team: TeamConfig, members: List[MemberRecord], result: MigrationResult
    ) -> bool:
        """Back up members and decide whether the run may continue.

        Returns:
            False if member processing must not start
        """
        try:
            backup = self.backup_store.save(team.team_id, members)
        except Exception as e:
            self.logger.error(f'Error creating backup: {e}')
            result.errors.append(f'Error creating backup: {e}')
        else:
            result.backup_created = backup.success
            result.backup_path = backup.path

            if backup.success:
                self.logger.info(f'Backup created at: {backup.path}')
                return True

            self.logger.error(f'Failed to create backup: {backup.error}')
            result.errors.append(f'Failed to create backup: {backup.error}')

        if self.options.action is MemberAction.DELETE and not self.options.dry_run:
            self.logger.error(
                'Aborting migration because backup failed and delete members is enabled'
            )
            result.errors.append(BACKUP_ABORT_MESSAGE)
            return False

        return True

    def _process_member(
        self, member: Member, team: TeamConfig, result: MigrationResult
    ) -> None:
        """Apply the configured action to a member, then re-invite it.

        A failed mutation does not prevent the invitation.
        """
        self.logger.info(f'Processing member: {member.name} ({member.email})')
        action = self.options.action

        if action is MemberAction.DELETE:
            if self.operations.delete(member, team, result.errors):
                result.members_deleted += 1
        elif action is MemberAction.MARK_OBSOLETE:
            if self.operations.mark_obsolete(member, team, result.errors):
                result.members_marked_obsolete += 1

        if self.operations.invite(member, team, result.errors):
            result.invitations_sent += 1
