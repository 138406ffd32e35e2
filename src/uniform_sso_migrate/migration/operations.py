"""Single-member operations shared by migration and restore."""

from typing import List

from loguru import logger

from ..api.client import APIResponse, UniformClient, projects_to_invites
from ..config.config import TeamConfig
from ..models.member import (
    DeleteMemberRequest,
    InviteMemberRequest,
    Member,
    UpdateMemberRequest,
)

OBSOLETE_PREFIX = 'OBSOLETE - '


class MemberOperations:
    """Mark-obsolete, delete and invite for one member at a time.

    Each operation returns True when the change was made (or simulated in dry
    run) and appends a message to ``errors`` when the API rejected it.
    Connectivity faults propagate to the caller.
    """

    def __init__(self, client: UniformClient, dry_run: bool = False):
        self.client = client
        self.dry_run = dry_run
        self.logger = logger.bind(component='MemberOperations')

    def _record_failure(
        self, message: str, response: APIResponse, errors: List[str]
    ) -> bool:
        self.logger.error(message)
        self.logger.error(f'Response data: {response.data}')
        errors.append(message)
        return False

    def mark_obsolete(
        self, member: Member, team: TeamConfig, errors: List[str]
    ) -> bool:
        """Rename a member to ``OBSOLETE - <name>`` keeping roles and admin flag."""
        obsolete_name = f'{OBSOLETE_PREFIX}{member.name}'
        self.logger.info(
            f'Marking member as obsolete: {member.name} -> {obsolete_name}'
        )

        if self.dry_run:
            self.logger.info(f'[DRY RUN] Would mark {member.email} as obsolete')
            return True

        request = UpdateMemberRequest(
            identity_subject=member.subject,
            team_id=team.team_id,
            name=obsolete_name,
            is_admin=member.is_team_admin,
            projects=projects_to_invites(member),
        )
        response = self.client.update_member(request, team.api_key)

        if not response.success:
            return self._record_failure(
                f'Failed to mark {member.email} as obsolete: {response.status_text}',
                response,
                errors,
            )

        self.logger.info(f'Successfully marked {member.email} as obsolete')
        return True

    def delete(self, member: Member, team: TeamConfig, errors: List[str]) -> bool:
        """Remove a member from the team."""
        self.logger.info(f'Deleting member: {member.name} ({member.email})')

        if self.dry_run:
            self.logger.info(f'[DRY RUN] Would delete {member.email}')
            return True

        request = DeleteMemberRequest(team_id=team.team_id, subject=member.subject)
        response = self.client.delete_member(request, team.api_key)

        if not response.success:
            return self._record_failure(
                f'Failed to delete {member.email}: {response.status_text}',
                response,
                errors,
            )

        self.logger.info(f'Successfully deleted {member.email}')
        return True

    def invite(self, member: Member, team: TeamConfig, errors: List[str]) -> bool:
        """Send a fresh invitation using the member's original identity."""
        projects = projects_to_invites(member)
        self.logger.info(
            f'Sending new invitation to {member.email} with {len(projects)} projects'
        )

        if self.dry_run:
            self.logger.info(f'[DRY RUN] Would send invitation to {member.email}')
            return True

        request = InviteMemberRequest(
            email=member.email,
            name=member.name,
            is_admin=member.is_team_admin,
            team_id=team.team_id,
            projects=projects,
            send_email=True,
        )
        response = self.client.invite_member(request, team.api_key)

        if not response.success:
            return self._record_failure(
                f'Failed to send invitation to {member.email}: {response.status_text}',
                response,
                errors,
            )

        self.logger.info(f'Successfully sent invitation to {member.email}')
        return True
