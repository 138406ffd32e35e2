"""Tests for restoring members from a backup."""

from unittest.mock import Mock

from uniform_sso_migrate.api.client import APIResponse, UniformClient
from uniform_sso_migrate.api.exceptions import UniformConnectionError
from uniform_sso_migrate.backup.store import BackupStore
from uniform_sso_migrate.config.config import MigrationOptions, TeamConfig
from uniform_sso_migrate.migration.restore import RestoreOrchestrator


def make_member(index, email=None):
    return {
        'subject': f'auth0|{index}',
        'name': f'Member {index}',
        'email': email or f'member{index}@example.com',
        'projects': {'proj-1': {'roles': ['dev'], 'customPermissions': ['UPM_READ']}},
    }


class TestRestoreOrchestrator:
    """Test replaying backups as invitations."""

    def setup_method(self):
        """Set up test fixtures."""
        self.team = TeamConfig(team_id='team-2', api_key='key-abcdef')
        self.client = Mock(spec=UniformClient)
        self.client.invite_member.return_value = APIResponse(
            status_code=201, status_text='Created', data={}, success=True
        )

    def restorer(self, directory, **option_kwargs):
        options = MigrationOptions(
            backup={'enabled': True, 'directory': str(directory)}, **option_kwargs
        )
        return RestoreOrchestrator(self.client, options)

    def write_backup(self, directory, members):
        result = BackupStore(str(directory)).save('team-1', members)
        assert result.success
        return result.path

    def test_round_trip(self, tmp_path):
        """Test every backed-up member is invited again."""
        members = [make_member(1), make_member(2), make_member(3)]
        path = self.write_backup(tmp_path, members)

        result = self.restorer(tmp_path).restore_from_backup(path, self.team)

        assert result.success is True
        assert result.members_restored == 3
        assert result.errors == []
        assert result.team_id == 'team-2'

        request = self.client.invite_member.call_args_list[0].args[0]
        assert request.email == 'member1@example.com'
        assert request.team_id == 'team-2'
        assert request.projects[0].use_custom is True
        assert self.client.invite_member.call_args.args[1] == 'key-abcdef'

    def test_missing_backup(self, tmp_path):
        """Test a missing file fails without any invitation."""
        result = self.restorer(tmp_path).restore_from_backup(
            str(tmp_path / 'missing.json'), self.team
        )

        assert result.success is False
        assert result.members_restored == 0
        assert len(result.errors) == 1
        assert 'Backup file not found' in result.errors[0]
        self.client.invite_member.assert_not_called()

    def test_corrupt_backup(self, tmp_path):
        """Test a corrupt file fails without any invitation."""
        path = tmp_path / 'corrupt.json'
        path.write_text('not json', encoding='utf-8')

        result = self.restorer(tmp_path).restore_from_backup(str(path), self.team)

        assert result.success is False
        assert len(result.errors) == 1
        self.client.invite_member.assert_not_called()

    def test_empty_backup(self, tmp_path):
        """Test an empty backup restores nothing and is not a success."""
        path = tmp_path / 'empty.json'
        path.write_text('[]', encoding='utf-8')

        result = self.restorer(tmp_path).restore_from_backup(str(path), self.team)

        assert result.success is False
        assert result.members_restored == 0
        assert result.errors == []

    def test_dry_run_only_loads(self, tmp_path):
        """Test a dry run succeeds without simulating each member."""
        path = self.write_backup(tmp_path, [make_member(1), make_member(2)])

        result = self.restorer(tmp_path, dry_run=True).restore_from_backup(
            path, self.team
        )

        assert result.success is True
        assert result.members_restored == 0
        assert result.errors == []
        self.client.invite_member.assert_not_called()

    def test_dry_run_with_missing_file_fails(self, tmp_path):
        """Test the load failure wins over the dry run."""
        result = self.restorer(tmp_path, dry_run=True).restore_from_backup(
            str(tmp_path / 'missing.json'), self.team
        )

        assert result.success is False

    def test_ignored_members_are_skipped(self, tmp_path):
        """Test the ignore list applies to restores."""
        path = self.write_backup(
            tmp_path, [make_member(1, email='Skip@Example.com'), make_member(2)]
        )

        result = self.restorer(
            tmp_path, ignored_emails=['skip@example.com']
        ).restore_from_backup(path, self.team)

        assert result.members_restored == 1
        assert self.client.invite_member.call_count == 1
        request = self.client.invite_member.call_args.args[0]
        assert request.email == 'member2@example.com'

    def test_only_ignored_members(self, tmp_path):
        """Test a backup of only ignored members is not a success."""
        path = self.write_backup(tmp_path, [make_member(1)])

        result = self.restorer(
            tmp_path, ignored_emails=['member1@example.com']
        ).restore_from_backup(path, self.team)

        assert result.success is False
        assert result.errors == []

    def test_rejected_invitation_is_not_restored(self, tmp_path):
        """Test only successful invitations count as restored."""
        path = self.write_backup(tmp_path, [make_member(1), make_member(2)])
        self.client.invite_member.side_effect = [
            APIResponse(
                status_code=409, status_text='Conflict', data={}, success=False
            ),
            APIResponse(status_code=201, status_text='Created', data={}, success=True),
        ]

        result = self.restorer(tmp_path).restore_from_backup(path, self.team)

        assert result.success is True
        assert result.members_restored == 1
        assert result.errors == [
            'Failed to send invitation to member1@example.com: Conflict'
        ]

    def test_member_fault_is_isolated(self, tmp_path):
        """Test a fault on one member does not stop the restore."""
        path = self.write_backup(tmp_path, [make_member(1), make_member(2)])
        self.client.invite_member.side_effect = [
            UniformConnectionError('Network error: timeout'),
            APIResponse(status_code=201, status_text='Created', data={}, success=True),
        ]

        result = self.restorer(tmp_path).restore_from_backup(path, self.team)

        assert result.members_restored == 1
        assert result.errors == [
            'Error restoring member member1@example.com: Network error: timeout'
        ]

    def test_invalid_record_only_fails_itself(self, tmp_path):
        """Test a backup entry that does not parse is reported on its own."""
        path = self.write_backup(
            tmp_path,
            [make_member(1), {'name': 'No Subject', 'email': 'x@example.com'}],
        )

        result = self.restorer(tmp_path).restore_from_backup(path, self.team)

        assert result.success is True
        assert result.members_restored == 1
        assert len(result.errors) == 1
        assert result.errors[0].startswith('Error restoring member x@example.com: ')
