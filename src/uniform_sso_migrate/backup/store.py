"""Point-in-time member backups on the local filesystem."""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from loguru import logger
from pydantic import BaseModel, Field

MemberRecord = Dict[str, Any]


class BackupError(Exception):
    """Base exception for backup failures."""


class BackupNotFoundError(BackupError):
    """Backup file does not exist."""


class BackupCorruptError(BackupError):
    """Backup file is not a JSON array of member objects."""


class BackupResult(BaseModel):
    """Outcome of a backup attempt."""

    success: bool = Field(..., description='Backup was written')
    path: Optional[str] = Field(default=None, description='Backup file path')
    error: Optional[str] = Field(default=None, description='Error message if failed')


def backup_timestamp(now: Optional[datetime] = None) -> str:
    """UTC ISO-8601 timestamp with ':' and '.' replaced by '-'."""
    now = now or datetime.now(timezone.utc)
    iso = now.astimezone(timezone.utc).strftime('%Y-%m-%dT%H:%M:%S.%fZ')
    return iso.replace(':', '-').replace('.', '-')


def backup_filename(team_id: str, timestamp: str) -> str:
    return f'team-{team_id}-backup-{timestamp}.json'


class BackupStore:
    """Writes and reads team member snapshots as JSON files."""

    def __init__(self, directory: str):
        """Initialize backup store.

        Args:
            directory: Directory backups are written to
        """
        self.directory = Path(directory)
        self.logger = logger.bind(component='BackupStore')

    def save(self, team_id: str, members: Sequence[MemberRecord]) -> BackupResult:
        """Persist a team's members to a new timestamped file.

        Existing files are never overwritten.

        Args:
            team_id: Team the members belong to
            members: Member records as received from the API

        Returns:
            Backup result with the file path, or the error on failure
        """
        try:
            backup_dir = self.directory.resolve()
            backup_dir.mkdir(parents=True, exist_ok=True)

            backup_path = backup_dir / backup_filename(team_id, backup_timestamp())
            content = json.dumps(list(members), indent=2)

            with open(backup_path, 'x', encoding='utf-8') as f:
                f.write(content)

        except (OSError, TypeError, ValueError) as e:
            self.logger.error(f'Failed to back up team {team_id}: {e}')
            return BackupResult(success=False, error=str(e))

        self.logger.info(
            f'Backed up {len(members)} members of team {team_id} to {backup_path}'
        )
        return BackupResult(success=True, path=str(backup_path))

    def load(self, path: str) -> List[MemberRecord]:
        """Load members from a backup file.

        Args:
            path: Backup file path

        Returns:
            Member records in file order, validated later one by one

        Raises:
            BackupNotFoundError: If the file does not exist
            BackupCorruptError: If the content is not a list of objects
        """
        backup_path = Path(path)
        if not backup_path.is_file():
            raise BackupNotFoundError(f'Backup file not found: {path}')

        try:
            with open(backup_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (UnicodeDecodeError, ValueError) as e:
            raise BackupCorruptError(f'Backup file is not valid JSON: {path}: {e}')

        if not isinstance(data, list):
            raise BackupCorruptError(f'Backup file must contain a JSON array: {path}')

        if not all(isinstance(entry, dict) for entry in data):
            raise BackupCorruptError(f'Backup file entries must be objects: {path}')

        self.logger.info(f'Loaded {len(data)} members from {path}')
        return data
