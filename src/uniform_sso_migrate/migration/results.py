"""Per-team results and run summaries."""

from typing import List, Optional, Sequence

from pydantic import BaseModel, Field


class MigrationResult(BaseModel):
    """Outcome of migrating one team."""

    team_id: str = Field(..., description='Team ID')
    members_found: int = Field(default=0, description='Members returned by the API')
    members_marked_obsolete: int = Field(
        default=0, description='Members renamed to OBSOLETE'
    )
    members_deleted: int = Field(default=0, description='Members deleted')
    invitations_sent: int = Field(default=0, description='Invitations sent')
    skipped_members: int = Field(default=0, description='Ignored members')
    backup_created: bool = Field(default=False, description='Backup was written')
    backup_path: Optional[str] = Field(default=None, description='Backup file path')
    errors: List[str] = Field(default_factory=list, description='Errors in order')


class RestoreResult(BaseModel):
    """Outcome of restoring one team from a backup."""

    team_id: str = Field(..., description='Team ID')
    success: bool = Field(default=False, description='At least one member restored')
    members_restored: int = Field(default=0, description='Invitations sent')
    errors: List[str] = Field(default_factory=list, description='Errors in order')


class MigrationSummary(BaseModel):
    """Totals over all migrated teams."""

    results: List[MigrationResult] = Field(default_factory=list)
    members_found: int = 0
    skipped_members: int = 0
    members_marked_obsolete: int = 0
    members_deleted: int = 0
    invitations_sent: int = 0
    backups_created: int = 0
    errors: int = 0

    @classmethod
    def from_results(cls, results: Sequence[MigrationResult]) -> 'MigrationSummary':
        return cls(
            results=list(results),
            members_found=sum(r.members_found for r in results),
            skipped_members=sum(r.skipped_members for r in results),
            members_marked_obsolete=sum(r.members_marked_obsolete for r in results),
            members_deleted=sum(r.members_deleted for r in results),
            invitations_sent=sum(r.invitations_sent for r in results),
            backups_created=sum(1 for r in results if r.backup_created),
            errors=sum(len(r.errors) for r in results),
        )


class RestoreSummary(BaseModel):
    """Totals over all restored teams."""

    results: List[RestoreResult] = Field(default_factory=list)
    members_restored: int = 0
    errors: int = 0

    @classmethod
    def from_results(cls, results: Sequence[RestoreResult]) -> 'RestoreSummary':
        return cls(
            results=list(results),
            members_restored=sum(r.members_restored for r in results),
            errors=sum(len(r.errors) for r in results),
        )
