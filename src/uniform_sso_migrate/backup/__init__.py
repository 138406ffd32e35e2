"""Member backups."""

from .store import (
    BackupCorruptError,
    BackupError,
    BackupNotFoundError,
    BackupResult,
    BackupStore,
    MemberRecord,
)

__all__ = [
    'BackupCorruptError',
    'BackupError',
    'BackupNotFoundError',
    'BackupResult',
    'BackupStore',
    'MemberRecord',
]
