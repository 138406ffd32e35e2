"""Migration engine and orchestrators."""

from .results import MigrationResult, MigrationSummary, RestoreResult, RestoreSummary
from .operations import MemberOperations
from .orchestrator import MigrationOrchestrator
from .restore import RestoreOrchestrator
from .engine import MigrationEngine

__all__ = [
    'MigrationResult',
    'MigrationSummary',
    'RestoreResult',
    'RestoreSummary',
    'MemberOperations',
    'MigrationOrchestrator',
    'RestoreOrchestrator',
    'MigrationEngine',
]
