"""Sync orchestration and dry-run analysis."""

from .analyzer import AnalysisReporter, format_verbose
from .models import (
    FileAnalysis,
    FileState,
    FileSyncResult,
    LanguageAnalysis,
    LanguageSyncResult,
    SyncSummary,
)
from .orchestrator import SyncOrchestrator

__all__ = [
    "AnalysisReporter",
    "FileAnalysis",
    "FileState",
    "FileSyncResult",
    "LanguageAnalysis",
    "LanguageSyncResult",
    "SyncOrchestrator",
    "SyncSummary",
    "format_verbose",
]
