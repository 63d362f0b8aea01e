"""Quarantine engine.

This module provides file classification, path mapping, action
execution and the orchestrator that runs the truncation, quarantine
and expiry sweeps.
"""

from filequarantine.quarantine.classifier import (
    classify_for_expiry,
    classify_for_quarantine,
    classify_for_truncation,
    extension_of,
)
from filequarantine.quarantine.executor import ActionExecutor
from filequarantine.quarantine.mapper import (
    collapse_roots,
    ensure_disjoint,
    is_within,
    original_path,
    quarantine_destination,
)
from filequarantine.quarantine.models import (
    ActionOutcome,
    ActionType,
    Decision,
    ErrorKind,
    FileRecord,
    SkipReason,
)
from filequarantine.quarantine.orchestrator import RunOrchestrator, RunState
from filequarantine.quarantine.report import RunContext, RunReport
from filequarantine.quarantine.storage import FileStore, LocalFileStore

__all__ = [
    "ActionExecutor",
    "ActionOutcome",
    "ActionType",
    "Decision",
    "ErrorKind",
    "FileRecord",
    "FileStore",
    "LocalFileStore",
    "RunContext",
    "RunOrchestrator",
    "RunReport",
    "RunState",
    "SkipReason",
    "classify_for_expiry",
    "classify_for_quarantine",
    "classify_for_truncation",
    "collapse_roots",
    "ensure_disjoint",
    "extension_of",
    "is_within",
    "original_path",
    "quarantine_destination",
]
