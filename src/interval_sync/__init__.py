"""Interval step synchronization for structured workouts."""
from .models import IntervalControls, IntervalStep, ReconcileResult, SyncState
from .services.interval_sync import IntervalSyncService, reconcile
from .services.step_editor import StepEditor

__all__ = [
    "IntervalControls",
    "IntervalStep",
    "IntervalSyncService",
    "ReconcileResult",
    "StepEditor",
    "SyncState",
    "reconcile",
]
