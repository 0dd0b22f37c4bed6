"""Snapshot use cases: store, change detection and change execution."""

from workprofile.application.use_cases.snapshots.change_detection import (
    ChangeDetectionService,
)
from workprofile.application.use_cases.snapshots.change_execution import (
    ChangeExecutionService,
)
from workprofile.application.use_cases.snapshots.snapshot_operations import SnapshotService

__all__ = ["ChangeDetectionService", "ChangeExecutionService", "SnapshotService"]
