from .snapshot import SnapshotDiagnostics, SnapshotEntry, snapshot

__all__ = ["SnapshotDiagnostics", "SnapshotEntry", "snapshot"]
