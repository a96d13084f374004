"""Sync engine: change detection, payload construction, training and orchestration."""

from nlusync.sync.engine import SyncEngine
from nlusync.sync.fingerprint import (
    FingerprintStore,
    InMemoryFingerprintStore,
    JsonFingerprintStore,
    SyncFingerprint,
    compute_content_hash,
    needs_sync,
)
from nlusync.sync.payload import PayloadBuilder
from nlusync.sync.results import Degradable, SyncReport, SyncState
from nlusync.sync.training import CancellationToken, ModelTrainer, PollScheduler
from nlusync.sync.versions import RemoteVersionManager

__all__ = [
    "CancellationToken",
    "Degradable",
    "FingerprintStore",
    "InMemoryFingerprintStore",
    "JsonFingerprintStore",
    "ModelTrainer",
    "PayloadBuilder",
    "PollScheduler",
    "RemoteVersionManager",
    "SyncEngine",
    "SyncFingerprint",
    "SyncReport",
    "SyncState",
    "compute_content_hash",
    "needs_sync",
]
