"""Keep a hosted LUIS model in sync with a local intent corpus."""

from nlusync.sync.engine import SyncEngine
from nlusync.sync.results import SyncReport, SyncState

__all__ = ["SyncEngine", "SyncReport", "SyncState"]

__version__ = "0.1.0"
