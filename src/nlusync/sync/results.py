"""Result types reported by the sync engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


@dataclass(frozen=True)
class Degradable(Generic[T]):
    """Outcome of a call whose failure is tolerated.

    ``degraded`` carries the reason when the call failed and ``value`` holds the
    fallback used in its place.
    """

    value: T
    degraded: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.degraded is None

    @classmethod
    def success(cls, value: T) -> "Degradable[T]":
        return cls(value=value)

    @classmethod
    def fallback(cls, value: T, reason: str) -> "Degradable[T]":
        return cls(value=value, degraded=reason)


class SyncState(str, Enum):
    """States of one sync run."""

    IDLE = "idle"
    CHECKING_SYNC = "checking_sync"
    UP_TO_DATE = "up_to_date"
    SYNCING = "syncing"
    BUILDING_PAYLOAD = "building_payload"
    DELETING_OLD_VERSION = "deleting_old_version"
    IMPORTING = "importing"
    TRAINING = "training"
    PUBLISHING = "publishing"
    RECORDING_SUCCESS = "recording_success"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (
            SyncState.UP_TO_DATE,
            SyncState.SUCCEEDED,
            SyncState.FAILED,
            SyncState.CANCELLED,
        )


class SyncReport(BaseModel):
    """Outcome of one sync run."""

    state: SyncState = SyncState.IDLE
    needs_sync: bool = False
    content_hash: str = ""
    remote_timestamp_before: Optional[str] = None
    remote_timestamp_after: Optional[str] = None
    deleted_old_version: bool = False
    imported_version: Optional[str] = None
    published: bool = False
    fingerprint_written: bool = False
    utterance_count: int = 0
    intent_count: int = 0
    degraded: List[str] = Field(default_factory=list)
    transitions: List[SyncState] = Field(default_factory=list)
    training_progress: List[float] = Field(default_factory=list)
    error: Optional[str] = None
    failed_model_id: Optional[str] = None
    failure_reason: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.state in (SyncState.UP_TO_DATE, SyncState.SUCCEEDED)

    def advance(self, state: SyncState) -> None:
        self.state = state
        self.transitions.append(state)

    def summary(self) -> str:
        """Return a human-readable summary of the run."""
        if self.state == SyncState.UP_TO_DATE:
            return "Sync Report: model is up to date."
        parts = [
            f"Sync Report: {self.state.value}",
            f"{self.intent_count} intents",
            f"{self.utterance_count} utterances",
        ]
        if self.degraded:
            parts.append(f"{len(self.degraded)} degraded step(s)")
        if self.error:
            parts.append(f"error: {self.error}")
        return ", ".join(parts) + "."
