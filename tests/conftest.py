"""Shared fakes for sync tests: a spy gateway and a non-sleeping scheduler."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import pytest

from nlusync.corpus.models import EntityDeclaration, Intent
from nlusync.errors import GatewayError
from nlusync.providers.models import (
    AppInfo,
    ModelPayload,
    RemoteVersionDescriptor,
    SubmodelStatus,
    TrainingStatus,
)
from nlusync.sync.fingerprint import InMemoryFingerprintStore, SyncFingerprint


def submodels(*statuses: str, reason: str | None = None) -> List[SubmodelStatus]:
    """Build a poll response; ids are m0, m1, ..."""
    return [
        SubmodelStatus(
            model_id=f"m{i}",
            status=TrainingStatus(status),
            failure_reason=reason if status == "Fail" else None,
        )
        for i, status in enumerate(statuses)
    ]


class SpyGateway:
    """In-memory RemoteGateway that records every call."""

    def __init__(self) -> None:
        self.app_id = "app-123"
        self.calls: List[Tuple[str, Any]] = []
        self.versions: List[RemoteVersionDescriptor] = []
        self.app_info = AppInfo(name="Bot", description="Test bot", culture="en-us")
        self.start_status = TrainingStatus.QUEUED
        self.poll_responses: List[List[SubmodelStatus]] = [submodels("Success", "Success")]
        self.imported_payloads: List[ModelPayload] = []
        self.errors: Dict[str, GatewayError] = {}
        self._clock = 0

    def method_calls(self, name: str) -> List[Any]:
        return [args for method, args in self.calls if method == name]

    @property
    def mutating_calls(self) -> List[str]:
        readonly = {"list_versions", "get_app_info", "poll_training"}
        return [method for method, _ in self.calls if method not in readonly]

    def _record(self, name: str, args: Any = None) -> None:
        self.calls.append((name, args))
        if name in self.errors:
            raise self.errors[name]

    def _touch(self, version_id: str) -> None:
        self._clock += 1
        stamp = f"2024-01-01T00:00:{self._clock:02d}Z"
        self.versions = [
            RemoteVersionDescriptor(version=version_id, lastModifiedDateTime=stamp)
        ]

    def list_versions(self) -> List[RemoteVersionDescriptor]:
        self._record("list_versions")
        return list(self.versions)

    def delete_version(self, version_id: str) -> None:
        self._record("delete_version", version_id)
        self.versions = [v for v in self.versions if v.version != version_id]

    def get_app_info(self) -> AppInfo:
        self._record("get_app_info")
        return self.app_info

    def import_version(self, version_id: str, payload: ModelPayload) -> str:
        self._record("import_version", (version_id, payload))
        self.imported_payloads.append(payload)
        self._touch(version_id)
        return version_id

    def start_training(self, version_id: str) -> TrainingStatus:
        self._record("start_training", version_id)
        return self.start_status

    def poll_training(self, version_id: str) -> List[SubmodelStatus]:
        self._record("poll_training", version_id)
        if len(self.poll_responses) > 1:
            return self.poll_responses.pop(0)
        return self.poll_responses[0]

    def publish(self, version_id: str, *, is_staging: bool) -> Dict[str, Any]:
        self._record("publish", {"version_id": version_id, "is_staging": is_staging})
        self._touch(version_id)
        return {"versionId": version_id}


class FakeScheduler:
    """Scheduler that never sleeps; optionally reports cancellation."""

    def __init__(self, cancel_after: Optional[int] = None) -> None:
        self.waits: List[float] = []
        self.cancel_after = cancel_after
        self.cancel_requested = False

    def cancel(self) -> None:
        self.cancel_requested = True

    @property
    def cancelled(self) -> bool:
        if self.cancel_requested:
            return True
        return self.cancel_after is not None and len(self.waits) >= self.cancel_after

    def wait(self, seconds: float) -> bool:
        self.waits.append(seconds)
        return self.cancelled


class CountingFingerprintStore(InMemoryFingerprintStore):
    """In-memory store that counts writes."""

    def __init__(self) -> None:
        super().__init__()
        self.writes = 0

    def set(self, key: str, fingerprint: SyncFingerprint) -> None:
        super().set(key, fingerprint)
        self.writes += 1


@pytest.fixture
def gateway() -> SpyGateway:
    return SpyGateway()


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def greet_intent() -> Intent:
    return Intent(name="greet", utterances=["hello", "hi there"])


@pytest.fixture
def booking_intent() -> Intent:
    return Intent(
        name="book_table",
        utterances=[
            "book a table for [four](guests) people",
            "[two](guests) people [tomorrow](when)",
        ],
        entities=[
            EntityDeclaration(name="guests", type="@native.number"),
            EntityDeclaration(name="when", type="@native.datetime"),
        ],
    )
