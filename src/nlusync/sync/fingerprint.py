"""Change detection: content hashing and the last-synced fingerprint store."""

from __future__ import annotations

import hashlib
import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Dict, Optional, Protocol, Sequence

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from nlusync.corpus.models import Intent
from nlusync.providers.models import RemoteVersionDescriptor


class SyncFingerprint(BaseModel):
    """Content hash and remote timestamp recorded after a successful sync."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    content_hash: str
    remote_timestamp: Optional[str] = None


class FingerprintStore(Protocol):
    def get(self, key: str) -> SyncFingerprint | None: ...

    def set(self, key: str, fingerprint: SyncFingerprint) -> None: ...


class InMemoryFingerprintStore:
    """Fingerprint store backed by a dict."""

    def __init__(self, initial: Dict[str, SyncFingerprint] | None = None) -> None:
        self._items: Dict[str, SyncFingerprint] = dict(initial or {})

    def get(self, key: str) -> SyncFingerprint | None:
        return self._items.get(key)

    def set(self, key: str, fingerprint: SyncFingerprint) -> None:
        self._items[key] = fingerprint


class FingerprintStoreState(BaseModel):
    """Serialized fingerprint store state."""

    model_config = ConfigDict(extra="ignore")

    version: int = 1
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    entries: Dict[str, SyncFingerprint] = Field(default_factory=dict)


class JsonFingerprintStore:
    """Key/value fingerprint store persisted as a JSON file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._state = FingerprintStoreState()
        if self.path.exists():
            self._state = self._load_state(self.path)
            logger.debug(
                "Loaded {} fingerprint(s) from {}", len(self._state.entries), self.path
            )

    def get(self, key: str) -> SyncFingerprint | None:
        return self._state.entries.get(key)

    def set(self, key: str, fingerprint: SyncFingerprint) -> None:
        self._state.entries[key] = fingerprint
        self._state.version += 1
        self._state.updated_at = datetime.now(UTC)
        self._persist()

    def _persist(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = self._state.model_dump(mode="json")
        # Atomic replace: the store file is either the old or the new state.
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
        tmp_path.replace(self.path)

    def _load_state(self, path: Path) -> FingerprintStoreState:
        payload = json.loads(path.read_text(encoding="utf-8"))
        return FingerprintStoreState.model_validate(payload)


def compute_content_hash(intents: Sequence[Intent]) -> str:
    """SHA-256 of the corpus serialized with stable key ordering."""
    serialized = json.dumps(
        [intent.model_dump(mode="json") for intent in intents],
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )
    return hashlib.sha256(serialized.encode("utf-8")).hexdigest()


def needs_sync(
    fingerprint: SyncFingerprint | None,
    content_hash: str,
    remote_version: RemoteVersionDescriptor | None,
) -> bool:
    """Decide whether the remote model is stale.

    The model is in sync only when the stored content hash matches the local
    corpus and the stored timestamp matches the remote version's last-modified
    timestamp. A missing fingerprint or missing remote timestamp means stale.
    """
    if fingerprint is None:
        return True
    if fingerprint.content_hash != content_hash:
        return True

    remote_timestamp = remote_version.last_modified if remote_version else None
    if remote_timestamp is None or fingerprint.remote_timestamp is None:
        return True
    return fingerprint.remote_timestamp != remote_timestamp
