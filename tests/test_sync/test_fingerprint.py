"""Tests for content hashing, staleness decisions and the JSON fingerprint store."""

from __future__ import annotations

import json
from pathlib import Path

from nlusync.corpus.models import EntityDeclaration, Intent
from nlusync.providers.models import RemoteVersionDescriptor
from nlusync.sync.fingerprint import (
    JsonFingerprintStore,
    SyncFingerprint,
    compute_content_hash,
    needs_sync,
)


def _remote(timestamp: str | None) -> RemoteVersionDescriptor:
    return RemoteVersionDescriptor(version="1.0", lastModifiedDateTime=timestamp)


def test_hash_is_deterministic(greet_intent) -> None:
    copy = Intent.model_validate(greet_intent.model_dump())

    assert compute_content_hash([greet_intent]) == compute_content_hash([copy])
    assert len(compute_content_hash([greet_intent])) == 64


def test_hash_changes_with_any_utterance(greet_intent) -> None:
    changed = greet_intent.model_copy(update={"utterances": ["hello", "hi there!"]})

    assert compute_content_hash([greet_intent]) != compute_content_hash([changed])


def test_hash_changes_with_entities(greet_intent) -> None:
    changed = greet_intent.model_copy(
        update={"entities": [EntityDeclaration(name="n", type="@native.number")]}
    )

    assert compute_content_hash([greet_intent]) != compute_content_hash([changed])


def test_needs_sync_without_fingerprint() -> None:
    assert needs_sync(None, "abc", _remote("t1")) is True


def test_in_sync_when_hash_and_timestamp_match() -> None:
    fingerprint = SyncFingerprint(content_hash="abc", remote_timestamp="t1")

    assert needs_sync(fingerprint, "abc", _remote("t1")) is False


def test_needs_sync_on_content_change() -> None:
    fingerprint = SyncFingerprint(content_hash="abc", remote_timestamp="t1")

    assert needs_sync(fingerprint, "def", _remote("t1")) is True


def test_needs_sync_on_remote_drift() -> None:
    fingerprint = SyncFingerprint(content_hash="abc", remote_timestamp="t1")

    assert needs_sync(fingerprint, "abc", _remote("t2")) is True


def test_absent_remote_counts_as_mismatch() -> None:
    fingerprint = SyncFingerprint(content_hash="abc", remote_timestamp="t1")

    assert needs_sync(fingerprint, "abc", None) is True
    assert needs_sync(fingerprint, "abc", _remote(None)) is True


def test_json_store_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "state" / "fingerprints.json"
    store = JsonFingerprintStore(path)
    assert store.get("nlu/luis/updateMetadata") is None

    fingerprint = SyncFingerprint(content_hash="abc", remote_timestamp="t1")
    store.set("nlu/luis/updateMetadata", fingerprint)

    reopened = JsonFingerprintStore(path)
    assert reopened.get("nlu/luis/updateMetadata") == fingerprint

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["entries"]["nlu/luis/updateMetadata"]["content_hash"] == "abc"
    assert not path.with_suffix(".json.tmp").exists()
