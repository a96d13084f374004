"""Tests for loading intents from a directory."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from nlusync.corpus.source import DirectoryCorpusSource
from nlusync.errors import CorpusError


def _write_json(path: Path, data: dict) -> None:
    path.write_text(json.dumps(data), encoding="utf-8")


def test_loads_json_and_yaml_sorted_by_name(tmp_path: Path) -> None:
    _write_json(tmp_path / "zeta.json", {"name": "zeta", "utterances": ["z"]})
    (tmp_path / "alpha.yaml").write_text(
        yaml.safe_dump(
            {
                "name": "alpha",
                "utterances": ["[one](n) thing"],
                "entities": [{"name": "n", "type": "@native.number"}],
            }
        ),
        encoding="utf-8",
    )
    (tmp_path / "notes.md").write_text("ignored", encoding="utf-8")

    intents = DirectoryCorpusSource(tmp_path).get_intents()

    assert [i.name for i in intents] == ["alpha", "zeta"]
    assert intents[0].entities[0].type == "@native.number"


def test_name_defaults_to_file_stem(tmp_path: Path) -> None:
    _write_json(tmp_path / "greet.json", {"utterances": ["hello"]})

    intents = DirectoryCorpusSource(tmp_path).get_intents()

    assert intents[0].name == "greet"


def test_utterances_file_is_appended(tmp_path: Path) -> None:
    _write_json(tmp_path / "bye.json", {"name": "bye", "entities": []})
    (tmp_path / "bye.utterances.txt").write_text("bye\n\n  see you  \n", encoding="utf-8")

    intents = DirectoryCorpusSource(tmp_path).get_intents()

    assert intents[0].utterances == ["bye", "see you"]


def test_missing_directory_raises_corpus_error(tmp_path: Path) -> None:
    with pytest.raises(CorpusError, match="not found"):
        DirectoryCorpusSource(tmp_path / "missing").get_intents()


def test_empty_directory_yields_empty_corpus(tmp_path: Path) -> None:
    assert DirectoryCorpusSource(tmp_path).get_intents() == []


def test_duplicate_intent_names_rejected(tmp_path: Path) -> None:
    _write_json(tmp_path / "a.json", {"name": "same"})
    _write_json(tmp_path / "b.json", {"name": "same"})

    with pytest.raises(CorpusError, match="Duplicate intent"):
        DirectoryCorpusSource(tmp_path).get_intents()


def test_invalid_file_raises_corpus_error(tmp_path: Path) -> None:
    (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")

    with pytest.raises(CorpusError, match="broken.json"):
        DirectoryCorpusSource(tmp_path).get_intents()


def test_non_mapping_root_rejected(tmp_path: Path) -> None:
    (tmp_path / "list.yaml").write_text(yaml.safe_dump(["a", "b"]), encoding="utf-8")

    with pytest.raises(CorpusError, match="mapping"):
        DirectoryCorpusSource(tmp_path).get_intents()
