"""Corpus sources supplying the intents to sync."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Protocol

import yaml
from loguru import logger
from pydantic import ValidationError

from nlusync.corpus.models import Intent
from nlusync.errors import CorpusError

INTENT_EXTENSIONS = (".json", ".yaml", ".yml")
UTTERANCES_SUFFIX = ".utterances.txt"


class CorpusSource(Protocol):
    def get_intents(self) -> List[Intent]: ...


class InMemoryCorpusSource:
    """Corpus held in memory, mainly for tests and embedding callers."""

    def __init__(self, intents: List[Intent] | None = None) -> None:
        self.intents = list(intents or [])

    def get_intents(self) -> List[Intent]:
        return list(self.intents)


class DirectoryCorpusSource:
    """Read one intent per file from a directory.

    Each ``<name>.json`` / ``<name>.yaml`` file holds ``{name, utterances, entities}``.
    Utterances may instead live next to it in ``<name>.utterances.txt``, one per line.
    Intents are returned sorted by name so the content hash is stable.
    """

    def __init__(self, intents_path: str | Path) -> None:
        self.intents_path = Path(intents_path)

    def get_intents(self) -> List[Intent]:
        if not self.intents_path.exists():
            raise CorpusError(f"Intents directory not found: {self.intents_path}")
        if not self.intents_path.is_dir():
            raise CorpusError(f"Intents path is not a directory: {self.intents_path}")

        intents: Dict[str, Intent] = {}
        for path in sorted(self.intents_path.iterdir()):
            if path.suffix.lower() not in INTENT_EXTENSIONS or not path.is_file():
                continue

            intent = self._load_intent(path)
            if intent.name in intents:
                raise CorpusError(f"Duplicate intent {intent.name!r} defined in {path}")
            intents[intent.name] = intent

        logger.info(f"Loaded {len(intents)} intents from {self.intents_path}")
        return [intents[name] for name in sorted(intents)]

    def _load_intent(self, path: Path) -> Intent:
        data = self._read_mapping(path)
        data.setdefault("name", path.stem)

        utterances_file = path.with_name(f"{path.stem}{UTTERANCES_SUFFIX}")
        if utterances_file.exists():
            lines = utterances_file.read_text(encoding="utf-8").splitlines()
            data["utterances"] = list(data.get("utterances") or []) + [
                line.strip() for line in lines if line.strip()
            ]

        try:
            return Intent.model_validate(data)
        except ValidationError as e:
            raise CorpusError(f"Invalid intent file {path}: {e}") from e

    def _read_mapping(self, path: Path) -> Dict[str, Any]:
        try:
            raw = path.read_text(encoding="utf-8")
            if path.suffix.lower() == ".json":
                data = json.loads(raw)
            else:
                data = yaml.safe_load(raw)
        except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
            raise CorpusError(f"Could not read intent file {path}: {e}") from e

        data = data or {}
        if not isinstance(data, dict):
            raise CorpusError(f"Intent file root must be a mapping/dict: {path}")
        return data
