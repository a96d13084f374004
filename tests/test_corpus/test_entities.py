from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from nlusync.corpus.entities import EntityRegistry


def test_default_registry_maps_luis_names() -> None:
    registry = EntityRegistry()

    capability = registry.lookup("@native.number")

    assert capability.provider_supported is True
    assert capability.provider_name == "number"


def test_known_but_unsupported_type() -> None:
    capability = EntityRegistry().lookup("@native.duration")

    assert capability is not None
    assert capability.provider_supported is False
    assert capability.provider_name is None


def test_unknown_type_returns_none() -> None:
    assert EntityRegistry().lookup("@native.spaceship") is None


def test_other_provider_has_no_mapping() -> None:
    capability = EntityRegistry().lookup("@native.number", provider="dialogflow")

    assert capability.provider_supported is False


def test_yaml_overrides_extend_defaults(tmp_path: Path) -> None:
    path = tmp_path / "entities.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "entities": {
                    "@native.duration": {"providers": {"luis": "datetimeV2"}},
                    "@native.color": {"description": "Colors", "providers": {"luis": "color"}},
                }
            }
        ),
        encoding="utf-8",
    )

    registry = EntityRegistry.from_yaml(path)

    assert registry.lookup("@native.duration").provider_name == "datetimeV2"
    assert registry.lookup("@native.color").provider_name == "color"
    assert "@native.number" in registry


def test_yaml_without_defaults(tmp_path: Path) -> None:
    path = tmp_path / "entities.yaml"
    path.write_text(yaml.safe_dump({"entities": {"@native.color": {}}}), encoding="utf-8")

    registry = EntityRegistry.from_yaml(path, include_defaults=False)

    assert len(registry) == 1
    assert registry.lookup("@native.color").provider_supported is False


def test_missing_registry_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        EntityRegistry.from_yaml(tmp_path / "missing.yaml")
