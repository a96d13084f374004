"""Registry of native entity types and their provider-specific names."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List

import yaml
from loguru import logger
from pydantic import BaseModel, Field

NATIVE_PREFIX = "@native."


class EntityDefinition(BaseModel):
    """A native entity type and the name each provider knows it by."""

    type: str
    description: str = ""
    providers: Dict[str, str] = Field(default_factory=dict)


class EntityCapability(BaseModel):
    """Result of resolving an entity type for one provider."""

    type: str
    provider: str
    provider_supported: bool
    provider_name: str | None = None


DEFAULT_ENTITIES: List[EntityDefinition] = [
    EntityDefinition(type="@native.age", description="Ages such as '5 years old'", providers={"luis": "age"}),
    EntityDefinition(type="@native.datetime", description="Dates, times and ranges", providers={"luis": "datetimeV2"}),
    EntityDefinition(type="@native.dimension", description="Lengths, areas, volumes", providers={"luis": "dimension"}),
    EntityDefinition(type="@native.email", description="Email addresses", providers={"luis": "email"}),
    EntityDefinition(type="@native.geography", description="Cities, countries, points of interest", providers={"luis": "geography"}),
    EntityDefinition(type="@native.keyphrase", description="Key phrases", providers={"luis": "keyPhrase"}),
    EntityDefinition(type="@native.money", description="Currency amounts", providers={"luis": "money"}),
    EntityDefinition(type="@native.number", description="Cardinal numbers", providers={"luis": "number"}),
    EntityDefinition(type="@native.ordinal", description="Ordinal numbers", providers={"luis": "ordinal"}),
    EntityDefinition(type="@native.percentage", description="Percentages", providers={"luis": "percentage"}),
    EntityDefinition(type="@native.phone_number", description="Phone numbers", providers={"luis": "phonenumber"}),
    EntityDefinition(type="@native.temperature", description="Temperatures", providers={"luis": "temperature"}),
    EntityDefinition(type="@native.url", description="Web addresses", providers={"luis": "url"}),
    EntityDefinition(type="@native.duration", description="Durations such as '3 hours'"),
    EntityDefinition(type="@native.quantity", description="Quantities without a unit"),
]


class EntityRegistry:
    """Lookup table from internal entity type to provider capability."""

    def __init__(self, definitions: Iterable[EntityDefinition] | None = None) -> None:
        self._definitions: Dict[str, EntityDefinition] = {}
        for definition in definitions if definitions is not None else DEFAULT_ENTITIES:
            self.register(definition)

    @classmethod
    def from_yaml(cls, path: str | Path, *, include_defaults: bool = True) -> "EntityRegistry":
        """Build a registry from a YAML file, optionally layered over the defaults.

        The file maps entity types to ``{description, providers}``::

            entities:
              "@native.number":
                providers: {luis: number}
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Entity registry file not found: {path}")

        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Entity registry root must be a mapping/dict: {path}")

        registry = cls(DEFAULT_ENTITIES if include_defaults else [])
        for entity_type, definition in (data.get("entities") or {}).items():
            definition = definition or {}
            registry.register(EntityDefinition(type=entity_type, **definition))

        logger.info("Loaded {} entity definitions from {}", len(registry), path)
        return registry

    def register(self, definition: EntityDefinition) -> None:
        self._definitions[definition.type] = definition

    def lookup(self, type_id: str, provider: str = "luis") -> EntityCapability | None:
        """Resolve an entity type for a provider, or None if the type is unknown."""
        definition = self._definitions.get(type_id)
        if definition is None:
            return None

        provider_name = definition.providers.get(provider)
        return EntityCapability(
            type=type_id,
            provider=provider,
            provider_supported=bool(provider_name),
            provider_name=provider_name,
        )

    def is_native(self, type_id: str) -> bool:
        return type_id.startswith(NATIVE_PREFIX)

    def __contains__(self, type_id: object) -> bool:
        return type_id in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)
