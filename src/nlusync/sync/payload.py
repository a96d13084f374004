"""Build the provider-native model document from the local corpus."""

from __future__ import annotations

from typing import List, Sequence

from loguru import logger

from nlusync.corpus.canonical import LabelExtractor
from nlusync.corpus.entities import EntityRegistry
from nlusync.corpus.models import Intent, LabelSpan
from nlusync.errors import UnsupportedEntityError
from nlusync.providers.models import (
    AppInfo,
    EntitySpan,
    ExtractedUtterance,
    IntentReference,
    ModelPayload,
)


class PayloadBuilder:
    """Deterministically transform a corpus into a :class:`ModelPayload`.

    Only native entity types the registry maps for ``provider`` are accepted;
    anything else aborts the build, since a model with silently dropped
    entities is worse than no sync.
    """

    def __init__(
        self,
        extractor: LabelExtractor,
        registry: EntityRegistry,
        *,
        version_id: str,
        schema_version: str,
        provider: str = "luis",
    ) -> None:
        self.extractor = extractor
        self.registry = registry
        self.version_id = version_id
        self.schema_version = schema_version
        self.provider = provider

    def build(self, intents: Sequence[Intent], app_info: AppInfo) -> ModelPayload:
        utterances: List[ExtractedUtterance] = []
        builtin_entities: List[str] = []

        for intent in intents:
            for canonical in intent.utterances:
                extracted = self.extractor.extract(canonical, intent.entities)
                spans: List[EntitySpan] = []

                for label in extracted.labels:
                    provider_name = self._resolve(label)
                    if provider_name not in builtin_entities:
                        builtin_entities.append(provider_name)
                    spans.append(
                        EntitySpan(entity=provider_name, start_pos=label.start, end_pos=label.end)
                    )

                utterances.append(
                    ExtractedUtterance(text=extracted.text, intent=intent.name, entities=spans)
                )

        logger.debug(
            f"Built payload with {len(intents)} intents, {len(utterances)} utterances "
            f"and {len(builtin_entities)} builtin entities"
        )

        return ModelPayload(
            luis_schema_version=self.schema_version,
            version_id=self.version_id,
            name=app_info.name,
            desc=app_info.description,
            culture=app_info.culture,
            intents=[IntentReference(name=intent.name) for intent in intents],
            bing_entities=builtin_entities,
            utterances=utterances,
        )

    def _resolve(self, label: LabelSpan) -> str:
        capability = self.registry.lookup(label.type, self.provider)

        if capability is None or not self.registry.is_native(label.type):
            logger.error(f"Unknown entity: {label.type}. Only native entities are supported.")
            raise UnsupportedEntityError(label.type, "only native entities are supported")

        if not capability.provider_supported or not capability.provider_name:
            logger.error(f"Provider '{self.provider}' doesn't support entity of type {label.type}")
            raise UnsupportedEntityError(
                label.type, f"not supported by provider '{self.provider}'"
            )

        return capability.provider_name
