"""Canonical label extraction.

Utterances are authored with inline annotations of the form
``book a table for [four](@native.number) people`` or, when the intent declares
a named entity, ``fly to [Paris](destination)``. The extractor strips the
markup and returns the plain text with character offsets for each label.
"""

import re
from typing import List, Protocol, Sequence

from loguru import logger

from nlusync.corpus.models import EntityDeclaration, ExtractionResult, LabelSpan
from nlusync.errors import CanonicalParseError

ANNOTATION_PATTERN = re.compile(r"\[(?P<value>[^\[\]]+)\]\((?P<entity>[^()\s]+)\)")


class LabelExtractor(Protocol):
    def extract(
        self, canonical: str, entities: Sequence[EntityDeclaration]
    ) -> ExtractionResult: ...


class CanonicalLabelExtractor:
    """Turn canonical annotated utterances into text plus offset-based labels."""

    def extract(
        self, canonical: str, entities: Sequence[EntityDeclaration]
    ) -> ExtractionResult:
        """Extract plain text and labels from a canonical utterance.

        Args:
            canonical: Annotated utterance
            entities: Entities declared on the owning intent

        Returns:
            ExtractionResult with offsets into the returned text

        Raises:
            CanonicalParseError: If an annotation references an undeclared entity
                name or has an empty surface value
        """
        declared = {entity.name: entity.type for entity in entities}

        parts: List[str] = []
        labels: List[LabelSpan] = []
        cursor = 0
        length = 0

        for match in ANNOTATION_PATTERN.finditer(canonical):
            prefix = canonical[cursor : match.start()]
            parts.append(prefix)
            length += len(prefix)

            value = match.group("value")
            if not value.strip():
                raise CanonicalParseError(canonical, "annotation has an empty value")

            entity_type = self._resolve_type(match.group("entity"), declared, canonical)
            labels.append(
                LabelSpan(type=entity_type, start=length, end=length + len(value), value=value)
            )
            parts.append(value)
            length += len(value)
            cursor = match.end()

        parts.append(canonical[cursor:])
        text = "".join(parts)

        if labels:
            logger.debug(f"Extracted {len(labels)} label(s) from {canonical!r}")

        return ExtractionResult(text=text, labels=labels)

    def _resolve_type(self, reference: str, declared: dict, canonical: str) -> str:
        if reference in declared:
            return declared[reference]
        # Types such as @native.number may be referenced directly.
        if reference.startswith("@"):
            return reference
        raise CanonicalParseError(canonical, f"entity {reference!r} is not declared on the intent")
