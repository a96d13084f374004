"""Corpus package exports."""

from nlusync.corpus.canonical import CanonicalLabelExtractor, LabelExtractor
from nlusync.corpus.entities import EntityCapability, EntityDefinition, EntityRegistry
from nlusync.corpus.models import EntityDeclaration, ExtractionResult, Intent, LabelSpan
from nlusync.corpus.source import CorpusSource, DirectoryCorpusSource, InMemoryCorpusSource

__all__ = [
    "CanonicalLabelExtractor",
    "CorpusSource",
    "DirectoryCorpusSource",
    "EntityCapability",
    "EntityDeclaration",
    "EntityDefinition",
    "EntityRegistry",
    "ExtractionResult",
    "InMemoryCorpusSource",
    "Intent",
    "LabelExtractor",
    "LabelSpan",
]
