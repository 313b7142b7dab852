"""Persistência do FlagSync: store do artefato de merge."""

from .merge_store import (
    DEFAULT_ARTIFACT_SUFFIX,
    DocumentStore,
    InMemoryDocumentStore,
    MergeArtifactMeta,
    MergeArtifactStore,
    serialize_document,
)

__all__ = [
    "DEFAULT_ARTIFACT_SUFFIX",
    "DocumentStore",
    "InMemoryDocumentStore",
    "MergeArtifactMeta",
    "MergeArtifactStore",
    "serialize_document",
]
