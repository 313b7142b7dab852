"""Merge Engine: documento local + base anterior → documento mesclado."""

from .engine import (
    DELETION_POLICY_ADDITIVE,
    DELETION_POLICY_MIRROR,
    MergeReport,
    MergeResult,
    merge_documents,
)

__all__ = [
    "DELETION_POLICY_ADDITIVE",
    "DELETION_POLICY_MIRROR",
    "MergeReport",
    "MergeResult",
    "merge_documents",
]
