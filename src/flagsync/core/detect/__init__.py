"""Change Detector: hash canônico de conteúdo e decisão de publicação."""

from .change_detector import (
    REASON_HASH_CHANGED,
    REASON_HASH_MISSING,
    REASON_NEVER_DEPLOYED,
    REASON_NO_VERSION,
    REASON_UNCHANGED,
    DeployedState,
    PublishDecision,
    compute_document_hash,
    evaluate_publish,
    should_publish,
)

__all__ = [
    "REASON_HASH_CHANGED",
    "REASON_HASH_MISSING",
    "REASON_NEVER_DEPLOYED",
    "REASON_NO_VERSION",
    "REASON_UNCHANGED",
    "DeployedState",
    "PublishDecision",
    "compute_document_hash",
    "evaluate_publish",
    "should_publish",
]
