# src/flagsync/core/detect/change_detector.py
"""
Change Detector do FlagSync.

Este módulo decide se um documento mesclado precisa ser publicado como
nova versão hospedada de configuração no AWS AppConfig.

A identidade de conteúdo é o hash SHA-256 da serialização JSON canônica
de `{flags, values, version}` (chaves ordenadas). Metadados de topo não
participam do hash.

Política de decisão (v1):
    - estado publicado ausente        → publicar (`never_deployed`)
    - número de versão nulo ou zero   → publicar (`no_version`)
    - hash publicado ausente          → publicar (`hash_missing`)
    - hash publicado diferente        → publicar (`hash_changed`)
    - hash publicado igual            → não publicar (`unchanged`)

Invariantes:
    - Funções puras: sem estado oculto, determinísticas, seguras para reexecução
    - Uma versão publicada nunca é sobrescrita: o resultado é sempre
      "publicar nova versão" ou "pular"

Limites explícitos:
    - Não consulta o AppConfig (ver `flagsync.remote`)
    - Não publica versões
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..config.hashing import compute_config_hash
from ..document.schema import FlagDocument
from ..exceptions import HashComputationFailure


REASON_NEVER_DEPLOYED = "never_deployed"
REASON_NO_VERSION = "no_version"
REASON_HASH_MISSING = "hash_missing"
REASON_HASH_CHANGED = "hash_changed"
REASON_UNCHANGED = "unchanged"


@dataclass(frozen=True)
class DeployedState:
    """Deployed State Reference de uma configuração nomeada."""

    version_number: Optional[int] = None
    content_hash: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"version_number": self.version_number, "content_hash": self.content_hash}


@dataclass(frozen=True)
class PublishDecision:
    publish: bool
    reason: str
    content_hash: str
    deployed: Optional[DeployedState] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "publish": self.publish,
            "reason": self.reason,
            "content_hash": self.content_hash,
            "deployed": self.deployed.to_dict() if self.deployed is not None else None,
        }


def compute_document_hash(document: FlagDocument) -> str:
    """Hash canônico do conteúdo de um documento.

    Raises:
        HashComputationFailure: se o conteúdo não for serializável em JSON.
    """
    try:
        return compute_config_hash(document.content())
    except (TypeError, ValueError) as e:
        raise HashComputationFailure(
            message=f"document content is not JSON-serializable: {e}",
            details={"reason": str(e)},
        ) from e


def evaluate_publish(
    document: FlagDocument,
    deployed: Optional[DeployedState],
) -> PublishDecision:
    """Decide publicação e devolve o motivo estável da decisão."""
    content_hash = compute_document_hash(document)

    if deployed is None:
        reason = REASON_NEVER_DEPLOYED
    elif not deployed.version_number:
        reason = REASON_NO_VERSION
    elif not deployed.content_hash:
        reason = REASON_HASH_MISSING
    elif deployed.content_hash != content_hash:
        reason = REASON_HASH_CHANGED
    else:
        reason = REASON_UNCHANGED

    return PublishDecision(
        publish=reason != REASON_UNCHANGED,
        reason=reason,
        content_hash=content_hash,
        deployed=deployed,
    )


def should_publish(document: FlagDocument, deployed: Optional[DeployedState]) -> bool:
    """True quando uma nova versão hospedada precisa ser criada."""
    return evaluate_publish(document, deployed).publish
