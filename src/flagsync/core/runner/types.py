# src/flagsync/core/runner/types.py
"""
Tipos canônicos do SyncRunner.

Componentes principais:
    - SyncStatus → estados finais de uma configuração na run
    - SyncJob    → descrição imutável de uma configuração nomeada a processar
    - SyncResult → resultado imutável do processamento de uma configuração

Invariantes:
    - Enums possuem valores textuais canônicos (persistidos no Manifest)
    - SyncResult é imutável e serializável via `to_dict`
    - Estado terminal por run: publicar nova versão, pular (inalterado) ou falhar
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..document.schema import FlagDocument


class SyncStatus(str, Enum):
    """
    Estados finais do processamento de uma configuração nomeada.

    Estados definidos:
        - PUBLISH: documento mesclado difere do publicado; nova versão necessária
        - UNCHANGED: hash igual ao publicado; nenhuma versão é criada
        - FAILED: processamento interrompido por erro

    Limites explícitos:
        - Não representa estados em andamento
        - PUBLISH não significa que a versão já foi publicada (Terraform publica)
    """
    PUBLISH = "publish"
    UNCHANGED = "unchanged"
    FAILED = "failed"


@dataclass(frozen=True)
class SyncJob:
    """Configuração nomeada a sincronizar (arquivo de origem + destino AppConfig)."""

    source_path: str
    application: str
    environment: str
    profile: str
    force_create: bool = False

    @property
    def name(self) -> str:
        return f"{self.application}/{self.environment}/{self.profile}"


@dataclass(frozen=True)
class SyncResult:
    """
    Resultado imutável do processamento de uma configuração.

    Campos:
        - name: nome da configuração (aplicação/ambiente/profile)
        - source_path: arquivo de origem
        - status: estado final
        - content_hash: hash canônico do documento mesclado (None em falha)
        - document: documento mesclado (None em falha)
        - decision: decisão serializada do Change Detector
        - merge: relatório serializado do Merge Engine
        - artifact: metadata do artefato gravado
        - warnings: avisos não fatais
        - error: payload de erro serializado (apenas em falha)
    """
    name: str
    source_path: str
    status: SyncStatus
    content_hash: Optional[str] = None
    document: Optional[FlagDocument] = None
    decision: Optional[Dict[str, Any]] = None
    merge: Dict[str, Any] = field(default_factory=dict)
    artifact: Optional[Dict[str, Any]] = None
    warnings: List[str] = field(default_factory=list)
    error: Optional[Dict[str, Any]] = None

    @property
    def publish(self) -> bool:
        return self.status == SyncStatus.PUBLISH

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "source_path": self.source_path,
            "status": self.status.value,
            "publish": self.publish,
            "content_hash": self.content_hash,
            "decision": self.decision,
            "merge": dict(self.merge),
            "artifact": self.artifact,
            "warnings": list(self.warnings),
            "error": self.error,
        }
