"""
FlagSync: Canonical Exceptions (v1)

Este módulo define exceções tipadas internas do FlagSync.

Objetivo:
- Permitir que Merge Engine, Change Detector, store e leitores remotos
  levantem exceções semânticas tipadas
- Facilitar o mapeamento determinístico para FlagSyncErrorPayload
- Evitar ValueError/RuntimeError genéricos nos guardrails do deploy

Regras:
- Exceções carregam apenas dados estruturados (serializáveis) em `details`.
- Uma exceção sempre se refere a uma única configuração nomeada.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True, eq=False)
class FlagSyncException(Exception):
    """Base class para exceções internas do FlagSync.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Não embedar stack trace em payloads de erro
    - Mensagem deve ser curta e humana
    """

    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None
    decision_required: bool = False
    retryable: bool = False

    def __str__(self) -> str:  # pragma: no cover
        return self.message


# ---------------------------------------------------------------------------
# Merge
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class MissingBaseState(FlagSyncException):
    """Merge sem force-create e sem artefato de merge anterior.

    Não é recuperável sem intervenção do operador (passar --force-create).
    """

    hint: Optional[str] = "Execute novamente com --force-create para criar a configuração a partir do arquivo local."
    decision_required: bool = True


# ---------------------------------------------------------------------------
# Documento
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class MalformedDocument(FlagSyncException):
    """Documento de origem ou artefato de merge fora do schema esperado."""


@dataclass(frozen=True, eq=False)
class HashComputationFailure(MalformedDocument):
    """Conteúdo não serializável ao calcular o hash canônico."""


# ---------------------------------------------------------------------------
# I/O e estado remoto
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class IOFailure(FlagSyncException):
    """Falha ao ler o arquivo de origem ou gravar o artefato de merge."""

    retryable: bool = True


@dataclass(frozen=True, eq=False)
class RemoteStateError(FlagSyncException):
    """Falha ao consultar o estado publicado no AWS AppConfig."""

    retryable: bool = True
