"""
FlagSync: payloads de erro (v1)

Toda falha de uma configuração nomeada termina num `FlagSyncErrorPayload`:
um código estável (`type`), uma mensagem curta e os dados necessários
para o operador agir (`details`, `hint`). O payload vai para o arquivo de
resultado e para o Manifest; stack traces nunca entram nele.

`decision_required` sinaliza que reexecutar não basta (ex.: falta base de
merge e o operador precisa passar --force-create); `retryable` sinaliza
falhas transitórias (I/O, AppConfig indisponível).
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from .exceptions import (
    FlagSyncException,
    IOFailure,
    MalformedDocument,
    MissingBaseState,
    RemoteStateError,
)

# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FlagSyncErrorPayload:
    """Erro serializável de uma configuração (`details["name"]` sempre presente)."""

    type: str
    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None
    decision_required: bool = False
    retryable: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro (v1)
# ---------------------------------------------------------------------------

MISSING_BASE_STATE = "MISSING_BASE_STATE"
MALFORMED_DOCUMENT = "MALFORMED_DOCUMENT"
IO_FAILURE = "IO_FAILURE"
REMOTE_STATE_ERROR = "REMOTE_STATE_ERROR"
SYNC_EXECUTION_ERROR = "SYNC_EXECUTION_ERROR"


# HashComputationFailure é subclasse de MalformedDocument e herda o código.
_EXCEPTION_TYPES = (
    (MalformedDocument, MALFORMED_DOCUMENT),
    (MissingBaseState, MISSING_BASE_STATE),
    (IOFailure, IO_FAILURE),
    (RemoteStateError, REMOTE_STATE_ERROR),
)


def error_type_for(exc: BaseException) -> str:
    """Resolve o código estável de erro para uma exceção."""
    for cls, code in _EXCEPTION_TYPES:
        if isinstance(exc, cls):
            return code
    return SYNC_EXECUTION_ERROR


def exception_to_error(exc: BaseException, *, name: str) -> FlagSyncErrorPayload:
    """Converte exceções em FlagSyncErrorPayload (serializável, acionável).

    Regras:
    - FlagSyncException: já vem com message/details/hint/decision_required.
    - Outras exceções: encapsular como SYNC_EXECUTION_ERROR sem stack trace.
    """
    if isinstance(exc, FlagSyncException):
        details = {"name": name}
        details.update(dict(exc.details or {}))
        return FlagSyncErrorPayload(
            type=error_type_for(exc),
            message=exc.message or "Erro de execução",
            details=details,
            hint=exc.hint,
            decision_required=bool(exc.decision_required),
            retryable=bool(exc.retryable),
        )

    return sync_execution_error(
        name=name,
        exc_type=exc.__class__.__name__,
        exc_message=str(exc) or None,
    )


# ---------------------------------------------------------------------------
# Helpers de fábrica
# ---------------------------------------------------------------------------

def missing_base_state(
    *,
    name: str,
    artifact_path: Optional[str] = None,
    hint: str = "Execute novamente com --force-create para criar a configuração a partir do arquivo local.",
) -> FlagSyncErrorPayload:
    return FlagSyncErrorPayload(
        type=MISSING_BASE_STATE,
        message="Nenhum estado base encontrado para a configuração",
        details={
            "name": name,
            "artifact_path": artifact_path,
        },
        hint=hint,
        decision_required=True,
    )


def malformed_document(
    *,
    name: str,
    path: Optional[str],
    reason: str,
    hint: str = "Corrija o documento para conter os mapas `flags` e `values` no formato esperado.",
) -> FlagSyncErrorPayload:
    return FlagSyncErrorPayload(
        type=MALFORMED_DOCUMENT,
        message="Documento de feature flags inválido",
        details={
            "name": name,
            "path": path,
            "reason": reason,
        },
        hint=hint,
    )


def io_failure(
    *,
    name: str,
    path: Optional[str],
    operation: str,
    reason: str,
    hint: str = "Verifique o caminho e as permissões e reexecute o pipeline.",
) -> FlagSyncErrorPayload:
    return FlagSyncErrorPayload(
        type=IO_FAILURE,
        message="Falha de I/O ao processar a configuração",
        details={
            "name": name,
            "path": path,
            "operation": operation,
            "reason": reason,
        },
        hint=hint,
        retryable=True,
    )


def sync_execution_error(
    *,
    name: str,
    exc_type: Optional[str] = None,
    exc_message: Optional[str] = None,
    hint: str = "Verifique o log técnico da run. Nenhum fallback é aplicado automaticamente.",
) -> FlagSyncErrorPayload:
    return FlagSyncErrorPayload(
        type=SYNC_EXECUTION_ERROR,
        message="Falha inesperada ao sincronizar a configuração",
        details={
            "name": name,
            "exc_type": exc_type,
            "exc_message": exc_message,
        },
        hint=hint,
    )
