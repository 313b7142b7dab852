# src/flagsync/core/traceability/manifest.py
"""
Manifest de deploy: registro auditável de uma run do FlagSync.

Cada run do pipeline produz um Manifest que responde, depois do fato:
    - qual versão da ferramenta e quais settings (hash) foram usados
    - quais configurações nomeadas foram processadas e com qual resultado
      (hash de conteúdo, decisão de publicação, relatório de merge)
    - em que ordem os eventos aconteceram (Event Log)

Regras:
    - O Event Log só cresce por chamadas explícitas (`add_event` e os
      marcadores de ciclo de vida `config_*`)
    - Todos os timestamps são gravados em ISO-8601 UTC
    - As funções aceitam o Manifest como `DeployManifest` ou como o dict
      equivalente; no segundo caso o dict é atualizado no lugar

Limites explícitos:
    - Não decide nada sobre a run (fail-fast, publicação)
    - Não migra Manifests de outras versões
"""

from __future__ import annotations

import functools
import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

ManifestLike = Union["DeployManifest", Dict[str, Any]]


def _utc(dt: datetime) -> datetime:
    # naive → assume UTC
    return dt.replace(tzinfo=timezone.utc) if dt.tzinfo is None else dt.astimezone(timezone.utc)


def _elapsed_ms(start_iso: Optional[str], end: datetime) -> int:
    if not start_iso:
        return 0
    delta = _utc(end) - _utc(datetime.fromisoformat(start_iso))
    return max(0, int(delta.total_seconds() * 1000))


@dataclass
class DeployManifest:
    """
    Manifest de uma run de deploy.

    Campos:
        - run: run_id, started_at, flagsync_version
        - inputs: settings_hash
        - configurations: estado por configuração nomeada (app/env/profile)
        - events: Event Log na ordem de emissão
    """

    run: Dict[str, Any]
    inputs: Dict[str, Any]
    configurations: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    events: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "run": dict(self.run),
            "inputs": dict(self.inputs),
            "configurations": {name: dict(c) for name, c in self.configurations.items()},
            "events": [dict(ev) for ev in self.events],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeployManifest":
        """Reconstrói o Manifest; seções ausentes viram vazias (sem validação)."""
        return cls(
            run=dict(data.get("run") or {}),
            inputs=dict(data.get("inputs") or {}),
            configurations={name: dict(c) for name, c in (data.get("configurations") or {}).items()},
            events=[dict(ev) for ev in (data.get("events") or [])],
        )


def _accepts_dict(fn: Callable[..., None]) -> Callable[..., None]:
    """Permite chamar `fn` com um dict: opera numa cópia e reescreve o dict."""

    @functools.wraps(fn)
    def wrapper(manifest: ManifestLike, **kwargs: Any) -> None:
        if isinstance(manifest, DeployManifest):
            fn(manifest, **kwargs)
            return
        m = DeployManifest.from_dict(manifest)
        fn(m, **kwargs)
        manifest.clear()
        manifest.update(m.to_dict())

    return wrapper


def create_manifest(
    *,
    run_id: str,
    started_at: datetime,
    flagsync_version: str,
    settings_hash: str,
) -> DeployManifest:
    """
    Cria o Manifest de uma run, com Event Log vazio.

    Args:
        run_id (str): Identificador da run.
        started_at (datetime): Início da run (naive é tratado como UTC).
        flagsync_version (str): Versão do FlagSync em execução.
        settings_hash (str): Hash canônico dos settings efetivos.
    """
    return DeployManifest(
        run={
            "run_id": run_id,
            "started_at": _utc(started_at).isoformat(),
            "flagsync_version": flagsync_version,
        },
        inputs={"settings_hash": settings_hash},
    )


@_accepts_dict
def add_event(
    manifest: ManifestLike,
    *,
    event_type: str,
    ts: datetime,
    name: Optional[str] = None,
    payload: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Acrescenta um evento ao fim do Event Log.

    O evento sempre tem `event_type` e `timestamp`; `name` (configuração)
    e `payload` só aparecem quando informados.
    """
    event: Dict[str, Any] = {"event_type": event_type, "timestamp": _utc(ts).isoformat()}
    if name is not None:
        event["name"] = name
    if payload is not None:
        event["payload"] = payload
    manifest.events.append(event)


@_accepts_dict
def config_started(
    manifest: ManifestLike,
    *,
    name: str,
    ts: datetime,
    source_path: Optional[str] = None,
) -> None:
    """Marca a configuração `name` como `running`."""
    manifest.configurations.setdefault(name, {}).update(
        {
            "name": name,
            "source_path": source_path,
            "status": "running",
            "started_at": _utc(ts).isoformat(),
        }
    )
    add_event(manifest, event_type="config_started", ts=ts, name=name, payload={"source_path": source_path})


@_accepts_dict
def config_finished(
    manifest: ManifestLike,
    *,
    name: str,
    ts: datetime,
    result: Dict[str, Any],
) -> None:
    """
    Fecha a configuração `name` com o resultado do runner.

    `result` é o dict de `SyncResult.to_dict()`: status final (`publish`
    ou `unchanged`), hash de conteúdo, decisão, relatório de merge,
    warnings e metadata do artefato gravado.
    """
    entry = manifest.configurations.setdefault(name, {"name": name})
    status = result.get("status", "unchanged")
    duration = _elapsed_ms(entry.get("started_at"), ts)
    entry.update(
        {
            "status": status,
            "finished_at": _utc(ts).isoformat(),
            "duration_ms": duration,
            "content_hash": result.get("content_hash"),
            "decision": result.get("decision"),
            "merge": result.get("merge") or {},
            "warnings": result.get("warnings") or [],
            "artifact": result.get("artifact"),
        }
    )
    add_event(
        manifest,
        event_type="config_finished",
        ts=ts,
        name=name,
        payload={"status": status, "duration_ms": duration},
    )


@_accepts_dict
def config_failed(
    manifest: ManifestLike,
    *,
    name: str,
    ts: datetime,
    error: Dict[str, Any],
) -> None:
    """Fecha a configuração `name` como `failed` com o payload de erro."""
    manifest.configurations.setdefault(name, {"name": name}).update(
        {"status": "failed", "finished_at": _utc(ts).isoformat(), "error": error}
    )
    add_event(manifest, event_type="config_failed", ts=ts, name=name, payload={"error": error})


def save_manifest(manifest: ManifestLike, path: Path) -> None:
    """
    Grava o Manifest como JSON com chaves ordenadas, criando diretórios.

    Raises:
        OSError: falha de escrita.
        TypeError: conteúdo não serializável.
    """
    data = manifest.to_dict() if isinstance(manifest, DeployManifest) else manifest
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, ensure_ascii=False, indent=2, sort_keys=True) + "\n", encoding="utf-8")


def load_manifest(path: Path) -> DeployManifest:
    return DeployManifest.from_dict(json.loads(path.read_text(encoding="utf-8")))
