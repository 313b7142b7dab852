# src/flagsync/core/run_context.py
"""
RunContext: contexto canônico de uma run de deploy do FlagSync.

O RunContext é a estrutura compartilhada pelo SyncRunner durante o
processamento das configurações nomeadas de uma run. Ele concentra:

- identidade da run (run_id, created_at)
- settings efetivos (defaults + overrides)
- log estruturado de eventos (sempre com `run_id` e `name`)
- warnings não fatais agrupados por configuração
- o Manifest da run, quando houver

Cada evento de log também é encaminhado ao `logging` padrão, para que a
saída do job de CI mostre as mesmas mensagens registradas no Manifest.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

logger = logging.getLogger("flagsync.run")

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


@dataclass
class RunContext:
    """
    Contexto de execução compartilhado de uma run de deploy.

    Campos canônicos:
    - run_id: identificador único da run
    - created_at: timestamp UTC de criação do contexto
    - settings: settings efetivos da ferramenta
    - meta: metadados livres (ex.: aplicação, ambiente, profile)
    - manifest: Manifest da run (opcional)
    - warnings: warnings por configuração
    - events: log estruturado de eventos
    """

    run_id: str
    created_at: datetime
    settings: Dict[str, Any]
    meta: Dict[str, Any] = field(default_factory=dict)
    manifest: Optional[Any] = None

    events: List[Dict[str, Any]] = field(default_factory=list, init=False)
    warnings: Dict[str, List[str]] = field(default_factory=dict, init=False)

    # -----------------------------
    # Settings
    # -----------------------------
    def setting(self, section: str, key: str, default: Any = None) -> Any:
        sec = (self.settings or {}).get(section, {}) or {}
        return sec.get(key, default)

    # -----------------------------
    # Logging & warnings
    # -----------------------------
    def log(self, *, name: Optional[str], level: str, message: str, **extra: Any) -> None:
        event = {
            "run_id": self.run_id,
            "name": name,
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        self.events.append(event)

        prefix = f"[{name}] " if name else ""
        logger.log(_LEVELS.get(level.upper(), logging.INFO), "%s%s", prefix, message)

    def add_warning(self, *, name: str, message: str) -> None:
        if name not in self.warnings:
            self.warnings[name] = []
        self.warnings[name].append(message)
        self.log(name=name, level="WARNING", message=message)
