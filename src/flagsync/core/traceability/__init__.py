"""
Pacote de rastreabilidade (traceability) do FlagSync: Manifest v1.

API pública exposta:
    - DeployManifest    → estrutura canônica do Manifest
    - create_manifest   → criação explícita do Manifest
    - add_event         → registro explícito de eventos no Event Log
    - config_started    → marca início do processamento de uma configuração
    - config_finished   → registra conclusão (publish / unchanged)
    - config_failed     → registra falha com payload de erro
    - save_manifest     → persistência do Manifest em JSON
    - load_manifest     → restauração determinística do Manifest

Invariantes:
    - O Manifest inicia com `configurations` e `events` vazios
    - Eventos nunca são reordenados automaticamente
"""

from .manifest import (
    DeployManifest,
    create_manifest,
    add_event,
    config_started,
    config_finished,
    config_failed,
    save_manifest,
    load_manifest,
)

__all__ = [
    "DeployManifest",
    "create_manifest",
    "add_event",
    "config_started",
    "config_finished",
    "config_failed",
    "save_manifest",
    "load_manifest",
]
