# tests/conftest.py
"""
Fixtures compartilhados para testes do FlagSync.

Este módulo define fixtures reutilizáveis que fornecem:
- documentos de feature flags mínimos e determinísticos
- settings efetivos (defaults empacotados)
- contexto de run controlado (RunContext)
- helper de escrita de arquivos JSON em `tmp_path`

Decisões arquiteturais:
    - Fixtures são mantidas simples e explícitas
    - Imports do pacote são feitos de forma lazy para deixar claros
      os erros de import durante falhas
    - Nenhuma fixture acessa rede ou AWS

Invariantes:
    - Dados retornados são determinísticos e isolados por teste
"""

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest


@pytest.fixture
def single_flag_doc() -> dict:
    """Documento local mínimo: uma flag `f1` habilitada."""
    return {
        "flags": {"f1": {"name": "f1"}},
        "values": {"f1": {"enabled": True}},
    }


@pytest.fixture
def rich_flag_doc() -> dict:
    """
    Documento semelhante ao uso real: atributos, constraints e metadados de valor.

    Usado por:
        - Testes do Merge Engine (overlay de atributos)
        - Testes do store (serialização determinística)
    """
    return {
        "flags": {
            "checkout_v2": {
                "name": "checkout_v2",
                "description": "Novo fluxo de checkout",
                "attributes": {
                    "rollout": {"constraints": {"type": "number", "minimum": 0, "maximum": 100}},
                },
            },
            "dark_mode": {"name": "dark_mode", "description": "Tema escuro"},
        },
        "values": {
            "checkout_v2": {"enabled": False, "rollout": 10},
            "dark_mode": {"enabled": True},
        },
        "version": "1",
    }


@pytest.fixture
def write_json(tmp_path: Path):
    """Factory: grava um dict como JSON em `tmp_path` e retorna o caminho."""

    def _write(name: str, data) -> Path:
        p = tmp_path / name
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(data, indent=2), encoding="utf-8")
        return p

    return _write


@pytest.fixture
def default_settings() -> dict:
    from flagsync.core.config.loader import load_settings

    return load_settings()


@pytest.fixture
def make_ctx(default_settings):
    """
    Factory de RunContext determinístico.

    Permite sobrescrever settings pontualmente (ex.: `runner.fail_fast`)
    sem depender de arquivos.
    """
    from flagsync.core.config.merge import deep_merge
    from flagsync.core.run_context import RunContext

    def _make(overrides=None, manifest=None):
        settings = deep_merge(default_settings, overrides or {})
        return RunContext(
            run_id="run-test-001",
            created_at=datetime(2026, 1, 16, 0, 0, 0, tzinfo=timezone.utc),
            settings=settings,
            meta={"source": "pytest"},
            manifest=manifest,
        )

    return _make
