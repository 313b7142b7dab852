# src/flagsync/core/merge/engine.py
"""
Merge Engine do FlagSync.

Este módulo combina o documento local de feature flags (editado no
repositório) com a base de merge anterior (último artefato de merge ou,
opcionalmente, o conteúdo publicado), produzindo o documento que será
consumido pelo Terraform.

Política de merge (v1):
    - sem base e sem force-create → `MissingBaseState`
    - sem base e com force-create → o documento local é adotado integralmente
    - com base → para cada nome presente em qualquer um dos lados:
        - definições: atributos anteriores preservados, atributos locais
          sobrepostos (local vence em conflito, união em chaves distintas,
          recursivamente em mapas aninhados)
        - valores: mesma regra, aplicada de forma independente
    - nomes presentes apenas na base são preservados, exceto quando:
        - o documento local os marca explicitamente para remoção, ou
        - a política de remoção é `mirror` (espelha o documento local)
    - a saída sempre carrega a versão fixa de schema

Invariantes:
    - O merge é puramente funcional (inputs não são mutados)
    - merge(P, P) == P (idempotência sem edições locais)
    - Nenhuma escrita em disco ocorre aqui

Limites explícitos:
    - Não lê nem grava arquivos (responsabilidade do store)
    - Não calcula hash nem decide publicação
"""

from __future__ import annotations

import logging
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

from ..config.merge import deep_merge
from ..document.schema import (
    DEFAULT_REMOVAL_MARKER,
    SCHEMA_VERSION,
    FlagDocument,
    is_marked_for_removal,
)
from ..exceptions import MissingBaseState

logger = logging.getLogger(__name__)


DELETION_POLICY_ADDITIVE = "additive"
DELETION_POLICY_MIRROR = "mirror"


@dataclass(frozen=True)
class MergeReport:
    """Resumo auditável de um merge (nomes ordenados, serializável)."""

    force_created: bool = False
    added: List[str] = field(default_factory=list)
    updated: List[str] = field(default_factory=list)
    preserved: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)
    flags_without_values: List[str] = field(default_factory=list)
    values_without_flags: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "force_created": self.force_created,
            "added": list(self.added),
            "updated": list(self.updated),
            "preserved": list(self.preserved),
            "removed": list(self.removed),
            "flags_without_values": list(self.flags_without_values),
            "values_without_flags": list(self.values_without_flags),
        }


@dataclass(frozen=True)
class MergeResult:
    document: FlagDocument
    report: MergeReport


def _marked_names(document: FlagDocument, marker: str) -> Set[str]:
    """Nomes marcados para remoção em `flags` ou em `values`."""
    entries = list(document.flags.items()) + list(document.values.items())
    return {n for n, entry in entries if is_marked_for_removal(entry, marker)}


def _without(entries: Dict[str, Any], names: Set[str]) -> Dict[str, Any]:
    return {k: deepcopy(v) for k, v in entries.items() if k not in names}


def _overlay(
    previous: Dict[str, Any],
    local: Dict[str, Any],
    names: List[str],
) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for name in names:
        if name in previous and name in local:
            out[name] = deep_merge(previous[name], local[name], strict_types=False)
        elif name in local:
            out[name] = deepcopy(local[name])
        elif name in previous:
            out[name] = deepcopy(previous[name])
    return out


def _consistency(flags: Dict[str, Any], values: Dict[str, Any]) -> Dict[str, List[str]]:
    return {
        "flags_without_values": sorted(set(flags) - set(values)),
        "values_without_flags": sorted(set(values) - set(flags)),
    }


def merge_documents(
    local: FlagDocument,
    previous: Optional[FlagDocument],
    *,
    force_create: bool = False,
    deletion_policy: str = DELETION_POLICY_ADDITIVE,
    removal_marker: str = DEFAULT_REMOVAL_MARKER,
    schema_version: str = SCHEMA_VERSION,
    name: Optional[str] = None,
) -> MergeResult:
    """
    Mescla o documento local sobre a base anterior.

    Args:
        local (FlagDocument): Documento lido do arquivo de origem.
        previous (Optional[FlagDocument]): Base de merge (None = nunca mesclado).
        force_create (bool): Permite adotar o documento local sem base.
        deletion_policy (str): `additive` (default) ou `mirror`.
        removal_marker (str): Campo que sinaliza remoção explícita.
        schema_version (str): Versão fixa gravada na saída.
        name (Optional[str]): Nome da configuração (apenas para erros e log).

    Returns:
        MergeResult: Documento mesclado e relatório do merge.

    Raises:
        MissingBaseState: Se não houver base e `force_create` for False.
        ValueError: Se `deletion_policy` for desconhecida.
    """
    if deletion_policy not in (DELETION_POLICY_ADDITIVE, DELETION_POLICY_MIRROR):
        raise ValueError(f"unknown deletion policy: {deletion_policy!r}")

    if previous is None:
        if not force_create:
            raise MissingBaseState(
                message=f"no merge base found for configuration '{name or '?'}' and force-create not set",
                details={"name": name},
            )

        # a marca em qualquer um dos mapas remove o nome dos dois
        marked = _marked_names(local, removal_marker)
        flags = _without(local.flags, marked)
        values = _without(local.values, marked)
        logger.info("No merge base for %s, adopting local document as-is", name or "configuration")

        report = MergeReport(
            force_created=True,
            added=sorted(set(flags) | set(values)),
            **_consistency(flags, values),
        )
        document = FlagDocument(
            flags=flags,
            values=values,
            version=schema_version,
            metadata=deepcopy(local.metadata),
        )
        _log_report(name, report)
        return MergeResult(document=document, report=report)

    previous_names: Set[str] = set(previous.flags) | set(previous.values)
    local_names: Set[str] = set(local.flags) | set(local.values)

    dropped: Set[str] = _marked_names(local, removal_marker)
    if deletion_policy == DELETION_POLICY_MIRROR:
        dropped |= previous_names - local_names

    names = sorted((previous_names | local_names) - dropped)

    local_flags = _without(local.flags, dropped)
    local_values = _without(local.values, dropped)

    flags = _overlay(previous.flags, local_flags, names)
    values = _overlay(previous.values, local_values, names)

    added = sorted((local_names - previous_names) - dropped)
    preserved = sorted((previous_names - local_names) - dropped)
    updated = sorted(
        n for n in (previous_names & local_names) - dropped
        if flags.get(n) != previous.flags.get(n) or values.get(n) != previous.values.get(n)
    )
    removed = sorted(dropped & previous_names)

    report = MergeReport(
        force_created=False,
        added=added,
        updated=updated,
        preserved=preserved,
        removed=removed,
        **_consistency(flags, values),
    )
    document = FlagDocument(
        flags=flags,
        values=values,
        version=schema_version,
        metadata=deep_merge(previous.metadata, local.metadata, strict_types=False),
    )
    _log_report(name, report)
    return MergeResult(document=document, report=report)


def _log_report(name: Optional[str], report: MergeReport) -> None:
    label = name or "configuration"
    if report.added:
        logger.info("%s: adding flags %s", label, report.added)
    if report.updated:
        logger.info("%s: updating flags %s", label, report.updated)
    if report.preserved:
        logger.info("%s: preserving previously deployed flags %s", label, report.preserved)
    if report.removed:
        logger.info("%s: removing flags %s", label, report.removed)
    if report.flags_without_values:
        logger.warning("%s: flags missing values %s", label, report.flags_without_values)
    if report.values_without_flags:
        logger.warning("%s: values without flag definitions %s", label, report.values_without_flags)
