# src/flagsync/core/runner/runner.py
"""
SyncRunner: execução sequencial de configurações nomeadas.

Para cada SyncJob, na ordem recebida:
    1. carrega o documento local (arquivo de origem)
    2. carrega a base de merge do store (artefato da run anterior)
    3. lê o estado publicado (leitor de estado, quando houver)
    4. mescla (Merge Engine)
    5. decide publicação (Change Detector)
    6. grava o artefato de merge (somente após os passos anteriores)

Guardrails:
- Exceções viram FlagSyncErrorPayload (serializável, acionável).
- A falha de uma configuração não afeta as demais, exceto com
  `runner.fail_fast` habilitado (interrompe a run na primeira falha).
- Nenhuma escrita ocorre para uma configuração que falhou antes do passo 6.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from ..detect.change_detector import evaluate_publish
from ..document.loader import load_document
from ..document.schema import DEFAULT_REMOVAL_MARKER, SCHEMA_VERSION
from ..errors import exception_to_error
from ..merge.engine import merge_documents
from ..run_context import RunContext
from ..traceability.manifest import config_failed, config_finished, config_started

from .types import SyncJob, SyncResult, SyncStatus


@dataclass(frozen=True)
class RunResult:
    """Resultado agregado de uma run (por nome de configuração, em ordem)."""

    results: Dict[str, SyncResult] = field(default_factory=dict)

    @property
    def failed(self) -> List[SyncResult]:
        return [r for r in self.results.values() if r.status == SyncStatus.FAILED]

    @property
    def ok(self) -> bool:
        return not self.failed

    def to_dict(self) -> Dict[str, Any]:
        return {name: r.to_dict() for name, r in self.results.items()}


class SyncRunner:
    """Runner canônico do FlagSync (merge + detecção, uma configuração por vez)."""

    def __init__(
        self,
        *,
        jobs: Sequence[SyncJob],
        ctx: RunContext,
        store: Any,
        state_reader: Optional[Any] = None,
    ):
        self.jobs: List[SyncJob] = list(jobs)
        self.ctx = ctx
        self.store = store
        self.state_reader = state_reader

    def _fail_fast(self) -> bool:
        return bool(self.ctx.setting("runner", "fail_fast", False))

    def _removal_marker(self) -> str:
        return self.ctx.setting("merge", "removal_marker", DEFAULT_REMOVAL_MARKER)

    def _sync(self, job: SyncJob) -> SyncResult:
        name = job.name
        marker = self._removal_marker()

        local = load_document(job.source_path, removal_marker=marker)
        base = self.store.get(job.source_path)

        snapshot = None
        if self.state_reader is not None:
            snapshot = self.state_reader.read(
                application=job.application,
                environment=job.environment,
                profile=job.profile,
            )
        deployed = snapshot.state if snapshot is not None else None

        base_source = "artifact"
        if base is None:
            base_source = None
            fallback = self.ctx.setting("merge", "remote_base_fallback", False)
            if fallback and snapshot is not None and snapshot.document is not None:
                base = snapshot.document
                base_source = "remote"
                self.ctx.log(name=name, level="INFO", message="Using published configuration as merge base")

        merged = merge_documents(
            local,
            base,
            force_create=job.force_create,
            deletion_policy=self.ctx.setting("merge", "deletion_policy", "additive"),
            removal_marker=marker,
            schema_version=self.ctx.setting("schema", "version", SCHEMA_VERSION),
            name=name,
        )

        report = merged.report
        for flag in report.flags_without_values:
            self.ctx.add_warning(name=name, message=f"flag '{flag}' has no value entry")
        for flag in report.values_without_flags:
            self.ctx.add_warning(name=name, message=f"value '{flag}' has no flag definition")

        decision = evaluate_publish(merged.document, deployed)

        artifact = self.store.put(job.source_path, merged.document, manifest=self.ctx.manifest)

        if decision.publish:
            self.ctx.log(
                name=name,
                level="INFO",
                message=f"Configuration changed ({decision.reason}), new version required",
                content_hash=decision.content_hash,
            )
        else:
            self.ctx.log(
                name=name,
                level="INFO",
                message="Configuration unchanged, skipping version creation",
                content_hash=decision.content_hash,
            )

        merge_info = report.to_dict()
        merge_info["base_source"] = base_source

        return SyncResult(
            name=name,
            source_path=job.source_path,
            status=SyncStatus.PUBLISH if decision.publish else SyncStatus.UNCHANGED,
            content_hash=decision.content_hash,
            document=merged.document,
            decision=decision.to_dict(),
            merge=merge_info,
            artifact=artifact,
            warnings=list(self.ctx.warnings.get(name, [])),
        )

    def run(self) -> RunResult:
        results: Dict[str, SyncResult] = {}
        manifest = self.ctx.manifest

        for job in self.jobs:
            name = job.name
            self.ctx.log(name=name, level="INFO", message=f"Processing configuration file: {job.source_path}")
            if manifest is not None:
                config_started(manifest, name=name, ts=datetime.now(timezone.utc), source_path=job.source_path)

            try:
                result = self._sync(job)
            except Exception as e:
                error = exception_to_error(e, name=name)
                self.ctx.log(name=name, level="ERROR", message=error.message, error_type=error.type)
                if error.hint:
                    self.ctx.log(name=name, level="ERROR", message=error.hint)

                results[name] = SyncResult(
                    name=name,
                    source_path=job.source_path,
                    status=SyncStatus.FAILED,
                    warnings=list(self.ctx.warnings.get(name, [])),
                    error=error.to_dict(),
                )
                if manifest is not None:
                    config_failed(manifest, name=name, ts=datetime.now(timezone.utc), error=error.to_dict())

                if self._fail_fast():
                    break
                continue

            results[name] = result
            if manifest is not None:
                config_finished(manifest, name=name, ts=datetime.now(timezone.utc), result=result.to_dict())

        return RunResult(results=results)
