"""Persistência canônica do artefato de merge (v1).

O artefato de merge é o último documento mesclado de uma configuração.
Ele é a base de merge da próxima run e o único input consumido pelo
Terraform. Este módulo o expõe por trás de uma interface mínima
chave-valor:

- `get(name) -> Optional[FlagDocument]`
- `put(name, document) -> metadata`

Decisões (v1):
- Chave: caminho do arquivo de origem da configuração
- Caminho determinístico: `<origem><suffix>` (default `.merged.json`),
  redescoberto pela próxima run sem bookkeeping externo
- Formato: JSON com chaves ordenadas (hash estável entre runs)
- Escrita atômica (arquivo temporário no mesmo diretório + `os.replace`):
  uma falha nunca deixa um artefato parcial
- Um único escritor por artefato

Limites explícitos:
- Não mescla documentos
- Não decide publicação
"""

from __future__ import annotations

import json
import os
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Union

from flagsync.core.document.loader import load_document
from flagsync.core.document.schema import DEFAULT_REMOVAL_MARKER, FlagDocument
from flagsync.core.exceptions import HashComputationFailure, IOFailure

DEFAULT_ARTIFACT_SUFFIX = ".merged.json"


class DocumentStore(Protocol):
    """Interface mínima de store de documentos mesclados."""

    def get(self, name: str) -> Optional[FlagDocument]:
        ...

    def put(self, name: str, document: FlagDocument) -> Dict[str, Any]:
        ...


@dataclass(frozen=True)
class MergeArtifactMeta:
    """Metadata mínima (v1) para rastrear um artefato de merge gravado."""

    name: str
    path: str
    type: str = "merge_artifact"
    format: str = "json"
    version: str = "v1"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "name": self.name,
            "format": self.format,
            "path": self.path,
            "version": self.version,
        }


def serialize_document(document: FlagDocument, *, indent: Optional[int] = 2) -> str:
    """Serializa o documento com ordenação determinística de chaves."""
    try:
        return json.dumps(document.to_dict(), ensure_ascii=False, indent=indent, sort_keys=True) + "\n"
    except (TypeError, ValueError) as e:
        raise HashComputationFailure(
            message=f"document is not JSON-serializable: {e}",
            details={"reason": str(e)},
        ) from e


class MergeArtifactStore:
    """Store canônica (v1) de artefatos de merge em disco."""

    def __init__(
        self,
        *,
        suffix: str = DEFAULT_ARTIFACT_SUFFIX,
        indent: Optional[int] = 2,
        removal_marker: str = DEFAULT_REMOVAL_MARKER,
        output_paths: Optional[Dict[str, Union[str, Path]]] = None,
    ):
        self.suffix = suffix
        self.indent = indent
        self.removal_marker = removal_marker
        self._output_paths = {k: Path(v) for k, v in (output_paths or {}).items()}

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------
    def artifact_path(self, name: str) -> Path:
        """Caminho determinístico do artefato para a configuração `name`."""
        if name in self._output_paths:
            return self._output_paths[name]
        return Path(f"{name}{self.suffix}")

    # ------------------------------------------------------------------
    # Get / Put
    # ------------------------------------------------------------------
    def get(self, name: str) -> Optional[FlagDocument]:
        """Retorna o último documento mesclado ou None se nunca houve merge."""
        path = self.artifact_path(name)
        if not path.exists():
            return None
        return load_document(path, removal_marker=self.removal_marker)

    def put(
        self,
        name: str,
        document: FlagDocument,
        *,
        manifest: Optional[Any] = None,
    ) -> Dict[str, Any]:
        """Grava o documento de forma atômica e (opcionalmente) registra no Manifest.

        Returns:
            Dict[str, Any]: metadata do artefato (serializável).

        Raises:
            HashComputationFailure: se o documento não for serializável.
            IOFailure: se o artefato não puder ser gravado.
        """
        # serializa antes de tocar o disco
        text = serialize_document(document, indent=self.indent)
        path = self.artifact_path(name)

        tmp_name: Optional[str] = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent)
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as e:
            raise IOFailure(
                message=f"failed to write merge artifact: {path}",
                details={"path": str(path), "operation": "write", "reason": str(e)},
            ) from e
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)

        meta = MergeArtifactMeta(name=name, path=str(path)).to_dict()

        if manifest is not None:
            self._record_manifest(manifest, meta)

        return meta

    # ------------------------------------------------------------------
    # Manifest integration
    # ------------------------------------------------------------------
    def _record_manifest(self, manifest: Any, meta: Dict[str, Any]) -> None:
        """Registra metadata do artefato no Manifest via Event Log."""
        from flagsync.core.traceability.manifest import add_event

        add_event(
            manifest,
            event_type="artifact_saved",
            ts=datetime.now(timezone.utc),
            name=meta["name"],
            payload={"artifact": dict(meta)},
        )


class InMemoryDocumentStore:
    """Store em memória com a mesma interface (testes e dry-runs)."""

    def __init__(self, initial: Optional[Dict[str, FlagDocument]] = None):
        self._docs: Dict[str, FlagDocument] = dict(initial or {})

    def get(self, name: str) -> Optional[FlagDocument]:
        return self._docs.get(name)

    def put(self, name: str, document: FlagDocument, *, manifest: Optional[Any] = None) -> Dict[str, Any]:
        serialize_document(document)
        self._docs[name] = document
        return MergeArtifactMeta(name=name, path=f"memory:{name}", format="memory").to_dict()


__all__ = [
    "DEFAULT_ARTIFACT_SUFFIX",
    "DocumentStore",
    "InMemoryDocumentStore",
    "MergeArtifactMeta",
    "MergeArtifactStore",
    "serialize_document",
]
