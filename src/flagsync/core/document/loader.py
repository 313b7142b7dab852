"""Loader canônico de documentos de feature flags (JSON).

Notas:
- O documento de origem é sempre JSON (formato consumido pelo AppConfig).
- Falhas de leitura viram `IOFailure`; falhas de parsing ou schema viram
  `MalformedDocument`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional, Union

from ..exceptions import IOFailure, MalformedDocument
from .schema import DEFAULT_REMOVAL_MARKER, FlagDocument, validate_document


def parse_document(
    raw: str,
    *,
    source: Optional[str] = None,
    removal_marker: str = DEFAULT_REMOVAL_MARKER,
) -> FlagDocument:
    """Parseia e valida um documento a partir de texto JSON."""
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise MalformedDocument(
            message=f"invalid JSON: {e.msg}",
            details={"path": source, "reason": str(e), "line": e.lineno, "column": e.colno},
        ) from e

    return validate_document(data, source=source, removal_marker=removal_marker)


def load_document(
    path: Union[str, Path],
    *,
    removal_marker: str = DEFAULT_REMOVAL_MARKER,
) -> FlagDocument:
    """Carrega um documento de feature flags a partir do disco.

    Raises:
        IOFailure: se o arquivo não existir ou não puder ser lido.
        MalformedDocument: se o conteúdo não for JSON válido ou violar o schema.
    """
    p = Path(path)
    if not p.exists():
        raise IOFailure(
            message=f"document file not found: {p}",
            details={"path": str(p), "operation": "read", "reason": "not_found"},
        )

    try:
        raw = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise IOFailure(
            message=f"failed to read document: {p}",
            details={"path": str(p), "operation": "read", "reason": str(e)},
        ) from e

    return parse_document(raw, source=str(p), removal_marker=removal_marker)
