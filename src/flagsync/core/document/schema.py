"""
Schema canônico: Configuration Document v1.

Um Configuration Document de feature flags do AWS AppConfig é composto por:

- `flags`: nome da flag → definição (`name` + atributos livres)
- `values`: nome da flag → entrada de valor (`enabled` + metadados livres)
- `version`: marcador de schema; na saída é sempre a string fixa ("1"),
  na entrada qualquer string ou número é aceito (normalizado para texto)

Definições e valores são mapas abertos: qualquer campo desconhecido é
preservado tal como veio. Chaves de topo além de `flags`, `values` e
`version` (ex.: `_createdAt`) são preservadas como metadados e não
participam do hash de conteúdo.

Entradas marcadas com o marcador de remoção (default `_deleted: true`)
são sinais para o Merge Engine e dispensam os campos obrigatórios.
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..exceptions import MalformedDocument


SCHEMA_VERSION = "1"
DEFAULT_REMOVAL_MARKER = "_deleted"

_RESERVED_KEYS = ("flags", "values", "version")


def _is_non_empty_str(x: Any) -> bool:
    return isinstance(x, str) and bool(x.strip())


def _expect(cond: bool, msg: str, source: Optional[str]) -> None:
    if not cond:
        raise MalformedDocument(message=msg, details={"path": source, "reason": msg})


def is_marked_for_removal(entry: Any, marker: str = DEFAULT_REMOVAL_MARKER) -> bool:
    """Indica se a entrada carrega o sinal explícito de remoção."""
    return isinstance(entry, dict) and entry.get(marker) is True


@dataclass(frozen=True)
class FlagDocument:
    """Representação interna explícita de um Configuration Document."""

    flags: Dict[str, Any]
    values: Dict[str, Any]
    version: str = SCHEMA_VERSION
    metadata: Dict[str, Any] = field(default_factory=dict)

    def content(self) -> Dict[str, Any]:
        """Estrutura que define a identidade do documento (entrada do hash)."""
        return {
            "flags": deepcopy(self.flags),
            "values": deepcopy(self.values),
            "version": self.version,
        }

    def to_dict(self) -> Dict[str, Any]:
        out = deepcopy(self.metadata)
        out.update(self.content())
        return out


def validate_document(
    data: Any,
    *,
    source: Optional[str] = None,
    removal_marker: str = DEFAULT_REMOVAL_MARKER,
) -> FlagDocument:
    """Valida e materializa um Configuration Document v1.

    Raises:
        MalformedDocument: se a estrutura violar o schema.
    """
    _expect(isinstance(data, dict), "document root must be a mapping/dict", source)

    flags = data.get("flags")
    values = data.get("values")
    _expect("flags" in data, "missing required key 'flags'", source)
    _expect("values" in data, "missing required key 'values'", source)
    _expect(isinstance(flags, dict), "flags must be a mapping", source)
    _expect(isinstance(values, dict), "values must be a mapping", source)

    for key, flag in flags.items():
        _expect(_is_non_empty_str(key), "flag keys must be non-empty strings", source)
        _expect(isinstance(flag, dict), f"flags.{key} must be a mapping", source)
        if is_marked_for_removal(flag, removal_marker):
            continue
        _expect(_is_non_empty_str(flag.get("name")), f"flags.{key}.name is required", source)
        if "attributes" in flag:
            _expect(isinstance(flag["attributes"], dict), f"flags.{key}.attributes must be a mapping", source)

    for key, value in values.items():
        _expect(_is_non_empty_str(key), "value keys must be non-empty strings", source)
        _expect(isinstance(value, dict), f"values.{key} must be a mapping", source)
        if is_marked_for_removal(value, removal_marker):
            continue
        _expect(isinstance(value.get("enabled"), bool), f"values.{key}.enabled must be boolean", source)

    # o merge sempre grava a versão fixa; na entrada basta um escalar
    version = data.get("version")
    if version is None or version == "":
        version = SCHEMA_VERSION
    _expect(
        isinstance(version, (str, int, float)) and not isinstance(version, bool),
        "version must be a string or number",
        source,
    )

    metadata = {k: deepcopy(v) for k, v in data.items() if k not in _RESERVED_KEYS}

    return FlagDocument(
        flags=deepcopy(flags),
        values=deepcopy(values),
        version=str(version),
        metadata=metadata,
    )
