# src/flagsync/core/config/merge.py
"""
Deep-merge de mapas JSON.

Usado em dois pontos com regras de conflito diferentes:

    - settings (defaults → operador → local): modo estrito, um override
      com tipo diferente do default é erro de configuração
    - Merge Engine (base anterior ← documento local): modo permissivo,
      o lado local sempre vence

Regras comuns:
    - mapa sobre mapa → combinação recursiva chave a chave
    - lista → substitui a lista anterior inteira
    - demais valores → substituem o valor anterior
    - chaves ausentes no override permanecem como na base
    - os inputs nunca são alterados; o resultado é uma cópia nova
"""

from copy import deepcopy
from typing import Any, Dict

from .errors import SettingsTypeConflictError


def deep_merge(
    base: Dict[str, Any],
    override: Dict[str, Any],
    *,
    strict_types: bool = True,
) -> Dict[str, Any]:
    """
    Combina `override` sobre `base` e retorna um novo dict.

    Em modo estrito, um valor `None` na base conta como "não definido" e
    aceita qualquer tipo (ex.: `appconfig.region: null` nos defaults).

    Args:
        base (Dict[str, Any]): Valores anteriores (defaults ou base de merge).
        override (Dict[str, Any]): Valores que prevalecem.
        strict_types (bool): Trata troca de tipo como erro.

    Raises:
        SettingsTypeConflictError: raiz não-dict, ou troca de tipo em modo estrito.
    """
    if not isinstance(base, dict) or not isinstance(override, dict):
        raise SettingsTypeConflictError(
            f"deep-merge exige dicts na raiz: {type(base).__name__} / {type(override).__name__}"
        )

    merged: Dict[str, Any] = deepcopy(base)

    for key, new in override.items():
        old = merged.get(key)

        if key in merged and isinstance(old, dict) and isinstance(new, dict):
            merged[key] = deep_merge(old, new, strict_types=strict_types)
            continue

        if (
            strict_types
            and key in merged
            and old is not None
            and not isinstance(new, list)
            and type(old) is not type(new)
        ):
            raise SettingsTypeConflictError(
                f"Conflito de tipo em '{key}': {type(old).__name__} → {type(new).__name__}"
            )

        merged[key] = deepcopy(new)

    return merged
