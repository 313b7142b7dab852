# src/flagsync/core/config/hashing.py
"""
Hashing canônico do FlagSync.

Duas estruturas JSON com o mesmo conteúdo (independente da ordem em que
as chaves foram inseridas) produzem o mesmo hash. Usado como:
    - identidade de conteúdo dos documentos de flags (Change Detector)
    - identidade dos settings efetivos gravada no Manifest

O hash é o SHA-256 hexadecimal (64 caracteres) da serialização JSON
canônica em UTF-8.
"""

import hashlib
import json
from typing import Any, Dict


def canonical_json(data: Dict[str, Any]) -> str:
    """
    JSON canônico: chaves ordenadas, separadores compactos, não-ASCII literal.

    NaN/Infinity são recusados, pois não têm representação JSON portável.

    Raises:
        TypeError: valor não serializável.
        ValueError: valor não finito ou referência circular.
    """
    return json.dumps(
        data,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )


def compute_config_hash(config: Dict[str, Any]) -> str:
    """
    SHA-256 hexadecimal de `canonical_json(config)`.

    Args:
        config (Dict[str, Any]): Mapa a identificar (não é mutado).

    Raises:
        TypeError: se `config` não for dict ou tiver valores não serializáveis.
        ValueError: ver `canonical_json`.
    """
    if not isinstance(config, dict):
        raise TypeError(f"hash requer um dict, recebido: {type(config).__name__}")

    return hashlib.sha256(canonical_json(config).encode("utf-8")).hexdigest()
