# src/flagsync/core/config/__init__.py

"""
Camada de settings do FlagSync.

Este pacote contém as estruturas e utilitários responsáveis por carregar,
mesclar, validar estruturalmente e identificar os settings da ferramenta,
além do deep-merge e do hashing canônico reutilizados pelo Merge Engine
e pelo Change Detector.

Responsabilidades do pacote:
    - Carregamento de settings (defaults empacotados + operador + local)
    - Deep-merge determinístico (estrito ou permissivo)
    - Serialização JSON canônica e hash SHA-256

Invariantes:
    - Os settings finais são um dicionário puro (dict)
    - A mesma entrada sempre produz os mesmos settings e o mesmo hash
"""

from .hashing import canonical_json, compute_config_hash
from .loader import load_settings
from .merge import deep_merge

__all__ = ["canonical_json", "compute_config_hash", "load_settings", "deep_merge"]
