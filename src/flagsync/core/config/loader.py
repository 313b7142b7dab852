# src/flagsync/core/config/loader.py
"""
Settings efetivos do FlagSync.

Ordem de precedência (o último vence):
    1. `defaults.yaml` empacotado com a ferramenta (sempre lido)
    2. arquivo do operador (`--settings`): se informado, precisa existir
    3. override local (`--settings-local`): lido apenas se existir

As camadas são combinadas com `deep_merge` em modo estrito e o resultado
é validado antes de chegar ao runner (política de remoção conhecida,
marcador e versão de schema não vazios).

Limites explícitos:
    - Não lê documentos de feature flags
    - Não configura logging (responsabilidade da CLI)
"""

from pathlib import Path
from typing import Any, Dict, Optional
import json

import yaml  # PyYAML

from .merge import deep_merge
from .errors import (
    InvalidSettingsRootTypeError,
    InvalidSettingsSyntaxError,
    InvalidSettingsValueError,
    SettingsFileNotFoundError,
    UnsupportedSettingsFormatError,
)


PACKAGED_DEFAULTS_PATH = Path(__file__).with_name("defaults.yaml")

DELETION_POLICIES = {"additive", "mirror"}


def _load_file(path: Path) -> Dict[str, Any]:
    """
    Lê uma camada de settings (YAML `.yaml`/`.yml` ou JSON `.json`).

    Um arquivo vazio equivale a `{}`.

    Raises:
        SettingsFileNotFoundError: Se o arquivo não existir.
        UnsupportedSettingsFormatError: Se o formato não for suportado.
        InvalidSettingsSyntaxError: Se o YAML/JSON for inválido.
        InvalidSettingsRootTypeError: Se o conteúdo raiz não for um dicionário.
    """
    if not path.exists():
        raise SettingsFileNotFoundError(f"Arquivo de settings não encontrado: {path}")

    suffix = path.suffix.lower()

    if suffix in {".yaml", ".yml"}:
        with path.open("r", encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise InvalidSettingsSyntaxError(f"YAML inválido em {path}: {e}") from e

    elif suffix == ".json":
        with path.open("r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise InvalidSettingsSyntaxError(f"JSON inválido em {path}: {e}") from e

    else:
        raise UnsupportedSettingsFormatError(f"Formato não suportado: {path.suffix}")

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise InvalidSettingsRootTypeError(
            f"Settings root deve ser dict, recebido: {type(data).__name__}"
        )

    return data


def _validate(settings: Dict[str, Any]) -> None:
    policy = settings["merge"]["deletion_policy"]
    if policy not in DELETION_POLICIES:
        raise InvalidSettingsValueError(
            f"merge.deletion_policy deve ser um de {sorted(DELETION_POLICIES)}, recebido: {policy!r}"
        )

    marker = settings["merge"]["removal_marker"]
    if not isinstance(marker, str) or not marker.strip():
        raise InvalidSettingsValueError("merge.removal_marker deve ser string não vazia")

    version = settings["schema"]["version"]
    if not isinstance(version, str) or not version.strip():
        raise InvalidSettingsValueError("schema.version deve ser string não vazia")

    suffix = settings["artifact"]["suffix"]
    if not isinstance(suffix, str) or not suffix.strip():
        raise InvalidSettingsValueError("artifact.suffix deve ser string não vazia")


def load_settings(
    *,
    defaults_path: Optional[str] = None,
    local_path: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Carrega e resolve os settings efetivos do FlagSync.

    Política de resolução:
        - Os defaults empacotados são sempre a base
        - `defaults_path`, quando informado, deve existir e é aplicado por cima
        - `local_path`, quando existir, tem prioridade sobre ambos
        - A resolução utiliza `deep_merge` em modo estrito

    Args:
        defaults_path (Optional[str]): Arquivo de defaults do operador.
        local_path (Optional[str]): Arquivo opcional de overrides locais.

    Returns:
        Dict[str, Any]: Settings finais resolvidos.

    Raises:
        SettingsFileNotFoundError: Se `defaults_path` não existir.
        UnsupportedSettingsFormatError: Se o formato do arquivo não for suportado.
        InvalidSettingsRootTypeError: Se o conteúdo não for um dicionário.
        SettingsTypeConflictError: Se ocorrer conflito estrutural durante o merge.
        InvalidSettingsValueError: Se algum valor estiver fora do domínio.
    """

    effective = _load_file(PACKAGED_DEFAULTS_PATH)

    if defaults_path is not None:
        effective = deep_merge(effective, _load_file(Path(defaults_path)))

    if local_path is not None:
        local_file = Path(local_path)
        if local_file.exists():
            effective = deep_merge(effective, _load_file(local_file))

    _validate(effective)

    return effective
