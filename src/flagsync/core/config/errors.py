# src/flagsync/core/config/errors.py
"""
Exceções canônicas da camada de settings do FlagSync.

Este módulo define a hierarquia de exceções utilizadas durante o
carregamento, validação estrutural e resolução dos settings da ferramenta
(arquivo de defaults + overrides locais).

Settings não são documentos de feature flags: erros aqui representam
configuração inválida da própria ferramenta e são tratados como falha
fatal da run inteira, não de uma configuração nomeada específica.

Invariantes:
    - Todas as exceções de settings herdam de `SettingsError`
    - Nenhuma exceção representa erro de documento de flags

Limites explícitos:
    - Não realiza fallback ou recovery
    - Não depende de runner, store ou CLI
"""


class SettingsError(Exception):
    """
    Exceção base para erros relacionados aos settings do FlagSync.

    Permite captura genérica de falhas de settings, separando-as de
    falhas de documento (`MalformedDocument`) e de execução.
    """


class SettingsFileNotFoundError(SettingsError):
    """
    Exceção levantada quando um arquivo de settings declarado explicitamente
    não é encontrado.

    Decisões arquiteturais:
        - Um arquivo de defaults informado pelo operador é obrigatório
        - O override local é opcional e sua ausência não é erro
    """


class UnsupportedSettingsFormatError(SettingsError):
    """
    Exceção levantada quando o formato do arquivo de settings não é suportado.

    Formatos suportados (v1):
        - YAML (.yaml, .yml)
        - JSON (.json)
    """


class InvalidSettingsSyntaxError(SettingsError):
    """
    Exceção levantada quando o arquivo de settings não pode ser
    interpretado (YAML ou JSON sintaticamente inválido).

    A mensagem inclui o caminho do arquivo e o erro do parser.
    """


class InvalidSettingsRootTypeError(SettingsError):
    """
    Exceção levantada quando o conteúdo raiz dos settings não é um
    dicionário (`dict`).
    """


class SettingsTypeConflictError(SettingsError):
    """
    Exceção levantada quando ocorre conflito de tipos durante o deep-merge
    estrito de settings.

    Exemplo de conflito:
        - base:     {"merge": {"deletion_policy": "additive"}}
        - override: {"merge": "mirror"}

    Invariantes:
        - Nenhum merge parcial é produzido em caso de conflito
    """


class InvalidSettingsValueError(SettingsError):
    """
    Exceção levantada quando um valor de settings está fora do domínio
    permitido (ex.: `merge.deletion_policy` desconhecida).
    """
