# tests/core/config/test_deep_merge.py
"""
Testes de `deep_merge` nos dois modos de uso.

Cobertura:
- settings (modo estrito): troca de tipo é erro, `None` aceita qualquer tipo
- Merge Engine (modo permissivo): o lado local vence mesmo trocando o tipo
- mapas aninhados combinados, listas substituídas, inputs intactos
"""

import pytest

try:
    from flagsync.core.config.merge import deep_merge
    from flagsync.core.config.errors import SettingsTypeConflictError
except Exception as e:  # noqa: BLE001
    deep_merge = None
    SettingsTypeConflictError = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    """Falha explicitamente se `deep_merge` ou suas exceções não puderem ser importados."""
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Falha ao importar deep_merge/SettingsTypeConflictError. "
            f"Import error: {_IMPORT_ERR}"
        )


def test_scalar_override_keeps_inputs_intact():
    """
    Um escalar do override substitui o da base; nenhum input é alterado.

    Usado para garantir:
        - settings locais não vazam para os defaults entre runs
    """
    _require_imports()
    defaults = {"indent": 2, "suffix": ".merged.json"}
    local = {"indent": 4}
    merged = deep_merge(defaults, local)
    assert merged == {"indent": 4, "suffix": ".merged.json"}
    assert defaults == {"indent": 2, "suffix": ".merged.json"}
    assert local == {"indent": 4}


def test_nested_sections_are_combined():
    _require_imports()
    defaults = {"merge": {"deletion_policy": "additive", "removal_marker": "_deleted"}}
    local = {"merge": {"deletion_policy": "mirror"}}
    assert deep_merge(defaults, local) == {
        "merge": {"deletion_policy": "mirror", "removal_marker": "_deleted"}
    }


def test_lists_are_replaced_not_concatenated():
    """Uma lista no override substitui a lista anterior inteira (ex.: enum de constraint)."""
    _require_imports()
    previous = {"constraints": {"enum": ["blue", "green", "red"]}, "required": True}
    local = {"constraints": {"enum": ["black"]}}
    assert deep_merge(previous, local) == {"constraints": {"enum": ["black"]}, "required": True}


def test_merge_type_conflict_raises_in_strict_mode():
    _require_imports()
    base = {"runner": {"fail_fast": True}}
    override = {"runner": "DEBUG"}
    with pytest.raises(SettingsTypeConflictError):
        deep_merge(base, override)


def test_merge_type_conflict_override_wins_in_permissive_mode():
    """
    No modo permissivo o lado local sempre vence, inclusive com tipos diferentes.

    Este é o modo usado pelo Merge Engine para sobrepor atributos locais
    sobre definições publicadas anteriormente.
    """
    _require_imports()
    base = {"name": "f1", "rollout": {"percent": 10}}
    override = {"rollout": 25}
    out = deep_merge(base, override, strict_types=False)
    assert out == {"name": "f1", "rollout": 25}


def test_merge_none_base_value_accepts_any_type():
    _require_imports()
    out = deep_merge({"appconfig": {"region": None}}, {"appconfig": {"region": "sa-east-1"}})
    assert out == {"appconfig": {"region": "sa-east-1"}}


def test_merge_requires_dict_roots():
    _require_imports()
    with pytest.raises(SettingsTypeConflictError):
        deep_merge({"a": 1}, ["not", "a", "dict"])
