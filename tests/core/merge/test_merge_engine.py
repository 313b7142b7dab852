# tests/core/merge/test_merge_engine.py
"""
Testes do Merge Engine.

Os testes asseguram que:
- sem base e sem force-create a run é interrompida (MissingBaseState)
- com force-create o documento local é adotado (marcadores removidos)
- nomes presentes apenas na base são preservados (política additive)
- atributos locais vencem conflitos e atributos anteriores são preservados
- valores e definições são mesclados de forma independente
- remoção explícita e política mirror descartam nomes da base
- merge(P, P) == P e inputs não são mutados

Invariantes:
    - A saída sempre carrega a versão fixa de schema
    - O relatório de merge é ordenado e determinístico
"""

from copy import deepcopy

import pytest

try:
    from flagsync.core.document.schema import FlagDocument, validate_document
    from flagsync.core.exceptions import MissingBaseState
    from flagsync.core.merge.engine import (
        DELETION_POLICY_MIRROR,
        MergeReport,
        merge_documents,
    )
except Exception as e:  # noqa: BLE001
    merge_documents = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    if _IMPORT_ERR is not None:
        pytest.fail(f"Falha ao importar o Merge Engine. Import error: {_IMPORT_ERR}")


def _doc(flags, values, version="1", **metadata):
    return FlagDocument(flags=deepcopy(flags), values=deepcopy(values), version=version, metadata=metadata)


def test_missing_base_without_force_create_raises(single_flag_doc):
    """
    Decisão arquitetural:
        - Nunca sobrescrever silenciosamente um estado desconhecido
        - O erro exige decisão do operador (decision_required)
    """
    _require_imports()
    local = validate_document(single_flag_doc)
    with pytest.raises(MissingBaseState) as ei:
        merge_documents(local, None, name="shop/prod/flags")
    assert ei.value.decision_required is True
    assert "--force-create" in ei.value.hint
    assert ei.value.details == {"name": "shop/prod/flags"}


def test_force_create_adopts_local_document(single_flag_doc):
    _require_imports()
    local = validate_document(single_flag_doc)
    result = merge_documents(local, None, force_create=True)

    assert result.document.to_dict() == {
        "flags": {"f1": {"name": "f1"}},
        "values": {"f1": {"enabled": True}},
        "version": "1",
    }
    assert result.report.force_created is True
    assert result.report.added == ["f1"]


def test_force_create_strips_marked_entries():
    _require_imports()
    local = _doc(
        {"f1": {"name": "f1"}, "old": {"_deleted": True}},
        {"f1": {"enabled": True}, "old": {"_deleted": True}},
    )
    result = merge_documents(local, None, force_create=True)
    assert set(result.document.flags) == {"f1"}
    assert set(result.document.values) == {"f1"}


def test_force_create_marker_on_one_side_drops_both_entries():
    """
    A marca de remoção vale por nome: marcada só a definição, o valor
    correspondente também sai (mesma regra do merge com base).

    Usado para garantir:
        - nenhum valor órfão chega ao artefato consumido pelo Terraform
    """
    _require_imports()
    local = _doc(
        {"f1": {"name": "f1"}, "old": {"_deleted": True}},
        {"f1": {"enabled": True}, "old": {"enabled": False}},
    )
    forced = merge_documents(local, None, force_create=True).document
    assert set(forced.flags) == {"f1"}
    assert set(forced.values) == {"f1"}

    based = merge_documents(local, _doc({}, {})).document
    assert set(based.flags) == set(forced.flags)
    assert set(based.values) == set(forced.values)


def test_force_create_is_ignored_when_base_exists():
    _require_imports()
    previous = _doc({"f1": {"name": "f1"}}, {"f1": {"enabled": True}})
    local = _doc({"f2": {"name": "f2"}}, {"f2": {"enabled": False}})
    result = merge_documents(local, previous, force_create=True)
    assert set(result.document.flags) == {"f1", "f2"}
    assert result.report.force_created is False


def test_additive_merge_preserves_previous_flags():
    """Adicionar `f2` localmente não remove `f1`, presente apenas na base."""
    _require_imports()
    previous = _doc({"f1": {"name": "f1"}}, {"f1": {"enabled": True}})
    local = _doc({"f2": {"name": "f2"}}, {"f2": {"enabled": False}})

    result = merge_documents(local, previous)

    assert result.document.flags == {"f1": {"name": "f1"}, "f2": {"name": "f2"}}
    assert result.document.values == {"f1": {"enabled": True}, "f2": {"enabled": False}}
    assert result.report.added == ["f2"]
    assert result.report.preserved == ["f1"]
    assert result.report.removed == []


def test_local_wins_on_conflict_and_keeps_previous_attributes():
    """
    Conflitos são resolvidos a favor do documento local; atributos
    conhecidos apenas pela base continuam presentes.
    """
    _require_imports()
    previous = _doc(
        {"f1": {"name": "f1", "description": "old", "attributes": {"color": {"constraints": {"type": "string"}}}}},
        {"f1": {"enabled": True, "color": "blue"}},
    )
    local = _doc(
        {"f1": {"name": "f1", "description": "new"}},
        {"f1": {"enabled": False}},
    )

    result = merge_documents(local, previous)

    assert result.document.flags["f1"] == {
        "name": "f1",
        "description": "new",
        "attributes": {"color": {"constraints": {"type": "string"}}},
    }
    assert result.document.values["f1"] == {"enabled": False, "color": "blue"}
    assert result.report.updated == ["f1"]


def test_values_and_definitions_merge_independently():
    """Editar apenas o valor de `f1` preserva a definição anterior."""
    _require_imports()
    previous = _doc({"f1": {"name": "f1", "description": "x"}}, {"f1": {"enabled": True}})
    local = _doc({}, {"f1": {"enabled": False}})

    result = merge_documents(local, previous)

    assert result.document.flags == {"f1": {"name": "f1", "description": "x"}}
    assert result.document.values == {"f1": {"enabled": False}}
    assert result.report.flags_without_values == []
    assert result.report.values_without_flags == []


def test_explicit_removal_marker_drops_flag():
    _require_imports()
    previous = _doc(
        {"f1": {"name": "f1"}, "f2": {"name": "f2"}},
        {"f1": {"enabled": True}, "f2": {"enabled": True}},
    )
    local = _doc({"f2": {"_deleted": True}}, {})

    result = merge_documents(local, previous)

    assert set(result.document.flags) == {"f1"}
    assert set(result.document.values) == {"f1"}
    assert result.report.removed == ["f2"]
    assert result.report.preserved == ["f1"]


def test_mirror_policy_drops_names_absent_locally():
    _require_imports()
    previous = _doc(
        {"f1": {"name": "f1"}, "f2": {"name": "f2"}},
        {"f1": {"enabled": True}, "f2": {"enabled": True}},
    )
    local = _doc({"f1": {"name": "f1"}}, {"f1": {"enabled": True}})

    result = merge_documents(local, previous, deletion_policy=DELETION_POLICY_MIRROR)

    assert set(result.document.flags) == {"f1"}
    assert result.report.removed == ["f2"]


def test_unknown_deletion_policy_raises(single_flag_doc):
    _require_imports()
    local = validate_document(single_flag_doc)
    with pytest.raises(ValueError):
        merge_documents(local, local, deletion_policy="purge")


def test_output_carries_fixed_schema_version():
    _require_imports()
    previous = _doc({"f1": {"name": "f1"}}, {"f1": {"enabled": True}}, version="0")
    local = _doc({}, {}, version="legacy")
    result = merge_documents(local, previous)
    assert result.document.version == "1"


def test_merge_is_idempotent_without_local_edits(rich_flag_doc):
    """merge(P, P) == P."""
    _require_imports()
    p = validate_document(rich_flag_doc)
    result = merge_documents(p, p)
    assert result.document.content() == p.content()
    assert result.report.updated == []
    assert result.report.added == []


def test_merge_does_not_mutate_inputs(rich_flag_doc):
    _require_imports()
    previous = validate_document(rich_flag_doc)
    local = _doc({"checkout_v2": {"name": "checkout_v2", "description": "v3"}}, {"checkout_v2": {"enabled": True}})
    before_prev = previous.to_dict()
    before_local = local.to_dict()

    merge_documents(local, previous)

    assert previous.to_dict() == before_prev
    assert local.to_dict() == before_local


def test_metadata_is_carried_and_local_wins():
    _require_imports()
    previous = _doc({}, {}, _createdAt="2025-01-01", owner="a")
    local = _doc({}, {}, owner="b")
    result = merge_documents(local, previous)
    assert result.document.metadata == {"_createdAt": "2025-01-01", "owner": "b"}


def test_report_lists_inconsistencies():
    _require_imports()
    previous = _doc({"f1": {"name": "f1"}}, {})
    local = _doc({}, {"orphan": {"enabled": True}})
    report = merge_documents(local, previous).report
    assert isinstance(report, MergeReport)
    assert report.flags_without_values == ["f1"]
    assert report.values_without_flags == ["orphan"]
    assert report.to_dict()["values_without_flags"] == ["orphan"]
