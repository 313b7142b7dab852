# tests/core/document/test_document_schema.py
"""
Testes do schema canônico do Configuration Document v1.

Os testes asseguram que:
- documentos válidos são materializados em FlagDocument
- campos desconhecidos de definições e valores são preservados
- chaves de topo extras viram metadados (fora do hash)
- violações de estrutura levantam MalformedDocument com detalhes acionáveis
- entradas marcadas para remoção dispensam os campos obrigatórios

Limites explícitos:
    - Não testa leitura de disco (ver test_document_loader.py)
"""

import pytest

from flagsync.core.document.schema import (
    SCHEMA_VERSION,
    FlagDocument,
    is_marked_for_removal,
    validate_document,
)
from flagsync.core.exceptions import MalformedDocument


def test_valid_document_is_materialized(rich_flag_doc):
    doc = validate_document(rich_flag_doc, source="flags.json")
    assert isinstance(doc, FlagDocument)
    assert set(doc.flags) == {"checkout_v2", "dark_mode"}
    assert doc.values["checkout_v2"]["rollout"] == 10
    assert doc.version == "1"
    assert doc.metadata == {}


def test_missing_version_defaults_to_schema_version(single_flag_doc):
    doc = validate_document(single_flag_doc)
    assert doc.version == SCHEMA_VERSION


def test_unknown_fields_and_metadata_are_preserved():
    """
    Definições e valores são mapas abertos.

    Invariantes:
        - Campos desconhecidos permanecem intactos
        - Chaves de topo extras ficam em `metadata` e não em `content()`
    """
    data = {
        "flags": {"f1": {"name": "f1", "_deprecation": {"status": "planned"}}},
        "values": {"f1": {"enabled": True, "owner": "team-a"}},
        "version": "1",
        "_createdAt": "2026-01-01T00:00:00Z",
    }
    doc = validate_document(data)
    assert doc.flags["f1"]["_deprecation"] == {"status": "planned"}
    assert doc.values["f1"]["owner"] == "team-a"
    assert doc.metadata == {"_createdAt": "2026-01-01T00:00:00Z"}
    assert "_createdAt" not in doc.content()
    assert doc.to_dict()["_createdAt"] == "2026-01-01T00:00:00Z"


def test_document_is_decoupled_from_input(single_flag_doc):
    doc = validate_document(single_flag_doc)
    single_flag_doc["values"]["f1"]["enabled"] = False
    assert doc.values["f1"]["enabled"] is True


@pytest.mark.parametrize(
    "data, reason",
    [
        (["not", "a", "dict"], "document root must be a mapping/dict"),
        ({"values": {}}, "missing required key 'flags'"),
        ({"flags": {}}, "missing required key 'values'"),
        ({"flags": [], "values": {}}, "flags must be a mapping"),
        ({"flags": {}, "values": "x"}, "values must be a mapping"),
        ({"flags": {"f1": {}}, "values": {}}, "flags.f1.name is required"),
        ({"flags": {"f1": "on"}, "values": {}}, "flags.f1 must be a mapping"),
        ({"flags": {"f1": {"name": "f1", "attributes": []}}, "values": {}}, "flags.f1.attributes must be a mapping"),
        ({"flags": {}, "values": {"f1": {"enabled": "yes"}}}, "values.f1.enabled must be boolean"),
        ({"flags": {}, "values": {}, "version": [1]}, "version must be a string or number"),
        ({"flags": {}, "values": {}, "version": True}, "version must be a string or number"),
    ],
)
def test_malformed_documents_raise(data, reason):
    with pytest.raises(MalformedDocument) as ei:
        validate_document(data, source="flags.json")
    assert ei.value.details["reason"] == reason
    assert ei.value.details["path"] == "flags.json"


def test_marked_entries_skip_required_fields():
    data = {
        "flags": {"old": {"_deleted": True}},
        "values": {"old": {"_deleted": True}},
    }
    doc = validate_document(data)
    assert is_marked_for_removal(doc.flags["old"])
    assert is_marked_for_removal(doc.values["old"])


def test_removal_marker_requires_literal_true():
    assert is_marked_for_removal({"_deleted": True})
    assert not is_marked_for_removal({"_deleted": "true"})
    assert not is_marked_for_removal({"_deleted": 1})
    assert not is_marked_for_removal("f1")
    assert is_marked_for_removal({"_gone": True}, "_gone")


@pytest.mark.parametrize("raw, expected", [(1, "1"), ("1", "1"), ("", "1"), (None, "1"), (2.5, "2.5")])
def test_scalar_versions_are_normalized_to_text(raw, expected):
    """A versão de entrada é só informativa: o merge grava a versão fixa."""
    doc = validate_document({"flags": {}, "values": {}, "version": raw})
    assert doc.version == expected
