# tests/test_smoke.py
"""
Testes de sanidade estrutural (smoke tests) do FlagSync.

Este módulo contém testes mínimos cujo único objetivo é garantir que:
- o pacote está estruturalmente válido e importável
- o ambiente de testes (pytest) está funcional

Invariantes:
    - Estes testes devem sempre passar em um setup correto
    - Não dependem de settings, filesystem ou AWS

Limites explícitos:
    - Não testar lógica de negócio
    - Não acumular asserts funcionais
"""


def test_smoke():
    """
    Smoke test mínimo do repositório.

    Valida apenas que o pacote pode ser importado e expõe sua versão.
    """
    import flagsync

    assert isinstance(flagsync.__version__, str)
