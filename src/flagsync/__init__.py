# src/flagsync/__init__.py
"""
FlagSync: merge e detecção de mudança de feature flags para o AWS AppConfig.

Este pacote raiz define o namespace público do FlagSync, a ferramenta
executada pelo pipeline de deploy para transformar arquivos locais de
feature flags em documentos de configuração prontos para publicação.

Princípios centrais:
    - O merge é determinístico e não destrutivo
    - Uma nova versão só é publicada quando o conteúdo muda
    - Falhas de uma configuração nunca corrompem outra
    - Toda decisão é registrada (log estruturado + Manifest)

Arquitetura em alto nível:
    - core.config       → carregamento, merge e hashing de settings da ferramenta
    - core.document     → schema e carregamento de documentos de flags
    - core.merge        → Merge Engine (documento local + base anterior)
    - core.detect       → Change Detector (hash canônico + decisão de publicação)
    - core.runner       → execução sequencial de configurações nomeadas
    - core.traceability → Manifest e Event Log do deploy
    - persistence       → store do artefato de merge
    - remote            → leitura do estado publicado no AWS AppConfig
    - cli               → ponto de entrada `flagsync`

Limites explícitos:
    - Não provisiona recursos (responsabilidade do Terraform)
    - Não publica versões hospedadas de configuração
    - Não decide aprovação de deploy
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
