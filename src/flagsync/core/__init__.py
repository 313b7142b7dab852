# src/flagsync/core/__init__.py
"""
Core do FlagSync.

Este pacote contém a implementação canônica do processo de merge e
detecção de mudança, independente de CLI, AWS ou Terraform.

O core é projetado para ser:
    - determinístico
    - testável de forma isolada
    - livre de efeitos colaterais em caso de falha

Componentes principais:
    - config       → resolução dos settings da ferramenta
    - document     → FlagDocument, validação estrutural e loader
    - merge        → Merge Engine
    - detect       → Change Detector
    - runner       → SyncRunner (uma configuração nomeada por vez)
    - traceability → Manifest do deploy

Limites explícitos:
    - Não acessa serviços remotos diretamente
    - Não depende da CLI

Este pacote existe como a fonte de verdade operacional do FlagSync.
"""
