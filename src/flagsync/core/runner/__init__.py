"""
Runner do FlagSync.

API pública:
    - SyncJob, SyncResult, SyncStatus → tipos canônicos
    - SyncRunner                      → execução sequencial com isolamento de falhas
    - RunResult                       → resultado agregado da run
"""

from .runner import RunResult, SyncRunner
from .types import SyncJob, SyncResult, SyncStatus

__all__ = ["RunResult", "SyncRunner", "SyncJob", "SyncResult", "SyncStatus"]
