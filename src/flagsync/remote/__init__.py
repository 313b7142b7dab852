"""Fontes do estado publicado (Deployed State Reference)."""

from .appconfig import (
    AppConfigStateReader,
    ExplicitStateReader,
    NullStateReader,
    RemoteSnapshot,
    StateReader,
)

__all__ = [
    "AppConfigStateReader",
    "ExplicitStateReader",
    "NullStateReader",
    "RemoteSnapshot",
    "StateReader",
]
