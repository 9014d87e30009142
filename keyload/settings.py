"""
keyload.settings
----------------
Loader settings: where the keyring lives, where the reconciliation peer keeps
its state, and where profiles are written.

Settings are read from a YAML document. Every key is optional; storage
defaults fall back to the KEYLOAD_STORAGE_PROVIDER and KEYLOAD_DB_PATH
environment variables.
"""

from __future__ import annotations
from dataclasses import dataclass, field, fields
from typing import Any, Dict
import os
import yaml
from .errors import ParseError

STORAGE_PROVIDERS = ("sqlite", "memory")


@dataclass
class StorageSettings:
    provider: str = field(default_factory=lambda: os.getenv("KEYLOAD_STORAGE_PROVIDER", "sqlite"))
    sqlite_path: str = field(default_factory=lambda: os.getenv("KEYLOAD_DB_PATH", "db/keyring.db"))


@dataclass
class ReconSettings:
    path: str = "recon"
    http_addr: str = ":11371"
    recon_addr: str = ":11370"


@dataclass
class ProfilingSettings:
    cpu_prefix: str = "keyload"
    mem_path: str = "keyload.mprof"


@dataclass
class Settings:
    storage: StorageSettings = field(default_factory=StorageSettings)
    recon: ReconSettings = field(default_factory=ReconSettings)
    profiling: ProfilingSettings = field(default_factory=ProfilingSettings)


_SECTIONS = {
    "storage": StorageSettings,
    "recon": ReconSettings,
    "profiling": ProfilingSettings,
}


def _section(name: str, cls, data: Any):
    if data is None:
        return cls()
    if not isinstance(data, dict):
        raise ParseError(f"[{name}] must be a mapping, got {type(data).__name__}")

    known = {f.name for f in fields(cls)}
    values: Dict[str, str] = {}
    for key, value in data.items():
        if key not in known:
            raise ParseError(f"[{name}] unknown setting {key!r}")
        if not isinstance(value, str):
            raise ParseError(f"[{name}] {key} must be a string, got {type(value).__name__}")
        values[key] = value
    return cls(**values)


def parse_settings(text: str) -> Settings:
    """Parse YAML settings text. Raises ParseError on malformed input."""
    try:
        doc = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ParseError(f"invalid settings: {e}") from e

    if doc is None:
        doc = {}
    if not isinstance(doc, dict):
        raise ParseError(f"settings must be a mapping, got {type(doc).__name__}")

    unknown = sorted(set(doc) - set(_SECTIONS))
    if unknown:
        raise ParseError(f"unknown settings section(s): {', '.join(map(str, unknown))}")

    settings = Settings(**{name: _section(name, cls, doc.get(name)) for name, cls in _SECTIONS.items()})
    if settings.storage.provider not in STORAGE_PROVIDERS:
        raise ParseError(f"Unknown storage provider: {settings.storage.provider}")
    return settings


def read_settings(path: str) -> Settings:
    """Read and parse a settings file. OSError propagates for unreadable files."""
    with open(path, "r", encoding="utf-8") as f:
        return parse_settings(f.read())
