"""Configuration loader that keeps all runtime constants centralized."""
from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List

try:
    import yaml
except ImportError as exc:  # pragma: no cover - library is optional until runtime
    raise RuntimeError("PyYAML is required to load the application configuration") from exc


CONFIG_PATH = Path(__file__).resolve().parent / "app_config.yaml"
CONFIG_ENV = "KARAOKE_POS_CONFIG"
STORAGE_ENV = "STORAGE"


@dataclass(frozen=True)
class AppConfig:
    """Strongly-typed wrapper over the raw YAML document."""

    raw: Dict[str, Any]

    @property
    def version(self) -> str:
        return str(self.raw.get("version", "v1"))

    @property
    def billing(self) -> Dict[str, Any]:
        return self.raw.get("billing", {})

    @property
    def storage(self) -> Dict[str, Any]:
        return self.raw.get("storage", {})

    @property
    def persistence(self) -> Dict[str, Any]:
        return self.raw.get("persistence", {})

    @property
    def clock(self) -> Dict[str, Any]:
        return self.raw.get("clock", {})

    @property
    def auth(self) -> Dict[str, Any]:
        return self.raw.get("auth", {})

    @property
    def currency(self) -> Dict[str, Any]:
        return self.raw.get("currency", {})

    @property
    def report(self) -> Dict[str, Any]:
        return self.raw.get("report", {})

    @property
    def seed(self) -> Dict[str, Any]:
        return self.raw.get("seed", {})

    @property
    def cors_origins(self) -> List[str]:
        return list(self.raw.get("cors_origins", []))

    @property
    def database_backend(self) -> str:
        return os.environ.get(STORAGE_ENV) or str(self.storage.get("backend", "sqlite"))

    @property
    def sqlite_path(self) -> str:
        return str(self.storage.get("sqlite_path", "karaoke_pos.db"))

    @property
    def history_write_attempts(self) -> int:
        return max(1, int(self.persistence.get("history_write_attempts", 3)))

    @property
    def refresh_interval_seconds(self) -> float:
        return float(self.clock.get("refresh_interval_seconds", 1.0))


def load_config(path: Path) -> AppConfig:
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):  # pragma: no cover - invalid file guard
        raise ValueError("Configuration file must define a mapping at the top level.")
    return AppConfig(raw=data)


@lru_cache(maxsize=1)
def get_settings(path: Path | None = None) -> AppConfig:
    """Load configuration once per process."""

    config_path = path or Path(os.environ.get(CONFIG_ENV) or CONFIG_PATH)
    return load_config(config_path)
