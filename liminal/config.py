"""Config module.

User-level settings persisted as `config.json` in the data directory.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path

logger = logging.getLogger(__name__)


def data_dir() -> Path:
    raw = str(os.environ.get("LIMINAL_DATA_DIR", "")).strip()
    return Path(raw).expanduser() if raw else Path.home() / ".liminal"


@dataclass
class AppConfig:
    api_key: str | None = None
    base_url: str | None = None
    model: str | None = None
    theme: str = ""


class ConfigStore:
    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else data_dir() / "config.json"

    def load(self) -> AppConfig:
        if not self.path.exists():
            return AppConfig()
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("ignoring unreadable config file %s", self.path)
            return AppConfig()
        if not isinstance(raw, dict):
            return AppConfig()
        known = {f.name for f in fields(AppConfig)}
        return AppConfig(**{k: v for k, v in raw.items() if k in known})

    def save(self, config: AppConfig) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(asdict(config), ensure_ascii=False, indent=2), encoding="utf-8")

    def update(self, **changes: str | None) -> AppConfig:
        config = self.load()
        for key, value in changes.items():
            if value is None or not hasattr(config, key):
                continue
            setattr(config, key, value)
        self.save(config)
        return config
