"""
Central configuration for the FlowState engine.
All values can be overridden via environment variables or a local config.json.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

_ROOT = Path(__file__).parent.parent
_CONFIG_FILE = _ROOT / "config.json"


@dataclass
class Config:
    # API
    api_host: str = "127.0.0.1"
    api_port: int = 8765
    cors_origins: List[str] = field(
        default_factory=lambda: ["http://localhost:5173", "http://localhost:3000", "null"]
    )

    # Ticks
    tick_interval_s: float = 1.0             # timer / monitor / break cadence
    inactivity_threshold_s: float = 30.0     # no input for longer than this → idle

    # Storage
    data_dir: Path = field(default_factory=lambda: _ROOT / "data")
    store_db: str = "flowstate.db"

    # Logging
    log_level: str = "INFO"

    def __post_init__(self):
        self.data_dir = Path(self.data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    @classmethod
    def load(cls) -> "Config":
        cfg = cls()
        if _CONFIG_FILE.exists():
            overrides = json.loads(_CONFIG_FILE.read_text())
            for k, v in overrides.items():
                if hasattr(cfg, k):
                    setattr(cfg, k, v)
        # environment variable overrides (FLOWSTATE_*)
        for k in cfg.__dataclass_fields__:  # type: ignore[attr-defined]
            env_key = f"FLOWSTATE_{k.upper()}"
            if env_key in os.environ:
                current = getattr(cfg, k)
                raw = os.environ[env_key]
                if isinstance(current, list):
                    setattr(cfg, k, [s.strip() for s in raw.split(",") if s.strip()])
                else:
                    setattr(cfg, k, type(current)(raw))
        cfg.data_dir = Path(cfg.data_dir)
        return cfg


# Module-level singleton
config = Config.load()
