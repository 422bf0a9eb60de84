# check10/config.py
import logging
import os
from dataclasses import dataclass, field
from typing import Optional

import tomllib

logger = logging.getLogger(__name__)


@dataclass
class SearchConfig:
    max_depth: int = 15
    time_limit_ms: int = 10000
    choice_policy: str = "immediate"  # "immediate" or "branch"
    hash_captures: bool = True  # fold captured pieces into incremental keys
    zobrist_seed: Optional[int] = None  # None means a fresh table per process
    fallback_seed: Optional[int] = None  # seeds the pre-search fallback move


@dataclass
class EvalConfig:
    promoted_weight: float = 0.5
    advancement_weight: float = 0.1


@dataclass
class ServerConfig:
    engine_name: str = "Check10 AI"
    host: str = "0.0.0.0"
    port: int = 3000
    min_time_limit_ms: int = 50
    max_time_limit_ms: int = 30000


@dataclass
class Config:
    search: SearchConfig = field(default_factory=SearchConfig)
    eval: EvalConfig = field(default_factory=EvalConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    log_level: str = "INFO"

    @staticmethod
    def load_from_toml(path: str = "config.toml") -> "Config":
        cfg = Config()
        if not os.path.exists(path):
            return cfg
        with open(path, "rb") as f:
            raw = tomllib.load(f)
        for section in ("search", "eval", "server"):
            target = getattr(cfg, section)
            for k, v in raw.get(section, {}).items():
                if hasattr(target, k):
                    setattr(target, k, v)
        if "log_level" in raw:
            cfg.log_level = raw["log_level"]
        return cfg


def _env_int(name: str) -> Optional[int]:
    value = os.environ.get(name)
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer", name, value)
        return None


def apply_env_overrides(cfg: Config) -> Config:
    """Apply the process environment on top of a loaded config."""
    port = _env_int("PORT")
    if port is not None:
        cfg.server.port = port
    think = _env_int("CHECK10_THINKING_TIME_MS")
    if think is not None:
        cfg.search.time_limit_ms = think
    depth = _env_int("CHECK10_SEARCH_DEPTH")
    if depth is not None:
        cfg.search.max_depth = depth
    level = os.environ.get("CHECK10_LOG_LEVEL")
    if level:
        cfg.log_level = level.upper()
    return cfg


def configure_logging(cfg: Optional[Config] = None) -> None:
    cfg = cfg or CONFIG
    logging.basicConfig(
        level=getattr(logging, cfg.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# single globally importable config instance
CONFIG = apply_env_overrides(
    Config.load_from_toml(os.environ.get("CHECK10_CONFIG_TOML", "config.toml"))
)
