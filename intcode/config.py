from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from intcode.machine import StarvePolicy

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def repo_root() -> Path:
    # Project root is the directory that contains the `intcode/` package.
    return Path(__file__).resolve().parents[1]


def load_env() -> None:
    # Prefer a project-local `.env`, fall back to searching from CWD.
    root_env = repo_root() / ".env"
    env_path = str(root_env) if root_env.exists() else (find_dotenv(usecwd=True) or str(root_env))
    load_dotenv(env_path)


@dataclass(frozen=True)
class IntcodeSettings:
    log_level: str = "WARNING"
    on_starve: StarvePolicy = StarvePolicy.PAUSE
    max_steps: int | None = None


def _parse_max_steps(raw: str | None) -> int | None:
    raw = (raw or "").strip()
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError as e:
        raise ValueError(f"INTCODE_MAX_STEPS must be an integer, got {raw!r}") from e
    if value <= 0:
        raise ValueError("INTCODE_MAX_STEPS must be positive")
    return value


def _parse_log_level(raw: str | None) -> str:
    level = (raw or "").strip().upper() or "WARNING"
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"INTCODE_LOG must be a logging level, got {raw!r}")
    return level


def load_settings() -> IntcodeSettings:
    load_env()
    raw_policy = (os.getenv("INTCODE_ON_STARVE") or StarvePolicy.PAUSE.value).strip().lower()
    try:
        on_starve = StarvePolicy(raw_policy)
    except ValueError as e:
        raise ValueError(f"INTCODE_ON_STARVE must be 'pause' or 'fail', got {raw_policy!r}") from e
    return IntcodeSettings(
        log_level=_parse_log_level(os.getenv("INTCODE_LOG")),
        on_starve=on_starve,
        max_steps=_parse_max_steps(os.getenv("INTCODE_MAX_STEPS")),
    )


def configure_logging(level: str | int = "WARNING") -> None:
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=_LOG_FORMAT)
    logging.getLogger("intcode").setLevel(level)
