from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Settings:
    db_path: Path
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"


def load_settings(environ: dict[str, str] | None = None) -> Settings:
    env = environ if environ is not None else os.environ
    db_path = Path(env.get("INKWELL_DB_PATH", "./inkwell.db")).expanduser()
    host = env.get("INKWELL_HOST", "127.0.0.1")
    port_raw = env.get("INKWELL_PORT", "8000")
    try:
        port = int(port_raw)
    except ValueError as e:
        raise ValueError(f"Invalid INKWELL_PORT: {port_raw}") from e

    log_level = env.get("INKWELL_LOG_LEVEL", "INFO").upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ValueError(f"Invalid INKWELL_LOG_LEVEL: {log_level}")

    return Settings(db_path=db_path, host=host, port=port, log_level=log_level)
