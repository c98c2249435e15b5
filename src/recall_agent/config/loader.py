from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Dict


DEFAULT_CONFIG_PATH = Path("config.toml")
CONFIG_PATH_ENV = "RECALL_AGENT_CONFIG"


def resolve_config_path(path: str | Path | None = None) -> Path:
    """Explicit ``path`` first, then ``$RECALL_AGENT_CONFIG``, then ./config.toml."""
    if path is not None:
        return Path(path)
    from_env = os.getenv(CONFIG_PATH_ENV)
    return Path(from_env) if from_env else DEFAULT_CONFIG_PATH


def load_raw_config(path: str | Path | None = None) -> Dict[str, Any]:
    """
    Load the unified application config.

    Returns an empty dict when the file is missing so callers can fall back to
    environment variables. Settings for this application live under the
    ``[recallagent]`` table.
    """
    target = resolve_config_path(path)
    if not target.is_file():
        return {}

    with target.open("rb") as handle:
        return tomllib.load(handle)


__all__ = ["load_raw_config", "resolve_config_path", "DEFAULT_CONFIG_PATH", "CONFIG_PATH_ENV"]
