"""Project-level configuration and path helpers."""

import os
from pathlib import Path
from typing import Union

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DATA_DIR = PROJECT_ROOT / "03_data"
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_DB_PATH = DATA_DIR / "scene.db"
DEFAULT_LOG_PATH = LOGS_DIR / "app.log"
DEFAULT_RPC_TIMEOUT = 30.0


PathLike = Union[str, Path]

# Fallback target project for remote calls. Read once per Scene, at construction.
_current_project: str = os.getenv("SCENE_PROJECT", "")


def get_current_project() -> str:
    """Return the process-wide default project."""
    return _current_project


def set_current_project(project: str) -> None:
    """Replace the process-wide default project (last write wins)."""
    global _current_project
    _current_project = project


def resolve_db_path(env_value: PathLike | None = None) -> PathLike:
    """Resolve DATABASE_URL to an absolute path."""
    if not env_value:
        DATA_DIR.mkdir(parents=True, exist_ok=True)
        return DEFAULT_DB_PATH

    if str(env_value) == ":memory:":
        return ":memory:"

    candidate = Path(env_value)
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


def rpc_timeout(env_value: str | None = None) -> float:
    """Resolve RPC_TIMEOUT (seconds) for outgoing remote calls."""
    value = env_value if env_value is not None else os.getenv("RPC_TIMEOUT")
    if not value:
        return DEFAULT_RPC_TIMEOUT
    return float(value)


def parse_service_specs(value: str | None) -> dict[str, str]:
    """
    Parse SCENE_SERVICES into a project -> import path mapping.

    Args:
        value: Comma-separated ``project=package.module:attr`` entries.

    Returns:
        Mapping of project name to ``package.module:attr``.
    """
    specs: dict[str, str] = {}
    if not value:
        return specs

    for entry in value.split(","):
        entry = entry.strip()
        if not entry:
            continue
        project, sep, target = entry.partition("=")
        if not sep or ":" not in target:
            raise ValueError(f"Invalid SCENE_SERVICES entry: {entry!r}")
        specs[project.strip()] = target.strip()

    return specs
