from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import yaml

from .errors import PreconditionError


def _is_yaml(p: Path) -> bool:
    return p.suffix.lower() in {".yaml", ".yml"}


def load_build_state(path: str) -> Dict[str, Any]:
    p = Path(path)
    if not p.exists():
        return {}
    text = p.read_text(encoding="utf-8")
    try:
        data = (yaml.safe_load(text) or {}) if _is_yaml(p) else json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise PreconditionError(f"Run state {path} is unreadable ({e}); remove it or pass another --state") from e
    if not isinstance(data, dict):
        raise PreconditionError(f"Run state {path} must contain an object")
    if not isinstance(data.get("runs", {}), dict):
        raise PreconditionError(f"Run state {path}: 'runs' must be an object")
    return data


def save_build_state(path: str, state: Dict[str, Any]) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    if _is_yaml(p):
        p.write_text(yaml.safe_dump(state, sort_keys=False) + "\n", encoding="utf-8")
    else:
        p.write_text(json.dumps(state, indent=2, sort_keys=True) + "\n", encoding="utf-8")


def ensure_build_defaults(state: Dict[str, Any]) -> Dict[str, Any]:
    state.setdefault("runs", {})
    return state


def run_record(state: Dict[str, Any], *, operation: str, image: str) -> Dict[str, Any]:
    """Reset and return the record for one (operation, image) attempt.

    Every attempt starts from a clean image, so previous progress is dropped.
    """

    runs = state.setdefault("runs", {}).setdefault(operation, {})
    if not isinstance(runs, dict):
        raise PreconditionError(f"Run state: runs.{operation} must be an object")
    rec: Dict[str, Any] = {"completed_steps": [], "failed_step": None, "error": None, "artifacts": {}}
    runs[image] = rec
    return rec


def mark_completed(rec: Dict[str, Any], step_id: str) -> None:
    completed = rec.setdefault("completed_steps", [])
    if step_id not in completed:
        completed.append(step_id)


def mark_failed(rec: Dict[str, Any], step_id: str | None, error: str) -> None:
    rec["failed_step"] = step_id
    rec["error"] = error
