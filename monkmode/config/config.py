from __future__ import annotations

"""Configuration loading and validation for MonkMode.

This module loads YAML configuration, applies defaults, and validates
enumerations and numeric ranges, falling back to defaults with a warning.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import sys

import yaml

from ..models import SessionConfig, TimeoutPolicy

ALLOWED_MODES = {"treadmill", "quiz", "free", "reading"}
ALLOWED_TIMEOUT_POLICIES = {p.value for p in TimeoutPolicy}

_SESSION_INT_DEFAULTS = {"question_duration": 5, "answer_duration": 5}
_READER_DEFAULTS = {"pause_base": 1.0, "pause_per_word": 0.06, "pause_min": 1.0, "pause_max": 4.5}


def _load_yaml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        print(f"ERROR: Config file not found: {path}", file=sys.stderr)
        sys.exit(1)
    if not isinstance(data, dict):
        print(f"ERROR: Config file must contain a mapping: {path}", file=sys.stderr)
        sys.exit(1)
    return data


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from YAML or defaults.

    Args:
        path: Optional path to a YAML config. If None, use package defaults.

    Returns:
        A dictionary with configuration values.
    """
    if path:
        return _load_yaml(Path(path))
    return _load_yaml(Path(__file__).with_name("defaults.yml"))


def _positive_int(section: Dict[str, Any], name: str, default: int) -> None:
    value = section.get(name, default)
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        print(f"WARNING: {name} must be a positive integer, got {value!r}; using {default}.")
        value = default
    section[name] = value


def validate_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Apply defaults and validate configuration values.

    Args:
        cfg: The raw configuration dictionary.

    Returns:
        The validated and merged configuration dictionary.
    """
    for name in ("session", "reader", "ui"):
        if not isinstance(cfg.get(name), dict):
            cfg[name] = {}

    session = cfg["session"]
    reader = cfg["reader"]
    ui = cfg["ui"]

    session.setdefault("mode", "treadmill")
    session.setdefault("shuffle", False)
    session.setdefault("unjudged_timeout", TimeoutPolicy.MISS.value)
    for name, default in _SESSION_INT_DEFAULTS.items():
        _positive_int(session, name, default)
    session["shuffle"] = bool(session["shuffle"])

    mode = session.get("mode")
    if mode not in ALLOWED_MODES:
        print(f"WARNING: Unsupported mode '{mode}', using 'treadmill'.")
        session["mode"] = "treadmill"

    policy = session.get("unjudged_timeout")
    if policy not in ALLOWED_TIMEOUT_POLICIES:
        print(f"WARNING: Unsupported unjudged_timeout '{policy}', using 'miss'.")
        session["unjudged_timeout"] = TimeoutPolicy.MISS.value

    for name, default in _READER_DEFAULTS.items():
        value = reader.get(name, default)
        try:
            value = float(value)
        except (TypeError, ValueError):
            print(f"WARNING: reader.{name} must be a number, got {value!r}; using {default}.")
            value = default
        if value < 0:
            print(f"WARNING: reader.{name} must be >= 0; using {default}.")
            value = default
        reader[name] = value
    if reader["pause_min"] > reader["pause_max"]:
        print("WARNING: reader.pause_min > pause_max, swapping.")
        reader["pause_min"], reader["pause_max"] = reader["pause_max"], reader["pause_min"]

    ui.setdefault("explain", False)
    ui["explain"] = bool(ui["explain"])
    return cfg


def session_config_from(cfg: Dict[str, Any], overrides: Optional[Dict[str, Any]] = None) -> SessionConfig:
    """Build the immutable SessionConfig: validated config section, then overrides."""
    params = dict(cfg.get("session", {}))
    params.update({k: v for k, v in (overrides or {}).items() if v is not None})
    return SessionConfig(
        question_duration=int(params.get("question_duration", 5)),
        answer_duration=int(params.get("answer_duration", 5)),
        shuffle=bool(params.get("shuffle", False)),
        unjudged_timeout=TimeoutPolicy(params.get("unjudged_timeout", TimeoutPolicy.MISS.value)),
    )
