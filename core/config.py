from __future__ import annotations

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

CONFIG_ENV = "HEALTHCHECK_DEMO_CONFIG"

DEFAULT_CONFIG: Dict[str, Any] = {
    "server": {
        "host": "0.0.0.0",
        "port": 8080,
    },
    "logging": {
        "level": "INFO",
        "file": os.path.join("data", "logs", "app.log"),
    },
    "management": {
        "base_path": "/actuator",
        "health": {
            "show_details": "never",
            "disk_space": {
                "enabled": True,
                "path": ".",
                "threshold_bytes": 10 * 1024 * 1024,
            },
        },
    },
}

SHOW_DETAILS_VALUES = ("never", "always")


class ConfigError(RuntimeError):
    pass


def default_config_path() -> Path:
    root_dir = Path(__file__).resolve().parents[1]
    return root_dir / "config" / "app.yaml"


def _deep_merge(base: Dict[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    out = dict(base)
    for k, v in override.items():
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def load_config(path: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    env = os.environ if environ is None else environ
    config_path = Path(path or env.get(CONFIG_ENV) or default_config_path())

    data: Any = {}
    if config_path.exists():
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"failed to read config {config_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"config {config_path} must be a mapping, got {type(data).__name__}")

    cfg = _deep_merge(copy.deepcopy(DEFAULT_CONFIG), data)

    port = str(env.get("PORT") or "").strip()
    if port:
        cfg["server"]["port"] = port
    return cfg


def validate_config(cfg: Dict[str, Any]) -> List[str]:
    errors: List[str] = []
    server = cfg.get("server") if isinstance(cfg.get("server"), dict) else {}
    try:
        port = int(server.get("port"))
        if not 1 <= port <= 65535:
            errors.append(f"server.port out of range: {port}")
    except (TypeError, ValueError):
        errors.append(f"server.port not an integer: {server.get('port')!r}")

    log_cfg = cfg.get("logging") if isinstance(cfg.get("logging"), dict) else {}
    level = str(log_cfg.get("level") or "").strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        errors.append(f"logging.level unknown: {log_cfg.get('level')!r}")

    management = cfg.get("management") if isinstance(cfg.get("management"), dict) else {}
    base_path = str(management.get("base_path") or "")
    if not base_path.startswith("/") or base_path.rstrip("/") == "":
        errors.append(f"management.base_path must start with '/' and not be the root: {base_path!r}")

    health = management.get("health") if isinstance(management.get("health"), dict) else {}
    show_details = str(health.get("show_details") or "").strip().lower()
    if show_details not in SHOW_DETAILS_VALUES:
        errors.append(f"management.health.show_details must be one of {', '.join(SHOW_DETAILS_VALUES)}: {health.get('show_details')!r}")

    disk = health.get("disk_space") if isinstance(health.get("disk_space"), dict) else {}
    try:
        if int(disk.get("threshold_bytes", 0)) < 0:
            errors.append("management.health.disk_space.threshold_bytes must not be negative")
    except (TypeError, ValueError):
        errors.append(f"management.health.disk_space.threshold_bytes not an integer: {disk.get('threshold_bytes')!r}")
    return errors
