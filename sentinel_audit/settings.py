from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from sentinel_audit.config_parser import DEFAULT_CONFIG_PATH
from sentinel_audit.decoder import parse_int
from sentinel_audit.prober import DEFAULT_PROBE_TIMEOUT_SECONDS

log = logging.getLogger(__name__)

SETTINGS_ENV = "SENTINEL_AUDIT_SETTINGS"
CONFIG_ENV = "SENTINEL_AUDIT_CONFIG"
TIMEOUT_ENV = "SENTINEL_AUDIT_TIMEOUT"
WORKERS_ENV = "SENTINEL_AUDIT_WORKERS"

STANDARD_SENTINEL_PORT = 26379


@dataclass(frozen=True)
class AuditSettings:
    config_path: str = DEFAULT_CONFIG_PATH
    probe_timeout_seconds: float = DEFAULT_PROBE_TIMEOUT_SECONDS
    standard_port: int = STANDARD_SENTINEL_PORT
    max_workers: int = 1
    reports: List[str] = field(default_factory=lambda: ["all"])
    log_level: str = "WARNING"


def _safe_float(raw: Any) -> Optional[float]:
    try:
        if raw is None or isinstance(raw, bool):
            return None
        value = float(raw)
    except (TypeError, ValueError):
        return None
    return value if value > 0 else None


def _safe_positive_int(raw: Any) -> Optional[int]:
    if raw is None or isinstance(raw, bool):
        return None
    value = raw if isinstance(raw, int) else parse_int(str(raw).strip())
    return value if value is not None and value > 0 else None


def _read_settings_doc(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        log.warning("Ignoring unreadable settings file %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        log.warning("Ignoring settings file %s: top level is not a mapping", path)
        return {}
    return data


def _apply(settings: AuditSettings, doc: Mapping[str, Any], source: str) -> AuditSettings:
    known = {f.name for f in fields(AuditSettings)}
    updates: Dict[str, Any] = {}
    for key, raw in doc.items():
        if key not in known:
            log.warning("Unknown setting '%s' in %s", key, source)
            continue
        if key == "probe_timeout_seconds":
            value: Any = _safe_float(raw)
        elif key in {"standard_port", "max_workers"}:
            value = _safe_positive_int(raw)
        elif key == "reports":
            value = split_report_names(list(raw) if isinstance(raw, (list, tuple)) else [raw])
            value = value or None
        else:
            value = str(raw).strip() if raw is not None else None
            value = value or None
        if value is None:
            log.warning("Ignoring invalid value for '%s' in %s: %r", key, source, raw)
            continue
        updates[key] = value
    return replace(settings, **updates) if updates else settings


def split_report_names(values: List[Any]) -> List[str]:
    names: List[str] = []
    for raw in values:
        for name in str(raw or "").split(","):
            name = name.strip()
            if name:
                names.append(name)
    return names


def load_settings(
    path: str | Path | None = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
) -> AuditSettings:
    env = os.environ if environ is None else environ
    settings = AuditSettings()
    settings_path = path or env.get(SETTINGS_ENV)
    if settings_path:
        settings = _apply(settings, _read_settings_doc(Path(settings_path)), str(settings_path))
    env_doc: Dict[str, Any] = {}
    if env.get(CONFIG_ENV):
        env_doc["config_path"] = env[CONFIG_ENV]
    if env.get(TIMEOUT_ENV):
        env_doc["probe_timeout_seconds"] = env[TIMEOUT_ENV]
    if env.get(WORKERS_ENV):
        env_doc["max_workers"] = env[WORKERS_ENV]
    return _apply(settings, env_doc, "environment")


__all__ = [
    "AuditSettings",
    "STANDARD_SENTINEL_PORT",
    "load_settings",
    "split_report_names",
]
