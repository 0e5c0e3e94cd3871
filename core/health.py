from __future__ import annotations

import logging
import os
import shutil
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from core.app_status import AppStatus

log = logging.getLogger(__name__)

UP = "UP"
DOWN = "DOWN"
OUT_OF_SERVICE = "OUT_OF_SERVICE"
UNKNOWN = "UNKNOWN"

# Most severe first; the aggregate takes the first status any component reports.
STATUS_ORDER: List[str] = [DOWN, OUT_OF_SERVICE, UP, UNKNOWN]

_UNAVAILABLE = (DOWN, OUT_OF_SERVICE)


@dataclass(frozen=True)
class Health:
    status: str
    details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def up(cls, **details: Any) -> "Health":
        return cls(UP, dict(details))

    @classmethod
    def down(cls, **details: Any) -> "Health":
        return cls(DOWN, dict(details))

    def to_dict(self, show_details: bool = True) -> Dict[str, Any]:
        out: Dict[str, Any] = {"status": self.status}
        if not show_details or not self.details:
            return out
        components = self.details.get("components")
        if isinstance(components, dict):
            out["components"] = {name: h.to_dict(show_details) for name, h in components.items()}
            rest = {k: v for k, v in self.details.items() if k != "components"}
            if rest:
                out["details"] = rest
        else:
            out["details"] = dict(self.details)
        return out


def http_status_for(status: str) -> int:
    return 503 if status in _UNAVAILABLE else 200


class HealthIndicator(ABC):
    @abstractmethod
    def health(self) -> Health:
        """
        Return the current verdict of this indicator.

        Implementations must be cheap and safe to call from any request thread;
        probes poll on an interval.
        """
        pass


class AppStatusHealthIndicator(HealthIndicator):
    """UP while the shared liveness flag is set, DOWN once it has been cleared."""

    def __init__(self, status: AppStatus):
        self.status = status

    def health(self) -> Health:
        return Health.up() if self.status.get_live() else Health.down()

    def report(self) -> Dict[str, str]:
        return {"status": self.health().status}


class PingHealthIndicator(HealthIndicator):
    def health(self) -> Health:
        return Health.up()


class DiskSpaceHealthIndicator(HealthIndicator):
    def __init__(self, path: str = ".", threshold_bytes: int = 10 * 1024 * 1024):
        self.path = path
        self.threshold_bytes = int(threshold_bytes)

    def health(self) -> Health:
        abs_path = os.path.abspath(self.path)
        if not os.path.exists(abs_path):
            return Health.down(path=abs_path, exists=False, threshold=self.threshold_bytes)
        usage = shutil.disk_usage(abs_path)
        details = {
            "total": usage.total,
            "free": usage.free,
            "threshold": self.threshold_bytes,
            "path": abs_path,
            "exists": True,
        }
        if usage.free < self.threshold_bytes:
            log.warning("Free disk space below threshold. Available: %s bytes (threshold: %s)", usage.free, self.threshold_bytes)
            return Health(DOWN, details)
        return Health(UP, details)


class HealthRegistry:
    def __init__(self):
        self._indicators: Dict[str, HealthIndicator] = {}
        self._lock = threading.Lock()

    def register(self, name: str, indicator: HealthIndicator) -> None:
        name = str(name or "").strip()
        if not name:
            raise ValueError("health indicator name must not be empty")
        with self._lock:
            if name in self._indicators:
                raise ValueError(f"health indicator already registered: {name}")
            self._indicators[name] = indicator

    def get(self, name: str) -> Optional[HealthIndicator]:
        with self._lock:
            return self._indicators.get(name)

    def names(self) -> List[str]:
        with self._lock:
            return sorted(self._indicators.keys())

    def check(self, name: str) -> Optional[Health]:
        indicator = self.get(name)
        if indicator is None:
            return None
        return _safe_health(name, indicator)

    def aggregate(self) -> Health:
        with self._lock:
            items = sorted(self._indicators.items())
        components = {name: _safe_health(name, indicator) for name, indicator in items}
        return Health(aggregate_status([h.status for h in components.values()]), {"components": components})


def aggregate_status(statuses: List[str]) -> str:
    for candidate in STATUS_ORDER:
        if candidate in statuses:
            return candidate
    return UNKNOWN


def _safe_health(name: str, indicator: HealthIndicator) -> Health:
    try:
        return indicator.health()
    except Exception as e:
        log.warning("Health indicator %s failed: %s: %s", name, type(e).__name__, e)
        return Health.down(error=f"{type(e).__name__}: {e}")


def build_registry(status: AppStatus, cfg: Dict[str, Any]) -> HealthRegistry:
    health_cfg = cfg.get("management", {}).get("health", {}) if isinstance(cfg, dict) else {}
    registry = HealthRegistry()
    registry.register("appStatus", AppStatusHealthIndicator(status))
    registry.register("ping", PingHealthIndicator())
    disk_cfg = health_cfg.get("disk_space") if isinstance(health_cfg.get("disk_space"), dict) else {}
    if bool(disk_cfg.get("enabled", True)):
        registry.register(
            "diskSpace",
            DiskSpaceHealthIndicator(
                path=str(disk_cfg.get("path") or "."),
                threshold_bytes=int(disk_cfg.get("threshold_bytes", 10 * 1024 * 1024)),
            ),
        )
    return registry
