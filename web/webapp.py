from __future__ import annotations

import logging
import os
from typing import Any, Callable, Dict, Optional

from flask import Flask, jsonify, request, url_for
from werkzeug.middleware.proxy_fix import ProxyFix

from core.app_info import APP_INFO
from core.app_status import AppStatus
from core.config import DEFAULT_CONFIG
from core.health import HealthRegistry, build_registry, http_status_for

log = logging.getLogger(__name__)

TEXT_PLAIN = "text/plain; charset=utf-8"


def create_app(
    status: AppStatus,
    cfg: Optional[Dict[str, Any]] = None,
    registry: Optional[HealthRegistry] = None,
    terminate: Optional[Callable[[int], Any]] = None,
) -> Flask:
    cfg = cfg or DEFAULT_CONFIG
    management = cfg.get("management", {})
    base_path = "/" + str(management.get("base_path") or "/actuator").strip("/")
    show_details = str(management.get("health", {}).get("show_details") or "never").lower() == "always"
    registry = registry or build_registry(status, cfg)
    terminate = terminate or os._exit

    app = Flask(__name__)
    # One proxy hop in front: the platform router.
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)

    @app.get("/")
    def index():
        url = url_for("getdown", _external=True)
        body = (
            f"Application status: {status.label()}\n"
            f"Hit {url} to update application status, and see how the platform reacts to this update."
        )
        return body, 200, {"Content-Type": TEXT_PLAIN}

    @app.get("/getdown")
    def getdown():
        log.info("Updating application status: DOWN")
        status.set_live(False)
        return "Application status set to DOWN", 200, {"Content-Type": TEXT_PLAIN}

    @app.get("/kill")
    def kill():
        log.info("Killing application process")
        terminate(0)
        return "", 200, {"Content-Type": TEXT_PLAIN}

    @app.get(base_path, endpoint="management_links")
    def management_links():
        links = {
            "self": {"href": url_for("management_links", _external=True)},
            "health": {"href": url_for("health", _external=True)},
            "health-path": {"href": url_for("health", _external=True) + "/{*path}"},
            "info": {"href": url_for("info", _external=True)},
        }
        return jsonify({"_links": links})

    @app.get(f"{base_path}/health", endpoint="health")
    def health():
        result = registry.aggregate()
        return jsonify(result.to_dict(show_details)), http_status_for(result.status)

    @app.get(f"{base_path}/health/<name>", endpoint="health_component")
    def health_component(name: str):
        result = registry.check(name)
        if result is None:
            return jsonify({"error": "not_found"}), 404
        return jsonify(result.to_dict(show_details)), http_status_for(result.status)

    @app.get(f"{base_path}/info", endpoint="info")
    def info():
        return jsonify(APP_INFO)

    @app.after_request
    def disable_cache(resp):
        if request.path == "/" or request.path.startswith(base_path):
            resp.headers["Cache-Control"] = "no-store"
        return resp

    return app
