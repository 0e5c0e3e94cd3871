import logging
import sys


def _setup_logging(level: str = "INFO", log_file: str = "data/logs/app.log") -> None:
    fmt = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    lvl = logging.getLevelName(str(level).upper())

    root = logging.getLogger()
    root.setLevel(lvl)

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(lvl)
    file_handler.setFormatter(fmt)

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setLevel(lvl)
    stream_handler.setFormatter(fmt)

    root.handlers.clear()
    root.addHandler(file_handler)
    root.addHandler(stream_handler)


def _import_optional_deps() -> None:
    try:
        import flask
        import yaml
    except ImportError:
        print("Missing dependencies, run: python -m pip install -r requirements.txt", file=sys.stderr)
        raise


def main() -> int:
    _import_optional_deps()
    from core.config import ConfigError, load_config, validate_config

    try:
        cfg = load_config()
    except ConfigError as e:
        print(str(e), file=sys.stderr)
        return 2
    problems = validate_config(cfg)
    if problems:
        for p in problems:
            print(f"config: {p}", file=sys.stderr)
        return 2

    from core.storage import ensure_dirs
    ensure_dirs(cfg["logging"]["file"])
    _setup_logging(cfg["logging"]["level"], cfg["logging"]["file"])
    log = logging.getLogger("healthcheck_demo")

    from core.app_status import AppStatus
    from core.health import build_registry
    from web.webapp import create_app

    status = AppStatus(live=True)
    registry = build_registry(status, cfg)
    app = create_app(status, cfg, registry=registry)

    host = str(cfg["server"]["host"])
    port = int(cfg["server"]["port"])
    log.info("Health indicators: %s", ", ".join(registry.names()))
    log.info("Listening on http://%s:%s/", host, port)
    app.run(host=host, port=port, debug=False, threaded=True, use_reloader=False)
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
