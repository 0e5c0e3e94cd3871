from __future__ import annotations

import argparse
import sys
from typing import List, Optional


def _import_deps() -> List[str]:
    missing: List[str] = []
    for mod in ("flask", "requests", "yaml"):
        try:
            __import__(mod)
        except ImportError:
            missing.append(mod)
    return missing


def _probe(base: str, timeout: float = 3.0) -> List[str]:
    import requests

    errors: List[str] = []
    base = base.rstrip("/")
    try:
        r = requests.get(base + "/", timeout=timeout)
        if r.status_code != 200 or "Application status:" not in r.text:
            errors.append(f"index: unexpected response {r.status_code} {r.text[:120]!r}")
        else:
            print(f"[OK ] {base}/ -> {r.text.splitlines()[0]}")
    except requests.RequestException as e:
        errors.append(f"index: {type(e).__name__}: {e}")

    try:
        r = requests.get(base + "/actuator/health", timeout=timeout)
        payload = r.json()
        status = str(payload.get("status") or "")
        if status not in ("UP", "DOWN"):
            errors.append(f"health: unexpected payload {payload!r}")
        else:
            print(f"[OK ] {base}/actuator/health -> {r.status_code} {status}")
    except (requests.RequestException, ValueError) as e:
        errors.append(f"health: {type(e).__name__}: {e}")
    return errors


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Health Check Demo doctor")
    parser.add_argument("--config", default=None, help="path to app.yaml")
    parser.add_argument("--url", default=None, help="base URL of a running instance to probe")
    args = parser.parse_args(argv)

    print("Health Check Demo Doctor")
    print("")

    missing = _import_deps()
    if missing:
        print("Missing dependencies:", ", ".join(missing))
        print("Run: python -m pip install -r requirements.txt")
        return 1

    from core.config import ConfigError, load_config, validate_config

    problems: List[str] = []
    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        print(f"[BAD] {e}")
        return 1
    for p in validate_config(cfg):
        problems.append(f"config: {p}")
    if not problems:
        print(f"[OK ] config: listen {cfg['server']['host']}:{cfg['server']['port']}, log {cfg['logging']['file']}")

    if args.url:
        problems.extend(_probe(args.url))

    for p in problems:
        print(f"[BAD] {p}")
    print("")
    print(f"Problems: {len(problems)}")
    return 1 if problems else 0


if __name__ == "__main__":
    raise SystemExit(main())
