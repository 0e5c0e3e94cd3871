from __future__ import annotations

import sys

import requests


def main() -> int:
    base = sys.argv[1].rstrip("/") if len(sys.argv) > 1 else "http://127.0.0.1:8080"
    s = requests.Session()

    r = s.get(base + "/", timeout=3)
    print("index:", r.status_code, r.text.splitlines()[0] if r.text else "")
    if "Application status: UP" not in r.text:
        return 2

    r = s.get(base + "/actuator/health", timeout=3)
    print("health:", r.status_code, r.json())

    r = s.get(base + "/getdown", timeout=3)
    print("getdown:", r.status_code, r.text)
    if r.text != "Application status set to DOWN":
        return 3

    r = s.get(base + "/", timeout=3)
    print("index:", r.status_code, r.text.splitlines()[0] if r.text else "")
    if "Application status: DOWN" not in r.text:
        return 4

    r = s.get(base + "/actuator/health", timeout=3)
    print("health:", r.status_code, r.json())
    if r.json().get("status") != "DOWN":
        return 5

    if len(sys.argv) > 2 and sys.argv[2] == "--kill":
        try:
            s.get(base + "/kill", timeout=3)
        except requests.RequestException as e:
            print("kill:", type(e).__name__)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
