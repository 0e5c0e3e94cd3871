"""Tests against a real Werkzeug server: link correctness, concurrency and process kill."""

import socket
import subprocess
import sys
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from urllib.parse import urlparse

import pytest
import requests


def test_index_link_matches_bind_address(live_server):
    r = requests.get(live_server + "/", timeout=5)
    assert r.status_code == 200
    link = r.text.split("\n")[1].split(" ")[1]
    parsed = urlparse(link)
    bound = urlparse(live_server)
    assert parsed.scheme == "http"
    assert parsed.path == "/getdown"
    assert (parsed.hostname, parsed.port) == (bound.hostname, bound.port)


def test_concurrent_getdown_then_reads(live_server, status):
    with ThreadPoolExecutor(max_workers=8) as pool:
        downs = list(pool.map(lambda _: requests.get(live_server + "/getdown", timeout=5), range(8)))
    assert {r.text for r in downs} == {"Application status set to DOWN"}
    assert status.get_live() is False

    def _read(i):
        if i % 2:
            return requests.get(live_server + "/actuator/health", timeout=5).json()["status"]
        return requests.get(live_server + "/", timeout=5).text.split("\n")[0]

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(_read, range(32)))
    assert set(results) == {"DOWN", "Application status: DOWN"}


def test_end_to_end(live_server):
    s = requests.Session()
    assert "Application status: UP" in s.get(live_server + "/", timeout=5).text
    assert s.get(live_server + "/getdown", timeout=5).text == "Application status set to DOWN"
    assert "Application status: DOWN" in s.get(live_server + "/", timeout=5).text
    r = s.get(live_server + "/actuator/health", timeout=5)
    assert r.status_code == 503
    assert r.json() == {"status": "DOWN"}


_SERVE_SNIPPET = """
import sys
from core.app_status import AppStatus
from web.webapp import create_app
create_app(AppStatus()).run(host="127.0.0.1", port=int(sys.argv[1]), threaded=True, use_reloader=False)
"""


def _free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


def test_kill_exits_process_with_success_code():
    port = _free_port()
    base = f"http://127.0.0.1:{port}"
    p = subprocess.Popen(
        [sys.executable, "-c", _SERVE_SNIPPET, str(port)],
        cwd=str(Path(__file__).resolve().parent.parent),
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
    )
    try:
        deadline = time.time() + 15
        while True:
            try:
                r = requests.get(base + "/", timeout=1)
                break
            except requests.ConnectionError:
                assert p.poll() is None, "server process exited before serving"
                assert time.time() < deadline, "server did not start"
                time.sleep(0.1)
        assert "Application status: UP" in r.text

        with pytest.raises(requests.ConnectionError):
            requests.get(base + "/kill", timeout=5)
        assert p.wait(timeout=10) == 0
    finally:
        if p.poll() is None:
            p.kill()
            p.wait(timeout=5)
