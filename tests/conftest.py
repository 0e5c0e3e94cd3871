"""Pytest fixtures for the Health Check Demo tests."""

import sys
import threading
from pathlib import Path

import pytest

# Ensure project root is in path for core/web imports
_project_root = Path(__file__).resolve().parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from core.app_status import AppStatus  # noqa: E402
from core.config import load_config  # noqa: E402
from web.webapp import create_app  # noqa: E402


class FakeTerminator:
    """Records exit codes instead of ending the test process."""

    def __init__(self):
        self.calls = []

    def __call__(self, code: int) -> None:
        self.calls.append(code)


@pytest.fixture
def cfg(tmp_path) -> dict:
    """Defaults only; points at a config file that does not exist."""
    return load_config(str(tmp_path / "missing.yaml"), environ={})


@pytest.fixture
def status() -> AppStatus:
    return AppStatus()


@pytest.fixture
def terminator() -> FakeTerminator:
    return FakeTerminator()


@pytest.fixture
def app(status, cfg, terminator):
    app = create_app(status, cfg, terminate=terminator)
    app.testing = True
    return app


@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c


@pytest.fixture
def live_server(app):
    """Serve the app on an ephemeral port with a threaded Werkzeug server."""
    from werkzeug.serving import make_server

    server = make_server("127.0.0.1", 0, app, threaded=True)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://127.0.0.1:{server.port}"
    finally:
        server.shutdown()
        thread.join(timeout=5)
