"""Shared fixtures: a throwaway site per test and a live werkzeug server."""

import threading
from pathlib import Path

import pytest
from werkzeug.serving import make_server

from wedding_site.app import create_app
from wedding_site.config import SiteContext

INDEX_HTML = b"<!DOCTYPE html><title>Wedding</title><h1>Hello</h1>"


# =============================================================================
# Site Fixtures
# =============================================================================

@pytest.fixture
def public_dir(tmp_path: Path) -> Path:
    """Asset root with an index page, a stylesheet and a secret file beside it."""
    public = tmp_path / "public"
    (public / "assets" / "css").mkdir(parents=True)
    (public / "index.html").write_bytes(INDEX_HTML)
    (public / "assets" / "css" / "style.css").write_text("body { color: #333; }")
    (tmp_path / "secret.txt").write_text("do not serve")
    return public


@pytest.fixture
def storage(tmp_path: Path) -> Path:
    return tmp_path / "data" / "rsvps.json"


@pytest.fixture
def site(public_dir: Path, storage: Path) -> SiteContext:
    return SiteContext(port=0, host="127.0.0.1", public_dir=public_dir, rsvp_storage=storage)


@pytest.fixture
def app(site):
    app = create_app(site)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


# =============================================================================
# Live Server Fixture
# =============================================================================

@pytest.fixture
def live_server(app):
    """Run the app on a real socket in a background thread; yields (host, port)."""
    server = make_server("127.0.0.1", 0, app, threaded=True)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield "127.0.0.1", server.server_port
    server.shutdown()
    server.server_close()
    thread.join(timeout=5)
