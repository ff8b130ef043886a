"""
Tests for the HTTP service.
"""

import os

import pytest

from inmatex.config import Config
from inmatex.server import create_app, create_app_from_env
from tests.test_helpers import FakeSession


@pytest.fixture
def session(results_html, detail_html):
    return FakeSession(results_html, [detail_html, detail_html])


@pytest.fixture
def client(sample_config, session):
    """Create a test client with canned pages."""
    app = create_app(sample_config, lambda cfg: session)
    app.config["TESTING"] = True
    return app.test_client()


@pytest.fixture
def secured_client(session):
    cfg = Config(server={"auth_token": "s3cret"})
    app = create_app(cfg, lambda cfg: session)
    return app.test_client()


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}


def test_scrape(client, session):
    """Test a successful search."""
    response = client.post("/scrape", json={"name": "DOE", "mode": "In Custody"})
    data = response.get_json()

    assert response.status_code == 200
    assert data["found"] is True
    assert data["query"] == "DOE"
    assert data["mode"] == "In Custody"
    assert data["count"] == 2
    assert data["inmates"][0]["charges"][0]["warrant"] == "24-WD-001"
    assert ("select", "qry", "In Custody") in session.calls


def test_scrape_default_mode(client, session):
    response = client.post("/scrape", json={"name": "=DOE"})

    assert response.get_json()["mode"] == "Inquiry"
    assert ("fill", "inmate_name", "DOE") in session.calls


@pytest.mark.parametrize("body", [{}, {"name": ""}, {"name": "  "}, {"mode": "Inquiry"}, [1, 2]])
def test_scrape_missing_name(client, body):
    """Test that a missing name is rejected."""
    response = client.post("/scrape", json=body)

    assert response.status_code == 400
    assert response.get_json() == {"error": "name required"}


def test_scrape_invalid_json(client):
    response = client.post("/scrape", data="not json", content_type="application/json")

    assert response.status_code == 400
    assert response.get_json() == {"error": "name required"}


def test_scrape_not_found(sample_config, no_results_html):
    app = create_app(sample_config, lambda cfg: FakeSession(no_results_html))

    response = app.test_client().post("/scrape", json={"name": "NOBODY"})

    assert response.status_code == 200
    assert response.get_json()["found"] is False


def test_scrape_navigation_error(sample_config, results_html):
    """Test that navigation failures are reported in the body."""
    app = create_app(sample_config, lambda cfg: FakeSession(results_html, fail_on="open"))

    response = app.test_client().post("/scrape", json={"name": "DOE"})
    data = response.get_json()

    assert response.status_code == 200
    assert data["found"] is False
    assert data["error"] == "open failed"


def test_scrape_requires_token(secured_client):
    """Test shared-secret authentication."""
    response = secured_client.post("/scrape", json={"name": "DOE"})
    assert response.status_code == 401
    assert response.get_json() == {"error": "unauthorized"}

    response = secured_client.post("/scrape", json={"name": "DOE"}, headers={"x-api-key": "wrong"})
    assert response.status_code == 401

    response = secured_client.post("/scrape", json={"name": "DOE"}, headers={"x-api-key": "s3cret"})
    assert response.status_code == 200


def test_health_is_open(secured_client):
    assert secured_client.get("/health").status_code == 200


def test_unknown_route(client):
    assert client.get("/nowhere").status_code == 404


def test_create_app_from_env(temp_dir, monkeypatch):
    """Test building the WSGI app from a config file and environment."""
    config_path = os.path.join(temp_dir, "config.yaml")
    with open(config_path, "w") as f:
        f.write("site:\n  max_details: 2\n")
    monkeypatch.setenv("INMATEX_CONFIG", config_path)
    monkeypatch.setenv("INMATEX_AUTH_TOKEN", "s3cret")

    app = create_app_from_env()
    cfg = app.config["INMATEX_CONFIG"]

    assert cfg.site.max_details == 2
    assert cfg.server.auth_token == "s3cret"
    assert app.test_client().post("/scrape", json={"name": "DOE"}).status_code == 401
    assert app.test_client().get("/health").status_code == 200
