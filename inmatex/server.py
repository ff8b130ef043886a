"""
HTTP service for Inmate Extract.

POST /scrape   {"name": "...", "mode": "..."} -> scrape result
GET  /health   liveness check, never authenticated

``inmatex-server`` runs Flask's built-in development server, which is not
meant for production. There, run the app under a WSGI server:

    gunicorn --workers 2 --timeout 300 "inmatex.server:create_app_from_env()"

``INMATEX_CONFIG`` names the configuration file in that case.
"""

import argparse
import hmac
import os
import sys
from typing import Callable, Optional

from flask import Flask, jsonify, request

from inmatex.api import scrape
from inmatex.config import Config, apply_env_overrides, load_config
from inmatex.log import configure_logging, get_logger
from inmatex.model import InputError
from inmatex.web import PageSession, create_session

logger = get_logger(__name__)

OPEN_ENDPOINTS = {"health"}


def create_app(
    cfg: Optional[Config] = None,
    session_factory: Optional[Callable[[Config], PageSession]] = None,
) -> Flask:
    """
    Create the Flask application.

    Args:
        cfg: Configuration
        session_factory: Builds page sessions, defaults to the configured backend

    Returns:
        Flask application
    """
    cfg = cfg or Config()
    session_factory = session_factory or create_session

    app = Flask(__name__)
    app.config["INMATEX_CONFIG"] = cfg

    @app.before_request
    def check_auth():
        token = cfg.server.auth_token
        if not token or request.endpoint in OPEN_ENDPOINTS:
            return None

        supplied = request.headers.get(cfg.server.auth_header, "")
        if not hmac.compare_digest(supplied.encode(), token.encode()):
            logger.warning(f"Rejected request to {request.path}: bad or missing {cfg.server.auth_header}")
            return jsonify({"error": "unauthorized"}), 401
        return None

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({"status": "ok"})

    @app.route("/scrape", methods=["POST"])
    def scrape_route():
        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            body = {}

        try:
            result = scrape(body.get("name"), cfg, body.get("mode"), session_factory)
        except InputError as e:
            return jsonify({"error": str(e)}), 400

        return jsonify(result.to_dict())

    return app


def create_app_from_env() -> Flask:
    """
    Create the application for a WSGI server.

    Configuration is loaded from ``INMATEX_CONFIG`` (or the default
    locations) with environment overrides applied.

    Returns:
        Flask application
    """
    cfg = apply_env_overrides(load_config(os.environ.get("INMATEX_CONFIG")))
    configure_logging(cfg)
    return create_app(cfg)


def main() -> int:
    """
    Main entry point.

    Returns:
        Exit code
    """
    parser = argparse.ArgumentParser(description="Inmate Extract HTTP service")
    parser.add_argument("--config", help="Path to configuration file")
    parser.add_argument("--host", help="Host to bind")
    parser.add_argument("--port", type=int, help="Port to listen on")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], help="Logging level")

    args = parser.parse_args()
    return serve(load_config(args.config), args.host, args.port, args.log_level)


def serve(cfg: Config, host: Optional[str] = None, port: Optional[int] = None,
          log_level: Optional[str] = None) -> int:
    """
    Run the HTTP service on Flask's development server until interrupted.

    Args:
        cfg: Configuration
        host: Host overriding the configured one
        port: Port overriding the configured one
        log_level: Level overriding the configured one

    Returns:
        Exit code
    """
    apply_env_overrides(cfg)
    configure_logging(cfg, log_level)

    host = host or cfg.server.host
    port = port or cfg.server.port

    try:
        app = create_app(cfg)
        logger.info(f"Inmate search service running on {host}:{port}")
        app.run(host=host, port=port)
        return 0
    except Exception as e:
        logger.exception(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
