#!/usr/bin/env python3
"""
Catalog Server - HTTP API for the game catalog.
Serves the fixed in-memory game list with an optional name search.
"""

import argparse
import logging
import sys
import threading
from typing import Optional

from colorama import init, Fore, Style
from dotenv import load_dotenv
from flask import Flask, jsonify, request

from app.config import ConfigError, load_config, setup_logging
from app.models import CatalogDataError
from app.repositories import CatalogRepository
from app.services import CatalogService

init(autoreset=True)

app = Flask(__name__)
app.json.sort_keys = False

server_logger = logging.getLogger('catalog.server')

# Built once and never mutated afterwards; request handlers only read it.
catalog_service: Optional[CatalogService] = None
catalog_lock = threading.Lock()

CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Methods': 'GET,OPTIONS',
    'Access-Control-Allow-Headers': 'Content-Type',
}


def init_catalog(data_file: Optional[str] = None) -> CatalogService:
    """Load the catalog and install the service used by the routes.

    Raises:
        CatalogDataError: If *data_file* cannot be loaded.
    """
    global catalog_service
    service = CatalogService(CatalogRepository(data_file))
    with catalog_lock:
        catalog_service = service
    return service


def get_catalog_service() -> CatalogService:
    """Return the active service, building the default catalog on first use."""
    with catalog_lock:
        service = catalog_service
    if service is None:
        service = init_catalog()
    return service


# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------

@app.before_request
def handle_preflight():
    if request.method == 'OPTIONS':
        return '', 200


@app.after_request
def add_cors_headers(response):
    for name, value in CORS_HEADERS.items():
        response.headers[name] = value
    return response


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@app.route('/api/games', methods=['GET'])
def api_list_games():
    """List games, filtered by the optional ``search`` query parameter."""
    search = request.args.get('search')
    return jsonify(get_catalog_service().list_games(search))


@app.route('/health', methods=['GET'])
def api_health():
    return jsonify(get_catalog_service().health_check())


# ---------------------------------------------------------------------------
# API Documentation — OpenAPI 3.0 + Swagger UI
# ---------------------------------------------------------------------------

@app.route('/api/openapi.json')
def api_openapi_spec():
    """Serve the OpenAPI 3.0 specification as JSON."""
    from openapi_spec import build_spec
    server_url = request.url_root.rstrip('/')
    return jsonify(build_spec(server_url=server_url))


@app.route('/api/docs')
def api_swagger_ui():
    """Serve an interactive Swagger UI for the catalog API."""
    openapi_url = '/api/openapi.json'
    html = f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Game Catalog API Documentation</title>
  <link rel="stylesheet"
        href="https://unpkg.com/swagger-ui-dist@5/swagger-ui.css">
</head>
<body>
  <div id="swagger-ui"></div>
  <script src="https://unpkg.com/swagger-ui-dist@5/swagger-ui-bundle.js"></script>
  <script>
    SwaggerUIBundle({{
      url: "{openapi_url}",
      dom_id: "#swagger-ui",
      presets: [SwaggerUIBundle.presets.apis, SwaggerUIBundle.SwaggerUIStandalonePreset],
      layout: "BaseLayout",
      deepLinking: true,
    }});
  </script>
</body>
</html>"""
    return html, 200, {'Content-Type': 'text/html; charset=utf-8'}


# ---------------------------------------------------------------------------
# Error handlers
# ---------------------------------------------------------------------------

@app.errorhandler(404)
def not_found(e):
    return jsonify({'error': 'Not found'}), 404


@app.errorhandler(405)
def method_not_allowed(e):
    return jsonify({'error': 'Method not allowed'}), 405


@app.errorhandler(500)
def internal_error(e):
    original = getattr(e, 'original_exception', None)
    server_logger.error("Unhandled error on %s %s: %s", request.method, request.path,
                        original or e)
    return jsonify({'error': 'Internal server error'}), 500


def main():
    """Main entry point for the catalog server"""
    load_dotenv()

    parser = argparse.ArgumentParser(description='Game Catalog API server')
    parser.add_argument('--config', '-c', default=None,
                        help='Path to config file (default: catalog_config.json if present)')
    parser.add_argument('--host', help='Interface to bind (default: 127.0.0.1)')
    parser.add_argument('--port', '-p', type=int, help='Port to listen on (default: 5000)')
    parser.add_argument('--data-file', metavar='FILE',
                        help='JSON file to seed the catalog from instead of the built-in games')
    parser.add_argument('--log-level', help='DEBUG, INFO, WARNING, ERROR or CRITICAL')
    args = parser.parse_args()

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"{Fore.RED}Error: {e}")
        sys.exit(1)

    host = args.host if args.host is not None else config['host']
    port = args.port if args.port is not None else config['port']
    setup_logging(args.log_level or config['log_level'])

    try:
        service = init_catalog(args.data_file or config['data_file'])
    except CatalogDataError as e:
        print(f"{Fore.RED}Error: {e}")
        sys.exit(1)

    count = service.list_games()['count']
    base = f"http://{'localhost' if host in ('127.0.0.1', '0.0.0.0') else host}:{port}"
    server_logger.info("Catalog loaded with %d game(s)", count)
    print(f"\n{Fore.CYAN}{Style.BRIGHT}🎮 Game Catalog API is running on {base}")
    print(f"{Fore.YELLOW}Try: {Fore.WHITE}{base}/api/games")
    print(f"{Fore.YELLOW}Try: {Fore.WHITE}{base}/api/games?search=zelda")
    print(f"{Fore.YELLOW}Docs: {Fore.WHITE}{base}/api/docs\n")

    try:
        app.run(host=host, port=port, debug=False)
    except KeyboardInterrupt:
        print(f"\n{Fore.CYAN}🛑 Game Catalog API stopped")


if __name__ == "__main__":
    main()
