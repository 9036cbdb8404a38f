import logging
import platform
import time

from flask import Flask, request

from .config import config_check
from .constants import SERVICE_NAME, SERVICE_VERSION
from .pipeline import build_error_result, process_release, utc_timestamp

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    'Access-Control-Allow-Credentials': 'true',
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Methods': 'GET,OPTIONS,PATCH,DELETE,POST,PUT',
    'Access-Control-Allow-Headers': (
        'X-CSRF-Token, X-Requested-With, Accept, Accept-Version, Content-Length, '
        'Content-MD5, Content-Type, Date, X-Api-Version'
    ),
}

ALL_METHODS = ['GET', 'POST', 'PUT', 'PATCH', 'DELETE', 'OPTIONS']


def method_not_allowed(allowed):
    return {
        'error': 'Method not allowed',
        'message': f'This endpoint only accepts {allowed} requests',
    }, 405


def create_app(environ=None):
    """`environ` permite injetar o ambiente nos testes; None usa os.environ."""
    app = Flask(__name__)
    started_at = time.time()

    @app.after_request
    def add_cors_headers(response):
        for header, value in CORS_HEADERS.items():
            response.headers[header] = value
        return response

    @app.route('/', methods=['GET'])
    def index():
        return {
            'name': SERVICE_NAME,
            'version': SERVICE_VERSION,
            'endpoints': {
                'health': '/health',
                'webhook': '/jira-release',
            },
            'status': 'running',
            'timestamp': utc_timestamp(),
        }, 200

    @app.route('/health', methods=ALL_METHODS)
    def health():
        if request.method == 'OPTIONS':
            return '', 200
        if request.method != 'GET':
            return method_not_allowed('GET')
        return {
            'status': 'OK',
            'timestamp': utc_timestamp(),
            'environment': {
                'python_version': platform.python_version(),
                'platform': platform.system().lower(),
                'uptime': round(time.time() - started_at, 3),
            },
            'config_check': config_check(environ),
        }, 200

    @app.route('/jira-release', methods=ALL_METHODS)
    def jira_release():
        if request.method == 'OPTIONS':
            return '', 200
        if request.method != 'POST':
            return method_not_allowed('POST')

        payload = request.get_json(silent=True)
        try:
            return process_release(payload, environ), 200
        except Exception as e:
            body, status = build_error_result(e)
            if status >= 500:
                logger.error(f"Webhook processing error: {e}")
            else:
                logger.info(f"Payload rejeitado: {e}")
            return body, status

    @app.errorhandler(404)
    def not_found(error):
        return {
            'error': 'Not found',
            'message': f'Route {request.method} {request.path} not found',
            'timestamp': utc_timestamp(),
        }, 404

    return app
