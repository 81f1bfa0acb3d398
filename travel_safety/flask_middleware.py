"""
Flask Middleware for Watchdog Integration

Provides request/response logging, permissive CORS for the widget API and
JSON error handling for /api paths.
"""

import time
import traceback

from flask import g, jsonify, request
from werkzeug.exceptions import HTTPException

from travel_safety.watchdog import get_watchdog

API_PREFIX = '/api'

CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Methods': 'GET, POST, OPTIONS',
    'Access-Control-Allow-Headers': 'content-type',
}


def _is_api_request() -> bool:
    return request.path.startswith(API_PREFIX)


class WatchdogMiddleware:
    """Registers monitoring hooks, CORS handling and JSON error handlers on a Flask app."""

    def __init__(self, app):
        self.app = app
        self.watchdog = get_watchdog()
        self._register_hooks(app)
        self._register_error_handlers(app)
        self.watchdog.log_startup('Is It Safe API')

    def _register_hooks(self, app):
        watchdog = self.watchdog

        @app.before_request
        def before_request_handler():
            g.watchdog_start_time = time.time()
            watchdog.log_request_start(
                method=request.method,
                path=request.path,
                client_ip=request.remote_addr,
                user_agent=request.headers.get('User-Agent', '')
            )

            # Preflight: answer every /api path with an empty 204
            if request.method == 'OPTIONS' and _is_api_request():
                return '', 204

        @app.after_request
        def after_request_handler(response):
            try:
                if _is_api_request():
                    response.headers.update(CORS_HEADERS)
                    response.headers['Cache-Control'] = 'no-store'
                started = g.get('watchdog_start_time')
                watchdog.log_request_end(
                    method=request.method,
                    path=request.path,
                    status_code=response.status_code,
                    duration=time.time() - started if started else None,
                    response_size=response.content_length
                )
            finally:
                g.watchdog_start_time = None
            return response

        @app.teardown_request
        def teardown_request_handler(exception):
            g.watchdog_start_time = None

    def _register_error_handlers(self, app):
        watchdog = self.watchdog

        @app.errorhandler(HTTPException)
        def handle_http_exception(e):
            watchdog.log_event(
                f'HTTP_{e.code}',
                f"{e.name}: {request.path}",
                'WARNING',
                {'method': request.method}
            )
            if _is_api_request():
                return jsonify({'error': e.name, 'message': e.description}), e.code
            return e

        @app.errorhandler(Exception)
        def handle_exception(e):
            watchdog.log_exception(
                exc_type=type(e).__name__,
                exc_value=str(e),
                exc_traceback=traceback.format_exception(type(e), e, e.__traceback__),
                context='FLASK_UNHANDLED_EXCEPTION',
                extra_data={'path': request.path, 'method': request.method}
            )
            if _is_api_request():
                return jsonify({'error': 'Internal server error'}), 500
            return "An unexpected error occurred. Please try again.", 500


def init_watchdog(app):
    """
    Initialize watchdog middleware for a Flask app.

    Usage:
        from travel_safety.flask_middleware import init_watchdog
        app = Flask(__name__)
        init_watchdog(app)
    """
    return WatchdogMiddleware(app)
