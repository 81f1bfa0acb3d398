import logging

from flask import Flask, jsonify

from travel_safety import __version__
from travel_safety.container import SafetyServices, build_services
from travel_safety.flask_middleware import init_watchdog
from travel_safety.routes import EXTENSION_KEY, api_bp
from travel_safety.watchdog import get_watchdog

logger = logging.getLogger(__name__)


def create_app(services: SafetyServices = None) -> Flask:
    """
    Build the Flask app.

    Pass a prebuilt SafetyServices to share it with the MCP server or to
    inject test doubles; otherwise one is built from the environment.
    """
    app = Flask(__name__)
    app.json.sort_keys = False

    if services is None:
        services = build_services()
    app.extensions[EXTENSION_KEY] = services

    init_watchdog(app)

    app.register_blueprint(api_bp, url_prefix='/api')

    @app.route('/health', methods=['GET'])
    def health():
        return jsonify({'status': 'ok', 'version': __version__})

    @app.route('/api/watchdog/stats', methods=['GET'])
    def watchdog_stats():
        """Request counters from the runtime watchdog."""
        return jsonify({'success': True, 'stats': get_watchdog().get_performance_stats()})

    logger.info(f"Is It Safe API initialized (prefer_cache_over_live={services.settings.prefer_cache_over_live})")
    return app
