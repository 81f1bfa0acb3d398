#!/usr/bin/env python3
"""
Is It Safe? - Entry Point

Starts the REST API on the Werkzeug development server (threaded) together
with the hourly alert monitor.
"""

import logging
import os
import sys


def get_runtime_root() -> str:
    return os.path.dirname(os.path.abspath(__file__))


def load_environment():
    from dotenv import load_dotenv

    env_file = os.path.join(get_runtime_root(), ".env")
    if os.path.exists(env_file):
        load_dotenv(env_file)
        print(f"Loaded configuration from {env_file}")
    else:
        print("No .env file found, using environment defaults")


def ensure_directories():
    from travel_safety.paths import ensure_dirs_exist
    ensure_dirs_exist()
    print("Runtime directories initialized")


def main():
    load_environment()
    ensure_directories()

    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        stream=sys.stdout,
    )

    # Import after env/dirs are set
    from app import create_app
    from travel_safety.analytics import AlertMonitor
    from travel_safety.container import build_services
    from travel_safety.watchdog import get_watchdog

    services = build_services()
    settings = services.settings
    app = create_app(services)

    monitor = AlertMonitor(services.analytics, interval_seconds=settings.alert_interval_seconds)
    monitor.start()

    print("=" * 60)
    print("  Is It Safe? - Travel Safety API")
    print("=" * 60)
    print(f"\n  Starting server at http://{settings.host}:{settings.port}/")
    print("  Press Ctrl+C to stop the server\n")
    print("=" * 60)

    try:
        app.run(host=settings.host, port=settings.port, debug=False, use_reloader=False, threaded=True)
    finally:
        monitor.stop()
        get_watchdog().log_shutdown('Is It Safe API')


if __name__ == "__main__":
    main()
