#!/usr/bin/env python3
"""
Production server launcher for Is It Safe?.

Usage:
    python scripts/run_prod.py

Features:
    - Uses Waitress WSGI server
    - No debug mode
    - Runs the hourly alert monitor
    - Warns about missing credentials
"""

import logging
import os
import sys

project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)
os.chdir(project_root)

from dotenv import load_dotenv

load_dotenv(os.path.join(project_root, '.env'))

os.environ['APP_ENV'] = 'prod'
os.environ['FLASK_ENV'] = 'production'


def validate_config():
    """Report credentials the optional sources need."""
    missing = [name for name in ('ACLED_USERNAME', 'ACLED_PASSWORD', 'BUTTONDOWN_API_KEY')
               if not os.environ.get(name)]
    if missing:
        print(f"\n  WARNING: not set: {', '.join(missing)}")
        print("  ACLED data will come from fallback only and /api/subscribe will fail.\n")


def main():
    """Main entry point for production server."""
    logging.basicConfig(
        level=os.environ.get('LOG_LEVEL', 'INFO').upper(),
        format='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
    )
    validate_config()

    from waitress import serve

    from app import create_app
    from travel_safety.analytics import AlertMonitor
    from travel_safety.container import build_services
    from travel_safety.paths import ensure_dirs_exist

    ensure_dirs_exist()
    services = build_services()
    settings = services.settings
    app = create_app(services)

    monitor = AlertMonitor(services.analytics, interval_seconds=settings.alert_interval_seconds)
    monitor.start()

    print("=" * 60)
    print("  Is It Safe? - PRODUCTION MODE")
    print("=" * 60)
    print(f"\n  Server: http://{settings.host}:{settings.port}")
    print("  WSGI: Waitress")
    print("  Debug: OFF")
    print("\n  Press Ctrl+C to stop the server")
    print("=" * 60)

    try:
        serve(app, host=settings.host, port=settings.port, threads=8)
    finally:
        monitor.stop()


if __name__ == '__main__':
    main()
