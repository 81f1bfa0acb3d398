"""
Runtime watchdog for the API process.

Writes request timings, slow calls and unhandled exceptions to a rotating
logs/runtime.log (WARNING and above is echoed to stderr) and keeps request
counters for /api/watchdog/stats.
"""

import functools
import json
import logging
import sys
import threading
import time
import traceback
from datetime import datetime
from logging.handlers import RotatingFileHandler
from typing import Callable, Dict, List, Optional

from travel_safety.paths import get_logs_dir, get_runtime_log_file

MAX_LOG_SIZE = 10 * 1024 * 1024
BACKUP_COUNT = 5
SLOW_REQUEST_SECONDS = 5.0

LOG_FORMAT = '%(asctime)s | %(levelname)-8s | %(message)s'


def _build_logger(log_file: str) -> logging.Logger:
    runtime_logger = logging.getLogger('travel_safety.runtime')
    runtime_logger.setLevel(logging.DEBUG)
    runtime_logger.propagate = False
    runtime_logger.handlers = []
    formatter = logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')

    try:
        get_logs_dir().mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(log_file, maxBytes=MAX_LOG_SIZE,
                                           backupCount=BACKUP_COUNT, encoding='utf-8')
        file_handler.setFormatter(formatter)
        runtime_logger.addHandler(file_handler)
    except OSError as e:
        print(f"Warning: Could not open runtime log {log_file}: {e}", file=sys.stderr)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.WARNING)
    stderr_handler.setFormatter(formatter)
    runtime_logger.addHandler(stderr_handler)
    return runtime_logger


class WatchdogLogger:
    """Request counters plus the runtime log."""

    def __init__(self, log_file: Optional[str] = None):
        self.log_file = log_file or str(get_runtime_log_file())
        self.logger = _build_logger(self.log_file)
        self._lock = threading.Lock()
        self._stats = {'request_count': 0, 'error_count': 0, 'slow_requests': 0, 'total_response_time': 0.0}

    def log_event(self, event_type: str, message: str, level: str = 'INFO',
                  extra_data: Optional[Dict] = None):
        line = f"[{event_type}] {message}"
        if extra_data:
            line += f" | Data: {json.dumps(extra_data, default=str)}"
        self.logger.log(getattr(logging, level.upper(), logging.INFO), line)

    def log_exception(self, exc_type: str, exc_value: str, exc_traceback: List[str],
                      context: str = 'EXCEPTION', extra_data: Optional[Dict] = None):
        with self._lock:
            self._stats['error_count'] += 1
        details = ''.join(exc_traceback) or 'No traceback available'
        line = f"[{context}] {exc_type}: {exc_value}\n{details}"
        if extra_data:
            line += f"\nExtra Data: {json.dumps(extra_data, default=str)}"
        self.logger.error(line)

    def log_request_start(self, method: str, path: str, client_ip: Optional[str] = None,
                          user_agent: Optional[str] = None):
        with self._lock:
            self._stats['request_count'] += 1
        extra = {key: value for key, value in (('client_ip', client_ip), ('user_agent', (user_agent or '')[:100]))
                 if value}
        self.log_event('REQUEST_START', f"{method} {path}", 'DEBUG', extra or None)

    def log_request_end(self, method: str, path: str, status_code: int, duration: Optional[float],
                        response_size: Optional[int] = None):
        """Record one finished request. `duration` is None when the start hook never ran."""
        slow = duration is not None and duration > SLOW_REQUEST_SECONDS
        if duration is not None:
            with self._lock:
                self._stats['total_response_time'] += duration
                if slow:
                    self._stats['slow_requests'] += 1

        if status_code >= 500:
            level = 'ERROR'
        elif status_code >= 400 or slow:
            level = 'WARNING'
        else:
            level = 'DEBUG'

        elapsed = f"{duration * 1000:.0f}ms" if duration is not None else 'unknown'
        extra = {'status_code': status_code}
        if response_size:
            extra['response_size'] = response_size
        if slow:
            extra['slow_threshold_s'] = SLOW_REQUEST_SECONDS
        self.log_event('REQUEST_END', f"{method} {path} -> {status_code} ({elapsed})", level, extra)

    def get_performance_stats(self) -> Dict:
        with self._lock:
            stats = dict(self._stats)
        count = stats['request_count']
        stats['avg_response_time_ms'] = round(stats['total_response_time'] / count * 1000, 2) if count else 0
        return stats

    def log_startup(self, app_name: str):
        self.logger.info(f"[STARTUP] {app_name} at {datetime.now().isoformat()} "
                         f"(Python {sys.version.split()[0]}, log {self.log_file})")

    def log_shutdown(self, app_name: str):
        self.logger.info(f"[SHUTDOWN] {app_name} at {datetime.now().isoformat()} "
                         f"| Stats: {json.dumps(self.get_performance_stats())}")


_watchdog: Optional[WatchdogLogger] = None
_watchdog_lock = threading.Lock()


def get_watchdog() -> WatchdogLogger:
    """Return the process-wide watchdog, creating it on first use."""
    global _watchdog
    with _watchdog_lock:
        if _watchdog is None:
            _watchdog = WatchdogLogger()
        return _watchdog


def monitor_function(func: Callable = None, *, warn_slow: float = None):
    """Log exceptions (re-raised) and, with `warn_slow`, calls slower than that many seconds."""
    def decorator(fn):
        name = f"{fn.__module__}.{fn.__name__}"

        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            started = time.time()
            try:
                result = fn(*args, **kwargs)
            except Exception as e:
                get_watchdog().log_exception(
                    exc_type=type(e).__name__,
                    exc_value=str(e),
                    exc_traceback=traceback.format_exception(type(e), e, e.__traceback__),
                    context=f'FUNCTION_ERROR:{name}',
                )
                raise
            elapsed = time.time() - started
            if warn_slow and elapsed > warn_slow:
                get_watchdog().log_event('SLOW_FUNCTION', f"{name} took {elapsed:.2f}s (threshold {warn_slow}s)",
                                         'WARNING')
            return result

        return wrapper

    if func is not None:
        return decorator(func)
    return decorator
