"""
Analytics Event Log

Append-only JSON-lines event log, one file per UTC day (logs/YYYY-MM-DD.log),
plus threshold alerts evaluated over recent entries.

An AlertMonitor daemon thread re-evaluates the alerts hourly. It only reads
the logs and never mutates shared state.
"""

import json
import logging
import threading
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_RECENT_DAYS = 7

TOOL_ERROR_THRESHOLD = 5
PARSE_ERROR_THRESHOLD = 3
EMPTY_RESULT_RATE_THRESHOLD = 0.2
SUBSCRIBE_MIN_SAMPLE = 5
SUBSCRIBE_FAILURE_RATE_THRESHOLD = 0.1


@dataclass
class Alert:
    id: str
    level: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class AnalyticsLog:
    """Daily JSON-lines event files under a logs directory."""

    def __init__(self, logs_dir: Path):
        self.logs_dir = Path(logs_dir)

    def _file_for(self, day: datetime) -> Path:
        return self.logs_dir / f"{day.strftime('%Y-%m-%d')}.log"

    def log(self, event: str, **data: Any) -> Dict[str, Any]:
        """Append one event. Raises OSError if the log cannot be written."""
        now = datetime.now(timezone.utc)
        entry = {'timestamp': now.isoformat(), 'event': event}
        entry.update(data)

        line = json.dumps(entry, default=str, ensure_ascii=False)
        logger.info(line)

        self.logs_dir.mkdir(parents=True, exist_ok=True)
        with open(self._file_for(now), 'a', encoding='utf-8') as f:
            f.write(line + '\n')
        return entry

    def recent(self, days: int = DEFAULT_RECENT_DAYS, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
        """Entries from the last `days` daily files, newest first."""
        now = now or datetime.now(timezone.utc)
        entries: List[Dict[str, Any]] = []

        for offset in range(days):
            log_file = self._file_for(now - timedelta(days=offset))
            if not log_file.exists():
                continue
            try:
                lines = log_file.read_text(encoding='utf-8').splitlines()
            except OSError as e:
                logger.error(f"Failed to read analytics log {log_file}: {e}")
                continue
            for line in lines:
                line = line.strip()
                if not line:
                    continue
                try:
                    entry = json.loads(line)
                except json.JSONDecodeError:
                    continue
                if isinstance(entry, dict):
                    entries.append(entry)

        entries.sort(key=lambda e: str(e.get('timestamp', '')), reverse=True)
        return entries


def evaluate_alerts(logs: List[Dict[str, Any]], now: Optional[datetime] = None) -> List[Alert]:
    """Apply the fixed alert thresholds to a list of log entries."""
    now = now or datetime.now(timezone.utc)
    day_ago = now - timedelta(days=1)
    week_ago = now - timedelta(days=7)

    def count(event: str, since: datetime) -> int:
        total = 0
        for entry in logs:
            if entry.get('event') != event:
                continue
            ts = _parse_timestamp(entry.get('timestamp'))
            if ts is not None and ts >= since:
                total += 1
        return total

    alerts: List[Alert] = []

    tool_errors = count('tool_call_error', day_ago)
    if tool_errors > TOOL_ERROR_THRESHOLD:
        alerts.append(Alert(
            id='tool-errors',
            level='critical',
            message=f'Tool failures in last 24h: {tool_errors} (>{TOOL_ERROR_THRESHOLD} threshold)',
        ))

    parse_errors = count('parameter_parse_error', week_ago)
    if parse_errors > PARSE_ERROR_THRESHOLD:
        alerts.append(Alert(
            id='parse-errors',
            level='warning',
            message=f'Parameter parse errors in last 7d: {parse_errors} (>{PARSE_ERROR_THRESHOLD} threshold)',
        ))

    successes = count('tool_call_success', week_ago)
    empties = count('tool_call_empty', week_ago)
    total_calls = successes + empties
    if total_calls > 0 and empties / total_calls > EMPTY_RESULT_RATE_THRESHOLD:
        alerts.append(Alert(
            id='empty-results',
            level='warning',
            message=f'Empty result rate {empties / total_calls * 100:.1f}% (>20% threshold)',
        ))

    crashes = count('widget_crash', day_ago)
    if crashes > 0:
        alerts.append(Alert(
            id='widget-crash',
            level='critical',
            message=f'Widget crashes in last 24h: {crashes} (Fix immediately)',
        ))

    sub_ok = count('widget_notify_me_subscribe', week_ago)
    sub_failed = count('widget_notify_me_subscribe_error', week_ago)
    sub_total = sub_ok + sub_failed
    failure_rate = sub_failed / sub_total if sub_total else 0
    if sub_total >= SUBSCRIBE_MIN_SAMPLE and failure_rate > SUBSCRIBE_FAILURE_RATE_THRESHOLD:
        alerts.append(Alert(
            id='buttondown-failures',
            level='warning',
            message=(f'Buttondown failure rate {failure_rate * 100:.1f}% over last 7d '
                     f'({sub_failed}/{sub_total})'),
        ))

    return alerts


class AlertMonitor:
    """Background thread that logs active alerts every `interval_seconds`."""

    def __init__(self, analytics: AnalyticsLog, interval_seconds: int = 3600):
        self.analytics = analytics
        self.interval_seconds = interval_seconds
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def run_once(self) -> List[Alert]:
        alerts = evaluate_alerts(self.analytics.recent(DEFAULT_RECENT_DAYS))
        for alert in alerts:
            logger.warning(f"[ALERT] [{alert.level.upper()}] {alert.message}")
        return alerts

    def _loop(self):
        while not self._stop.wait(self.interval_seconds):
            try:
                self.run_once()
            except OSError as e:
                logger.error(f"Alert sweep failed: {e}")

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name='alert-monitor', daemon=True)
        self._thread.start()
        logger.info(f"Alert monitor started (every {self.interval_seconds}s)")

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=5)
            self._thread = None
