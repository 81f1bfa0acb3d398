"""
Aggregation Cache

Holds the most recent record fetched from each upstream per location and
decides, per source, where a record comes from.

Precedence with prefer_cache_over_live=True (default):
    memory (prior live fetch) -> static fallback -> live fetch -> unavailable
With prefer_cache_over_live=False:
    memory -> live fetch -> static fallback -> unavailable

Live results are stored, including terminal Unavailable outcomes, so a
failing upstream is not hammered until the entry expires.

Backing stores:
- MemoryStore: TTL-aware dict (tests, single process)
- SnapshotStore: MemoryStore plus a periodic SQLite snapshot (production)
"""

import json
import logging
import sqlite3
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, Optional, Protocol, Tuple

from pydantic import ValidationError

from travel_safety.fallback_data import lookup_fallback
from travel_safety.models import (
    AdvisoryRecord,
    ConflictRecord,
    Location,
    Record,
    SecondaryAdvisoryRecord,
    SentimentRecord,
    Unavailable,
)
from travel_safety.providers.common import ADVISORY_SOURCES, ALL_SOURCES

logger = logging.getLogger(__name__)

DEFAULT_TTL_HOURS = 6

RECORD_TYPES = {
    cls.__name__: cls
    for cls in (AdvisoryRecord, SecondaryAdvisoryRecord, ConflictRecord, SentimentRecord, Unavailable)
}


class CacheStore(Protocol):
    def get(self, key: str) -> Optional[Record]:
        ...

    def put(self, key: str, value: Record) -> None:
        ...


class MemoryStore:
    """
    In-memory TTL store.

    Usage:
        store = MemoryStore(ttl_seconds=3600)
        store.put('gdelt:paris', record)
        store.get('gdelt:paris')  # None once expired
    """

    def __init__(self, ttl_seconds: float = DEFAULT_TTL_HOURS * 3600,
                 clock: Callable[[], float] = time.time):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, Tuple[Record, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Record]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    def put(self, key: str, value: Record) -> None:
        with self._lock:
            self._entries[key] = (value, self._clock() + self.ttl_seconds)

    def items(self) -> Iterable[Tuple[str, Record, float]]:
        with self._lock:
            return [(k, v, exp) for k, (v, exp) in self._entries.items()]

    def load(self, key: str, value: Record, expires_at: float) -> None:
        with self._lock:
            self._entries[key] = (value, expires_at)

    def clear(self) -> int:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def _to_iso(timestamp: float) -> str:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).isoformat()


def _from_iso(value: str) -> float:
    return datetime.fromisoformat(value).timestamp()


class SnapshotStore(MemoryStore):
    """
    MemoryStore that periodically snapshots itself to SQLite.

    The snapshot is loaded once at startup so a restart keeps warm entries.
    Writes happen on `put` when the snapshot interval has elapsed, and on
    an explicit `snapshot()` call.
    """

    def __init__(self, db_path: str, ttl_seconds: float = DEFAULT_TTL_HOURS * 3600,
                 snapshot_interval: float = 300, clock: Callable[[], float] = time.time):
        super().__init__(ttl_seconds=ttl_seconds, clock=clock)
        self.db_path = db_path
        self.snapshot_interval = snapshot_interval
        self._last_snapshot = clock()
        self._init_db()
        self._restore()

    def _get_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self):
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute('''
                CREATE TABLE IF NOT EXISTS aggregation_cache (
                    key TEXT PRIMARY KEY,
                    record_type TEXT NOT NULL,
                    payload_json TEXT NOT NULL,
                    expires_at TEXT NOT NULL
                )
            ''')
            conn.commit()
        finally:
            conn.close()

    def _restore(self):
        now = self._clock()
        restored = 0
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute('SELECT key, record_type, payload_json, expires_at FROM aggregation_cache')
            for row in cursor.fetchall():
                model = RECORD_TYPES.get(row['record_type'])
                if model is None:
                    continue
                try:
                    expires_at = _from_iso(row['expires_at'])
                    if expires_at <= now:
                        continue
                    value = model.model_validate(json.loads(row['payload_json']))
                except (ValueError, ValidationError) as e:
                    logger.warning(f"Skipping unreadable snapshot entry {row['key']}: {e}")
                    continue
                self.load(row['key'], value, expires_at)
                restored += 1
        finally:
            conn.close()
        if restored:
            logger.info(f"Restored {restored} aggregation cache entries from snapshot")

    def put(self, key: str, value: Record) -> None:
        super().put(key, value)
        if self._clock() - self._last_snapshot >= self.snapshot_interval:
            self.snapshot()

    def snapshot(self) -> int:
        """Replace the on-disk snapshot with the live, unexpired entries."""
        now = self._clock()
        rows = [
            (key, type(value).__name__, value.model_dump_json(), _to_iso(expires_at))
            for key, value, expires_at in self.items()
            if expires_at > now
        ]
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute('DELETE FROM aggregation_cache')
            cursor.executemany('''
                INSERT INTO aggregation_cache (key, record_type, payload_json, expires_at)
                VALUES (?, ?, ?, ?)
            ''', rows)
            conn.commit()
        except sqlite3.Error as e:
            logger.error(f"Aggregation cache snapshot failed: {e}")
            return 0
        finally:
            conn.close()
        self._last_snapshot = now
        return len(rows)


@dataclass
class AggregationResult:
    records: Dict[str, Record] = field(default_factory=dict)
    unavailable: Dict[str, Unavailable] = field(default_factory=dict)
    provenance: Dict[str, str] = field(default_factory=dict)

    def get(self, source: str) -> Optional[Record]:
        return self.records.get(source)


class AggregationCache:
    """Per-source record lookup with fallback precedence."""

    def __init__(self, providers: Dict[str, object], store: Optional[CacheStore] = None,
                 prefer_cache_over_live: bool = True,
                 fallback: Callable[..., Optional[Record]] = lookup_fallback):
        self.providers = providers
        self.store = store if store is not None else MemoryStore()
        self.prefer_cache_over_live = prefer_cache_over_live
        self.fallback = fallback

    @staticmethod
    def cache_key(source: str, location: Location) -> str:
        key = location.country_key if source in ADVISORY_SOURCES else location.key
        return f'{source}:{key}'

    def _fallback(self, source: str, location: Location) -> Optional[Record]:
        for key in (location.key, location.country_key):
            record = self.fallback(source, key, location.name)
            if record is not None:
                return record
        return None

    def _live(self, source: str, location: Location) -> Record:
        provider = self.providers.get(source)
        if provider is None:
            return Unavailable(source=source, reason='no provider')
        try:
            return provider.fetch(location)
        except Exception as e:
            logger.error(f"{source} adapter failed for {location.key}: {e}")
            return Unavailable(source=source, reason=str(e))

    def resolve_source(self, source: str, location: Location) -> Tuple[Record, str]:
        """Return (record or Unavailable, provenance) for one source."""
        key = self.cache_key(source, location)
        cached = self.store.get(key)
        if cached is not None and not isinstance(cached, Unavailable):
            return cached, 'cache'

        if self.prefer_cache_over_live:
            record = self._fallback(source, location)
            if record is not None:
                return record, 'fallback'

        if cached is None:
            result = self._live(source, location)
            self.store.put(key, result)
            origin = 'live'
        else:
            result = cached
            origin = 'cache'

        if isinstance(result, Unavailable) and not self.prefer_cache_over_live:
            record = self._fallback(source, location)
            if record is not None:
                return record, 'fallback'

        return result, origin

    def get(self, location: Location, sources: Optional[Iterable[str]] = None) -> AggregationResult:
        result = AggregationResult()
        for source in (sources if sources is not None else ALL_SOURCES):
            record, origin = self.resolve_source(source, location)
            if isinstance(record, Unavailable):
                result.unavailable[source] = record
            else:
                result.records[source] = record
            result.provenance[source] = origin
        return result
