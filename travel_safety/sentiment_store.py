"""
Community Sentiment Store

Persists per-location "safe" / "unsafe" vote counters in a JSON file.
Each location carries two buckets:
- seeded: synthetic baseline generated once, never changed afterwards
- real: actual user votes, incremented only by vote()

Displayed totals are the element-wise sum of both buckets.
Uses atomic writes and a backup copy to prevent data loss. The file is
read-modify-written per vote without locking (last writer wins).
"""

import json
import logging
import math
import random
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from travel_safety.fallback_data import BASELINE_SAFETY_SCORES
from travel_safety.models import SentimentCounts, VotePair

logger = logging.getLogger(__name__)

VOTE_CHOICES = ('safe', 'unsafe')
SEED_MIN_VOTES = 500
SEED_MAX_VOTES = 1000
SEED_VARIANCE = 5
SEED_MIN_PERCENT = 5
SEED_MAX_PERCENT = 95


def normalize_key(location: str) -> str:
    return (location or '').strip().lower()


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def safe_percent(safe: int, unsafe: int) -> int:
    total = safe + unsafe
    if total == 0:
        return 50
    return round_half_up(safe / total * 100)


def to_response(counts: SentimentCounts) -> Dict[str, int]:
    """JSON shape served by the sentiment endpoint."""
    total = counts.safe + counts.unsafe
    return {
        'safe': counts.safe,
        'unsafe': counts.unsafe,
        'seededSafe': counts.seeded.safe,
        'seededUnsafe': counts.seeded.unsafe,
        'realSafe': counts.real.safe,
        'realUnsafe': counts.real.unsafe,
        'total': total,
        'safePercent': safe_percent(counts.safe, counts.unsafe),
    }


class SentimentStore:
    """
    JSON-file backed vote counters.

    Usage:
        store = SentimentStore(path, backup_path, rng=random.Random(7))
        store.vote('tokyo', 'safe')
        store.get('tokyo').safe
    """

    def __init__(self, path: Path, backup_path: Optional[Path] = None,
                 rng: Optional[random.Random] = None,
                 baseline: Optional[Dict[str, int]] = None):
        self.path = Path(path)
        self.backup_path = Path(backup_path) if backup_path else self.path.with_suffix('.backup.json')
        self.rng = rng or random.Random()
        self.baseline = BASELINE_SAFETY_SCORES if baseline is None else baseline

    def seed_pair(self, key: str) -> VotePair:
        """Synthetic baseline votes for a location; 0/0 when it has no baseline score."""
        score = self.baseline.get(key)
        if score is None:
            return VotePair()

        total = self.rng.randint(SEED_MIN_VOTES, SEED_MAX_VOTES)
        variance = self.rng.uniform(-SEED_VARIANCE, SEED_VARIANCE)
        percent = max(SEED_MIN_PERCENT, min(SEED_MAX_PERCENT, score + variance))
        safe = round_half_up(total * percent / 100)
        return VotePair(safe=safe, unsafe=total - safe)

    def generate_seed_table(self) -> Dict[str, SentimentCounts]:
        return {key: SentimentCounts(seeded=self.seed_pair(key)) for key in self.baseline}

    def _parse_table(self, raw: Any) -> Dict[str, SentimentCounts]:
        if not isinstance(raw, dict):
            logger.warning("Sentiment file contains invalid data structure, ignoring it")
            return {}

        table: Dict[str, SentimentCounts] = {}
        legacy_keys = []
        for key, entry in raw.items():
            if not isinstance(entry, dict):
                continue
            try:
                if 'seeded' in entry or 'real' in entry:
                    table[key] = SentimentCounts.model_validate(entry)
                else:
                    table[key] = SentimentCounts(real=VotePair.model_validate(entry))
                    legacy_keys.append(key)
            except ValidationError as e:
                logger.warning(f"Skipping invalid sentiment entry '{key}': {e.error_count()} errors")

        if legacy_keys:
            logger.info(f"Migrating {len(legacy_keys)} legacy sentiment entries to seeded/real format")
            for key in self.baseline:
                if key in table:
                    if key in legacy_keys:
                        table[key].seeded = self.seed_pair(key)
                else:
                    table[key] = SentimentCounts(seeded=self.seed_pair(key))
            self.save(table)

        return table

    def load(self, attempt_restore: bool = True) -> Dict[str, SentimentCounts]:
        """
        Load the full table.

        A missing file is seeded with every baseline location and written out.
        A corrupt file is restored from the backup once; failing that, an
        empty table is returned.
        """
        if not self.path.exists():
            logger.info("Generating initial sentiment seed data")
            table = self.generate_seed_table()
            self.save(table)
            return table

        try:
            content = self.path.read_text(encoding='utf-8').strip()
            if not content:
                return {}
            return self._parse_table(json.loads(content))
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse sentiment JSON: {e}")
            if attempt_restore and self.backup_path.exists():
                logger.info("Attempting to restore sentiment data from backup...")
                try:
                    shutil.copy2(self.backup_path, self.path)
                    return self.load(attempt_restore=False)
                except OSError as restore_error:
                    logger.error(f"Failed to restore from backup: {restore_error}")
            return {}
        except OSError as e:
            logger.error(f"Failed to read sentiment file: {e}")
            return {}

    def save(self, table: Dict[str, SentimentCounts]) -> bool:
        """Write the table atomically, keeping a backup of the previous file."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if self.path.exists():
                try:
                    shutil.copy2(self.path, self.backup_path)
                except OSError as backup_error:
                    logger.warning(f"Failed to create sentiment backup: {backup_error}")

            payload = {key: counts.model_dump() for key, counts in table.items()}
            fd, temp_path = tempfile.mkstemp(suffix='.json', dir=str(self.path.parent))
            temp_file = Path(temp_path)
            try:
                with open(fd, 'w', encoding='utf-8') as f:
                    json.dump(payload, f, indent=2, ensure_ascii=False)
                shutil.move(str(temp_file), str(self.path))
            except OSError:
                if temp_file.exists():
                    temp_file.unlink()
                raise
            logger.debug(f"Saved {len(table)} sentiment locations to {self.path}")
            return True
        except (OSError, TypeError) as e:
            logger.error(f"Failed to save sentiment data: {e}")
            return False

    def get(self, location: str) -> SentimentCounts:
        """Combined counters for a location; zeros if never seen."""
        return self.load().get(normalize_key(location), SentimentCounts())

    def vote(self, location: str, choice: str) -> SentimentCounts:
        """
        Record one real vote and persist the table.

        Raises ValueError if choice is not 'safe' or 'unsafe'.
        """
        if choice not in VOTE_CHOICES:
            raise ValueError("Invalid vote. Must be 'safe' or 'unsafe'")

        key = normalize_key(location)
        table = self.load()
        counts = table.get(key)
        if counts is None:
            counts = SentimentCounts(seeded=self.seed_pair(key))
            table[key] = counts

        if choice == 'safe':
            counts.real.safe += 1
        else:
            counts.real.unsafe += 1

        if not self.save(table):
            logger.warning(f"Vote for '{key}' kept in memory only; persistence failed")
        return counts
