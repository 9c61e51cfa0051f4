from __future__ import annotations

import json
import os
from dataclasses import dataclass
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Callable, Dict, Optional, Protocol, Union

from ..config import USAGE_KEY
from ..logging import get_logger

logger = get_logger(__name__)

Clock = Callable[[], date]


def utc_today() -> date:
    """Date portion of the current UTC timestamp."""
    return datetime.now(timezone.utc).date()


@dataclass(frozen=True)
class UsageRecord:
    """Attempts recorded for a single calendar day."""

    date: date
    count: int

    @classmethod
    def load(cls, raw: str) -> "UsageRecord":
        try:
            content = json.loads(raw)
            day = date.fromisoformat(content["date"])
            count = content["count"]
        except (KeyError, TypeError, ValueError, RecursionError) as exc:
            raise ValueError(f"Malformed usage record: {raw!r}") from exc
        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            raise ValueError(f"Malformed usage count: {count!r}")
        return cls(date=day, count=count)

    def dump(self) -> str:
        return json.dumps({"date": self.date.isoformat(), "count": self.count})


class KeyValueStorage(Protocol):
    def read(self, key: str) -> Optional[str]: ...

    def write(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStorage:
    """Dict-backed storage, mostly for tests."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def read(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def write(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileStorage:
    """String key-value pairs kept in a single JSON object file."""

    def __init__(self, path: Union[str, os.PathLike[str]]):
        self.path = Path(path)

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                content = json.load(fh)
        except (OSError, ValueError, RecursionError) as exc:
            logger.warning("Ignoring unreadable storage file %s: %s", self.path, exc)
            return {}
        if not isinstance(content, dict):
            logger.warning("Ignoring storage file %s: expected a JSON object", self.path)
            return {}
        return content

    def _dump(self, content: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as fh:
            json.dump(content, fh, ensure_ascii=False, indent=2)

    def read(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def write(self, key: str, value: str) -> None:
        content = self._load()
        content[key] = value
        self._dump(content)

    def remove(self, key: str) -> None:
        content = self._load()
        if content.pop(key, None) is not None:
            self._dump(content)


class UsageQuotaTracker:
    """Per-calendar-day ceiling on generation attempts.

    The counter lives in a single storage slot. A record for any day other
    than today counts as zero; day rollover is detected when the slot is next
    read, so no timer is involved.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        daily_limit: int,
        key: str = USAGE_KEY,
        clock: Clock = utc_today,
    ):
        if daily_limit < 1:
            raise ValueError("daily_limit must be a positive integer")
        self.storage = storage
        self.daily_limit = daily_limit
        self.key = key
        self.clock = clock
        self._reserved_on: Optional[date] = None

    def _read_record(self) -> Optional[UsageRecord]:
        raw = self.storage.read(self.key)
        if raw is None:
            return None
        try:
            return UsageRecord.load(raw)
        except ValueError as exc:
            logger.warning("Discarding usage data: %s", exc)
            return None

    def _count_for(self, day: date) -> int:
        record = self._read_record()
        if record is None or record.date != day:
            return 0
        return record.count

    def current_count(self) -> int:
        return self._count_for(self.clock())

    def remaining(self) -> int:
        return max(0, self.daily_limit - self.current_count())

    def try_reserve(self) -> bool:
        today = self.clock()
        count = self._count_for(today)
        if count >= self.daily_limit:
            logger.debug("Daily limit of %d reached for %s", self.daily_limit, today)
            return False
        self.storage.write(self.key, UsageRecord(today, count + 1).dump())
        self._reserved_on = today
        logger.debug("Reserved attempt %d/%d for %s", count + 1, self.daily_limit, today)
        return True

    def rollback(self) -> None:
        """Give back the most recent reservation.

        The decrement applies to the day the reservation was made on. If the
        stored record has since moved to another day, there is nothing to
        give back.
        """
        day = self._reserved_on or self.clock()
        self._reserved_on = None
        record = self._read_record()
        if record is None or record.date != day:
            logger.debug("No usage recorded for %s; nothing to roll back", day)
            return
        self.storage.write(self.key, UsageRecord(day, max(0, record.count - 1)).dump())
        logger.debug("Rolled back attempt for %s", day)

    def reset(self) -> None:
        self._reserved_on = None
        self.storage.remove(self.key)

    def purge_stale(self) -> None:
        """Drop a record that is malformed or belongs to another day."""
        raw = self.storage.read(self.key)
        if raw is None:
            return
        record = self._read_record()
        if record is None or record.date != self.clock():
            self.storage.remove(self.key)
