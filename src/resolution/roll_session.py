"""
Roll session store.

Keeps resolved rolls available by id for follow-up actions (damage, opposed
responses, rerolls). The session is owned and passed around by the caller;
entries older than max_age are evicted on access.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Callable, Optional
import logging
import uuid

logger = logging.getLogger(__name__)


DEFAULT_MAX_AGE = timedelta(minutes=30)


@dataclass
class StoredRoll:
    """A resolved roll kept for later reference."""
    roll_id: str
    request: Any
    outcome: Any
    created_at: datetime = field(default_factory=datetime.now)

    def age(self, now: datetime) -> timedelta:
        return now - self.created_at


class RollSession:
    """Caller-owned store of resolved rolls with age-based eviction."""

    def __init__(
        self,
        max_age: timedelta = DEFAULT_MAX_AGE,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Args:
            max_age: Entries older than this are dropped
            clock: Time source, replaceable in tests
        """
        self.max_age = max_age
        self._clock = clock or datetime.now
        self._rolls: dict[str, StoredRoll] = {}

    def __len__(self) -> int:
        self.evict_expired()
        return len(self._rolls)

    def __contains__(self, roll_id: str) -> bool:
        return self.get(roll_id) is not None

    def store(self, request: Any, outcome: Any) -> str:
        """Store a resolved roll and return its id."""
        self.evict_expired()
        roll_id = uuid.uuid4().hex
        self._rolls[roll_id] = StoredRoll(
            roll_id=roll_id,
            request=request,
            outcome=outcome,
            created_at=self._clock(),
        )
        return roll_id

    def get(self, roll_id: str) -> Optional[StoredRoll]:
        """Look up a stored roll; None if unknown or expired."""
        self.evict_expired()
        return self._rolls.get(roll_id)

    def remove(self, roll_id: str) -> bool:
        return self._rolls.pop(roll_id, None) is not None

    def evict_expired(self) -> int:
        """Drop entries older than max_age. Returns how many were dropped."""
        now = self._clock()
        expired = [rid for rid, roll in self._rolls.items() if roll.age(now) > self.max_age]
        for roll_id in expired:
            del self._rolls[roll_id]
        if expired:
            logger.debug(f"Evicted {len(expired)} expired rolls")
        return len(expired)

    def clear(self) -> None:
        self._rolls.clear()

    def ids(self) -> list[str]:
        self.evict_expired()
        return list(self._rolls)
