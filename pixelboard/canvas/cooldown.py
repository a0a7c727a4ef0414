from datetime import datetime, timedelta
from typing import Callable

from ..config.config import PlacementConfig
from ..storage.base import CooldownStore
from .models import Eligibility, utcnow


class CooldownTracker:
	"""Per-user placement cooldown backed by a ``CooldownStore``.

	Storage errors propagate unchanged; the tracker never retries.
	"""

	def __init__(self, store: CooldownStore, cfg: PlacementConfig, clock: Callable[[], datetime] = utcnow) -> None:
		self._store = store
		self._duration = cfg.cooldown
		self._clock = clock

	@property
	def duration(self) -> timedelta:
		return self._duration

	def now(self) -> datetime:
		return self._clock()

	def check_eligibility(self, user_id: str) -> Eligibility:
		record = self._store.get_cooldown(user_id)
		if record is None:
			return Eligibility(eligible=True)
		now = self._clock()
		ends_at = record.last_placement + self._duration
		if now - record.last_placement >= self._duration:
			return Eligibility(eligible=True)
		return Eligibility(eligible=False, retry_after=ends_at - now, cooldown_ends_at=ends_at)

	def record_placement(self, user_id: str, at: datetime | None = None) -> datetime:
		at = at or self._clock()
		self._store.upsert_cooldown(user_id, at)
		return at
