from datetime import timedelta

import pytest

from pixelboard.canvas.cooldown import CooldownTracker
from pixelboard.config.config import PlacementConfig
from pixelboard.errors import StorageError


def test_unknown_user_is_eligible(tracker):
	result = tracker.check_eligibility("nobody")
	assert result.eligible is True
	assert result.retry_after is None
	assert result.cooldown_ends_at is None


def test_within_window_not_eligible(tracker, clock):
	placed_at = tracker.record_placement("u1")
	clock.advance(minutes=3, seconds=30)
	result = tracker.check_eligibility("u1")
	assert result.eligible is False
	assert result.cooldown_ends_at == placed_at + timedelta(minutes=10)
	assert result.retry_after == timedelta(minutes=6, seconds=30)
	assert result.remaining_minutes == 7
	assert result.remaining_seconds == 390


def test_eligible_exactly_at_duration(tracker, clock):
	tracker.record_placement("u1")
	clock.advance(minutes=10)
	assert tracker.check_eligibility("u1").eligible is True


def test_record_placement_overwrites(tracker, cooldown_store, clock):
	tracker.record_placement("u1")
	clock.advance(minutes=9)
	second = tracker.record_placement("u1")
	assert cooldown_store.get_cooldown("u1").last_placement == second
	clock.advance(minutes=2)
	assert tracker.check_eligibility("u1").eligible is False


def test_zero_cooldown_always_eligible(cooldown_store, clock):
	tracker = CooldownTracker(cooldown_store, PlacementConfig(cooldown_minutes=0), clock=clock)
	tracker.record_placement("u1")
	assert tracker.check_eligibility("u1").eligible is True


def test_storage_failure_propagates(placement_cfg, clock):
	class BrokenStore:
		def get_cooldown(self, user_id):
			raise StorageError("down")

		def upsert_cooldown(self, user_id, last_placement):
			raise StorageError("down")

	tracker = CooldownTracker(BrokenStore(), placement_cfg, clock=clock)
	with pytest.raises(StorageError):
		tracker.check_eligibility("u1")
	with pytest.raises(StorageError):
		tracker.record_placement("u1")
