import json
from datetime import datetime, timezone

import pytest

from pixelboard.canvas.models import NewPixel
from pixelboard.errors import DuplicatePositionError, StorageError
from pixelboard.storage.file_lock import FileLock
from pixelboard.storage.json_store import FileCooldownStore, FilePixelStore
from pixelboard.storage.memory_store import MemoryCooldownStore, MemoryPixelStore


def _new(x: int = 1, y: int = 2, owner: str = "u1") -> NewPixel:
	return NewPixel(x=x, y=y, color="#ABCDEF", owner_id=owner, link="https://example.com", owner_name="Al")


@pytest.fixture(params=["memory", "file"])
def pixel_backend(request, tmp_path, clock):
	if request.param == "memory":
		return MemoryPixelStore(clock=clock)
	return FilePixelStore(str(tmp_path), clock=clock)


@pytest.fixture(params=["memory", "file"])
def cooldown_backend(request, tmp_path):
	if request.param == "memory":
		return MemoryCooldownStore()
	return FileCooldownStore(str(tmp_path))


def test_insert_assigns_id_and_timestamp(pixel_backend, clock):
	stored = pixel_backend.insert_pixel(_new())
	assert stored.id
	assert stored.created_at == clock()
	assert pixel_backend.get_pixel(1, 2) == stored
	assert pixel_backend.get_pixel(2, 1) is None


def test_insert_is_conditional(pixel_backend):
	pixel_backend.insert_pixel(_new(owner="u1"))
	with pytest.raises(DuplicatePositionError) as ei:
		pixel_backend.insert_pixel(_new(owner="u2"))
	assert ei.value.position == (1, 2)
	assert pixel_backend.get_pixel(1, 2).owner_id == "u1"


def test_list_oldest_first(pixel_backend, clock):
	pixel_backend.insert_pixel(_new(5, 5))
	clock.advance(seconds=1)
	pixel_backend.insert_pixel(_new(0, 0))
	assert [p.position for p in pixel_backend.list_pixels()] == [(5, 5), (0, 0)]


def test_cooldown_upsert_overwrites(cooldown_backend):
	assert cooldown_backend.get_cooldown("u1") is None
	t1 = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)
	t2 = datetime(2025, 1, 1, 12, 30, tzinfo=timezone.utc)
	cooldown_backend.upsert_cooldown("u1", t1)
	cooldown_backend.upsert_cooldown("u1", t2)
	record = cooldown_backend.get_cooldown("u1")
	assert record.user_id == "u1"
	assert record.last_placement == t2


def test_file_store_shared_between_instances(tmp_path, clock):
	a = FilePixelStore(str(tmp_path), clock=clock)
	b = FilePixelStore(str(tmp_path), clock=clock)
	a.insert_pixel(_new())
	assert b.get_pixel(1, 2) is not None
	with pytest.raises(DuplicatePositionError):
		b.insert_pixel(_new(owner="u2"))


def test_file_store_corrupt_document_raises(tmp_path):
	(tmp_path / "pixels.json").write_text("{not json", encoding="utf-8")
	store = FilePixelStore(str(tmp_path))
	with pytest.raises(StorageError):
		store.list_pixels()


def test_file_store_lock_timeout_is_storage_error(tmp_path):
	store = FilePixelStore(str(tmp_path), lock_timeout=0.1)
	with FileLock(str(tmp_path / "pixels.json.lock")):
		with pytest.raises(StorageError):
			store.insert_pixel(_new())
	assert store.get_pixel(1, 2) is None


def test_file_store_writes_plain_json(tmp_path, clock):
	FilePixelStore(str(tmp_path), clock=clock).insert_pixel(_new(3, 4))
	data = json.loads((tmp_path / "pixels.json").read_text(encoding="utf-8"))
	assert data["3,4"]["color"] == "#ABCDEF"
	assert data["3,4"]["created_at"] == clock().isoformat()
