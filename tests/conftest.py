import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Ensure project root is on sys.path so `import pixelboard` works under pytest
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
	sys.path.insert(0, str(ROOT_DIR))


class FakeClock:
	def __init__(self, start: datetime | None = None) -> None:
		self.current = start or datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)

	def __call__(self) -> datetime:
		return self.current

	def advance(self, **kwargs: float) -> datetime:
		self.current = self.current + timedelta(**kwargs)
		return self.current


@pytest.fixture
def clock():
	return FakeClock()


@pytest.fixture
def placement_cfg():
	from pixelboard.config.config import PlacementConfig
	return PlacementConfig(grid_width=600, grid_height=400, cooldown_minutes=10)


@pytest.fixture
def pixel_store(clock):
	from pixelboard.storage.memory_store import MemoryPixelStore
	return MemoryPixelStore(clock=clock)


@pytest.fixture
def cooldown_store():
	from pixelboard.storage.memory_store import MemoryCooldownStore
	return MemoryCooldownStore()


@pytest.fixture
def tracker(cooldown_store, placement_cfg, clock):
	from pixelboard.canvas.cooldown import CooldownTracker
	return CooldownTracker(cooldown_store, placement_cfg, clock=clock)


@pytest.fixture
def gate(pixel_store, tracker, placement_cfg):
	from pixelboard.canvas.gate import PlacementGate
	return PlacementGate(pixel_store, tracker, placement_cfg)


@pytest.fixture
def tmp_data_dir(tmp_path, monkeypatch):
	# Force isolated data dir per test
	monkeypatch.setenv("DATA_DIR", str(tmp_path))
	monkeypatch.delenv("MONGO_URL", raising=False)
	monkeypatch.delenv("MONGO_HOST", raising=False)
	monkeypatch.delenv("STORAGE_BACKEND", raising=False)
	return tmp_path


@pytest.fixture
def app_services(tmp_data_dir, monkeypatch, clock):
	monkeypatch.setenv("FRONTEND_URL", "http://localhost:3000")
	monkeypatch.setenv("STORAGE_BACKEND", "memory")
	from pixelboard.config.config import AppConfig
	from pixelboard.server.bootstrap import build_services
	cfg = AppConfig()
	return build_services(cfg, clock=clock), cfg


@pytest.fixture
def app_client(app_services):
	from pixelboard.server.http import create_app
	services, cfg = app_services
	app = create_app(services, cfg)
	client = TestClient(app)
	return client, services
