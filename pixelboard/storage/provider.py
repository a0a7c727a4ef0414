import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from ..canvas.models import utcnow
from ..config.config import AppConfig
from .base import CooldownStore, PixelStore
from .json_store import FileCooldownStore, FilePixelStore
from .memory_store import MemoryCooldownStore, MemoryPixelStore

_LOGGER = logging.getLogger(__name__)


@dataclass
class CanvasStores:
	pixels: PixelStore
	cooldowns: CooldownStore


def build_stores(cfg: AppConfig, clock: Callable[[], datetime] = utcnow) -> CanvasStores:
	if cfg.storage_backend == "mongo":
		if not cfg.mongo_url:
			raise RuntimeError("STORAGE_BACKEND=mongo requires MONGO_URL or MONGO_HOST credentials")
		from .mongo_store import MongoCooldownStore, MongoPixelStore, connect_mongo

		db = connect_mongo(cfg.mongo_url, cfg.mongo_db)
		_LOGGER.info("Using MongoDB canvas store", extra={"db": cfg.mongo_db})
		return CanvasStores(MongoPixelStore(db, clock=clock), MongoCooldownStore(db))
	if cfg.storage_backend == "memory":
		_LOGGER.warning("Using in-memory canvas store; pixels are lost on restart")
		return CanvasStores(MemoryPixelStore(clock=clock), MemoryCooldownStore())
	_LOGGER.info("Using JSON file canvas store in %s", cfg.data_dir)
	return CanvasStores(FilePixelStore(cfg.data_dir, clock=clock), FileCooldownStore(cfg.data_dir))
