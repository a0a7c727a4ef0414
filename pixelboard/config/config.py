import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path


def read_env(name: str, default: str | None = None, required: bool = False) -> str | None:
	value = os.environ.get(name, default)
	if required and (value is None or value == ""):
		raise RuntimeError(f"Missing required environment variable: {name}")
	return value


@dataclass(frozen=True)
class PlacementConfig:
	grid_width: int = 600
	grid_height: int = 400
	cooldown_minutes: float = 10

	def __post_init__(self) -> None:
		if self.grid_width <= 0 or self.grid_height <= 0:
			raise ValueError("grid dimensions must be positive")
		if self.cooldown_minutes < 0:
			raise ValueError("cooldown must not be negative")

	@property
	def cooldown(self) -> timedelta:
		return timedelta(minutes=self.cooldown_minutes)


class AppConfig:
	def __init__(self) -> None:
		self.host = read_env("HOST", "0.0.0.0")
		self.port = self._read_int("PORT", 8080)
		self.frontend_origins: list[str] = self._read_origins()
		self.grid_width = self._read_int("GRID_WIDTH", 600)
		self.grid_height = self._read_int("GRID_HEIGHT", 400)
		self.cooldown_minutes = self._read_float("COOLDOWN_MINUTES", 10.0)
		self.data_dir = read_env("DATA_DIR") or str(Path.cwd() / "data")
		self.mongo_url = self._read_mongo_url()
		self.mongo_db = read_env("MONGO_DB", "pixelboard") or "pixelboard"
		self.storage_backend = self._read_backend()

	@property
	def placement(self) -> PlacementConfig:
		return PlacementConfig(
			grid_width=self.grid_width,
			grid_height=self.grid_height,
			cooldown_minutes=self.cooldown_minutes,
		)

	@staticmethod
	def _read_int(name: str, default: int) -> int:
		raw = read_env(name, str(default))
		try:
			return int(raw or default)
		except Exception:
			return default

	@staticmethod
	def _read_float(name: str, default: float) -> float:
		raw = read_env(name, str(default))
		try:
			return float(raw or default)
		except Exception:
			return default

	def _read_origins(self) -> list[str]:
		raw = read_env("FRONTEND_URL", "http://localhost:3000") or ""
		return [o.strip() for o in raw.split(",") if o.strip()]

	def _read_mongo_url(self) -> str | None:
		url = read_env("MONGO_URL")
		if url:
			return url
		host = read_env("MONGO_HOST")
		port = read_env("MONGO_PORT", "27017")
		user = read_env("MONGO_USERNAME") or read_env("MONGO_INITDB_ROOT_USERNAME")
		pw = read_env("MONGO_PASSWORD") or read_env("MONGO_INITDB_ROOT_PASSWORD")
		auth_db = read_env("MONGO_AUTH_SOURCE", "admin")
		if host and user and pw:
			return f"mongodb://{user}:{pw}@{host}:{port}/?authSource={auth_db}"
		return None

	def _read_backend(self) -> str:
		raw = (read_env("STORAGE_BACKEND", "") or "").strip().lower()
		if raw in {"memory", "file", "mongo"}:
			return raw
		return "mongo" if self.mongo_url else "file"
