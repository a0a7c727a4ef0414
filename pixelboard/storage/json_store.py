import json
import os
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Callable

from ..canvas.models import CooldownRecord, NewPixel, Pixel, utcnow
from ..errors import DuplicatePositionError, StorageError
from .file_lock import FileLock


class JsonDocument:
    """One JSON file in ``data_dir``, replaced atomically on every write."""

    def __init__(self, data_dir: str, name: str, lock_timeout: float = 10) -> None:
        Path(data_dir).mkdir(parents=True, exist_ok=True)
        self.path = str(Path(data_dir) / name)
        self.lock_timeout = lock_timeout

    def lock(self) -> FileLock:
        return FileLock(f"{self.path}.lock", timeout=self.lock_timeout)

    def load(self, default: Any) -> Any:
        try:
            with open(self.path, encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError:
            return default
        except (OSError, ValueError) as e:
            raise StorageError(f"failed to read {self.path}", e) from e

    def save(self, data: Any) -> None:
        tmp = f"{self.path}.tmp"
        try:
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        except OSError as e:
            raise StorageError(f"failed to write {self.path}", e) from e


class FilePixelStore:
    def __init__(self, data_dir: str, clock: Callable[[], datetime] = utcnow, lock_timeout: float = 10) -> None:
        self._doc = JsonDocument(data_dir, "pixels.json", lock_timeout)
        self._clock = clock

    def get_pixel(self, x: int, y: int) -> Pixel | None:
        raw = self._doc.load({}).get(f"{x},{y}")
        return Pixel.from_dict(raw) if raw else None

    def insert_pixel(self, pixel: NewPixel) -> Pixel:
        key = f"{pixel.x},{pixel.y}"
        try:
            with self._doc.lock():
                pixels: dict[str, Any] = self._doc.load({})
                if key in pixels:
                    raise DuplicatePositionError(pixel.x, pixel.y)
                stored = Pixel(
                    id=uuid.uuid4().hex,
                    x=pixel.x,
                    y=pixel.y,
                    color=pixel.color,
                    owner_id=pixel.owner_id,
                    created_at=self._clock(),
                    link=pixel.link,
                    owner_name=pixel.owner_name,
                )
                pixels[key] = stored.to_dict()
                self._doc.save(pixels)
                return stored
        except TimeoutError as e:
            raise StorageError("timed out waiting for the pixel store lock", e) from e

    def list_pixels(self) -> list[Pixel]:
        pixels = [Pixel.from_dict(raw) for raw in self._doc.load({}).values()]
        pixels.sort(key=lambda p: p.created_at)
        return pixels


class FileCooldownStore:
    def __init__(self, data_dir: str, lock_timeout: float = 10) -> None:
        self._doc = JsonDocument(data_dir, "cooldowns.json", lock_timeout)

    def get_cooldown(self, user_id: str) -> CooldownRecord | None:
        raw = self._doc.load({}).get(user_id)
        if not raw:
            return None
        return CooldownRecord(user_id=user_id, last_placement=datetime.fromisoformat(raw))

    def upsert_cooldown(self, user_id: str, last_placement: datetime) -> None:
        try:
            with self._doc.lock():
                data: dict[str, str] = self._doc.load({})
                data[user_id] = last_placement.isoformat()
                self._doc.save(data)
        except TimeoutError as e:
            raise StorageError("timed out waiting for the cooldown store lock", e) from e
