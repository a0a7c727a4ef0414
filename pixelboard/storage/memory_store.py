import threading
import uuid
from datetime import datetime
from typing import Callable

from ..canvas.models import CooldownRecord, NewPixel, Pixel, utcnow
from ..errors import DuplicatePositionError


class MemoryPixelStore:
	def __init__(self, clock: Callable[[], datetime] = utcnow) -> None:
		self._clock = clock
		self._lock = threading.Lock()
		self._pixels: dict[tuple[int, int], Pixel] = {}

	def get_pixel(self, x: int, y: int) -> Pixel | None:
		with self._lock:
			return self._pixels.get((x, y))

	def insert_pixel(self, pixel: NewPixel) -> Pixel:
		with self._lock:
			if (pixel.x, pixel.y) in self._pixels:
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
			self._pixels[(pixel.x, pixel.y)] = stored
			return stored

	def list_pixels(self) -> list[Pixel]:
		with self._lock:
			# dicts keep insertion order, which is commit order here
			return list(self._pixels.values())


class MemoryCooldownStore:
	def __init__(self) -> None:
		self._lock = threading.Lock()
		self._data: dict[str, datetime] = {}

	def get_cooldown(self, user_id: str) -> CooldownRecord | None:
		with self._lock:
			last = self._data.get(user_id)
		if last is None:
			return None
		return CooldownRecord(user_id=user_id, last_placement=last)

	def upsert_cooldown(self, user_id: str, last_placement: datetime) -> None:
		with self._lock:
			self._data[user_id] = last_placement
