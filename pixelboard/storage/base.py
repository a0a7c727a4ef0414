from datetime import datetime
from typing import Protocol

from ..canvas.models import CooldownRecord, NewPixel, Pixel


class PixelStore(Protocol):
	def get_pixel(self, x: int, y: int) -> Pixel | None: ...

	def insert_pixel(self, pixel: NewPixel) -> Pixel:
		"""Insert unless the cell is taken; raises ``DuplicatePositionError`` then."""
		...

	def list_pixels(self) -> list[Pixel]: ...


class CooldownStore(Protocol):
	def get_cooldown(self, user_id: str) -> CooldownRecord | None: ...

	def upsert_cooldown(self, user_id: str, last_placement: datetime) -> None: ...
