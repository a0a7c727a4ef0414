from typing import Any, Callable

from ..config.config import PlacementConfig
from ..errors import ConflictError, CooldownError, DuplicatePositionError, StorageError
from ..storage.base import PixelStore
from .cooldown import CooldownTracker
from .models import NewPixel, Pixel, PlacementResult
from .validation import check_bounds, normalize_color, normalize_link, normalize_name, require_fields

PixelListener = Callable[[Pixel], None]


class PlacementGate:
	"""Decides whether a placement request becomes a stored pixel.

	Checks run in a fixed order and the first failure is raised:
	fields, bounds, color, link, occupancy, cooldown. The occupancy check
	is advisory; the pixel store's conditional insert is what keeps one
	pixel per cell when two writers race, and losing that race is
	reported exactly like a taken cell.

	Cooldown is enforced best-effort: two requests from the same user that
	both pass the eligibility check before either commits can both land.

	Once the pixel is stored, neither a failed cooldown write nor a failing
	listener undoes the placement; both are reported on the result.
	"""

	def __init__(
		self,
		pixels: PixelStore,
		tracker: CooldownTracker,
		cfg: PlacementConfig,
		listeners: list[PixelListener] | None = None,
	) -> None:
		self._pixels = pixels
		self._tracker = tracker
		self._cfg = cfg
		self._listeners: list[PixelListener] = list(listeners or [])

	@property
	def config(self) -> PlacementConfig:
		return self._cfg

	def subscribe(self, listener: PixelListener) -> None:
		self._listeners.append(listener)

	def place(
		self,
		x: Any,
		y: Any,
		color: Any,
		user_id: Any,
		link: Any = None,
		user_name: Any = None,
	) -> PlacementResult:
		require_fields(x, y, color, user_id)
		check_bounds(x, y, self._cfg)
		color = normalize_color(color)
		link = normalize_link(link)
		user_id = user_id.strip()

		if self._pixels.get_pixel(x, y) is not None:
			raise ConflictError((x, y))

		eligibility = self._tracker.check_eligibility(user_id)
		if not eligibility.eligible:
			raise CooldownError(eligibility.retry_after, eligibility.cooldown_ends_at)

		new_pixel = NewPixel(x=x, y=y, color=color, owner_id=user_id, link=link, owner_name=normalize_name(user_name))
		try:
			pixel = self._pixels.insert_pixel(new_pixel)
		except DuplicatePositionError:
			raise ConflictError((x, y)) from None

		now = self._tracker.now()
		cooldown_error = None
		try:
			self._tracker.record_placement(user_id, now)
		except StorageError as e:
			# the pixel is the source of truth; a stale cooldown only loosens the limit
			cooldown_error = e

		listener_errors = []
		for listener in self._listeners:
			try:
				listener(pixel)
			except Exception as e:
				listener_errors.append(e)
		return PlacementResult(
			pixel=pixel,
			cooldown_ends_at=now + self._tracker.duration,
			cooldown_error=cooldown_error,
			listener_errors=tuple(listener_errors),
		)

	def pixel_at(self, x: int, y: int) -> Pixel | None:
		check_bounds(x, y, self._cfg)
		return self._pixels.get_pixel(x, y)

	def list_pixels(self) -> list[Pixel]:
		return self._pixels.list_pixels()
