import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from ..errors import StorageError


def utcnow() -> datetime:
	return datetime.now(timezone.utc)


@dataclass(frozen=True)
class NewPixel:
	"""A validated placement about to be handed to a pixel store."""

	x: int
	y: int
	color: str
	owner_id: str
	link: str | None = None
	owner_name: str | None = None


@dataclass(frozen=True)
class Pixel:
	id: str
	x: int
	y: int
	color: str
	owner_id: str
	created_at: datetime
	link: str | None = None
	owner_name: str | None = None

	@property
	def position(self) -> tuple[int, int]:
		return (self.x, self.y)

	def to_dict(self) -> dict[str, Any]:
		return {
			"id": self.id,
			"x": self.x,
			"y": self.y,
			"color": self.color,
			"link": self.link,
			"owner_id": self.owner_id,
			"owner_name": self.owner_name,
			"created_at": self.created_at.isoformat(),
		}

	@classmethod
	def from_dict(cls, data: dict[str, Any]) -> "Pixel":
		created = data["created_at"]
		if isinstance(created, str):
			created = datetime.fromisoformat(created)
		return cls(
			id=str(data["id"]),
			x=int(data["x"]),
			y=int(data["y"]),
			color=data["color"],
			owner_id=data["owner_id"],
			created_at=created,
			link=data.get("link"),
			owner_name=data.get("owner_name"),
		)


@dataclass(frozen=True)
class CooldownRecord:
	user_id: str
	last_placement: datetime


@dataclass(frozen=True)
class Eligibility:
	eligible: bool
	retry_after: timedelta | None = None
	cooldown_ends_at: datetime | None = None

	@property
	def remaining_seconds(self) -> float | None:
		if self.retry_after is None:
			return None
		return max(0.0, self.retry_after.total_seconds())

	@property
	def remaining_minutes(self) -> int | None:
		if self.retry_after is None:
			return None
		return max(0, math.ceil(self.retry_after.total_seconds() / 60))


@dataclass(frozen=True)
class PlacementResult:
	pixel: Pixel
	cooldown_ends_at: datetime
	# set when the pixel committed but the cooldown write did not
	cooldown_error: StorageError | None = None
	listener_errors: tuple[Exception, ...] = ()

	@property
	def cooldown_recorded(self) -> bool:
		return self.cooldown_error is None
