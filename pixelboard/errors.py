import math
from datetime import datetime, timedelta
from typing import Any


class PixelboardError(Exception):
	"""Base class for placement failures returned to callers."""

	kind = "error"

	def to_dict(self) -> dict[str, Any]:
		return {"error": self.kind, "message": str(self)}


class ValidationError(PixelboardError):
	kind = "validation_error"

	def __init__(self, reason: str, field: str | None = None, details: dict[str, Any] | None = None) -> None:
		super().__init__(reason if not field else f"{reason}: {field}")
		self.reason = reason
		self.field = field
		self.details = details or {}

	def to_dict(self) -> dict[str, Any]:
		out: dict[str, Any] = {"error": self.kind, "reason": self.reason}
		if self.field:
			out["field"] = self.field
		out.update(self.details)
		return out


class ConflictError(PixelboardError):
	kind = "position_taken"

	def __init__(self, position: tuple[int, int]) -> None:
		super().__init__(f"A pixel already exists at ({position[0]}, {position[1]})")
		self.position = position

	def to_dict(self) -> dict[str, Any]:
		return {"error": self.kind, "reason": "position_taken", "x": self.position[0], "y": self.position[1]}


class CooldownError(PixelboardError):
	kind = "cooldown_active"

	def __init__(self, retry_after: timedelta, cooldown_ends_at: datetime) -> None:
		super().__init__(f"Cooldown active until {cooldown_ends_at.isoformat()}")
		self.retry_after = retry_after
		self.cooldown_ends_at = cooldown_ends_at

	@property
	def retry_after_seconds(self) -> int:
		return max(0, math.ceil(self.retry_after.total_seconds()))

	@property
	def remaining_minutes(self) -> int:
		return max(0, math.ceil(self.retry_after.total_seconds() / 60))

	def to_dict(self) -> dict[str, Any]:
		return {
			"error": self.kind,
			"reason": "cooldown",
			"retry_after_seconds": self.retry_after_seconds,
			"remaining_minutes": self.remaining_minutes,
			"cooldown_end": self.cooldown_ends_at.isoformat(),
		}


class StorageError(PixelboardError):
	kind = "storage_error"

	def __init__(self, message: str, cause: BaseException | None = None) -> None:
		super().__init__(message)
		self.cause = cause

	def to_dict(self) -> dict[str, Any]:
		return {"error": self.kind, "message": str(self)}


class DuplicatePositionError(StorageError):
	"""Raised by a pixel store when the conditional insert loses the cell."""

	def __init__(self, x: int, y: int, cause: BaseException | None = None) -> None:
		super().__init__(f"pixel already stored at ({x}, {y})", cause)
		self.position = (x, y)
