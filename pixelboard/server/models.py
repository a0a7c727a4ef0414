from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..canvas.models import Pixel


class StatusResponse(BaseModel):
	status: Literal["ok"]


class PlacePixelRequest(BaseModel):
	# Field types stay loose so malformed input reaches the placement
	# checks and comes back as missing_fields rather than a 422.
	model_config = ConfigDict(populate_by_name=True)

	x: Any = None
	y: Any = None
	color: Any = None
	link: Any = None
	user_id: Any = Field(default=None, alias="userId")
	user_name: Any = Field(default=None, alias="userName")


class PixelItem(BaseModel):
	id: str
	x: int
	y: int
	color: str
	link: Optional[str] = None
	owner_id: str
	owner_name: Optional[str] = None
	created_at: datetime

	@classmethod
	def from_pixel(cls, pixel: Pixel) -> "PixelItem":
		return cls(**pixel.to_dict())


class PlacePixelResponse(BaseModel):
	success: bool
	pixel: PixelItem
	cooldown_end: datetime
	cooldown_recorded: bool


class CooldownStatusResponse(BaseModel):
	can_place: bool
	cooldown_end: Optional[datetime] = None
	remaining_seconds: Optional[float] = None
	remaining_minutes: Optional[int] = None


class PixelsListResponse(BaseModel):
	data: list[PixelItem]
	total: int


class CanvasConfigResponse(BaseModel):
	grid_width: int
	grid_height: int
	cooldown_minutes: float
