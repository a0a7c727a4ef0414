import re
from typing import Any
from urllib.parse import urlparse

from ..config.config import PlacementConfig
from ..errors import ValidationError

COLOR_RE = re.compile(r"#[0-9A-Fa-f]{6}")
HOST_SCHEMES = {"http", "https", "ws", "wss", "ftp"}


def _is_int(value: Any) -> bool:
	# bool is an int subclass; JSON true/false are not coordinates
	return isinstance(value, int) and not isinstance(value, bool)


def _is_filled(value: Any) -> bool:
	return isinstance(value, str) and value.strip() != ""


def require_fields(x: Any, y: Any, color: Any, user_id: Any) -> None:
	for name, ok in (("x", _is_int(x)), ("y", _is_int(y)), ("color", _is_filled(color)), ("user_id", _is_filled(user_id))):
		if not ok:
			raise ValidationError("missing_fields", field=name)


def require_user_id(user_id: Any) -> str:
	if not _is_filled(user_id):
		raise ValidationError("missing_fields", field="user_id")
	return user_id.strip()


def check_bounds(x: int, y: int, cfg: PlacementConfig) -> None:
	bad = None
	if not 0 <= x < cfg.grid_width:
		bad = "x"
	elif not 0 <= y < cfg.grid_height:
		bad = "y"
	if bad:
		raise ValidationError(
			"out_of_bounds",
			field=bad,
			details={"x": x, "y": y, "grid_width": cfg.grid_width, "grid_height": cfg.grid_height},
		)


def normalize_color(color: str) -> str:
	"""Return ``color`` as upper-case ``#RRGGBB`` or raise ``bad_color``."""
	if not COLOR_RE.fullmatch(color):
		raise ValidationError("bad_color", field="color", details={"color": color})
	return color.upper()


def normalize_link(link: Any) -> str | None:
	"""Return a stripped absolute URL, or ``None`` for an empty link.

	Any scheme is allowed (``mailto:`` included), but web schemes must
	name a host.
	"""
	if link is None:
		return None
	if not isinstance(link, str):
		raise ValidationError("bad_link", field="link")
	link = link.strip()
	if not link:
		return None
	try:
		parsed = urlparse(link)
	except ValueError:
		raise ValidationError("bad_link", field="link", details={"link": link})
	if not parsed.scheme:
		raise ValidationError("bad_link", field="link", details={"link": link})
	if parsed.scheme.lower() in HOST_SCHEMES:
		ok = bool(parsed.netloc)
	else:
		ok = bool(parsed.netloc or parsed.path)
	if not ok:
		raise ValidationError("bad_link", field="link", details={"link": link})
	return link


def normalize_name(name: Any) -> str | None:
	if not isinstance(name, str):
		return None
	return name.strip() or None
