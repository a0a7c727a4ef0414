import argparse
import json
import sys
from typing import Any

import uvicorn
from dotenv import load_dotenv

load_dotenv()

from pixelboard.canvas.validation import require_user_id
from pixelboard.config.config import AppConfig
from pixelboard.config.logging_config import configure_logging
from pixelboard.errors import PixelboardError
from pixelboard.server import create_app
from pixelboard.server.bootstrap import build_services

_LOGGER = configure_logging()


def _print_json(data: Any) -> None:
	print(json.dumps(data, indent=2, default=str))


def cmd_serve(args: argparse.Namespace) -> None:
	cfg = AppConfig()
	services = build_services(cfg)
	app = create_app(services, cfg)
	uvicorn.run(app, host=args.host or cfg.host, port=args.port or cfg.port)


def cmd_cooldown_status(args: argparse.Namespace) -> None:
	cfg = AppConfig()
	services = build_services(cfg)
	uid = require_user_id(args.user_id)
	eligibility = services.tracker.check_eligibility(uid)
	if eligibility.eligible:
		print(f"{uid} can place a pixel now")
		return
	print(f"{uid} must wait {eligibility.remaining_minutes} more minute(s), until {eligibility.cooldown_ends_at.isoformat()}")


def cmd_place(args: argparse.Namespace) -> None:
	cfg = AppConfig()
	services = build_services(cfg)
	result = services.gate.place(
		x=args.x,
		y=args.y,
		color=args.color,
		user_id=args.user_id,
		link=args.link,
		user_name=args.user_name,
	)
	print(f"Placed {result.pixel.color} at ({result.pixel.x}, {result.pixel.y}) id={result.pixel.id}")
	print(f"Next placement at {result.cooldown_ends_at.isoformat()}")
	if result.cooldown_error is not None:
		print(f"Warning: cooldown was not recorded: {result.cooldown_error}")
	for err in result.listener_errors:
		print(f"Warning: placement notification failed: {err}")


def cmd_list_pixels(args: argparse.Namespace) -> None:
	cfg = AppConfig()
	services = build_services(cfg)
	pixels = services.gate.list_pixels()
	if args.json:
		_print_json([p.to_dict() for p in pixels])
		return
	for p in pixels:
		name = p.owner_name or p.owner_id
		print(f"({p.x}, {p.y})\t{p.color}\t{name}\t{p.created_at.isoformat()}")
	print(f"{len(pixels)} pixel(s)")


def build_arg_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(description="Pixelboard canvas server and tools")
	sub = parser.add_subparsers(dest="command", required=True)

	p_srv = sub.add_parser("serve", help="Run the HTTP and WebSocket server")
	p_srv.add_argument("--host", help="Bind address (default: HOST or 0.0.0.0)")
	p_srv.add_argument("--port", type=int, help="Bind port (default: PORT or 8080)")
	p_srv.set_defaults(func=cmd_serve)

	p_cd = sub.add_parser("cooldown-status", help="Show whether a user may place a pixel")
	p_cd.add_argument("--user-id", required=True)
	p_cd.set_defaults(func=cmd_cooldown_status)

	p_place = sub.add_parser("place", help="Place a pixel as the given user")
	p_place.add_argument("--x", type=int, required=True)
	p_place.add_argument("--y", type=int, required=True)
	p_place.add_argument("--color", required=True, help="Hex color, e.g. #FF0000")
	p_place.add_argument("--user-id", required=True)
	p_place.add_argument("--user-name")
	p_place.add_argument("--link", help="Optional absolute URL attached to the pixel")
	p_place.set_defaults(func=cmd_place)

	p_ls = sub.add_parser("list-pixels", help="List placed pixels, oldest first")
	p_ls.add_argument("--json", action="store_true", help="Print pixels as JSON")
	p_ls.set_defaults(func=cmd_list_pixels)
	return parser


def main(argv: list[str] | None = None) -> None:
	parser = build_arg_parser()
	args = parser.parse_args(argv)
	try:
		args.func(args)
	except PixelboardError as e:
		_print_json(e.to_dict())
		sys.exit(1)


if __name__ == "__main__":
	main()
