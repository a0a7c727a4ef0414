from pixelboard.config import AppConfig, configure_logging
from pixelboard.server import build_services, create_app

# ASGI app for the Vercel Python runtime.
configure_logging()
_cfg = AppConfig()
app = create_app(build_services(_cfg), _cfg)
