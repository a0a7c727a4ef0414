import logging
import os

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> logging.Logger:
	level_name = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
	logging.basicConfig(level=level_name, format=_FORMAT)
	# pymongo logs every server heartbeat at DEBUG
	if logging.getLogger().getEffectiveLevel() < logging.INFO:
		logging.getLogger("pymongo").setLevel(logging.INFO)
	return logging.getLogger()
