import logging

from .settings import settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: str | None = None) -> logging.Logger:
	logger = logging.getLogger("classroom_ai")
	logger.setLevel((level or settings.log_level).upper())
	if not logger.handlers:
		handler = logging.StreamHandler()
		handler.setFormatter(logging.Formatter(LOG_FORMAT))
		logger.addHandler(handler)
	return logger
