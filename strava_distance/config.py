from __future__ import annotations

import logging
from dataclasses import dataclass
from os import getenv
from pathlib import Path

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_PER_PAGE = 200  # Strava max
DEFAULT_TIMEOUT = 30.0


@dataclass
class AppConfig:
	"""Application configuration for the Strava distance client.

	Attributes
	----------
	client_id: str | None
		Strava application client id (``auth`` only).
	client_secret: str | None
		Strava application client secret (``auth`` only).
	access_token: str | None
		OAuth access token used as bearer credential (``fetch`` only).
	per_page: int
		Activities requested per page, 1..200.
	timeout: float
		Per-request timeout in seconds.
	max_retries: int
		Retries on network-layer failures; 0 means a single attempt.
	log_file: Path | None
		Optional path for a DEBUG-level log file.
	"""
	client_id: str | None = None
	client_secret: str | None = None
	access_token: str | None = None
	per_page: int = DEFAULT_PER_PAGE
	timeout: float = DEFAULT_TIMEOUT
	max_retries: int = 0
	log_file: Path | None = None

	@classmethod
	def from_env(cls) -> "AppConfig":
		"""Build a config from ``STRAVA_*`` environment variables.

		Call ``dotenv.load_dotenv`` first if values should come from a ``.env`` file.
		"""
		log_file = getenv("STRAVA_LOG_FILE")
		return cls(
			client_id=getenv("STRAVA_CLIENT_ID") or None,
			client_secret=getenv("STRAVA_CLIENT_SECRET") or None,
			access_token=getenv("STRAVA_ACCESS_TOKEN") or None,
			per_page=_env_number("STRAVA_PER_PAGE", int, DEFAULT_PER_PAGE, positive=True),
			timeout=_env_number("STRAVA_TIMEOUT", float, DEFAULT_TIMEOUT, positive=True),
			max_retries=_env_number("STRAVA_MAX_RETRIES", int, 0),
			log_file=Path(log_file) if log_file else None,
		)


def _env_number(name: str, kind: type, default, positive: bool = False):
	raw = getenv(name)
	if raw is None or not raw.strip():
		return default
	try:
		value = kind(raw.strip())
	except ValueError:
		raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None
	if positive and value <= 0:
		raise ConfigurationError(f"{name} must be greater than zero, got {raw!r}")
	if value < 0:
		raise ConfigurationError(f"{name} must not be negative, got {raw!r}")
	logger.debug("Using %s=%s from environment", name, value)
	return value
