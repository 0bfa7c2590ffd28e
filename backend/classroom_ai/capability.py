from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)

# Anything shorter is a placeholder or a truncated paste, never a real key
MIN_API_KEY_LENGTH = 20


@dataclass(frozen=True)
class ModelCapability:
	"""Whether the hosted model may be called, decided once per advisor."""

	available: bool
	api_key: Optional[str] = None
	source: Optional[str] = None  # "server" / "client"

	@property
	def mode(self) -> str:
		return "Full AI Mode" if self.available else "Demo Mode"

	def __repr__(self) -> str:
		# keep the credential out of logs and tracebacks
		return f"ModelCapability(available={self.available}, source={self.source!r})"


def capability_from_keys(server_key: Optional[str], client_key: Optional[str] = None) -> ModelCapability:
	key: Optional[str] = None
	source: Optional[str] = None
	if server_key and server_key.strip():
		key, source = server_key.strip(), "server"
	elif client_key and client_key.strip():
		key, source = client_key.strip(), "client"

	if key is None:
		return ModelCapability(available=False)
	if len(key) < MIN_API_KEY_LENGTH:
		logger.warning("Google Gemini API key format appears invalid (source=%s)", source)
		return ModelCapability(available=False, source=source)
	return ModelCapability(available=True, api_key=key, source=source)


def detect_capability(config: Optional[Settings] = None) -> ModelCapability:
	config = config or default_settings
	capability = capability_from_keys(config.gemini_api_key, config.public_gemini_api_key)
	logger.info("AI Service initialized: %s", capability.mode)
	return capability
