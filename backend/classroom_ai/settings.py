from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import AliasChoices, Field

class Settings(BaseSettings):
	# Server-only credential is preferred; the client-exposed one is a fallback
	gemini_api_key: str | None = Field(
		default=None,
		validation_alias=AliasChoices("GOOGLE_GENERATIVE_AI_API_KEY", "GEMINI_API_KEY"),
	)
	public_gemini_api_key: str | None = Field(
		default=None,
		validation_alias=AliasChoices("NEXT_PUBLIC_GOOGLE_GENERATIVE_AI_API_KEY", "PUBLIC_GOOGLE_GENERATIVE_AI_API_KEY"),
	)
	# Provider can be "vertex" (Vertex AI Express) or "ai_studio" (Generative Language API)
	gemini_provider: str = Field(default="ai_studio", validation_alias="GEMINI_PROVIDER")
	gemini_model: str = Field(default="gemini-2.0-flash-exp", validation_alias="GEMINI_MODEL")
	# Vertex configuration
	vertex_region: str = Field(default="us-central1", validation_alias="GEMINI_VERTEX_REGION")
	vertex_project: str | None = Field(default=None, validation_alias="GEMINI_VERTEX_PROJECT")
	# Transport default only; the advisory engine enforces no timeout of its own
	gemini_timeout_seconds: float = Field(default=30.0, validation_alias="GEMINI_TIMEOUT_SECONDS")

	# Database
	database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")

	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

	@property
	def resolved_api_key(self) -> Optional[str]:
		for candidate in (self.gemini_api_key, self.public_gemini_api_key):
			if candidate and candidate.strip():
				return candidate.strip()
		return None

settings = Settings()
