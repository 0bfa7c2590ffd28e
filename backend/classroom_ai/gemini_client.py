from __future__ import annotations
import httpx
from typing import Any, Dict, Optional
from .settings import Settings, settings as default_settings

# Fixed for pedagogical consistency; not per-call parameters
MAX_OUTPUT_TOKENS = 4000
TEMPERATURE = 0.7

class GeminiClient:
	def __init__(
		self,
		api_key: Optional[str] = None,
		*,
		config: Optional[Settings] = None,
		base_url: Optional[str] = None,
		model: Optional[str] = None,
		transport: Optional[httpx.AsyncBaseTransport] = None,
	) -> None:
		config = config or default_settings
		self.api_key = api_key or config.resolved_api_key
		if not self.api_key:
			raise ValueError("GOOGLE_GENERATIVE_AI_API_KEY is not configured")
		self.model = model or config.gemini_model
		self.provider = config.gemini_provider
		if self.provider == "vertex":
			region = config.vertex_region
			project = config.vertex_project or "placeholder-project"
			# Vertex AI Generative REST endpoint
			self.base_url = base_url or (
				f"https://{region}-aiplatform.googleapis.com/v1/projects/{project}/locations/{region}/publishers/google/models/{self.model}:generateContent"
			)
		else:
			# Google AI Studio (Generative Language API)
			self.base_url = base_url or f"https://generativelanguage.googleapis.com/v1beta/models/{self.model}:generateContent"
		self.timeout = config.gemini_timeout_seconds
		self._client = httpx.AsyncClient(timeout=self.timeout, transport=transport)

	async def generate(self, prompt: str, *, system_instruction: Optional[str] = None) -> str:
		payload: Dict[str, Any] = {
			"contents": [{"role": "user", "parts": [{"text": prompt}]}],
			"generationConfig": {
				"maxOutputTokens": MAX_OUTPUT_TOKENS,
				"temperature": TEMPERATURE,
			},
		}
		if system_instruction:
			payload["systemInstruction"] = {"parts": [{"text": system_instruction}]}
		return await self._post_payload(payload)

	async def _post_payload(self, payload: Dict[str, Any]) -> str:
		# key goes in a header for both providers, never in the URL
		headers: Dict[str, str] = {"x-goog-api-key": self.api_key}
		r = await self._client.post(self.base_url, headers=headers, json=payload)
		r.raise_for_status()
		try:
			data = r.json()
			return data["candidates"][0]["content"]["parts"][0]["text"]
		except Exception:
			raise RuntimeError(f"Unexpected Gemini response: {r.text[:500]}")

	async def aclose(self) -> None:
		await self._client.aclose()
