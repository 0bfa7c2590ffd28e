from __future__ import annotations

from typing import Callable, Optional

from .capability import ModelCapability
from .errors import AdvisorError, ModelUnavailable, classify_model_error
from .gemini_client import GeminiClient
from .settings import Settings

ClientFactory = Callable[[], GeminiClient]


class ModelInvoker:
	"""One prompt in, raw model text out. No retries here; fallback belongs to the advisor.

	Failures are classified but not logged; the advisor logs them once with
	the operation and student they belong to.
	"""

	def __init__(
		self,
		capability: ModelCapability,
		*,
		config: Optional[Settings] = None,
		client_factory: Optional[ClientFactory] = None,
		model: Optional[str] = None,
	) -> None:
		self.capability = capability
		self.config = config
		self._client_factory = client_factory or (
			lambda: GeminiClient(api_key=capability.api_key, config=config, model=model)
		)

	async def invoke(self, prompt: str, system_instruction: str) -> str:
		if not self.capability.available:
			raise ModelUnavailable()
		client: Optional[GeminiClient] = None
		try:
			client = self._client_factory()
			return await client.generate(prompt, system_instruction=system_instruction)
		except AdvisorError:
			raise
		except Exception as exc:
			raise classify_model_error(exc) from exc
		finally:
			if client is not None:
				await client.aclose()
