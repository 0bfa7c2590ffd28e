from __future__ import annotations

import re
from typing import Any, Optional

import httpx

_SECRET_PARAM = re.compile(r"(?i)\b(key|api_key|access_token)=[^&\s'\"]+")


def redact_secrets(text: Optional[str]) -> Optional[str]:
	"""Mask credential query parameters (``key=...``) in provider error text."""
	if not text:
		return text
	return _SECRET_PARAM.sub(lambda m: f"{m.group(1)}=***", text)


class AdvisorError(Exception):
	"""Failure on the model path. Never reaches callers of the advisory operations.

	``str(error)`` is always the user-safe message; provider text is kept,
	redacted, in ``detail`` for logs only.
	"""

	kind = "unknown"
	user_message = "AI service temporarily unavailable. Please try again."

	def __init__(self, detail: Optional[str] = None) -> None:
		super().__init__(self.user_message)
		self.detail = redact_secrets(detail)


class ModelUnavailable(AdvisorError):
	kind = "unavailable"
	user_message = "Google Gemini API key not configured"


class ModelQuotaExceeded(AdvisorError):
	kind = "quota"
	user_message = "AI service is temporarily at capacity. Please try again in a few minutes."


class ModelAuthError(AdvisorError):
	kind = "auth_config"
	user_message = "AI service configuration error. Please check your API key."


class MalformedResponse(AdvisorError):
	kind = "malformed_response"
	user_message = "AI service returned an unexpected response."


class ModelServiceError(AdvisorError):
	kind = "unknown"


class StoreError(Exception):
	pass


class StudentNotFound(StoreError):
	pass


class GroupNotFound(StoreError):
	pass


_QUOTA_STATUSES = {"RESOURCE_EXHAUSTED"}
_AUTH_STATUSES = {"UNAUTHENTICATED", "PERMISSION_DENIED"}


def _provider_error(response: httpx.Response) -> dict[str, Any]:
	try:
		body = response.json()
	except Exception:
		return {}
	error = body.get("error") if isinstance(body, dict) else None
	return error if isinstance(error, dict) else {}


def _classify_status(response: httpx.Response) -> Optional[type[AdvisorError]]:
	if response.status_code == 429:
		return ModelQuotaExceeded
	if response.status_code in (401, 403):
		return ModelAuthError
	error = _provider_error(response)
	status = str(error.get("status") or "")
	if status in _QUOTA_STATUSES:
		return ModelQuotaExceeded
	if status in _AUTH_STATUSES:
		return ModelAuthError
	if status == "INVALID_ARGUMENT" and "api key" in str(error.get("message") or "").lower():
		return ModelAuthError
	return None


def classify_model_error(exc: BaseException) -> AdvisorError:
	"""Map a transport/provider failure onto one of the advisory error kinds.

	Structured HTTP status and Gemini error codes are checked first. The text
	match afterwards is best effort: it depends on provider wording.
	"""
	if isinstance(exc, AdvisorError):
		return exc
	detail = str(exc)
	if isinstance(exc, httpx.HTTPStatusError):
		error_cls = _classify_status(exc.response)
		if error_cls is not None:
			return error_cls(detail)
	lowered = detail.lower()
	if "quota" in lowered or "rate limit" in lowered:
		return ModelQuotaExceeded(detail)
	if "api key" in lowered:
		return ModelAuthError(detail)
	return ModelServiceError(detail)
