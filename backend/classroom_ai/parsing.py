from __future__ import annotations

import json
import re
from typing import Any, List, Optional, Sequence

from pydantic import Field, ValidationError, field_validator

from .errors import MalformedResponse
from .heuristics import round_half_up
from .schemas import (
	CamelModel,
	GradePrediction,
	GroupSuggestion,
	LearningInsight,
	ParentCommunication,
	RiskLevel,
	Student,
)


def extract_json(text: str) -> Any:
	"""Parse model text that should be JSON, tolerating code fences and chatter around it."""
	if not text or not text.strip():
		raise MalformedResponse("empty model response")
	try:
		return json.loads(text)
	except Exception:
		pass
	code_block = re.search(r"```(?:json)?\s*([\s\S]*?)\s*```", text)
	if code_block:
		try:
			return json.loads(code_block.group(1))
		except Exception:
			pass
	spans = []
	for open_ch, close_ch in (("[", "]"), ("{", "}")):
		first = text.find(open_ch)
		last = text.rfind(close_ch)
		if first != -1 and last > first:
			spans.append((first, last))
	# outermost structure first
	for first, last in sorted(spans):
		try:
			return json.loads(text[first : last + 1])
		except Exception:
			continue
	raise MalformedResponse("model did not return valid JSON")


def _lower(v: Any):
	return v.strip().lower() if isinstance(v, str) else v


class _PredictionPayload(CamelModel):
	predicted_grade: float = Field(ge=0, le=100)
	risk_level: RiskLevel
	interventions: List[str] = Field(min_length=1)
	reasoning: str

	@field_validator("risk_level", mode="before")
	@classmethod
	def normalize_risk(cls, v: Any):
		return _lower(v)


class _GroupPayload(CamelModel):
	students: List[str]
	reasoning: str
	effectiveness: float = Field(ge=0.0, le=1.0)
	benefits: Optional[Any] = None

	@field_validator("students", mode="before")
	@classmethod
	def ids_as_strings(cls, v: Any):
		if isinstance(v, list):
			return [str(item) for item in v]
		return v


class _InsightPayload(LearningInsight):
	@field_validator("type", mode="before")
	@classmethod
	def normalize_type(cls, v: Any):
		return _lower(v)


class _CommunicationPayload(ParentCommunication):
	@field_validator("tone", "urgency", mode="before")
	@classmethod
	def normalize_levels(cls, v: Any):
		return _lower(v)


def _as_list(data: Any, *keys: str) -> list:
	if isinstance(data, list):
		return data
	if isinstance(data, dict):
		for key in keys:
			if isinstance(data.get(key), list):
				return data[key]
	raise MalformedResponse(f"expected a JSON array, got {type(data).__name__}")


def parse_grade_prediction(text: str, student: Student, confidence: float) -> GradePrediction:
	data = extract_json(text)
	try:
		payload = _PredictionPayload.model_validate(data)
	except ValidationError as exc:
		raise MalformedResponse(f"prediction shape mismatch: {exc.error_count()} error(s)") from exc
	return GradePrediction(
		student_id=student.id,
		predicted_grade=round_half_up(payload.predicted_grade),
		confidence=confidence,
		risk_level=payload.risk_level,
		interventions=payload.interventions,
		reasoning=payload.reasoning,
	)


def parse_group_suggestions(text: str, roster: Sequence[Student], purpose: str) -> List[GroupSuggestion]:
	items = _as_list(extract_json(text), "groups")
	suggestions: List[GroupSuggestion] = []
	for index, item in enumerate(items):
		try:
			payload = _GroupPayload.model_validate(item)
		except ValidationError as exc:
			raise MalformedResponse(f"group {index + 1} shape mismatch: {exc.error_count()} error(s)") from exc
		wanted = set(payload.students)
		# ids the model invented are dropped, not reported
		members = [s for s in roster if s.id in wanted]
		if not members:
			continue
		suggestions.append(
			GroupSuggestion(
				group_id=f"ai-group-{index + 1}",
				students=members,
				reasoning=payload.reasoning,
				effectiveness=payload.effectiveness,
				purpose=purpose,
			)
		)
	if roster and not suggestions:
		raise MalformedResponse("no suggested group matched the roster")
	return suggestions


def parse_learning_insights(text: str) -> List[LearningInsight]:
	items = _as_list(extract_json(text), "insights")
	try:
		return [LearningInsight(**_InsightPayload.model_validate(item).model_dump()) for item in items]
	except ValidationError as exc:
		raise MalformedResponse(f"insight shape mismatch: {exc.error_count()} error(s)") from exc


def parse_interventions(text: str) -> List[str]:
	items = _as_list(extract_json(text), "interventions", "strategies")
	strategies = [item.strip() for item in items if isinstance(item, str) and item.strip()]
	if not strategies or len(strategies) != len(items):
		raise MalformedResponse("interventions must be a non-empty array of strings")
	return strategies


def parse_parent_communication(text: str) -> ParentCommunication:
	data = extract_json(text)
	try:
		payload = _CommunicationPayload.model_validate(data)
	except ValidationError as exc:
		raise MalformedResponse(f"communication shape mismatch: {exc.error_count()} error(s)") from exc
	return ParentCommunication(**payload.model_dump())
