from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Awaitable, Callable, Generic, List, Literal, Optional, Protocol, Sequence, TypeVar

from . import heuristics, prompts
from .capability import ModelCapability, detect_capability
from .errors import AdvisorError, ModelServiceError, ModelUnavailable
from .invoker import ModelInvoker
from .parsing import (
	parse_grade_prediction,
	parse_group_suggestions,
	parse_interventions,
	parse_learning_insights,
	parse_parent_communication,
)
from .schemas import (
	GROUP_PURPOSES,
	AdvisorStatus,
	ClassroomReport,
	GradePrediction,
	GroupSuggestion,
	LearningInsight,
	ParentCommunication,
	Student,
)
from .scoring import confidence_score
from .settings import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Invoker(Protocol):
	async def invoke(self, prompt: str, system_instruction: str) -> str: ...


@dataclass(frozen=True)
class AdvisoryOutcome(Generic[T]):
	"""A result plus the path that produced it. `error` is set when the model path was tried and failed."""

	value: T
	source: Literal["model", "heuristic"]
	error: Optional[AdvisorError] = None

	@property
	def from_model(self) -> bool:
		return self.source == "model"


def normalize_purpose(purpose: Optional[str]) -> str:
	if purpose in GROUP_PURPOSES:
		return purpose
	logger.warning("Unknown group purpose %r; using 'collaborative'", purpose)
	return "collaborative"


class ClassroomAdvisor:
	"""
	Public entry point for AI-assisted pedagogy.

	Every operation tries the hosted model when the capability allows it and
	falls back to the rule-based generators on any model-path failure. None of
	the operations raise on model trouble; callers always get a typed result.
	"""

	def __init__(
		self,
		capability: ModelCapability,
		invoker: Optional[Invoker] = None,
		*,
		config: Optional[Settings] = None,
	) -> None:
		self.capability = capability
		self.invoker: Invoker = invoker or ModelInvoker(capability, config=config)

	@property
	def available(self) -> bool:
		return self.capability.available

	def get_status(self) -> AdvisorStatus:
		if self.available:
			return AdvisorStatus(
				available=True,
				message="AI features fully available with Google Gemini integration",
			)
		return AdvisorStatus(
			available=False,
			message="AI features running in demo mode. Add GOOGLE_GENERATIVE_AI_API_KEY for full functionality.",
		)

	async def _run(
		self,
		operation: str,
		model_call: Callable[[], Awaitable[T]],
		heuristic_call: Callable[[], T],
		*,
		subject: Optional[str] = None,
	) -> AdvisoryOutcome[T]:
		if not self.available:
			return AdvisoryOutcome(heuristic_call(), "heuristic")
		try:
			return AdvisoryOutcome(await model_call(), "model")
		except AdvisorError as exc:
			error = exc
		except Exception as exc:
			error = ModelServiceError(f"{type(exc).__name__}: {exc}")
		if isinstance(error, ModelUnavailable):
			logger.debug("%s: model unavailable, using rules", operation)
		else:
			logger.warning(
				"%s failed on the model path%s (%s): %s; falling back to rules",
				operation,
				f" for {subject}" if subject else "",
				error.kind,
				error.detail or error,
			)
		return AdvisoryOutcome(heuristic_call(), "heuristic", error)

	# ---- grade predictions ----

	async def _model_prediction(self, student: Student, context: Optional[str]) -> GradePrediction:
		text = await self.invoker.invoke(prompts.build_prediction_prompt(student, context), prompts.PREDICTION_SYSTEM)
		return parse_grade_prediction(text, student, confidence_score(student, degraded=False))

	async def predict_grade_outcomes(
		self, students: Sequence[Student], context: Optional[str] = None
	) -> List[AdvisoryOutcome[GradePrediction]]:
		logger.info(
			"Generating predictions for %d students in %s mode",
			len(students),
			"AI" if self.available else "Demo",
		)
		outcomes: List[AdvisoryOutcome[GradePrediction]] = []
		# one student failing only costs that student its model result
		for student in students:
			outcomes.append(
				await self._run(
					"predict_grades",
					lambda s=student: self._model_prediction(s, context),
					lambda s=student: heuristics.predict_grade(s),
					subject=student.id,
				)
			)
		return outcomes

	async def predict_grades(self, students: Sequence[Student], context: Optional[str] = None) -> List[GradePrediction]:
		return [o.value for o in await self.predict_grade_outcomes(students, context)]

	# ---- group suggestions ----

	async def _model_groups(self, students: Sequence[Student], purpose: str) -> List[GroupSuggestion]:
		text = await self.invoker.invoke(prompts.build_grouping_prompt(students, purpose), prompts.GROUPING_SYSTEM)
		return parse_group_suggestions(text, students, purpose)

	async def suggest_groups_outcome(
		self, students: Sequence[Student], purpose: str = "collaborative"
	) -> AdvisoryOutcome[List[GroupSuggestion]]:
		purpose = normalize_purpose(purpose)
		return await self._run(
			"suggest_optimal_groups",
			lambda: self._model_groups(students, purpose),
			lambda: heuristics.suggest_groups(students, purpose),
		)

	async def suggest_optimal_groups(
		self, students: Sequence[Student], purpose: str = "collaborative"
	) -> List[GroupSuggestion]:
		return (await self.suggest_groups_outcome(students, purpose)).value

	# ---- learning trajectory ----

	async def _model_insights(self, student: Student, historical_data: Optional[Sequence[Any]]) -> List[LearningInsight]:
		text = await self.invoker.invoke(
			prompts.build_trajectory_prompt(student, historical_data), prompts.TRAJECTORY_SYSTEM
		)
		return parse_learning_insights(text)

	async def trajectory_outcome(
		self, student: Student, historical_data: Optional[Sequence[Any]] = None
	) -> AdvisoryOutcome[List[LearningInsight]]:
		return await self._run(
			"analyze_learning_trajectory",
			lambda: self._model_insights(student, historical_data),
			lambda: heuristics.learning_insights(student),
			subject=student.id,
		)

	async def analyze_learning_trajectory(
		self, student: Student, historical_data: Optional[Sequence[Any]] = None
	) -> List[LearningInsight]:
		return (await self.trajectory_outcome(student, historical_data)).value

	# ---- interventions ----

	async def _model_interventions(self, student: Student, risk_factors: Sequence[str]) -> List[str]:
		text = await self.invoker.invoke(
			prompts.build_intervention_prompt(student, risk_factors), prompts.INTERVENTION_SYSTEM
		)
		return parse_interventions(text)

	async def interventions_outcome(
		self, student: Student, risk_factors: Optional[Sequence[str]] = None
	) -> AdvisoryOutcome[List[str]]:
		risk_factors = list(risk_factors or [])
		return await self._run(
			"generate_intervention_strategies",
			lambda: self._model_interventions(student, risk_factors),
			lambda: heuristics.intervention_strategies(student, risk_factors),
			subject=student.id,
		)

	async def generate_intervention_strategies(
		self, student: Student, risk_factors: Optional[Sequence[str]] = None
	) -> List[str]:
		return (await self.interventions_outcome(student, risk_factors)).value

	# ---- parent communication ----

	async def _model_communication(self, student: Student, context: str) -> ParentCommunication:
		text = await self.invoker.invoke(
			prompts.build_communication_prompt(student, context), prompts.COMMUNICATION_SYSTEM
		)
		return parse_parent_communication(text)

	async def communication_outcome(self, student: Student, context: str = "") -> AdvisoryOutcome[ParentCommunication]:
		return await self._run(
			"generate_parent_communication",
			lambda: self._model_communication(student, context),
			lambda: heuristics.parent_communication(student, context),
			subject=student.id,
		)

	async def generate_parent_communication(self, student: Student, context: str = "") -> ParentCommunication:
		return (await self.communication_outcome(student, context)).value

	# ---- everything at once ----

	async def generate_all(
		self,
		students: Sequence[Student],
		context: Optional[str] = "Upcoming assessment",
		purpose: str = "collaborative",
		insight_limit: int = 3,
	) -> ClassroomReport:
		async def insights_for_first() -> List[LearningInsight]:
			batches = await asyncio.gather(
				*(self.analyze_learning_trajectory(s) for s in students[:insight_limit])
			)
			return [insight for batch in batches for insight in batch]

		predictions, groups, insights = await asyncio.gather(
			self.predict_grades(students, context),
			self.suggest_optimal_groups(students, purpose),
			insights_for_first(),
		)
		return ClassroomReport(predictions=predictions, groups=groups, insights=insights)


def create_advisor(config: Optional[Settings] = None, *, invoker: Optional[Invoker] = None) -> ClassroomAdvisor:
	return ClassroomAdvisor(detect_capability(config), invoker=invoker, config=config)


@lru_cache(maxsize=1)
def get_advisor() -> ClassroomAdvisor:
	"""Process-wide advisor; `reset_advisor()` re-runs capability detection."""
	return create_advisor()


def reset_advisor() -> None:
	get_advisor.cache_clear()
