from __future__ import annotations

from datetime import datetime
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


RiskLevel = Literal["low", "medium", "high"]
GroupPurpose = Literal["collaborative", "peer_tutoring", "balanced", "challenge"]
InsightType = Literal["trajectory", "engagement", "behavior", "social"]
Tone = Literal["positive", "concern", "neutral"]
Urgency = Literal["low", "medium", "high"]
Mood = Literal["happy", "neutral", "sad", "frustrated", "tired"]

GROUP_PURPOSES: tuple[str, ...] = ("collaborative", "peer_tutoring", "balanced", "challenge")
DEFAULT_AVATAR = "/placeholder.svg?height=40&width=40"


class CamelModel(BaseModel):
	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ValueModel(CamelModel):
	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


# ---- Store entities (read-only to the advisory engine) ----

class SeatPosition(ValueModel):
	x: float
	y: float


class Student(ValueModel):
	id: str
	name: str
	email: str = ""
	grade: Optional[int] = Field(default=None, ge=0, le=100)
	notes: str = ""
	tags: List[str] = Field(default_factory=list)
	group_id: Optional[str] = None
	position: Optional[SeatPosition] = None
	avatar: str = DEFAULT_AVATAR

	@field_validator("notes", mode="before")
	@classmethod
	def _coerce_notes(cls, v: Any):
		return v or ""

	@field_validator("tags", mode="before")
	@classmethod
	def _dedupe_tags(cls, v: Any):
		if v is None:
			return []
		seen: list[str] = []
		for tag in v:
			if tag not in seen:
				seen.append(tag)
		return seen


class Group(ValueModel):
	id: str
	name: str
	color: str
	# derived from students whose group_id matches; never stored
	student_ids: List[str] = Field(default_factory=list)


# ---- Advisory outputs ----

class GradePrediction(ValueModel):
	student_id: str
	predicted_grade: int = Field(ge=0, le=100)
	confidence: float = Field(ge=0.0, le=1.0)
	risk_level: RiskLevel
	interventions: List[str]
	reasoning: str


class GroupSuggestion(ValueModel):
	group_id: str
	students: List[Student]
	reasoning: str
	effectiveness: float = Field(ge=0.0, le=1.0)
	purpose: GroupPurpose


class LearningInsight(ValueModel):
	type: InsightType
	title: str
	description: str
	action_items: List[str]
	confidence: float = Field(ge=0.0, le=1.0)


class ParentCommunication(ValueModel):
	subject: str
	content: str
	tone: Tone
	urgency: Urgency
	talking_points: List[str]


class AdvisorStatus(ValueModel):
	available: bool
	message: str


class ClassroomReport(ValueModel):
	predictions: List[GradePrediction]
	groups: List[GroupSuggestion]
	insights: List[LearningInsight]


# ---- Store requests ----

class StudentCreate(CamelModel):
	name: str = Field(min_length=1)
	email: str = ""
	grade: Optional[int] = Field(default=None, ge=0, le=100)
	notes: str = ""
	tags: List[str] = Field(default_factory=list)
	group_id: Optional[str] = None
	position: Optional[SeatPosition] = None
	avatar: Optional[str] = None


class StudentUpdate(CamelModel):
	name: Optional[str] = None
	email: Optional[str] = None
	grade: Optional[int] = Field(default=None, ge=0, le=100)
	notes: Optional[str] = None
	tags: Optional[List[str]] = None
	group_id: Optional[str] = None
	position: Optional[SeatPosition] = None


class GroupMoveRequest(CamelModel):
	# "ungrouped" clears the assignment
	group_id: str


class GroupCreate(CamelModel):
	name: str = Field(min_length=1)
	color: str = "#3b82f6"


class GroupUpdate(CamelModel):
	name: Optional[str] = None
	color: Optional[str] = None


class MoodCheckCreate(CamelModel):
	student_id: str
	mood: Mood
	energy: int = Field(default=3, ge=1, le=5)
	stress: int = Field(default=2, ge=1, le=5)
	notes: str = ""


class MoodCheckOut(ValueModel):
	id: str
	student_id: str
	mood: Mood
	energy: int
	stress: int
	notes: str
	created_at: datetime


# ---- Advisory requests ----

class RosterRequest(CamelModel):
	# None means "use the stored roster"
	students: Optional[List[Student]] = None


class PredictionRequest(RosterRequest):
	context: Optional[str] = None


class GroupingRequest(RosterRequest):
	purpose: GroupPurpose = "collaborative"


class StudentRequest(CamelModel):
	student_id: Optional[str] = None
	student: Optional[Student] = None


class TrajectoryRequest(StudentRequest):
	historical_data: Optional[List[Any]] = None


class InterventionRequest(StudentRequest):
	risk_factors: List[str] = Field(default_factory=list)


class CommunicationRequest(StudentRequest):
	context: str = ""


class GenerateAllRequest(RosterRequest):
	context: Optional[str] = "Upcoming assessment"
	purpose: GroupPurpose = "collaborative"
	insight_limit: int = Field(default=3, ge=0)
