"""Rule-based generators used whenever the hosted model is off or fails.

Each function produces the same shape the model path produces, using only
grade, tags and notes already present on the student record.
"""

from __future__ import annotations

import math
from typing import List, Optional, Sequence

from .schemas import (
	GradePrediction,
	GroupSuggestion,
	LearningInsight,
	ParentCommunication,
	Student,
)
from .scoring import confidence_score


RISK_TAGS = ("needs-support", "absent", "makeup-needed")
POSITIVE_TAGS = ("honor-roll", "active", "leader", "improving")

UNGRADED_BASELINE = 75
MAX_GROUPS = 4
MAX_INTERVENTIONS = 7

IMMEDIATE_INTERVENTION = "Immediate academic intervention needed"
LOW_GRADE_REASON = " Low current grade indicates need for immediate support."
HIGH_GRADE_REASON = " High performance suggests strong academic foundation."

PARENT_TALKING_POINTS = (
	"Discuss recent academic progress",
	"Review classroom behavior and engagement",
	"Plan strategies for continued success",
	"Address any concerns or questions",
)


def round_half_up(value: float) -> int:
	return int(math.floor(value + 0.5))


def has_risk_tag(student: Student) -> bool:
	return any(tag in RISK_TAGS for tag in student.tags)


def has_positive_tag(student: Student) -> bool:
	return any(tag in POSITIVE_TAGS for tag in student.tags)


def predict_grade(student: Student) -> GradePrediction:
	current = student.grade if student.grade is not None else UNGRADED_BASELINE

	# risk tags win over positive tags
	if has_risk_tag(student):
		predicted = max(current - 10, 50)
		risk_level = "high"
		interventions = [
			"Provide additional one-on-one support",
			"Check in daily for understanding",
			"Break assignments into smaller chunks",
			"Connect with family for home support",
		]
		reasoning = (
			"Student shows risk factors in their profile that may impact performance. "
			"Early intervention recommended to prevent grade decline."
		)
	elif has_positive_tag(student):
		predicted = min(current + 5, 100)
		risk_level = "low"
		interventions = ["Consider advanced challenges", "Peer tutoring opportunities", "Leadership roles in group work"]
		reasoning = (
			"Student demonstrates strong positive indicators and engagement. "
			"Consider enrichment opportunities to maintain growth trajectory."
		)
	else:
		predicted = current
		risk_level = "medium"
		interventions = ["Monitor progress regularly", "Provide consistent feedback", "Encourage active participation"]
		reasoning = (
			"Student performance appears stable based on current data. "
			"Continue current support strategies with regular monitoring."
		)

	# Applied on top of whichever tag branch ran
	if current < 70:
		interventions.insert(0, IMMEDIATE_INTERVENTION)
		reasoning += LOW_GRADE_REASON
	elif current > 90:
		reasoning += HIGH_GRADE_REASON

	return GradePrediction(
		student_id=student.id,
		predicted_grade=round_half_up(predicted),
		confidence=confidence_score(student, degraded=True),
		risk_level=risk_level,
		interventions=interventions,
		reasoning=reasoning,
	)


def suggest_groups(students: Sequence[Student], purpose: str) -> List[GroupSuggestion]:
	total = len(students)
	if total == 0:
		return []
	ordered = sorted(students, key=lambda s: s.grade or 0, reverse=True)
	group_size = math.ceil(total / MAX_GROUPS)

	groups: List[GroupSuggestion] = []
	for i in range(MAX_GROUPS):
		start = i * group_size
		if start >= total:
			break
		members = [ordered[(start + j) % total] for j in range(group_size) if start + j < total]
		if not members:
			continue

		avg_grade = sum(s.grade if s.grade is not None else UNGRADED_BASELINE for s in members) / len(members)
		has_leader = any("leader" in s.tags for s in members)
		has_support = any("needs-support" in s.tags for s in members)

		# Order matters: the average-grade check may overwrite the mix bonus
		effectiveness = 0.75
		if has_leader and has_support:
			effectiveness = 0.85
		if avg_grade > 85:
			effectiveness = 0.8

		reasoning = f"Balanced group created with mixed academic performance levels (avg: {round_half_up(avg_grade)}%). "
		if has_leader:
			reasoning += "Includes natural leader for peer support. "
		if has_support:
			reasoning += "Includes students who may benefit from collaborative learning."
		else:
			reasoning += "Students demonstrate strong independent work capabilities."

		groups.append(
			GroupSuggestion(
				group_id=f"rule-group-{i + 1}",
				students=members,
				reasoning=reasoning,
				effectiveness=effectiveness,
				purpose=purpose,
			)
		)
	return groups


def _trajectory_summary(grade: int) -> str:
	if grade >= 90:
		return "Excellent performance with consistent high achievement."
	if grade >= 80:
		return "Good performance with room for growth."
	if grade >= 70:
		return "Satisfactory performance, may benefit from additional support."
	return "Performance indicates need for immediate intervention and support."


def learning_insights(student: Student) -> List[LearningInsight]:
	insights: List[LearningInsight] = []

	if student.grade is not None:
		if student.grade >= 80:
			actions = ["Continue current strategies", "Consider enrichment opportunities"]
		else:
			actions = ["Provide additional support", "Monitor progress closely", "Consider tutoring"]
		insights.append(
			LearningInsight(
				type="trajectory",
				title="Academic Performance Analysis",
				description=f"{student.name} currently has a {student.grade}% average. {_trajectory_summary(student.grade)}",
				action_items=actions,
				confidence=0.8,
			)
		)

	if "active" in student.tags:
		insights.append(
			LearningInsight(
				type="engagement",
				title="High Engagement Level",
				description=f"{student.name} shows strong classroom engagement and participation.",
				action_items=["Leverage engagement for peer leadership", "Provide challenging tasks"],
				confidence=0.9,
			)
		)
	elif "quiet" in student.tags:
		insights.append(
			LearningInsight(
				type="engagement",
				title="Quiet Participation Style",
				description=f"{student.name} may benefit from alternative ways to demonstrate engagement.",
				action_items=["Offer written reflection opportunities", "Use small group discussions"],
				confidence=0.7,
			)
		)

	if "improving" in student.tags:
		insights.append(
			LearningInsight(
				type="behavior",
				title="Positive Growth Trajectory",
				description=f"{student.name} is showing improvement in their academic performance and behavior.",
				action_items=["Celebrate progress", "Maintain current support strategies", "Set new goals"],
				confidence=0.85,
			)
		)

	return insights


def intervention_strategies(student: Student, risk_factors: Optional[Sequence[str]] = None) -> List[str]:
	# risk_factors only steer the model prompt; the template keys off tags
	interventions = [
		"Provide additional one-on-one support during class",
		"Break down complex tasks into smaller, manageable steps",
		"Use visual aids and hands-on activities to support learning",
		"Implement regular check-ins to monitor understanding",
		"Connect with family to coordinate home support strategies",
	]
	if "needs-support" in student.tags:
		interventions.append("Consider peer tutoring or study buddy system")
	if "absent" in student.tags:
		interventions.append("Develop attendance improvement plan with family")
	if "quiet" in student.tags:
		interventions.append("Provide alternative ways to demonstrate understanding")
	return interventions[:MAX_INTERVENTIONS]


def parent_communication(student: Student, context: str = "") -> ParentCommunication:
	positive = has_positive_tag(student)
	concern = has_risk_tag(student)

	tone = "neutral"
	urgency = "low"
	if concern:
		tone = "concern"
		urgency = "medium"
	elif positive:
		tone = "positive"

	name = student.name
	if positive:
		opening = f"{name} has been doing excellent work and showing great engagement in class."
	elif concern:
		opening = f"I've noticed some areas where {name} could benefit from additional support."
	else:
		opening = f"{name} is making steady progress in their learning."
	notes_line = f"Additional notes: {student.notes}" if student.notes else ""

	content = (
		"Dear Parent/Guardian,\n\n"
		f"I wanted to reach out regarding {name}'s recent progress in class. {opening}\n\n"
		f"{notes_line}\n\n"
		f"I'd be happy to discuss {name}'s progress in more detail. Please feel free to reach out "
		"if you have any questions or would like to schedule a conference.\n\n"
		"Best regards,\n"
		"[Your Name]"
	)

	return ParentCommunication(
		subject=f"Update on {name}'s Progress",
		content=content,
		tone=tone,
		urgency=urgency,
		talking_points=list(PARENT_TALKING_POINTS),
	)
