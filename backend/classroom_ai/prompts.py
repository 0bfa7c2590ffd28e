from __future__ import annotations

import json
from typing import Any, Optional, Sequence

from .schemas import Student


PREDICTION_SYSTEM = (
	"You are an expert educational AI that analyzes student data to provide accurate predictions "
	"and helpful interventions. Always be constructive and focus on student success."
)
GROUPING_SYSTEM = (
	"You are an expert in educational psychology and group dynamics. Create balanced, effective "
	"student groups that promote learning and positive social interaction."
)
COMMUNICATION_SYSTEM = (
	"You are an experienced teacher who writes thoughtful, professional communications to parents. "
	"Be positive, specific, and actionable in your messaging."
)
TRAJECTORY_SYSTEM = (
	"You are an educational data analyst who provides actionable insights about student learning "
	"patterns and development."
)
INTERVENTION_SYSTEM = (
	"You are an expert in educational interventions and student support strategies. "
	"Focus on positive, research-based approaches."
)

_JSON_ONLY = "Return ONLY the JSON, no markdown, no extra commentary."


def _grade_label(student: Student) -> str:
	return str(student.grade) if student.grade is not None else "No grade yet"


def _profile_lines(student: Student) -> str:
	return (
		f"- Grade: {_grade_label(student)}\n"
		f"- Notes: {student.notes}\n"
		f"- Tags: {', '.join(student.tags)}\n"
	)


def build_prediction_prompt(student: Student, context: Optional[str]) -> str:
	return (
		"Analyze this student's academic profile and predict their performance on the next assignment:\n\n"
		f"Student: {student.name}\n"
		f"Current Grade: {_grade_label(student)}\n"
		f"Notes: {student.notes}\n"
		f"Tags: {', '.join(student.tags)}\n"
		f"Assignment Context: {context or 'General assignment'}\n\n"
		"Based on this information, provide:\n"
		"1. Predicted grade (0-100)\n"
		"2. Risk level (low/medium/high)\n"
		"3. Specific intervention strategies\n"
		"4. Reasoning for the prediction\n\n"
		"Format as JSON with keys: predictedGrade, riskLevel, interventions (array), reasoning\n"
		f"{_JSON_ONLY}"
	)


def build_grouping_prompt(students: Sequence[Student], purpose: str) -> str:
	profiles = [
		{"id": s.id, "name": s.name, "grade": s.grade, "tags": list(s.tags), "notes": s.notes}
		for s in students
	]
	return (
		f"Create optimal student groups for {purpose} work:\n\n"
		f"Students: {json.dumps(profiles, indent=2)}\n\n"
		"Consider:\n"
		"- Academic performance balance\n"
		"- Learning styles and personalities (inferred from tags/notes)\n"
		"- Social dynamics\n"
		"- Peer tutoring opportunities\n\n"
		"Create 3-4 groups of 3-5 students each. For each group, provide:\n"
		"1. Student IDs\n"
		"2. Reasoning for the composition\n"
		"3. Effectiveness score (0-1)\n"
		"4. Specific benefits of this grouping\n\n"
		"Format as JSON array with keys: students (array of IDs), reasoning, effectiveness, benefits\n"
		f"{_JSON_ONLY}"
	)


def build_communication_prompt(student: Student, context: str) -> str:
	return (
		f"Generate a personalized communication for {student.name}'s parent/guardian:\n\n"
		"Student Profile:\n"
		f"- Name: {student.name}\n"
		f"{_profile_lines(student)}\n"
		f"Context: {context}\n\n"
		"Create a professional, warm communication that includes:\n"
		"1. Appropriate subject line\n"
		"2. Email content (2-3 paragraphs)\n"
		"3. Tone assessment (positive/concern/neutral)\n"
		"4. Urgency level (low/medium/high)\n"
		"5. Key talking points for follow-up\n\n"
		"Format as JSON with keys: subject, content, tone, urgency, talkingPoints (array)\n"
		f"{_JSON_ONLY}"
	)


def build_trajectory_prompt(student: Student, historical_data: Optional[Sequence[Any]]) -> str:
	return (
		f"Analyze the learning trajectory for {student.name}:\n\n"
		"Current Status:\n"
		f"{_profile_lines(student)}\n"
		f"Historical Data: {json.dumps(list(historical_data or []), indent=2, default=str)}\n\n"
		"Provide insights about:\n"
		"1. Learning velocity and patterns\n"
		"2. Engagement trends\n"
		"3. Behavioral observations\n"
		"4. Social development\n\n"
		"For each insight, include:\n"
		"- type (trajectory/engagement/behavior/social)\n"
		"- title (brief summary)\n"
		"- description (detailed analysis)\n"
		"- actionItems (specific recommendations)\n"
		"- confidence (0-1)\n\n"
		"Format as JSON array with these keys.\n"
		f"{_JSON_ONLY}"
	)


def build_intervention_prompt(student: Student, risk_factors: Sequence[str]) -> str:
	return (
		f"Create specific intervention strategies for {student.name}:\n\n"
		"Student Profile:\n"
		f"{_profile_lines(student)}\n"
		f"Risk Factors: {', '.join(risk_factors)}\n\n"
		"Provide 5-7 specific, actionable intervention strategies that are:\n"
		"- Personalized to this student\n"
		"- Practical for classroom implementation\n"
		"- Evidence-based\n"
		"- Positive and supportive\n\n"
		"Return as a JSON array of strings.\n"
		f"{_JSON_ONLY}"
	)
