from __future__ import annotations

from .schemas import Student

BASE_CONFIDENCE = 0.5
DEGRADED_FACTOR = 0.8
# Advisory output is never reported as certain
MAX_CONFIDENCE = 0.9


def confidence_score(student: Student, degraded: bool) -> float:
	"""
	Shared by every prediction generator so confidence is comparable across
	operations. Grows with how much we know about the student; shrinks when
	the answer came from rules instead of the model.
	"""
	confidence = BASE_CONFIDENCE
	if student.grade is not None:
		confidence += 0.2
	if student.notes and len(student.notes) > 10:
		confidence += 0.1
	if student.tags:
		confidence += 0.1
	if degraded:
		confidence *= DEGRADED_FACTOR
	return round(max(0.0, min(confidence, MAX_CONFIDENCE)), 2)
