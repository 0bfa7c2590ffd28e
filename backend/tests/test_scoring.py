"""Tests for the shared confidence scorer."""

import pytest

from classroom_ai.scoring import MAX_CONFIDENCE, confidence_score
from conftest import make_student


class TestConfidenceScore:
    def test_bare_student_base_confidence(self):
        """No grade, no notes, no tags leaves only the base score."""
        student = make_student(grade=None, tags=[], notes="")
        assert confidence_score(student, degraded=False) == 0.5
        assert confidence_score(student, degraded=True) == 0.4

    def test_full_profile_caps_at_ceiling(self):
        student = make_student(grade=88, tags=["active"], notes="Participates every lesson")
        assert confidence_score(student, degraded=False) == MAX_CONFIDENCE

    def test_degraded_mode_applies_factor(self):
        student = make_student(grade=88, tags=["active"], notes="Participates every lesson")
        assert confidence_score(student, degraded=True) == 0.72

    def test_short_notes_do_not_count(self):
        """Notes must be longer than 10 characters to add confidence."""
        exactly_ten = make_student(grade=None, notes="0123456789")
        eleven = make_student(grade=None, notes="0123456789a")
        assert confidence_score(exactly_ten, degraded=False) == 0.5
        assert confidence_score(eleven, degraded=False) == 0.6

    def test_grade_zero_counts_as_present(self):
        student = make_student(grade=0)
        assert confidence_score(student, degraded=False) == 0.7

    @pytest.mark.parametrize(
        "grade,tags,notes",
        [
            (None, [], ""),
            (50, [], ""),
            (None, ["quiet"], ""),
            (None, [], "long enough notes"),
            (99, ["leader", "active"], "long enough notes"),
        ],
    )
    def test_heuristic_confidence_strictly_below_model(self, grade, tags, notes):
        student = make_student(grade=grade, tags=tags, notes=notes)
        model = confidence_score(student, degraded=False)
        heuristic = confidence_score(student, degraded=True)
        assert 0.0 <= heuristic < model <= MAX_CONFIDENCE
