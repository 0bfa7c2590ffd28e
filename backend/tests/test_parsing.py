"""Tests for model-output extraction and validation."""

import pytest

from classroom_ai.errors import MalformedResponse
from classroom_ai.parsing import (
    extract_json,
    parse_grade_prediction,
    parse_group_suggestions,
    parse_interventions,
    parse_learning_insights,
    parse_parent_communication,
)
from conftest import make_student


class TestExtractJson:
    def test_plain_json(self):
        assert extract_json('{"a": 1}') == {"a": 1}

    def test_fenced_block(self):
        text = 'Here you go:\n```json\n{"predictedGrade": 81}\n```\nHope that helps.'
        assert extract_json(text) == {"predictedGrade": 81}

    def test_chatter_around_array(self):
        assert extract_json('Sure! ["one", "two"] Let me know.') == ["one", "two"]

    def test_object_containing_array_is_not_cut(self):
        text = 'Result: {"interventions": ["a", "b"], "reasoning": "x"}'
        assert extract_json(text) == {"interventions": ["a", "b"], "reasoning": "x"}

    @pytest.mark.parametrize("text", ["", "   ", "no json here", "{broken", "[1, 2"])
    def test_unparseable(self, text):
        with pytest.raises(MalformedResponse):
            extract_json(text)


class TestParseGradePrediction:
    def test_valid_payload(self):
        student = make_student(student_id="s9")
        text = '{"predictedGrade": 84.5, "riskLevel": "Low", "interventions": ["Keep going"], "reasoning": "Solid"}'
        prediction = parse_grade_prediction(text, student, confidence=0.9)

        assert prediction.student_id == "s9"
        assert prediction.predicted_grade == 85
        assert prediction.risk_level == "low"
        assert prediction.confidence == 0.9
        assert prediction.interventions == ["Keep going"]

    @pytest.mark.parametrize(
        "text",
        [
            '{"predictedGrade": 140, "riskLevel": "low", "interventions": ["x"], "reasoning": "r"}',
            '{"predictedGrade": 80, "riskLevel": "extreme", "interventions": ["x"], "reasoning": "r"}',
            '{"predictedGrade": 80, "riskLevel": "low", "interventions": [], "reasoning": "r"}',
            '{"riskLevel": "low", "interventions": ["x"], "reasoning": "r"}',
            '["not", "an", "object"]',
        ],
    )
    def test_invalid_payloads(self, text):
        with pytest.raises(MalformedResponse):
            parse_grade_prediction(text, make_student(), confidence=0.5)


class TestParseGroupSuggestions:
    def setup_method(self):
        self.roster = [make_student(student_id=sid, name=sid.upper()) for sid in ("s1", "s2", "s3", "s4")]

    def test_maps_ids_to_roster_students(self):
        text = """
        [
          {"students": ["s1", "s3"], "reasoning": "mix", "effectiveness": 0.9, "benefits": ["pairing"]},
          {"students": ["s2", "s4"], "reasoning": "mix", "effectiveness": 0.7}
        ]
        """
        groups = parse_group_suggestions(text, self.roster, "balanced")

        assert [g.group_id for g in groups] == ["ai-group-1", "ai-group-2"]
        assert [s.id for s in groups[0].students] == ["s1", "s3"]
        assert groups[1].purpose == "balanced"
        assert groups[0].effectiveness == 0.9

    def test_unknown_ids_dropped(self):
        text = '[{"students": ["s1", "ghost"], "reasoning": "r", "effectiveness": 0.8}]'
        groups = parse_group_suggestions(text, self.roster, "collaborative")
        assert [s.id for s in groups[0].students] == ["s1"]

    def test_group_of_only_unknown_ids_is_skipped(self):
        text = """[
            {"students": ["ghost"], "reasoning": "r", "effectiveness": 0.8},
            {"students": ["s2"], "reasoning": "r", "effectiveness": 0.8}
        ]"""
        groups = parse_group_suggestions(text, self.roster, "collaborative")
        assert len(groups) == 1
        assert groups[0].group_id == "ai-group-2"

    @pytest.mark.parametrize(
        "text",
        ["[]", '[{"students": ["x1", "x2"], "reasoning": "r", "effectiveness": 0.8}]'],
    )
    def test_nothing_matching_roster_is_malformed(self, text):
        with pytest.raises(MalformedResponse):
            parse_group_suggestions(text, self.roster, "collaborative")

    def test_empty_reply_for_empty_roster(self):
        assert parse_group_suggestions("[]", [], "collaborative") == []

    def test_wrapped_in_groups_key(self):
        text = '{"groups": [{"students": [1, "s2"], "reasoning": "r", "effectiveness": 0.5}]}'
        groups = parse_group_suggestions(text, self.roster, "challenge")
        assert [s.id for s in groups[0].students] == ["s2"]

    def test_effectiveness_out_of_range(self):
        text = '[{"students": ["s1"], "reasoning": "r", "effectiveness": 1.5}]'
        with pytest.raises(MalformedResponse):
            parse_group_suggestions(text, self.roster, "collaborative")


class TestParseLearningInsights:
    def test_valid(self):
        text = """[{"type": "Engagement", "title": "Active", "description": "Speaks up",
                    "actionItems": ["Give roles"], "confidence": 0.8}]"""
        insights = parse_learning_insights(text)
        assert insights[0].type == "engagement"
        assert insights[0].action_items == ["Give roles"]

    def test_unknown_type(self):
        text = '[{"type": "mood", "title": "t", "description": "d", "actionItems": [], "confidence": 0.5}]'
        with pytest.raises(MalformedResponse):
            parse_learning_insights(text)

    def test_empty_array_is_valid(self):
        assert parse_learning_insights("[]") == []


class TestParseInterventions:
    def test_valid(self):
        assert parse_interventions('["Daily check-in", " Seat near front "]') == ["Daily check-in", "Seat near front"]

    def test_wrapped(self):
        assert parse_interventions('{"strategies": ["a"]}') == ["a"]

    @pytest.mark.parametrize("text", ["[]", '["ok", 3]', '["ok", ""]', '{"other": 1}'])
    def test_invalid(self, text):
        with pytest.raises(MalformedResponse):
            parse_interventions(text)


class TestParseParentCommunication:
    def test_valid(self):
        text = """{"subject": "Hello", "content": "Dear parent", "tone": "Positive",
                   "urgency": "LOW", "talkingPoints": ["Progress"]}"""
        message = parse_parent_communication(text)
        assert message.tone == "positive"
        assert message.urgency == "low"
        assert message.talking_points == ["Progress"]

    def test_invalid_urgency(self):
        text = '{"subject": "s", "content": "c", "tone": "neutral", "urgency": "now", "talkingPoints": []}'
        with pytest.raises(MalformedResponse):
            parse_parent_communication(text)
