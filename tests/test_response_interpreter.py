"""Tests for agents.optimization_agent.response_interpreter."""

import json
import time

import pytest

from agents.optimization_agent.response_interpreter import (
    FALLBACK_ACTIONS,
    FALLBACK_CATEGORY,
    ExtractionNotFound,
    NoValidCandidates,
    RecommendationCandidate,
    ResponseInterpreter,
    StructuralParseFailure,
    build_fallback_recommendation,
    interpret,
    priority_weight,
)


def assert_is_fallback(result):
    assert result.category == FALLBACK_CATEGORY
    assert result.description
    assert result.priority == "medium"
    assert result.actions == list(FALLBACK_ACTIONS)
    assert result.requires_permission is False
    assert result.is_automated is True
    assert 10 <= result.impact_score < 30


class TestExtraction:
    def test_array_embedded_in_prose(self):
        text = 'Sure! Here is my analysis: [{"a": 1}] Hope it helps.'
        assert ResponseInterpreter.extract(text) == '[{"a": 1}]'

    def test_object_when_no_array(self):
        text = 'Result -> {"a": {"b": 2}} done'
        assert ResponseInterpreter.extract(text) == '{"a": {"b": 2}}'

    def test_greedy_to_last_closing_bracket(self):
        text = 'x [1] and [2] y'
        assert ResponseInterpreter.extract(text) == '[1] and [2]'

    def test_earliest_bracket_kind_wins(self):
        text = 'note {"k": [1, 2]} end'
        assert ResponseInterpreter.extract(text) == '{"k": [1, 2]}'

    def test_no_brackets_raises(self):
        with pytest.raises(ExtractionNotFound):
            ResponseInterpreter.extract("I could not analyze the device.")

    def test_unclosed_bracket_raises(self):
        with pytest.raises(ExtractionNotFound):
            ResponseInterpreter.extract('[{"type": "Battery"')

    def test_none_raises(self):
        with pytest.raises(ExtractionNotFound):
            ResponseInterpreter.extract(None)

    def test_opener_after_last_closer_is_skipped(self):
        text = '] then { "a": 1 } and [ never closed'
        assert ResponseInterpreter.extract(text) == '{ "a": 1 }'

    def test_curly_opener_without_closer_falls_through_to_array(self):
        text = '{ broken [1, 2] tail'
        assert ResponseInterpreter.extract(text) == '[1, 2]'

    @pytest.mark.parametrize("raw", ["[" * 50_000, "{" * 50_000 + "]", "x" + "[{" * 25_000])
    def test_many_unclosed_openers_stay_fast(self, raw):
        started = time.perf_counter()
        result = interpret(raw)
        elapsed = time.perf_counter() - started
        assert_is_fallback(result)
        assert elapsed < 1.0


class TestNormalization:
    def test_strips_newlines_and_collapses_whitespace(self):
        raw = '[\r\n  {\n    "a":\t1\r  }\n]  '
        assert ResponseInterpreter.normalize(raw) == '[ { "a": 1 }]'

    def test_trims(self):
        assert ResponseInterpreter.normalize("   {}   ") == "{}"


class TestStructuralParse:
    def test_array_parses_directly(self, interpreter):
        assert interpreter.parse_structure('[{"a": 1}, {"b": 2}]') == [{"a": 1}, {"b": 2}]

    def test_single_object_is_wrapped(self, interpreter):
        assert interpreter.parse_structure('{"a": 1}') == [{"a": 1}]

    def test_missing_comma_between_objects_is_repaired(self, interpreter):
        assert interpreter.parse_structure('[{"a": 1} {"b": 2}]') == [{"a": 1}, {"b": 2}]

    def test_trailing_comma_in_array_is_repaired(self, interpreter):
        assert interpreter.parse_structure('[{"a": 1}, {"b": 2},]') == [{"a": 1}, {"b": 2}]

    def test_trailing_comma_in_object_is_repaired(self, interpreter):
        assert interpreter.parse_structure('[{"a": 1, "b": 2, }]') == [{"a": 1, "b": 2}]

    def test_adjacent_objects_without_array_are_wrapped(self, interpreter):
        assert interpreter.parse_structure('{"a": 1}{"b": 2}') == [{"a": 1}, {"b": 2}]

    def test_comma_separated_objects_without_array_are_wrapped(self, interpreter):
        assert interpreter.parse_structure('{"a": 1}, {"b": 2}') == [{"a": 1}, {"b": 2}]

    def test_unrepairable_array_raises(self, interpreter):
        with pytest.raises(StructuralParseFailure):
            interpreter.parse_structure("[{'a': 1}]")

    def test_unrepairable_object_raises(self, interpreter):
        with pytest.raises(StructuralParseFailure):
            interpreter.parse_structure('{"a": undefined}')

    def test_repair_rules_apply_in_order(self):
        assert ResponseInterpreter.repair('[{"a": 1}  {"b": 2} , ]') == '[{"a": 1},{"b": 2} ]'


class TestValidation:
    def test_valid_candidate_passes(self, interpreter, candidate):
        [result] = interpreter.validate([candidate()])
        assert result.category == "Memory Optimization"
        assert result.impact_score == 20

    @pytest.mark.parametrize(
        "overrides",
        [
            {"type": ""},
            {"description": ""},
            {"impact": "20"},
            {"impact": True},
            {"actions": "Close idle apps"},
            {"requiresPermission": "false"},
            {"isAutomated": 1},
        ],
    )
    def test_invalid_field_is_discarded(self, interpreter, candidate, overrides):
        with pytest.raises(NoValidCandidates):
            interpreter.validate([candidate(**overrides)])

    @pytest.mark.parametrize("missing", ["type", "description", "impact", "actions",
                                         "requiresPermission", "isAutomated"])
    def test_missing_required_field_is_discarded(self, interpreter, candidate, missing):
        record = candidate()
        del record[missing]
        with pytest.raises(NoValidCandidates):
            interpreter.validate([record])

    def test_priority_is_not_validated(self, interpreter, candidate):
        record = candidate()
        del record["priority"]
        [result] = interpreter.validate([record])
        assert result.priority is None

    def test_empty_actions_allowed(self, interpreter, candidate):
        [result] = interpreter.validate([candidate(actions=[])])
        assert result.actions == []

    def test_non_object_elements_are_discarded(self, interpreter, candidate):
        result = interpreter.validate([42, None, "text", candidate()])
        assert len(result) == 1

    def test_non_finite_impact_is_discarded(self, interpreter, candidate):
        with pytest.raises(NoValidCandidates):
            interpreter.validate([candidate(impact=float("nan"))])

    def test_float_impact_allowed(self, interpreter, candidate):
        [result] = interpreter.validate([candidate(impact=12.5)])
        assert result.impact_score == 12.5


class TestRanking:
    def test_priority_weights(self):
        assert priority_weight("high") == 3
        assert priority_weight("medium") == 2
        assert priority_weight("low") == 1
        assert priority_weight("HIGH") == 0
        assert priority_weight(None) == 0
        assert priority_weight(["high"]) == 0

    def test_highest_weighted_score_wins(self, interpreter, candidate):
        candidates = interpreter.validate([
            candidate(type="A", priority="low", impact=25),     # 25
            candidate(type="B", priority="medium", impact=15),  # 30
            candidate(type="C", priority="high", impact=9),     # 27
        ])
        assert interpreter.select_best(candidates).category == "B"

    def test_ties_keep_input_order(self, interpreter, candidate):
        candidates = interpreter.validate([
            candidate(type="first", priority="high", impact=10),   # 30
            candidate(type="second", priority="medium", impact=15),  # 30
            candidate(type="third", priority="low", impact=30),    # 30
        ])
        ranked = interpreter.rank(candidates)
        assert [c.category for c in ranked] == ["first", "second", "third"]

    def test_unknown_priority_loses_to_low_priority(self, interpreter, candidate):
        candidates = interpreter.validate([
            candidate(type="critical", priority="critical", impact=30),  # 0
            candidate(type="minor", priority="low", impact=1),           # 1
        ])
        assert interpreter.select_best(candidates).category == "minor"

    def test_unknown_priority_wins_when_all_scores_are_zero(self, interpreter, candidate):
        candidates = interpreter.validate([
            candidate(type="unknown", priority="urgent", impact=30),
            candidate(type="zero", priority="high", impact=0),
        ])
        assert interpreter.select_best(candidates).category == "unknown"


class TestInterpret:
    def test_single_object_fields_unchanged(self, candidate):
        record = candidate(type="Battery Management", priority="high", impact=18,
                           actions=["Dim screen", "Disable GPS"], requiresPermission=True,
                           isAutomated=False)
        result = interpret(f"Analysis complete:\n{json.dumps(record, indent=2)}\nThanks.")
        assert result.category == "Battery Management"
        assert result.description == record["description"]
        assert result.impact_score == 18
        assert result.priority == "high"
        assert result.actions == ["Dim screen", "Disable GPS"]
        assert result.requires_permission is True
        assert result.is_automated is False

    def test_high_priority_beats_larger_low_priority_impact(self):
        raw = (
            'Here you go: [{"type":"Battery","description":"Reduce drain","impact":15,'
            '"priority":"high","actions":["Dim screen"],"requiresPermission":false,"isAutomated":true},'
            '{"type":"Memory","description":"Free RAM","impact":20,"priority":"low","actions":[],'
            '"requiresPermission":false,"isAutomated":false}]'
        )
        result = interpret(raw)
        assert result.category == "Battery"
        assert result.impact_score == 15
        assert result.actions == ["Dim screen"]

    def test_missing_comma_recovers_both_elements(self, candidate):
        first = json.dumps(candidate(type="Storage", priority="low", impact=10))
        second = json.dumps(candidate(type="CPU", priority="high", impact=10))
        result = interpret(f"[{first}\n{second}]")
        assert result.category == "CPU"

    def test_trailing_comma_recovers(self, candidate):
        record = json.dumps(candidate(type="Network"))
        assert interpret(f"[{record},]").category == "Network"

    def test_no_json_returns_fallback(self):
        assert_is_fallback(interpret("Sorry, I cannot help with that."))

    def test_empty_text_returns_fallback(self):
        assert_is_fallback(interpret(""))

    def test_unparseable_json_returns_fallback(self):
        assert_is_fallback(interpret("[{type: Battery, impact: 15}]"))

    def test_all_candidates_invalid_returns_fallback(self, candidate):
        records = [candidate(type="A"), candidate(type="B")]
        for record in records:
            del record["description"]
        assert_is_fallback(interpret(json.dumps(records)))

    def test_empty_array_returns_fallback(self):
        assert_is_fallback(interpret("[]"))

    def test_idempotent_for_valid_input(self, candidate):
        raw = json.dumps([candidate(type="A", impact=5), candidate(type="B", impact=7)])
        assert interpret(raw) == interpret(raw)

    def test_repeated_fallbacks_match_except_impact(self):
        first = interpret("nothing here").model_dump(exclude={"impact_score"})
        second = interpret("nothing here").model_dump(exclude={"impact_score"})
        assert first == second

    def test_unexpected_error_returns_fallback(self, interpreter, monkeypatch):
        def boom(_text):
            raise RuntimeError("unexpected")

        monkeypatch.setattr(interpreter, "parse_candidates", boom)
        assert_is_fallback(interpreter.interpret("[]"))

    def test_result_serializes_with_wire_keys(self, candidate):
        payload = interpret(json.dumps(candidate())).model_dump(by_alias=True)
        assert set(payload) == {"type", "description", "impact", "priority", "actions",
                                "requiresPermission", "isAutomated"}


class TestFallback:
    def test_fallback_impact_stays_in_range(self):
        impacts = {build_fallback_recommendation().impact_score for _ in range(200)}
        assert all(isinstance(impact, int) and 10 <= impact < 30 for impact in impacts)

    def test_fallback_actions_are_fresh_lists(self):
        first = build_fallback_recommendation()
        first.actions.append("mutated")
        assert build_fallback_recommendation().actions == list(FALLBACK_ACTIONS)


class TestCandidateModel:
    def test_candidate_is_immutable(self, candidate):
        model = RecommendationCandidate.model_validate(candidate())
        with pytest.raises(Exception):
            model.category = "changed"

    def test_extra_keys_are_ignored(self, candidate):
        model = RecommendationCandidate.model_validate(candidate(confidence=0.9))
        assert not hasattr(model, "confidence")
