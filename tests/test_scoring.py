"""Tests for the scoring engine: category scores, levels, fallback persona, id normalization."""

import pytest

from core.questionnaire import QUESTIONS, CATEGORIES, COMPLEXION, HAIR, STYLING, SOCIAL
from core.scoring import (
    RED, YELLOW, GREEN, compute_summary, category_level, level_thresholds,
    compute_fallback_persona, normalize_persona_id, max_total_score, category_max_score,
)
from core.personas import PERSONA_IDS, DEFAULT_PERSONA_ID
from tests.conftest import make_category_answers


class TestComputeSummary:
    def test_all_max_answers(self, all_max):
        result = compute_summary(all_max)
        assert result["total_score"] == 60
        assert [r["score"] for r in result["summary"]] == [15, 15, 15, 15]
        assert all(r["level"] == GREEN for r in result["summary"])

    def test_all_unsure_scores_zero(self, all_unsure):
        result = compute_summary(all_unsure)
        assert result["total_score"] == 0
        assert all(r["score"] == 0 for r in result["summary"])
        assert all(r["level"] == RED for r in result["summary"])

    def test_empty_answers_scores_zero(self):
        result = compute_summary({})
        assert result["total_score"] == 0
        assert all(r["level"] == RED for r in result["summary"])

    def test_none_answers_treated_as_empty(self):
        assert compute_summary(None)["total_score"] == 0

    def test_category_order_is_fixed(self):
        result = compute_summary({})
        assert [r["category"] for r in result["summary"]] == CATEGORIES

    def test_partial_answers_only_count_answered(self):
        answers = {1: 3, 2: 2, 6: 1}
        result = compute_summary(answers)
        by_cat = {r["category"]: r["score"] for r in result["summary"]}
        assert by_cat[COMPLEXION] == 5
        assert by_cat[HAIR] == 1
        assert by_cat[STYLING] == 0
        assert result["total_score"] == 6

    def test_sentinel_never_subtracts(self):
        answers = make_category_answers({COMPLEXION: [3, -1, -1, -1, -1]})
        result = compute_summary(answers)
        assert result["summary"][0]["score"] == 3

    def test_out_of_range_values_are_clamped(self):
        answers = {1: 99, 2: -7, 3: "3", 4: None, 5: True}
        result = compute_summary(answers)
        assert result["summary"][0]["score"] == 3

    def test_levels_apply_per_category(self):
        answers = make_category_answers({
            COMPLEXION: [2, 2, 2, 1, 1],   # 8
            HAIR:       [2, 2, 2, 1, 1],   # 8
            STYLING:    [2, 2, 2, 1, 1],   # 8
            SOCIAL:     [3, 3, 3, 3, 2],   # 14
        })
        result = compute_summary(answers)
        assert [r["score"] for r in result["summary"]] == [8, 8, 8, 14]
        assert [r["level"] for r in result["summary"]] == [YELLOW, YELLOW, YELLOW, GREEN]
        assert result["total_score"] == 38

    def test_total_is_sum_of_categories(self):
        answers = {q["id"]: (q["id"] % 5) - 1 for q in QUESTIONS}
        result = compute_summary(answers)
        assert result["total_score"] == sum(r["score"] for r in result["summary"])

    def test_deterministic(self):
        answers = {q["id"]: q["id"] % 4 for q in QUESTIONS}
        assert compute_summary(answers) == compute_summary(answers)

    def test_does_not_mutate_answers(self):
        answers = {1: 3, 2: -1}
        compute_summary(answers)
        assert answers == {1: 3, 2: -1}

    def test_result_carries_copy_for_level(self, all_max):
        first = compute_summary(all_max)["summary"][0]
        assert first["color"] == "#22c55e"
        assert first["description"]
        assert first["suggestion"]

    def test_custom_question_bank(self):
        questions = [
            {"id": 1, "category": "A", "text": "a1"},
            {"id": 2, "category": "A", "text": "a2"},
            {"id": 3, "category": "B", "text": "b1"},
            {"id": 4, "category": "B", "text": "b2"},
        ]
        result = compute_summary({1: 3, 2: 3, 3: 1}, questions=questions, categories=["A", "B"])
        assert [r["max_score"] for r in result["summary"]] == [6, 6]
        assert [r["level"] for r in result["summary"]] == [GREEN, RED]
        assert result["summary"][0]["description"] == ""


class TestCategoryLevel:
    def test_thresholds_for_fifteen_points(self):
        assert level_thresholds(15) == (12, 7)

    @pytest.mark.parametrize("score,level", [
        (0, RED), (6, RED), (7, YELLOW), (11, YELLOW), (12, GREEN), (15, GREEN),
    ])
    def test_boundaries(self, score, level):
        assert category_level(score, 15) == level

    def test_thresholds_scale_with_max(self):
        # 4 questions × 3 points
        assert level_thresholds(12) == (10, 6)


class TestMaxScores:
    def test_category_max(self):
        assert category_max_score(COMPLEXION) == 15

    def test_total_max(self):
        assert max_total_score() == 60


class TestFallbackPersona:
    @pytest.mark.parametrize("total,persona", [
        (60, "charmer"), (48, "charmer"),
        (47, "statue"), (38, "statue"),
        (37, "neighbor"), (21, "neighbor"),
        (20, "pioneer"), (0, "pioneer"),
    ])
    def test_bands(self, total, persona):
        assert compute_fallback_persona(total) == persona

    def test_total_over_every_score(self):
        for total in range(0, 61):
            assert compute_fallback_persona(total) in PERSONA_IDS

    def test_accepts_summary(self, all_max, all_unsure):
        assert compute_fallback_persona(compute_summary(all_max)) == "charmer"
        assert compute_fallback_persona(compute_summary(all_unsure)) == "pioneer"

    def test_middle_band_is_neighbor(self):
        answers = make_category_answers({cat: [2, 2, 2, 1, 1] for cat in CATEGORIES})
        assert compute_fallback_persona(compute_summary(answers)) == "neighbor"

    def test_explicit_max_total(self):
        assert compute_fallback_persona(40, max_total=48) == "charmer"


class TestNormalizePersonaId:
    @pytest.mark.parametrize("raw,expected", [
        ("charmer", "charmer"),
        ("  Charmer \t", "charmer"),
        ("PIONEER", "pioneer"),
        ("sage\n", "sage"),
    ])
    def test_known_ids(self, raw, expected):
        assert normalize_persona_id(raw) == expected

    @pytest.mark.parametrize("raw", ["", "   ", "wizard", "charmer!", None, 42, ["sage"]])
    def test_unknown_falls_back_to_default(self, raw):
        assert normalize_persona_id(raw) == DEFAULT_PERSONA_ID

    def test_custom_known_ids_and_default(self):
        assert normalize_persona_id(" B ", ["a", "b"], "a") == "b"
        assert normalize_persona_id("c", ["a", "b"], "a") == "a"
