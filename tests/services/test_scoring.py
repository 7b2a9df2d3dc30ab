"""
Tests for the local recommendation scorer.

Covers:
- Rule weights (sunlight exact/adjacent, care closeness, pet bonus, location)
- Threshold is strict: a plant at exactly 0.3 is excluded
- Ranking, truncation to 5, determinism
"""

import pytest

from planter.agents.recommendation.scoring import score_plant, score_plants


# =============================================================================
# SINGLE PLANT SCORING
# =============================================================================

class TestScorePlant:
    """Tests for score_plant rule weights."""

    def test_full_match_scores_one(self, make_questionnaire, make_plant):
        """Sunlight + care + pet + location = 0.4 + 0.3 + 0.1 + 0.2."""
        questionnaire = make_questionnaire(sunlight="MEDIUM", pet_friendly=True, care_level=3, location="bedroom")
        plant = make_plant(sunlight="MEDIUM", care_burden=3, notes="great for a bedroom")

        score, reasoning = score_plant(questionnaire, plant)

        assert score == pytest.approx(1.0)
        assert "полностью соответствует вашим требованиям" in reasoning
        assert "Уровень ухода полностью соответствует" in reasoning
        assert "безопасно для домашних животных" in reasoning
        assert "Подходит для размещения в bedroom" in reasoning

    def test_boundary_plant_scores_exactly_threshold(self, make_questionnaire, make_plant):
        """Adjacent sunlight (0.2) + pet (0.1) = 0.3."""
        questionnaire = make_questionnaire(sunlight="MEDIUM", pet_friendly=True, care_level=3, location="bedroom")
        plant = make_plant(sunlight="HIGH", care_burden=1, notes="")

        score, _ = score_plant(questionnaire, plant)

        assert score == pytest.approx(0.3)

    def test_low_and_high_are_not_adjacent(self, make_questionnaire, make_plant):
        questionnaire = make_questionnaire(sunlight="LOW", care_level=1)
        plant = make_plant(sunlight="HIGH", care_burden=5)

        score, reasoning = score_plant(questionnaire, plant)

        assert score == 0
        assert reasoning == ""

    @pytest.mark.parametrize("preference,requirement", [
        ("LOW", "MEDIUM"),
        ("MEDIUM", "LOW"),
        ("MEDIUM", "HIGH"),
        ("HIGH", "MEDIUM"),
    ])
    def test_adjacent_sunlight_gives_partial_points(self, make_questionnaire, make_plant, preference, requirement):
        questionnaire = make_questionnaire(sunlight=preference, care_level=1)
        plant = make_plant(sunlight=requirement, care_burden=5)

        score, reasoning = score_plant(questionnaire, plant)

        assert score == pytest.approx(0.2)
        assert "частично соответствует" in reasoning

    def test_care_off_by_one_gives_partial_points(self, make_questionnaire, make_plant):
        questionnaire = make_questionnaire(sunlight="LOW", care_level=4)
        plant = make_plant(sunlight="HIGH", care_burden=3)

        score, reasoning = score_plant(questionnaire, plant)

        assert score == pytest.approx(0.15)
        assert reasoning == "Уровень ухода близок к желаемому."

    def test_location_match_is_case_insensitive(self, make_questionnaire, make_plant):
        questionnaire = make_questionnaire(sunlight="LOW", care_level=1, location="Bedroom")
        plant = make_plant(sunlight="HIGH", care_burden=5, notes="Perfect for a BEDROOM shelf")

        score, _ = score_plant(questionnaire, plant)

        assert score == pytest.approx(0.2)

    def test_location_ignored_when_notes_empty(self, make_questionnaire, make_plant):
        questionnaire = make_questionnaire(sunlight="LOW", care_level=1, location="kitchen")
        plant = make_plant(sunlight="HIGH", care_burden=5, notes="")

        score, _ = score_plant(questionnaire, plant)

        assert score == 0

    def test_exact_sunlight_contributes_at_least_point_four(self, make_questionnaire, make_plant):
        questionnaire = make_questionnaire(sunlight="HIGH", care_level=1)
        plant = make_plant(sunlight="HIGH", care_burden=5)

        score, _ = score_plant(questionnaire, plant)

        assert score >= 0.4

    def test_reasoning_has_no_trailing_whitespace(self, make_questionnaire, make_plant):
        questionnaire = make_questionnaire(sunlight="MEDIUM", pet_friendly=True, care_level=3)
        plant = make_plant(sunlight="MEDIUM", care_burden=3)

        _, reasoning = score_plant(questionnaire, plant)

        assert reasoning == reasoning.rstrip()
        assert reasoning.endswith(".")


# =============================================================================
# RANKING
# =============================================================================

class TestScorePlants:
    """Tests for score_plants filtering and ordering."""

    def test_plant_at_threshold_is_excluded(self, make_questionnaire, make_plant):
        """The rule is strictly greater than 0.3."""
        questionnaire = make_questionnaire(sunlight="MEDIUM", pet_friendly=True, care_level=3, location="bedroom")
        plants = [make_plant(plant_id="boundary", sunlight="HIGH", care_burden=1, notes="")]

        assert score_plants(questionnaire, plants) == []

    def test_empty_catalog_returns_empty_list(self, make_questionnaire):
        assert score_plants(make_questionnaire(), []) == []

    def test_results_sorted_descending_and_truncated(self, make_questionnaire, make_plant):
        questionnaire = make_questionnaire(sunlight="MEDIUM", care_level=3)
        plants = [
            make_plant(plant_id="adjacent-close", sunlight="HIGH", care_burden=4),   # 0.35
            make_plant(plant_id="exact-1", sunlight="MEDIUM", care_burden=3),        # 0.7
            make_plant(plant_id="exact-2", sunlight="MEDIUM", care_burden=3),        # 0.7
            make_plant(plant_id="sun-only", sunlight="MEDIUM", care_burden=1),       # 0.4
            make_plant(plant_id="exact-close", sunlight="MEDIUM", care_burden=2),    # 0.55
            make_plant(plant_id="exact-3", sunlight="MEDIUM", care_burden=3),        # 0.7
            make_plant(plant_id="adjacent-exact", sunlight="LOW", care_burden=3),    # 0.5
        ]

        result = score_plants(questionnaire, plants)

        assert len(result) == 5
        assert [r.plant_id for r in result] == [
            "exact-1", "exact-2", "exact-3", "exact-close", "adjacent-exact",
        ]
        scores = [r.score for r in result]
        assert scores == sorted(scores, reverse=True)
        assert all(r.questionnaire_id == "q-1" for r in result)

    def test_no_score_at_or_below_threshold(self, make_questionnaire, make_plant):
        questionnaire = make_questionnaire(sunlight="LOW", pet_friendly=True, care_level=5)
        plants = [
            make_plant(plant_id=f"p{i}", sunlight=s, care_burden=b)
            for i, (s, b) in enumerate([("LOW", 1), ("MEDIUM", 5), ("HIGH", 4), ("MEDIUM", 4), ("HIGH", 1)])
        ]

        result = score_plants(questionnaire, plants)

        assert all(r.score > 0.3 for r in result)
        assert all(0 <= r.score <= 1.0 for r in result)

    def test_is_deterministic(self, make_questionnaire, make_plant):
        questionnaire = make_questionnaire(sunlight="MEDIUM", pet_friendly=True, care_level=2, location="kitchen")
        plants = [
            make_plant(plant_id="a", sunlight="LOW", care_burden=2, notes="kitchen window"),
            make_plant(plant_id="b", sunlight="MEDIUM", care_burden=3),
            make_plant(plant_id="c", sunlight="HIGH", care_burden=2),
        ]

        first = score_plants(questionnaire, plants)
        second = score_plants(questionnaire, plants)

        assert [r.model_dump() for r in first] == [r.model_dump() for r in second]
