"""
Local recommendation scorer.

Deterministic, I/O-free matching of a questionnaire against the catalog.
Used when no completion backend is configured and as the fallback when the
completion pipeline fails, so it must never raise for well-formed input.

Rules (additive):
- sunlight exact match +0.4, adjacent level +0.2 (LOW/HIGH are not adjacent)
- care level vs plant care burden: equal +0.3, off by one +0.15
- pet-friendly requested +0.1 (flat; the catalog has no toxicity data yet)
- preferred location found in the care notes (case-insensitive) +0.2

Points are accumulated as integer hundredths so the threshold comparison
is exact: 0.2 + 0.1 must equal the 0.3 threshold, not exceed it.
"""

from typing import List, Sequence, Tuple

from planter.schemas.plants import Plant
from planter.schemas.recommendations import Questionnaire, Recommendation
from planter.utils.constants import MAX_RECOMMENDATIONS, MIN_MATCH_SCORE

SUNLIGHT_EXACT_POINTS = 40
SUNLIGHT_ADJACENT_POINTS = 20
CARE_EXACT_POINTS = 30
CARE_CLOSE_POINTS = 15
PET_FRIENDLY_POINTS = 10
LOCATION_POINTS = 20

MIN_MATCH_POINTS = round(MIN_MATCH_SCORE * 100)

_SUNLIGHT_ORDER = {"LOW": 0, "MEDIUM": 1, "HIGH": 2}


def _sunlight_points(preference: str, requirement: str) -> Tuple[int, str]:
    if preference == requirement:
        return SUNLIGHT_EXACT_POINTS, (
            f"Уровень освещенности ({requirement}) полностью соответствует вашим требованиям. "
        )
    if abs(_SUNLIGHT_ORDER[preference] - _SUNLIGHT_ORDER[requirement]) == 1:
        return SUNLIGHT_ADJACENT_POINTS, (
            f"Уровень освещенности ({requirement}) частично соответствует вашим требованиям. "
        )
    return 0, ""


def _care_points(care_level: int, care_burden: int) -> Tuple[int, str]:
    diff = abs(care_burden - care_level)
    if diff == 0:
        return CARE_EXACT_POINTS, "Уровень ухода полностью соответствует вашим возможностям. "
    if diff == 1:
        return CARE_CLOSE_POINTS, "Уровень ухода близок к желаемому. "
    return 0, ""


def score_plant(questionnaire: Questionnaire, plant: Plant) -> Tuple[float, str]:
    """
    Score a single plant against a questionnaire.

    Returns:
        (score, reasoning): score in [0, 1]; reasoning is the concatenation
        of the clauses of every rule that fired, without trailing spaces.
    """
    points, reasoning = _score_points(questionnaire, plant)
    return points / 100, reasoning


def _score_points(questionnaire: Questionnaire, plant: Plant) -> Tuple[int, str]:
    points = 0
    reasoning = ""

    gained, clause = _sunlight_points(questionnaire.sunlight_preference, plant.sunlight)
    points += gained
    reasoning += clause

    gained, clause = _care_points(questionnaire.care_level, plant.care_burden)
    points += gained
    reasoning += clause

    # TODO: score against a pet-toxicity attribute once the catalog carries one
    if questionnaire.pet_friendly:
        points += PET_FRIENDLY_POINTS
        reasoning += "Растение безопасно для домашних животных. "

    location = questionnaire.preferred_location
    if location and plant.care_notes and location.lower() in plant.care_notes.lower():
        points += LOCATION_POINTS
        reasoning += f"Подходит для размещения в {location}. "

    return points, reasoning.rstrip()


def score_plants(questionnaire: Questionnaire, plants: Sequence[Plant]) -> List[Recommendation]:
    """
    Rank catalog plants for a questionnaire with the local heuristics.

    Only plants scoring strictly above MIN_MATCH_SCORE are kept. The result
    is sorted by score descending (ties keep catalog order) and truncated
    to MAX_RECOMMENDATIONS. An empty list is a valid outcome.

    Args:
        questionnaire: Stored questionnaire
        plants: Full candidate list from the catalog

    Returns:
        List[Recommendation]: At most MAX_RECOMMENDATIONS entries
    """
    scored: List[Tuple[int, Recommendation]] = []

    for plant in plants:
        points, reasoning = _score_points(questionnaire, plant)
        if points <= MIN_MATCH_POINTS:
            continue
        scored.append((
            points,
            Recommendation(
                questionnaire_id=questionnaire.id,
                plant_id=plant.id,
                score=points / 100,
                reasoning=reasoning,
            ),
        ))

    # sorted() is stable, so equal scores keep catalog order
    scored = sorted(scored, key=lambda item: item[0], reverse=True)

    return [recommendation for _, recommendation in scored[:MAX_RECOMMENDATIONS]]
