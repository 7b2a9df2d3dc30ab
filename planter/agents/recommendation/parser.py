"""
Parser for free-text recommendation answers.

The completion prompt asks for entries shaped like::

    1. 3. Монстера - 0.9
    Подходит для светлой комнаты...

A header line is ``<int>. <name> - <float>``, optionally prefixed by a rank
(``<rank>. <int>. <name> - <float>``). The index (the second integer when a
rank is present, otherwise the only one) is 1-based into the plant list the
prompt was built from. Lines that do not look like a header extend the
reasoning of the open entry. A header line with an out-of-range index or a
score outside [0, 1] closes the open entry and is dropped together with the
reasoning lines that follow it.
"""

import logging
import re
from typing import List, Optional, Sequence

from planter.schemas.plants import Plant
from planter.schemas.recommendations import Recommendation
from planter.utils.exceptions import ParseError

logger = logging.getLogger(__name__)

_HEADER_PATTERN = re.compile(
    r"^\s*(?P<first>\d+)\.\s+(?:(?P<second>\d+)\.\s+)?(?P<name>.+?)\s+-\s+(?P<score>\d+(?:[.,]\d+)?)\s*$"
)


class _OpenEntry:
    """Entry being accumulated while scanning the answer."""

    def __init__(self, plant: Plant, score: float):
        self.plant = plant
        self.score = score
        self.lines: List[str] = []

    def to_recommendation(self, questionnaire_id: str) -> Recommendation:
        return Recommendation(
            questionnaire_id=questionnaire_id,
            plant_id=self.plant.id,
            score=self.score,
            reasoning="\n".join(self.lines),
        )


def _match_header(line: str, plants: Sequence[Plant]) -> tuple[bool, Optional[_OpenEntry]]:
    """
    Classify a line.

    Returns:
        (is_header, entry): is_header is False for reasoning lines; entry is
        None for header lines that must be discarded.
    """
    match = _HEADER_PATTERN.match(line)
    if not match:
        return False, None

    index = int(match.group("second") or match.group("first"))
    score = float(match.group("score").replace(",", "."))

    if index <= 0 or index > len(plants):
        logger.debug(f"Discarding entry with out-of-range plant index {index}")
        return True, None
    if score < 0 or score > 1:
        logger.debug(f"Discarding entry with out-of-range score {score}")
        return True, None

    return True, _OpenEntry(plants[index - 1], score)


def parse_recommendations(
    text: str,
    questionnaire_id: str,
    plants: Sequence[Plant],
) -> List[Recommendation]:
    """
    Extract recommendations from a completion answer.

    Args:
        text: Raw completion text
        questionnaire_id: Questionnaire the recommendations belong to
        plants: The same ordered plant list used to build the prompt

    Returns:
        List[Recommendation]: Entries in the order they appear in the text

    Raises:
        ParseError: If no entry could be extracted
    """
    recommendations: List[Recommendation] = []
    current: Optional[_OpenEntry] = None

    for raw_line in text.splitlines():
        line = raw_line.rstrip()
        if not line.strip():
            continue

        is_header, entry = _match_header(line, plants)
        if not is_header:
            if current is not None:
                current.lines.append(line.strip())
            continue

        if current is not None:
            recommendations.append(current.to_recommendation(questionnaire_id))
        # A discarded header leaves no open entry, so its reasoning lines are skipped
        current = entry

    if current is not None:
        recommendations.append(current.to_recommendation(questionnaire_id))

    if not recommendations:
        raise ParseError()

    logger.info(f"Parsed {len(recommendations)} recommendations from completion answer")
    return recommendations
