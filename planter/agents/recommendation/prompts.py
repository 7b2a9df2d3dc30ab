"""
Recommendation and Chat Prompt Templates

Contains the recommendation prompt builder and the chat system directive.

Architecture:
- Pattern: single completion call per questionnaire, free-text answer
- Output: numbered list parsed by planter/agents/recommendation/parser.py
- Language: Russian (product language); labels come from the tables below

The numbered catalog listing is 1-based and follows the order of the plant
list passed in. The parser resolves indexes against that same list, so the
caller must hand both functions the identical sequence.
"""

from typing import Sequence

from planter.schemas.plants import Plant
from planter.schemas.recommendations import Questionnaire

# =============================================================================
# CHAT SYSTEM DIRECTIVE
# =============================================================================
# First entry of every chat message list. The working set of a session can
# always be rebuilt from this constant plus the persisted turns.
# =============================================================================

CHAT_SYSTEM_PROMPT = (
    "Ты - эксперт по растениям. Помогай пользователям с вопросами о выращивании, "
    "уходе и выборе растений. Отвечай на русском языке."
)


# =============================================================================
# LABELS
# =============================================================================

SUNLIGHT_LABELS = {
    "LOW": "низкий",
    "MEDIUM": "средний",
    "HIGH": "высокий",
}

CARE_LEVEL_LABELS = {
    1: "очень низкий",
    2: "низкий",
    3: "средний",
    4: "высокий",
    5: "очень высокий",
}

PET_FRIENDLY_LABELS = {
    True: "да",
    False: "нет",
}


# =============================================================================
# RECOMMENDATION PROMPT BUILDER
# =============================================================================

def format_plant_catalog(plants: Sequence[Plant]) -> str:
    """Render the numbered catalog listing, one plant per line."""
    return "\n".join(
        f"{index}. {plant.name} (научное название: {plant.scientific_name})"
        for index, plant in enumerate(plants, start=1)
    )


def build_recommendation_prompt(questionnaire: Questionnaire, plants: Sequence[Plant]) -> str:
    """
    Build the single user-role prompt for recommendation generation.

    The prompt includes:
    - Localized sunlight, pet-friendliness and care-level labels
    - Preferred location and additional preferences, only when present
    - The numbered catalog listing
    - The fixed answer template the parser understands

    Args:
        questionnaire: Stored questionnaire
        plants: Candidate plants, in the order the parser will index them

    Returns:
        str: Prompt text ready to be sent to the completion endpoint
    """
    sunlight = SUNLIGHT_LABELS.get(questionnaire.sunlight_preference, "средний")
    pet_friendly = PET_FRIENDLY_LABELS[bool(questionnaire.pet_friendly)]
    care_level = CARE_LEVEL_LABELS.get(questionnaire.care_level, "средний")

    optional_lines = ""
    if questionnaire.preferred_location:
        optional_lines += f"- Предпочтительное расположение: {questionnaire.preferred_location}\n"
    if questionnaire.additional_preferences:
        optional_lines += f"- Дополнительные предпочтения: {questionnaire.additional_preferences}\n"

    return f"""Ты - эксперт по растениям. Помоги подобрать растения для пользователя на основе его предпочтений.

Предпочтения пользователя:
- Уровень освещенности: {sunlight}
- Безопасно для животных: {pet_friendly}
- Уровень ухода: {care_level}
{optional_lines}
Список доступных растений:
{format_plant_catalog(plants)}

Выбери 5 наиболее подходящих растений из списка и объясни, почему они подходят пользователю. Для каждого растения укажи его номер из списка, название и оценку соответствия от 0 до 1, где 1 - идеальное соответствие.

Формат ответа:
1. [Номер растения]. [Название растения] - [Оценка]
[Объяснение, почему это растение подходит]

2. [Номер растения]. [Название растения] - [Оценка]
[Объяснение, почему это растение подходит]

и так далее."""
