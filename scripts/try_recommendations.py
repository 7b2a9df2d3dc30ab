#!/usr/bin/env python3
"""
Recommendation pipeline playground.

Runs one generation pass against a small built-in catalog without Supabase.
Uses the configured completion backend when its API key is set (falling
back to the local scorer on failure), or the local scorer with --local.

Usage:
    python scripts/try_recommendations.py
    python scripts/try_recommendations.py --sunlight LOW --care-level 1 --pet-friendly
    python scripts/try_recommendations.py --location спальня --extra "не люблю кактусы" --local
"""

import argparse
import asyncio
import logging
from unittest.mock import MagicMock

from planter.schemas.plants import CareInstructions, Plant
from planter.schemas.recommendations import Questionnaire
from planter.services.completion_client import get_completion_client
from planter.services.recommendation_service import RecommendationService

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def _plant(plant_id: str, name: str, scientific_name: str, sunlight: str, burden: int, notes: str) -> Plant:
    return Plant(
        id=plant_id,
        name=name,
        scientific_name=scientific_name,
        care_instructions=CareInstructions(
            watering_frequency=7,
            sunlight=sunlight,
            fertilizer_frequency=burden,
            additional_notes=notes,
        ),
    )


SAMPLE_CATALOG = [
    _plant("monstera", "Монстера", "Monstera deliciosa", "MEDIUM", 3, "Хорошо растет в гостиной"),
    _plant("sansevieria", "Сансевиерия", "Dracaena trifasciata", "LOW", 1, "Подходит для спальни"),
    _plant("zamioculcas", "Замиокулькас", "Zamioculcas zamiifolia", "LOW", 1, "Терпит редкий полив"),
    _plant("ficus", "Фикус Бенджамина", "Ficus benjamina", "HIGH", 4, "Любит светлый подоконник"),
    _plant("chlorophytum", "Хлорофитум", "Chlorophytum comosum", "MEDIUM", 2, "Очищает воздух на кухне"),
    _plant("calathea", "Калатея", "Goeppertia ornata", "MEDIUM", 5, "Нужна высокая влажность в ванной"),
]


def print_result(recommendations, catalog):
    names = {plant.id: plant.name for plant in catalog}

    print("\n" + "=" * 60)
    print(f"RECOMMENDATIONS: {len(recommendations)}")
    print("=" * 60)

    if not recommendations:
        print("\n❌ No plant cleared the minimum match score\n")
        return

    for i, recommendation in enumerate(recommendations, 1):
        print(f"\n#{i} {names.get(recommendation.plant_id, recommendation.plant_id)} ({recommendation.score:.2f})")
        print(f"   {recommendation.reasoning}")
    print()


async def run(args: argparse.Namespace) -> None:
    questionnaire = Questionnaire(
        id="playground",
        sunlight_preference=args.sunlight,
        pet_friendly=args.pet_friendly,
        care_level=args.care_level,
        preferred_location=args.location,
        additional_preferences=args.extra,
    )

    client = None if args.local else get_completion_client()
    logger.info(f"Completion backend: {type(client).__name__ if client else 'none (local scorer)'}")

    service = RecommendationService(store=MagicMock(), catalog=MagicMock(), completion_client=client)
    recommendations = await service.generate(questionnaire, SAMPLE_CATALOG)

    print_result(recommendations, SAMPLE_CATALOG)


def main():
    parser = argparse.ArgumentParser(
        description="Run the recommendation pipeline against a sample catalog",
    )
    parser.add_argument("--sunlight", choices=["LOW", "MEDIUM", "HIGH"], default="MEDIUM")
    parser.add_argument("--care-level", type=int, choices=range(1, 6), default=2)
    parser.add_argument("--pet-friendly", action="store_true")
    parser.add_argument("--location", default=None, help="Preferred location, e.g. спальня")
    parser.add_argument("--extra", default=None, help="Free-text preferences")
    parser.add_argument("--local", action="store_true", help="Skip the completion backend")

    asyncio.run(run(parser.parse_args()))


if __name__ == "__main__":
    main()
