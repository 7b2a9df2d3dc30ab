"""
Plant catalog API endpoints (read-only).

Endpoints:
- GET /plants - List the catalog, optionally filtered by ?q=
- GET /plants/{plant_id} - Get a single plant with its care instructions

The catalog is public; an optional token only changes which Supabase
client is used.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, status

from planter.auth.dependencies import AuthenticatedUser, get_optional_user
from planter.db.client import get_supabase_client
from planter.schemas.plants import Plant, PlantListResponse
from planter.services.plant_service import PlantCatalog

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/plants", tags=["plants"])


@router.get(
    "",
    response_model=PlantListResponse,
    status_code=status.HTTP_200_OK,
    summary="List catalog plants",
    description="""
    Retrieve the plant catalog ordered by name.

    Query parameters:
    - q: Case-insensitive match on name or scientific name
    """
)
async def list_plants(
    auth_user: Annotated[Optional[AuthenticatedUser], Depends(get_optional_user)],
    q: Optional[str] = Query(None, max_length=100, description="Search by name or scientific name"),
) -> PlantListResponse:
    """List or search the catalog."""
    supabase_client = get_supabase_client(auth_user.access_token if auth_user else None)
    catalog = PlantCatalog(supabase_client)

    plants = await catalog.search(q) if q else await catalog.list_all()

    logger.info(f"Returning {len(plants)} plants (search={'yes' if q else 'no'})")
    return PlantListResponse(plants=plants, count=len(plants))


@router.get(
    "/{plant_id}",
    response_model=Plant,
    status_code=status.HTTP_200_OK,
    summary="Get plant by ID",
)
async def get_plant(
    plant_id: str,
    auth_user: Annotated[Optional[AuthenticatedUser], Depends(get_optional_user)],
) -> Plant:
    """Fetch one plant; 404 when unknown."""
    supabase_client = get_supabase_client(auth_user.access_token if auth_user else None)
    return await PlantCatalog(supabase_client).get(plant_id)
