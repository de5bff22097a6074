from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from hospital_directory.core.config import Settings, get_settings
from hospital_directory.db.supabase_client import get_content_store
from hospital_directory.models.city_model import CityDirectoryResponse, PaginatedCityResponse
from hospital_directory.models.hospital_model import (
    HospitalResponse,
    PaginatedBranchResponse,
    PaginatedHospitalResponse,
)
from hospital_directory.models.search_model import SearchResponse
from hospital_directory.models.treatment_model import PaginatedTreatmentResponse
from hospital_directory.request_model.branch_request import BranchFilterRequest
from hospital_directory.request_model.city_request import CityFilterRequest
from hospital_directory.request_model.hospital_request import HospitalFilterRequest
from hospital_directory.request_model.search_request import SearchRequest
from hospital_directory.request_model.treatment_request import TreatmentFilterRequest
from hospital_directory.services.get_branches_data import get_branches_data
from hospital_directory.services.get_cities_data import get_cities_data, get_city_by_id
from hospital_directory.services.get_hospitals_data import get_hospital_by_slug, get_hospitals_data
from hospital_directory.services.get_search_data import get_search_data
from hospital_directory.services.get_treatments_data import get_treatments_data
from hospital_directory.utils.cache import TTLCache, get_cache
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


def _failure(things: str, error: Exception) -> JSONResponse:
    logger.error(f"💥 Failed to fetch {things}: {error}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": f"Failed to fetch {things}", "details": str(error)},
    )


@router.get("/api/health")
async def api_health():
    logger.info("📍 API Health endpoint called (/api/health)")
    return {"status": "ok", "service": "Hospital Directory API"}


@router.get("/health")
async def health():
    logger.info("📍 Health endpoint called (/health)")
    return {"status": "ok", "service": "Hospital Directory API"}


@router.get("/api/hospitals")
async def list_hospitals(
    request: Annotated[HospitalFilterRequest, Query()],
    store=Depends(get_content_store),
    cache: TTLCache = Depends(get_cache),
    settings: Settings = Depends(get_settings),
):
    """Paginated hospitals with enriched branches and rollups"""
    logger.info(f"📨 Hospitals request: {request.model_dump(exclude_none=True)}")
    try:
        result = await get_hospitals_data(
            store,
            cache,
            settings,
            page=request.page,
            page_size=request.page_size,
            q=request.q,
            slug=request.slug,
            include_standalone=request.include_standalone,
            text_filters=request.text_filters(),
            id_filters=request.id_filters(),
        )
    except Exception as e:
        return _failure("hospitals", e)
    return PaginatedHospitalResponse(**result)


@router.get("/api/hospitals/{slug}")
async def hospital_detail(
    slug: str,
    store=Depends(get_content_store),
    cache: TTLCache = Depends(get_cache),
    settings: Settings = Depends(get_settings),
):
    try:
        hospital = await get_hospital_by_slug(store, cache, settings, slug)
    except Exception as e:
        return _failure("hospital", e)
    if hospital is None:
        raise HTTPException(status_code=404, detail=f"Hospital not found: {slug}")
    return HospitalResponse(**hospital)


@router.get("/api/branches")
async def list_branches(
    request: Annotated[BranchFilterRequest, Query()],
    store=Depends(get_content_store),
    cache: TTLCache = Depends(get_cache),
    settings: Settings = Depends(get_settings),
):
    """Paginated branches, filtered by text or id facets"""
    logger.info(f"📨 Branches request: {request.model_dump(exclude_none=True)}")
    try:
        result = await get_branches_data(
            store,
            cache,
            settings,
            page=request.page,
            page_size=request.page_size,
            text_filters=request.text_filters(),
            id_filters=request.id_filters(),
        )
    except Exception as e:
        return _failure("branches", e)
    return PaginatedBranchResponse(**result)


@router.get("/api/treatments")
async def list_treatments(
    request: Annotated[TreatmentFilterRequest, Query()],
    store=Depends(get_content_store),
    cache: TTLCache = Depends(get_cache),
    settings: Settings = Depends(get_settings),
):
    logger.info(f"📨 Treatments request: {request.model_dump(exclude_none=True)}")
    try:
        result = await get_treatments_data(
            store,
            cache,
            settings,
            q=request.q,
            category=request.category,
            popular=request.popular,
            page=request.page,
            page_size=request.page_size,
        )
    except Exception as e:
        return _failure("treatments", e)
    return PaginatedTreatmentResponse(**result)


@router.get("/api/cities")
async def list_cities(
    request: Annotated[CityFilterRequest, Query()],
    store=Depends(get_content_store),
    cache: TTLCache = Depends(get_cache),
    settings: Settings = Depends(get_settings),
):
    """Paginated cities, optionally with their branches and hospitals"""
    logger.info(f"📨 Cities request: {request.model_dump(exclude_none=True)}")
    try:
        result = await get_cities_data(
            store,
            cache,
            settings,
            with_branches=request.with_branches,
            page=request.page,
            page_size=request.page_size,
        )
    except Exception as e:
        return _failure("cities", e)
    return PaginatedCityResponse(**result)


@router.get("/api/cities/{city_id}")
async def city_detail(
    city_id: str,
    store=Depends(get_content_store),
    cache: TTLCache = Depends(get_cache),
    settings: Settings = Depends(get_settings),
):
    try:
        city = await get_city_by_id(store, cache, settings, city_id)
    except Exception as e:
        return _failure("city", e)
    if city is None:
        raise HTTPException(status_code=404, detail=f"City not found: {city_id}")
    return CityDirectoryResponse(**city)


@router.post("/api/search")
async def search_directory(
    request: SearchRequest,
    store=Depends(get_content_store),
    cache: TTLCache = Depends(get_cache),
    settings: Settings = Depends(get_settings),
):
    """POST endpoint for faceted search over hospitals, doctors or treatments"""
    logger.info("=" * 80)
    logger.info("📍 Search endpoint called")
    logger.info(f"📨 Received request: {request.model_dump(exclude_none=True)}")
    logger.info("=" * 80)
    try:
        result = await get_search_data(store, cache, settings, request.to_params())
    except Exception as e:
        return _failure("search results", e)
    logger.info(f"✅ Search returned {len(result['items'])} of {result['total']} item(s)")
    return SearchResponse(**result)
