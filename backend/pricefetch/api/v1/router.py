"""API v1 router -- aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from pricefetch.api.v1 import fetch

api_v1_router = APIRouter()

api_v1_router.include_router(fetch.router, prefix="/fetch", tags=["fetch"])
