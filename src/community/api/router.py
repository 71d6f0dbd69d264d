"""API router aggregation."""

from fastapi import APIRouter

from community.api.admin import router as admin_router
from community.api.articles import router as articles_router
from community.api.auth import router as auth_router
from community.api.profile import router as profile_router

api_router = APIRouter()
api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(admin_router, tags=["admin"])
api_router.include_router(articles_router, tags=["articles"])
api_router.include_router(profile_router, tags=["profile"])
