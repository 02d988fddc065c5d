"""API routes for the FastAPI application."""

from fastapi import APIRouter

from oauthbridge.api.v1.endpoints import oauth

api_router = APIRouter()
api_router.include_router(oauth.router, prefix="/oauth", tags=["oauth"])
