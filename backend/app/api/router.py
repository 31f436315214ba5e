"""
Main API router that includes all route modules.
"""
from fastapi import APIRouter
from app.api.routes import finance, services, trips

api_router = APIRouter()

# Include all route modules
api_router.include_router(trips.router)
api_router.include_router(services.router)
api_router.include_router(finance.router)
