from fastapi import APIRouter
from app.routers import admin, leave, users

# Centralized API router hub
# Routers are aggregated here, and main.py only imports this single hub.
api_router = APIRouter()

api_router.include_router(leave.router, tags=["Leave"])
api_router.include_router(users.router, tags=["Users"])
api_router.include_router(admin.router, tags=["Administration"])
