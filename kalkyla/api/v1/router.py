"""
API v1 router - aggregates all endpoint modules (RESTful structure).
"""

from fastapi import APIRouter

from kalkyla.api.v1.endpoints import (
    auth,
    batteries,
    calculations,
    calculator,
    companies,
    dashboard,
    electricity,
    health,
    leads,
    natagare,
    organizations,
    public,
    users,
)

api_router = APIRouter(prefix="/v1")

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(organizations.router, prefix="/organizations", tags=["organizations"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(batteries.router, prefix="/batteries", tags=["batteries"])
api_router.include_router(natagare.router, prefix="/natagare", tags=["natagare"])
api_router.include_router(calculations.router, prefix="/calculations", tags=["calculations"])
api_router.include_router(public.router, prefix="/public", tags=["public"])
api_router.include_router(calculator.router, prefix="/calculator", tags=["calculator"])
api_router.include_router(electricity.router, prefix="/electricity", tags=["electricity"])
api_router.include_router(leads.router, prefix="/leads", tags=["leads"])
api_router.include_router(companies.router, prefix="/companies", tags=["companies"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
