from fastapi import APIRouter
from assessment_hub.routers import (
    analysis, assessments, auth, dashboard, departments, responses
)

# Centralized API router hub
# Routers are aggregated here and main.py only imports this single hub.
api_router = APIRouter()

api_router.include_router(auth.router, tags=["Authentication"])
api_router.include_router(departments.router, tags=["Departments"])
api_router.include_router(assessments.router, tags=["Assessments"])
api_router.include_router(responses.router, tags=["Responses"])
api_router.include_router(analysis.router, tags=["Analysis"])
api_router.include_router(dashboard.router, tags=["Dashboard"])
