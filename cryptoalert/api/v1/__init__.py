"""
API v1 Router

All API endpoints for the dashboard.
"""

from fastapi import APIRouter

from cryptoalert.api.v1.endpoints import alerts, indicators

router = APIRouter()

router.include_router(indicators.router, prefix="/indicators", tags=["Indicators"])
router.include_router(alerts.router, prefix="/alerts", tags=["Alerts"])
