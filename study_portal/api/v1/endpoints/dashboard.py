from typing import Any, Union

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import async_sessionmaker

from study_portal.api import deps
from study_portal.models.user import User
from study_portal.schemas.dashboard import (
    StudentAnalytics,
    StudentDashboard,
    TeacherAnalytics,
    TeacherDashboard,
)
from study_portal.schemas.responses import SuccessResponse
from study_portal.services.analytics_service import DEFAULT_PERIOD_DAYS, AnalyticsService
from study_portal.services.dashboard_service import DashboardService

router = APIRouter()


@router.get("/dashboard/stats", response_model=SuccessResponse[Union[StudentDashboard, TeacherDashboard]])
async def get_dashboard_stats(
    current_user: User = Depends(deps.get_current_user),
    session_factory: async_sessionmaker = Depends(deps.get_session_factory)
) -> Any:
    """
    Overview counts and recent items for the current user's role.
    """
    stats = await DashboardService.get_stats(session_factory, current_user)
    return SuccessResponse(data=stats)


@router.get("/analytics", response_model=SuccessResponse[Union[StudentAnalytics, TeacherAnalytics]])
async def get_analytics(
    period: int = Query(DEFAULT_PERIOD_DAYS, ge=1, le=365),
    current_user: User = Depends(deps.get_current_user),
    session_factory: async_sessionmaker = Depends(deps.get_session_factory)
) -> Any:
    """
    Per-day trends over the last `period` days.
    """
    analytics = await AnalyticsService.get_analytics(session_factory, current_user, period)
    return SuccessResponse(data=analytics)
