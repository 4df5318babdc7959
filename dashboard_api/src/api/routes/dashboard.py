from __future__ import annotations

from fastapi import APIRouter, Depends

from src.core.deps import get_current_user, get_dashboard_service
from src.schemas.common import ApiResponse
from src.schemas.dashboard import DashboardStats
from src.services.dashboard import DashboardService

router = APIRouter(
    prefix="/dashboard",
    tags=["Dashboard"],
    dependencies=[Depends(get_current_user)],
)


# PUBLIC_INTERFACE
@router.get(
    "/stats",
    response_model=ApiResponse[DashboardStats],
    response_model_exclude_none=True,
    summary="Dashboard statistics",
    description="Totals of clients, invoices, contacts, companies and supplier invoices, as strings.",
)
async def get_stats(
    service: DashboardService = Depends(get_dashboard_service),
) -> ApiResponse[DashboardStats]:
    stats, source = await service.get_stats()
    return ApiResponse.ok(stats, source=source)
