from __future__ import annotations

from fastapi import APIRouter, Depends, Path, Query
from pydantic import ValidationError as PydanticValidationError

from src.core.deps import get_client_service, get_current_user
from src.core.errors import ValidationError
from src.schemas.clients import DEFAULT_SORT_FIELD, Client, PaginationParams
from src.schemas.common import ApiResponse, PaginatedResponse
from src.services.clients import ClientListingService

router = APIRouter(
    prefix="/clients",
    tags=["Clients"],
    dependencies=[Depends(get_current_user)],
)


# PUBLIC_INTERFACE
def get_pagination_params(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    sortBy: str = Query(DEFAULT_SORT_FIELD, description="Client field to sort on"),
    sortOrder: str = Query("asc", description="asc or desc"),
    search: str = Query("", description="Case-insensitive substring"),
    dateFrom: str = Query("", description="YYYY-MM-DD, inclusive"),
    dateTo: str = Query("", description="YYYY-MM-DD, inclusive"),
) -> PaginationParams:
    """Collect the listing query string into PaginationParams."""
    try:
        return PaginationParams(
            page=page,
            limit=limit,
            sortBy=sortBy,
            sortOrder=sortOrder,
            search=search,
            dateFrom=dateFrom,
            dateTo=dateTo,
        )
    except PydanticValidationError as exc:
        raise ValidationError(f"Invalid query parameters: {exc.errors()[0]['msg']}")


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=ApiResponse[PaginatedResponse[Client]],
    response_model_exclude_none=True,
    summary="List clients",
    description=(
        "Paginated sociétés with search on name/street, creation-date filter and sorting. "
        "Served from sample data (degraded=true) when the database is unavailable."
    ),
)
async def list_clients(
    params: PaginationParams = Depends(get_pagination_params),
    service: ClientListingService = Depends(get_client_service),
) -> ApiResponse[PaginatedResponse[Client]]:
    page, source = await service.list_clients(params)
    return ApiResponse.ok(page, source=source)


# PUBLIC_INTERFACE
@router.get(
    "/{client_id}",
    response_model=ApiResponse[Client],
    response_model_exclude_none=True,
    summary="Get client",
    description="Get one société by id.",
)
async def get_client(
    client_id: str = Path(...),
    service: ClientListingService = Depends(get_client_service),
) -> ApiResponse[Client]:
    client, source = await service.get_client(client_id)
    return ApiResponse.ok(client, source=source)
