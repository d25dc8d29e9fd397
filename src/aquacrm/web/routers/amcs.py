from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query

from aquacrm.core.modules.amc.models import AMC, AMCCreate, AMCUpdate, VisitStatusUpdate
from aquacrm.core.pagination import PaginationResult
from aquacrm.web.deps import AppDep
from aquacrm.web.openapi import ErrorResponse

router = APIRouter(tags=["amcs"])


@router.get(
    "/amcs",
    summary="List maintenance contracts",
    description="Get paginated AMCs, latest start date first, optionally for a single client.",
    operation_id="listAmcs",
    responses={200: {"description": "Paginated list of AMCs"}},
)
async def list_amcs(
    app: AppDep,
    limit: Annotated[int, Query(ge=1, description="Maximum items to return")] = 50,
    offset: Annotated[int, Query(ge=0, description="Number of items to skip")] = 0,
    client_id: Annotated[UUID | None, Query(description="Only contracts of this client")] = None,
) -> PaginationResult[AMC]:
    return await app.get_amcs(limit, offset, client_id)


@router.get(
    "/amcs/{amc_id}",
    summary="Get maintenance contract",
    operation_id="getAmc",
    responses={
        200: {"description": "AMC details with service visits"},
        404: {"model": ErrorResponse, "description": "AMC not found"},
    },
)
async def get_amc(amc_id: UUID, app: AppDep) -> AMC:
    return await app.get_amc(amc_id)


@router.post(
    "/amcs",
    summary="Create maintenance contract",
    description=(
        "Create an AMC. `frequency_per_year` service visits are scheduled evenly between `start_date` and "
        "`end_date`: the first on the start date and, for more than one visit, the last on the end date."
    ),
    operation_id="createAmc",
    status_code=201,
    responses={
        201: {"description": "AMC created successfully"},
        404: {"model": ErrorResponse, "description": "Client, product or originating invoice not found"},
        503: {"model": ErrorResponse, "description": "AMC number could not be allocated"},
    },
)
async def create_amc(request: AMCCreate, app: AppDep) -> AMC:
    return await app.create_amc(request)


@router.patch(
    "/amcs/{amc_id}",
    summary="Update maintenance contract",
    description=(
        "Partially update an AMC. Changing `start_date`, `end_date` or `frequency_per_year` regenerates the whole "
        "visit schedule: all visits are reset to `Scheduled` and previous completion records are discarded."
    ),
    operation_id="updateAmc",
    responses={
        200: {"description": "AMC updated successfully"},
        400: {"model": ErrorResponse, "description": "End date before start date"},
        404: {"model": ErrorResponse, "description": "AMC or product not found"},
    },
)
async def update_amc(amc_id: UUID, request: AMCUpdate, app: AppDep) -> AMC:
    return await app.update_amc(amc_id, request)


@router.patch(
    "/amcs/{amc_id}/visits/{visit_index}",
    summary="Update service visit",
    description="Set a visit's status. `Completed` records the completion date (today if omitted); other statuses clear it.",
    operation_id="updateAmcVisitStatus",
    responses={
        200: {"description": "Visit updated"},
        404: {"model": ErrorResponse, "description": "AMC or visit not found"},
    },
)
async def update_visit_status(amc_id: UUID, visit_index: int, request: VisitStatusUpdate, app: AppDep) -> AMC:
    return await app.update_amc_visit_status(amc_id, visit_index, request)


@router.delete(
    "/amcs/{amc_id}",
    summary="Delete maintenance contract",
    operation_id="deleteAmc",
    status_code=204,
    responses={
        204: {"description": "AMC deleted successfully"},
        404: {"model": ErrorResponse, "description": "AMC not found"},
    },
)
async def delete_amc(amc_id: UUID, app: AppDep) -> None:
    await app.delete_amc(amc_id)
