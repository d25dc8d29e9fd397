from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from aquacrm.core.modules.quotation.models import Quotation, QuotationCreate, QuotationStatus, QuotationUpdate
from aquacrm.core.pagination import PaginationResult
from aquacrm.web.deps import AppDep
from aquacrm.web.openapi import ErrorResponse

router = APIRouter(tags=["quotations"])


class UpdateQuotationStatusRequest(BaseModel):
    status: QuotationStatus = Field(..., description="New status; `Approved` also registers the lead as a client")


@router.get(
    "/quotations",
    summary="List quotations",
    description="Get paginated quotations, newest first, optionally filtered by status.",
    operation_id="listQuotations",
    responses={200: {"description": "Paginated list of quotations"}},
)
async def list_quotations(
    app: AppDep,
    limit: Annotated[int, Query(ge=1, description="Maximum items to return")] = 50,
    offset: Annotated[int, Query(ge=0, description="Number of items to skip")] = 0,
    status: Annotated[QuotationStatus | None, Query(description="Only quotations in this status")] = None,
) -> PaginationResult[Quotation]:
    return await app.get_quotations(limit, offset, status)


@router.get(
    "/quotations/{quotation_id}",
    summary="Get quotation",
    description="Get a quotation including its edit history.",
    operation_id="getQuotation",
    responses={
        200: {"description": "Quotation details"},
        404: {"model": ErrorResponse, "description": "Quotation not found"},
    },
)
async def get_quotation(quotation_id: UUID, app: AppDep) -> Quotation:
    return await app.get_quotation(quotation_id)


@router.post(
    "/quotations",
    summary="Create quotation",
    description=(
        "Create a draft quotation for an existing client (`client_id`) or a new lead (`client_info`). "
        "Line item prices and descriptions default to the catalog values."
    ),
    operation_id="createQuotation",
    status_code=201,
    responses={
        201: {"description": "Quotation created successfully"},
        404: {"model": ErrorResponse, "description": "Client or product not found"},
        503: {"model": ErrorResponse, "description": "Quotation number could not be allocated"},
    },
)
async def create_quotation(request: QuotationCreate, app: AppDep) -> Quotation:
    return await app.create_quotation(request)


@router.put(
    "/quotations/{quotation_id}",
    summary="Revise quotation",
    description="Replace the quotation content. The previous content is archived as a new version in the edit history.",
    operation_id="updateQuotation",
    responses={
        200: {"description": "Quotation revised successfully"},
        400: {"model": ErrorResponse, "description": "Quotation is approved and cannot be edited"},
        404: {"model": ErrorResponse, "description": "Quotation or product not found"},
    },
)
async def update_quotation(quotation_id: UUID, request: QuotationUpdate, app: AppDep) -> Quotation:
    return await app.update_quotation(quotation_id, request)


@router.patch(
    "/quotations/{quotation_id}/status",
    summary="Change quotation status",
    operation_id="updateQuotationStatus",
    responses={
        200: {"description": "Status updated"},
        404: {"model": ErrorResponse, "description": "Quotation not found"},
    },
)
async def update_quotation_status(quotation_id: UUID, request: UpdateQuotationStatusRequest, app: AppDep) -> Quotation:
    return await app.update_quotation_status(quotation_id, request.status)


@router.post(
    "/quotations/{quotation_id}/approve",
    summary="Approve quotation",
    description=(
        "Approve a quotation. A quotation for a lead is linked to the existing client with the same phone or email, "
        "or a new client is created from the lead details."
    ),
    operation_id="approveQuotation",
    responses={
        200: {"description": "Quotation approved"},
        404: {"model": ErrorResponse, "description": "Quotation not found"},
    },
)
async def approve_quotation(quotation_id: UUID, app: AppDep) -> Quotation:
    return await app.approve_quotation(quotation_id)
