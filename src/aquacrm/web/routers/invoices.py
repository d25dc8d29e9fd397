from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from aquacrm.core.modules.invoice.models import Invoice, InvoiceFromAMC, InvoiceFromQuotation, InvoiceStatus, PaymentCreate
from aquacrm.core.pagination import PaginationResult
from aquacrm.web.deps import AppDep
from aquacrm.web.openapi import ErrorResponse

router = APIRouter(tags=["invoices"])


class UpdateInvoiceStatusRequest(BaseModel):
    status: InvoiceStatus = Field(..., description="New invoice status")


@router.get(
    "/invoices",
    summary="List invoices",
    description="Get paginated invoices, latest issue date first, optionally filtered by status.",
    operation_id="listInvoices",
    responses={200: {"description": "Paginated list of invoices"}},
)
async def list_invoices(
    app: AppDep,
    limit: Annotated[int, Query(ge=1, description="Maximum items to return")] = 50,
    offset: Annotated[int, Query(ge=0, description="Number of items to skip")] = 0,
    status: Annotated[InvoiceStatus | None, Query(description="Only invoices in this status")] = None,
) -> PaginationResult[Invoice]:
    return await app.get_invoices(limit, offset, status)


@router.get(
    "/invoices/{invoice_id}",
    summary="Get invoice",
    operation_id="getInvoice",
    responses={
        200: {"description": "Invoice details"},
        404: {"model": ErrorResponse, "description": "Invoice not found"},
    },
)
async def get_invoice(invoice_id: UUID, app: AppDep) -> Invoice:
    return await app.get_invoice(invoice_id)


@router.post(
    "/invoices/from-quotation",
    summary="Invoice a quotation",
    description="Create an invoice from an approved quotation that is linked to a client.",
    operation_id="createInvoiceFromQuotation",
    status_code=201,
    responses={
        201: {"description": "Invoice created successfully"},
        400: {"model": ErrorResponse, "description": "Quotation not approved or not linked to a client"},
        404: {"model": ErrorResponse, "description": "Quotation not found"},
        503: {"model": ErrorResponse, "description": "Invoice number could not be allocated"},
    },
)
async def create_invoice_from_quotation(request: InvoiceFromQuotation, app: AppDep) -> Invoice:
    return await app.create_invoice_from_quotation(request)


@router.post(
    "/invoices/from-amc",
    summary="Invoice a maintenance contract",
    description="Create an invoice for the contract amount of an AMC.",
    operation_id="createInvoiceFromAmc",
    status_code=201,
    responses={
        201: {"description": "Invoice created successfully"},
        404: {"model": ErrorResponse, "description": "AMC not found"},
        503: {"model": ErrorResponse, "description": "Invoice number could not be allocated"},
    },
)
async def create_invoice_from_amc(request: InvoiceFromAMC, app: AppDep) -> Invoice:
    return await app.create_invoice_from_amc(request)


@router.post(
    "/invoices/{invoice_id}/payments",
    summary="Record payment",
    description="Add a payment to the invoice. The invoice becomes `Paid` once the total amount is covered.",
    operation_id="recordPayment",
    responses={
        200: {"description": "Payment recorded"},
        400: {"model": ErrorResponse, "description": "Invoice is paid or cancelled"},
        404: {"model": ErrorResponse, "description": "Invoice not found"},
    },
)
async def record_payment(invoice_id: UUID, request: PaymentCreate, app: AppDep) -> Invoice:
    return await app.record_payment(invoice_id, request)


@router.patch(
    "/invoices/{invoice_id}/status",
    summary="Change invoice status",
    operation_id="updateInvoiceStatus",
    responses={
        200: {"description": "Status updated"},
        404: {"model": ErrorResponse, "description": "Invoice not found"},
    },
)
async def update_invoice_status(invoice_id: UUID, request: UpdateInvoiceStatusRequest, app: AppDep) -> Invoice:
    return await app.update_invoice_status(invoice_id, request.status)
