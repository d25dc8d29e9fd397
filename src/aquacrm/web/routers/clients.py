from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query

from aquacrm.app import ClientDocuments
from aquacrm.core.modules.client.models import Client, ClientCreate, ClientUpdate
from aquacrm.core.pagination import PaginationResult
from aquacrm.web.deps import AppDep
from aquacrm.web.openapi import ErrorResponse

router = APIRouter(tags=["clients"])


@router.get(
    "/clients",
    summary="List clients",
    description="Get paginated clients, newest first.",
    operation_id="listClients",
    responses={200: {"description": "Paginated list of clients"}},
)
async def list_clients(
    app: AppDep,
    limit: Annotated[int, Query(ge=1, description="Maximum items to return")] = 50,
    offset: Annotated[int, Query(ge=0, description="Number of items to skip")] = 0,
) -> PaginationResult[Client]:
    return await app.get_clients(limit, offset)


@router.get(
    "/clients/search",
    summary="Search clients",
    description="Case-insensitive search over client name, email and phone. Returns at most 10 clients.",
    operation_id="searchClients",
    responses={200: {"description": "Matching clients"}},
)
async def search_clients(app: AppDep, term: Annotated[str, Query(min_length=1, description="Search term")]) -> list[Client]:
    return await app.search_clients(term)


@router.get(
    "/clients/{client_id}",
    summary="Get client",
    description="Get a client together with its quotations, invoices and maintenance contracts.",
    operation_id="getClient",
    responses={
        200: {"description": "Client with related documents"},
        404: {"model": ErrorResponse, "description": "Client not found"},
    },
)
async def get_client(client_id: UUID, app: AppDep) -> ClientDocuments:
    return await app.get_client_documents(client_id)


@router.post(
    "/clients",
    summary="Create client",
    description="Create a client. Phone and email must not belong to another client.",
    operation_id="createClient",
    status_code=201,
    responses={
        201: {"description": "Client created successfully"},
        400: {"model": ErrorResponse, "description": "Duplicate phone or email"},
    },
)
async def create_client(request: ClientCreate, app: AppDep) -> Client:
    return await app.create_client(request)


@router.patch(
    "/clients/{client_id}",
    summary="Update client",
    description="Partially update a client. Only the fields provided are changed.",
    operation_id="updateClient",
    responses={
        200: {"description": "Client updated successfully"},
        400: {"model": ErrorResponse, "description": "Duplicate phone or email"},
        404: {"model": ErrorResponse, "description": "Client not found"},
    },
)
async def update_client(client_id: UUID, request: ClientUpdate, app: AppDep) -> Client:
    return await app.update_client(client_id, request)


@router.delete(
    "/clients/{client_id}",
    summary="Delete client",
    operation_id="deleteClient",
    status_code=204,
    responses={
        204: {"description": "Client deleted successfully"},
        404: {"model": ErrorResponse, "description": "Client not found"},
    },
)
async def delete_client(client_id: UUID, app: AppDep) -> None:
    await app.delete_client(client_id)
