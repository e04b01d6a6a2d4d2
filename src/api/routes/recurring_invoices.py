"""Recurring Invoice API Routes

FastAPI routes for managing recurring invoice series and firing generations.
"""

from datetime import date, datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import Response
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.error import ClientError
from src.api.schemas.recurring_invoice_request import (
    CreateRecurringInvoiceRequestSchema,
    UpdateRecurringInvoiceRequestSchema,
    UpdateStatusRequestSchema,
)
from src.adapter.repositories.recurring_invoice_repository import SqlAlchemyRecurringInvoiceRepository
from src.adapter.repositories.generated_invoice_repository import SqlAlchemyGeneratedInvoiceRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.invoice_gateway import InvoiceGateway
from src.app.services.line_item_resolver import LineItemResolver
from src.app.use_cases.recurring_invoices import (
    CreateRecurringInvoice,
    UpdateRecurringInvoice,
    SetRecurringInvoiceStatus,
    DeleteRecurringInvoice,
    GetRecurringInvoice,
    ListRecurringInvoices,
    ListDueRecurringInvoices,
    GenerateRecurringInvoice,
    MaterializeLineItems,
    PreviewSchedule,
    ListGeneratedInvoices,
    CreateRecurringInvoiceCommandDTO,
    UpdateRecurringInvoiceCommandDTO,
    RecurringInvoiceResponseDTO,
    ListRecurringInvoicesResponseDTO,
    MaterializedInvoiceDTO,
    GenerationResultDTO,
    ListGeneratedInvoicesResponseDTO,
    SchedulePreviewDTO,
)
from src.domain.recurring_invoice import RecurringInvoiceStatus
from src.depends import get_session, get_line_item_resolver, get_invoice_gateway
from config import ApplicationConfig

router = APIRouter(prefix="/recurring-invoices", tags=["Recurring Invoices"])

NOT_FOUND_RESPONSE = {
    "description": "Recurring invoice not found",
    "content": {
        "application/json": {
            "example": {
                "error": {
                    "code": "SERIES_NOT_FOUND",
                    "message": "Recurring invoice 3f6c... not found"
                }
            }
        }
    }
}


def _today() -> date:
    return datetime.utcnow().date()


@router.get(
    "",
    response_model=ListRecurringInvoicesResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def list_recurring_invoices(
    workspace_id: Optional[str] = Query(default=None),
    status_filter: Optional[RecurringInvoiceStatus] = Query(default=None, alias="status"),
    client_id: Optional[str] = Query(default=None),
    limit: int = Query(default=50),
    offset: int = Query(default=0),
    session: AsyncSession = Depends(get_session),
):
    """
    List recurring invoices, newest first.

    **Query parameters:**
    - `status`: active, paused, completed or cancelled
    - `client_id`, `workspace_id`: exact-match filters
    - `limit` (1-200), `offset`
    """
    use_case = ListRecurringInvoices(SqlAlchemyRecurringInvoiceRepository(session))
    result = await use_case.execute(
        workspace_id=workspace_id,
        status=status_filter,
        client_id=client_id,
        limit=limit,
        offset=offset,
    )

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.get(
    "/due",
    response_model=List[RecurringInvoiceResponseDTO],
    status_code=status.HTTP_200_OK,
)
async def list_due_recurring_invoices(
    as_of: Optional[date] = Query(default=None, description="Defaults to today (UTC)"),
    session: AsyncSession = Depends(get_session),
):
    """
    List active series whose next generation date is on or before `as_of`.
    """
    use_case = ListDueRecurringInvoices(SqlAlchemyRecurringInvoiceRepository(session))
    result = await use_case.execute(as_of or _today())

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.post(
    "",
    response_model=RecurringInvoiceResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {
            "description": "Invalid series definition",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "VALIDATION_ERROR",
                            "message": "recipient_email is required when auto_send is enabled"
                        }
                    }
                }
            }
        }
    }
)
async def create_recurring_invoice(
    request: CreateRecurringInvoiceRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    """
    Create a recurring invoice series.

    The first generation date is `day_of_month` in the start month, clamped to
    the month length, or the following month when that day is before `start_date`.

    **Returns:**
    - 201: Series created
    - 400: Invalid definition
    """
    uow = SqlAlchemyUnitOfWork(session)
    series_repo = SqlAlchemyRecurringInvoiceRepository(session)

    use_case = CreateRecurringInvoice(
        uow, series_repo, default_currency=ApplicationConfig.DEFAULT_CURRENCY
    )
    result = await use_case.execute(CreateRecurringInvoiceCommandDTO(**request.model_dump()))

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.get(
    "/{series_id}",
    response_model=RecurringInvoiceResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={404: NOT_FOUND_RESPONSE},
)
async def get_recurring_invoice(
    series_id: str,
    session: AsyncSession = Depends(get_session),
):
    use_case = GetRecurringInvoice(SqlAlchemyRecurringInvoiceRepository(session))
    result = await use_case.execute(series_id)

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.patch(
    "/{series_id}",
    response_model=RecurringInvoiceResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={404: NOT_FOUND_RESPONSE},
)
async def update_recurring_invoice(
    series_id: str,
    request: UpdateRecurringInvoiceRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    """
    Partially update a series definition.

    **Returns:**
    - 200: Series updated
    - 400: Invalid change (e.g. frequency change after the first generation)
    - 404: Series not found
    - 409: Series is completed or cancelled, or was modified concurrently
    """
    uow = SqlAlchemyUnitOfWork(session)
    series_repo = SqlAlchemyRecurringInvoiceRepository(session)

    command = UpdateRecurringInvoiceCommandDTO(**request.model_dump(exclude_unset=True))
    result = await UpdateRecurringInvoice(uow, series_repo).execute(series_id, command)

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.patch(
    "/{series_id}/status",
    response_model=RecurringInvoiceResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        404: NOT_FOUND_RESPONSE,
        409: {
            "description": "Series already in a terminal state",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "TERMINAL_STATE",
                            "message": "Recurring invoice is cancelled and cannot change status"
                        }
                    }
                }
            }
        }
    }
)
async def set_recurring_invoice_status(
    series_id: str,
    request: UpdateStatusRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    """
    Pause, resume or cancel a series. Requesting the current status is a no-op.
    """
    uow = SqlAlchemyUnitOfWork(session)
    series_repo = SqlAlchemyRecurringInvoiceRepository(session)

    result = await SetRecurringInvoiceStatus(uow, series_repo).execute(series_id, request.status)

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.post(
    "/{series_id}/generate",
    response_model=GenerationResultDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: NOT_FOUND_RESPONSE,
        409: {
            "description": "Series not due, not active, or modified concurrently",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "NOT_DUE",
                            "message": "Recurring invoice is not due before 2024-03-31"
                        }
                    }
                }
            }
        },
        502: {"description": "Invoicing or catalog service failed"},
    }
)
async def generate_recurring_invoice(
    series_id: str,
    as_of: Optional[date] = Query(default=None, description="Defaults to today (UTC)"),
    force: bool = Query(default=False, description="Generate now even if not yet due"),
    session: AsyncSession = Depends(get_session),
    resolver: LineItemResolver = Depends(get_line_item_resolver),
    invoice_gateway: InvoiceGateway = Depends(get_invoice_gateway),
):
    """
    Fire one generation of a series.

    Exactly one period is consumed per call. `force=true` generates the pending
    period ahead of its date; the series must still be active.

    **Returns:**
    - 201: Invoice generated and schedule advanced
    - 404: Series not found
    - 409: Not due, not active, or concurrent modification
    - 502: Collaborator failure; nothing was advanced
    """
    uow = SqlAlchemyUnitOfWork(session)
    use_case = GenerateRecurringInvoice(
        uow,
        SqlAlchemyRecurringInvoiceRepository(session),
        SqlAlchemyGeneratedInvoiceRepository(session),
        resolver,
        invoice_gateway,
    )
    result = await use_case.execute(series_id, as_of or _today(), force=force)

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.get(
    "/{series_id}/line-items",
    response_model=MaterializedInvoiceDTO,
    status_code=status.HTTP_200_OK,
    responses={404: NOT_FOUND_RESPONSE},
)
async def materialize_line_items(
    series_id: str,
    session: AsyncSession = Depends(get_session),
    resolver: LineItemResolver = Depends(get_line_item_resolver),
):
    """
    Preview the concrete line items the next generation would produce.
    """
    use_case = MaterializeLineItems(SqlAlchemyRecurringInvoiceRepository(session), resolver)
    result = await use_case.execute(series_id)

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.get(
    "/{series_id}/invoices",
    response_model=ListGeneratedInvoicesResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={404: NOT_FOUND_RESPONSE},
)
async def list_generated_invoices(
    series_id: str,
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    session: AsyncSession = Depends(get_session),
):
    use_case = ListGeneratedInvoices(
        SqlAlchemyRecurringInvoiceRepository(session),
        SqlAlchemyGeneratedInvoiceRepository(session),
    )
    result = await use_case.execute(series_id, limit=limit, offset=offset)

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.get(
    "/{series_id}/schedule",
    response_model=SchedulePreviewDTO,
    status_code=status.HTTP_200_OK,
    responses={404: NOT_FOUND_RESPONSE},
)
async def preview_schedule(
    series_id: str,
    count: int = Query(default=12),
    session: AsyncSession = Depends(get_session),
):
    """
    Upcoming generation dates, starting with the pending one.
    """
    use_case = PreviewSchedule(SqlAlchemyRecurringInvoiceRepository(session))
    result = await use_case.execute(series_id, count=count)

    if result.is_err():
        raise ClientError.from_error(result.error)

    return result.value


@router.delete(
    "/{series_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: NOT_FOUND_RESPONSE},
)
async def delete_recurring_invoice(
    series_id: str,
    session: AsyncSession = Depends(get_session),
):
    """
    Delete a series and its generated-invoice audit trail. Invoices already
    created in the invoicing service are not touched.
    """
    uow = SqlAlchemyUnitOfWork(session)
    result = await DeleteRecurringInvoice(uow, SqlAlchemyRecurringInvoiceRepository(session)).execute(series_id)

    if result.is_err():
        raise ClientError.from_error(result.error)

    return Response(status_code=status.HTTP_204_NO_CONTENT)
