"""Rental reservation and rental client endpoints."""

from typing import Any
from typing import Dict
from typing import Optional

from fastapi import APIRouter
from fastapi import Body
from fastapi import Depends
from fastapi import Query
from fastapi import Request
from fastapi import Response
from fastapi import status
from loguru import logger

from dealerhub_api.db.pool import DealerDBPool
from dealerhub_api.db.repository_rental import RentalClientRepository
from dealerhub_api.db.repository_rental import RentalReservationRepository
from dealerhub_api.dependencies import get_db_pool
from dealerhub_api.dependencies import get_dealer_id
from dealerhub_api.schemas.schemas import RentalClientPage
from dealerhub_api.schemas.schemas import ReservationRejectRequest
from dealerhub_api.sharing.enums import ClientStatus
from dealerhub_api.sharing.enums import ReservationStatus

ROUTER_RENTALS = APIRouter(tags=["Rentals"], prefix="/rentals")

STATE_CONFLICT_RESPONSE = {
    "description": "Reservation is not pending",
    "content": {
        "application/json": {"example": {"message": "Cannot confirm record 'abc' with status 'confirmed'"}}
    },
}


##########################
# Reservations
##########################


@ROUTER_RENTALS.get("/reservations")
async def list_reservations(
    request: Request,
    status_filter: Optional[ReservationStatus] = Query(None, alias="status"),
    listing_id: Optional[str] = Query(None),
    db_pool: DealerDBPool = Depends(get_db_pool),
):
    """List rental reservations, newest first."""
    logger.info(
        "Listing reservations",
        status=status_filter.value if status_filter else None,
        listing_id=listing_id,
        method=request.method,
        path=request.url.path,
    )
    reservations = await RentalReservationRepository(db_pool.pool).list(
        {"status": status_filter.value if status_filter else None, "listing_id": listing_id}
    )
    logger.info("Reservations retrieved successfully", count=len(reservations))
    return reservations


@ROUTER_RENTALS.get(
    "/reservations/{reservation_id}",
    responses={status.HTTP_404_NOT_FOUND: {"description": "Reservation not found"}},
)
async def get_reservation(reservation_id: str, db_pool: DealerDBPool = Depends(get_db_pool)):
    """Get a rental reservation by id."""
    return await RentalReservationRepository(db_pool.pool).get(reservation_id)


@ROUTER_RENTALS.patch(
    "/reservations/{reservation_id}",
    responses={
        status.HTTP_404_NOT_FOUND: {"description": "Reservation not found"},
        status.HTTP_422_UNPROCESSABLE_CONTENT: {"description": "Unknown field or invalid value"},
    },
)
async def update_reservation(
    request: Request,
    reservation_id: str,
    fields: Dict[str, Any] = Body(..., examples=[{"admin_comments": "Called renter"}]),
    db_pool: DealerDBPool = Depends(get_db_pool),
):
    """Update one or more fields of a rental reservation."""
    logger.info(
        "Updating reservation",
        reservation_id=reservation_id,
        fields=sorted(fields),
        method=request.method,
        path=request.url.path,
    )
    return await RentalReservationRepository(db_pool.pool).update_fields(reservation_id, fields)


@ROUTER_RENTALS.post(
    "/reservations/{reservation_id}/confirm",
    responses={
        status.HTTP_404_NOT_FOUND: {"description": "Reservation not found"},
        status.HTTP_409_CONFLICT: STATE_CONFLICT_RESPONSE,
    },
)
async def confirm_reservation(
    request: Request,
    reservation_id: str,
    dealer_id: Optional[str] = Depends(get_dealer_id),
    db_pool: DealerDBPool = Depends(get_db_pool),
):
    """Confirm a pending reservation; the acting dealer is recorded as approver."""
    logger.info("Confirming reservation", reservation_id=reservation_id, method=request.method, path=request.url.path)
    return await RentalReservationRepository(db_pool.pool).confirm(reservation_id, dealer_id)


@ROUTER_RENTALS.post(
    "/reservations/{reservation_id}/reject",
    responses={
        status.HTTP_404_NOT_FOUND: {"description": "Reservation not found"},
        status.HTTP_409_CONFLICT: STATE_CONFLICT_RESPONSE,
    },
)
async def reject_reservation(
    request: Request,
    reservation_id: str,
    body: Optional[ReservationRejectRequest] = Body(None),
    dealer_id: Optional[str] = Depends(get_dealer_id),
    db_pool: DealerDBPool = Depends(get_db_pool),
):
    """Reject a pending reservation with an optional comment for the renter."""
    logger.info("Rejecting reservation", reservation_id=reservation_id, method=request.method, path=request.url.path)
    comments = body.admin_comments if body else None
    return await RentalReservationRepository(db_pool.pool).reject(reservation_id, dealer_id, comments)


@ROUTER_RENTALS.delete(
    "/reservations/{reservation_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={status.HTTP_404_NOT_FOUND: {"description": "Reservation not found"}},
)
async def delete_reservation(request: Request, reservation_id: str, db_pool: DealerDBPool = Depends(get_db_pool)):
    """Delete a rental reservation."""
    logger.info("Deleting reservation", reservation_id=reservation_id, method=request.method, path=request.url.path)
    await RentalReservationRepository(db_pool.pool).delete(reservation_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


##########################
# Clients
##########################


@ROUTER_RENTALS.get(
    "/clients",
    response_model=RentalClientPage,
    responses={
        status.HTTP_200_OK: {
            "description": "One page of rental clients",
            "content": {
                "application/json": {
                    "example": {
                        "rows": [{"id": "3e2b...", "name": "Ana Ruiz", "status": "VIP", "tags": ["airport"]}],
                        "paging": {"total": 41, "page": 1, "page_size": 20, "total_pages": 3},
                    }
                }
            },
        }
    },
)
async def list_clients(
    request: Request,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=200),
    search: Optional[str] = Query(None),
    status_filter: Optional[ClientStatus] = Query(None, alias="status"),
    sort_by: str = Query("created_at"),
    sort_dir: str = Query("desc", pattern="^(asc|desc)$"),
    db_pool: DealerDBPool = Depends(get_db_pool),
):
    """List rental clients page by page with optional search and status filter."""
    logger.info(
        "Listing rental clients",
        page=page,
        page_size=page_size,
        search=search,
        status=status_filter.value if status_filter else None,
        method=request.method,
        path=request.url.path,
    )
    return await RentalClientRepository(db_pool.pool).list_page(
        page=page,
        page_size=page_size,
        search=search,
        status=status_filter.value if status_filter else None,
        sort_by=sort_by,
        sort_dir=sort_dir,
    )


@ROUTER_RENTALS.patch(
    "/clients/{client_id}",
    responses={
        status.HTTP_404_NOT_FOUND: {"description": "Client not found"},
        status.HTTP_422_UNPROCESSABLE_CONTENT: {"description": "Unknown field or invalid value"},
    },
)
async def update_client(
    request: Request,
    client_id: str,
    fields: Dict[str, Any] = Body(..., examples=[{"status": "VIP"}]),
    db_pool: DealerDBPool = Depends(get_db_pool),
):
    """Update one or more fields of a rental client."""
    logger.info("Updating rental client", client_id=client_id, fields=sorted(fields), method=request.method, path=request.url.path)
    return await RentalClientRepository(db_pool.pool).update_fields(client_id, fields)


@ROUTER_RENTALS.delete(
    "/clients/{client_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={status.HTTP_404_NOT_FOUND: {"description": "Client not found"}},
)
async def delete_client(request: Request, client_id: str, db_pool: DealerDBPool = Depends(get_db_pool)):
    """Delete a rental client."""
    logger.info("Deleting rental client", client_id=client_id, method=request.method, path=request.url.path)
    await RentalClientRepository(db_pool.pool).delete(client_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
