"""Car offer endpoints."""

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
from dealerhub_api.db.repository_offer import OfferRepository
from dealerhub_api.dependencies import get_db_pool
from dealerhub_api.sharing.enums import OfferStatus

ROUTER_OFFERS = APIRouter(tags=["Offers"])


@ROUTER_OFFERS.get(
    "/offers",
    responses={
        status.HTTP_200_OK: {
            "description": "Car offers, newest first",
            "content": {
                "application/json": {
                    "example": [
                        {
                            "id": "6f1c1f4e-2a8e-4c53-9a55-3b8f0f6d2f10",
                            "full_name": "Sam Lee",
                            "make": "Toyota",
                            "model": "Corolla",
                            "year": 2019,
                            "status": "New",
                        }
                    ]
                }
            },
        }
    },
)
async def list_offers(
    request: Request,
    status_filter: Optional[OfferStatus] = Query(None, alias="status"),
    make: Optional[str] = Query(None),
    contacted: Optional[bool] = Query(None),
    db_pool: DealerDBPool = Depends(get_db_pool),
):
    """List car offers with optional status, make and contacted filters."""
    logger.info(
        "Listing offers",
        status=status_filter.value if status_filter else None,
        make=make,
        contacted=contacted,
        method=request.method,
        path=request.url.path,
    )
    repo = OfferRepository(db_pool.pool)
    offers = await repo.list(
        {
            "status": status_filter.value if status_filter else None,
            "make": make,
            "contacted": contacted,
        }
    )
    logger.info("Offers retrieved successfully", count=len(offers))
    return offers


@ROUTER_OFFERS.get(
    "/offers/{offer_id}",
    responses={
        status.HTTP_404_NOT_FOUND: {
            "description": "Offer not found",
            "content": {"application/json": {"example": {"message": "Record 'abc' not found in car_offers"}}},
        },
    },
)
async def get_offer(offer_id: str, db_pool: DealerDBPool = Depends(get_db_pool)):
    """Get a car offer by id."""
    return await OfferRepository(db_pool.pool).get(offer_id)


@ROUTER_OFFERS.patch(
    "/offers/{offer_id}",
    responses={
        status.HTTP_404_NOT_FOUND: {"description": "Offer not found"},
        status.HTTP_422_UNPROCESSABLE_CONTENT: {
            "description": "Unknown field or invalid value",
            "content": {
                "application/json": {
                    "example": {"message": "Invalid value 'Sold' for status. Allowed: Accepted, In Review, New, Rejected"}
                }
            },
        },
    },
)
async def update_offer(
    request: Request,
    offer_id: str,
    fields: Dict[str, Any] = Body(..., examples=[{"status": "In Review"}]),
    db_pool: DealerDBPool = Depends(get_db_pool),
):
    """Update one or more fields of a car offer (inline cell edit)."""
    logger.info("Updating offer", offer_id=offer_id, fields=sorted(fields), method=request.method, path=request.url.path)
    return await OfferRepository(db_pool.pool).update_fields(offer_id, fields)


@ROUTER_OFFERS.delete(
    "/offers/{offer_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={status.HTTP_404_NOT_FOUND: {"description": "Offer not found"}},
)
async def delete_offer(request: Request, offer_id: str, db_pool: DealerDBPool = Depends(get_db_pool)):
    """Delete a car offer."""
    logger.info("Deleting offer", offer_id=offer_id, method=request.method, path=request.url.path)
    await OfferRepository(db_pool.pool).delete(offer_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
