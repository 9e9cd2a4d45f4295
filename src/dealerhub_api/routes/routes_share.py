"""
Share API Routes

Broadcast selected records to the partner network and read back the share history.
Each submission is stored as one history row, whatever the number of records.
"""

from typing import Optional

import asyncpg
from fastapi import APIRouter
from fastapi import Depends
from fastapi import Request
from fastapi import status
from fastapi.responses import JSONResponse
from loguru import logger

from dealerhub_api.db.pool import DealerDBPool
from dealerhub_api.db.repository_base import BaseRepository
from dealerhub_api.db.repository_lead import LeadRepository
from dealerhub_api.db.repository_offer import OfferRepository
from dealerhub_api.db.repository_partner import PartnerRepository
from dealerhub_api.db.repository_rental import RentalReservationRepository
from dealerhub_api.db.repository_share import ShareRepository
from dealerhub_api.dependencies import get_db_pool
from dealerhub_api.dependencies import get_dealer_id
from dealerhub_api.schemas.schemas import MessageResponse
from dealerhub_api.schemas.schemas import ShareSubmissionRequest
from dealerhub_api.schemas.schemas import ShareSubmissionResponse
from dealerhub_api.sharing.enums import ShareEntity

ROUTER_SHARE = APIRouter(tags=["Share"])

SHARE_RESPONSES = {
    status.HTTP_200_OK: {
        "description": "Records shared",
        "content": {
            "application/json": {
                "example": {
                    "success": True,
                    "shared_count": 2,
                    "shared": {
                        "id": "c1d5f0a2-4b1e-4a43-9f34-0a7e1c0b5d21",
                        "entity": "offers",
                        "dealer_id": "dealer-42",
                        "record_ids": ["6f1c...", "7a2d..."],
                        "records_summary": [{"id": "6f1c...", "make": "Toyota", "model": "Corolla", "year": 2019}],
                        "channels": ["WhatsApp"],
                        "shared_with_trust_levels": ["trusted"],
                        "shared_with_contacts": [],
                        "shared_with_partner_ids": [],
                        "message": "Check out these offers.",
                        "status": "pending",
                        "idempotency_key": None,
                        "created_at": "2026-01-05T12:00:00+00:00",
                    },
                }
            }
        },
    },
    status.HTTP_400_BAD_REQUEST: {
        "model": MessageResponse,
        "description": "Missing fields or no existing record to share",
        "content": {"application/json": {"example": {"message": "Missing required fields"}}},
    },
    status.HTTP_500_INTERNAL_SERVER_ERROR: {
        "model": MessageResponse,
        "description": "Share could not be stored",
        "content": {"application/json": {"example": {"message": "Failed to share offers"}}},
    },
}


def _record_repository(entity: ShareEntity, pool: asyncpg.Pool) -> BaseRepository:
    if entity == ShareEntity.OFFERS:
        return OfferRepository(pool)
    if entity == ShareEntity.LEADS:
        return LeadRepository(pool)
    if entity == ShareEntity.PARTNERS:
        return PartnerRepository(pool)
    return RentalReservationRepository(pool)


def _bad_request(request: Request, entity: ShareEntity, message: str) -> JSONResponse:
    logger.warning(
        "Share rejected",
        entity=entity.value,
        reason=message,
        http_status=400,
        http_method=request.method,
        url_path=str(request.url.path),
    )
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": message})


async def share_records(
    request: Request,
    entity: ShareEntity,
    body: ShareSubmissionRequest,
    db_pool: DealerDBPool,
):
    """
    Validate a share submission and store one history row.

    Ids without an existing record are skipped. The response counts the records
    actually shared.
    """
    record_ids = getattr(body, entity.ids_field)
    if not record_ids or body.channels is None or body.shared_with_trust_levels is None:
        return _bad_request(request, entity, "Missing required fields")

    logger.info(
        f"Sharing {entity.value}",
        entity=entity.value,
        record_count=len(record_ids),
        dealer_id=body.dealer_id,
        channels=body.channels,
        trust_levels=body.shared_with_trust_levels,
        contact_count=len(body.shared_with_contacts),
    )

    try:
        records = await _record_repository(entity, db_pool.pool).get_many(record_ids)
        if not records:
            return _bad_request(request, entity, f"No valid {entity.value} to share")

        skipped = len(record_ids) - len(records)
        if skipped:
            logger.warning(f"Skipping {skipped} unknown {entity.value}", entity=entity.value, skipped=skipped)

        entry, created = await ShareRepository(db_pool.pool, entity).create(
            dealer_id=body.dealer_id,
            records=records,
            channels=body.channels,
            trust_levels=body.shared_with_trust_levels,
            contacts=body.shared_with_contacts,
            partner_ids=body.shared_with_partner_ids,
            message=body.message,
            idempotency_key=body.idempotency_key,
        )
    except asyncpg.PostgresError as e:
        logger.error(
            f"Failed to store {entity.value} share: {e}",
            entity=entity.value,
            http_status=500,
            http_method=request.method,
            url_path=str(request.url.path),
            error_type=type(e).__name__,
            request_body=getattr(request.state, "request_body", None),
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": f"Failed to share {entity.value}"},
        )

    logger.info(
        f"{entity.value.capitalize()} shared successfully",
        entity=entity.value,
        share_id=entry["id"],
        shared_count=len(entry["record_ids"]),
        replayed=not created,
    )
    return {"success": True, "shared_count": len(entry["record_ids"]), "shared": entry}


@ROUTER_SHARE.post("/share-offers", response_model=ShareSubmissionResponse, responses=SHARE_RESPONSES)
async def share_offers(
    request: Request,
    body: ShareSubmissionRequest,
    db_pool: DealerDBPool = Depends(get_db_pool),
):
    """Share car offers (body field: offer_ids)."""
    return await share_records(request, ShareEntity.OFFERS, body, db_pool)


@ROUTER_SHARE.post("/share-leads", response_model=ShareSubmissionResponse, responses=SHARE_RESPONSES)
async def share_leads(
    request: Request,
    body: ShareSubmissionRequest,
    db_pool: DealerDBPool = Depends(get_db_pool),
):
    """Share leads (body field: lead_ids)."""
    return await share_records(request, ShareEntity.LEADS, body, db_pool)


@ROUTER_SHARE.post("/partner-shares", response_model=ShareSubmissionResponse, responses=SHARE_RESPONSES)
async def share_partners(
    request: Request,
    body: ShareSubmissionRequest,
    db_pool: DealerDBPool = Depends(get_db_pool),
):
    """Share partners (body field: partner_ids)."""
    return await share_records(request, ShareEntity.PARTNERS, body, db_pool)


@ROUTER_SHARE.post("/share-rentals", response_model=ShareSubmissionResponse, responses=SHARE_RESPONSES)
async def share_rentals(
    request: Request,
    body: ShareSubmissionRequest,
    db_pool: DealerDBPool = Depends(get_db_pool),
):
    """Share rental reservations (body field: rental_ids)."""
    return await share_records(request, ShareEntity.RENTALS, body, db_pool)


@ROUTER_SHARE.get(
    "/share-history/{entity}",
    responses={
        status.HTTP_200_OK: {
            "description": "Share history of the acting dealer, newest first ([] without X-Dealer-Id)",
        }
    },
)
async def get_share_history(
    entity: ShareEntity,
    dealer_id: Optional[str] = Depends(get_dealer_id),
    db_pool: DealerDBPool = Depends(get_db_pool),
):
    """Share history for the dealer identified by the X-Dealer-Id header."""
    if dealer_id is None:
        logger.debug("Share history requested without dealer", entity=entity.value)
        return []

    history = await ShareRepository(db_pool.pool, entity).list_for_dealer(dealer_id)
    logger.info("Share history retrieved", entity=entity.value, dealer_id=dealer_id, count=len(history))
    return history
