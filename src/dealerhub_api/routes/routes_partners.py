"""Partner network endpoints, including the share recipient directory."""

from typing import Any
from typing import Dict
from typing import List
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
from dealerhub_api.db.repository_partner import PartnerRepository
from dealerhub_api.dependencies import get_db_pool
from dealerhub_api.schemas.schemas import PartnerCreateRequest
from dealerhub_api.schemas.schemas import PartnerDirectoryEntry
from dealerhub_api.sharing.enums import PartnerStatus
from dealerhub_api.sharing.enums import TrustLevel

ROUTER_PARTNERS = APIRouter(tags=["Partners"])


@ROUTER_PARTNERS.get("/partners")
async def list_partners(
    request: Request,
    status_filter: Optional[PartnerStatus] = Query(None, alias="status"),
    trust_level: Optional[TrustLevel] = Query(None),
    is_active: Optional[bool] = Query(None),
    db_pool: DealerDBPool = Depends(get_db_pool),
):
    """List partners, newest first."""
    logger.info(
        "Listing partners",
        status=status_filter.value if status_filter else None,
        trust_level=trust_level.value if trust_level else None,
        method=request.method,
        path=request.url.path,
    )
    partners = await PartnerRepository(db_pool.pool).list(
        {
            "status": status_filter.value if status_filter else None,
            "trust_level": trust_level.value if trust_level else None,
            "is_active": is_active,
        }
    )
    logger.info("Partners retrieved successfully", count=len(partners))
    return partners


@ROUTER_PARTNERS.get(
    "/partners/directory",
    response_model=List[PartnerDirectoryEntry],
    responses={
        status.HTTP_200_OK: {
            "description": "Active partners ordered by name",
            "content": {
                "application/json": {
                    "example": [
                        {
                            "id": "0b7a2a55-6c1e-4a0e-8f0e-5b0d7c1d9e11",
                            "name": "Northside Motors",
                            "contact_email": "dana@northside.example",
                            "contact_phone": "+15550123",
                        }
                    ]
                }
            },
        }
    },
)
async def get_partner_directory(db_pool: DealerDBPool = Depends(get_db_pool)):
    """Active partners offered as share recipients."""
    partners = await PartnerRepository(db_pool.pool).list_directory()
    logger.debug("Partner directory retrieved", count=len(partners))
    return partners


@ROUTER_PARTNERS.post(
    "/partners",
    status_code=status.HTTP_201_CREATED,
    responses={
        status.HTTP_201_CREATED: {"description": "Partner created"},
        status.HTTP_422_UNPROCESSABLE_CONTENT: {"description": "Invalid partner data"},
    },
)
async def create_partner(
    request: Request,
    partner: PartnerCreateRequest,
    db_pool: DealerDBPool = Depends(get_db_pool),
):
    """Add a partner to the network. New partners start as pending and unrated unless given."""
    logger.info("Creating partner", name=partner.name, method=request.method, path=request.url.path)
    created = await PartnerRepository(db_pool.pool).create(partner.model_dump(mode="json", exclude_none=True))
    logger.info("Partner created successfully", partner_id=created["id"], name=created["name"])
    return created


@ROUTER_PARTNERS.get(
    "/partners/{partner_id}",
    responses={status.HTTP_404_NOT_FOUND: {"description": "Partner not found"}},
)
async def get_partner(partner_id: str, db_pool: DealerDBPool = Depends(get_db_pool)):
    """Get a partner by id."""
    return await PartnerRepository(db_pool.pool).get(partner_id)


@ROUTER_PARTNERS.patch(
    "/partners/{partner_id}",
    responses={
        status.HTTP_404_NOT_FOUND: {"description": "Partner not found"},
        status.HTTP_422_UNPROCESSABLE_CONTENT: {"description": "Unknown field or invalid value"},
    },
)
async def update_partner(
    request: Request,
    partner_id: str,
    fields: Dict[str, Any] = Body(..., examples=[{"trust_level": "trusted"}]),
    db_pool: DealerDBPool = Depends(get_db_pool),
):
    """Update one or more fields of a partner."""
    logger.info(
        "Updating partner", partner_id=partner_id, fields=sorted(fields), method=request.method, path=request.url.path
    )
    return await PartnerRepository(db_pool.pool).update_fields(partner_id, fields)


@ROUTER_PARTNERS.delete(
    "/partners/{partner_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={status.HTTP_404_NOT_FOUND: {"description": "Partner not found"}},
)
async def delete_partner(request: Request, partner_id: str, db_pool: DealerDBPool = Depends(get_db_pool)):
    """Remove a partner from the network."""
    logger.info("Deleting partner", partner_id=partner_id, method=request.method, path=request.url.path)
    await PartnerRepository(db_pool.pool).delete(partner_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
