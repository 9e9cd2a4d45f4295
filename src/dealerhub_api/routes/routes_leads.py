"""Lead endpoints."""

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
from dealerhub_api.db.repository_lead import LeadRepository
from dealerhub_api.dependencies import get_db_pool
from dealerhub_api.sharing.enums import LeadStatus

ROUTER_LEADS = APIRouter(tags=["Leads"])


@ROUTER_LEADS.get("/leads")
async def list_leads(
    request: Request,
    status_filter: Optional[LeadStatus] = Query(None, alias="status"),
    make: Optional[str] = Query(None),
    contacted: Optional[bool] = Query(None),
    db_pool: DealerDBPool = Depends(get_db_pool),
):
    """List leads, newest first."""
    logger.info(
        "Listing leads",
        status=status_filter.value if status_filter else None,
        make=make,
        method=request.method,
        path=request.url.path,
    )
    leads = await LeadRepository(db_pool.pool).list(
        {
            "status": status_filter.value if status_filter else None,
            "make": make,
            "contacted": contacted,
        }
    )
    logger.info("Leads retrieved successfully", count=len(leads))
    return leads


@ROUTER_LEADS.get("/leads/{lead_id}", responses={status.HTTP_404_NOT_FOUND: {"description": "Lead not found"}})
async def get_lead(lead_id: str, db_pool: DealerDBPool = Depends(get_db_pool)):
    """Get a lead by id."""
    return await LeadRepository(db_pool.pool).get(lead_id)


@ROUTER_LEADS.patch(
    "/leads/{lead_id}",
    responses={
        status.HTTP_404_NOT_FOUND: {"description": "Lead not found"},
        status.HTTP_422_UNPROCESSABLE_CONTENT: {"description": "Unknown field or invalid value"},
    },
)
async def update_lead(
    request: Request,
    lead_id: str,
    fields: Dict[str, Any] = Body(..., examples=[{"contacted": True}]),
    db_pool: DealerDBPool = Depends(get_db_pool),
):
    """Update one or more fields of a lead."""
    logger.info("Updating lead", lead_id=lead_id, fields=sorted(fields), method=request.method, path=request.url.path)
    return await LeadRepository(db_pool.pool).update_fields(lead_id, fields)


@ROUTER_LEADS.delete(
    "/leads/{lead_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={status.HTTP_404_NOT_FOUND: {"description": "Lead not found"}},
)
async def delete_lead(request: Request, lead_id: str, db_pool: DealerDBPool = Depends(get_db_pool)):
    """Delete a lead."""
    logger.info("Deleting lead", lead_id=lead_id, method=request.method, path=request.url.path)
    await LeadRepository(db_pool.pool).delete(lead_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
