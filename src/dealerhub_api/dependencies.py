"""FastAPI dependencies for accessing app state."""

from typing import Optional

from fastapi import Header
from fastapi import HTTPException
from fastapi import Request
from fastapi import status
from loguru import logger

from dealerhub_api.db.pool import DealerDBPool
from dealerhub_api.settings import Settings

# Identity header set by the dashboard for the acting dealer
DEALER_ID_HEADER = "X-Dealer-Id"


def get_settings(request: Request) -> Settings:
    """
    Get application settings from request state.

    Parameters
    ----------
    request : Request
        FastAPI request object

    Returns
    -------
    Settings
        Application settings instance
    """
    return request.app.state.settings


def get_db_pool(request: Request) -> DealerDBPool:
    """
    Get the database pool from request state.

    Parameters
    ----------
    request : Request
        FastAPI request object

    Returns
    -------
    DealerDBPool
        Pool wrapper created at startup

    Raises
    ------
    HTTPException
        503 if the API was started without a database
    """
    db_pool = getattr(request.app.state, "db_pool", None)
    if db_pool is None:
        logger.warning("Database requested but not configured", url_path=str(request.url.path))
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database is not configured",
        )
    return db_pool


async def get_dealer_id(
    x_dealer_id: Optional[str] = Header(
        None,
        alias=DEALER_ID_HEADER,
        description="<small>*Identifier of the acting dealer*</small>",
    ),
) -> Optional[str]:
    """
    Extract the acting dealer from the identity header.

    Parameters
    ----------
    x_dealer_id : Optional[str]
        Dealer identifier from the X-Dealer-Id header

    Returns
    -------
    Optional[str]
        Stripped dealer id, or None when the header is missing or blank
    """
    if x_dealer_id is None or not x_dealer_id.strip():
        return None
    return x_dealer_id.strip()
