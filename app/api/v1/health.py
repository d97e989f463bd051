"""Health check: database connectivity and banking service reachability."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.v1.banking_deps import get_banking_client
from app.core.config import settings
from app.core.database import check_db_connected, get_db
from app.schemas.health import HealthResponse
from app.services.banking import BankingClient

router = APIRouter()


@router.get("", response_model=HealthResponse)
async def get_health(
    db: Annotated[Session, Depends(get_db)],
    banking: Annotated[BankingClient, Depends(get_banking_client)],
) -> HealthResponse:
    """
    Service status for load balancers and monitoring.
    Always 200; degraded dependencies are reported in the body.
    """
    return HealthResponse(
        environment=settings.APP_ENV,
        database="connected" if check_db_connected(db) else "disconnected",
        banking_service="reachable" if await banking.ping() else "unreachable",
    )
