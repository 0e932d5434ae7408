from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from synapse.api import deps
from synapse.services.health import check_db

router = APIRouter(prefix="/health", tags=["health"])

@router.get("/liveness")
async def liveness():
    """Verify whether the API is up."""
    return {"status": "ok"}

@router.get("/readiness")
async def readiness(session: AsyncSession = Depends(deps.get_db)):
    """Verify whether the chat store answers queries."""
    if await check_db(session):
        return {"status": "ready"}
    return {"status": "degraded"}
