import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import text

logger = logging.getLogger("synapse.services.health")

async def check_db(session: AsyncSession) -> bool:
    """Simple DB connectivity check.
    Uses a lightweight SELECT 1 statement and returns True if the DB responds.
    """
    try:
        await session.execute(text("SELECT 1"))
        return True
    except (SQLAlchemyError, OSError):
        logger.warning("health.db_unreachable", exc_info=True)
        return False
