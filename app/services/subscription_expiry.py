import structlog

from app.dependencies.database import AsyncSessionLocal
from app.services.subscription_service import expire_subscriptions

logger = structlog.get_logger(__name__)

async def deactivate_expired_subscriptions():
    """
    Background task that moves active subscriptions past their end date to
    inactive, so stored status matches what the subscription gate computes.
    """
    logger.info("Running expiry check for subscriptions")

    async with AsyncSessionLocal() as db:
        expired = await expire_subscriptions(db)

    if expired:
        logger.info("Deactivated expired subscriptions", count=expired)
    else:
        logger.info("No expired subscriptions found")
    return expired
