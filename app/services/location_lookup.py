import httpx
import structlog
import json
import redis.asyncio as redis
from redis.exceptions import RedisError

from app.config import settings
from app.core.exceptions import UpstreamError
from app.utils.retry import async_retry

logger = structlog.get_logger(__name__)

redis_client = redis.from_url(settings.REDIS_URL, encoding="utf-8", decode_responses=True)

FALLBACK_BANNERS = [
    "https://images.pexels.com/photos/323780/pexels-photo-323780.jpeg",
    "https://images.pexels.com/photos/1396122/pexels-photo-1396122.jpeg",
    "https://images.pexels.com/photos/1029599/pexels-photo-1029599.jpeg",
    "https://images.pexels.com/photos/2102587/pexels-photo-2102587.jpeg",
]

async def _cache_get(key: str):
    try:
        cached = await redis_client.get(key)
    except RedisError as e:
        logger.warning("lookup_cache_unavailable", key=key, error=str(e))
        return None
    return json.loads(cached) if cached else None

async def _cache_set(key: str, value):
    try:
        await redis_client.setex(key, settings.LOOKUP_CACHE_TTL, json.dumps(value))
    except RedisError as e:
        logger.warning("lookup_cache_unavailable", key=key, error=str(e))

@async_retry(attempts=3, backoff_factor=0.2, exceptions=(httpx.RequestError,))
async def _csc_get(path: str):
    async with httpx.AsyncClient(timeout=10.0) as client:
        response = await client.get(
            f"{settings.CSC_API_URL}{path}",
            headers={"X-CSCAPI-KEY": settings.CSC_API_KEY},
        )
        response.raise_for_status()
        return response.json()

async def _cached_lookup(cache_key: str, path: str, error_message: str):
    cached = await _cache_get(cache_key)
    if cached is not None:
        logger.info("lookup_cache_hit", key=cache_key)
        return cached

    try:
        data = await _csc_get(path)
    except httpx.HTTPStatusError as e:
        logger.error("lookup_http_error", path=path, status_code=e.response.status_code)
        raise UpstreamError(error_message)
    except (httpx.RequestError, ValueError) as e:
        logger.error("lookup_request_error", path=path, error=str(e))
        raise UpstreamError(error_message)

    await _cache_set(cache_key, data)
    return data

async def fetch_states():
    return await _cached_lookup("lookup:states", "/states", "Error fetching states")

async def fetch_cities(state_code: str):
    return await _cached_lookup(
        f"lookup:cities:{state_code}",
        f"/states/{state_code}/cities",
        "Error fetching cities",
    )

async def fetch_banners(location: str):
    """Banner image URLs for a location, or the stock images when the banner service fails."""
    try:
        async with httpx.AsyncClient(timeout=5.0) as client:
            response = await client.get(settings.BANNER_API_URL, params={"location": location})
            response.raise_for_status()
            payload = response.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("banner_fallback", location=location, error=str(e))
        return list(FALLBACK_BANNERS)

    if isinstance(payload, dict) and payload.get("success") and payload.get("data"):
        return payload["data"]

    logger.warning("banner_fallback", location=location, response=payload)
    return list(FALLBACK_BANNERS)
