# backend/salon_availability/redis_client.py

from redis import Redis

from .config import settings

redis_client = Redis.from_url(settings.redis_url, socket_timeout=2.0)


# FastAPI dependency
def get_redis() -> Redis:
    return redis_client
