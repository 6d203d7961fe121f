import logging

from fastapi import FastAPI
from redis.exceptions import RedisError

from .config import settings
from .redis_client import redis_client
from .routers import availability

logging.basicConfig(level=settings.log_level)

app = FastAPI(title="Salon Availability API")

app.include_router(availability.router)


@app.get("/health")
def health():
    try:
        redis_ok = redis_client.ping()
    except RedisError:
        redis_ok = False
    return {"redis": redis_ok}
