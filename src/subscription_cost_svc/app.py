import logging
import time
from contextlib import asynccontextmanager
from typing import Any, Callable

from fastapi import FastAPI, Request, Response
from subscription_cost_svc.config import get_settings
from subscription_cost_svc.models.base import init_db
from subscription_cost_svc.routers import subscriptions_router

settings = get_settings()

logging.basicConfig(level=settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.AUTO_CREATE_TABLES:
        init_db()
        logging.info("Database tables ensured.")
    yield


app = FastAPI(debug=settings.DEBUG, lifespan=lifespan)


@app.middleware("http")
async def log_requests(request: Request, call_next: Callable[..., Any]) -> Response:
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logging.info(f"{request.method} {request.url.path} -> {response.status_code} in {elapsed_ms:.1f}ms")
    return response


# Include the subscriptions router under the '/api' prefix
app.include_router(subscriptions_router.router, prefix="/api")
